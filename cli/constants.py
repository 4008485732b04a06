"""CLI constants and configuration."""

from pathlib import Path

from prompt_toolkit.styles import Style

COMMANDS = [
    "ls", "cat", "put", "get", "rm", "mkdir", "mv", "cp",
    "stat", "checksum", "chmod", "clear", "exit", "help",
]

STYLE = Style.from_dict(
    {
        "prompt": "#2E9E6B bold",
        "command": "#0088ff bold",
    }
)

SEA_GREEN = "\033[38;2;46;158;107m"
GREEN = "\033[32m"
RED = "\033[31m"
RESET = "\033[0m"

LOGO = f"""{SEA_GREEN}
  _  _ ___ ___ ___ ___ _____
 | \\| | __| _ \\ __/ __|_   _|
 | .` | _||   / _|\\__ \\ | |
 |_|\\_|___|_|_\\___|___/ |_|
{RESET}"""

WELCOME_TITLE = "Nerest CLI - Remote Storage over Path Tokens"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "nerest> "

CONFIG_PATH = Path.home() / '.nerest' / 'config.json'

HELP_TEXT = """Available commands:
  ls [-r] [path]                      List a directory (-r walks the whole subtree)
  cat <path>                          Print a remote file
  put <local_path> [remote_path]      Upload a local file (chunked)
  get <remote_path> [local_path]      Download a remote file (defaults to its base name)
  rm <path>                           Delete a file or a directory
  mkdir <path>                        Create a directory (and its parents)
  mv <source> <destination>           Move a file
  cp <source> <destination>           Copy a file
  stat <path>                         Show size, visibility, mime type and modification time
  checksum <path> [algorithm]         Content digest (md5 unless an algorithm is given)
  chmod <path> public|private         Change the visibility of a file
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit REPL

Paths are relative to the configured prefix; leading slashes are ignored.
Examples:
  put notes.txt docs/notes.txt
  ls -r docs
  checksum docs/notes.txt sha256
  chmod docs/notes.txt public
  get docs/notes.txt copy.txt"""
