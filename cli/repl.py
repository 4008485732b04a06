"""REPL with prompt_toolkit for user interaction."""

import os
import sys
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory

from cli.commands import (
    handle_cat,
    handle_checksum,
    handle_chmod,
    handle_copy,
    handle_get,
    handle_list,
    handle_mkdir,
    handle_move,
    handle_put,
    handle_remove,
    handle_stat,
)
from cli.constants import (
    COMMANDS,
    HELP_TEXT,
    LOGO,
    PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from cli.models import (
    CatCommand,
    ChecksumCommand,
    ChmodCommand,
    CopyCommand,
    GetCommand,
    ListCommand,
    MakeDirectoryCommand,
    MoveCommand,
    PutCommand,
    RemoveCommand,
    StatCommand,
)
from cli.parser import ParseError, parse_command

HANDLERS = {
    ListCommand: handle_list,
    CatCommand: handle_cat,
    PutCommand: handle_put,
    GetCommand: handle_get,
    RemoveCommand: handle_remove,
    MakeDirectoryCommand: handle_mkdir,
    MoveCommand: handle_move,
    CopyCommand: handle_copy,
    StatCommand: handle_stat,
    ChecksumCommand: handle_checksum,
    ChmodCommand: handle_chmod,
}


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_welcome() -> None:
    print(LOGO)
    print(WELCOME_TITLE)
    print(WELCOME_HELP)


def dispatch_command(cmd_obj, filesystem=None) -> str:
    """Dispatch parsed command to appropriate handler."""
    handler = HANDLERS.get(type(cmd_obj))
    if handler is None:
        return f"Unknown command type: {type(cmd_obj)}"
    return handler(cmd_obj, filesystem)


def repl_loop() -> None:
    """Start interactive REPL with prompt_toolkit."""
    completer = WordCompleter(COMMANDS, ignore_case=True)
    history = InMemoryHistory()
    session: PromptSession = PromptSession(
        completer=completer, history=history, style=STYLE
    )

    clear_screen()
    show_welcome()

    while True:
        try:
            user_input = session.prompt([("class:prompt", PROMPT_TEXT)])

            if not user_input.strip():
                continue

            if user_input.strip() == "exit":
                print("Goodbye!")
                break

            if user_input.strip() == "help":
                print(HELP_TEXT)
                continue

            if user_input.strip() == "clear":
                clear_screen()
                show_welcome()
                continue

            cmd_obj = parse_command(user_input)
            result = dispatch_command(cmd_obj)
            print(result)

        except ParseError as e:
            print(f"Error: {e}")
        except KeyboardInterrupt:
            continue
        except EOFError:
            print("\nGoodbye!")
            break
