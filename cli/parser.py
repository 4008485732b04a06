"""Command parser for CLI input."""

import shlex

from common.constants import VISIBILITIES
from cli.models import (
    CatCommand,
    ChecksumCommand,
    ChmodCommand,
    CommandRequest,
    CopyCommand,
    GetCommand,
    ListCommand,
    MakeDirectoryCommand,
    MoveCommand,
    PutCommand,
    RemoveCommand,
    StatCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object (one of the dataclasses in cli.models)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]
    parser = _PARSERS.get(command_name)
    if parser is None:
        raise ParseError(f"Unknown command: {command_name}")
    return parser(tokens[1:])


def _parse_list(args: list[str]) -> ListCommand:
    """Parse 'ls [-r] [path]' command."""
    recursive = False
    paths = []
    for arg in args:
        if arg in ("-r", "--recursive"):
            recursive = True
        elif arg.startswith("-"):
            raise ParseError(f"ls: unknown option {arg}")
        else:
            paths.append(arg)

    if len(paths) > 1:
        raise ParseError("ls accepts at most one path")

    return ListCommand(path=paths[0] if paths else "", recursive=recursive)


def _single_path(name: str, args: list[str]) -> str:
    if len(args) != 1:
        raise ParseError(f"{name} requires exactly 1 argument: <path>")
    return args[0]


def _source_and_destination(name: str, args: list[str]) -> tuple[str, str]:
    if len(args) != 2:
        raise ParseError(f"{name} requires exactly 2 arguments: <source> <destination>")
    return args[0], args[1]


def _parse_cat(args: list[str]) -> CatCommand:
    return CatCommand(path=_single_path("cat", args))


def _parse_put(args: list[str]) -> PutCommand:
    """Parse 'put <local_path> [remote_path]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("put requires 1 or 2 arguments: <local_path> [remote_path]")
    return PutCommand(local_path=args[0], remote_path=args[1] if len(args) > 1 else None)


def _parse_get(args: list[str]) -> GetCommand:
    """Parse 'get <remote_path> [local_path]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("get requires 1 or 2 arguments: <remote_path> [local_path]")
    return GetCommand(remote_path=args[0], local_path=args[1] if len(args) > 1 else None)


def _parse_remove(args: list[str]) -> RemoveCommand:
    return RemoveCommand(path=_single_path("rm", args))


def _parse_mkdir(args: list[str]) -> MakeDirectoryCommand:
    return MakeDirectoryCommand(path=_single_path("mkdir", args))


def _parse_move(args: list[str]) -> MoveCommand:
    source, destination = _source_and_destination("mv", args)
    return MoveCommand(source=source, destination=destination)


def _parse_copy(args: list[str]) -> CopyCommand:
    source, destination = _source_and_destination("cp", args)
    return CopyCommand(source=source, destination=destination)


def _parse_stat(args: list[str]) -> StatCommand:
    return StatCommand(path=_single_path("stat", args))


def _parse_checksum(args: list[str]) -> ChecksumCommand:
    """Parse 'checksum <path> [algorithm]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("checksum requires 1 or 2 arguments: <path> [algorithm]")
    return ChecksumCommand(path=args[0], algorithm=args[1].lower() if len(args) > 1 else None)


def _parse_chmod(args: list[str]) -> ChmodCommand:
    """Parse 'chmod <path> public|private' command."""
    if len(args) != 2:
        raise ParseError("chmod requires exactly 2 arguments: <path> public|private")

    path, visibility = args
    visibility = visibility.lower()
    if visibility not in VISIBILITIES:
        raise ParseError(f"chmod visibility must be one of: {', '.join(VISIBILITIES)}")
    return ChmodCommand(path=path, visibility=visibility)


_PARSERS = {
    "ls": _parse_list,
    "cat": _parse_cat,
    "put": _parse_put,
    "get": _parse_get,
    "rm": _parse_remove,
    "mkdir": _parse_mkdir,
    "mv": _parse_move,
    "cp": _parse_copy,
    "stat": _parse_stat,
    "checksum": _parse_checksum,
    "chmod": _parse_chmod,
}
