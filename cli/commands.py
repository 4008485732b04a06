"""Command handler functions for CLI operations."""

import functools
from pathlib import Path, PurePosixPath
from typing import Callable, Optional

from common.exceptions import NerestException
from common.logging_config import get_logger
from client.adapter import RemoteFilesystemAdapter
from client.filesystem import Filesystem
from cli.config import Config
from cli.constants import CONFIG_PATH, GREEN, RESET
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
from cli.utils import ProgressReader, format_file_size, format_listing, format_timestamp

logger = get_logger(__name__)


_filesystem: Optional[Filesystem] = None


def get_filesystem() -> Filesystem:
    """
    Get or create global Filesystem instance.

    Returns:
        Filesystem over a RemoteFilesystemAdapter built from the CLI config
    """
    global _filesystem
    if _filesystem is None:
        logger.debug("Creating new Filesystem instance")
        config = Config(CONFIG_PATH)
        adapter = RemoteFilesystemAdapter(
            base_url=config.get_base_url(),
            secret=config.get_secret() or "",
            prefix=config.get_prefix(),
            chunk_size=config.get_chunk_size(),
            timeout=config.get_timeout(),
        )
        _filesystem = Filesystem(adapter)
    return _filesystem


def _reports_errors(handler: Callable[..., str]) -> Callable[..., str]:
    """Turn storage and local I/O failures into printable error lines."""

    @functools.wraps(handler)
    def wrapper(cmd, filesystem: Optional[Filesystem] = None) -> str:
        if filesystem is None:
            filesystem = get_filesystem()
        try:
            return handler(cmd, filesystem)
        except NerestException as e:
            logger.debug(f"{cmd.command} failed: {type(e).__name__}: {e}")
            return f"Error: {e}"
        except OSError as e:
            logger.debug(f"{cmd.command} failed locally: {e}")
            return f"Error: {e.strerror or e}"

    return wrapper


@_reports_errors
def handle_list(cmd: ListCommand, filesystem: Filesystem) -> str:
    """
    Handle 'ls' command.

    Args:
        cmd: ListCommand with path and recursive flag
        filesystem: Filesystem to run against (injected in tests)

    Returns:
        One line per entry, or a notice for an empty directory
    """
    logger.info(f"Executing ls command: path='{cmd.path}' recursive={cmd.recursive}")
    listing = filesystem.list_contents(cmd.path, deep=cmd.recursive).sort_by_path().to_list()
    if not listing:
        return f"No entries found in: /{cmd.path.strip('/')}"
    return format_listing(listing)


@_reports_errors
def handle_cat(cmd: CatCommand, filesystem: Filesystem) -> str:
    contents = filesystem.read(cmd.path)
    return contents.decode("utf-8", errors="replace")


@_reports_errors
def handle_put(cmd: PutCommand, filesystem: Filesystem) -> str:
    """
    Handle 'put' command: upload a local file in chunks.

    Returns:
        Success message with the uploaded size, or an error message
    """
    local_path = Path(cmd.local_path).expanduser()
    if not local_path.is_file():
        return f"Error: File not found: {cmd.local_path}"

    remote_path = cmd.remote_path or local_path.name
    file_size = local_path.stat().st_size
    logger.info(f"Executing put command: {local_path} -> {remote_path} ({file_size} bytes)")

    with open(local_path, 'rb') as f:
        filesystem.write_stream(remote_path, ProgressReader(f, file_size, local_path.name))

    return f"{GREEN}✓{RESET} Uploaded {local_path.name} ({format_file_size(file_size)}) to {remote_path}"


@_reports_errors
def handle_get(cmd: GetCommand, filesystem: Filesystem) -> str:
    """
    Handle 'get' command: stream a remote file into a local file.

    Returns:
        Success message with the downloaded size, or an error message
    """
    local_path = Path(cmd.local_path or PurePosixPath(cmd.remote_path).name).expanduser()
    logger.info(f"Executing get command: {cmd.remote_path} -> {local_path}")

    written = 0
    with filesystem.read_stream(cmd.remote_path) as stream:
        local_path.parent.mkdir(parents=True, exist_ok=True)
        with open(local_path, 'wb') as f:
            for piece in stream:
                f.write(piece)
                written += len(piece)

    return f"{GREEN}✓{RESET} Downloaded {cmd.remote_path} ({format_file_size(written)}) to {local_path}"


@_reports_errors
def handle_remove(cmd: RemoveCommand, filesystem: Filesystem) -> str:
    if filesystem.directory_exists(cmd.path):
        filesystem.delete_directory(cmd.path)
        return f"Deleted directory: {cmd.path}"
    filesystem.delete(cmd.path)
    return f"Deleted: {cmd.path}"


@_reports_errors
def handle_mkdir(cmd: MakeDirectoryCommand, filesystem: Filesystem) -> str:
    filesystem.create_directory(cmd.path)
    return f"Created directory: {cmd.path}"


@_reports_errors
def handle_move(cmd: MoveCommand, filesystem: Filesystem) -> str:
    filesystem.move(cmd.source, cmd.destination)
    return f"Moved {cmd.source} -> {cmd.destination}"


@_reports_errors
def handle_copy(cmd: CopyCommand, filesystem: Filesystem) -> str:
    filesystem.copy(cmd.source, cmd.destination)
    return f"Copied {cmd.source} -> {cmd.destination}"


@_reports_errors
def handle_stat(cmd: StatCommand, filesystem: Filesystem) -> str:
    """
    Handle 'stat' command.

    Returns:
        Attribute table for a file or a directory
    """
    attributes = filesystem.metadata(cmd.path)
    lines = [
        f"Path:          {attributes.path}",
        f"Type:          {attributes.type}",
        f"Visibility:    {attributes.visibility or '-'}",
        f"Last modified: {format_timestamp(attributes.last_modified)}",
    ]
    if attributes.is_file():
        lines.insert(2, f"Size:          {format_file_size(attributes.file_size)} ({attributes.file_size} bytes)")
        lines.append(f"Mime type:     {attributes.mime_type or '-'}")
    return "\n".join(lines)


@_reports_errors
def handle_checksum(cmd: ChecksumCommand, filesystem: Filesystem) -> str:
    config = {"checksum_algo": cmd.algorithm} if cmd.algorithm else None
    digest = filesystem.checksum(cmd.path, config)
    return f"{digest}  {cmd.path}"


@_reports_errors
def handle_chmod(cmd: ChmodCommand, filesystem: Filesystem) -> str:
    filesystem.set_visibility(cmd.path, cmd.visibility)
    return f"Visibility of {cmd.path} set to {cmd.visibility}"
