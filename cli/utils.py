"""Utility functions for CLI operations."""

import sys
from datetime import datetime, timezone
from typing import BinaryIO, Iterable, Optional

from common.attributes import StorageAttributes
from cli.constants import GREEN, RESET


class ProgressReader:
    """Binary reader that reports transfer progress to stdout as it is consumed."""

    def __init__(self, source: BinaryIO, total_size: int, label: str, out=None):
        """
        Initialize the progress reader.

        Args:
            source: Open binary file object to read from
            total_size: Total number of bytes expected
            label: Display name for the transfer
            out: Output stream (defaults to sys.stdout)
        """
        self.source = source
        self.total_size = total_size
        self.label = label
        self.out = out or sys.stdout
        self.transferred = 0
        self._finished = False

    def read(self, size: int = -1) -> bytes:
        chunk = self.source.read(size)
        if chunk:
            self.transferred += len(chunk)
            self._display_progress()
        elif not self._finished:
            self._finish_progress()
        return chunk

    def _display_progress(self) -> None:
        progress = (self.transferred / self.total_size) * 100 if self.total_size else 100.0
        self.out.write(
            f"\rUploading {self.label}: {format_file_size(self.transferred)} / "
            f"{format_file_size(self.total_size)} ({GREEN}{progress:.1f}%{RESET})"
        )
        self.out.flush()

    def _finish_progress(self) -> None:
        self._finished = True
        if self.transferred:
            self.out.write('\n')
            self.out.flush()


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.

    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0

    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0

    return f"{size:.2f} PiB"


def format_timestamp(timestamp: Optional[int]) -> str:
    """Render a Unix timestamp as UTC, or '-' when unknown."""
    if timestamp is None:
        return "-"
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def format_listing(entries: Iterable[StorageAttributes]) -> str:
    """
    Render listing entries one per line: kind, visibility, size and path.

    Directories are shown with a trailing slash.
    """
    lines = []
    for entry in entries:
        visibility = entry.visibility or "-"
        if entry.is_dir():
            lines.append(f"d  {visibility:<8} {'-':>10}  {entry.path}/")
        else:
            lines.append(f"f  {visibility:<8} {format_file_size(entry.file_size):>10}  {entry.path}")
    return "\n".join(lines)
