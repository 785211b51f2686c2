"""Utility functions for CLI operations."""

import sys
from datetime import datetime

from cli.constants import GREEN, RESET
from common.types import RemoteObject


class UploadProgress:
    """Progress callback that renders upload percentage on one stdout line."""

    def __init__(self, filename: str, file_size: int):
        """
        Initialize the progress display.

        Args:
            filename: Display name for the file
            file_size: Total size of the file in bytes
        """
        self.filename = filename
        self.file_size = file_size
        self.last_percentage = 0.0

    def __call__(self, percentage: float) -> None:
        """Display current upload progress to stdout."""
        self.last_percentage = percentage
        uploaded = int(self.file_size * percentage / 100)
        sys.stdout.write(
            f"\rUploading {self.filename}: {format_file_size(uploaded)} / "
            f"{format_file_size(self.file_size)} ({GREEN}{percentage:.1f}%{RESET})"
        )
        sys.stdout.flush()
        if percentage >= 100:
            self.finish()

    def finish(self) -> None:
        """Finalize progress display with newline."""
        sys.stdout.write('\n')
        sys.stdout.flush()


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


def format_entry(obj: RemoteObject) -> str:
    """Format one listing line: kind marker, size, modification date and name."""
    marker = "d" if obj.is_dir else "-"
    size = "" if obj.is_dir else format_file_size(obj.size)
    modified = obj.modified.strftime('%Y-%m-%d %H:%M') if isinstance(obj.modified, datetime) else ""
    name = f"{obj.name}/" if obj.is_dir else obj.name
    return f"  {marker} {size:>11}  {modified}  {name}"
