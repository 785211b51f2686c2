"""Size-known, forward-only byte sources for uploads."""

import os
from pathlib import Path
from typing import Any, BinaryIO


class FileStream:
    """
    A named byte stream whose total size is declared up front.

    The underlying reader only needs a read(n) method; it may return bytes
    or an awaitable of bytes. No seeking is ever done.
    """

    def __init__(self, name: str, size: int, reader: Any):
        """
        Initialize the stream.

        Args:
            name: File name to create on the remote drive
            size: Declared total size in bytes (negative means unknown)
            reader: Object with read(n)
        """
        self.name = name
        self.size = size
        self._reader = reader
        self._owned = False

    @classmethod
    def from_path(cls, path: str | os.PathLike, name: str | None = None) -> 'FileStream':
        """
        Open a local file for upload.

        Args:
            path: Local file path
            name: Remote name (defaults to the file's base name)

        Returns:
            FileStream that closes the file on close()
        """
        file_path = Path(path)
        handle: BinaryIO = open(file_path, 'rb')
        stream = cls(name or file_path.name, os.fstat(handle.fileno()).st_size, handle)
        stream._owned = True
        return stream

    def read(self, size: int):
        return self._reader.read(size)

    def close(self) -> None:
        """Close the underlying file if this stream opened it."""
        if self._owned:
            self._reader.close()

    def __enter__(self) -> 'FileStream':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
