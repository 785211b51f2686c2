"""Shared data type definitions (Folder, File, ChunkDescriptor, UploadSession, etc.)."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Literal, Optional


@dataclass(frozen=True)
class Folder:
    """
    A directory on the remote drive.
    """
    id: str
    name: str
    size: int
    modified: datetime
    kind: Literal["folder"] = "folder"

    @property
    def is_dir(self) -> bool:
        return True


@dataclass(frozen=True)
class File:
    """
    A committed file on the remote drive.
    """
    id: str
    name: str
    size: int
    modified: datetime
    mime_type: str = ""
    kind: Literal["file"] = "file"

    @property
    def is_dir(self) -> bool:
        return False


RemoteObject = Folder | File


@dataclass(frozen=True)
class ChunkDescriptor:
    """
    One planned chunk of an upload. Sequence numbers start at 1.
    """
    sequence_number: int
    offset: int
    byte_length: int
    name: str


@dataclass(frozen=True)
class PartDescriptor:
    """
    The server's acknowledgment of one uploaded chunk.
    """
    part_id: int
    sequence_number: int
    salt: Optional[str] = None


@dataclass(frozen=True)
class UploadSession:
    """
    A single upload attempt, fixed at planning time.
    """
    id: str
    destination_id: str
    file_name: str
    size: int
    chunk_size_bytes: int
    total_chunks: int
    chunks: tuple[ChunkDescriptor, ...]
    channel_id: int = 0
    encrypted: bool = False


class UploadState(str, Enum):
    """Lifecycle of one put call."""

    PLANNED = "planned"
    TRANSFERRING = "transferring"
    COMMITTING = "committing"
    COMMITTED = "committed"
    FAILED = "failed"
