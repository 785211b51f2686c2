"""Upload planning: session id derivation and chunk boundaries."""

import hashlib

from common.constants import MIB
from common.types import ChunkDescriptor, UploadSession


def upload_session_id(destination_id: str, file_name: str, size: int, user_id: int) -> str:
    """
    Derive the deterministic id of an upload.

    Retrying the same (destination, name, size, user) yields the same id,
    so the server sees one upload session. Content is not hashed: two
    different files with the same name and size in the same folder share
    an id.
    """
    key = f"{destination_id}:{file_name}:{size}:{user_id}"
    return hashlib.md5(key.encode('utf-8')).hexdigest()


def chunk_name(file_name: str, sequence_number: int, total_chunks: int) -> str:
    if total_chunks > 1:
        return f"{file_name}.part.{sequence_number:03d}"
    return file_name


def plan_chunks(file_name: str, size: int, chunk_size_bytes: int) -> tuple[ChunkDescriptor, ...]:
    """
    Split size bytes into chunks of chunk_size_bytes; the last takes the remainder.

    Args:
        file_name: Name used to derive part names
        size: Total stream size in bytes
        chunk_size_bytes: Size of every chunk but the last

    Returns:
        Chunk descriptors numbered from 1; empty when size is 0
    """
    if chunk_size_bytes < 1:
        raise ValueError("chunk size must be positive")
    if size < 0:
        raise ValueError("cannot plan an upload of unknown size")

    total_chunks = -(-size // chunk_size_bytes)
    chunks = []
    for index in range(total_chunks):
        offset = index * chunk_size_bytes
        chunks.append(ChunkDescriptor(
            sequence_number=index + 1,
            offset=offset,
            byte_length=min(chunk_size_bytes, size - offset),
            name=chunk_name(file_name, index + 1, total_chunks),
        ))
    return tuple(chunks)


def plan_upload(
    destination_id: str,
    file_name: str,
    size: int,
    chunk_size_mib: int,
    channel_id: int,
    encrypt: bool,
    user_id: int,
) -> UploadSession:
    """
    Plan one upload. Pure computation, no network access.

    Chunk size bounds are enforced by Config.validate(), not here.

    Args:
        destination_id: Id of the target folder
        file_name: Name of the file to create
        size: Declared stream size in bytes
        chunk_size_mib: Configured chunk size in MiB
        channel_id: Storage channel passed through to the server
        encrypt: Server-side encryption flag passed through to the server
        user_id: Id of the authenticated user

    Returns:
        UploadSession with fixed chunk boundaries
    """
    chunk_size_bytes = chunk_size_mib * MIB
    chunks = plan_chunks(file_name, size, chunk_size_bytes)
    return UploadSession(
        id=upload_session_id(destination_id, file_name, size, user_id),
        destination_id=destination_id,
        file_name=file_name,
        size=size,
        chunk_size_bytes=chunk_size_bytes,
        total_chunks=len(chunks),
        chunks=chunks,
        channel_id=channel_id,
        encrypted=encrypt,
    )
