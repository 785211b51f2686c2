"""Commit: turns a complete, ordered part list into a visible file."""

import asyncio
import mimetypes
from datetime import datetime, timezone
from typing import Optional

from common.constants import FILE_TYPE, OCTET_STREAM
from common.logging_config import get_logger
from common.types import File, PartDescriptor, UploadSession
from teldrive.exceptions import CommitError, RemoteError
from teldrive.metadata_client import MetadataClient
from teldrive.schemas import CreateFileRequest, FilePart

logger = get_logger(__name__)


def guess_mime_type(file_name: str) -> str:
    mime_type, _ = mimetypes.guess_type(file_name)
    return mime_type or OCTET_STREAM


def check_parts(session: UploadSession, parts: list[PartDescriptor]) -> None:
    """
    Ensure parts cover every planned chunk exactly once, in order.

    Raises:
        CommitError: If the list is short, long, or out of order
    """
    if len(parts) != session.total_chunks:
        raise CommitError(
            f"refusing to commit {session.file_name}: {len(parts)} part(s) for {session.total_chunks} chunk(s)"
        )
    for expected, part in enumerate(parts, start=1):
        if part.sequence_number != expected:
            raise CommitError(
                f"refusing to commit {session.file_name}: part {part.sequence_number} at position {expected}"
            )


class CommitCoordinator:
    """
    Creates the final file and cleans up the upload session.

    Cleanup runs as a background task once the file exists, so neither a
    slow DELETE nor a cancellation of the caller can fail a committed
    upload. Call drain() before closing the HTTP client.
    """

    def __init__(self, metadata: MetadataClient):
        self.metadata = metadata
        self._cleanup_tasks: set[asyncio.Task] = set()

    @property
    def pending_cleanups(self) -> int:
        return len(self._cleanup_tasks)

    async def commit(
        self,
        session: UploadSession,
        parts: list[PartDescriptor],
        mod_time: Optional[datetime] = None,
    ) -> File:
        """
        Commit an uploaded file.

        Args:
            session: The planned upload
            parts: One descriptor per chunk, ascending by sequence number
            mod_time: Modification time to record (defaults to now, UTC)

        Returns:
            The created file

        Raises:
            CommitError: If the part list is incomplete or the server rejects the request
        """
        check_parts(session, parts)

        request = CreateFileRequest(
            name=session.file_name,
            type=FILE_TYPE,
            parent_id=session.destination_id,
            mime_type=guess_mime_type(session.file_name),
            size=session.size,
            parts=[FilePart(id=part.part_id, salt=part.salt) for part in parts],
            channel_id=session.channel_id,
            encrypted=session.encrypted,
            updated_at=mod_time or datetime.now(timezone.utc),
        )

        try:
            info = await self.metadata.create_file(request)
        except RemoteError as e:
            raise CommitError(
                f"failed to create file {session.file_name} (status {e.status}): {e.body}",
                status=e.status,
                body=e.body,
            ) from e

        committed = info.to_object()
        if not isinstance(committed, File):
            raise CommitError(f"server returned a folder for {session.file_name}")

        if session.total_chunks > 0:
            self._schedule_cleanup(session)
        return committed

    def _schedule_cleanup(self, session: UploadSession) -> None:
        task = asyncio.create_task(self._cleanup(session))
        self._cleanup_tasks.add(task)
        task.add_done_callback(self._cleanup_tasks.discard)

    async def drain(self) -> None:
        """Wait for every scheduled cleanup to finish."""
        while self._cleanup_tasks:
            await asyncio.gather(*self._cleanup_tasks, return_exceptions=True)

    async def _cleanup(self, session: UploadSession) -> None:
        """Best-effort removal of the upload session; never raises."""
        try:
            await self.metadata.delete_upload(session.id)
        except Exception as e:
            logger.warning(f"Upload cleanup failed for {session.file_name} [upload_id={session.id}]: {e}")
        else:
            logger.debug(f"Upload session removed [upload_id={session.id}]")
