"""Chunk transfer: reads planned chunks from a stream and uploads each one."""

import asyncio
import inspect
from typing import Callable, Optional

import httpx
from pydantic import ValidationError

from common.constants import OCTET_STREAM
from common.logging_config import get_logger
from common.types import ChunkDescriptor, PartDescriptor, UploadSession
from teldrive.exceptions import ChunkUploadError, StreamError
from teldrive.schemas import PartFile

logger = get_logger(__name__)

ProgressCallback = Callable[[float], None]


class ChunkTransferEngine:
    """
    Uploads the chunks of an UploadSession to the part-upload endpoint.

    Chunks are always read from the stream in sequence order on the calling
    task. Up to `concurrency` uploads may be in flight at once; with
    concurrency=1 each chunk is uploaded before the next one is read.
    """

    def __init__(self, client: httpx.AsyncClient, upload_host: str = "", concurrency: int = 1):
        """
        Initialize the engine.

        Args:
            client: Shared HTTP client
            upload_host: Optional separate host for chunk uploads
            concurrency: Maximum number of chunk uploads in flight
        """
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.client = client
        self.upload_host = upload_host.rstrip('/')
        self.concurrency = concurrency

    def upload_url(self, session_id: str) -> str:
        return f"{self.upload_host}/api/uploads/{session_id}"

    async def transfer(
        self,
        session: UploadSession,
        stream,
        progress: Optional[ProgressCallback] = None,
    ) -> list[PartDescriptor]:
        """
        Upload every planned chunk.

        Args:
            session: Planned upload
            stream: Forward-only source with read(n)
            progress: Called once per uploaded chunk with the percentage done

        Returns:
            Part descriptors in ascending sequence order

        Raises:
            StreamError: If the stream ends before a chunk is filled
            ChunkUploadError: If the server rejects a chunk
        """
        if session.total_chunks == 0:
            return []

        semaphore = asyncio.Semaphore(self.concurrency)
        parts: dict[int, PartDescriptor] = {}
        tasks: dict[asyncio.Task, ChunkDescriptor] = {}
        uploaded = 0

        async def send(chunk: ChunkDescriptor, data: bytes) -> None:
            nonlocal uploaded
            try:
                part = await self._upload_chunk(session, chunk, data)
            finally:
                semaphore.release()
            parts[chunk.sequence_number] = part
            uploaded += chunk.byte_length
            logger.debug(
                f"Uploaded chunk {chunk.sequence_number}/{session.total_chunks} "
                f"[upload_id={session.id} part_id={part.part_id}]"
            )
            if progress is not None:
                progress(uploaded / session.size * 100)

        logger.info(
            f"Uploading {session.file_name}: {session.total_chunks} chunk(s), "
            f"concurrency={self.concurrency} [upload_id={session.id}]"
        )

        try:
            for chunk in session.chunks:
                await semaphore.acquire()
                self._raise_first_failure(tasks)
                data = await self._read_chunk(stream, chunk)
                tasks[asyncio.create_task(send(chunk, data))] = chunk

            await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
            self._raise_first_failure(tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        return [parts[chunk.sequence_number] for chunk in session.chunks]

    @staticmethod
    def _raise_first_failure(tasks: dict[asyncio.Task, ChunkDescriptor]) -> None:
        """Raise the error of the lowest-numbered failed chunk, if any."""
        failed = [
            (chunk.sequence_number, task.exception())
            for task, chunk in tasks.items()
            if task.done() and not task.cancelled() and task.exception() is not None
        ]
        if failed:
            raise min(failed, key=lambda item: item[0])[1]

    async def _read_chunk(self, stream, chunk: ChunkDescriptor) -> bytes:
        buffer = bytearray()
        while len(buffer) < chunk.byte_length:
            data = stream.read(chunk.byte_length - len(buffer))
            if inspect.isawaitable(data):
                data = await data
            if not data:
                break
            buffer += data

        if len(buffer) < chunk.byte_length:
            raise StreamError(
                f"stream ended early: chunk {chunk.sequence_number} needs "
                f"{chunk.byte_length} bytes, got {len(buffer)}"
            )
        return bytes(buffer)

    async def _upload_chunk(
        self,
        session: UploadSession,
        chunk: ChunkDescriptor,
        data: bytes,
    ) -> PartDescriptor:
        response = await self.client.post(
            self.upload_url(session.id),
            params={
                'partName': chunk.name,
                'fileName': session.file_name,
                'partNo': str(chunk.sequence_number),
                'channelId': str(session.channel_id),
                'encrypted': 'true' if session.encrypted else 'false',
            },
            content=data,
            headers={'Content-Type': OCTET_STREAM},
        )

        if not response.is_success:
            logger.error(
                f"Chunk {chunk.sequence_number} rejected: status={response.status_code} [upload_id={session.id}]"
            )
            raise ChunkUploadError(chunk.sequence_number, response.status_code, response.text)

        try:
            part = PartFile.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ChunkUploadError(
                chunk.sequence_number, response.status_code, f"invalid part response: {e}"
            ) from e

        return PartDescriptor(
            part_id=part.part_id,
            sequence_number=chunk.sequence_number,
            salt=part.salt or None,
        )
