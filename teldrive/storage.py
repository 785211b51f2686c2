"""Storage façade exposing a Teldrive server as list/put/move/copy/rename/remove."""

import dataclasses
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import quote_plus

import httpx

from common.logging_config import get_logger
from common.types import File, Folder, RemoteObject, UploadState
from teldrive.config import Config
from teldrive.exceptions import StreamError, TeldriveError
from teldrive.metadata_client import MetadataClient
from teldrive.session import SessionInfo, bootstrap_session
from teldrive.transport import build_client
from teldrive.upload import ChunkTransferEngine, CommitCoordinator, ProgressCallback, plan_upload

logger = get_logger(__name__)


def _object_id(obj: RemoteObject | str) -> str:
    return obj if isinstance(obj, str) else obj.id


class TeldriveStorage:
    """
    One configured connection to a Teldrive server.

    Call init() (or use `async with`) before any other operation. All
    operations share one HTTP client and hold no other mutable state, so
    concurrent calls on the same instance are safe.
    """

    def __init__(self, config: Config, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Create an uninitialized storage.

        Args:
            config: Driver configuration (validated in init())
            transport: Optional inner HTTP transport, mainly for tests
        """
        self.config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._session: Optional[SessionInfo] = None
        self._metadata: Optional[MetadataClient] = None
        self._commit: Optional[CommitCoordinator] = None

    async def init(self) -> None:
        """
        Validate config, open the HTTP client and bootstrap the session.

        Raises:
            ConfigError: If the configuration is invalid
            AuthError: If the cookie or the remote session is invalid
            NotFoundError: If the root folder cannot be resolved
        """
        self.config.validate()
        client = build_client(self.config, self._transport)
        try:
            self._session = await bootstrap_session(client)
        except BaseException:
            await client.aclose()
            raise
        self._client = client
        self._metadata = MetadataClient(client)
        self._commit = CommitCoordinator(self._metadata)

    async def drop(self) -> None:
        """
        Wait for pending upload cleanups, then close the HTTP client.

        The instance must be re-initialized to be used again.
        """
        if self._commit is not None:
            await self._commit.drain()
        if self._client is not None:
            await self._client.aclose()
        self._client = None
        self._metadata = None
        self._commit = None
        self._session = None

    async def __aenter__(self) -> 'TeldriveStorage':
        await self.init()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.drop()

    def _require_session(self) -> tuple[SessionInfo, MetadataClient]:
        if self._session is None or self._metadata is None:
            raise TeldriveError("storage is not initialized; call init() first")
        return self._session, self._metadata

    @property
    def session(self) -> SessionInfo:
        return self._require_session()[0]

    @property
    def root(self) -> Folder:
        session = self.session
        return Folder(id=session.root_id, name="", size=0, modified=datetime.fromtimestamp(0, tz=timezone.utc))

    async def list(self, directory: Folder | str) -> list[RemoteObject]:
        _, metadata = self._require_session()
        files = await metadata.list_files(_object_id(directory))
        return [info.to_object() for info in files]

    def get_link(self, obj: File) -> str:
        """
        Build the download URL of a file. No request is made.

        Encrypted drives are served inline, so `download=1` is only added
        when encryption is off.
        """
        url = f"{self.config.get_base_url()}/api/files/{obj.id}/{quote_plus(obj.name)}"
        if not self.config.get_encrypt_files():
            url += "?download=1"
        return url

    async def make_dir(self, parent: Folder | str, name: str) -> Folder:
        _, metadata = self._require_session()
        info = await metadata.create_folder(_object_id(parent), name)
        logger.info(f"Created folder {name} [id={info.id}]")
        folder = info.to_object()
        if not isinstance(folder, Folder):
            raise TeldriveError(f"server returned a file for folder {name}")
        return folder

    async def move(self, obj: RemoteObject, destination: Folder | str) -> RemoteObject:
        _, metadata = self._require_session()
        await metadata.move([obj.id], _object_id(destination))
        return obj

    async def rename(self, obj: RemoteObject, new_name: str) -> RemoteObject:
        _, metadata = self._require_session()
        await metadata.rename(obj.id, new_name)
        return dataclasses.replace(obj, name=new_name)

    async def copy(self, obj: RemoteObject, destination: Folder | str) -> RemoteObject:
        _, metadata = self._require_session()
        info = await metadata.copy(obj.id, obj.name, _object_id(destination), obj.modified)
        return info.to_object()

    async def remove(self, obj: RemoteObject) -> None:
        _, metadata = self._require_session()
        await metadata.delete([obj.id])

    async def put(
        self,
        destination: Folder | str,
        stream,
        progress: Optional[ProgressCallback] = None,
        mod_time: Optional[datetime] = None,
    ) -> File:
        """
        Upload a size-known stream as a new file.

        The file becomes visible only after every chunk is uploaded; a failed
        or cancelled put never commits.

        Args:
            destination: Target folder
            stream: Object with name, size and read(n)
            progress: Called once per chunk with the percentage uploaded
            mod_time: Modification time to record (defaults to now)

        Returns:
            The committed file

        Raises:
            StreamError: If the size is unknown or the stream is short
            ChunkUploadError: If a chunk is rejected
            CommitError: If the final file cannot be created
        """
        session_info, metadata = self._require_session()
        if stream.size < 0:
            raise StreamError(f"cannot upload {stream.name}: size is unknown")

        session = plan_upload(
            destination_id=_object_id(destination),
            file_name=stream.name,
            size=stream.size,
            chunk_size_mib=self.config.get_chunk_size_mib(),
            channel_id=self.config.get_channel_id(),
            encrypt=self.config.get_encrypt_files(),
            user_id=session_info.user_id,
        )
        self._log_state(session.id, UploadState.PLANNED, f"{session.total_chunks} chunk(s)")

        try:
            parts = []
            if session.total_chunks > 0:
                self._log_state(session.id, UploadState.TRANSFERRING)
                engine = ChunkTransferEngine(
                    self._client,
                    upload_host=self.config.get_upload_host(),
                    concurrency=self.config.get_upload_concurrency(),
                )
                parts = await engine.transfer(session, stream, progress)

            self._log_state(session.id, UploadState.COMMITTING)
            committed = await self._commit.commit(session, parts, mod_time)
        except BaseException as e:
            self._log_state(session.id, UploadState.FAILED, f"{type(e).__name__}: {e}")
            raise

        self._log_state(session.id, UploadState.COMMITTED, f"file_id={committed.id}")
        return committed

    @staticmethod
    def _log_state(upload_id: str, state: UploadState, detail: str = "") -> None:
        suffix = f": {detail}" if detail else ""
        logger.info(f"Upload {state.value}{suffix} [upload_id={upload_id}]")
