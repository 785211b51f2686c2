"""HTTP client for the Teldrive files API."""

from datetime import datetime
from typing import Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from common.constants import FOLDER_TYPE, LIST_PAGE_LIMIT
from common.logging_config import get_logger
from teldrive.exceptions import RemoteError
from teldrive.schemas import (
    CopyFileRequest,
    CreateFileRequest,
    FileInfo,
    ListFilesResponse,
    MoveFileRequest,
    RemoveFileRequest,
    UpdateFileRequest,
)

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class MetadataClient:
    """
    Stateless wrapper over the files API.

    Every method issues exactly one request and raises RemoteError on a
    non-success status. Nothing is retried or deduplicated here.
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    def _check(self, response: httpx.Response, operation: str) -> httpx.Response:
        if not response.is_success:
            logger.warning(
                f"{operation} failed: {response.request.method} {response.request.url.path} "
                f"status={response.status_code}"
            )
            raise RemoteError(operation, response.status_code, response.text)
        return response

    def _parse(self, response: httpx.Response, model: type[ModelT], operation: str) -> ModelT:
        """
        Check the status and decode the body into model.

        Raises:
            RemoteError: On a non-success status, or a body that is not the expected JSON
        """
        self._check(response, operation)
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.warning(f"{operation} returned an unexpected body: {e}")
            raise RemoteError(operation, response.status_code, response.text) from e

    async def list_files(self, parent_id: str) -> list[FileInfo]:
        """
        List the children of a folder.

        Only the first page is requested, sorted by id.

        Args:
            parent_id: Folder id

        Returns:
            Up to LIST_PAGE_LIMIT entries
        """
        response = await self.client.get(
            '/api/files',
            params={
                'parentId': parent_id,
                'limit': str(LIST_PAGE_LIMIT),
                'sort': 'id',
                'operation': 'list',
                'page': '1',
            },
        )
        return self._parse(response, ListFilesResponse, 'list').items

    async def find_root(self) -> list[FileInfo]:
        """Look up folders named 'root' that have no parent."""
        response = await self.client.get(
            '/api/files',
            params={
                'parentId': 'nil',
                'operation': 'find',
                'name': 'root',
                'type': FOLDER_TYPE,
            },
        )
        return self._parse(response, ListFilesResponse, 'find root').items

    async def create_folder(self, parent_id: str, name: str) -> FileInfo:
        request = CreateFileRequest(name=name, type=FOLDER_TYPE, parent_id=parent_id)
        return await self._create(request, 'create folder')

    async def create_file(self, request: CreateFileRequest) -> FileInfo:
        return await self._create(request, 'create file')

    async def _create(self, request: CreateFileRequest, operation: str) -> FileInfo:
        response = await self.client.post('/api/files', json=request.to_body())
        return self._parse(response, FileInfo, operation)

    async def rename(self, file_id: str, name: str) -> None:
        response = await self.client.patch(
            f'/api/files/{file_id}',
            json=UpdateFileRequest(name=name).to_body(),
        )
        self._check(response, 'rename')

    async def move(self, file_ids: list[str], destination_id: str) -> None:
        request = MoveFileRequest(destination_parent=destination_id, ids=file_ids)
        response = await self.client.post('/api/files/move', json=request.to_body())
        self._check(response, 'move')

    async def copy(
        self,
        file_id: str,
        new_name: str,
        destination_id: str,
        mod_time: Optional[datetime] = None,
    ) -> FileInfo:
        request = CopyFileRequest(new_name=new_name, destination=destination_id, updated_at=mod_time)
        response = await self.client.post(f'/api/files/{file_id}/copy', json=request.to_body())
        return self._parse(response, FileInfo, 'copy')

    async def delete(self, file_ids: list[str]) -> None:
        response = await self.client.post(
            '/api/files/delete',
            json=RemoveFileRequest(ids=file_ids).to_body(),
        )
        self._check(response, 'delete')

    async def delete_upload(self, session_id: str) -> None:
        """Drop the server-side state of an upload session."""
        response = await self.client.delete(f'/api/uploads/{session_id}')
        self._check(response, 'delete upload')
