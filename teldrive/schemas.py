"""Pydantic schemas for the Teldrive HTTP API."""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from common.constants import FOLDER_TYPE
from common.types import File, Folder, RemoteObject


class ApiModel(BaseModel):
    """Base model for camelCase wire payloads."""
    model_config = ConfigDict(populate_by_name=True)

    def to_body(self) -> dict:
        """Serialize for a JSON request body, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SessionResponse(ApiModel):
    """Response model for the session lookup."""
    user_name: str = Field("", alias="userName")
    user_id: Optional[int] = Field(None, alias="userId")
    hash: str = ""


class FileInfo(ApiModel):
    """A file or folder entry as returned by the files API."""
    id: str
    name: str
    type: str
    mime_type: Optional[str] = Field(None, alias="mimeType")
    size: Optional[int] = None
    parent_id: Optional[str] = Field(None, alias="parentId")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    def to_object(self) -> RemoteObject:
        modified = self.updated_at or datetime.fromtimestamp(0, tz=timezone.utc)
        if self.type == FOLDER_TYPE:
            return Folder(id=self.id, name=self.name, size=self.size or 0, modified=modified)
        return File(
            id=self.id,
            name=self.name,
            size=self.size or 0,
            modified=modified,
            mime_type=self.mime_type or "",
        )


class Meta(ApiModel):
    """Pagination metadata of a listing."""
    count: int = 0
    total_pages: int = Field(0, alias="totalPages")
    current_page: int = Field(0, alias="currentPage")


class ListFilesResponse(ApiModel):
    """Response model for list and find operations."""
    items: List[FileInfo] = []
    meta: Optional[Meta] = None


class PartFile(ApiModel):
    """Response model for one uploaded chunk."""
    part_id: int = Field(alias="partId")
    name: str = ""
    part_no: int = Field(0, alias="partNo")
    total_parts: int = Field(0, alias="totalParts")
    size: int = 0
    channel_id: int = Field(0, alias="channelId")
    encrypted: bool = False
    salt: Optional[str] = None


class FilePart(ApiModel):
    """Part reference carried by the create-file request."""
    id: int
    salt: Optional[str] = None


class CreateFileRequest(ApiModel):
    """Request model for creating a folder or committing a file."""
    name: str
    type: str
    parent_id: Optional[str] = Field(None, alias="parentId")
    mime_type: Optional[str] = Field(None, alias="mimeType")
    size: Optional[int] = None
    parts: Optional[List[FilePart]] = None
    channel_id: Optional[int] = Field(None, alias="channelId")
    encrypted: Optional[bool] = None
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


class MoveFileRequest(ApiModel):
    """Request model for moving files to another folder."""
    destination_parent: str = Field(alias="destinationParent")
    ids: List[str]


class UpdateFileRequest(ApiModel):
    """Request model for renaming a file."""
    name: str


class RemoveFileRequest(ApiModel):
    """Request model for deleting files."""
    ids: List[str]


class CopyFileRequest(ApiModel):
    """Request model for copying a file into a folder."""
    new_name: str = Field(alias="newName")
    destination: str
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
