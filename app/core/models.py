from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field


class StoredFile(BaseModel):
    """A file as the storage provider reports it."""

    model_config = ConfigDict(populate_by_name=True)

    file_id: str = Field(alias="fileId")
    name: str
    file_path: str = Field(alias="filePath")
    url: str
    folder: str
    size: int
    content_type: str = Field(alias="contentType")
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None
    created_at: int = Field(alias="createdAt")


class LinkPreview(BaseModel):
    title: str = ""
    description: str = ""
    image: str = ""


class ResolvedPath(BaseModel):
    folder_path: str
    base_name: str

    @property
    def search_path(self) -> str:
        return "/" + self.folder_path


class FetchUrlRequest(BaseModel):
    url: Optional[str] = None


class FetchUrlResponse(BaseModel):
    success: int = 1
    meta: LinkPreview


class DeleteByUrlRequest(BaseModel):
    image_url: Optional[str] = Field(None, alias="imageUrl")


class UploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    image_url: str = Field(alias="imageUrl")
    file_id: str = Field(alias="fileId")
    file_path: str = Field(alias="filePath")
    folder: str
    type: str


class ListResponse(BaseModel):
    images: List[StoredFile]
    folder: str
    count: int


class DeleteResponse(BaseModel):
    message: str
    result: dict
