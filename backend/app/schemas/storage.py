from pydantic import BaseModel, ConfigDict, Field


class UploadResponse(BaseModel):
    success: bool = True
    message: str
    filename: str
    size: int
    url: str


class FileItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    size: int
    last_modified: str = Field(..., alias="lastModified")
    url: str


class FileListResponse(BaseModel):
    success: bool = True
    files: list[FileItem]
    count: int


class DownloadResponse(BaseModel):
    success: bool = True
    url: str


class DeleteResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
