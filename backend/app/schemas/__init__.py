from app.schemas.health import HealthResponse
from app.schemas.storage import (
    DeleteResponse,
    DownloadResponse,
    ErrorResponse,
    FileItem,
    FileListResponse,
    UploadResponse,
)

__all__ = [
    "HealthResponse",
    "UploadResponse",
    "FileItem",
    "FileListResponse",
    "DownloadResponse",
    "DeleteResponse",
    "ErrorResponse",
]
