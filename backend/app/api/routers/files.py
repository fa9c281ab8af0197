import logging

from fastapi import APIRouter, Depends, File, UploadFile, status

from app.api.deps import get_storage
from app.api.errors import (
    BackendError,
    FileTooLargeError,
    MissingFileError,
    MissingKeyError,
)
from app.schemas import (
    DeleteResponse,
    DownloadResponse,
    FileItem,
    FileListResponse,
    UploadResponse,
)
from app.services.storage import MAX_UPLOAD_SIZE, StorageError, StorageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["files"])


@router.post("/upload", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile | None = File(default=None),
    storage: StorageService = Depends(get_storage),
) -> UploadResponse:
    if file is None or not file.filename:
        raise MissingFileError()

    data = await file.read(MAX_UPLOAD_SIZE + 1)
    if len(data) > MAX_UPLOAD_SIZE:
        raise FileTooLargeError(MAX_UPLOAD_SIZE)

    key = storage.generate_key(file.filename)
    content_type = file.content_type or "application/octet-stream"
    try:
        await storage.upload(key, data, content_type)
    except StorageError as exc:
        logger.error("Failed to upload %s: %s", key, exc)
        raise BackendError(str(exc)) from exc

    logger.info("Uploaded %s (%d bytes)", key, len(data))
    return UploadResponse(
        message="File uploaded successfully",
        filename=key,
        size=len(data),
        url=storage.object_url(key),
    )


@router.get("/files", response_model=FileListResponse)
async def list_files(storage: StorageService = Depends(get_storage)) -> FileListResponse:
    try:
        objects = await storage.list_objects()
    except StorageError as exc:
        logger.error("Failed to list files: %s", exc)
        raise BackendError(str(exc)) from exc

    files = [
        FileItem(
            name=obj.key,
            size=obj.size,
            last_modified=obj.last_modified.isoformat(),
            url=storage.object_url(obj.key),
        )
        for obj in objects
    ]
    return FileListResponse(files=files, count=len(files))


@router.get("/download/{filename:path}", response_model=DownloadResponse)
async def download_link(
    filename: str,
    storage: StorageService = Depends(get_storage),
) -> DownloadResponse:
    # Path parameters arrive already percent-decoded; no existence check.
    if not filename:
        raise MissingKeyError()
    try:
        url = storage.create_presigned_get(filename)
    except StorageError as exc:
        logger.error("Failed to sign download URL for %s: %s", filename, exc)
        raise BackendError(str(exc)) from exc
    return DownloadResponse(url=url)


@router.delete("/delete/{filename:path}", response_model=DeleteResponse)
async def delete_file(
    filename: str,
    storage: StorageService = Depends(get_storage),
) -> DeleteResponse:
    if not filename:
        raise MissingKeyError()
    try:
        await storage.delete_object(filename)
    except StorageError as exc:
        logger.error("Failed to delete %s: %s", filename, exc)
        raise BackendError(str(exc)) from exc

    logger.info("Deleted %s", filename)
    return DeleteResponse(message=f"File {filename} deleted successfully")
