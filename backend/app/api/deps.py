from fastapi import Request

from app.services.storage import StorageService, get_storage_service


def get_storage(request: Request) -> StorageService:
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        storage = get_storage_service()
        request.app.state.storage = storage
    return storage
