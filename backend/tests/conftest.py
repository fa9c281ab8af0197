import importlib
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config import get_settings
from app.services import storage as storage_service


class InMemoryStorage(storage_service.StorageService):
    """Bucket kept in a dict; ``fail_with`` makes every backend call fail."""

    def __init__(self) -> None:  # type: ignore[super-init-not-called]
        self.settings = get_settings()
        self.bucket = self.settings.s3_bucket_name
        self.region = self.settings.aws_region
        self.objects: dict[str, tuple[bytes, str, datetime]] = {}
        self.calls: list[str] = []
        self.fail_with: str | None = None

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_with is not None:
            raise storage_service.StorageError(self.fail_with)

    async def upload(self, key, data, content_type):  # type: ignore[override]
        self._record("upload")
        self.objects[key] = (data, content_type, datetime.now(timezone.utc))

    async def list_objects(self):  # type: ignore[override]
        self._record("list_objects")
        return [
            storage_service.StoredObject(key=key, size=len(data), last_modified=modified)
            for key, (data, _, modified) in sorted(self.objects.items())
        ]

    def create_presigned_get(self, key, expires_in=storage_service.DOWNLOAD_URL_TTL):  # type: ignore[override]
        self._record("create_presigned_get")
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}?X-Amz-Expires={expires_in}"

    async def delete_object(self, key):  # type: ignore[override]
        self._record("delete_object")
        self.objects.pop(key, None)

    async def verify_access(self):  # type: ignore[override]
        return self.fail_with is None


@pytest.fixture(scope="session", autouse=True)
def configure_environment():
    os.environ["ENV"] = "test"
    os.environ["AWS_REGION"] = "eu-west-1"
    os.environ["S3_BUCKET_NAME"] = "test-bucket"
    os.environ["AWS_ACCESS_KEY_ID"] = "test"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "test"
    os.environ.pop("S3_ENDPOINT_URL", None)
    get_settings.cache_clear()
    storage_service.reset_storage_service()


@pytest.fixture(scope="session")
def app_instance(configure_environment):
    from app import main as app_module

    importlib.reload(app_module)
    return app_module.app


@pytest.fixture
def storage(app_instance):
    fake = InMemoryStorage()
    # Mimic the lifespan, which is not run by ASGITransport
    app_instance.state.storage = fake
    yield fake
    app_instance.state.storage = None


@pytest_asyncio.fixture
async def client(app_instance, storage):
    transport = ASGITransport(app=app_instance)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
