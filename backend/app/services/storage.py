import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Final

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

DOWNLOAD_URL_TTL: Final[int] = 3600
MAX_UPLOAD_SIZE: Final[int] = 100 * 1024 * 1024
# Whole multipart request: one file plus boundaries and part headers
MAX_REQUEST_SIZE: Final[int] = MAX_UPLOAD_SIZE + 1024 * 1024


class StorageError(Exception):
    """Raised when the object store rejects or fails a request."""


def _backend_message(exc: Exception) -> str:
    if isinstance(exc, ClientError):
        message = exc.response.get("Error", {}).get("Message")
        if message:
            return message
    return str(exc) or exc.__class__.__name__


def upload_timestamp(moment: datetime | None = None) -> str:
    """Compact UTC timestamp used as key prefix, e.g. ``20250708T143208``."""
    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.strftime("%Y%m%dT%H%M%S")


@dataclass(frozen=True)
class StoredObject:
    key: str
    size: int
    last_modified: datetime


class StorageService:
    """S3 bucket access for the gateway."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        session = boto3.session.Session()
        self.client = session.client(
            "s3",
            endpoint_url=str(self.settings.s3_endpoint) if self.settings.s3_endpoint else None,
            aws_access_key_id=self.settings.aws_access_key_id,
            aws_secret_access_key=self.settings.aws_secret_access_key,
            region_name=self.settings.aws_region,
            config=Config(signature_version="s3v4"),
        )
        self.bucket = self.settings.s3_bucket_name
        self.region = self.settings.aws_region

    def generate_key(self, filename: str, moment: datetime | None = None) -> str:
        return f"{upload_timestamp(moment)}_{filename}"

    def object_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    async def upload(self, key: str, data: bytes, content_type: str) -> None:
        def _upload() -> None:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )

        await self._call(_upload)

    async def list_objects(self) -> list[StoredObject]:
        def _list() -> dict:
            return self.client.list_objects_v2(Bucket=self.bucket)

        response = await self._call(_list)
        return [
            StoredObject(
                key=item["Key"],
                size=item["Size"],
                last_modified=item["LastModified"],
            )
            for item in response.get("Contents", [])
        ]

    def create_presigned_get(self, key: str, expires_in: int = DOWNLOAD_URL_TTL) -> str:
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(_backend_message(exc)) from exc

    async def delete_object(self, key: str) -> None:
        def _delete() -> None:
            self.client.delete_object(Bucket=self.bucket, Key=key)

        await self._call(_delete)

    async def verify_access(self) -> bool:
        def _probe() -> None:
            self.client.list_objects_v2(Bucket=self.bucket, MaxKeys=1)

        try:
            await self._call(_probe)
        except StorageError as exc:
            logger.error("Cannot access bucket %s: %s", self.bucket, exc)
            logger.error("Make sure that:")
            logger.error("  1. The bucket exists")
            logger.error("  2. The AWS credentials are correct")
            logger.error("  3. The credentials have read/write permissions")
            return False
        logger.info("Verified access to bucket %s", self.bucket)
        return True

    async def _call(self, func):
        try:
            return await asyncio.to_thread(func)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(_backend_message(exc)) from exc


_storage_service: StorageService | None = None


def get_storage_service() -> StorageService:
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service


def reset_storage_service() -> None:
    global _storage_service
    _storage_service = None
