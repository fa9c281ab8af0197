from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    env: Literal["local", "prod", "test"] = Field(default="local", alias="ENV")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=9000, alias="PORT")

    service_name: str = Field(default="file-server", alias="SERVICE_NAME")

    aws_region: str = Field(default="us-east-2", alias="AWS_REGION")
    s3_bucket_name: str = Field(default="innovatech-file-storage", alias="S3_BUCKET_NAME")
    aws_access_key_id: str | None = Field(default=None, alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: str | None = Field(default=None, alias="AWS_SECRET_ACCESS_KEY")
    s3_endpoint: HttpUrl | None = Field(default=None, alias="S3_ENDPOINT_URL")


@lru_cache
def get_settings() -> Settings:
    return Settings()
