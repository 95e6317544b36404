"""Application configuration using Pydantic Settings."""

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageProvider(str, Enum):
    LOCAL = "local"
    GCS = "gcs"
    S3 = "s3"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "RentInspect"
    debug: bool = False
    api_v1_prefix: str = "/v1"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000"

    # Database
    database_url: str

    # Firebase Auth
    firebase_project_id: str
    google_application_credentials: Optional[str] = None

    # Object storage (report artifacts and uploaded photos)
    storage_provider: StorageProvider = StorageProvider.LOCAL
    report_dir: str = "var/reports"
    report_prefix: str = "reports"
    upload_dir: str = "var/uploads"
    upload_prefix: str = "photos"
    max_upload_size_mb: int = 25

    # GCS Config
    gcs_bucket_name: Optional[str] = None
    gcs_project_id: Optional[str] = None

    # S3 Config
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: Optional[str] = "us-east-1"
    s3_bucket_name: Optional[str] = None

    # Timeouts (seconds)
    storage_timeout_seconds: float = 30.0
    report_lock_timeout_seconds: float = 60.0

    @property
    def bucket_name(self) -> str:
        """Get the bucket name for the configured remote storage provider."""
        if self.storage_provider == StorageProvider.GCS:
            if not self.gcs_bucket_name:
                raise ValueError("GCS_BUCKET_NAME required when STORAGE_PROVIDER=gcs")
            return self.gcs_bucket_name
        if self.storage_provider == StorageProvider.S3:
            if not self.s3_bucket_name:
                raise ValueError("S3_BUCKET_NAME required when STORAGE_PROVIDER=s3")
            return self.s3_bucket_name
        raise ValueError("Local storage has no bucket")


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
