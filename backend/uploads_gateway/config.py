"""
Application configuration using Pydantic Settings.
All environment variables are loaded here with sensible defaults.
"""
from dataclasses import dataclass
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


@dataclass(frozen=True)
class StorageConfig:
    """
    Connection details for the S3-compatible bucket.

    Built once at startup and handed to the upload gateway, so tests can
    construct their own without touching the environment.
    """
    endpoint: Optional[str]
    access_key_id: Optional[str]
    secret_access_key: Optional[str]
    bucket_name: Optional[str]
    public_domain: Optional[str] = None
    region: str = "auto"  # R2 uses "auto" for region
    default_folder: str = "smart-agency"

    def missing_fields(self) -> list[str]:
        """Names of required credentials that are empty."""
        required = {
            "R2_ENDPOINT": self.endpoint,
            "R2_ACCESS_KEY_ID": self.access_key_id,
            "R2_SECRET_ACCESS_KEY": self.secret_access_key,
            "R2_BUCKET_NAME": self.bucket_name,
        }
        return [name for name, value in required.items() if not value]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment
    environment: str = "dev"
    log_level: str = "INFO"

    # Cloudflare R2 / S3-compatible storage
    r2_endpoint: Optional[str] = None  # e.g., https://<account_id>.r2.cloudflarestorage.com
    r2_access_key_id: Optional[str] = None
    r2_secret_access_key: Optional[str] = None
    r2_bucket_name: Optional[str] = None
    r2_public_domain: Optional[str] = None  # CDN / custom domain, wins over the bucket host
    r2_region: str = "auto"

    # Upload policy
    upload_default_folder: str = "smart-agency"
    upload_max_files: int = 10  # Per request on the multi-file endpoint

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def storage_config(self) -> StorageConfig:
        """Build the storage config consumed by the upload gateway."""
        return StorageConfig(
            endpoint=self.r2_endpoint,
            access_key_id=self.r2_access_key_id,
            secret_access_key=self.r2_secret_access_key,
            bucket_name=self.r2_bucket_name,
            public_domain=self.r2_public_domain or None,
            region=self.r2_region,
            default_folder=self.upload_default_folder,
        )


# Global settings instance
settings = Settings()
