from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # make it absolute so reload/CWD doesn't break it
        env_file=Path(__file__).resolve().parents[1] / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="BlobGateway", validation_alias="APP_NAME")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        validation_alias="APP_ENV",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_dir: Path = Field(
        default=Path(__file__).resolve().parents[1] / "logs",
        validation_alias="LOG_DIR",
    )

    # API
    api_host: str = Field(default="127.0.0.1", validation_alias="API_HOST")
    api_port: int = Field(default=8000, validation_alias="API_PORT")
    public_base_url: str | None = Field(
        default=None,
        validation_alias="PUBLIC_BASE_URL",
        description="Base for public file URLs. Derived from the request host when unset.",
    )
    file_route_prefix: str = "/f"
    cache_max_age_seconds: int = Field(
        default=31536000,
        validation_alias="CACHE_MAX_AGE_SECONDS",
    )

    # MongoDB (record store)
    mongo_uri: str = Field(
        default="mongodb://localhost:27017",
        validation_alias="MONGO_URI",
    )
    mongo_db: str = Field(default="blob_gateway", validation_alias="MONGO_DB")
    mongo_files_collection: str = Field(
        default="files",
        validation_alias="MONGO_FILES_COLLECTION",
    )

    # CloudSky (presigned two-step backend)
    cloudsky_control_url: str = Field(
        default="https://api.cloudsky.biz.id/get-upload-url",
        validation_alias="CLOUDSKY_CONTROL_URL",
    )
    cloudsky_read_url: str = Field(
        default="https://api.cloudsky.biz.id/file",
        validation_alias="CLOUDSKY_READ_URL",
    )
    cloudsky_key_prefix: str = Field(default="cloudku", validation_alias="CLOUDSKY_KEY_PREFIX")

    # Catbox (multipart backend)
    catbox_upload_url: str = Field(
        default="https://catbox.moe/user/api.php",
        validation_alias="CATBOX_UPLOAD_URL",
    )

    # Outbound HTTP
    provider_timeout_seconds: float = Field(
        default=120.0,
        validation_alias="PROVIDER_TIMEOUT_SECONDS",
        description="Upper bound for each backend upload request.",
    )
    fetch_timeout_seconds: float = Field(
        default=60.0,
        validation_alias="FETCH_TIMEOUT_SECONDS",
        description="Upper bound for connecting to and reading from a backend on retrieval.",
    )

    # Uploads
    max_upload_bytes: int = Field(
        default=200 * 1024 * 1024,
        validation_alias="MAX_UPLOAD_BYTES",
    )
    identifier_max_attempts: int = Field(default=10, validation_alias="IDENTIFIER_MAX_ATTEMPTS")
    identifier_length: int = 6
    identifier_long_length: int = 8
    identifier_long_from_attempt: int = 5


# Global settings instance
settings = Settings()
