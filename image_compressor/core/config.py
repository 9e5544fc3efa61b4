"""
Application configuration management using Pydantic Settings.
Loads environment variables and provides centralized configuration.
"""
from pydantic_settings import BaseSettings
from pydantic import Field, validator


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Metadata
    APP_NAME: str = "Image Compressor API"
    APP_VERSION: str = "1.0.0"
    API_V1_PREFIX: str = "/api/v1"

    # MinIO / S3
    MINIO_HOST: str = Field("localhost", env="MINIO_HOST")
    MINIO_PORT: int = Field(9000, env="MINIO_PORT")
    MINIO_ACCESS_KEY: str = Field("minioadmin", env="MINIO_ACCESS_KEY")
    MINIO_SECRET_KEY: str = Field("minioadmin", env="MINIO_SECRET_KEY")
    MINIO_BUCKET: str = Field("image-compressor", env="MINIO_BUCKET")
    MINIO_SECURE: bool = Field(False, env="MINIO_SECURE")
    MINIO_REGION: str = Field("us-east-1", env="MINIO_REGION")

    # Delay queue
    REDIS_URL: str = Field("redis://localhost:6379/0", env="REDIS_URL")
    QUEUE_BACKEND: str = Field("redis", env="QUEUE_BACKEND")
    DELETE_QUEUE_NAME: str = Field("image-delete-queue", env="DELETE_QUEUE_NAME")

    # Retention
    RETENTION_THRESHOLD_SECONDS: int = 60 * 60  # 1 hour
    SWEEP_SCHEDULE: str = Field("@daily", env="SWEEP_SCHEDULE")
    SWEEP_MAX_RECORDS: int = 1
    SWEEP_VISIBILITY_TIMEOUT_SECONDS: int = 0
    SWEEP_DEFER_UNTIL_DUE: bool = False

    # Key namespaces
    UPLOAD_PREFIX: str = "uploads/"
    COMPRESSED_PREFIX: str = "compressed/"

    # Compression
    DEFAULT_QUALITY: int = 80
    COMPRESSION_TIMEOUT_SECONDS: int = 120  # 2 minutes

    # Presigned URLs
    DOWNLOAD_URL_EXPIRY_SECONDS: int = 300
    UPLOAD_URL_EXPIRY_SECONDS: int = 300
    ALLOWED_IMAGE_TYPES: list = [
        "image/jpeg",
        "image/png",
        "image/webp",
    ]

    # CORS
    CORS_ORIGINS: list = ["*"]

    # API Host
    API_HOST: str = Field("0.0.0.0", env="API_HOST")
    API_PORT: int = Field(8000, env="API_PORT")

    # Logging
    LOG_LEVEL: str = Field("INFO", env="LOG_LEVEL")
    LOG_FORMAT: str = Field("text", env="LOG_FORMAT")

    @validator("QUEUE_BACKEND")
    def validate_queue_backend(cls, v):
        """Only the Redis and in-process queues are supported."""
        if v not in ("redis", "memory"):
            raise ValueError("QUEUE_BACKEND must be 'redis' or 'memory'")
        return v

    @validator("RETENTION_THRESHOLD_SECONDS", "COMPRESSION_TIMEOUT_SECONDS",
               "DOWNLOAD_URL_EXPIRY_SECONDS", "UPLOAD_URL_EXPIRY_SECONDS",
               "SWEEP_MAX_RECORDS")
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("value must be positive")
        return v

    @validator("SWEEP_VISIBILITY_TIMEOUT_SECONDS")
    def validate_visibility(cls, v):
        if v < 0:
            raise ValueError("visibility timeout cannot be negative")
        return v

    @validator("DEFAULT_QUALITY")
    def validate_quality(cls, v):
        if not 0 <= v <= 100:
            raise ValueError("DEFAULT_QUALITY must be between 0 and 100")
        return v

    @validator("UPLOAD_PREFIX", "COMPRESSED_PREFIX")
    def validate_prefix(cls, v):
        """Key prefixes are directory-like and must end with '/'."""
        if not v or not v.endswith("/"):
            raise ValueError("prefix must end with '/'")
        return v

    @validator("LOG_FORMAT")
    def validate_log_format(cls, v):
        if v not in ("text", "json"):
            raise ValueError("LOG_FORMAT must be 'text' or 'json'")
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


# Global settings instance
settings = Settings()
