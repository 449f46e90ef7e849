"""Runtime configuration for the media pipeline."""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, Field, field_validator

_TRUE_VALUES = {"1", "true", "yes", "on"}


class MediaConfig(BaseModel):
    """Bucket, store connection and policy settings passed to each component."""

    model_config = {"frozen": True}

    bucket: str = Field("meditation-audio", min_length=3)
    public_base: str = "localhost:9000/meditation-audio"
    endpoint: str = "minio:9000"
    access_key: str = "minioadmin"
    secret_key: str = "minioadmin"
    secure: bool = False
    region: str | None = None
    max_audio_seconds: int = Field(90, ge=0)
    max_audio_bytes: int = Field(20 * 1024 * 1024, gt=0)
    wait_delay_seconds: float = Field(5.0, ge=0.0)
    wait_max_attempts: int = Field(20, ge=1)
    invocation_timeout_seconds: float | None = Field(30.0, gt=0.0)
    image_replace_metadata: bool = False

    @field_validator("public_base")
    @classmethod
    def _strip_public_base(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        for scheme in ("https://", "http://"):
            if value.startswith(scheme):
                value = value[len(scheme) :]
        if not value:
            raise ValueError("public_base must not be empty.")
        return value


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in _TRUE_VALUES


def _env_optional(name: str) -> str | None:
    value = os.getenv(name)
    return value if value else None


@lru_cache(maxsize=1)
def load_media_config() -> MediaConfig:
    """Load pipeline configuration from environment."""

    values: dict[str, object] = {
        "bucket": os.getenv("MEDIA_AUDIO_BUCKET", "meditation-audio"),
        "public_base": os.getenv("MEDIA_PUBLIC_AUDIO_BASE", "localhost:9000/meditation-audio"),
        "endpoint": os.getenv("MEDIA_S3_ENDPOINT", "minio:9000"),
        "access_key": os.getenv("MEDIA_S3_ACCESS_KEY", "minioadmin"),
        "secret_key": os.getenv("MEDIA_S3_SECRET_KEY", "minioadmin"),
        "secure": _env_flag("MEDIA_S3_SECURE"),
        "region": _env_optional("MEDIA_S3_REGION") or _env_optional("AWS_REGION"),
        "max_audio_seconds": os.getenv("MEDIA_MAX_AUDIO_SECONDS", "90"),
        "max_audio_bytes": os.getenv("MEDIA_MAX_AUDIO_BYTES", str(20 * 1024 * 1024)),
        "wait_delay_seconds": os.getenv("MEDIA_WAIT_DELAY_SECONDS", "5"),
        "wait_max_attempts": os.getenv("MEDIA_WAIT_MAX_ATTEMPTS", "20"),
        "invocation_timeout_seconds": _env_optional("MEDIA_INVOCATION_TIMEOUT_SECONDS") or "30",
        "image_replace_metadata": _env_flag("MEDIA_IMAGE_REPLACE_METADATA"),
    }
    return MediaConfig.model_validate(values)
