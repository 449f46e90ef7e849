"""API-facing handlers that delegate to application services."""

from __future__ import annotations

from uuid import uuid4

from meditation_media.config import load_media_config
from meditation_media.domain.errors import (
    DecodeError,
    MediaPipelineError,
    ObjectNotFound,
    PolicyRejected,
    StoreUnavailable,
)
from meditation_media.interfaces.service_factory import build_promotion_service, build_upload_issuer
from meditation_media.public_urls import public_audio_url, public_url_for_suffix


def issue_upload(correlation_id: str) -> dict[str, object]:
    credential = build_upload_issuer().issue(correlation_id=correlation_id)
    return {"url": credential.url, "key": credential.key, "expires_in": credential.expires_in}


def promote_uploaded_audio(upload_key: str, correlation_id: str) -> dict[str, object]:
    config = load_media_config()
    audio_id = str(uuid4())
    result = build_promotion_service(config).promote_audio(
        upload_key,
        f"{audio_id}.mp3",
        correlation_id=correlation_id,
    )
    return {
        "id": audio_id,
        "key": result.promoted.key,
        "url": public_audio_url(config.public_base, audio_id),
        "duration_seconds": result.duration_seconds,
    }


def promote_uploaded_image(upload_key: str, destination: str, correlation_id: str) -> dict[str, object]:
    config = load_media_config()
    result = build_promotion_service(config).promote_image(
        upload_key,
        destination,
        correlation_id=correlation_id,
    )
    return {
        "key": result.promoted.key,
        "url": public_url_for_suffix(config.public_base, result.promoted.key),
        "extension": result.extension,
    }


def status_for_error(error: MediaPipelineError) -> int:
    """HTTP status separating invalid user files from processing failures."""

    if isinstance(error, (DecodeError, PolicyRejected)):
        return 422
    if isinstance(error, ObjectNotFound):
        return 404
    if isinstance(error, StoreUnavailable):
        return 503
    return 500


__all__ = [
    "issue_upload",
    "promote_uploaded_audio",
    "promote_uploaded_image",
    "status_for_error",
]
