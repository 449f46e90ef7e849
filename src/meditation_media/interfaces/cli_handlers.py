"""CLI-facing handlers that delegate to application services."""

from __future__ import annotations

from pathlib import Path

from meditation_media.audio_validation import validate_mp3_file
from meditation_media.config import load_media_config
from meditation_media.domain.errors import DecodeError, PolicyRejected
from meditation_media.interfaces.service_factory import (
    audio_policy_from_config,
    build_promotion_service,
    build_upload_issuer,
)
from meditation_media.public_urls import public_audio_url, public_url_for_suffix


def presign_upload(correlation_id: str) -> dict[str, object]:
    credential = build_upload_issuer().issue(correlation_id=correlation_id)
    return {"url": credential.url, "key": credential.key, "expires_in": credential.expires_in}


def promote_audio_key(upload_key: str, audio_id: str, correlation_id: str) -> dict[str, object]:
    config = load_media_config()
    result = build_promotion_service(config).promote_audio(
        upload_key,
        f"{audio_id}.mp3",
        correlation_id=correlation_id,
    )
    return {
        "key": result.promoted.key,
        "url": public_audio_url(config.public_base, audio_id),
        "duration_seconds": result.duration_seconds,
    }


def promote_image_key(upload_key: str, destination: str, correlation_id: str) -> dict[str, object]:
    config = load_media_config()
    result = build_promotion_service(config).promote_image(
        upload_key,
        destination,
        correlation_id=correlation_id,
    )
    return {
        "key": result.promoted.key,
        "url": public_url_for_suffix(config.public_base, result.promoted.key),
    }


def inspect_mp3(path: Path) -> dict[str, object]:
    """Decode a local MP3 and report the duration verdict without touching the store."""

    policy = audio_policy_from_config(load_media_config())
    try:
        validation = validate_mp3_file(path, policy)
    except (DecodeError, PolicyRejected) as error:
        return {"path": str(path), "accepted": False, **error.as_dict()}

    stream = validation.stream
    return {
        "path": str(path),
        "accepted": True,
        "mpeg_version": stream.version,
        "sample_rate_hz": stream.sample_rate_hz,
        "channel_count": stream.channel_count,
        "frame_count": stream.frame_count,
        "length": stream.length,
        "duration_seconds": validation.duration_seconds,
    }
