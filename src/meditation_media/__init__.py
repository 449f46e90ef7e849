"""Public package exports for meditation_media with lazy imports."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "MediaConfig",
    "load_media_config",
    "Mp3StreamInfo",
    "decode_mp3",
    "AudioValidation",
    "validate_mp3_bytes",
    "validate_mp3_file",
    "classify_image_content_type",
    "PromoteStagedMedia",
    "IssueUploadCredential",
    "DecodeError",
    "PolicyRejected",
    "PresignError",
    "StoreUnavailable",
    "ObjectNotFound",
]

_EXPORT_MODULES: dict[str, str] = {
    "MediaConfig": "meditation_media.config",
    "load_media_config": "meditation_media.config",
    "Mp3StreamInfo": "meditation_media.mp3_decoder",
    "decode_mp3": "meditation_media.mp3_decoder",
    "AudioValidation": "meditation_media.audio_validation",
    "validate_mp3_bytes": "meditation_media.audio_validation",
    "validate_mp3_file": "meditation_media.audio_validation",
    "classify_image_content_type": "meditation_media.content_types",
    "PromoteStagedMedia": "meditation_media.application.promotion_service",
    "IssueUploadCredential": "meditation_media.application.upload_service",
    "DecodeError": "meditation_media.domain.errors",
    "PolicyRejected": "meditation_media.domain.errors",
    "PresignError": "meditation_media.domain.errors",
    "StoreUnavailable": "meditation_media.domain.errors",
    "ObjectNotFound": "meditation_media.domain.errors",
}


def __getattr__(name: str) -> Any:
    if name not in _EXPORT_MODULES:
        raise AttributeError(f"module 'meditation_media' has no attribute {name!r}")

    module = import_module(_EXPORT_MODULES[name])
    value = getattr(module, name)
    globals()[name] = value
    return value
