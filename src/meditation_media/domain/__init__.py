"""DDD domain layer."""

from .errors import DecodeError, MediaPipelineError, ObjectNotFound, PolicyRejected, PresignError, StoreUnavailable
from .events import DomainEvent, MediaPromoted, MediaRejected, MediaValidated, PromotionFailed, UploadIssued
from .models import (
    AUDIO_COPY_POLICY,
    INHERIT_COPY_POLICY,
    STAGING_PREFIX,
    UPLOAD_CREDENTIAL_TTL_SECONDS,
    Accepted,
    CopyPolicy,
    MediaKind,
    PromotedObject,
    Rejected,
    UploadCredential,
    ValidationOutcome,
)
from .policies import (
    CHANNEL_FACTOR,
    DEFAULT_AUDIO_POLICY,
    DEFAULT_DURATION_POLICY,
    AudioIngestPolicy,
    DurationPolicy,
)
from .services import check_duration, mp3_duration_seconds

__all__ = [
    "MediaPipelineError",
    "StoreUnavailable",
    "ObjectNotFound",
    "DecodeError",
    "PolicyRejected",
    "PresignError",
    "DomainEvent",
    "UploadIssued",
    "MediaValidated",
    "MediaRejected",
    "MediaPromoted",
    "PromotionFailed",
    "STAGING_PREFIX",
    "UPLOAD_CREDENTIAL_TTL_SECONDS",
    "MediaKind",
    "Accepted",
    "Rejected",
    "ValidationOutcome",
    "CopyPolicy",
    "AUDIO_COPY_POLICY",
    "INHERIT_COPY_POLICY",
    "PromotedObject",
    "UploadCredential",
    "CHANNEL_FACTOR",
    "DurationPolicy",
    "AudioIngestPolicy",
    "DEFAULT_DURATION_POLICY",
    "DEFAULT_AUDIO_POLICY",
    "mp3_duration_seconds",
    "check_duration",
]
