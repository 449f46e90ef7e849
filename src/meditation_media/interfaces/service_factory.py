"""Wiring of application services from runtime configuration."""

from __future__ import annotations

from functools import lru_cache

from meditation_media.application.object_store import ObjectStore
from meditation_media.application.promotion_service import PromoteStagedMedia
from meditation_media.application.upload_service import IssueUploadCredential
from meditation_media.config import MediaConfig, load_media_config
from meditation_media.domain.models import INHERIT_COPY_POLICY, CopyPolicy
from meditation_media.domain.policies import AudioIngestPolicy, DurationPolicy
from meditation_media.infrastructure.logging_event_publisher import LoggingEventPublisher
from meditation_media.infrastructure.minio_object_store import MinIOObjectStore

event_publisher = LoggingEventPublisher()


@lru_cache(maxsize=1)
def get_object_store() -> ObjectStore:
    """Build and cache the object store adapter for the configured bucket."""

    return MinIOObjectStore.from_config(load_media_config())


def audio_policy_from_config(config: MediaConfig) -> AudioIngestPolicy:
    return AudioIngestPolicy(
        policy_id="meditation-audio-configured",
        duration=DurationPolicy(
            policy_id="meditation-duration-configured",
            max_duration_seconds=config.max_audio_seconds,
        ),
        max_file_size_bytes=config.max_audio_bytes,
    )


def image_copy_policy_from_config(config: MediaConfig) -> CopyPolicy:
    if config.image_replace_metadata:
        return CopyPolicy(replace_metadata=True)
    return INHERIT_COPY_POLICY


def build_promotion_service(config: MediaConfig | None = None, store: ObjectStore | None = None) -> PromoteStagedMedia:
    config = config or load_media_config()
    return PromoteStagedMedia(
        store=store if store is not None else get_object_store(),
        audio_policy=audio_policy_from_config(config),
        image_copy_policy=image_copy_policy_from_config(config),
        invocation_timeout_seconds=config.invocation_timeout_seconds,
        event_publisher=event_publisher,
    )


def build_upload_issuer(store: ObjectStore | None = None) -> IssueUploadCredential:
    return IssueUploadCredential(
        store=store if store is not None else get_object_store(),
        event_publisher=event_publisher,
    )
