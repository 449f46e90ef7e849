"""Application service that validates staged uploads and promotes them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import uuid4

from meditation_media.application.deadline import Deadline
from meditation_media.application.event_publisher import EventPublisher, NullEventPublisher
from meditation_media.application.object_store import ObjectStore
from meditation_media.audio_validation import AudioValidation, validate_mp3_bytes
from meditation_media.content_types import classify_image_content_type, content_type_for_extension
from meditation_media.domain.errors import DecodeError, PolicyRejected, StoreUnavailable
from meditation_media.domain.events import MediaPromoted, MediaRejected, MediaValidated, PromotionFailed
from meditation_media.domain.models import (
    AUDIO_COPY_POLICY,
    INHERIT_COPY_POLICY,
    CopyPolicy,
    MediaKind,
    PromotedObject,
    Rejected,
    ValidationOutcome,
)
from meditation_media.domain.policies import DEFAULT_AUDIO_POLICY, AudioIngestPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AudioPromotion:
    promoted: PromotedObject
    duration_seconds: int


@dataclass(frozen=True, slots=True)
class ImagePromotion:
    promoted: PromotedObject
    extension: str


@dataclass(slots=True)
class PromoteStagedMedia:
    """Use case that validates a staged object and copies it to its permanent key.

    Every step runs strictly after the previous one succeeded: fetch or head,
    validate, copy, then confirm the destination exists. Nothing is retried and
    no copy is attempted once validation fails.
    """

    store: ObjectStore
    audio_policy: AudioIngestPolicy = DEFAULT_AUDIO_POLICY
    image_copy_policy: CopyPolicy = INHERIT_COPY_POLICY
    invocation_timeout_seconds: float | None = None
    event_publisher: EventPublisher = NullEventPublisher()

    def new_deadline(self) -> Deadline:
        return Deadline(self.invocation_timeout_seconds)

    def validate_audio(self, staging_key: str, *, deadline: Deadline | None = None) -> AudioValidation:
        deadline = deadline or self.new_deadline()
        deadline.check("download")
        raw_bytes = self.store.get_object(staging_key, max_bytes=self.audio_policy.max_file_size_bytes)
        deadline.check("decode")
        return validate_mp3_bytes(raw_bytes, self.audio_policy)

    def validate_image(self, staging_key: str, *, deadline: Deadline | None = None) -> ValidationOutcome:
        deadline = deadline or self.new_deadline()
        deadline.check("head")
        head = self.store.head_object(staging_key)
        return classify_image_content_type(head.content_type)

    def promote(
        self,
        staging_key: str,
        dest_key: str,
        policy: CopyPolicy,
        *,
        deadline: Deadline | None = None,
    ) -> PromotedObject:
        deadline = deadline or self.new_deadline()
        deadline.check("copy")
        self.store.copy_object(
            staging_key,
            dest_key,
            content_type=policy.content_type_override,
            replace_metadata=policy.replace_metadata,
        )
        deadline.check("existence confirmation")
        self.store.wait_until_exists(dest_key, timeout=deadline.remaining())
        deadline.check("reporting success")
        return PromotedObject(
            key=dest_key,
            source_key=staging_key,
            content_type=policy.content_type_override,
            replace_metadata=policy.replace_metadata,
        )

    def promote_audio(
        self,
        staging_key: str,
        dest_key: str,
        *,
        correlation_id: str | None = None,
        deadline: Deadline | None = None,
    ) -> AudioPromotion:
        run_correlation_id = correlation_id or str(uuid4())
        deadline = deadline or self.new_deadline()
        try:
            validation = self.validate_audio(staging_key, deadline=deadline)
            self._publish_validated(run_correlation_id, staging_key, MediaKind.AUDIO, validation.outcome.extension)
            promoted = self.promote(staging_key, dest_key, AUDIO_COPY_POLICY, deadline=deadline)
        except (DecodeError, PolicyRejected) as error:
            self._publish_rejected(run_correlation_id, staging_key, MediaKind.AUDIO, error)
            raise
        except StoreUnavailable as error:
            self._publish_failed(run_correlation_id, staging_key, dest_key, error)
            raise

        self._publish_promoted(run_correlation_id, promoted)
        return AudioPromotion(promoted=promoted, duration_seconds=validation.duration_seconds)

    def promote_image(
        self,
        staging_key: str,
        dest_stem: str,
        *,
        correlation_id: str | None = None,
        deadline: Deadline | None = None,
    ) -> ImagePromotion:
        """Promote a staged image to ``dest_stem`` suffixed with its canonical extension."""

        run_correlation_id = correlation_id or str(uuid4())
        deadline = deadline or self.new_deadline()
        dest_key = dest_stem
        try:
            outcome = self.validate_image(staging_key, deadline=deadline)
            if isinstance(outcome, Rejected):
                raise PolicyRejected(outcome.reason, code=outcome.code)
            self._publish_validated(run_correlation_id, staging_key, MediaKind.IMAGE, outcome.extension)

            dest_key = f"{dest_stem}{outcome.extension}"
            promoted = self.promote(staging_key, dest_key, self._image_policy(outcome.extension), deadline=deadline)
        except PolicyRejected as error:
            self._publish_rejected(run_correlation_id, staging_key, MediaKind.IMAGE, error)
            raise
        except StoreUnavailable as error:
            self._publish_failed(run_correlation_id, staging_key, dest_key, error)
            raise

        self._publish_promoted(run_correlation_id, promoted)
        return ImagePromotion(promoted=promoted, extension=outcome.extension)

    def _image_policy(self, extension: str) -> CopyPolicy:
        if not self.image_copy_policy.replace_metadata or self.image_copy_policy.content_type_override:
            return self.image_copy_policy
        return CopyPolicy(content_type_override=content_type_for_extension(extension), replace_metadata=True)

    def _publish_validated(self, correlation_id: str, staging_key: str, kind: MediaKind, extension: str) -> None:
        self.event_publisher.publish(
            MediaValidated(
                correlation_id=correlation_id,
                payload_summary={"staging_key": staging_key, "media_kind": kind.value, "extension": extension},
            )
        )

    def _publish_rejected(self, correlation_id: str, staging_key: str, kind: MediaKind, error: Exception) -> None:
        self.event_publisher.publish(
            MediaRejected(
                correlation_id=correlation_id,
                payload_summary={
                    "staging_key": staging_key,
                    "media_kind": kind.value,
                    "code": getattr(error, "code", "rejected"),
                    "reason": str(error),
                },
            )
        )

    def _publish_failed(self, correlation_id: str, staging_key: str, dest_key: str, error: StoreUnavailable) -> None:
        logger.warning(
            "Promotion of staged object failed.",
            extra={"staging_key": staging_key, "dest_key": dest_key, "code": error.code},
        )
        self.event_publisher.publish(
            PromotionFailed(
                correlation_id=correlation_id,
                payload_summary={
                    "staging_key": staging_key,
                    "dest_key": dest_key,
                    "code": error.code,
                    "error": str(error),
                },
            )
        )

    def _publish_promoted(self, correlation_id: str, promoted: PromotedObject) -> None:
        self.event_publisher.publish(
            MediaPromoted(
                correlation_id=correlation_id,
                payload_summary={
                    "staging_key": promoted.source_key,
                    "dest_key": promoted.key,
                    "content_type": promoted.content_type,
                    "replace_metadata": promoted.replace_metadata,
                },
            )
        )
