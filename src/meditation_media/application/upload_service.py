"""Application service issuing presigned upload credentials."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Callable
from uuid import UUID, uuid4

from meditation_media.application.event_publisher import EventPublisher, NullEventPublisher
from meditation_media.application.object_store import ObjectStore
from meditation_media.domain.events import UploadIssued
from meditation_media.domain.models import STAGING_PREFIX, UPLOAD_CREDENTIAL_TTL_SECONDS, UploadCredential


def staging_key_for(upload_id: UUID) -> str:
    return f"{STAGING_PREFIX}{upload_id}"


@dataclass(slots=True)
class IssueUploadCredential:
    """Use case that mints a write-only URL for a fresh staging key."""

    store: ObjectStore
    ttl_seconds: int = UPLOAD_CREDENTIAL_TTL_SECONDS
    id_factory: Callable[[], UUID] = uuid4
    event_publisher: EventPublisher = NullEventPublisher()

    def issue(self, correlation_id: str | None = None) -> UploadCredential:
        key = staging_key_for(self.id_factory())
        url = self.store.presign_put(key, timedelta(seconds=self.ttl_seconds))
        self.event_publisher.publish(
            UploadIssued(
                correlation_id=correlation_id or str(uuid4()),
                payload_summary={"staging_key": key, "expires_in": self.ttl_seconds},
            )
        )
        return UploadCredential(url=url, key=key, expires_in=self.ttl_seconds)
