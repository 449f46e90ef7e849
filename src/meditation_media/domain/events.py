"""Domain event contracts for upload and promotion workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True, slots=True)
class DomainEvent:
    """Base domain event emitted by application services."""

    correlation_id: str
    payload_summary: dict[str, Any]
    occurred_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


@dataclass(frozen=True, slots=True)
class UploadIssued(DomainEvent):
    """A presigned upload credential was issued for a staging key."""


@dataclass(frozen=True, slots=True)
class MediaValidated(DomainEvent):
    """A staged object passed validation."""


@dataclass(frozen=True, slots=True)
class MediaRejected(DomainEvent):
    """A staged object failed content validation."""


@dataclass(frozen=True, slots=True)
class MediaPromoted(DomainEvent):
    """A validated object was copied and confirmed at its permanent key."""


@dataclass(frozen=True, slots=True)
class PromotionFailed(DomainEvent):
    """A promotion attempt failed on an infrastructure error."""
