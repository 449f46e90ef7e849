"""Domain models for staged uploads and their promotion."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

STAGING_PREFIX = "upload/"
UPLOAD_CREDENTIAL_TTL_SECONDS = 15 * 60


class MediaKind(str, Enum):
    """Kinds of media the pipeline accepts."""

    AUDIO = "audio"
    IMAGE = "image"


@dataclass(frozen=True, slots=True)
class Accepted:
    media_kind: MediaKind
    extension: str

    @property
    def accepted(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Rejected:
    reason: str
    code: str = "policy_rejected"

    @property
    def accepted(self) -> bool:
        return False


ValidationOutcome = Union[Accepted, Rejected]


@dataclass(frozen=True, slots=True)
class CopyPolicy:
    """How destination metadata is derived when an object is copied."""

    content_type_override: str | None = None
    replace_metadata: bool = False

    def __post_init__(self) -> None:
        if self.content_type_override is not None and not self.replace_metadata:
            raise ValueError("content_type_override requires replace_metadata.")


AUDIO_COPY_POLICY = CopyPolicy(content_type_override="audio/mpeg", replace_metadata=True)
INHERIT_COPY_POLICY = CopyPolicy()


@dataclass(frozen=True, slots=True)
class PromotedObject:
    """Validated object copied to its permanent key and confirmed visible."""

    key: str
    source_key: str
    content_type: str | None
    replace_metadata: bool


@dataclass(frozen=True, slots=True)
class UploadCredential:
    """Presigned write URL bound to a fresh staging key."""

    url: str
    key: str
    expires_in: int = UPLOAD_CREDENTIAL_TTL_SECONDS
