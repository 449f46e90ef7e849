"""Error taxonomy for the upload, validate and promote pipeline."""

from __future__ import annotations


class MediaPipelineError(Exception):
    """Base error carrying a stable machine code and a readable message."""

    default_code = "pipeline_error"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code or self.default_code
        self.message = message

    def as_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


class StoreUnavailable(MediaPipelineError):
    """Object store network, permission or availability failure."""

    default_code = "store_unavailable"


class ObjectNotFound(StoreUnavailable):
    """The requested key does not exist in the object store."""

    default_code = "object_not_found"


class DecodeError(MediaPipelineError):
    """Malformed or unrecognized audio bitstream."""

    default_code = "decode_error"


class PolicyRejected(MediaPipelineError):
    """The object is well formed but violates an acceptance policy."""

    default_code = "policy_rejected"


class PresignError(MediaPipelineError):
    """A presigned upload credential could not be issued."""

    default_code = "presign_failed"
