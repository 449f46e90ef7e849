"""Application port for the blob store holding staged and promoted media."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Protocol


@dataclass(frozen=True, slots=True)
class ObjectHead:
    """Metadata returned by a head request."""

    key: str
    content_type: str | None
    size: int | None


class ObjectStore(Protocol):
    """Port implemented by infrastructure adapters bound to a single bucket.

    Adapters raise ``ObjectNotFound`` for missing keys, ``StoreUnavailable``
    for any other store failure and ``PresignError`` from ``presign_put``.
    """

    def get_object(self, key: str, *, max_bytes: int | None = None) -> bytes:
        """Return the object body, reading at most ``max_bytes + 1`` bytes when bounded."""

    def head_object(self, key: str) -> ObjectHead:
        """Return object metadata without transferring the body."""

    def copy_object(
        self,
        source_key: str,
        dest_key: str,
        *,
        content_type: str | None = None,
        replace_metadata: bool = False,
    ) -> None:
        """Server-side copy within the bucket."""

    def wait_until_exists(self, key: str, *, timeout: float | None = None) -> None:
        """Block until ``key`` is visible or the bounded poll gives up."""

    def presign_put(self, key: str, ttl: timedelta) -> str:
        """Return a presigned URL allowing a single PUT to ``key``."""
