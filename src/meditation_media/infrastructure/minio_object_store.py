"""S3-compatible object store adapter backed by the MinIO client."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Any, Callable

import urllib3
from urllib3.exceptions import HTTPError

from meditation_media.application.object_store import ObjectHead
from meditation_media.config import MediaConfig
from meditation_media.domain.errors import ObjectNotFound, PresignError, StoreUnavailable

if TYPE_CHECKING:
    from minio import Minio

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"NoSuchKey", "NoSuchObject", "NotFound", "ResourceNotFound"}
_DEFAULT_STORE_TIMEOUT_SECONDS = 300.0
_CONNECT_TIMEOUT_SECONDS = 10.0


def build_http_client(config: MediaConfig) -> urllib3.PoolManager:
    """Connection pool bounded by the invocation budget, with transport retries disabled."""

    read_timeout = config.invocation_timeout_seconds or _DEFAULT_STORE_TIMEOUT_SECONDS
    return urllib3.PoolManager(
        timeout=urllib3.Timeout(connect=min(_CONNECT_TIMEOUT_SECONDS, read_timeout), read=read_timeout),
        maxsize=10,
        cert_reqs="CERT_REQUIRED",
        retries=urllib3.Retry(total=0, redirect=False),
    )


def build_minio_client(config: MediaConfig) -> "Minio":
    """Build a MinIO client for the configured endpoint."""

    from minio import Minio

    return Minio(
        endpoint=config.endpoint,
        access_key=config.access_key,
        secret_key=config.secret_key,
        secure=config.secure,
        region=config.region,
        http_client=build_http_client(config),
    )


def _store_error(operation: str, bucket: str, key: str, error: Exception) -> StoreUnavailable:
    if getattr(error, "code", None) in _NOT_FOUND_CODES:
        return ObjectNotFound(f"Object '{key}' not found in bucket '{bucket}'.")

    logger.warning(
        "Object store operation failed.",
        exc_info=error,
        extra={"operation": operation, "bucket": bucket, "key": key},
    )
    return StoreUnavailable(f"Object store {operation} failed for '{key}'.")


@dataclass(slots=True)
class MinIOObjectStore:
    """Adapter implementing the object store port for a single bucket."""

    client: Any
    bucket: str
    wait_delay_seconds: float = 5.0
    wait_max_attempts: int = 20
    sleep: Callable[[float], None] = time.sleep
    clock: Callable[[], float] = time.monotonic

    @classmethod
    def from_config(cls, config: MediaConfig, client: Any | None = None) -> "MinIOObjectStore":
        return cls(
            client=client if client is not None else build_minio_client(config),
            bucket=config.bucket,
            wait_delay_seconds=config.wait_delay_seconds,
            wait_max_attempts=config.wait_max_attempts,
        )

    def get_object(self, key: str, *, max_bytes: int | None = None) -> bytes:
        from minio.error import MinioException

        response = None
        try:
            response = self.client.get_object(bucket_name=self.bucket, object_name=key)
            if max_bytes is None:
                return response.read()
            return response.read(max_bytes + 1)
        except (MinioException, HTTPError, OSError) as error:
            raise _store_error("get", self.bucket, key, error) from error
        finally:
            if response is not None:
                response.close()
                response.release_conn()

    def head_object(self, key: str) -> ObjectHead:
        from minio.error import MinioException

        try:
            stat = self.client.stat_object(bucket_name=self.bucket, object_name=key)
        except (MinioException, HTTPError, OSError) as error:
            raise _store_error("head", self.bucket, key, error) from error
        return ObjectHead(key=key, content_type=stat.content_type, size=stat.size)

    def copy_object(
        self,
        source_key: str,
        dest_key: str,
        *,
        content_type: str | None = None,
        replace_metadata: bool = False,
    ) -> None:
        from minio.commonconfig import COPY, REPLACE, CopySource
        from minio.error import MinioException

        metadata = {"Content-Type": content_type} if content_type else None
        try:
            self.client.copy_object(
                bucket_name=self.bucket,
                object_name=dest_key,
                source=CopySource(self.bucket, source_key),
                metadata=metadata,
                metadata_directive=REPLACE if replace_metadata else COPY,
            )
        except (MinioException, HTTPError, OSError) as error:
            raise _store_error("copy", self.bucket, source_key, error) from error
        logger.info(
            "Copied staged object.",
            extra={"bucket": self.bucket, "source_key": source_key, "dest_key": dest_key, "content_type": content_type},
        )

    def wait_until_exists(self, key: str, *, timeout: float | None = None) -> None:
        """Poll ``stat_object`` until ``key`` is visible.

        Gives up after ``wait_max_attempts`` polls or once ``timeout`` seconds
        have elapsed, whichever comes first.
        """

        give_up_at = None if timeout is None else self.clock() + timeout
        for attempt in range(1, self.wait_max_attempts + 1):
            try:
                self.head_object(key)
                return
            except ObjectNotFound:
                pass

            if attempt == self.wait_max_attempts:
                break
            delay = self.wait_delay_seconds
            if give_up_at is not None:
                remaining = give_up_at - self.clock()
                if remaining <= 0:
                    break
                delay = min(delay, remaining)
            self.sleep(delay)

        raise StoreUnavailable(f"Timed out waiting for '{key}' to exist.", code="wait_timeout")

    def presign_put(self, key: str, ttl: timedelta) -> str:
        try:
            return self.client.presigned_put_object(bucket_name=self.bucket, object_name=key, expires=ttl)
        except Exception as error:  # noqa: BLE001
            logger.warning("Presigning upload failed.", exc_info=error, extra={"bucket": self.bucket, "key": key})
            raise PresignError(f"Could not presign upload for '{key}'.") from error
