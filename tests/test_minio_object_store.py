from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace

import pytest
from minio.commonconfig import COPY, REPLACE
from minio.error import MinioException

from meditation_media.config import MediaConfig
from meditation_media.domain.errors import ObjectNotFound, PresignError, StoreUnavailable
from meditation_media.infrastructure.minio_object_store import MinIOObjectStore, build_http_client, build_minio_client


class _S3Error(MinioException):
    def __init__(self, code: str) -> None:
        super().__init__(f"S3 operation failed; code: {code}")
        self.code = code


def _s3_error(code: str) -> _S3Error:
    return _S3Error(code)


class _FakeResponse:
    def __init__(self, body: bytes) -> None:
        self._body = body
        self.read_sizes: list[int | None] = []
        self.closed = False
        self.released = False

    def read(self, amt: int | None = None) -> bytes:
        self.read_sizes.append(amt)
        return self._body if amt is None else self._body[:amt]

    def close(self) -> None:
        self.closed = True

    def release_conn(self) -> None:
        self.released = True


class _FakeMinioClient:
    def __init__(self) -> None:
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.copy_calls: list[dict] = []
        self.stat_calls = 0
        self.responses: list[_FakeResponse] = []
        self.visible_after = 0

    def get_object(self, bucket_name: str, object_name: str) -> _FakeResponse:
        if object_name not in self.objects:
            raise _s3_error("NoSuchKey")
        response = _FakeResponse(self.objects[object_name][0])
        self.responses.append(response)
        return response

    def stat_object(self, bucket_name: str, object_name: str):
        self.stat_calls += 1
        if object_name not in self.objects or self.stat_calls <= self.visible_after:
            raise _s3_error("NoSuchKey")
        body, content_type = self.objects[object_name]
        return SimpleNamespace(content_type=content_type, size=len(body))

    def copy_object(self, bucket_name: str, object_name: str, source, metadata=None, metadata_directive=None) -> None:
        self.copy_calls.append(
            {
                "bucket": bucket_name,
                "dest": object_name,
                "source_bucket": source.bucket_name,
                "source_key": source.object_name,
                "metadata": metadata,
                "metadata_directive": metadata_directive,
            }
        )

    def presigned_put_object(self, bucket_name: str, object_name: str, expires: timedelta) -> str:
        return f"https://storage.local/{bucket_name}/{object_name}?expires={int(expires.total_seconds())}"


def _store(client: _FakeMinioClient, **kwargs) -> MinIOObjectStore:
    return MinIOObjectStore(client=client, bucket="unit-test-bucket", **kwargs)


def test_get_object_reads_bounded_body_and_releases_connection() -> None:
    client = _FakeMinioClient()
    client.objects["upload/a"] = (b"x" * 100, "audio/mpeg")

    body = _store(client).get_object("upload/a", max_bytes=10)

    assert body == b"x" * 11
    assert client.responses[0].read_sizes == [11]
    assert client.responses[0].closed and client.responses[0].released


def test_missing_object_maps_to_not_found() -> None:
    store = _store(_FakeMinioClient())

    with pytest.raises(ObjectNotFound):
        store.get_object("upload/missing")
    with pytest.raises(ObjectNotFound):
        store.head_object("upload/missing")


def test_other_store_errors_map_to_store_unavailable() -> None:
    client = _FakeMinioClient()

    def denied(bucket_name: str, object_name: str):
        raise _s3_error("AccessDenied")

    client.stat_object = denied

    with pytest.raises(StoreUnavailable) as exc:
        _store(client).head_object("upload/a")

    assert not isinstance(exc.value, ObjectNotFound)
    assert exc.value.code == "store_unavailable"


def test_head_object_returns_declared_content_type() -> None:
    client = _FakeMinioClient()
    client.objects["upload/img"] = (b"png", "image/png")

    head = _store(client).head_object("upload/img")

    assert head.content_type == "image/png"
    assert head.size == 3


def test_copy_with_replace_sets_content_type() -> None:
    client = _FakeMinioClient()

    _store(client).copy_object("upload/a", "abc.mp3", content_type="audio/mpeg", replace_metadata=True)

    assert client.copy_calls == [
        {
            "bucket": "unit-test-bucket",
            "dest": "abc.mp3",
            "source_bucket": "unit-test-bucket",
            "source_key": "upload/a",
            "metadata": {"Content-Type": "audio/mpeg"},
            "metadata_directive": REPLACE,
        }
    ]


def test_copy_without_replace_inherits_metadata() -> None:
    client = _FakeMinioClient()

    _store(client).copy_object("upload/img", "photo/u.png")

    assert client.copy_calls[0]["metadata"] is None
    assert client.copy_calls[0]["metadata_directive"] == COPY


def test_wait_until_exists_polls_with_delay() -> None:
    client = _FakeMinioClient()
    client.objects["abc.mp3"] = (b"x", "audio/mpeg")
    client.visible_after = 2
    sleeps: list[float] = []

    _store(client, wait_delay_seconds=5.0, sleep=sleeps.append).wait_until_exists("abc.mp3")

    assert client.stat_calls == 3
    assert sleeps == [5.0, 5.0]


def test_wait_until_exists_gives_up_after_max_attempts() -> None:
    client = _FakeMinioClient()
    sleeps: list[float] = []

    with pytest.raises(StoreUnavailable) as exc:
        _store(client, wait_max_attempts=3, sleep=sleeps.append).wait_until_exists("never.mp3")

    assert exc.value.code == "wait_timeout"
    assert client.stat_calls == 3
    assert len(sleeps) == 2


def test_wait_until_exists_respects_timeout() -> None:
    client = _FakeMinioClient()
    now = {"value": 0.0}

    def fake_sleep(seconds: float) -> None:
        now["value"] += seconds

    store = _store(client, wait_delay_seconds=5.0, sleep=fake_sleep, clock=lambda: now["value"])

    with pytest.raises(StoreUnavailable):
        store.wait_until_exists("never.mp3", timeout=7.0)

    assert now["value"] == 7.0
    assert client.stat_calls == 3


def test_presign_put_uses_ttl() -> None:
    url = _store(_FakeMinioClient()).presign_put("upload/k", timedelta(minutes=15))

    assert url == "https://storage.local/unit-test-bucket/upload/k?expires=900"


def test_presign_failure_raises_presign_error() -> None:
    client = _FakeMinioClient()

    def broken(bucket_name: str, object_name: str, expires: timedelta) -> str:
        raise ValueError("missing credentials")

    client.presigned_put_object = broken

    with pytest.raises(PresignError):
        _store(client).presign_put("upload/k", timedelta(minutes=15))


def test_from_config_binds_bucket_and_wait_settings() -> None:
    config = MediaConfig(bucket="audio-bucket", wait_delay_seconds=1.5, wait_max_attempts=4)

    store = MinIOObjectStore.from_config(config, client=_FakeMinioClient())

    assert store.bucket == "audio-bucket"
    assert store.wait_delay_seconds == 1.5
    assert store.wait_max_attempts == 4


@pytest.mark.parametrize(
    ("budget", "connect", "read"),
    [(30.0, 10.0, 30.0), (4.0, 4.0, 4.0), (None, 10.0, 300.0)],
)
def test_http_client_timeouts_follow_invocation_budget(budget, connect, read) -> None:
    pool = build_http_client(MediaConfig(invocation_timeout_seconds=budget))

    timeout = pool.connection_pool_kw["timeout"]
    assert timeout.connect_timeout == connect
    assert timeout.read_timeout == read
    assert pool.connection_pool_kw["retries"].total == 0


def test_minio_client_is_built_on_bounded_pool() -> None:
    client = build_minio_client(MediaConfig(endpoint="localhost:9000", invocation_timeout_seconds=30.0))

    timeout = client._http.connection_pool_kw["timeout"]
    assert timeout.read_timeout <= 30.0
    assert timeout.connect_timeout <= 30.0
