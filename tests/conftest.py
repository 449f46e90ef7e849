from __future__ import annotations

import math
from datetime import timedelta

import pytest

from meditation_media.application.object_store import ObjectHead
from meditation_media.domain.errors import ObjectNotFound, PresignError, StoreUnavailable

_MPEG1_BITRATE_IDX = {32: 1, 40: 2, 48: 3, 56: 4, 64: 5, 80: 6, 96: 7, 112: 8, 128: 9, 160: 10, 192: 11, 224: 12, 256: 13, 320: 14}
_MPEG2_BITRATE_IDX = {8: 1, 16: 2, 24: 3, 32: 4, 40: 5, 48: 6, 56: 7, 64: 8, 80: 9, 96: 10, 112: 11, 128: 12, 144: 13, 160: 14}
_SAMPLE_IDX = {
    "1": {44_100: 0, 48_000: 1, 32_000: 2},
    "2": {22_050: 0, 24_000: 1, 16_000: 2},
    "2.5": {11_025: 0, 12_000: 1, 8_000: 2},
}
_VERSION_BITS = {"1": 0x3, "2": 0x2, "2.5": 0x0}


def _build_frame(*, version: str = "1", bitrate_kbps: int = 32, sample_rate: int = 32_000, layer_bits: int = 0x1, channel_mode: int = 0) -> bytes:
    bitrate_idx = (_MPEG1_BITRATE_IDX if version == "1" else _MPEG2_BITRATE_IDX)[bitrate_kbps]
    header = 0
    header |= 0x7FF << 21
    header |= _VERSION_BITS[version] << 19
    header |= layer_bits << 17
    header |= 0x1 << 16  # no CRC
    header |= bitrate_idx << 12
    header |= _SAMPLE_IDX[version][sample_rate] << 10
    header |= channel_mode << 6
    coefficient = 144_000 if version == "1" else 72_000
    frame_len = coefficient * bitrate_kbps // sample_rate
    return header.to_bytes(4, "big") + b"\x00" * (frame_len - 4)


def _build_mp3(*, seconds: float = 1.0, version: str = "1", bitrate_kbps: int = 32, sample_rate: int = 32_000) -> bytes:
    samples_per_frame = 1152 if version == "1" else 576
    frame = _build_frame(version=version, bitrate_kbps=bitrate_kbps, sample_rate=sample_rate)
    frame_count = max(1, math.ceil(seconds * sample_rate / samples_per_frame))
    return frame * frame_count


def _build_id3v2_tag(payload: bytes = b"TEST" * 3) -> bytes:
    size = len(payload)
    synchsafe_size = bytes([(size >> 21) & 0x7F, (size >> 14) & 0x7F, (size >> 7) & 0x7F, size & 0x7F])
    return b"ID3" + b"\x04\x00" + b"\x00" + synchsafe_size + payload


class InMemoryObjectStore:
    """Object store port backed by a dict, recording every call."""

    def __init__(self) -> None:
        self.objects: dict[str, tuple[bytes, str | None]] = {}
        self.calls: list[str] = []
        self.copy_calls: list[dict[str, object]] = []
        self.wait_calls: list[tuple[str, float | None]] = []
        self.presigned: list[tuple[str, timedelta]] = []
        self.fail_copy = False
        self.fail_wait = False
        self.fail_presign = False

    def put(self, key: str, body: bytes, content_type: str | None = None) -> None:
        self.objects[key] = (body, content_type)

    def get_object(self, key: str, *, max_bytes: int | None = None) -> bytes:
        self.calls.append("get")
        if key not in self.objects:
            raise ObjectNotFound(f"Object '{key}' not found.")
        body = self.objects[key][0]
        return body if max_bytes is None else body[: max_bytes + 1]

    def head_object(self, key: str) -> ObjectHead:
        self.calls.append("head")
        if key not in self.objects:
            raise ObjectNotFound(f"Object '{key}' not found.")
        body, content_type = self.objects[key]
        return ObjectHead(key=key, content_type=content_type, size=len(body))

    def copy_object(self, source_key: str, dest_key: str, *, content_type: str | None = None, replace_metadata: bool = False) -> None:
        self.calls.append("copy")
        self.copy_calls.append(
            {"source": source_key, "dest": dest_key, "content_type": content_type, "replace_metadata": replace_metadata}
        )
        if self.fail_copy:
            raise StoreUnavailable("copy failed")
        body, source_type = self.objects[source_key]
        self.objects[dest_key] = (body, content_type if replace_metadata else source_type)

    def wait_until_exists(self, key: str, *, timeout: float | None = None) -> None:
        self.calls.append("wait")
        self.wait_calls.append((key, timeout))
        if self.fail_wait or key not in self.objects:
            raise StoreUnavailable(f"Timed out waiting for '{key}' to exist.", code="wait_timeout")

    def presign_put(self, key: str, ttl: timedelta) -> str:
        self.calls.append("presign")
        if self.fail_presign:
            raise PresignError("missing signing configuration")
        self.presigned.append((key, ttl))
        return f"https://storage.local/bucket/{key}?X-Amz-Expires={int(ttl.total_seconds())}"


class RecordingPublisher:
    def __init__(self) -> None:
        self.events = []

    def publish(self, event) -> None:
        self.events.append(event)


@pytest.fixture
def store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def mp3_frame():
    """Builder for a single silent Layer III frame."""

    return _build_frame


@pytest.fixture
def mp3_bytes():
    """Builder for a stream of identical frames lasting at least ``seconds``."""

    return _build_mp3


@pytest.fixture
def id3v2_tag():
    return _build_id3v2_tag
