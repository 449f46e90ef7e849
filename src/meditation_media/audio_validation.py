"""Audio ingest validation service.

Decodes enough of a staged MP3 to measure its duration and enforces the size
and duration limits before the object is allowed to leave the staging prefix.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from meditation_media.content_types import AUDIO_EXTENSION
from meditation_media.domain.errors import PolicyRejected
from meditation_media.domain.models import Accepted, MediaKind
from meditation_media.domain.policies import DEFAULT_AUDIO_POLICY, AudioIngestPolicy
from meditation_media.domain.services import check_duration, mp3_duration_seconds
from meditation_media.mp3_decoder import Mp3StreamInfo, decode_mp3


@dataclass(frozen=True, slots=True)
class AudioValidation:
    stream: Mp3StreamInfo
    duration_seconds: int
    outcome: Accepted


def check_size(size_bytes: int, policy: AudioIngestPolicy = DEFAULT_AUDIO_POLICY) -> None:
    if size_bytes > policy.max_file_size_bytes:
        raise PolicyRejected(
            f"Audio file exceeds max size limit of {policy.max_file_size_bytes} bytes.",
            code="file_too_large",
        )


def validate_mp3_bytes(raw_bytes: bytes, policy: AudioIngestPolicy | None = None) -> AudioValidation:
    policy = policy or DEFAULT_AUDIO_POLICY
    check_size(len(raw_bytes), policy)

    stream = decode_mp3(raw_bytes)
    duration_seconds = mp3_duration_seconds(stream.length, stream.sample_rate_hz)
    check_duration(duration_seconds, policy.duration)
    return AudioValidation(
        stream=stream,
        duration_seconds=duration_seconds,
        outcome=Accepted(media_kind=MediaKind.AUDIO, extension=AUDIO_EXTENSION),
    )


def validate_mp3_file(path: Path, policy: AudioIngestPolicy | None = None) -> AudioValidation:
    policy = policy or DEFAULT_AUDIO_POLICY
    if not path.exists() or not path.is_file():
        raise PolicyRejected(f"Audio file not found: {path}", code="file_not_found")
    check_size(path.stat().st_size, policy)
    return validate_mp3_bytes(path.read_bytes(), policy)
