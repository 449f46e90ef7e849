"""Domain services that contain pure business rules."""

from __future__ import annotations

from meditation_media.domain.errors import DecodeError, PolicyRejected
from meditation_media.domain.policies import CHANNEL_FACTOR, DEFAULT_DURATION_POLICY, DurationPolicy


def mp3_duration_seconds(length: int, sample_rate: int) -> int:
    """Whole seconds of audio for a decoded length in PCM bytes."""

    if sample_rate <= 0:
        raise DecodeError(f"Invalid sample rate: {sample_rate}Hz.", code="invalid_sample_rate")
    return length // sample_rate // CHANNEL_FACTOR


def check_duration(duration_seconds: int, policy: DurationPolicy = DEFAULT_DURATION_POLICY) -> int:
    if duration_seconds < policy.min_duration_seconds:
        raise PolicyRejected(
            f"Audio duration of {duration_seconds} seconds is not valid.",
            code="invalid_duration",
        )
    if duration_seconds > policy.max_duration_seconds:
        raise PolicyRejected(
            f"Audio duration must be at most {policy.max_duration_seconds} seconds, got {duration_seconds}.",
            code="duration_too_long",
        )
    return duration_seconds
