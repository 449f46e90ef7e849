"""Domain value objects representing stable acceptance policies."""

from __future__ import annotations

from dataclasses import dataclass

# Decoded length is reported in bytes of 16-bit stereo PCM, i.e. four bytes
# per sample frame.
CHANNEL_FACTOR = 4


@dataclass(frozen=True, slots=True)
class DurationPolicy:
    """Bounds on accepted audio duration, both ends inclusive."""

    policy_id: str
    min_duration_seconds: int = 0
    max_duration_seconds: int = 90
    policy_version: str = "v1"


@dataclass(frozen=True, slots=True)
class AudioIngestPolicy:
    """Size and duration limits applied to staged audio."""

    policy_id: str
    duration: DurationPolicy
    max_file_size_bytes: int = 20 * 1024 * 1024
    policy_version: str = "v1"


DEFAULT_DURATION_POLICY = DurationPolicy(policy_id="meditation-duration-default")
DEFAULT_AUDIO_POLICY = AudioIngestPolicy(policy_id="meditation-audio-default", duration=DEFAULT_DURATION_POLICY)
