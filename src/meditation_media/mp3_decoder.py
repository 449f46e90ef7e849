"""MPEG audio Layer III stream header decoder.

This module walks the frame headers of an MP3 bitstream to report how much
audio it holds, without decoding any frame to PCM. The reported ``length`` is
the size in bytes that a 16-bit stereo PCM decode of the stream would produce,
which is the unit :func:`meditation_media.domain.services.mp3_duration_seconds`
expects.
"""

from __future__ import annotations

from dataclasses import dataclass

from meditation_media.domain.errors import DecodeError

PCM_BYTES_PER_SAMPLE_FRAME = 4

_VERSION_MPEG1 = 0x3
_VERSION_MPEG2 = 0x2
_VERSION_MPEG25 = 0x0
_LAYER_III = 0x1

_VERSION_NAMES = {_VERSION_MPEG1: "1", _VERSION_MPEG2: "2", _VERSION_MPEG25: "2.5"}
_LAYER_NUMBERS = {0x3: 1, 0x2: 2, 0x1: 3}

_BITRATES_KBPS = {
    _VERSION_MPEG1: (0, 32, 40, 48, 56, 64, 80, 96, 112, 128, 160, 192, 224, 256, 320, 0),
    _VERSION_MPEG2: (0, 8, 16, 24, 32, 40, 48, 56, 64, 80, 96, 112, 128, 144, 160, 0),
}
_BITRATES_KBPS[_VERSION_MPEG25] = _BITRATES_KBPS[_VERSION_MPEG2]

_SAMPLE_RATES_HZ = {
    _VERSION_MPEG1: (44_100, 48_000, 32_000),
    _VERSION_MPEG2: (22_050, 24_000, 16_000),
    _VERSION_MPEG25: (11_025, 12_000, 8_000),
}


@dataclass(frozen=True, slots=True)
class FrameHeader:
    version: int
    layer: int
    bitrate_kbps: int
    sample_rate_hz: int
    padding: int
    channel_mode: int

    @property
    def samples_per_frame(self) -> int:
        return 1152 if self.version == _VERSION_MPEG1 else 576

    @property
    def frame_length(self) -> int:
        coefficient = 144_000 if self.version == _VERSION_MPEG1 else 72_000
        return coefficient * self.bitrate_kbps // self.sample_rate_hz + self.padding

    @property
    def channel_count(self) -> int:
        return 1 if self.channel_mode == 0x3 else 2


@dataclass(frozen=True, slots=True)
class Mp3StreamInfo:
    version: str
    sample_rate_hz: int
    channel_count: int
    frame_count: int
    sample_frames: int

    @property
    def length(self) -> int:
        """Decoded size in bytes of 16-bit stereo PCM."""

        return self.sample_frames * PCM_BYTES_PER_SAMPLE_FRAME


def parse_frame_header(raw_bytes: bytes, offset: int) -> FrameHeader | None:
    """Parse the 4-byte frame header at ``offset``; ``None`` if it is not one."""

    if offset + 4 > len(raw_bytes):
        return None
    candidate = int.from_bytes(raw_bytes[offset : offset + 4], "big")
    if ((candidate >> 21) & 0x7FF) != 0x7FF:
        return None

    version = (candidate >> 19) & 0x3
    layer_bits = (candidate >> 17) & 0x3
    bitrate_idx = (candidate >> 12) & 0xF
    sample_idx = (candidate >> 10) & 0x3
    if version not in _VERSION_NAMES or layer_bits not in _LAYER_NUMBERS:
        return None
    if bitrate_idx in (0, 0xF) or sample_idx == 0x3:
        return None

    return FrameHeader(
        version=version,
        layer=_LAYER_NUMBERS[layer_bits],
        bitrate_kbps=_BITRATES_KBPS[version][bitrate_idx],
        sample_rate_hz=_SAMPLE_RATES_HZ[version][sample_idx],
        padding=(candidate >> 9) & 0x1,
        channel_mode=(candidate >> 6) & 0x3,
    )


def skip_id3v2(raw_bytes: bytes) -> int:
    """Return the offset of the first byte after a leading ID3v2 tag."""

    if not raw_bytes.startswith(b"ID3"):
        return 0
    if len(raw_bytes) < 10:
        raise DecodeError("Corrupted ID3v2 tag.", code="corrupted_file")
    tag_size = (
        ((raw_bytes[6] & 0x7F) << 21)
        | ((raw_bytes[7] & 0x7F) << 14)
        | ((raw_bytes[8] & 0x7F) << 7)
        | (raw_bytes[9] & 0x7F)
    )
    offset = 10 + tag_size
    if raw_bytes[5] & 0x10:
        offset += 10
    return offset


def _next_sync(raw_bytes: bytes, start: int) -> int:
    position = raw_bytes.find(b"\xff", start)
    return len(raw_bytes) if position < 0 else position


def _find_first_frame(raw_bytes: bytes, start: int) -> tuple[int, FrameHeader] | None:
    offset = _next_sync(raw_bytes, start)
    while offset + 4 <= len(raw_bytes):
        header = parse_frame_header(raw_bytes, offset)
        if header is not None:
            return offset, header
        offset = _next_sync(raw_bytes, offset + 1)
    return None


def decode_mp3(raw_bytes: bytes) -> Mp3StreamInfo:
    """Walk every Layer III frame header and report the stream's extent."""

    if not raw_bytes:
        raise DecodeError("Audio file is empty.", code="empty_file")

    found = _find_first_frame(raw_bytes, skip_id3v2(raw_bytes))
    if found is None:
        raise DecodeError("No valid MP3 frame header found.", code="no_valid_frame")

    offset, first = found
    if first.layer != 3:
        raise DecodeError(f"Only MPEG Layer III is supported, found layer {first.layer}.", code="unsupported_codec")
    if offset + first.frame_length > len(raw_bytes):
        raise DecodeError("MP3 stream is truncated before the end of its first frame.", code="truncated_stream")

    frame_count = 0
    sample_frames = 0
    while offset + 4 <= len(raw_bytes):
        if raw_bytes[offset : offset + 3] == b"TAG":
            break
        header = parse_frame_header(raw_bytes, offset)
        if (
            header is None
            or header.layer != 3
            or header.version != first.version
            or header.sample_rate_hz != first.sample_rate_hz
        ):
            offset = _next_sync(raw_bytes, offset + 1)
            continue
        if offset + header.frame_length > len(raw_bytes):
            break
        frame_count += 1
        sample_frames += header.samples_per_frame
        offset += header.frame_length

    return Mp3StreamInfo(
        version=_VERSION_NAMES[first.version],
        sample_rate_hz=first.sample_rate_hz,
        channel_count=first.channel_count,
        frame_count=frame_count,
        sample_frames=sample_frames,
    )
