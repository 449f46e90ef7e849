"""User-facing URLs for promoted objects."""

from __future__ import annotations


def public_audio_url(public_base: str, audio_id: str) -> str:
    return f"https://{public_base}/{audio_id}.mp3"


def public_url_for_suffix(public_base: str, suffix: str) -> str:
    return f"https://{public_base}/{suffix.lstrip('/')}"
