"""Classification of staged objects by their store-recorded content type."""

from __future__ import annotations

from meditation_media.domain.models import Accepted, MediaKind, Rejected, ValidationOutcome

UNKNOWN_IMAGE_TYPE = "unknown image type"

IMAGE_EXTENSIONS: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
}

AUDIO_EXTENSION = ".mp3"


def classify_image_content_type(content_type: str | None) -> ValidationOutcome:
    """Map a declared content type to a canonical image extension.

    Only exact matches are accepted; anything unrecognized is rejected.
    """

    extension = IMAGE_EXTENSIONS.get(content_type or "")
    if extension is None:
        return Rejected(reason=UNKNOWN_IMAGE_TYPE, code="unknown_image_type")
    return Accepted(media_kind=MediaKind.IMAGE, extension=extension)


def content_type_for_extension(extension: str) -> str | None:
    for content_type, known in IMAGE_EXTENSIONS.items():
        if known == extension:
            return content_type
    return None
