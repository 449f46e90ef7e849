"""DDD application layer."""

from .deadline import Deadline
from .event_publisher import EventPublisher, NullEventPublisher
from .object_store import ObjectHead, ObjectStore
from .promotion_service import AudioPromotion, ImagePromotion, PromoteStagedMedia
from .upload_service import IssueUploadCredential, staging_key_for

__all__ = [
    "Deadline",
    "EventPublisher",
    "NullEventPublisher",
    "ObjectHead",
    "ObjectStore",
    "AudioPromotion",
    "ImagePromotion",
    "PromoteStagedMedia",
    "IssueUploadCredential",
    "staging_key_for",
]
