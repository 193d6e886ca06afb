"""Enums for model fields and derived pantry views."""

from enum import Enum


class ItemSource(str, Enum):
    """Provenance of a pantry entry."""

    RECEIPT = "receipt"
    MANUAL = "manual"


class LifespanSource(str, Enum):
    """Where an item's effective lifespan came from."""

    USER_OVERRIDE = "user_override"
    FREQUENCY = "frequency"
    CATEGORY = "category"


class ReceiptStatus(str, Enum):
    """Processing state of an ingested receipt."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
