# Domain Package
from .errors import (
    DeckFormatError,
    InvalidQualityError,
    InvalidTimestampError,
    ItemNotFoundError,
    RetainError,
    StoreError,
)
from .models import DailyStat, Item, ProgressStats, ReviewOutcome
from .validation import validate_quality

__all__ = [
    "Item",
    "ReviewOutcome",
    "DailyStat",
    "ProgressStats",
    "RetainError",
    "InvalidQualityError",
    "InvalidTimestampError",
    "ItemNotFoundError",
    "DeckFormatError",
    "StoreError",
    "validate_quality",
]
