"""
Events emitted while studying.

Analytics events form a closed union: each kind carries exactly the fields
it needs.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class SessionStarted:
    timestamp: datetime


@dataclass(frozen=True)
class SessionEnded:
    timestamp: datetime


@dataclass(frozen=True)
class ItemCreated:
    timestamp: datetime
    item_id: str
    tag_count: int


@dataclass(frozen=True)
class ItemReviewed:
    """
    An item was graded.

    Attributes:
        timestamp: When the grade was recorded.
        item_id: The reviewed item.
        quality: Grade given, 1..5.
        response_time_ms: Time the learner took to answer.
        repetition_count: Repetition count before the review was applied.
        strength_factor: Strength factor before the review was applied.
    """

    timestamp: datetime
    item_id: str
    quality: int
    response_time_ms: int
    repetition_count: int
    strength_factor: float


AnalyticsEvent = SessionStarted | SessionEnded | ItemCreated | ItemReviewed


class SoundCue(str, Enum):
    FLIP = "flip"
    SUCCESS = "success"
    ERROR = "error"
    CLICK = "click"
    COMPLETE = "complete"
