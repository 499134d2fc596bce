"""
Domain models for scheduling and progress.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import date, datetime

from .constants import DEFAULT_STRENGTH_FACTOR, PASSING_QUALITY
from .timestamps import ensure_aware, parse_timestamp
from .validation import validate_quality


@dataclass(frozen=True)
class ReviewOutcome:
    """
    One grading event.

    Attributes:
        timestamp: When the review happened. ISO strings and naive datetimes
            are normalized to an aware datetime.
        quality: Grade given, 1..5.
        was_correct: Recall result; derived from quality when omitted.

    Raises:
        InvalidTimestampError: If the timestamp cannot be parsed.
        InvalidQualityError: If quality is not an integer in 1..5.
    """

    timestamp: datetime
    quality: int
    was_correct: bool | None = None

    def __post_init__(self):
        object.__setattr__(self, "timestamp", parse_timestamp(self.timestamp))
        validate_quality(self.quality)
        if self.was_correct is None:
            object.__setattr__(self, "was_correct", self.quality >= PASSING_QUALITY)


@dataclass(frozen=True)
class Item:
    """
    A reviewable unit of knowledge together with its scheduling state.

    Attributes:
        id: Opaque identifier, stable for the item's lifetime.
        question: Prompt side of the card.
        answer: Answer side of the card.
        strength_factor: Interval growth multiplier (SM-2 ease), never below 1.3.
        interval: Days until the next review; 0 for a brand-new item.
        repetition_count: Consecutive successful reviews since the last lapse.
        next_review_at: Due instant, or None if never scheduled.
        created_at: Creation instant.
        history: Past outcomes in chronological order.
        tags: Free-form labels.
    """

    id: str
    question: str = ""
    answer: str = ""
    strength_factor: float = DEFAULT_STRENGTH_FACTOR
    interval: int = 0
    repetition_count: int = 0
    next_review_at: datetime | None = None
    created_at: datetime | None = None
    history: tuple[ReviewOutcome, ...] = ()
    tags: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        if self.next_review_at is not None:
            object.__setattr__(self, "next_review_at", parse_timestamp(self.next_review_at))
        if self.created_at is not None:
            object.__setattr__(self, "created_at", parse_timestamp(self.created_at))
        if not isinstance(self.history, tuple):
            object.__setattr__(self, "history", tuple(self.history))
        if not isinstance(self.tags, frozenset):
            object.__setattr__(self, "tags", frozenset(self.tags))

    def is_due(self, now: datetime) -> bool:
        return self.next_review_at is not None and self.next_review_at <= ensure_aware(now)

    @property
    def last_outcome(self) -> ReviewOutcome | None:
        return self.history[-1] if self.history else None


@dataclass(frozen=True)
class DailyStat:
    """Review totals for one calendar day."""

    date: date
    reviewed_count: int = 0
    correct_count: int = 0
    incorrect_count: int = 0
    streak: int = 0  # Running streak as of this day

    @property
    def accuracy(self) -> float:
        if self.reviewed_count == 0:
            return 0.0
        return self.correct_count / self.reviewed_count * 100


@dataclass(frozen=True)
class ProgressStats:
    """Summary of a collection of items, as shown on the dashboard."""

    total_cards: int = 0
    due_cards: int = 0
    mastered_cards: int = 0
    learning_cards: int = 0
    new_cards: int = 0
    streak: int = 0
    accuracy: float = 0.0  # Percentage, 0..100
    total_reviews: int = 0
    correct_reviews: int = 0
    last_review_at: datetime | None = None
