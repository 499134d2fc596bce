"""
SM-2 scheduler.

Applies one graded review to an item's scheduling state. This is a pure
computation module with no I/O; the review instant is always passed in.
"""

import logging
import math
from dataclasses import replace
from datetime import datetime, timedelta

from retain.domain.constants import (
    FIRST_INTERVAL_DAYS,
    LAPSE_INTERVAL_DAYS,
    MAX_QUALITY,
    MIN_STRENGTH_FACTOR,
    PASSING_QUALITY,
    SECOND_INTERVAL_DAYS,
)
from retain.domain.models import Item, ReviewOutcome
from retain.domain.timestamps import ensure_aware
from retain.domain.validation import validate_quality

__all__ = ["apply_review", "next_strength_factor", "round_half_up", "validate_quality"]

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero.

    Python's round() uses banker's rounding (round(2.5) == 2); intervals
    use the schoolbook rule so 7.5 days becomes 8.
    """
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def next_strength_factor(strength_factor: float, quality: int) -> float:
    """
    SM-2 ease update, floored at 1.3.

    quality=5 adds 0.1, quality=4 leaves it unchanged, lower grades subtract
    a penalty that grows quadratically.
    """
    miss = MAX_QUALITY - quality
    return max(MIN_STRENGTH_FACTOR, strength_factor + (0.1 - miss * (0.08 + miss * 0.02)))


def _sanitize(item: Item) -> tuple[float, int, int]:
    """Clamp scheduling fields that external state may have corrupted."""
    strength = item.strength_factor
    interval = item.interval
    reps = item.repetition_count

    if strength < MIN_STRENGTH_FACTOR:
        logger.warning(
            f"Item {item.id} has strength factor {strength} below floor; clamping to "
            f"{MIN_STRENGTH_FACTOR}"
        )
        strength = MIN_STRENGTH_FACTOR
    if interval < 0:
        logger.warning(f"Item {item.id} has negative interval {interval}; clamping to 0")
        interval = 0
    if reps < 0:
        logger.warning(f"Item {item.id} has negative repetition count {reps}; clamping to 0")
        reps = 0
    if reps >= 2 and interval == 0:
        logger.warning(f"Item {item.id} has {reps} repetitions but a zero interval")

    return strength, interval, reps


def apply_review(
    item: Item,
    quality: int,
    now: datetime,
    record_history: bool = True,
) -> Item:
    """
    Apply one review outcome and return the rescheduled item.

    Args:
        item: Current item state. Not modified.
        quality: Grade 1..5; 3 and above is a successful recall.
        now: The review instant. The new due date is this plus the interval,
            added as calendar days so wall-clock time survives DST changes.
        record_history: Append a ReviewOutcome to the item's history.

    Returns:
        A new Item with strength, interval, repetitions, and due date replaced.

    Raises:
        InvalidQualityError: If quality is not an integer in 1..5.
    """
    quality = validate_quality(quality)
    now = ensure_aware(now)
    strength, interval, reps = _sanitize(item)

    new_strength = next_strength_factor(strength, quality)

    if quality < PASSING_QUALITY:
        new_interval = LAPSE_INTERVAL_DAYS
        new_reps = 0
    elif reps == 0:
        new_interval = FIRST_INTERVAL_DAYS
        new_reps = 1
    elif reps == 1:
        new_interval = SECOND_INTERVAL_DAYS
        new_reps = 2
    else:
        new_interval = max(1, round_half_up(interval * new_strength))
        new_reps = reps + 1

    history = item.history
    if record_history:
        history = history + (ReviewOutcome(timestamp=now, quality=quality),)

    logger.debug(
        f"Scheduled {item.id}: q={quality} sf={new_strength:.2f} "
        f"interval={new_interval} reps={new_reps}"
    )

    return replace(
        item,
        strength_factor=new_strength,
        interval=new_interval,
        repetition_count=new_reps,
        next_review_at=now + timedelta(days=new_interval),
        history=history,
    )
