"""
Progress aggregation over a collection of items.

Pure computation: counts by learning stage, accuracy, streaks, and daily
rollups. Results never depend on the order items are passed in.
"""

from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime

from retain.domain.constants import MASTERED_REPETITIONS, RECENT_WINDOW_DAYS
from retain.domain.models import DailyStat, Item, ProgressStats, ReviewOutcome
from retain.domain.timestamps import ensure_aware


def stage_of(item: Item) -> str:
    """Return "mastered", "learning", or "new"."""
    if item.repetition_count >= MASTERED_REPETITIONS:
        return "mastered"
    if item.repetition_count > 0:
        return "learning"
    return "new"


def summarize(items: Iterable[Item], now: datetime) -> ProgressStats:
    """
    Compute dashboard statistics for a set of items.

    Args:
        items: Items to aggregate. Treated as a set; order is irrelevant.
        now: Instant used for due checks and the streak cutoff.

    Returns:
        ProgressStats whose stage buckets always sum to total_cards.

    ReviewOutcome rejects bad grades and timestamps when it is built, so an
    invalid history raises InvalidQualityError or InvalidTimestampError
    before any counting happens.
    """
    now = ensure_aware(now)
    items = list(items)

    buckets = {"mastered": 0, "learning": 0, "new": 0}
    due = 0
    total_reviews = 0
    correct_reviews = 0
    last_review_at: datetime | None = None
    latest_outcomes: list[ReviewOutcome] = []

    for item in items:
        buckets[stage_of(item)] += 1

        if item.is_due(now):
            due += 1

        for outcome in item.history:
            total_reviews += 1
            if outcome.was_correct:
                correct_reviews += 1
            if last_review_at is None or outcome.timestamp > last_review_at:
                last_review_at = outcome.timestamp

        if item.history:
            latest_outcomes.append(max(item.history, key=lambda o: o.timestamp))

    accuracy = correct_reviews / total_reviews * 100 if total_reviews > 0 else 0.0

    return ProgressStats(
        total_cards=len(items),
        due_cards=due,
        mastered_cards=buckets["mastered"],
        learning_cards=buckets["learning"],
        new_cards=buckets["new"],
        streak=current_streak(latest_outcomes, now),
        accuracy=accuracy,
        total_reviews=total_reviews,
        correct_reviews=correct_reviews,
        last_review_at=last_review_at,
    )


def current_streak(latest_outcomes: Iterable[ReviewOutcome], now: datetime) -> int:
    """
    Count correct outcomes walking backward from now until the first miss.

    Expects one outcome per item (its most recent). Outcomes after now are
    ignored. Only days that actually have events are visited, so a quiet day
    does not break the streak. Incorrect outcomes sort ahead of correct ones
    sharing the same instant.
    Several outcomes on the same day each count; a day is not collapsed into
    a single step.
    """
    now = ensure_aware(now)
    visible = [o for o in latest_outcomes if o.timestamp <= now]
    visible.sort(key=lambda o: (o.timestamp, not o.was_correct), reverse=True)

    streak = 0
    for outcome in visible:
        if not outcome.was_correct:
            break
        streak += 1
    return streak


def running_streaks(correct_by_date: Mapping[date, int]) -> dict[date, int]:
    """
    Running streak per day, computed over dates in ascending order.

    A day with at least one correct answer extends the streak; any other
    day resets it to 0.
    """
    streaks: dict[date, int] = {}
    streak = 0
    for day in sorted(correct_by_date):
        streak = streak + 1 if correct_by_date[day] > 0 else 0
        streaks[day] = streak
    return streaks


def daily_progress(items: Iterable[Item]) -> list[DailyStat]:
    """
    Roll review history up into one DailyStat per calendar date.

    Dates are taken in each timestamp's own timezone. Returned newest first.
    """
    reviewed: dict[date, int] = {}
    correct: dict[date, int] = {}

    for item in items:
        for outcome in item.history:
            day = outcome.timestamp.date()
            reviewed[day] = reviewed.get(day, 0) + 1
            correct[day] = correct.get(day, 0) + (1 if outcome.was_correct else 0)

    streaks = running_streaks(correct)

    days = [
        DailyStat(
            date=day,
            reviewed_count=reviewed[day],
            correct_count=correct[day],
            incorrect_count=reviewed[day] - correct[day],
            streak=streaks[day],
        )
        for day in sorted(reviewed)
    ]
    days.reverse()
    return days


def progress_percentage(stats: ProgressStats) -> float:
    """Share of mastered items, 0..100."""
    if stats.total_cards == 0:
        return 0.0
    return stats.mastered_cards / stats.total_cards * 100


def average_accuracy(days: Iterable[DailyStat]) -> float:
    """Mean of per-day accuracy over days that had reviews."""
    rates = [d.accuracy for d in days if d.reviewed_count > 0]
    if not rates:
        return 0.0
    return sum(rates) / len(rates)


def accuracy_change(days: Sequence[DailyStat], window: int = RECENT_WINDOW_DAYS) -> float:
    """
    Relative change of recent accuracy against the overall average, in percent.

    The recent window is the last ``window`` days with reviews. Returns 0 when
    fewer than two days are available or the overall average is 0.
    """
    ordered = sorted((d for d in days if d.reviewed_count > 0), key=lambda d: d.date)
    if len(ordered) < 2:
        return 0.0

    overall = average_accuracy(ordered)
    if overall == 0:
        return 0.0

    recent = average_accuracy(ordered[-window:])
    return (recent - overall) / overall * 100


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def next_review_label(item: Item, now: datetime) -> str:
    """Human-readable time until the item is due."""
    if item.next_review_at is None:
        return "Not scheduled"

    seconds = (item.next_review_at - ensure_aware(now)).total_seconds()
    if seconds <= 0:
        return "Due now"

    hours = int(seconds // 3600)
    minutes = int(seconds % 3600 // 60)

    if hours > 24:
        return f"Due in {_plural(hours // 24, 'day')}"
    if hours > 0:
        return f"Due in {_plural(hours, 'hour')}"
    return f"Due in {_plural(minutes, 'minute')}"
