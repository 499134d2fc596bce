"""
Session analytics.

SessionAnalytics is an AnalyticsSink the caller constructs and injects; it
keeps the events of one study session and derives a report from them.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime

from retain.application.progress import running_streaks
from retain.domain.constants import DIFFICULT_MIN_REVIEWS, PASSING_QUALITY, TOP_ITEMS_LIMIT
from retain.domain.events import AnalyticsEvent, ItemReviewed, SessionEnded, SessionStarted
from retain.domain.ports import AnalyticsSink
from retain.domain.timestamps import Clock, utc_now

logger = logging.getLogger(__name__)


@dataclass
class AnalyticsReport:
    session_start: datetime
    session_end: datetime | None
    total_reviewed: int
    correct_answers: int
    incorrect_answers: int
    average_response_time_ms: float
    most_reviewed: list[str] = field(default_factory=list)
    most_difficult: list[str] = field(default_factory=list)
    study_streak: int = 0


@dataclass
class _ItemTally:
    reviews: int = 0
    correct: int = 0

    @property
    def rate(self) -> float:
        return self.correct / self.reviews if self.reviews else 0.0


class SessionAnalytics(AnalyticsSink):
    """
    Collects study events for one session.

    Not a process-wide singleton: create one per session and pass it to the
    components that emit events.
    """

    def __init__(self, clock: Clock = utc_now):
        self._clock = clock
        self._events: list[AnalyticsEvent] = []
        self._session_start = clock()
        self._session_end: datetime | None = None
        self.record(SessionStarted(timestamp=self._session_start))

    @property
    def events(self) -> list[AnalyticsEvent]:
        return list(self._events)

    def record(self, event: AnalyticsEvent) -> None:
        self._events.append(event)
        if isinstance(event, SessionEnded):
            self._session_end = event.timestamp
        logger.debug(f"Recorded {type(event).__name__}")

    def end_session(self) -> None:
        self.record(SessionEnded(timestamp=self._clock()))

    def report(self) -> AnalyticsReport:
        """Summarize the session's review events."""
        tallies: dict[str, _ItemTally] = {}
        correct_by_date: dict[date, int] = {}
        response_times: list[int] = []
        correct = 0
        incorrect = 0

        for event in self._events:
            if not isinstance(event, ItemReviewed):
                continue

            tally = tallies.setdefault(event.item_id, _ItemTally())
            tally.reviews += 1
            response_times.append(event.response_time_ms)

            day = event.timestamp.date()
            correct_by_date.setdefault(day, 0)
            if event.quality >= PASSING_QUALITY:
                tally.correct += 1
                correct += 1
                correct_by_date[day] += 1
            else:
                incorrect += 1

        # Ties break on item id so the ranking is deterministic
        most_reviewed = sorted(tallies, key=lambda i: (-tallies[i].reviews, i))
        difficult = [i for i in tallies if tallies[i].reviews >= DIFFICULT_MIN_REVIEWS]
        most_difficult = sorted(difficult, key=lambda i: (tallies[i].rate, i))

        streaks = running_streaks(correct_by_date)
        study_streak = streaks[max(streaks)] if streaks else 0

        return AnalyticsReport(
            session_start=self._session_start,
            session_end=self._session_end,
            total_reviewed=correct + incorrect,
            correct_answers=correct,
            incorrect_answers=incorrect,
            average_response_time_ms=(
                sum(response_times) / len(response_times) if response_times else 0.0
            ),
            most_reviewed=most_reviewed[:TOP_ITEMS_LIMIT],
            most_difficult=most_difficult[:TOP_ITEMS_LIMIT],
            study_streak=study_streak,
        )
