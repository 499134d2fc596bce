from datetime import timedelta

import pytest

from retain.application.analytics import SessionAnalytics
from retain.domain.events import ItemCreated, ItemReviewed, SessionEnded, SessionStarted


@pytest.fixture
def clock(now):
    """Clock that advances one minute per call."""
    ticks = iter(now + timedelta(minutes=i) for i in range(1000))
    return lambda: next(ticks)


def reviewed(now, item_id, quality, response_time_ms=1000, days_ago=0):
    return ItemReviewed(
        timestamp=now - timedelta(days=days_ago),
        item_id=item_id,
        quality=quality,
        response_time_ms=response_time_ms,
        repetition_count=0,
        strength_factor=2.5,
    )


def test_session_lifecycle(clock, now):
    analytics = SessionAnalytics(clock=clock)
    analytics.end_session()

    events = analytics.events
    assert isinstance(events[0], SessionStarted)
    assert isinstance(events[-1], SessionEnded)

    report = analytics.report()
    assert report.session_start == now
    assert report.session_end == now + timedelta(minutes=1)


def test_report_totals(clock, now):
    analytics = SessionAnalytics(clock=clock)
    analytics.record(ItemCreated(timestamp=now, item_id="a", tag_count=0))
    analytics.record(reviewed(now, "a", 5, response_time_ms=1000))
    analytics.record(reviewed(now, "b", 2, response_time_ms=3000))

    report = analytics.report()

    assert report.total_reviewed == 2
    assert report.correct_answers == 1
    assert report.incorrect_answers == 1
    assert report.average_response_time_ms == 2000
    assert report.session_end is None


def test_report_empty_session(clock):
    report = SessionAnalytics(clock=clock).report()

    assert report.total_reviewed == 0
    assert report.average_response_time_ms == 0
    assert report.most_reviewed == []
    assert report.study_streak == 0


def test_most_reviewed_and_most_difficult(clock, now):
    analytics = SessionAnalytics(clock=clock)
    for q in (5, 5, 4, 5):
        analytics.record(reviewed(now, "easy", q))
    for q in (1, 2, 4):
        analytics.record(reviewed(now, "hard", q))
    for q in (1, 1):
        analytics.record(reviewed(now, "rare", q))

    report = analytics.report()

    assert report.most_reviewed == ["easy", "hard", "rare"]
    # "rare" has fewer than 3 reviews and is not ranked
    assert report.most_difficult == ["hard", "easy"]


def test_top_lists_are_capped(clock, now):
    analytics = SessionAnalytics(clock=clock)
    for i in range(8):
        analytics.record(reviewed(now, f"item_{i}", 4))

    assert len(analytics.report().most_reviewed) == 5


def test_study_streak_uses_daily_rule(clock, now):
    analytics = SessionAnalytics(clock=clock)
    analytics.record(reviewed(now, "a", 5, days_ago=3))
    analytics.record(reviewed(now, "a", 1, days_ago=2))
    analytics.record(reviewed(now, "a", 4, days_ago=1))
    analytics.record(reviewed(now, "a", 3, days_ago=0))

    assert analytics.report().study_streak == 2


def test_instances_are_independent(clock):
    first = SessionAnalytics(clock=clock)
    second = SessionAnalytics(clock=clock)

    first.end_session()

    assert len(first.events) == 2
    assert len(second.events) == 1


def test_recorded_session_end_closes_session(clock, now):
    analytics = SessionAnalytics(clock=clock)
    ended = now + timedelta(hours=1)

    analytics.record(SessionEnded(timestamp=ended))

    assert analytics.report().session_end == ended
