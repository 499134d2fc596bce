from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from retain.application.review_service import ReviewService
from retain.domain.errors import InvalidQualityError, ItemNotFoundError
from retain.application.analytics import SessionAnalytics
from retain.domain.events import ItemCreated, ItemReviewed, SessionEnded, SoundCue
from retain.infrastructure.memory_store import InMemoryItemStore


@pytest.fixture
def store():
    return InMemoryItemStore()


@pytest.fixture
def service(store, now):
    return ReviewService(store=store, clock=lambda: now)


@pytest.mark.asyncio
async def test_create_item_is_persisted_and_due(service, store, now):
    item = await service.create_item("Q", "A", tags="x,y")

    stored = await store.get(item.id)
    assert stored == item
    assert stored.next_review_at == now
    assert [i.id for i in await service.due_queue()] == [item.id]


@pytest.mark.asyncio
async def test_review_updates_store(service, store, now):
    item = await service.create_item("Q", "A")

    await service.review(item.id, 5)
    updated = await service.review(item.id, 5)

    assert updated.interval == 6
    assert updated.repetition_count == 2
    assert len(updated.history) == 2
    assert await store.get(item.id) == updated
    assert updated.next_review_at == now + timedelta(days=6)
    assert await service.due_queue() == []


@pytest.mark.asyncio
async def test_review_without_history(store, now):
    service = ReviewService(store=store, clock=lambda: now, record_history=False)
    item = await service.create_item("Q", "A")

    updated = await service.review(item.id, 4)

    assert updated.history == ()


@pytest.mark.asyncio
async def test_invalid_quality_touches_nothing(now):
    store = AsyncMock()
    service = ReviewService(store=store, clock=lambda: now)

    with pytest.raises(InvalidQualityError):
        await service.review("item_1", 0)

    store.get.assert_not_awaited()
    store.put.assert_not_awaited()


@pytest.mark.asyncio
async def test_unknown_item(service):
    with pytest.raises(ItemNotFoundError):
        await service.review("missing", 3)


@pytest.mark.asyncio
async def test_sinks_are_notified(store, now):
    analytics = MagicMock()
    sound = MagicMock()
    service = ReviewService(store=store, clock=lambda: now, analytics=analytics, sound=sound)

    item = await service.create_item("Q", "A", tags=["t"])
    await service.review(item.id, 5, response_time_ms=1200)
    await service.review(item.id, 1)
    service.finish_session()

    events = [c.args[0] for c in analytics.record.call_args_list]
    assert events[0] == ItemCreated(timestamp=now, item_id=item.id, tag_count=1)
    assert events[1] == ItemReviewed(
        timestamp=now,
        item_id=item.id,
        quality=5,
        response_time_ms=1200,
        repetition_count=0,
        strength_factor=2.5,
    )
    assert events[2].repetition_count == 1
    assert events[-1] == SessionEnded(timestamp=now)

    cues = [c.args[0] for c in sound.play.call_args_list]
    assert cues == [SoundCue.SUCCESS, SoundCue.ERROR, SoundCue.COMPLETE]


@pytest.mark.asyncio
async def test_progress_and_daily(service):
    first = await service.create_item("Q1", "A1")
    await service.create_item("Q2", "A2")
    await service.review(first.id, 2)

    stats = await service.progress()
    days = await service.daily()

    assert stats.total_cards == 2
    assert stats.new_cards == 2
    assert stats.total_reviews == 1
    assert stats.accuracy == 0
    assert len(days) == 1
    assert days[0].reviewed_count == 1
    assert days[0].correct_count == 0


@pytest.mark.asyncio
async def test_finish_session_ends_analytics_session(store, now):
    analytics = SessionAnalytics(clock=lambda: now)
    service = ReviewService(store=store, clock=lambda: now, analytics=analytics)

    item = await service.create_item("Q", "A")
    await service.review(item.id, 4, response_time_ms=800)
    assert analytics.report().session_end is None

    service.finish_session()

    report = analytics.report()
    assert report.session_end == now
    assert report.total_reviewed == 1
    assert report.average_response_time_ms == 800
