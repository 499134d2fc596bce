"""
Review Service — Application layer orchestrator.

Loads an item from the store, applies the scheduler, persists the result,
and notifies the injected analytics and sound sinks.
"""

import logging
from collections.abc import Iterable

from retain.application.cards import due_items, new_item
from retain.application.progress import daily_progress, summarize
from retain.application.scheduler import apply_review, validate_quality
from retain.domain.constants import PASSING_QUALITY
from retain.domain.events import ItemCreated, ItemReviewed, SessionEnded, SoundCue
from retain.domain.models import DailyStat, Item, ProgressStats
from retain.domain.ports import AnalyticsSink, ItemStore, SoundSink
from retain.domain.timestamps import Clock, utc_now

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Application service for creating, reviewing, and summarizing items.

    Follows Dependency Inversion: depends on the ItemStore and sink
    abstractions, never on module-level singletons. Callers must not issue
    two reviews of the same item concurrently.
    """

    def __init__(
        self,
        store: ItemStore,
        clock: Clock = utc_now,
        analytics: AnalyticsSink | None = None,
        sound: SoundSink | None = None,
        record_history: bool = True,
    ):
        """
        Args:
            store: The repository (port) holding items.
            clock: Supplies the current instant.
            analytics: Optional sink for study events.
            sound: Optional sink for feedback cues.
            record_history: Append an outcome to each item's history on review.
        """
        self._store = store
        self._clock = clock
        self._analytics = analytics
        self._sound = sound
        self._record_history = record_history

    async def create_item(
        self,
        question: str,
        answer: str,
        tags: str | Iterable[str] | None = None,
    ) -> Item:
        """Create, persist, and return a new item that is due immediately."""
        now = self._clock()
        item = new_item(question, answer, now, tags=tags)
        await self._store.put(item)
        logger.info(f"Created item {item.id}")

        if self._analytics:
            self._analytics.record(
                ItemCreated(timestamp=now, item_id=item.id, tag_count=len(item.tags))
            )
        return item

    async def review(self, item_id: str, quality: int, response_time_ms: int = 0) -> Item:
        """
        Grade an item and persist its new schedule.

        Args:
            item_id: The item being reviewed.
            quality: Grade 1..5.
            response_time_ms: How long the learner took; analytics only.

        Returns:
            The updated item, as stored.

        Raises:
            InvalidQualityError: Bad grade; nothing is loaded or stored.
            ItemNotFoundError: Unknown item id.
        """
        validate_quality(quality)
        item = await self._store.get(item_id)
        now = self._clock()

        updated = apply_review(item, quality, now, record_history=self._record_history)
        await self._store.put(updated)
        logger.info(
            f"Reviewed {item_id} with quality {quality}; next review in {updated.interval} day(s)"
        )

        if self._analytics:
            self._analytics.record(
                ItemReviewed(
                    timestamp=now,
                    item_id=item_id,
                    quality=quality,
                    response_time_ms=response_time_ms,
                    repetition_count=item.repetition_count,
                    strength_factor=item.strength_factor,
                )
            )
        if self._sound:
            self._sound.play(SoundCue.SUCCESS if quality >= PASSING_QUALITY else SoundCue.ERROR)

        return updated

    async def due_queue(self) -> list[Item]:
        """Items due now, earliest first."""
        return due_items(await self._store.list_items(), self._clock())

    async def progress(self) -> ProgressStats:
        return summarize(await self._store.list_items(), self._clock())

    async def daily(self) -> list[DailyStat]:
        return daily_progress(await self._store.list_items())

    def finish_session(self) -> None:
        """Signal the end of a study session to the sinks."""
        if self._analytics:
            self._analytics.record(SessionEnded(timestamp=self._clock()))
        if self._sound:
            self._sound.play(SoundCue.COMPLETE)
