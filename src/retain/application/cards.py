"""Item creation and collection helpers: tags, search, sorting."""

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Literal

from ulid import ULID

from retain.domain.constants import DEFAULT_STRENGTH_FACTOR, ITEM_ID_PREFIX
from retain.domain.models import Item
from retain.domain.timestamps import ensure_aware

SortKey = Literal["due", "new", "mastered"]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def generate_item_id() -> str:
    """Generate a stable item ID using ULID."""
    return f"{ITEM_ID_PREFIX}{ULID()}"


def parse_tags(raw: str | Iterable[str] | None) -> frozenset[str]:
    """
    Normalize tags from a comma-separated string or an iterable of strings.

    Blank entries are dropped and surrounding whitespace trimmed.
    """
    if raw is None:
        return frozenset()
    parts = raw.split(",") if isinstance(raw, str) else raw
    return frozenset(t.strip() for t in parts if t and t.strip())


def new_item(
    question: str,
    answer: str,
    now: datetime,
    tags: str | Iterable[str] | None = None,
    item_id: str | None = None,
) -> Item:
    """Create an item that is due immediately."""
    now = ensure_aware(now)
    return Item(
        id=item_id or generate_item_id(),
        question=question.strip(),
        answer=answer.strip(),
        strength_factor=DEFAULT_STRENGTH_FACTOR,
        interval=0,
        repetition_count=0,
        next_review_at=now,
        created_at=now,
        tags=parse_tags(tags),
    )


def due_items(items: Iterable[Item], now: datetime) -> list[Item]:
    """Items due at now, earliest due first."""
    return sort_items([i for i in items if i.is_due(now)], "due")


def filter_by_tags(items: Iterable[Item], tags: Iterable[str]) -> list[Item]:
    """Keep items carrying every one of the given tags."""
    wanted = parse_tags(tags)
    if not wanted:
        return list(items)
    return [i for i in items if wanted <= i.tags]


def search_items(items: Iterable[Item], query: str) -> list[Item]:
    """Case-insensitive substring search over question, answer, and tags."""
    term = query.strip().lower()
    if not term:
        return list(items)
    return [
        i
        for i in items
        if term in i.question.lower()
        or term in i.answer.lower()
        or any(term in t.lower() for t in i.tags)
    ]


def sort_items(items: Iterable[Item], sort_by: SortKey = "due") -> list[Item]:
    """
    Sort a copy of the items.

    "due": earliest due first, unscheduled items last.
    "new": fewest repetitions first.
    "mastered": most repetitions first.
    """
    items = list(items)
    if sort_by == "due":
        return sorted(
            items,
            key=lambda i: (i.next_review_at is None, i.next_review_at or _EPOCH, i.id),
        )
    if sort_by == "new":
        return sorted(items, key=lambda i: (i.repetition_count, i.id))
    if sort_by == "mastered":
        return sorted(items, key=lambda i: (-i.repetition_count, i.id))
    raise ValueError(f"Unknown sort key: {sort_by!r}")
