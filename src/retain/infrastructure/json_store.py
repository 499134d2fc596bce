"""
JSON file ItemStore adapter.

Keeps every item in a single JSON document keyed by id. Records are
validated through pydantic models; timestamps are stored as ISO-8601 strings
and parsed back with the domain's timestamp rules.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from retain.domain.constants import DEFAULT_STRENGTH_FACTOR
from retain.domain.errors import ItemNotFoundError, StoreError
from retain.domain.models import Item, ReviewOutcome
from retain.domain.ports import ItemStore
from retain.domain.timestamps import parse_timestamp

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class ReviewRecord(BaseModel):
    timestamp: str
    quality: int = Field(ge=1, le=5)
    was_correct: bool | None = None

    @classmethod
    def from_outcome(cls, outcome: ReviewOutcome) -> "ReviewRecord":
        return cls(
            timestamp=outcome.timestamp.isoformat(),
            quality=outcome.quality,
            was_correct=outcome.was_correct,
        )

    def to_outcome(self) -> ReviewOutcome:
        return ReviewOutcome(
            timestamp=parse_timestamp(self.timestamp),
            quality=self.quality,
            was_correct=self.was_correct,
        )


class ItemRecord(BaseModel):
    id: str
    question: str = ""
    answer: str = ""
    strength_factor: float = DEFAULT_STRENGTH_FACTOR
    interval: int = 0
    repetition_count: int = 0
    next_review_at: str | None = None
    created_at: str | None = None
    history: list[ReviewRecord] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    @classmethod
    def from_item(cls, item: Item) -> "ItemRecord":
        return cls(
            id=item.id,
            question=item.question,
            answer=item.answer,
            strength_factor=item.strength_factor,
            interval=item.interval,
            repetition_count=item.repetition_count,
            next_review_at=item.next_review_at.isoformat() if item.next_review_at else None,
            created_at=item.created_at.isoformat() if item.created_at else None,
            history=[ReviewRecord.from_outcome(o) for o in item.history],
            tags=sorted(item.tags),
        )

    def to_item(self) -> Item:
        """
        Raises:
            InvalidTimestampError: If any stored timestamp is unparseable.
        """
        return Item(
            id=self.id,
            question=self.question,
            answer=self.answer,
            strength_factor=self.strength_factor,
            interval=self.interval,
            repetition_count=self.repetition_count,
            next_review_at=parse_timestamp(self.next_review_at) if self.next_review_at else None,
            created_at=parse_timestamp(self.created_at) if self.created_at else None,
            history=tuple(r.to_outcome() for r in self.history),
            tags=frozenset(self.tags),
        )


class StoreDocument(BaseModel):
    version: int = SCHEMA_VERSION
    items: dict[str, ItemRecord] = Field(default_factory=dict)


class JsonItemStore(ItemStore):
    """
    Stores items in one JSON file.

    The whole document is read on every call and rewritten atomically on
    every put, which is fine for a personal deck of a few thousand items.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> StoreDocument:
        if not self.path.exists():
            return StoreDocument()
        try:
            raw = self.path.read_text(encoding="utf-8")
            return StoreDocument.model_validate(json.loads(raw))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise StoreError(f"Could not read item store {self.path}: {e}") from e

    def _save(self, doc: StoreDocument) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".items-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(doc.model_dump_json(indent=2))
            os.replace(tmp, self.path)
        except OSError as e:
            Path(tmp).unlink(missing_ok=True)
            raise StoreError(f"Could not write item store {self.path}: {e}") from e

    async def get(self, item_id: str) -> Item:
        doc = self._load()
        record = doc.items.get(item_id)
        if record is None:
            raise ItemNotFoundError(item_id)
        return record.to_item()

    async def put(self, item: Item) -> None:
        doc = self._load()
        doc.items[item.id] = ItemRecord.from_item(item)
        self._save(doc)
        logger.debug(f"Saved {item.id} to {self.path}")

    async def list_items(self) -> list[Item]:
        return [record.to_item() for record in self._load().items.values()]
