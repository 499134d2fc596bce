"""
Ports (interfaces) for the collaborators the core depends on.

Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .events import AnalyticsEvent, SoundCue
from .models import Item


class ItemStore(ABC):
    """
    Port for the key-value store that keeps items between reviews.

    Implementations:
        - InMemoryItemStore: Process-local dict, used by tests and embedding hosts.
        - JsonItemStore: One JSON document on disk, used by the CLI.
    """

    @abstractmethod
    async def get(self, item_id: str) -> Item:
        """
        Fetch one item.

        Raises:
            ItemNotFoundError: If no item has this id.
        """
        pass

    @abstractmethod
    async def put(self, item: Item) -> None:
        """Insert or replace an item, keyed by its id."""
        pass

    @abstractmethod
    async def list_items(self) -> list[Item]:
        """Return every stored item."""
        pass


class AnalyticsSink(ABC):
    """Receives study events."""

    @abstractmethod
    def record(self, event: AnalyticsEvent) -> None:
        pass


class SoundSink(ABC):
    """Receives audible feedback cues."""

    @abstractmethod
    def play(self, cue: SoundCue) -> None:
        pass
