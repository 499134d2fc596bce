"""In-memory ItemStore adapter."""

from collections.abc import Iterable

from retain.domain.errors import ItemNotFoundError
from retain.domain.models import Item
from retain.domain.ports import ItemStore


class InMemoryItemStore(ItemStore):
    def __init__(self, items: Iterable[Item] = ()):
        self._items: dict[str, Item] = {item.id: item for item in items}

    async def get(self, item_id: str) -> Item:
        try:
            return self._items[item_id]
        except KeyError:
            raise ItemNotFoundError(item_id) from None

    async def put(self, item: Item) -> None:
        self._items[item.id] = item

    async def list_items(self) -> list[Item]:
        return list(self._items.values())
