import json

import pytest

from retain.application.scheduler import apply_review
from retain.domain.errors import InvalidTimestampError, ItemNotFoundError, StoreError
from retain.infrastructure.json_store import JsonItemStore


@pytest.fixture
def store(tmp_path):
    return JsonItemStore(tmp_path / "data" / "items.json")


@pytest.mark.asyncio
async def test_put_then_get_preserves_item(store, make_item, now):
    item = apply_review(make_item(question="Q", answer="A", tags={"b", "a"}), 4, now)

    await store.put(item)

    assert store.path.exists()
    assert await store.get(item.id) == item


@pytest.mark.asyncio
async def test_put_replaces_by_id(store, make_item):
    await store.put(make_item("x", question="old"))
    await store.put(make_item("x", question="new"))
    await store.put(make_item("y"))

    items = await store.list_items()

    assert sorted(i.id for i in items) == ["x", "y"]
    assert (await store.get("x")).question == "new"


@pytest.mark.asyncio
async def test_missing_file_is_empty(store):
    assert await store.list_items() == []


@pytest.mark.asyncio
async def test_missing_item(store, make_item):
    await store.put(make_item("x"))

    with pytest.raises(ItemNotFoundError):
        await store.get("nope")


@pytest.mark.asyncio
async def test_corrupt_file(tmp_path):
    path = tmp_path / "items.json"
    path.write_text("{not json")

    with pytest.raises(StoreError):
        await JsonItemStore(path).list_items()


@pytest.mark.asyncio
async def test_out_of_range_quality_in_file(tmp_path):
    path = tmp_path / "items.json"
    path.write_text(
        json.dumps(
            {"items": {"x": {"id": "x", "history": [{"timestamp": "2024-01-01", "quality": 9}]}}}
        )
    )

    with pytest.raises(StoreError):
        await JsonItemStore(path).list_items()


@pytest.mark.asyncio
async def test_unparseable_timestamp_aborts(tmp_path):
    path = tmp_path / "items.json"
    path.write_text(
        json.dumps(
            {
                "items": {
                    "x": {
                        "id": "x",
                        "history": [{"timestamp": "yesterday-ish", "quality": 4}],
                    }
                }
            }
        )
    )

    with pytest.raises(InvalidTimestampError):
        await JsonItemStore(path).list_items()


@pytest.mark.asyncio
async def test_reads_javascript_style_timestamps(tmp_path):
    path = tmp_path / "items.json"
    path.write_text(
        json.dumps(
            {
                "items": {
                    "x": {
                        "id": "x",
                        "next_review_at": "2024-03-16T12:00:00.000Z",
                        "history": [{"timestamp": "2024-03-15T12:00:00Z", "quality": 2}],
                    }
                }
            }
        )
    )

    item = await JsonItemStore(path).get("x")

    assert item.next_review_at.utcoffset().total_seconds() == 0
    assert item.history[0].was_correct is False
