from datetime import datetime, timedelta, timezone

import pytest

from retain.domain.models import Item, ReviewOutcome

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_item():
    """Factory for items with fresh-card defaults, overridable per field."""

    def _make(item_id: str = "item_1", **kwargs) -> Item:
        kwargs.setdefault("next_review_at", NOW)
        return Item(id=item_id, **kwargs)

    return _make


@pytest.fixture
def outcome():
    """Factory for a review outcome some days before NOW."""

    def _outcome(days_ago: float, quality: int) -> ReviewOutcome:
        return ReviewOutcome(timestamp=NOW - timedelta(days=days_ago), quality=quality)

    return _outcome


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config and the item store
    monkeypatch.setenv("HOME", str(home))
    return home
