"""Error taxonomy shared by every layer."""


class RetainError(Exception):
    """Base class for all errors raised by retain."""


class InvalidQualityError(RetainError, ValueError):
    """A review quality that is not an integer in 1..5."""

    def __init__(self, quality: object):
        self.quality = quality
        super().__init__(f"Quality must be an integer between 1 and 5, got {quality!r}")


class InvalidTimestampError(RetainError, ValueError):
    """A timestamp field that cannot be parsed."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Unparseable timestamp: {value!r}")


class ItemNotFoundError(RetainError, KeyError):
    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(item_id)

    def __str__(self) -> str:
        return f"No item with id {self.item_id!r}"


class DeckFormatError(RetainError):
    """A deck file whose structure cannot be turned into items."""


class StoreError(RetainError):
    """The item store could not be read or written."""
