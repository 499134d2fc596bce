"""Input checks shared by the scheduler and the data model."""

from .constants import MAX_QUALITY, MIN_QUALITY
from .errors import InvalidQualityError


def validate_quality(quality: object) -> int:
    """
    Return quality unchanged if it is an integer grade in 1..5.

    Raises:
        InvalidQualityError: For anything else, including bools and floats.
    """
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidQualityError(quality)
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise InvalidQualityError(quality)
    return quality
