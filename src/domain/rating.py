"""Rating Aggregator: bounds check and full-recompute driver average."""

from __future__ import annotations

from typing import Iterable, Optional

from .errors import ValidationError

MIN_RATING = 1
MAX_RATING = 5


def validate_rating(value: int) -> int:
    # bool is an int subclass; True would otherwise count as a 1-star rating
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Rating must be an integer.")
    if not MIN_RATING <= value <= MAX_RATING:
        raise ValidationError(
            f"Rating must be between {MIN_RATING} and {MAX_RATING}."
        )
    return value


def average_rating(values: Iterable[int]) -> Optional[float]:
    """Arithmetic mean of every rating for a driver, to two decimals.

    Recomputed over the full set on each insert, O(n) per write.
    """
    values = list(values)
    if not values:
        return None
    return round(sum(values) / len(values), 2)
