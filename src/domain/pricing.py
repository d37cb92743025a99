"""
Fare strategies  (Strategy Pattern)
===================================

Booking has no distance or tariff information, only free-text pickup and
destination strings, so the default fare is a placeholder drawn uniformly
between ``fare_min`` and ``fare_max``.  ``FlatFare`` gives deterministic fares for
tests and seeding.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Optional


class FareStrategy(ABC):
    @abstractmethod
    def quote(self, pickup_location: str, destination: str) -> float: ...


class FlatFare(FareStrategy):
    def __init__(self, amount: float):
        self.amount = round(amount, 2)

    def quote(self, pickup_location: str, destination: str) -> float:
        return self.amount


class PlaceholderFare(FareStrategy):
    """Pseudo-random fare; not a fare model."""

    def __init__(
        self,
        fare_min: float = 10.0,
        fare_max: float = 60.0,
        rng: Optional[random.Random] = None,
    ):
        if fare_max < fare_min:
            raise ValueError("fare_max must be >= fare_min")
        self.fare_min = fare_min
        self.fare_max = fare_max
        self.rng = rng or random.Random()

    def quote(self, pickup_location: str, destination: str) -> float:
        return round(self.rng.uniform(self.fare_min, self.fare_max), 2)
