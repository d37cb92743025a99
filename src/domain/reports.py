"""Monthly ride / payment aggregation for the admin reports endpoint."""

from __future__ import annotations

import calendar
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional


@dataclass(frozen=True)
class MonthlyReport:
    year: int
    month: int
    total_rides: int
    total_payments: float

    @property
    def label(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"


def monthly_reports(
    rides: Iterable[tuple[Optional[datetime], Optional[float]]],
) -> list[MonthlyReport]:
    """Group ``(booked_at, fare)`` pairs of completed rides by calendar month."""
    counts: dict[tuple[int, int], int] = defaultdict(int)
    totals: dict[tuple[int, int], float] = defaultdict(float)
    for booked_at, fare in rides:
        if booked_at is None:
            continue
        key = (booked_at.year, booked_at.month)
        counts[key] += 1
        totals[key] += fare or 0.0

    return [
        MonthlyReport(
            year=year,
            month=month,
            total_rides=counts[(year, month)],
            total_payments=round(totals[(year, month)], 2),
        )
        for year, month in sorted(counts)
    ]
