"""Upcoming-day order: the next seven calendar days as shown in the bar chart.

Session-only display state. It is rebuilt from the current date whenever
the app starts and is never written to disk; reordering it only changes
the order the chart columns are drawn in.
"""
from __future__ import annotations
from datetime import date, timedelta
from typing import Optional, Tuple

from store import move_item

UPCOMING_DAYS = 7


class UpcomingDays:
    def __init__(self, days):
        self._days: Tuple[str, ...] = tuple(days)

    @classmethod
    def from_today(cls, today: Optional[date] = None, length: int = UPCOMING_DAYS) -> "UpcomingDays":
        today = today or date.today()
        return cls((today + timedelta(days=offset)).isoformat() for offset in range(length))

    @property
    def days(self) -> Tuple[str, ...]:
        return self._days

    def reorder(self, from_index: int, to_index: int) -> None:
        self._days = tuple(move_item(self._days, from_index, to_index))

    def __len__(self) -> int:
        return len(self._days)

    def __iter__(self):
        return iter(self._days)
