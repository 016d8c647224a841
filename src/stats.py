"""Statistics engine: aggregates over the full (unfiltered) task snapshot."""
from __future__ import annotations
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from models import Task
from upcoming import UpcomingDays


@dataclass(frozen=True)
class Statistics:
    total: int
    completed: int
    overdue: int
    progress_percent: int
    upcoming: List[Tuple[str, int]] = field(default_factory=list)

    @property
    def pending(self) -> int:
        # residual, so the three buckets always add up to total
        return self.total - self.completed - self.overdue

    @property
    def buckets(self) -> Dict[str, int]:
        return {'Completed': self.completed, 'Pending': self.pending, 'Overdue': self.overdue}


def progress_percent(completed: int, total: int) -> int:
    if not total:
        return 0
    # round half up (12.5 -> 13); round() would give banker's rounding
    return int(math.floor(completed * 100 / total + 0.5))


def compute_statistics(tasks: Iterable[Task], upcoming: Optional[Iterable[str]] = None,
                       today: Optional[date] = None) -> Statistics:
    today = today or date.today()
    snapshot = list(tasks)
    if upcoming is None:
        upcoming = UpcomingDays.from_today(today)

    total = len(snapshot)
    completed = sum(1 for t in snapshot if t.completed)
    overdue = sum(1 for t in snapshot if t.is_overdue(today))
    per_day = [(day, sum(1 for t in snapshot if t.due == day and not t.completed)) for day in upcoming]

    return Statistics(
        total=total,
        completed=completed,
        overdue=overdue,
        progress_percent=progress_percent(completed, total),
        upcoming=per_day,
    )
