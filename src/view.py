"""View pipeline: which tasks to show, and in what order.

``compute_visible`` is pure: it reads a snapshot and returns a new list,
leaving both the snapshot and the Task objects untouched. Steps always run
in the same order: status filter, then text search, then sort.
"""
from __future__ import annotations
from datetime import date
from typing import Iterable, List, Optional

from models import FILTERS, NO_DUE_SENTINEL, PRIORITY_RANK, SORTS, Task, parse_timestamp


def _passes_filter(task: Task, status: str, today: date) -> bool:
    if status == 'pending':
        return not task.completed
    if status == 'completed':
        return task.completed
    if status == 'overdue':
        return task.is_overdue(today)
    return True


def _matches(task: Task, query: str) -> bool:
    # plain substring match on the raw due/priority strings, no tokenizing
    return (query in task.text.lower()
            or query in (task.due or '')
            or query in (task.priority or ''))


def compute_visible(tasks: Iterable[Task], filter: str = 'all', search: str = '',
                    sort: str = 'default', today: Optional[date] = None) -> List[Task]:
    if filter not in FILTERS:
        raise ValueError(f"Unknown filter: {filter!r}")
    if sort not in SORTS:
        raise ValueError(f"Unknown sort: {sort!r}")
    today = today or date.today()

    visible = [t for t in tasks if _passes_filter(t, filter, today)]

    if search:
        query = search.lower()
        visible = [t for t in visible if _matches(t, query)]

    if sort == 'priority':
        visible.sort(key=lambda t: (PRIORITY_RANK.get(t.priority, PRIORITY_RANK['medium']),
                                    parse_timestamp(t.created_at)))
    elif sort == 'due':
        visible.sort(key=lambda t: t.due or NO_DUE_SENTINEL)
    elif sort == 'default':
        visible.sort(key=lambda t: parse_timestamp(t.created_at), reverse=True)
    # 'manual' keeps store order
    return visible
