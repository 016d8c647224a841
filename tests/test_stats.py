from __future__ import annotations

import pytest

from conftest import TODAY, make_task
from stats import compute_statistics, progress_percent
from upcoming import UpcomingDays


def test_empty_store() -> None:
    stats = compute_statistics([], today=TODAY)
    assert (stats.total, stats.completed, stats.overdue, stats.progress_percent) == (0, 0, 0, 0)
    assert stats.buckets == {"Completed": 0, "Pending": 0, "Overdue": 0}
    assert [count for _, count in stats.upcoming] == [0] * 7


def test_counts_and_buckets() -> None:
    tasks = [
        make_task("a", due="2024-01-01", priority="low"),
        make_task("b", due="2024-05-31", completed=True),
        make_task("c", due="2024-06-01"),
        make_task("d"),
    ]
    stats = compute_statistics(tasks, today=TODAY)
    assert stats.total == 4
    assert stats.completed == 1
    assert stats.overdue == 1
    assert stats.progress_percent == 25
    assert stats.buckets == {"Completed": 1, "Pending": 2, "Overdue": 1}


@pytest.mark.parametrize("flags", [
    [],
    [(False, "2024-01-01")],
    [(True, "2024-01-01"), (False, None), (False, "2024-05-31"), (True, None)],
    [(False, "2024-06-01"), (False, "2024-07-01"), (True, "2024-06-02")],
])
def test_buckets_always_sum_to_total(flags) -> None:
    tasks = [make_task(str(i), due=due, completed=done) for i, (done, due) in enumerate(flags)]
    stats = compute_statistics(tasks, today=TODAY)
    assert sum(stats.buckets.values()) == stats.total
    assert stats.pending >= 0


@pytest.mark.parametrize("completed,total,expected", [
    (0, 3, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (3, 8, 38), (4, 4, 100), (0, 0, 0),
])
def test_progress_rounds_half_up(completed, total, expected) -> None:
    assert progress_percent(completed, total) == expected


def test_upcoming_counts_follow_day_order() -> None:
    tasks = [
        make_task("a", due="2024-06-01"),
        make_task("b", due="2024-06-03"),
        make_task("c", due="2024-06-03"),
        make_task("d", due="2024-06-03", completed=True),
        make_task("e", due="2024-06-08"),
    ]
    days = UpcomingDays.from_today(TODAY)
    days.reorder(2, 0)
    stats = compute_statistics(tasks, days.days, today=TODAY)
    assert stats.upcoming[0] == ("2024-06-03", 2)
    assert dict(stats.upcoming)["2024-06-01"] == 1
    assert "2024-06-08" not in dict(stats.upcoming)
