from __future__ import annotations

import copy

import pytest

from conftest import TODAY, make_task
from view import compute_visible


def ids(tasks) -> list[str]:
    return [t.id for t in tasks]


@pytest.fixture()
def tasks():
    return [
        make_task("late", "Pay rent", due="2024-05-20", priority="high", created_at="2024-05-01T09:00:00+00:00"),
        make_task("today", "Water plants", due="2024-06-01", priority="low", created_at="2024-05-02T09:00:00+00:00"),
        make_task("done", "Old chore", due="2024-05-01", completed=True, created_at="2024-05-03T09:00:00+00:00"),
        make_task("nodue", "Read book", priority="medium", created_at="2024-05-04T09:00:00+00:00"),
        make_task("soon", "Dentist", due="2024-06-05", priority="high", created_at="2024-05-05T09:00:00+00:00"),
    ]


@pytest.mark.parametrize("status,expected", [
    ("all", {"late", "today", "done", "nodue", "soon"}),
    ("pending", {"late", "today", "nodue", "soon"}),
    ("completed", {"done"}),
    ("overdue", {"late"}),
])
def test_status_filters(tasks, status, expected) -> None:
    assert set(ids(compute_visible(tasks, status, today=TODAY))) == expected


def test_due_today_is_not_overdue(tasks) -> None:
    visible = compute_visible(tasks, "overdue", today=TODAY)
    assert "today" not in ids(visible)


def test_overdue_scenario() -> None:
    task = make_task("a", "A", due="2024-01-01", priority="low")
    assert ids(compute_visible([task], "overdue", today=TODAY)) == ["a"]


def test_search_matches_text_due_and_priority(tasks) -> None:
    assert ids(compute_visible(tasks, search="PAY", today=TODAY)) == ["late"]
    assert set(ids(compute_visible(tasks, search="2024-06", today=TODAY))) == {"today", "soon"}
    assert set(ids(compute_visible(tasks, search="high", today=TODAY))) == {"late", "soon"}
    assert compute_visible(tasks, search="zzz", today=TODAY) == []


def test_filter_runs_before_search(tasks) -> None:
    assert ids(compute_visible(tasks, "completed", search="pay", today=TODAY)) == []


def test_default_sort_newest_first(tasks) -> None:
    assert ids(compute_visible(tasks, today=TODAY)) == ["soon", "nodue", "done", "today", "late"]


def test_default_sort_keeps_add_order() -> None:
    from store import TaskStore
    store = TaskStore()
    store.add("Buy milk")
    store.add("Call mom")
    assert [t.text for t in compute_visible(store.tasks)] == ["Call mom", "Buy milk"]


def test_priority_sort_ties_oldest_first() -> None:
    tasks = [
        make_task("1", priority="low", created_at="2024-05-01T00:00:01+00:00"),
        make_task("2", priority="high", created_at="2024-05-01T00:00:02+00:00"),
        make_task("3", priority="medium", created_at="2024-05-01T00:00:03+00:00"),
        make_task("4", priority="high", created_at="2024-05-01T00:00:00+00:00"),
    ]
    assert ids(compute_visible(tasks, sort="priority", today=TODAY)) == ["4", "2", "3", "1"]


def test_due_sort_puts_undated_last(tasks) -> None:
    visible = compute_visible(tasks, sort="due", today=TODAY)
    assert ids(visible) == ["done", "late", "today", "soon", "nodue"]
    dated = [i for i, t in enumerate(visible) if t.due]
    undated = [i for i, t in enumerate(visible) if not t.due]
    assert max(dated) < min(undated)


def test_manual_sort_keeps_store_order(tasks) -> None:
    assert ids(compute_visible(tasks, sort="manual", today=TODAY)) == ids(tasks)


def test_pipeline_is_pure(tasks) -> None:
    snapshot = copy.deepcopy(tasks)
    first = compute_visible(tasks, "pending", "e", "priority", today=TODAY)
    second = compute_visible(tasks, "pending", "e", "priority", today=TODAY)
    assert ids(first) == ids(second)
    assert tasks == snapshot


def test_unknown_filter_or_sort_rejected(tasks) -> None:
    with pytest.raises(ValueError):
        compute_visible(tasks, "someday")
    with pytest.raises(ValueError):
        compute_visible(tasks, sort="random")
