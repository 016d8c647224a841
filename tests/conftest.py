from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from models import Task
from storage import Storage
from store import TaskStore

TODAY = date(2024, 6, 1)


def make_task(id: str, text: str = None, *, due=None, priority='medium', completed=False,
              created_at='2024-05-01T10:00:00+00:00') -> Task:
    return Task(id=id, text=text or id, due=due, priority=priority, completed=completed,
                created_at=created_at)


@pytest.fixture()
def today() -> date:
    return TODAY


@pytest.fixture()
def storage(tmp_path: Path) -> Storage:
    return Storage(tmp_path / "data")


@pytest.fixture()
def store(storage: Storage) -> TaskStore:
    return TaskStore(storage=storage)


@pytest.fixture()
def abcd() -> TaskStore:
    """In-memory store holding A, B, C, D in that order."""
    return TaskStore([make_task(x) for x in "ABCD"])
