"""Task store: the single owned, ordered collection of tasks.

Store order is the user's chosen order: new tasks are prepended and
``reorder`` moves one task to a new position. Every successful mutation
is followed by a synchronous save through the Storage gateway (when one
is attached). A failed save is logged and remembered in
``last_save_error`` but never raised; the in-memory list stays
authoritative for the session.

Blank text and unknown ids are no-ops that return None.
"""
from __future__ import annotations
import logging
import re
import uuid
from datetime import date
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from errors import InvalidIndex, StorageError
from models import DEFAULT_PRIORITY, PRIORITIES, Task, now_iso
from storage import Storage

logger = logging.getLogger(__name__)

ID_LENGTH = 12
DUE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_KEEP = object()  # sentinel: "leave this field alone" in update()


def _check_priority(priority: str) -> None:
    if priority not in PRIORITIES:
        raise ValueError(f"Unknown priority: {priority!r} (expected one of {', '.join(PRIORITIES)})")


def _normalize_due(due: Optional[str]) -> Optional[str]:
    if due is None or not due.strip():
        return None
    due = due.strip()
    # only the YYYY-MM-DD form is stored; sorting and per-day counts compare strings
    if not DUE_RE.fullmatch(due):
        raise ValueError(f"Invalid due date: {due!r} (expected YYYY-MM-DD)")
    try:
        date.fromisoformat(due)
    except ValueError:
        raise ValueError(f"Invalid due date: {due!r} (expected YYYY-MM-DD)") from None
    return due


class TaskStore:
    def __init__(self, tasks: Optional[Iterable[Task]] = None, storage: Optional[Storage] = None):
        self._tasks: List[Task] = []
        self._ids: Set[str] = set()
        self.storage = storage
        self.last_save_error: Optional[str] = None
        if tasks:
            self._load(tasks)

    @classmethod
    def load(cls, storage: Storage) -> "TaskStore":
        """Session start: build the store from whatever the gateway holds."""
        store = cls(storage.load_tasks(), storage=storage)
        logger.info("TaskStore ready dir=%s total=%d", storage.data_dir, len(store))
        return store

    def close(self) -> None:
        """Session end: flush one last snapshot."""
        self._persist()

    # -------------------- loading --------------------
    def _load(self, tasks: Iterable[Task]) -> None:
        for task in tasks:
            if not task.id or task.id in self._ids:
                old = task.id
                task.id = self._allocate_id()
                logger.warning("Reassigned id %r -> %r on load (missing or duplicate)", old, task.id)
            else:
                self._ids.add(task.id)
            self._tasks.append(task)

    # -------------------- id management --------------------
    def _allocate_id(self) -> str:
        while True:
            candidate = uuid.uuid4().hex[:ID_LENGTH]
            if candidate not in self._ids:
                self._ids.add(candidate)
                return candidate

    # -------------------- queries --------------------
    @property
    def tasks(self) -> Tuple[Task, ...]:
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(tuple(self._tasks))

    def get(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def index_of(self, task_id: str) -> Optional[int]:
        for idx, task in enumerate(self._tasks):
            if task.id == task_id:
                return idx
        return None

    # -------------------- task operations --------------------
    def add(self, text: str, due: Optional[str] = None, priority: str = DEFAULT_PRIORITY) -> Optional[Task]:
        if not text or not text.strip():
            return None
        _check_priority(priority)
        task = Task(
            id=self._allocate_id(),
            text=text.strip(),
            due=_normalize_due(due),
            priority=priority,
            completed=False,
            created_at=now_iso(),
        )
        self._tasks.insert(0, task)
        logger.debug("Task added id=%s priority=%s due=%s", task.id, task.priority, task.due)
        self._persist()
        return task

    def update(self, task_id: str, text=_KEEP, due=_KEEP, priority=_KEEP) -> Optional[Task]:
        """Replace the given mutable fields; ``due=None`` clears the due date."""
        task = self.get(task_id)
        if task is None:
            return None
        if text is not _KEEP and (not text or not text.strip()):
            return None
        if priority is not _KEEP:
            _check_priority(priority)
        new_due = _normalize_due(due) if due is not _KEEP else task.due
        if text is not _KEEP:
            task.text = text.strip()
        if priority is not _KEEP:
            task.priority = priority
        task.due = new_due
        logger.debug("Task updated id=%s", task.id)
        self._persist()
        return task

    def toggle_completed(self, task_id: str) -> Optional[Task]:
        task = self.get(task_id)
        if task is None:
            return None
        task.completed = not task.completed
        logger.debug("Task toggled id=%s completed=%s", task.id, task.completed)
        self._persist()
        return task

    def remove(self, task_id: str) -> Optional[Task]:
        """Delete one task. Callers ask the user for confirmation first."""
        idx = self.index_of(task_id)
        if idx is None:
            return None
        task = self._tasks.pop(idx)
        self._ids.discard(task.id)
        logger.debug("Task removed id=%s", task.id)
        self._persist()
        return task

    def clear(self) -> int:
        """Delete every task. Callers ask the user for confirmation first."""
        removed = len(self._tasks)
        self._tasks.clear()
        self._ids.clear()
        logger.debug("Store cleared (%d tasks)", removed)
        self._persist()
        return removed

    def reorder(self, from_index: int, to_index: int) -> None:
        """Move the task at ``from_index`` so it ends up at ``to_index``.

        Single-item move, not a swap: [A, B, C, D] with (0, 2) -> [B, C, A, D].
        """
        self._tasks[:] = move_item(self._tasks, from_index, to_index)
        logger.debug("Task moved %d -> %d", from_index, to_index)
        self._persist()

    # -------------------- persistence --------------------
    def _persist(self) -> bool:
        if self.storage is None:
            return True
        try:
            self.storage.save_tasks(self._tasks)
        except StorageError as exc:
            self.last_save_error = str(exc)
            logger.warning("Save failed, keeping in-memory state: %s", exc)
            return False
        self.last_save_error = None
        return True

    def __str__(self) -> str:
        done = sum(1 for t in self._tasks if t.completed)
        return f'Tasks: {len(self._tasks)} total, {done} completed'


def move_item(items, from_index: int, to_index: int) -> list:
    """Return a new list with one item moved; raises InvalidIndex when out of range."""
    length = len(items)
    for idx in (from_index, to_index):
        if not 0 <= idx < length:
            raise InvalidIndex(idx, length)
    result = list(items)
    moved = result.pop(from_index)
    result.insert(to_index, moved)
    return result
