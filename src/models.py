"""Data models for the terminal task tracker.

Exposes the Task dataclass plus the small fixed vocabularies used across
the app (priorities, status filters, sort modes). Serialized keys follow
the stored JSON layout: "createdAt" is camelCase on disk while the
attribute is ``created_at``.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from datetime import date, datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple

PRIORITIES: Tuple[str, ...] = ("high", "medium", "low")
PRIORITY_RANK: Dict[str, int] = {"high": 1, "medium": 2, "low": 3}
DEFAULT_PRIORITY = "medium"

FILTERS: Tuple[str, ...] = ("all", "pending", "completed", "overdue")
SORTS: Tuple[str, ...] = ("default", "priority", "due", "manual")

NO_DUE_SENTINEL = "9999-12-31"


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_due(value: Optional[str]) -> Optional[date]:
    """Return the calendar date of a due string, or None if absent/invalid.

    Only the date part is looked at so "2024-06-01T15:00" counts as June 1st.
    """
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def parse_timestamp(value: Optional[str]) -> datetime:
    """Parse an ISO timestamp into an aware datetime (UTC when naive).

    Missing or broken values sort as the oldest possible instant.
    """
    if not value:
        return datetime.min.replace(tzinfo=timezone.utc)
    raw = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass
class Task:
    """A single to-do item.

    Fields:
        id: Opaque random token, never reassigned.
        text: Display text (never blank once created).
        due: Optional ISO date "YYYY-MM-DD".
        priority: One of "high", "medium", "low".
        completed: Completion flag.
        created_at: ISO timestamp set once at creation.
    """
    id: str
    text: str
    due: Optional[str] = None
    priority: str = DEFAULT_PRIORITY
    completed: bool = False
    created_at: str = field(default_factory=now_iso)

    def is_overdue(self, today: date) -> bool:
        """Due strictly before today (date-only) and still open."""
        if self.completed:
            return False
        due_day = parse_due(self.due)
        return due_day is not None and due_day < today

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["createdAt"] = data.pop("created_at")
        return data

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Task":
        priority = raw.get("priority")
        if priority not in PRIORITIES:
            priority = DEFAULT_PRIORITY
        due = raw.get("due") or None
        return cls(
            id=str(raw.get("id") or ""),
            text=str(raw.get("text") or ""),
            due=str(due) if due is not None else None,
            priority=priority,
            completed=bool(raw.get("completed", False)),
            created_at=str(raw.get("createdAt") or raw.get("created_at") or now_iso()),
        )

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(id={self.id}, text={self.text}, priority={self.priority}, completed={self.completed})"
