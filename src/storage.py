"""Persistence helpers (load/save tasks and theme) for the task tracker.

Everything lives in one data directory:
    tasks.json  - list of serialized Task objects, store order preserved
    theme.json  - {"theme": "light" | "dark"}

Loading never fails: a missing or unreadable file yields the default.
Saving raises StorageError so the caller decides how loud to be.
"""
from __future__ import annotations
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable, List

from errors import StorageError
from models import Task

logger = logging.getLogger(__name__)

TASKS_FILENAME = 'tasks.json'
THEME_FILENAME = 'theme.json'
THEMES = ('light', 'dark')
DEFAULT_THEME = 'light'


class Storage:
    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    @property
    def tasks_file(self) -> Path:
        return self.data_dir / TASKS_FILENAME

    @property
    def theme_file(self) -> Path:
        return self.data_dir / THEME_FILENAME

    # -------------------- tasks --------------------
    def load_tasks(self) -> List[Task]:
        """Load the persisted task list.

        Missing file or unparseable JSON -> empty list. Entries that are not
        objects or have no usable text are skipped.
        """
        data = self._read_json(self.tasks_file)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("Ignoring %s: expected a JSON list, got %s", self.tasks_file, type(data).__name__)
            return []
        tasks: List[Task] = []
        for raw in data:
            if not isinstance(raw, dict):
                logger.warning("Skipping malformed task entry: %r", raw)
                continue
            task = Task.from_dict(raw)
            if not task.text.strip():
                logger.warning("Skipping task without text: %r", raw)
                continue
            tasks.append(task)
        logger.debug("Loaded %d tasks from %s", len(tasks), self.tasks_file)
        return tasks

    def save_tasks(self, tasks: Iterable[Task]) -> None:
        """Overwrite the persisted list with the given snapshot (pretty-printed)."""
        self._write_json(self.tasks_file, [task.to_dict() for task in tasks])

    # -------------------- theme --------------------
    def load_theme(self) -> str:
        data = self._read_json(self.theme_file)
        theme = data.get('theme') if isinstance(data, dict) else None
        return theme if theme in THEMES else DEFAULT_THEME

    def save_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme!r}")
        self._write_json(self.theme_file, {'theme': theme})

    # -------------------- low-level helpers --------------------
    @staticmethod
    def _read_json(path: Path) -> Any:
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read %s (%s); using defaults", path, exc)
            return None

    @staticmethod
    def _write_json(path: Path, payload: Any) -> None:
        # write to a sibling temp file then replace, so a crash never leaves half a file
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=path.name, suffix='.tmp', dir=str(path.parent))
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(payload, f, indent=4, ensure_ascii=False)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise StorageError(f"Could not write {path}: {exc}") from exc
