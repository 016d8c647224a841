"""Interactive command loop for the task board.

Each line typed is one discrete event: it becomes exactly one store
mutation or one change of the view parameters (filter / sort / search),
after which the board is recomputed and redrawn. The store persists its
own changes; this module only reports failed saves as warnings.

Positions typed by the user ("done 3", "mv 1 4") are 1-based and refer to
the list as currently displayed.
"""
from __future__ import annotations
import logging
from datetime import date
from typing import Callable, List, Optional, Tuple

import click

from errors import InvalidIndex, StorageError
from models import FILTERS, PRIORITIES, SORTS, Task
from render import Renderer
from stats import Statistics, compute_statistics
from storage import Storage
from store import TaskStore
from theme import toggled
from upcoming import UpcomingDays
from view import compute_visible

logger = logging.getLogger(__name__)

# --- terminal control helpers ---
# ESC[3J (scrollback), ESC[H (home), ESC[2J (screen), ESC[H (home); 3J first for picky terminals.
def _clear_screen() -> None:  # pragma: no cover
    click.echo("\033[3J\033[H\033[2J\033[H", nl=False)


def _enter_alt_screen() -> None:  # pragma: no cover
    click.echo("\033[?1049h", nl=False)


def _leave_alt_screen() -> None:  # pragma: no cover
    click.echo("\033[?1049l", nl=False)


def click_confirm(prompt: str) -> bool:
    """Yes/no gate; Ctrl-C or EOF counts as "no"."""
    try:
        return click.confirm(prompt, default=False)
    except click.Abort:
        return False


FILTER_ALIASES = {
    'a': 'all', 'all': 'all',
    'p': 'pending', 'pending': 'pending',
    'c': 'completed', 'completed': 'completed', 'done': 'completed',
    'o': 'overdue', 'overdue': 'overdue',
}

SORT_ALIASES = {
    'd': 'default', 'default': 'default', 'new': 'default',
    'p': 'priority', 'priority': 'priority',
    'due': 'due',
    'm': 'manual', 'manual': 'manual',
}

PRIORITY_ALIASES = {
    'h': 'high', 'high': 'high',
    'm': 'medium', 'med': 'medium', 'medium': 'medium',
    'l': 'low', 'low': 'low',
}

_UNSET = object()


def parse_fields(tokens: List[str]) -> Tuple[str, object, object]:
    """Split "buy milk due:2024-06-01 p:high" into (text, due, priority).

    due/priority come back as _UNSET when not given; "due:none" (or an empty
    "due:") means "no due date". Raises ValueError on an unknown priority.
    """
    words: List[str] = []
    due: object = _UNSET
    priority: object = _UNSET
    for tok in tokens:
        key, sep, value = tok.partition(':')
        key = key.lower()
        if sep and key == 'due':
            due = None if value.lower() in ('', 'none', '-') else value
        elif sep and key in ('p', 'prio', 'priority'):
            resolved = PRIORITY_ALIASES.get(value.lower())
            if resolved is None:
                raise ValueError(f"Invalid priority: {value} (use {'/'.join(PRIORITIES)})")
            priority = resolved
        else:
            words.append(tok)
    return ' '.join(words).strip(), due, priority


class CLI:
    def __init__(self, store: TaskStore, storage: Optional[Storage] = None, *, theme: str = 'light',
                 confirm: Optional[Callable[[str], bool]] = None, alt_screen: bool = True,
                 today: Optional[date] = None):
        self.store = store
        self.storage = storage
        self.theme = theme
        self.confirm = confirm or click_confirm
        self.alt_screen = alt_screen
        self._today = today
        self.filter = 'all'
        self.sort = 'default'
        self.search = ''
        self.upcoming = UpcomingDays.from_today(self.today)
        self.renderer = Renderer(theme)

    @property
    def today(self) -> date:
        return self._today or date.today()

    # -------------------- derived state --------------------
    def visible(self) -> List[Task]:
        return compute_visible(self.store.tasks, self.filter, self.search, self.sort, today=self.today)

    def statistics(self) -> Statistics:
        return compute_statistics(self.store.tasks, self.upcoming.days, today=self.today)

    def draw(self) -> None:
        self.renderer.display(self.visible(), self.statistics(), filter=self.filter, sort=self.sort,
                              search=self.search, today=self.today)

    # -------------------- main loop --------------------
    def run(self) -> None:  # pragma: no cover - interactive
        """Main REPL loop; board is always cleared/redrawn each cycle."""
        exit_message: Optional[str] = None
        message: Optional[str] = None
        if self.alt_screen:
            _enter_alt_screen()
        try:
            while True:
                _clear_screen()
                self.draw()
                if message:
                    click.echo('\n' + message)
                line = input("\n: ").strip()
                if not line:
                    message = None
                    continue
                lower = line.lower()
                if lower == 'help':
                    _clear_screen()
                    click.echo(self.help_text())
                    input("\nPress Enter to return to the board...")
                    message = None
                    continue
                if lower in ('exit', 'quit', 'q'):
                    exit_message = "Goodbye."
                    break
                message = self.handle(line)
        except (KeyboardInterrupt, EOFError):
            exit_message = "Interrupted. Goodbye."
        finally:
            self.store.close()
            if self.alt_screen:
                _leave_alt_screen()
            if self.store.last_save_error:
                click.echo(f"Warning: last save failed: {self.store.last_save_error}", err=True)
            if exit_message:
                click.echo(exit_message)

    # -------------------- command dispatch --------------------
    def handle(self, line: str) -> Optional[str]:
        """Run one command line; returns a message to show under the board (or None)."""
        tokens = line.split()
        if not tokens:
            return None
        cmd, args = tokens[0].lower(), tokens[1:]
        handler = self._commands().get(cmd)
        if handler is None:
            return "Unknown command. Type 'help' for instructions."
        try:
            message = handler(args)
        except ValueError as exc:
            message = str(exc)
        if self.store.last_save_error:
            warning = f"Warning: changes kept in memory but not saved ({self.store.last_save_error})"
            message = f"{message}\n{warning}" if message else warning
        return message

    def _commands(self):
        return {
            'add': self._cmd_add,
            'a': self._cmd_add,
            'edit': self._cmd_edit,
            'e': self._cmd_edit,
            'done': self._cmd_done,
            'toggle': self._cmd_done,
            'x': self._cmd_done,
            'rm': self._cmd_rm,
            'remove': self._cmd_rm,
            'clear': self._cmd_clear,
            'mv': self._cmd_mv,
            'move': self._cmd_mv,
            'days': self._cmd_days,
            'filter': self._cmd_filter,
            'f': self._cmd_filter,
            'sort': self._cmd_sort,
            's': self._cmd_sort,
            'search': self._cmd_search,
            '/': self._cmd_search,
            'theme': self._cmd_theme,
        }

    # ---- individual command helpers ----
    def _cmd_add(self, args: List[str]) -> Optional[str]:
        text, due, priority = parse_fields(args)
        if not text:
            return "Usage: add <text> [due:YYYY-MM-DD] [p:high|medium|low]"
        task = self.store.add(
            text,
            due=None if due is _UNSET else due,
            priority='medium' if priority is _UNSET else priority,
        )
        return None if task else "Text required."

    def _cmd_edit(self, args: List[str]) -> Optional[str]:
        if not args:
            return "Usage: edit <n> [new text] [due:YYYY-MM-DD|due:none] [p:high|medium|low]"
        task = self._resolve(args[0])
        text, due, priority = parse_fields(args[1:])
        changes = {}
        if text:
            changes['text'] = text
        if due is not _UNSET:
            changes['due'] = due
        if priority is not _UNSET:
            changes['priority'] = priority
        if not changes:
            return "Nothing to change."
        self.store.update(task.id, **changes)
        return None

    def _cmd_done(self, args: List[str]) -> Optional[str]:
        if len(args) != 1:
            return "Usage: done <n>"
        task = self._resolve(args[0])
        self.store.toggle_completed(task.id)
        return None

    def _cmd_rm(self, args: List[str]) -> Optional[str]:
        if len(args) != 1:
            return "Usage: rm <n>"
        task = self._resolve(args[0])
        if not self.confirm(f'Delete "{task.text}"?'):
            return "Kept."
        self.store.remove(task.id)
        return f'Task "{task.text}" removed.'

    def _cmd_clear(self, args: List[str]) -> Optional[str]:
        if args:
            return "Usage: clear"
        if not len(self.store):
            return "Nothing to clear."
        if not self.confirm(f"Clear all {len(self.store)} tasks?"):
            return "Kept."
        removed = self.store.clear()
        return f"Removed {removed} tasks."

    def _cmd_mv(self, args: List[str]) -> Optional[str]:
        if len(args) != 2 or not all(a.isdigit() for a in args):
            return "Usage: mv <from> <to>"
        visible = self.visible()
        try:
            src = self._store_index(visible, int(args[0]))
            dst = self._store_index(visible, int(args[1]))
            self.store.reorder(src, dst)
        except InvalidIndex as exc:
            return str(exc)
        if self.sort != 'manual':
            return "Moved. Use 'sort manual' to see the manual order."
        return None

    def _cmd_days(self, args: List[str]) -> Optional[str]:
        if len(args) != 2 or not all(a.isdigit() for a in args):
            return "Usage: days <from> <to>   (columns of the upcoming chart, 1-7)"
        try:
            self.upcoming.reorder(int(args[0]) - 1, int(args[1]) - 1)
        except InvalidIndex as exc:
            return str(exc)
        return None

    def _cmd_filter(self, args: List[str]) -> Optional[str]:
        name = FILTER_ALIASES.get(args[0].lower()) if len(args) == 1 else None
        if not name:
            return f"Usage: filter <{'|'.join(FILTERS)}>"
        self.filter = name
        return None

    def _cmd_sort(self, args: List[str]) -> Optional[str]:
        name = SORT_ALIASES.get(args[0].lower()) if len(args) == 1 else None
        if not name:
            return f"Usage: sort <{'|'.join(SORTS)}>"
        self.sort = name
        return None

    def _cmd_search(self, args: List[str]) -> Optional[str]:
        self.search = ' '.join(args)
        return None

    def _cmd_theme(self, args: List[str]) -> Optional[str]:
        self.theme = toggled(self.theme)
        self.renderer.theme = self.theme
        if self.storage is None:
            return None
        try:
            self.storage.save_theme(self.theme)
        except StorageError as exc:
            logger.warning("Theme not saved: %s", exc)
            return f"Warning: theme not saved ({exc})"
        return None

    # ---- position helpers ----
    def _resolve(self, token: str) -> Task:
        """Map a displayed position to its Task; ValueError when there is none."""
        raw = token.rstrip('.')
        if not raw.isdigit():
            raise ValueError("Invalid position.")
        visible = self.visible()
        pos = int(raw)
        if pos < 1 or pos > len(visible):
            raise ValueError(f"No task #{pos} in the current view.")
        return visible[pos - 1]

    def _store_index(self, visible: List[Task], pos: int) -> int:
        if not 1 <= pos <= len(visible):
            raise InvalidIndex(pos - 1, len(visible))
        idx = self.store.index_of(visible[pos - 1].id)
        if idx is None:  # pragma: no cover - visible is derived from the store
            raise InvalidIndex(pos - 1, len(visible))
        return idx

    @staticmethod
    def help_text() -> str:
        return "\n".join([
            "Commands:",
            "  add <text> [due:YYYY-MM-DD] [p:h|m|l]   Add a task (newest goes first)",
            "  edit <n> [text] [due:…|due:none] [p:…] Change text, due date or priority",
            "  done <n>                               Toggle completed",
            "  rm <n>                                 Delete a task (asks first)",
            "  clear                                  Delete every task (asks first)",
            "  mv <from> <to>                         Move a task (see it with 'sort manual')",
            "  days <from> <to>                       Reorder the upcoming-days chart columns",
            f"  filter <{'|'.join(FILTERS)}>",
            f"  sort <{'|'.join(SORTS)}>",
            "  search [text]                          Filter by text/due/priority; empty clears",
            "  theme                                  Toggle light/dark",
            "  help                                   Show this help (press Enter to return)",
            "  exit                                   Save and exit",
            "",
            "<n> is the number shown next to the task.",
        ])
