"""Terminal rendering of the task board.

Pure consumer of the view pipeline and the statistics engine: it is handed
the visible list and a Statistics object and turns them into lines of
(possibly colored) text. Nothing here reads or changes the store.

Layout, top to bottom:
    header (filter / sort / search / theme)
    stat cards (total / completed / overdue) + progress bar
    task list, numbered by display position
    task overview (completed / pending / overdue bars)
    upcoming seven days (column chart, in the user's column order)
"""
from __future__ import annotations
import re, shutil
from datetime import date
from typing import List, Optional, Sequence

import click

from models import Task, parse_timestamp
from stats import Statistics
from theme import BOLD, STRIKE, Palette, color, palette

MIN_WIDTH = 40
MAX_WIDTH = 100
PROGRESS_WIDTH = 30
CHART_HEIGHT = 5
DAY_COL_WIDTH = 7
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")
CHECK = {True: '[x]', False: '[ ]'}


def visible_len(s: str) -> int:
    return len(ANSI_RE.sub('', s))


def wrap_words(text: str, width: int) -> List[str]:
    """Greedy word wrap; words longer than the width are hard-split."""
    width = max(1, width)
    lines: List[str] = []
    current = ''
    for word in text.split():
        while len(word) > width:
            if current:
                lines.append(current)
                current = ''
            lines.append(word[:width])
            word = word[width:]
        candidate = word if not current else current + ' ' + word
        if len(candidate) <= width:
            current = candidate
        else:
            if current:
                lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines or ['']


class Renderer:
    def __init__(self, theme: str = 'light', width: Optional[int] = None):
        self.theme = theme
        self._width = width

    @property
    def colors(self) -> Palette:
        return palette(self.theme)

    @property
    def width(self) -> int:
        if self._width is not None:
            return self._width
        cols = shutil.get_terminal_size((80, 30)).columns
        return max(MIN_WIDTH, min(MAX_WIDTH, cols))

    # -------------------- entry points --------------------
    def render(self, visible: Sequence[Task], stats: Statistics, *, filter: str = 'all',
               sort: str = 'default', search: str = '', today: Optional[date] = None) -> List[str]:
        today = today or date.today()
        lines: List[str] = []
        lines.extend(self.header(filter, sort, search))
        lines.append('')
        lines.extend(self.stat_cards(stats))
        lines.append('')
        lines.extend(self.task_list(visible, today))
        lines.append('')
        lines.extend(self.overview(stats))
        lines.append('')
        lines.extend(self.upcoming_chart(stats))
        return lines

    def display(self, *args, **kwargs) -> None:
        for line in self.render(*args, **kwargs):
            click.echo(line)

    # -------------------- sections --------------------
    def header(self, filter: str, sort: str, search: str) -> List[str]:
        c = self.colors
        title = color('Task Manager', c.accent)
        parts = [f'filter: {filter}', f'sort: {sort}']
        if search:
            parts.append(f'search: "{search}"')
        parts.append(f'theme: {self.theme}')
        return [title + '  ' + color('  '.join(parts), c.muted), color('=' * self.width, c.muted)]

    def stat_cards(self, stats: Statistics) -> List[str]:
        c = self.colors
        cards = [
            ('Total', stats.total, c.text),
            ('Completed', stats.completed, c.completed),
            ('Overdue', stats.overdue, c.overdue),
        ]
        row = '   '.join(f"{color(label, c.muted)} {color(str(value), value_color, BOLD)}"
                         for label, value, value_color in cards)
        filled = round(PROGRESS_WIDTH * stats.progress_percent / 100)
        bar = color('#' * filled, c.accent) + color('.' * (PROGRESS_WIDTH - filled), c.muted)
        return [row, f"Progress [{bar}] {stats.progress_percent}%"]

    def task_list(self, visible: Sequence[Task], today: date) -> List[str]:
        c = self.colors
        if not visible:
            return [color('(no tasks)', c.muted)]
        lines: List[str] = []
        for pos, task in enumerate(visible, start=1):
            lines.extend(self._task_lines(pos, task, today))
        return lines

    def overview(self, stats: Statistics) -> List[str]:
        c = self.colors
        lines = [color('Task Overview', BOLD)]
        bar_space = max(10, self.width - 24)
        for label, value in stats.buckets.items():
            share = value / stats.total if stats.total else 0
            bar = color('#' * round(bar_space * share), c.buckets[label])
            lines.append(f"  {label:<10} {value:>4} {bar}")
        return lines

    def upcoming_chart(self, stats: Statistics) -> List[str]:
        c = self.colors
        lines = [color('Upcoming Tasks (Next 7 Days)', BOLD)]
        counts = [count for _, count in stats.upcoming]
        peak = max(counts, default=0)
        heights = [max(1, round(CHART_HEIGHT * count / peak)) if count else 0 for count in counts]
        for level in range(CHART_HEIGHT, 0, -1):
            row = ''.join(_cell('###' if h >= level else '', c.bar) for h in heights)
            lines.append(row.rstrip())
        # empty days still get a thin baseline, like a zero-height bar
        lines.append(''.join(_cell('___', c.bar if h else c.muted) for h in heights).rstrip())
        lines.append(''.join(_cell(day[5:], c.text) for day, _ in stats.upcoming).rstrip())
        lines.append(''.join(_cell(str(count), BOLD) for count in counts).rstrip())
        return lines

    # -------------------- task rows --------------------
    def _task_lines(self, pos: int, task: Task, today: date) -> List[str]:
        c = self.colors
        prefix = f"{pos:>2}. {CHECK[task.completed]} "
        badge = task.priority.upper()
        text_width = self.width - len(prefix) - len(badge) - 1
        wrapped = wrap_words(task.text, text_width)
        text_style = (c.muted + STRIKE) if task.completed else c.text

        first = wrapped[0]
        pad = ' ' * max(1, text_width - len(first) + 1)
        lines = [color(prefix, c.accent) + color(first, text_style) + pad + color(badge, c.priority[task.priority])]
        indent = ' ' * len(prefix)
        for extra in wrapped[1:]:
            lines.append(indent + color(extra, text_style))

        meta: List[str] = []
        if task.due:
            if task.is_overdue(today):
                meta.append(color(f"due {task.due} (overdue)", c.overdue))
            else:
                meta.append(color(f"due {task.due}", c.muted))
        added = parse_timestamp(task.created_at)
        if added.year > 1:
            meta.append(color('added ' + added.astimezone().strftime('%Y-%m-%d %H:%M'), c.muted))
        if meta:
            lines.append(indent + '  '.join(meta))
        return lines


def _cell(text: str, style: str, width: int = DAY_COL_WIDTH) -> str:
    """Center ``text`` in a fixed-width column, coloring only the text itself."""
    left = (width - len(text)) // 2
    right = width - len(text) - left
    return ' ' * left + color(text, style) + ' ' * right
