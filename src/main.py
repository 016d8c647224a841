"""Main entry point for terminal tasks.

``tasks`` with no subcommand opens the interactive board; the subcommands
are one-shot versions of the most common actions, handy in scripts.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional

import click

from cli import CLI, click_confirm
from config import Settings
from errors import StorageError
from logging_setup import setup_logging
from models import FILTERS, PRIORITIES, SORTS
from render import Renderer
from stats import compute_statistics
from storage import THEMES, Storage
from store import TaskStore
from theme import toggled
from view import compute_visible

logger = logging.getLogger(__name__)


class Session:
    """Objects shared by every subcommand of one invocation."""

    def __init__(self, settings: Settings, data_dir: Path):
        self.settings = settings
        self.storage = Storage(data_dir)
        self.store = TaskStore.load(self.storage)

    def find(self, task_id: str):
        task = self.store.get(task_id)
        if task is None:
            raise click.ClickException(f"Task id {task_id} not found.")
        return task

    def report_save(self) -> None:
        if self.store.last_save_error:
            click.echo(f"Warning: not saved ({self.store.last_save_error})", err=True)


pass_session = click.make_pass_decorator(Session)


@click.group(invoke_without_command=True)
@click.option('--data-dir', type=click.Path(file_okay=False, path_type=Path), default=None,
              help='Directory holding tasks.json / theme.json (default: $TASKS_DATA_DIR).')
@click.pass_context
def main(ctx: click.Context, data_dir: Optional[Path]) -> None:
    """Personal task tracker for the terminal."""
    settings = Settings.from_env()
    data_dir = data_dir or settings.data_dir
    setup_logging(log_dir=data_dir if settings.log_to_file else None, console_level=settings.log_level)
    session = ctx.obj = Session(settings, data_dir)
    if ctx.invoked_subcommand is None:
        CLI(session.store, session.storage, theme=session.storage.load_theme(),
            alt_screen=settings.alt_screen).run()


@main.command()
@click.argument('text', nargs=-1, required=True)
@click.option('--due', default=None, help='Due date, YYYY-MM-DD.')
@click.option('--priority', '-p', type=click.Choice(PRIORITIES), default='medium', show_default=True)
@pass_session
def add(session: Session, text, due: Optional[str], priority: str) -> None:
    """Add a task."""
    try:
        task = session.store.add(' '.join(text), due=due, priority=priority)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint='--due') from exc
    if task is None:
        raise click.UsageError("Task text must not be blank.")
    click.echo(task.id)
    session.report_save()


@main.command(name='list')
@click.option('--filter', 'status', type=click.Choice(FILTERS), default='all', show_default=True)
@click.option('--sort', type=click.Choice(SORTS), default='default', show_default=True)
@click.option('--search', default='', help='Case-insensitive substring of text, due date or priority.')
@pass_session
def list_tasks(session: Session, status: str, sort: str, search: str) -> None:
    """Print tasks, one per line: id, state, priority, due, text."""
    for task in compute_visible(session.store.tasks, status, search, sort):
        mark = 'x' if task.completed else ' '
        click.echo(f"{task.id}  [{mark}]  {task.priority:<6}  {task.due or '-':<10}  {task.text}")


@main.command()
@click.argument('task_id')
@pass_session
def done(session: Session, task_id: str) -> None:
    """Toggle a task's completed flag."""
    session.find(task_id)
    task = session.store.toggle_completed(task_id)
    click.echo(f"{task.id} {'completed' if task.completed else 'reopened'}")
    session.report_save()


@main.command()
@click.argument('task_id')
@click.option('--yes', '-y', is_flag=True, help='Do not ask for confirmation.')
@pass_session
def rm(session: Session, task_id: str, yes: bool) -> None:
    """Delete a task."""
    task = session.find(task_id)
    if not yes and not click_confirm(f'Delete "{task.text}"?'):
        click.echo("Kept.")
        return
    session.store.remove(task_id)
    click.echo(f"Removed {task_id}")
    session.report_save()


@main.command()
@click.option('--yes', '-y', is_flag=True, help='Do not ask for confirmation.')
@pass_session
def clear(session: Session, yes: bool) -> None:
    """Delete every task."""
    if not yes and not click_confirm(f"Clear all {len(session.store)} tasks?"):
        click.echo("Kept.")
        return
    click.echo(f"Removed {session.store.clear()} tasks.")
    session.report_save()


@main.command()
@pass_session
def stats(session: Session) -> None:
    """Show totals, progress and the upcoming-week chart."""
    renderer = Renderer(session.storage.load_theme())
    statistics = compute_statistics(session.store.tasks)
    for line in renderer.stat_cards(statistics) + renderer.overview(statistics) + renderer.upcoming_chart(statistics):
        click.echo(line)


@main.command()
@click.argument('name', required=False, type=click.Choice(THEMES))
@pass_session
def theme(session: Session, name: Optional[str]) -> None:
    """Set the theme, or toggle it when no name is given."""
    name = name or toggled(session.storage.load_theme())
    try:
        session.storage.save_theme(name)
    except StorageError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(name)


if __name__ == "__main__":
    main()
