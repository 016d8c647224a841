from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

from main import main


@pytest.fixture()
def run(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("TASKS_LOG_FILE", "0")
    monkeypatch.setenv("TASKS_DATA_DIR", str(tmp_path / "from-env"))
    data_dir = tmp_path / "data"
    runner = CliRunner()

    def invoke(*args: str, input: str = None):
        return runner.invoke(main, ["--data-dir", str(data_dir), *args], input=input)

    invoke.data_dir = data_dir
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield invoke
    # main() installs its own handlers on the root logger
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
    logging.captureWarnings(False)


def test_add_and_list(run) -> None:
    first = run("add", "Buy", "milk", "--due", "2024-06-03", "-p", "high")
    assert first.exit_code == 0, first.output
    run("add", "Call mom")
    listed = run("list")
    lines = listed.output.splitlines()
    assert "Call mom" in lines[0]
    assert "Buy milk" in lines[1] and "high" in lines[1] and "2024-06-03" in lines[1]

    stored = json.loads((run.data_dir / "tasks.json").read_text())
    assert [t["text"] for t in stored] == ["Call mom", "Buy milk"]


def test_add_rejects_blank_and_bad_due(run) -> None:
    assert run("add", "   ").exit_code != 0
    assert run("add", "x", "--due", "soon").exit_code != 0
    assert run("add", "x", "--due", "20240603").exit_code != 0
    assert run("list").output == ""


def test_done_and_filter(run) -> None:
    task_id = run("add", "stretch").output.strip()
    assert run("done", task_id).output.strip() == f"{task_id} completed"
    assert "stretch" in run("list", "--filter", "completed").output
    assert run("list", "--filter", "pending").output == ""
    assert run("done", "missing").exit_code != 0


def test_rm_declined_then_confirmed(run) -> None:
    task_id = run("add", "maybe").output.strip()
    declined = run("rm", task_id, input="n\n")
    assert "Kept." in declined.output
    assert "maybe" in run("list").output
    run("rm", task_id, input="y\n")
    assert run("list").output == ""


def test_clear_with_yes(run) -> None:
    run("add", "a")
    run("add", "b")
    assert "Removed 2 tasks." in run("clear", "--yes").output


def test_theme_toggle_and_set(run) -> None:
    assert run("theme").output.strip() == "dark"
    assert run("theme").output.strip() == "light"
    assert run("theme", "dark").output.strip() == "dark"
    assert json.loads((run.data_dir / "theme.json").read_text()) == {"theme": "dark"}


def test_stats(run) -> None:
    run("add", "a")
    task_id = run("add", "b").output.strip()
    run("done", task_id)
    out = run("stats").output
    assert "50%" in out
    assert "Upcoming Tasks" in out
