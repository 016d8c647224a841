from __future__ import annotations

from pathlib import Path

from config import DEFAULT_DATA_DIR, Settings
from theme import PALETTES, palette, toggled


def test_defaults(monkeypatch) -> None:
    for name in ("TASKS_DATA_DIR", "TASKS_ALT_SCREEN", "TASKS_LOG_LEVEL", "TASKS_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings.from_env(load_env_file=False)
    assert settings.data_dir == DEFAULT_DATA_DIR
    assert settings.alt_screen is True
    assert settings.log_level == "WARNING"
    assert settings.log_to_file is True


def test_environment_overrides(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKS_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKS_ALT_SCREEN", "off")
    monkeypatch.setenv("TASKS_LOG_LEVEL", "debug")
    monkeypatch.setenv("TASKS_LOG_FILE", "0")
    settings = Settings.from_env(load_env_file=False)
    assert settings.data_dir == tmp_path
    assert settings.alt_screen is False
    assert settings.log_level == "DEBUG"
    assert settings.log_to_file is False


def test_dotenv_does_not_override_real_env(monkeypatch, tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("TASKS_LOG_LEVEL=ERROR\nTASKS_ALT_SCREEN=no\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TASKS_LOG_LEVEL", "INFO")
    # setenv first so teardown removes whatever load_dotenv writes back
    monkeypatch.setenv("TASKS_ALT_SCREEN", "")
    monkeypatch.delenv("TASKS_ALT_SCREEN")
    settings = Settings.from_env()
    assert settings.log_level == "INFO"
    assert settings.alt_screen is False


def test_theme_helpers() -> None:
    assert toggled("light") == "dark" and toggled("dark") == "light"
    assert palette("nonsense") is PALETTES["light"]
