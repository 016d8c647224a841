"""Settings loaded from environment variables (+ optional .env).

Priority: real environment variable > .env in the working directory > default.
All variables use the TASKS_ prefix.
"""
from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "TASKS"
DEFAULT_DATA_DIR = Path("~/.local/share/terminal-tasks").expanduser()


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _truthy_env(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    alt_screen: bool
    log_level: str
    log_to_file: bool

    @staticmethod
    def from_env(load_env_file: bool = True) -> "Settings":
        if load_env_file:
            load_dotenv(find_dotenv(usecwd=True), override=False)
        return Settings(
            data_dir=_env_path(_k("DATA_DIR"), DEFAULT_DATA_DIR),
            alt_screen=_truthy_env(os.getenv(_k("ALT_SCREEN")), True),
            log_level=(os.getenv(_k("LOG_LEVEL")) or "WARNING").strip().upper(),
            log_to_file=_truthy_env(os.getenv(_k("LOG_FILE")), True),
        )
