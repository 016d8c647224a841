"""Logging configuration.

Console handler goes to stderr at the configured level so warnings (failed
saves, unreadable data files) show up under the board; the file handler
keeps DEBUG detail in ``<data dir>/tasks.log``.
"""
from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FILENAME = 'tasks.log'
APP_LOGGERS = ('store', 'storage', 'view', 'stats', 'upcoming', 'cli', 'main', 'config', 'theme', 'render',
               'logging_setup')


class _ConsoleNoiseFilter(logging.Filter):
    """Our own modules pass through; third-party loggers only on ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.split('.', 1)[0] in APP_LOGGERS:
            return True
        return record.levelno >= logging.ERROR


def setup_logging(*, log_dir: Optional[Path] = None, console_level: str = 'WARNING',
                  file_level: int = logging.DEBUG) -> None:
    """Install console (+ optional file) handlers on the root logger. Call once."""
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    level = logging.getLevelName(console_level.upper())
    ch.setLevel(level if isinstance(level, int) else logging.WARNING)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    if log_dir is not None:
        log_dir = Path(log_dir)
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(str(log_dir / LOG_FILENAME), encoding='utf-8')
        except OSError as exc:
            logging.getLogger(__name__).warning("File logging disabled: %s", exc)
        else:
            fh.setLevel(file_level)
            fh.setFormatter(fmt)
            root.addHandler(fh)

    logging.captureWarnings(True)
