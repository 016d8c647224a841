"""Color & style helpers, with a light and a dark palette.

Decisions:
- Truecolor preferred; falls back to the 256-color cube if unsupported.
- Disables automatically when not a TTY unless FORCE_COLOR=1.
- Honors NO_COLOR for complete disable.
- TASKS_ACCENT (hex) overrides the accent color of both palettes.
- The chosen theme name ("light"/"dark") is persisted by Storage; this
  module only maps a name to escape sequences.
"""
from __future__ import annotations
import os, sys
from dataclasses import dataclass
from typing import Dict

_FORCE = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
_NO_COLOR = os.environ.get("NO_COLOR") is not None
_ENABLE = (_FORCE or sys.stdout.isatty()) and not _NO_COLOR
_COLORTERM = os.environ.get("COLORTERM", "").lower()
_USE_TRUECOLOR = _ENABLE and any(tok in _COLORTERM for tok in ("truecolor", "24bit"))

def _code(part: str) -> str:
    return f"\033[{part}m" if _ENABLE else ''

def _valid_hex(value: str) -> bool:
    h = value.lstrip('#')
    return len(h) == 6 and all(c in '0123456789abcdefABCDEF' for c in h)

def _hex_to_rgb(hex_code: str) -> tuple[int,int,int]:
    h = hex_code.lstrip('#')
    return int(h[0:2],16), int(h[2:4],16), int(h[4:6],16)

def _fg_256(r: int, g: int, b: int) -> str:
    """Approximate RGB to xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    r6, g6, b6 = to_6(r), to_6(g), to_6(b)
    return f"\033[38;5;{16 + 36 * r6 + 6 * g6 + b6}m"

def from_hex(hex_code: str) -> str:
    """Convert a hex color code to an ANSI foreground sequence ('' when disabled)."""
    if not _ENABLE:
        return ''
    r, g, b = _hex_to_rgb(hex_code)
    if _USE_TRUECOLOR:
        return f"\033[38;2;{r};{g};{b}m"
    return _fg_256(r, g, b)

RESET = _code('0')
BOLD = _code('1')
DIM = _code('2')
STRIKE = _code('9')

_ACCENT_OVERRIDE = os.environ.get('TASKS_ACCENT', '')
_ACCENT_OVERRIDE = '#' + _ACCENT_OVERRIDE.lstrip('#') if _valid_hex(_ACCENT_OVERRIDE) else ''


@dataclass(frozen=True)
class Palette:
    name: str
    text: str
    accent: str
    muted: str
    completed: str
    pending: str
    overdue: str
    bar: str

    @property
    def priority(self) -> Dict[str, str]:
        return {'high': self.overdue, 'medium': self.pending, 'low': self.completed}

    @property
    def buckets(self) -> Dict[str, str]:
        return {'Completed': self.completed, 'Pending': self.pending, 'Overdue': self.overdue}


def _palette(name: str, text: str, accent: str, completed: str, pending: str, overdue: str, bar: str) -> Palette:
    return Palette(
        name=name,
        text=from_hex(text),
        accent=from_hex(_ACCENT_OVERRIDE or accent) + BOLD,
        muted=DIM + from_hex(text),
        completed=from_hex(completed),
        pending=from_hex(pending),
        overdue=from_hex(overdue),
        bar=from_hex(bar),
    )


PALETTES: Dict[str, Palette] = {
    'light': _palette('light', '#1F2937', '#7C3AED', '#60A5FA', '#FBBF24', '#EF4444', '#3B82F6'),
    'dark': _palette('dark', '#F3F4F6', '#7C3AED', '#3B82F6', '#F59E0B', '#DC2626', '#60A5FA'),
}


def palette(theme: str) -> Palette:
    return PALETTES.get(theme, PALETTES['light'])


def toggled(theme: str) -> str:
    return 'light' if theme == 'dark' else 'dark'


def color(text: str, *styles: str) -> str:
    """Apply ANSI styles to a given text."""
    if not _ENABLE or not any(styles):
        return text
    return ''.join(styles) + text + RESET

__all__ = ['color', 'palette', 'toggled', 'Palette', 'PALETTES', 'RESET', 'BOLD', 'DIM', 'STRIKE', 'from_hex']
