"""Color & style helpers for task listings.

Decisions:
- Truecolor preferred; falls back to 256-color cube if unsupported.
- Disables automatically when not a TTY unless FORCE_COLOR=1.
- Honors NO_COLOR for complete disable.
- Palette overrides via TASK_CLI_PRIMARY / TASK_CLI_TODO /
  TASK_CLI_INPROGRESS / TASK_CLI_DONE (hex, leading '#' optional).
"""
from __future__ import annotations
import os, sys
from typing import Optional

_FORCE = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
_NO_COLOR = os.environ.get("NO_COLOR") is not None
_ENABLE = (_FORCE or sys.stdout.isatty()) and not _NO_COLOR
_COLORTERM = os.environ.get("COLORTERM", "").lower()
_USE_TRUECOLOR = _ENABLE and any(tok in _COLORTERM for tok in ("truecolor", "24bit"))

def _code(part: str) -> str:
    """Generate ANSI escape code for a given style part."""
    return f"\033[{part}m" if _ENABLE else ''

def _hex_to_rgb(hex_code: str) -> tuple[int,int,int]:
    """Convert a hex color code to an RGB tuple."""
    h = hex_code.lstrip('#')
    return int(h[0:2],16), int(h[2:4],16), int(h[4:6],16)

def _fg_256(r: int, g: int, b: int) -> str:
    """Approximate RGB to xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    idx = 16 + 36 * to_6(r) + 6 * to_6(g) + to_6(b)
    return f"\033[38;5;{idx}m"

def _from_hex(hex_code: str) -> str:
    """Convert a hex color code to an ANSI escape sequence."""
    if not _ENABLE:
        return ''
    r, g, b = _hex_to_rgb(hex_code)
    if _USE_TRUECOLOR:
        return f"\033[38;2;{r};{g};{b}m"
    return _fg_256(r, g, b)

def _valid_hex(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    h = value.strip().lstrip('#')
    if len(h) == 6 and all(c in '0123456789abcdefABCDEF' for c in h):
        return '#' + h
    return None

def _palette(name: str, default: str) -> str:
    """Env override if it is a valid hex color, else the default."""
    return _valid_hex(os.environ.get(name)) or default

RESET = _code('0')
BOLD = _code('1')
DIM = _code('2')

HEX_PRIMARY = _palette('TASK_CLI_PRIMARY', '#476EAE')
HEX_TODO = _palette('TASK_CLI_TODO', '#48B3AF')
HEX_INPROGRESS = _palette('TASK_CLI_INPROGRESS', '#F6FF99')
HEX_DONE = _palette('TASK_CLI_DONE', '#A7E399')

PRIMARY = _from_hex(HEX_PRIMARY)

STATUS_COLOR = {
    'todo': _from_hex(HEX_TODO),
    'in-progress': _from_hex(HEX_INPROGRESS),
    'done': _from_hex(HEX_DONE),
}

HEADER_COLOR = PRIMARY
RULE_COLOR = DIM + PRIMARY
ID_COLOR = PRIMARY + BOLD

def color(text: str, *styles: str) -> str:
    """Apply ANSI styles to a given text."""
    if not _ENABLE or not any(styles):
        return text
    return ''.join(styles) + text + RESET

__all__ = [
    'color','BOLD','DIM','STATUS_COLOR','HEADER_COLOR','RULE_COLOR','ID_COLOR',
]
