"""Color & style helpers.

Decisions:
- Truecolor preferred; falls back to 256-color cube if unsupported.
- Disables automatically when not a TTY unless FORCE_COLOR=1.
- Honors NO_COLOR for complete disable.
- Palette overrides via TASKNC_* environment variables or the config
  directory's `colors` file (same KEY=#rrggbb lines).
"""
from __future__ import annotations
import os, sys
from pathlib import Path
from typing import Dict

_FORCE = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
_NO_COLOR = os.environ.get("NO_COLOR") is not None
_ENABLE = (_FORCE or sys.stdout.isatty()) and not _NO_COLOR
_COLORTERM = os.environ.get("COLORTERM", "").lower()
_USE_TRUECOLOR = _ENABLE and any(tok in _COLORTERM for tok in ("truecolor", "24bit"))

def _code(part: str) -> str:
    """Generate ANSI escape code for a given style part."""
    return f"\033[{part}m" if _ENABLE else ''

def _hex_to_rgb(hex_code: str) -> tuple[int,int,int]:
    h = hex_code.lstrip('#')
    return int(h[0:2],16), int(h[2:4],16), int(h[4:6],16)

def _fg_256(r: int, g: int, b: int) -> str:
    """Approximate RGB to xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    idx = 16 + 36 * to_6(r) + 6 * to_6(g) + to_6(b)
    return f"\033[38;5;{idx}m"

def _from_hex(hex_code: str) -> str:
    if not _ENABLE:
        return ''
    r, g, b = _hex_to_rgb(hex_code)
    if _USE_TRUECOLOR:
        return f"\033[38;2;{r};{g};{b}m"
    return _fg_256(r, g, b)

def _valid_hex(value: str) -> bool:
    h = value.lstrip('#')
    return len(h) == 6 and all(c in '0123456789abcdefABCDEF' for c in h)

RESET = _code('0')
BOLD = _code('1')
DIM = _code('2')
REVERSE = _code('7')

PALETTE_DEFAULTS: Dict[str, str] = {
    'TASKNC_TITLE': '#476EAE',
    'TASKNC_PROJECT': '#48B3AF',
    'TASKNC_DESCRIPTION': '#E8E8E8',
    'TASKNC_DATE': '#F6FF99',
    'TASKNC_ERROR': '#E35D5D',
}

def _file_overrides(path: Path) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    if not path.exists():
        return overrides
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k, v = k.strip(), v.strip()
        if k in PALETTE_DEFAULTS and _valid_hex(v):
            overrides[k] = '#' + v.lstrip('#')
    return overrides

_xdg = os.environ.get('XDG_CONFIG_HOME') or str(Path.home() / '.config')
_OVERRIDES = _file_overrides(Path(_xdg) / 'tasknc' / 'colors')

def _resolve(key: str) -> str:
    # priority: real env var > colors file > default
    env = os.environ.get(key)
    if env and _valid_hex(env):
        return env
    return _OVERRIDES.get(key, PALETTE_DEFAULTS[key])

TITLE_COLOR = _from_hex(_resolve('TASKNC_TITLE')) + BOLD
PROJECT_COLOR = _from_hex(_resolve('TASKNC_PROJECT'))
DESCRIPTION_COLOR = _from_hex(_resolve('TASKNC_DESCRIPTION'))
DATE_COLOR = _from_hex(_resolve('TASKNC_DATE'))
ERROR_COLOR = _from_hex(_resolve('TASKNC_ERROR')) + BOLD
SELECTED = REVERSE
STATUS_COLOR = DIM

def color(text: str, *styles: str) -> str:
    """Apply ANSI styles to a given text."""
    if not _ENABLE:
        return text
    return ''.join(styles) + text + RESET

__all__ = [
    'color', 'RESET', 'BOLD', 'DIM', 'REVERSE', 'TITLE_COLOR', 'PROJECT_COLOR',
    'DESCRIPTION_COLOR', 'DATE_COLOR', 'ERROR_COLOR', 'SELECTED', 'STATUS_COLOR',
]
