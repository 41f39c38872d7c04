"""Runtime configuration.

Defaults: sort by due date, filters
persist and cascade. The config file lives at
$XDG_CONFIG_HOME/tasknc/config (falling back to ~/.config/tasknc/config)
and holds `key = value` lines; `#` starts a comment anywhere on a line.

Decisions:
- A bad line never aborts startup: it is logged and the default stays.
- The same parser backs the `:set` command so both paths validate alike.
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from models import SORT_MODES

log = logging.getLogger(__name__)

NAME = "taskwarrior terminal shell"
SHORTNAME = "tasknc"
VERSION = "0.5.0"

NC_TIMEOUT_DEFAULT = 500
STATUSBAR_TIMEOUT_DEFAULT = 3
LOGLVL_DEFAULT = 0


@dataclass
class Config:
    nc_timeout: int = NC_TIMEOUT_DEFAULT
    statusbar_timeout: int = STATUSBAR_TIMEOUT_DEFAULT
    loglvl: int = LOGLVL_DEFAULT
    sortmode: str = 'd'
    filter_persist: bool = True
    filter_cascade: bool = True
    version: str = ''

    def set(self, name: str, raw: str) -> Any:
        """Parse and store one variable; raises ValueError for bad input."""
        name = ALIASES.get(name, name)
        parser = PARSERS.get(name)
        if parser is None:
            raise ValueError(f'unknown variable: {name}')
        value = parser(raw.strip())
        setattr(self, name, value)
        return value

    def show(self, name: str) -> str:
        name = ALIASES.get(name, name)
        if name not in PARSERS:
            raise ValueError(f'unknown variable: {name}')
        value = getattr(self, name)
        if isinstance(value, bool):
            return str(int(value))
        return str(value)


def _int(raw: str) -> int:
    return int(raw)


def _flag(raw: str) -> bool:
    if raw not in {'0', '1'}:
        raise ValueError('must be a 0 or 1')
    return raw == '1'


def _sortmode(raw: str) -> str:
    mode = raw[:1].lower()
    if len(raw) != 1 or mode not in SORT_MODES:
        raise ValueError('valid sort modes are: d, n, p, or r')
    return mode


PARSERS: Dict[str, Callable[[str], Any]] = {
    'nc_timeout': _int,
    'statusbar_timeout': _int,
    'loglvl': _int,
    'sortmode': _sortmode,
    'filter_persist': _flag,
    'filter_cascade': _flag,
    'version': str,
}
# accepted by :set and :show
ALIASES: Dict[str, str] = {'tasknc_version': 'version'}


def config_path() -> Path:
    xdg = os.environ.get('XDG_CONFIG_HOME')
    if xdg:
        return Path(xdg) / 'tasknc' / 'config'
    return Path.home() / '.config' / 'tasknc' / 'config'


def load_config(path: Optional[Path] = None, config: Optional[Config] = None) -> Config:
    """Read the config file into `config` (or a fresh Config)."""
    config = config or Config()
    path = path or config_path()
    log.debug('config file: %s', path)
    if not path.exists():
        log.error('config file could not be opened: %s', path)
        return config
    for line in path.read_text().splitlines():
        line = line.split('#', 1)[0].strip()
        if not line:
            continue
        key, sep, raw = line.partition('=')
        key = ALIASES.get(key.strip(), key.strip())
        if not sep or key == 'version':
            log.error('unhandled config line: %s', line)
            continue
        try:
            value = config.set(key, raw)
        except ValueError as exc:
            log.error('parsing %s configuration: %s', key, exc)
            continue
        log.debug('%s set to %s', key, value)
    return config
