"""Log file setup.

tasknc keeps the terminal for the task list, so everything goes to a log
file. The numeric log level of the config file / `-l` option maps to
logging levels: 0 warnings and errors, 1 info, 2 debug, 3 verbose.
"""
from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Dict, Optional

VERBOSE = 5
logging.addLevelName(VERBOSE, 'VERBOSE')

LOG_LEVELS: Dict[int, int] = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
    3: VERBOSE,
}
LOG_FORMAT = '[%(asctime)s] %(levelname)s: %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def default_log_path() -> Path:
    data_home = os.environ.get('XDG_DATA_HOME') or str(Path.home() / '.local' / 'share')
    return Path(data_home) / 'tasknc' / 'tasknc.log'


def level_for(loglvl: int) -> int:
    """Clamp a numeric tasknc log level into the table above."""
    return LOG_LEVELS[max(0, min(loglvl, max(LOG_LEVELS)))]


def setup_logging(loglvl: int = 0, path: Optional[Path] = None) -> logging.Handler:
    """Attach a file handler to the root logger and return it."""
    path = path or default_log_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding='utf-8')
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    root = logging.getLogger()
    root.addHandler(handler)
    set_level(loglvl)
    return handler


def set_level(loglvl: int) -> None:
    logging.getLogger().setLevel(level_for(loglvl))
