"""Line-mode rendering of the task page.

Layout per row: project column (as wide as the longest project), the
description filling the middle, and a date column holding the due date
or, failing that, the priority letter. The first line is the title with
the visible/total counters and today's date.
"""
from __future__ import annotations
import re
import shutil
import time
from datetime import datetime
from typing import List, Optional, Tuple

from config import SHORTNAME, VERSION
from models import Task
from theme import (color, DATE_COLOR, DESCRIPTION_COLOR, ERROR_COLOR, PROJECT_COLOR,
                   SELECTED, STATUS_COLOR, TITLE_COLOR)

DATELENGTH = 10
MIN_DESCRIPTION = 10
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")
# title, blank separator, status line
CHROME_LINES = 3


def visible_len(s: str) -> int:
    return len(ANSI_RE.sub('', s))


def pad(text: str, width: int, align: str = 'l') -> str:
    """Cut `text` to `width` (ending in '...') and pad it with spaces."""
    if width <= 0:
        return ''
    if len(text) > width:
        text = text[:width - 3] + '...' if width > 3 else text[:width]
    return text.ljust(width) if align == 'l' else text.rjust(width)


def utc_date(timestamp: int, now: Optional[float] = None) -> str:
    """'Mar 04' within the current year, '2023-03-04' otherwise; 0 means today."""
    current = datetime.fromtimestamp(time.time() if now is None else now)
    when = datetime.fromtimestamp(timestamp) if timestamp else current
    if when.year != current.year:
        return when.strftime('%Y-%m-%d')
    return when.strftime('%b %d')


def terminal_size() -> Tuple[int, int]:
    size = shutil.get_terminal_size((80, 24))
    return size.columns, size.lines


def page_height(lines: int) -> int:
    return max(1, lines - CHROME_LINES)


def title_line(visible: int, total: int, width: int, now: Optional[float] = None) -> str:
    left = f'{SHORTNAME} v{VERSION}  ({visible}/{total})'
    date = utc_date(0, now)
    body = pad(left, max(0, width - DATELENGTH)) + pad(date, DATELENGTH, 'r')
    return color(body, TITLE_COLOR)


def task_line(task: Task, projlen: int, width: int, selected: bool = False,
              now: Optional[float] = None) -> str:
    desclen = max(MIN_DESCRIPTION, width - projlen - 1 - DATELENGTH)
    project = pad(task.project or '', projlen, 'r') + ' ' if projlen else ''
    description = pad(task.description, desclen)
    if task.due:
        date = utc_date(task.due, now)
    else:
        date = task.priority or ''
    date = pad(date, DATELENGTH, 'r')
    extra = (SELECTED,) if selected else ()
    return (color(project, PROJECT_COLOR, *extra)
            + color(description, DESCRIPTION_COLOR, *extra)
            + color(date, DATE_COLOR, *extra))


def status_line(message: Optional[str], error: bool = False) -> str:
    if not message:
        return ''
    return color(message, ERROR_COLOR if error else STATUS_COLOR)


def render(rows: List[Tuple[int, Task]], selected: int, visible: int, total: int,
           projlen: int, width: int, message: Optional[str] = None, error: bool = False) -> List[str]:
    """All lines of one screen, top to bottom."""
    out = [title_line(visible, total, width)]
    out.extend(task_line(task, projlen, width, ordinal == selected) for ordinal, task in rows)
    out.append('')
    out.append(status_line(message, error))
    return out
