"""Selection and search over the visible tasks.

The selection is an ordinal: a position counted among visible tasks only,
in chain order. It is resolved back to a Task by walking the chain.
"""
from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Optional, Tuple

from errors import NoMatch
from filters import task_matches
from logs import VERBOSE
from models import Task

if TYPE_CHECKING:  # pragma: no cover
    from tasklist import TaskList

log = logging.getLogger(__name__)


def resolve(tasklist: 'TaskList', ordinal: int) -> Optional[Task]:
    """The visible task at `ordinal`, or None when out of range."""
    counter = -1
    for task in tasklist:
        counter += task.visible
        if task.visible and counter == ordinal:
            return task
    return None


def ordinal_of(tasklist: 'TaskList', target: Task) -> int:
    """Ordinal of `target`; for a hidden task, the ordinal of the visible one before it."""
    counter = -1
    for task in tasklist:
        counter += task.visible
        if task is target:
            return counter
    raise ValueError('task is not part of this list')


def clamp(ordinal: int, visible_count: int) -> int:
    if visible_count <= 0:
        return 0
    return max(0, min(ordinal, visible_count - 1))


def find_next(tasklist: 'TaskList', regex, from_task: Optional[Task]) -> Tuple[Task, int]:
    """Next visible task after `from_task` matching `regex`, wrapping at the end.

    Returns the task and its ordinal. The start task is tested last, after
    a full lap. Raises NoMatch when the lap finds nothing.
    """
    head = tasklist.head
    if head is None:
        raise NoMatch(regex.pattern)
    start = from_task if from_task is not None else tasklist.tail()
    ordinal = ordinal_of(tasklist, start)
    cur = start
    while True:
        cur = cur.next
        if cur is None:
            cur = head
            ordinal = 0 if cur.visible else -1
            log.log(VERBOSE, 'search wrapped')
        elif cur.visible:
            ordinal += 1

        if cur.visible and task_matches(cur, regex):
            return cur, ordinal
        if cur is start:
            break
    raise NoMatch(regex.pattern)
