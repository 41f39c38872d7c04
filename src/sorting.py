"""Task ordering: the comparator and the in-place chain sort.

compare_tasks(a, b, mode) answers "must b come before a?". Modes fall
back to one another on ties, d -> r -> p -> n, and index is unique within
a load so every chain ends in a strict order:

    n  ascending index (load order)
    p  tasks with a project first, projects A..Z
    d  tasks with a due date first, earliest first (equal dues stay put)
    r  tasks with a priority first, H before M before L

The sort is a single-pivot partition sort over the linked chain. It moves
task payloads between nodes with swap_contents and never touches prev/next.
"""
from __future__ import annotations
import logging
from typing import Dict, Optional, Tuple

from models import SORT_MODES, Task, swap_contents

log = logging.getLogger(__name__)

PRIORITY_RANK: Dict[str, int] = {'H': 0, 'M': 1, 'L': 2}


def compare_tasks(a: Task, b: Task, mode: str) -> bool:
    """True when b must sort before a."""
    if mode == 'n':
        return b.index < a.index
    if mode == 'p':
        if a.project is None or b.project is None:
            if a.project is None and b.project is None:
                return compare_tasks(a, b, 'n')
            return a.project is None
        if a.project == b.project:
            return compare_tasks(a, b, 'n')
        return b.project < a.project
    if mode == 'd':
        if not a.due or not b.due:
            if not a.due and not b.due:
                return compare_tasks(a, b, 'r')
            return not a.due
        return b.due < a.due
    if mode == 'r':
        if a.priority == b.priority:
            return compare_tasks(a, b, 'p')
        if a.priority is None or b.priority is None:
            return a.priority is None
        return PRIORITY_RANK[b.priority] < PRIORITY_RANK[a.priority]
    raise ValueError(f'invalid sort mode: {mode}')


def sort_chain(first: Optional[Task], mode: str) -> None:
    """Sort from `first` through the end of its chain."""
    if mode not in SORT_MODES:
        raise ValueError(f'invalid sort mode: {mode}')
    if first is None:
        return
    last = first
    while last.next is not None:
        last = last.next
    sort_range(first, last, mode)
    log.debug('sorted tasks (sortmode %s)', mode)


def sort_range(first: Task, last: Task, mode: str) -> None:
    """Sort the nodes from `first` to `last` inclusive.

    Only the smaller side of each partition is recursed into; the larger
    side is handled by the loop, which keeps the stack depth logarithmic
    even for the quadratic (already ordered) case.
    """
    while first is not last:
        point, left, right = _partition(first, last, mode)
        if left < right:
            if left > 1:
                sort_range(first, point.prev, mode)
            if right <= 1:
                return
            first = point.next
        else:
            if right > 1:
                sort_range(point.next, last, mode)
            if left <= 1:
                return
            last = point.prev


def _partition(first: Task, last: Task, mode: str) -> Tuple[Task, int, int]:
    # pivot stays in `first` until the walk is done
    store = first
    left = right = 0
    cur = first
    while cur is not last:
        cur = cur.next
        if compare_tasks(first, cur, mode):
            store = store.next
            swap_contents(store, cur)
            left += 1
        else:
            right += 1
    swap_contents(first, store)
    return store, left, right
