"""Filter engine: regex predicates and the persistent filter chain.

A filter pass sets `visible` on tasks and updates the list counters.

Persistence (filter_persist):
- on: a pass only looks at tasks that are still visible, so successive
  filters AND together. The spec is kept in the list's filter chain.
- off: a pass looks at every task and the chain is dropped.

Cascade (filter_cascade), only meaningful with persistence:
- on: the chain keeps every applied spec, oldest first.
- off: the chain holds only the latest spec.

Clear makes every task visible again and releases the whole chain; it is
never subject to persistence.
"""
from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Callable, Iterator, Optional, Tuple

from errors import EmptyResult
from models import (FILTER_ANY, FILTER_CLEAR, FILTER_DESCRIPTION, FILTER_PROJECT,
                    FILTER_TAGS, FilterSpec, Task)

if TYPE_CHECKING:  # pragma: no cover
    from tasklist import TaskList

log = logging.getLogger(__name__)

MODE_FIELDS = {
    FILTER_DESCRIPTION: 'description',
    FILTER_TAGS: 'tags',
    FILTER_PROJECT: 'project',
}


def match_string(haystack: Optional[str], regex) -> bool:
    if haystack is None:
        return False
    return regex.search(haystack) is not None


def task_matches(task: Task, regex) -> bool:
    """String search: project, description or tags."""
    return (match_string(task.project, regex)
            or match_string(task.description, regex)
            or match_string(task.tags, regex))


def predicate_for(spec: FilterSpec) -> Callable[[Task], bool]:
    if spec.mode == FILTER_ANY:
        return lambda task: task_matches(task, spec.regex)
    field_name = MODE_FIELDS[spec.mode]
    return lambda task: match_string(getattr(task, field_name), spec.regex)


# -------------------- chain bookkeeping --------------------
def iter_chain(head: Optional[FilterSpec]) -> Iterator[FilterSpec]:
    """Walk a filter chain, stopping (with an error log) at a cycle."""
    seen = set()
    node = head
    while node is not None:
        if id(node) in seen:
            log.error('circularly linked task filters')
            return
        seen.add(id(node))
        yield node
        node = node.next


def release_chain(head: Optional[FilterSpec]) -> int:
    """Unlink every spec of a chain; returns how many were released."""
    released = 0
    node = head
    while node is not None:
        if node.next is node:
            log.error('circularly linked task filters')
            node.next = None
            released += 1
            break
        nxt = node.next
        node.next = None
        node = nxt
        released += 1
    return released


def _append(head: Optional[FilterSpec], spec: FilterSpec) -> FilterSpec:
    if head is None:
        return spec
    position = 1
    last = head
    for last in iter_chain(head):
        position += 1
    last.next = spec
    log.debug('%d filter position (%s)', position, spec.pattern)
    return head


# -------------------- filter passes --------------------
def _evaluate(tasklist: 'TaskList', spec: FilterSpec, only_visible: bool) -> Tuple[int, int]:
    predicate = predicate_for(spec)
    visible = total = 0
    for task in tasklist:
        if only_visible and not task.visible:
            continue
        task.visible = predicate(task)
        visible += task.visible
        total += 1
    tasklist.visible_count = visible
    tasklist.total_count = total
    return visible, total


def clear_filters(tasklist: 'TaskList') -> Tuple[int, int]:
    for task in tasklist:
        task.visible = True
    released = release_chain(tasklist.active_filters)
    tasklist.active_filters = None
    tasklist.count()
    log.debug('filters cleared (%d released)', released)
    return tasklist.visible_count, tasklist.total_count


def apply_filter(tasklist: 'TaskList', spec: FilterSpec,
                 persist: bool = True, cascade: bool = True) -> Tuple[int, int]:
    """Run one filter pass; returns (visible_count, total_count).

    Raises EmptyResult when nothing is left visible. Counters and the chain
    are already updated at that point; the caller is expected to clear.
    """
    if spec.mode == FILTER_CLEAR:
        return clear_filters(tasklist)

    if any(node is spec for node in iter_chain(tasklist.active_filters)):
        raise ValueError('filter is already part of the active chain')
    spec.next = None
    visible, total = _evaluate(tasklist, spec, only_visible=persist)
    if not persist:
        release_chain(tasklist.active_filters)
        tasklist.active_filters = None
    elif cascade:
        tasklist.active_filters = _append(tasklist.active_filters, spec)
    else:
        release_chain(tasklist.active_filters)
        tasklist.active_filters = spec
    log.info('filter %s %r: %d/%d', spec.mode, spec.pattern, visible, total)

    if visible == 0:
        raise EmptyResult(total)
    return visible, total


def replay_filters(tasklist: 'TaskList') -> Tuple[int, int]:
    """Re-apply the retained chain, oldest first, to a freshly loaded list."""
    for task in tasklist:
        task.visible = True
    tasklist.count()
    visible, total = tasklist.visible_count, tasklist.total_count
    for spec in iter_chain(tasklist.active_filters):
        visible, total = _evaluate(tasklist, spec, only_visible=True)
    if tasklist.active_filters is not None and visible == 0:
        raise EmptyResult(total)
    return visible, total
