"""Task list: owns the linked chain of tasks and the active filter chain.

The list is a projection of `task export`; it is rebuilt on every reload
and never written back. Sorting and filtering delegate to sorting.py and
filters.py; this class keeps the chain and the counters they update.
"""
from __future__ import annotations
from typing import Iterable, Iterator, List, Optional, Tuple

import filters as filter_engine
from export_parser import parse_export
from models import FilterSpec, Task
from sorting import sort_chain


class TaskList:
    def __init__(self, tasks: Optional[Iterable[Task]] = None):
        self.head: Optional[Task] = None
        self.active_filters: Optional[FilterSpec] = None
        self.visible_count: int = 0
        self.total_count: int = 0
        if tasks:
            self._link(list(tasks))
        self.count()

    @classmethod
    def from_export(cls, lines: Iterable[str]) -> 'TaskList':
        """Parse export lines; LoadError propagates and nothing is built."""
        return cls(parse_export(lines))

    # -------------------- loading --------------------
    def _link(self, tasks: List[Task]) -> None:
        prev: Optional[Task] = None
        for position, task in enumerate(tasks):
            task.index = position
            task.prev = prev
            task.next = None
            if prev is not None:
                prev.next = task
            prev = task
        self.head = tasks[0] if tasks else None

    # -------------------- traversal --------------------
    def __iter__(self) -> Iterator[Task]:
        cur = self.head
        while cur is not None:
            yield cur
            cur = cur.next

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __bool__(self) -> bool:
        return self.head is not None

    def tail(self) -> Optional[Task]:
        last = self.head
        while last is not None and last.next is not None:
            last = last.next
        return last

    def visible(self) -> Iterator[Task]:
        return (task for task in self if task.visible)

    def count(self) -> None:
        """Reset both counters to the full length of the list."""
        self.visible_count = self.total_count = len(self)

    def page(self, offset: int, height: int) -> List[Tuple[int, Task]]:
        """(ordinal, task) for visible tasks in [offset, offset + height)."""
        rows: List[Tuple[int, Task]] = []
        for ordinal, task in enumerate(self.visible()):
            if ordinal >= offset + height:
                break
            if ordinal >= offset:
                rows.append((ordinal, task))
        return rows

    def project_width(self) -> int:
        return max((len(t.project) for t in self if t.project), default=0)

    # -------------------- ordering / filtering --------------------
    def sort(self, mode: str) -> None:
        sort_chain(self.head, mode)

    def apply_filter(self, spec: FilterSpec, persist: bool = True, cascade: bool = True) -> Tuple[int, int]:
        return filter_engine.apply_filter(self, spec, persist, cascade)

    def clear_filters(self) -> Tuple[int, int]:
        return filter_engine.clear_filters(self)

    def replay_filters(self) -> Tuple[int, int]:
        return filter_engine.replay_filters(self)

    def filters(self) -> List[FilterSpec]:
        return list(filter_engine.iter_chain(self.active_filters))

    def __str__(self) -> str:
        return f'{self.visible_count}/{self.total_count} tasks, {len(self.filters())} active filters'
