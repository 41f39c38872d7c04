"""Data models for the taskwarrior terminal viewer.

Exposes the Task record (one pending task from the export) and the
FilterSpec entries that make up the active filter chain.

Decisions:
- Tasks are linked into a doubly linked chain through prev/next. Sorting
  swaps payloads between nodes and never relinks, so node identity is
  stable across a sort.
- Absent timestamps are stored as 0, absent strings as None.
"""
from __future__ import annotations
import re
from dataclasses import dataclass, field, fields
from typing import Dict, Optional, Tuple

from errors import FilterError

SORT_MODES: Tuple[str, ...] = ('n', 'p', 'd', 'r')
SORT_MODE_NAMES: Dict[str, str] = {'n': 'index', 'p': 'project', 'd': 'due', 'r': 'priority'}
PRIORITIES: Tuple[str, ...] = ('H', 'M', 'L')

FILTER_ANY = 'any'
FILTER_CLEAR = 'clear'
FILTER_DESCRIPTION = 'description'
FILTER_TAGS = 'tags'
FILTER_PROJECT = 'project'

FILTER_ALIASES: Dict[str, str] = {
    'a': FILTER_ANY,
    'c': FILTER_CLEAR,
    'd': FILTER_DESCRIPTION,
    't': FILTER_TAGS,
    'p': FILTER_PROJECT,
}

ACTIONS: Dict[str, str] = {'edit': 'edit', 'complete': 'done', 'delete': 'del', 'view': 'info'}

REGEX_FLAGS = re.IGNORECASE


@dataclass(eq=False)
class Task:
    """A single pending task.

    Fields:
        uuid: Identity of the task in the external database.
        description: Free text, required.
        index: Position in load order, reassigned by sort swaps.
        project / tags: Optional strings; tags are comma-joined.
        priority: 'H', 'M', 'L' or None.
        due / entry / start / end: Epoch seconds, 0 when absent.
        visible: Passes the active filter chain (not "on screen").
    """
    uuid: str = ''
    description: str = ''
    index: int = 0
    project: Optional[str] = None
    tags: Optional[str] = None
    priority: Optional[str] = None
    due: int = 0
    entry: int = 0
    start: int = 0
    end: int = 0
    visible: bool = True
    prev: Optional['Task'] = field(default=None, repr=False)
    next: Optional['Task'] = field(default=None, repr=False)

    def is_valid(self) -> bool:
        return bool(self.uuid) and bool(self.description)

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(index={self.index}, uuid={self.uuid}, description={self.description})"


PAYLOAD_FIELDS: Tuple[str, ...] = tuple(f.name for f in fields(Task) if f.name not in ('prev', 'next'))


def swap_contents(a: Task, b: Task) -> None:
    """Exchange every field of two tasks except their chain links."""
    if a is b:
        return
    for name in PAYLOAD_FIELDS:
        tmp = getattr(a, name)
        setattr(a, name, getattr(b, name))
        setattr(b, name, tmp)


@dataclass(eq=False)
class FilterSpec:
    """One entry of the filter chain.

    `pattern` is compiled on construction so a bad expression is rejected
    before any task visibility changes.
    """
    mode: str
    pattern: Optional[str] = None
    next: Optional['FilterSpec'] = field(default=None, repr=False)
    regex: Optional[re.Pattern] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.mode not in FILTER_ALIASES.values():
            raise FilterError(f'invalid filter mode: {self.mode}')
        if self.mode == FILTER_CLEAR:
            return
        if not self.pattern:
            raise FilterError(f'{self.mode} filter requires a pattern')
        self.regex = compile_pattern(self.pattern)

    @classmethod
    def from_key(cls, key: str, pattern: Optional[str] = None) -> 'FilterSpec':
        """Build a spec from a shell key: a(ny) c(lear) d(escription) t(ags) p(roject)."""
        mode = FILTER_ALIASES.get(key.lower()) if len(key) == 1 else None
        if mode is None:
            raise FilterError(f'invalid filter mode: {key}')
        return cls(mode, pattern)


def compile_pattern(pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern, REGEX_FLAGS)
    except re.error as exc:
        raise FilterError(f'invalid pattern {pattern!r}: {exc}') from exc
