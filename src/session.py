"""Session state and the command contract used by the shell.

A Session bundles the state of one running viewer: the task
list, the selected ordinal, the page offset and the search pattern. The
shell calls one method per command and turns raised errors into status
line messages.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple, Union

import logs
import taskwarrior
from config import Config
from errors import EmptyResult, TaskncError
from models import ACTIONS, FILTER_CLEAR, FilterSpec, SORT_MODES, Task, compile_pattern
from navigator import clamp, find_next, resolve
from tasklist import TaskList

log = logging.getLogger(__name__)

PAGE_HEIGHT_DEFAULT = 20
Loader = Callable[[], Iterable[str]]


@dataclass
class ActionTarget:
    """How to address the selected task for a mutation command."""
    action: str
    identifier: str
    by_uuid: bool
    argv: List[str]


class Session:
    def __init__(self, config: Optional[Config] = None, loader: Optional[Loader] = None,
                 id_lookup: Callable[[str], int] = taskwarrior.lookup_task_id):
        self.config: Config = config or Config()
        self.loader: Loader = loader or (lambda: taskwarrior.export_lines(self.config.version))
        self.id_lookup = id_lookup
        self.tasklist: TaskList = TaskList()
        self.selected: int = 0
        self.page_offset: int = 0
        self.page_height: int = PAGE_HEIGHT_DEFAULT
        self.search_pattern: Optional[str] = None
        self._search_regex = None

    # -------------------- loading --------------------
    def load(self) -> TaskList:
        """Build a fresh list from the loader and swap it in.

        A LoadError leaves the current list untouched. Retained filters are
        replayed on the new list; if they leave nothing visible the list is
        cleared and EmptyResult is raised after the swap.
        """
        fresh = TaskList.from_export(self.loader())
        fresh.sort(self.config.sortmode)
        fresh.active_filters = self.tasklist.active_filters
        self.tasklist.active_filters = None
        empty = None
        try:
            fresh.replay_filters()
        except EmptyResult as exc:
            fresh.clear_filters()
            empty = exc
        self.tasklist = fresh
        self.check_cursor()
        log.debug('loaded %d tasks', fresh.total_count)
        if empty is not None:
            raise empty
        return fresh

    reload = load

    # -------------------- commands --------------------
    def set_sort_mode(self, mode: str) -> None:
        mode = mode.lower()
        if len(mode) != 1 or mode not in SORT_MODES:
            raise ValueError(f'invalid sort mode: {mode}')
        self.config.sortmode = mode
        self.tasklist.sort(mode)

    def apply_filter(self, key: str, pattern: Optional[str] = None) -> Tuple[int, int]:
        """Apply a filter by shell key; an empty result is cleared, then re-raised."""
        spec = FilterSpec.from_key(key, pattern)
        try:
            counts = self.tasklist.apply_filter(spec, self.config.filter_persist, self.config.filter_cascade)
        except EmptyResult:
            self.tasklist.clear_filters()
            self.check_cursor()
            raise
        self.check_cursor()
        return counts

    def clear_filter(self) -> Tuple[int, int]:
        counts = self.tasklist.apply_filter(FilterSpec(FILTER_CLEAR))
        self.check_cursor()
        return counts

    def search(self, pattern: str) -> Task:
        self._search_regex = compile_pattern(pattern)
        self.search_pattern = pattern
        return self._search()

    def search_next(self) -> Task:
        if self._search_regex is None:
            raise TaskncError('no active search string')
        return self._search()

    def _search(self) -> Task:
        task, ordinal = find_next(self.tasklist, self._search_regex, self.selected_task())
        self.selected = ordinal
        self.check_cursor()
        return task

    def select_delta(self, delta: Union[int, str]) -> int:
        """Move the selection by +1/-1 or to 'home'/'end'."""
        if delta == 'home':
            self.selected = 0
        elif delta == 'end':
            self.selected = self.tasklist.visible_count - 1
        else:
            self.selected += int(delta)
        self.check_cursor()
        return self.selected

    def check_cursor(self) -> None:
        """Clamp the selection and scroll the page so it stays on screen."""
        self.selected = clamp(self.selected, self.tasklist.visible_count)
        if self.selected < self.page_offset:
            self.page_offset = self.selected
        elif self.selected >= self.page_offset + self.page_height:
            self.page_offset = self.selected - self.page_height + 1
        self.page_offset = max(0, self.page_offset)

    # -------------------- queries --------------------
    def selected_task(self) -> Optional[Task]:
        return resolve(self.tasklist, self.selected)

    def page(self) -> List[Tuple[int, Task]]:
        return self.tasklist.page(self.page_offset, self.page_height)

    def action_target(self, action: str) -> ActionTarget:
        """Identifier and argv for running `action` on the selected task.

        1.x has no uuid addressing, so the numeric id is looked up first.
        """
        if action not in ACTIONS:
            raise ValueError(f'unknown action: {action}')
        task = self.selected_task()
        if task is None:
            raise TaskncError('no task selected')
        by_uuid = taskwarrior.major_version(self.config.version) >= 2
        if by_uuid:
            identifier = task.uuid
        else:
            task_id = self.id_lookup(task.uuid)
            if task_id == 0:
                raise TaskncError(f'no id found for task {task.uuid}')
            identifier = str(task_id)
        return ActionTarget(action, identifier, by_uuid, taskwarrior.action_argv(action, identifier, by_uuid))

    # -------------------- variables --------------------
    def set_var(self, name: str, raw: str) -> str:
        if name == 'searchstring':
            self._search_regex = compile_pattern(raw)
            self.search_pattern = raw
            return raw
        value = self.config.set(name, raw)
        if name == 'sortmode':
            self.tasklist.sort(value)
        elif name == 'loglvl':
            logs.set_level(value)
        return self.config.show(name)

    def show_var(self, name: str) -> str:
        if name == 'searchstring':
            return self.search_pattern or ''
        return self.config.show(name)
