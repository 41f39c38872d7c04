"""Error taxonomy for the task collection engine.

Each error is reported to the shell as a status line message; none of them
is retried automatically.
"""


class TaskncError(Exception):
    """Base class for every error raised by the engine."""


class LoadError(TaskncError):
    """The export contained a structurally invalid record; nothing was loaded."""


class FilterError(TaskncError):
    """Invalid filter mode or pattern; the active filter state is unchanged."""


class NoMatch(TaskncError):
    """A search walked the whole visible list without a match."""

    def __init__(self, pattern: str):
        super().__init__(f'no matches: {pattern}')
        self.pattern = pattern


class EmptyResult(TaskncError):
    """A filter pass left no visible tasks; callers recover by clearing."""

    def __init__(self, total: int):
        super().__init__('filter yielded no results')
        self.total = total
