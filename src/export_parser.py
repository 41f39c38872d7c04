"""Streaming parser for the output of `task export`.

One task per logical entry: a brace-bounded run of `"key":value` fields
separated by commas. A value may contain the separator (or even a line
break), so the reader re-joins following tokens, and following physical
lines, until the value's closing delimiter turns up.

Decisions:
- A structurally broken entry aborts the whole load with LoadError; there
  is no partial task list.
- Array markers and blank lines between entries are skipped so both the
  1.x `export.json` stream and the 2.x JSON array are accepted.
- Unknown keys are parsed (to find where they end) and then ignored.
- A priority other than H, M or L (taskwarrior allows custom ones) is
  stored as absent.
"""
from __future__ import annotations
import logging
import re
from collections import deque
from datetime import datetime
from typing import Deque, Iterable, Iterator, List, Optional, Tuple

from errors import LoadError
from logs import VERBOSE
from models import PRIORITIES, Task

log = logging.getLogger(__name__)

FIELD_SEP = ','
TIMESTAMP_FIELDS: Tuple[str, ...] = ('due', 'entry', 'start', 'end')
STRING_FIELDS: Tuple[str, ...] = ('uuid', 'description', 'project')
TW_TIME_FORMAT = '%Y%m%dT%H%M%S%z'
ARRAY_MARKERS = {'[', ']'}
ESCAPE_RE = re.compile(r'\\(.)', re.DOTALL)
QUOTED_ITEM_RE = re.compile(r'"((?:[^"\\]|\\.)*)"', re.DOTALL)
CONTROL_ESCAPES = {'n': '\n', 't': '\t', 'r': '\r'}


def parse_export(lines: Iterable[str]) -> List[Task]:
    """Parse export lines into linked tasks, indexed in encounter order."""
    stream = (line.rstrip('\r\n') for line in lines)
    tasks: List[Task] = []
    last: Optional[Task] = None
    for line in stream:
        stripped = line.strip()
        if not stripped or stripped.rstrip(',') in ARRAY_MARKERS:
            continue
        if stripped.startswith('[{'):
            line = stripped[1:]
        task = parse_entry(line, stream)
        task.index = len(tasks)
        task.prev = last
        if last is not None:
            last.next = task
        tasks.append(task)
        last = task
        log.log(VERBOSE, 'uuid: %s', task.uuid)
        log.log(VERBOSE, 'description: %s', task.description)
        log.log(VERBOSE, 'project: %s', task.project)
        log.log(VERBOSE, 'tags: %s', task.tags)
    log.debug('parsed %d tasks', len(tasks))
    return tasks


def parse_entry(line: str, more_lines: Optional[Iterator[str]] = None) -> Task:
    """Parse one logical entry starting at `line`.

    `more_lines` supplies continuation lines for values that run past the
    end of `line`; it is left positioned after the last line consumed.
    """
    reader = _EntryReader(line, more_lines if more_lines is not None else iter(()))
    task = Task()
    parsed = 0
    while True:
        token = reader.next_token()
        if token is None:
            break
        pair = _split_field(token)
        if pair is None:
            break
        key, rest = pair
        value = reader.read_value(key, rest)
        parsed += 1
        log.log(VERBOSE, 'field: %s; content: %s', key, value)
        _assign(task, key, value)

    if parsed < 2:
        raise LoadError(f'malformed export entry: {line.strip()[:60]!r}')
    if not task.is_valid():
        raise LoadError(f'export entry without uuid or description: {line.strip()[:60]!r}')
    return task


class _EntryReader:
    """Hands out the comma separated tokens of one entry."""

    def __init__(self, first_line: str, more_lines: Iterator[str]):
        self.tokens: Deque[str] = deque(first_line.split(FIELD_SEP))
        self.more_lines = more_lines

    def next_token(self) -> Optional[str]:
        while self.tokens:
            # trailing blanks may belong to a value that continues past the separator
            token = self.tokens.popleft().lstrip()
            if token.rstrip():
                return token
        return None

    def _continuation(self, key: str) -> str:
        # the separator that split the value is put back
        if self.tokens:
            return FIELD_SEP + self.tokens.popleft()
        line = next(self.more_lines, None)
        if line is None:
            raise LoadError(f'unterminated value for field {key!r}')
        self.tokens.extend(line.split(FIELD_SEP))
        return '\n' + self.tokens.popleft()

    def read_value(self, key: str, rest: str) -> str:
        if rest.startswith('"'):
            close = '"'
        elif rest.startswith('['):
            close = ']'
        else:
            # bare scalar (numbers, true/false); ends at the token boundary
            return rest.rstrip('}]').strip()
        body = rest[1:]
        end = _find_close(body, close)
        while end < 0:
            body += self._continuation(key)
            end = _find_close(body, close)
        return body[:end]


def _split_field(token: str) -> Optional[Tuple[str, str]]:
    if token.startswith('{'):
        token = token[1:]
    key, sep, rest = token.partition(':')
    if not sep:
        return None
    return key.strip().strip('"'), rest.lstrip()


def _find_close(text: str, close: str) -> int:
    """Index of the first unescaped `close`; list brackets inside quotes don't count."""
    in_quote = False
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == '\\':
            i += 2
            continue
        if ch == '"':
            if close == '"':
                return i
            in_quote = not in_quote
        elif ch == close and not in_quote:
            return i
        i += 1
    return -1


def unescape(text: str) -> str:
    return ESCAPE_RE.sub(lambda m: CONTROL_ESCAPES.get(m.group(1), m.group(1)), text)


def parse_timestamp(value: str) -> int:
    """Taskwarrior `YYYYMMDDTHHMMSSZ` (or a bare epoch) -> epoch seconds."""
    value = value.strip()
    if not value:
        return 0
    if value.isdigit():
        return int(value)
    try:
        return int(datetime.strptime(value, TW_TIME_FORMAT).timestamp())
    except ValueError as exc:
        raise LoadError(f'unparsable timestamp: {value!r}') from exc


def _assign(task: Task, key: str, value: str) -> None:
    if key in STRING_FIELDS:
        setattr(task, key, unescape(value) or None)
    elif key == 'priority':
        prio = value.strip()[:1].upper()
        if prio and prio not in PRIORITIES:
            log.debug('unknown priority %r for task %s, treated as absent', value, task.uuid or '?')
            prio = ''
        task.priority = prio or None
    elif key in TIMESTAMP_FIELDS:
        setattr(task, key, parse_timestamp(value))
    elif key == 'tags':
        items = [unescape(item) for item in QUOTED_ITEM_RE.findall(value)]
        if not items and value.strip():
            items = [unescape(value.strip())]
        task.tags = FIELD_SEP.join(items) or None
    # id is derived from load order; everything else is not displayed
