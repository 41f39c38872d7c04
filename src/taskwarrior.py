"""Boundary to the `task` binary.

Everything that spawns a process lives here: the version probe, the
export feed, the uuid -> id lookup needed by 1.x, and the argv builders for
the mutation commands. The engine only ever hands out identifiers.
"""
from __future__ import annotations
import logging
import os
import re
import subprocess
from typing import List, Optional

from errors import TaskncError
from models import ACTIONS

log = logging.getLogger(__name__)

TASK_BIN = 'task'
VERSION_RE = re.compile(r'task (\S+)')
CREATED_RE = re.compile(r'Created task (\d+)')
ID_REPORT = [
    'rc.report.all.columns:uuid,id', 'rc.report.all.labels:UUID,id',
    'rc.report.all.sort:id-', 'all', 'status:pending', 'rc._forcecolor=no',
]


class TaskwarriorError(TaskncError):
    """The task binary is missing, timed out or failed."""


def _timeout_s() -> float:
    raw = (os.getenv('TASKNC_TASK_TIMEOUT_S', '30') or '').strip()
    try:
        value = float(raw)
    except ValueError:
        return 30.0
    return value if value > 0 else 30.0


def _capture(argv: List[str], stdin: Optional[str] = None) -> subprocess.CompletedProcess:
    log.debug('running: %s', ' '.join(argv))
    try:
        return subprocess.run(
            argv,
            input=stdin,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=False,
            timeout=_timeout_s(),
        )
    except FileNotFoundError as exc:
        raise TaskwarriorError(f"taskwarrior binary '{argv[0]}' not found on PATH") from exc
    except subprocess.TimeoutExpired as exc:
        raise TaskwarriorError(f'{" ".join(argv)} timed out') from exc


def task_version() -> str:
    proc = _capture([TASK_BIN, 'version', 'rc._forcecolor=no'])
    for line in proc.stdout.splitlines():
        m = VERSION_RE.search(line)
        if m:
            log.debug('task version: %s', m.group(1))
            return m.group(1)
    return ''


def major_version(version: str) -> int:
    head = version.split('.', 1)[0]
    return int(head) if head.isdigit() else 0


def export_argv(version: str) -> List[str]:
    if major_version(version) < 2:
        return [TASK_BIN, 'export.json', 'status:pending']
    return [TASK_BIN, 'export', 'status:pending']


def export_lines(version: str) -> List[str]:
    """Run the export and return its stdout lines."""
    argv = export_argv(version)
    proc = _capture(argv)
    if proc.returncode != 0:
        log.error('export failed (exit %d): %s', proc.returncode, proc.stderr.strip())
        raise TaskwarriorError(f'task export failed (exit {proc.returncode})')
    return proc.stdout.splitlines()


def lookup_task_id(uuid: str) -> int:
    """Numeric id of a pending task, 0 when not found (1.x has no uuid addressing)."""
    proc = _capture([TASK_BIN] + ID_REPORT)
    for line in proc.stdout.splitlines():
        parts = line.split()
        if len(parts) >= 2 and parts[0] == uuid and parts[1].isdigit():
            return int(parts[1])
    return 0


# -------------------- argv builders --------------------
def action_argv(action: str, identifier: str, by_uuid: bool) -> List[str]:
    command = ACTIONS[action]
    if by_uuid:
        return [TASK_BIN, identifier, command]
    return [TASK_BIN, command, identifier]


def add_argv() -> List[str]:
    return [TASK_BIN, 'add', 'new', 'task']


def parse_created_id(output: str) -> Optional[int]:
    m = CREATED_RE.search(output)
    return int(m.group(1)) if m else None


def edit_new_argv(task_id: int, version: str) -> List[str]:
    if major_version(version) < 2:
        return [TASK_BIN, 'edit', str(task_id)]
    return [TASK_BIN, str(task_id), 'edit']


def undo_argv() -> List[str]:
    return [TASK_BIN, 'undo']


def sync_argvs(version: str) -> List[List[str]]:
    if major_version(version) < 2:
        return [[TASK_BIN, 'merge'], [TASK_BIN, 'push']]
    return [[TASK_BIN, 'sync']]


# -------------------- running --------------------
def run(argv: List[str], answer_no: bool = False) -> int:
    """Run a command attached to the terminal; returns its exit status.

    `answer_no` feeds "n" to every confirmation prompt (used by merge).
    """
    log.info('running: %s', ' '.join(argv))
    try:
        if answer_no:
            proc = subprocess.run(argv, input='n\n' * 64, text=True, check=False)
        else:
            proc = subprocess.run(argv, check=False)
    except FileNotFoundError as exc:
        raise TaskwarriorError(f"taskwarrior binary '{argv[0]}' not found on PATH") from exc
    return proc.returncode


def add_task(version: str) -> Optional[int]:
    """Add a placeholder task and open it in the editor; returns its id."""
    proc = _capture(add_argv())
    task_id = parse_created_id(proc.stdout)
    if task_id is None:
        log.error('task add gave no id: %s', proc.stdout.strip())
        return None
    run(edit_new_argv(task_id, version))
    return task_id
