"""Interactive command loop for tasknc.

Each cycle redraws the task page and reads one command line. Single
letters are the tasknc key bindings (j/k to move, f to filter,
/ to search, ...); `:` prefixes a named command such as `:set sortmode p`.
"""
from __future__ import annotations
import logging
import os
from typing import Callable, Dict, List, Optional

import render
import taskwarrior
from config import NAME, VERSION
from errors import EmptyResult, TaskncError
from session import Session

log = logging.getLogger(__name__)


# --- terminal control helpers ---
# ESC[3J (scrollback), ESC[H (home), ESC[2J (screen), ESC[H (home)
def _clear_screen() -> None:
    print("\033[3J\033[H\033[2J\033[H", end="", flush=True)


def _truthy_env(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


def _enter_alt_screen() -> None:
    print("\033[?1049h", end="", flush=True)


def _leave_alt_screen() -> None:
    print("\033[?1049l", end="", flush=True)


ACTION_KEYS: Dict[str, tuple] = {
    'e': ('edit', 'task edited', 'task edit failed'),
    'c': ('complete', 'task completed', 'task complete failed'),
    'd': ('delete', 'task deleted', 'task delete failed'),
    'v': ('view', '', ''),
}

SCROLL_KEYS: Dict[str, object] = {
    'j': 1, 'down': 1,
    'k': -1, 'up': -1,
    'g': 'home', 'home': 'home',
    'G': 'end', 'end': 'end',
}


class CLI:
    def __init__(self, session: Session):
        self.session: Session = session
        self.message: Optional[str] = None
        self.error: bool = False
        self.done: bool = False
        # Alt screen default ON; disable with TASKNC_ALT_SCREEN=0 (or false/no/off)
        self.alt_screen: bool = _truthy_env(os.getenv("TASKNC_ALT_SCREEN"), True)

    def run(self) -> None:
        """Main loop; the page is cleared and redrawn each cycle."""
        if self.alt_screen:
            _enter_alt_screen()
        try:
            while not self.done:
                self.draw()
                line = input(": ")
                self.message, self.error = None, False
                self.handle(line)
        except (KeyboardInterrupt, EOFError):
            pass
        finally:
            if self.alt_screen:
                _leave_alt_screen()

    def draw(self) -> None:
        width, lines = render.terminal_size()
        s = self.session
        s.page_height = render.page_height(lines)
        s.check_cursor()
        _clear_screen()
        screen = render.render(s.page(), s.selected, s.tasklist.visible_count, s.tasklist.total_count,
                               s.tasklist.project_width(), width, self.message, self.error)
        print('\n'.join(screen))

    def status(self, message: str, error: bool = False) -> None:
        self.message, self.error = message, error
        if error:
            log.error(message)

    # -------------------- dispatch --------------------
    def handle(self, line: str) -> None:
        """Run one command line, reporting failures on the status line."""
        text = line.strip()
        if not text:
            return
        try:
            self._dispatch(text)
        except EmptyResult:
            self.status('filter yielded no results; reset')
        except TaskncError as exc:
            self.status(str(exc), error=True)
        except ValueError as exc:
            self.status(str(exc), error=True)

    def _dispatch(self, text: str) -> None:
        if text[0] in ':;':
            self.command(text[1:].strip())
        elif text[0] == '/':
            task = self.session.search(text[1:].strip())
            self.status(f'found: {task.description}')
        elif text in SCROLL_KEYS:
            self.session.select_delta(SCROLL_KEYS[text])
        elif text == 'n':
            self.session.search_next()
        elif text[0] == 's':
            self._sort(text[1:].strip())
        elif text[0] == 'f':
            self._filter(text[1:].strip())
        elif text in ACTION_KEYS:
            self._task_action(*ACTION_KEYS[text])
        elif text == 'a':
            self._add()
        elif text == 'u':
            self._undo()
        elif text == 'y':
            self._sync()
        elif text == 'r':
            self._reload()
        elif text == 'q':
            self.done = True
        elif text == 'help':
            self.status(HELP)
        else:
            self.status(f'unhandled key: {text}', error=True)

    # ---- individual command helpers ----
    def _sort(self, mode: str) -> None:
        if not mode:
            self.status('enter sort mode: iNdex, Project, Due, pRiority (e.g. "s d")')
            return
        try:
            self.session.set_sort_mode(mode)
        except ValueError:
            self.status('invalid sort mode', error=True)

    def _filter(self, args: str) -> None:
        key, _, pattern = args.partition(' ')
        if not key:
            self.status('filter by: Any Clear Proj Desc Tag (e.g. "f d milk")')
            return
        self.session.apply_filter(key, pattern.strip() or None)
        self.status('filter applied')

    def _external(self, run: Callable[[], int]) -> int:
        if self.alt_screen:
            _leave_alt_screen()
        try:
            return run()
        finally:
            if self.alt_screen:
                _enter_alt_screen()

    def _task_action(self, action: str, ok: str, failed: str) -> None:
        target = self.session.action_target(action)
        print(' '.join(target.argv))
        ret = self._external(lambda: taskwarrior.run(target.argv))
        if action == 'view':
            input('press ENTER to return')
            return
        self._reload()
        self.status(ok if ret == 0 else failed, error=ret != 0)

    def _add(self) -> None:
        self._external(lambda: taskwarrior.add_task(self.session.config.version) or 0)
        self._reload()
        self.status('task added')

    def _undo(self) -> None:
        ret = self._external(lambda: taskwarrior.run(taskwarrior.undo_argv()))
        self._reload()
        self.status('undo executed' if ret == 0 else 'undo execution failed', error=ret != 0)

    def _sync(self) -> None:
        def sync() -> int:
            ret = 0
            for argv in taskwarrior.sync_argvs(self.session.config.version):
                ret = taskwarrior.run(argv, answer_no=argv[1] == 'merge')
                if ret != 0:
                    break
            return ret
        ret = self._external(sync)
        self._reload()
        self.status('tasks synchronized' if ret == 0 else 'task synchronization failed', error=ret != 0)

    def _reload(self) -> None:
        self.session.reload()
        self.status('task list reloaded')

    # -------------------- named commands --------------------
    def command(self, cmdstr: str) -> None:
        log.debug('command received: %s', cmdstr)
        args: List[str] = cmdstr.split()
        if not args:
            return
        cmd = args[0]
        if cmd == 'version':
            self.status(f'{NAME} v{VERSION}')
        elif cmd in ('quit', 'exit'):
            self.done = True
        elif cmd == 'reload':
            self._reload()
        elif cmd == 'redraw':
            pass
        elif cmd == 'set' and len(args) >= 3:
            value = self.session.set_var(args[1], ' '.join(args[2:]))
            self.status(f'{args[1]}: {value}')
        elif cmd == 'show' and len(args) == 2:
            self.status(f'{args[1]}: {self.session.show_var(args[1])}')
        else:
            self.status(f'error: command {cmd} not found', error=True)


HELP = ("j/k move  g/G first/last  s<mode> sort  f<mode> <pattern> filter  /<pattern> search  "
        "n next  e edit  c complete  d delete  v view  a add  u undo  y sync  r reload  "
        ":set/:show/:version  q quit")
