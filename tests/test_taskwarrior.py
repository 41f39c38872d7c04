import subprocess

import pytest

import taskwarrior
from taskwarrior import TaskwarriorError


class FakeRun:
    """Stands in for subprocess.run, answering from a queue of results."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def __call__(self, argv, **kwargs):
        self.calls.append((argv, kwargs))
        result = self.results.pop(0) if self.results else (0, '')
        if isinstance(result, BaseException):
            raise result
        code, stdout = result
        return subprocess.CompletedProcess(argv, code, stdout=stdout, stderr='boom' if code else '')


@pytest.fixture
def fake_run(monkeypatch):
    def install(*results):
        fake = FakeRun(*results)
        monkeypatch.setattr(taskwarrior.subprocess, 'run', fake)
        return fake
    return install


def test_task_version_is_parsed(fake_run):
    fake = fake_run((0, 'task 2.6.2 built for linux\nCopyright ...\n'))
    assert taskwarrior.task_version() == '2.6.2'
    assert fake.calls[0][0] == ['task', 'version', 'rc._forcecolor=no']


def test_task_version_without_banner(fake_run):
    fake_run((0, 'nothing useful'))
    assert taskwarrior.task_version() == ''


def test_missing_binary(fake_run):
    fake_run(FileNotFoundError('task'))
    with pytest.raises(TaskwarriorError, match='not found'):
        taskwarrior.task_version()


def test_timeout(fake_run, monkeypatch):
    monkeypatch.setenv('TASKNC_TASK_TIMEOUT_S', '2.5')
    fake = fake_run(subprocess.TimeoutExpired(['task'], 2.5))
    with pytest.raises(TaskwarriorError, match='timed out'):
        taskwarrior.export_lines('2.6.2')
    assert fake.calls[0][1]['timeout'] == 2.5


@pytest.mark.parametrize('raw, expected', [('', 30.0), ('abc', 30.0), ('-1', 30.0), ('4', 4.0)])
def test_timeout_setting(monkeypatch, raw, expected):
    monkeypatch.setenv('TASKNC_TASK_TIMEOUT_S', raw)
    assert taskwarrior._timeout_s() == expected


def test_export_lines(fake_run):
    fake = fake_run((0, '[\n{"uuid":"a","description":"b"}\n]\n'))
    assert taskwarrior.export_lines('2.6.2') == ['[', '{"uuid":"a","description":"b"}', ']']
    assert fake.calls[0][0] == ['task', 'export', 'status:pending']


def test_failed_export(fake_run):
    fake_run((2, ''))
    with pytest.raises(TaskwarriorError, match='exit 2'):
        taskwarrior.export_lines('1.9.4')


def test_export_argv_by_version():
    assert taskwarrior.export_argv('1.9.4') == ['task', 'export.json', 'status:pending']
    assert taskwarrior.export_argv('') == ['task', 'export.json', 'status:pending']
    assert taskwarrior.export_argv('3.0.0') == ['task', 'export', 'status:pending']


def test_lookup_task_id(fake_run):
    report = 'UUID id\nabc-1 4\ndef-2 7\n\n1 task\n'
    fake_run((0, report), (0, report))
    assert taskwarrior.lookup_task_id('def-2') == 7
    assert taskwarrior.lookup_task_id('zzz') == 0


def test_action_argv():
    assert taskwarrior.action_argv('complete', 'abc', True) == ['task', 'abc', 'done']
    assert taskwarrior.action_argv('delete', '3', False) == ['task', 'del', '3']
    assert taskwarrior.action_argv('view', '3', False) == ['task', 'info', '3']


def test_sync_and_edit_argv_by_version():
    assert taskwarrior.sync_argvs('1.9.4') == [['task', 'merge'], ['task', 'push']]
    assert taskwarrior.sync_argvs('2.6.2') == [['task', 'sync']]
    assert taskwarrior.edit_new_argv(5, '1.9.4') == ['task', 'edit', '5']
    assert taskwarrior.edit_new_argv(5, '2.6.2') == ['task', '5', 'edit']


def test_run_returns_exit_status(fake_run):
    fake = fake_run((1, ''))
    assert taskwarrior.run(['task', 'merge'], answer_no=True) == 1
    assert fake.calls[0][1]['input'].startswith('n\n')


def test_add_task_opens_the_new_task(fake_run):
    fake = fake_run((0, 'Created task 42.\n'), (0, ''))
    assert taskwarrior.add_task('2.6.2') == 42
    assert fake.calls[1][0] == ['task', '42', 'edit']


def test_add_task_without_id(fake_run):
    fake = fake_run((0, 'Nothing happened'))
    assert taskwarrior.add_task('2.6.2') is None
    assert len(fake.calls) == 1
