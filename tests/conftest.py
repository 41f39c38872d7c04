import pytest

from models import Task
from tasklist import TaskList


@pytest.fixture
def make_list():
    """Build a TaskList from keyword dicts; uuid/description are filled in when missing."""
    def _make(*rows, **common):
        tasks = []
        for i, row in enumerate(rows):
            fields = dict(common)
            fields.update(row)
            fields.setdefault('uuid', f'uuid-{i}')
            fields.setdefault('description', f'task {i}')
            tasks.append(Task(**fields))
        return TaskList(tasks)
    return _make


def export_line(**fields) -> str:
    parts = []
    for key, value in fields.items():
        if isinstance(value, list):
            parts.append('"%s":[%s]' % (key, ','.join('"%s"' % v for v in value)))
        elif isinstance(value, int):
            parts.append('"%s":%d' % (key, value))
        else:
            parts.append('"%s":"%s"' % (key, value))
    return '{' + ','.join(parts) + '}'


@pytest.fixture
def export():
    """Render keyword dicts as `task export` lines."""
    def _export(*rows):
        return [export_line(**row) for row in rows]
    return _export
