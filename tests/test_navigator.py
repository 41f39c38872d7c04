import pytest

from errors import NoMatch
from models import compile_pattern
from navigator import clamp, find_next, ordinal_of, resolve


def test_resolve_counts_visible_tasks_only(make_list):
    tasklist = make_list({'visible': True}, {'visible': False}, {'visible': True}, {'visible': True})
    tasks = list(tasklist)
    assert resolve(tasklist, 0) is tasks[0]
    assert resolve(tasklist, 1) is tasks[2]
    assert resolve(tasklist, 2) is tasks[3]
    assert resolve(tasklist, 3) is None
    assert resolve(tasklist, -1) is None


def test_ordinal_of_is_the_inverse_of_resolve(make_list):
    tasklist = make_list({'visible': True}, {'visible': False}, {'visible': True})
    tasks = list(tasklist)
    assert ordinal_of(tasklist, tasks[2]) == 1
    with pytest.raises(ValueError):
        ordinal_of(tasklist, make_list({}).head)


@pytest.mark.parametrize('ordinal, count, expected', [
    (-3, 5, 0), (2, 5, 2), (9, 5, 4), (3, 0, 0),
])
def test_clamp(ordinal, count, expected):
    assert clamp(ordinal, count) == expected


@pytest.mark.parametrize('start', [3, 4])
def test_search_wraps_past_the_end(make_list, start):
    tasklist = make_list(
        {'description': 'milk'},
        {'description': 'bread'},
        {'description': 'eggs'},
        {'description': 'jam'},
        {'description': 'butter'},
    )
    tasks = list(tasklist)
    task, ordinal = find_next(tasklist, compile_pattern('milk'), tasks[start])
    assert task is tasks[0]
    assert ordinal == 0


def test_search_moves_forward_from_the_start_task(make_list):
    tasklist = make_list({'description': 'buy milk'}, {'description': 'bread'}, {'description': 'oat milk'})
    tasks = list(tasklist)
    assert find_next(tasklist, compile_pattern('milk'), tasks[0]) == (tasks[2], 2)


def test_search_skips_hidden_tasks(make_list):
    tasklist = make_list(
        {'description': 'alpha'},
        {'description': 'target', 'visible': False},
        {'description': 'beta'},
        {'description': 'target two'},
    )
    tasks = list(tasklist)
    assert find_next(tasklist, compile_pattern('target'), tasks[0]) == (tasks[3], 2)


def test_search_matches_project_and_tags(make_list):
    tasklist = make_list({'description': 'a'}, {'description': 'b', 'tags': 'urgent'})
    tasks = list(tasklist)
    assert find_next(tasklist, compile_pattern('URGENT'), tasks[0])[0] is tasks[1]


def test_start_task_is_checked_last(make_list):
    tasklist = make_list({'description': 'only match'}, {'description': 'other'}, {'description': 'x'})
    tasks = list(tasklist)
    assert find_next(tasklist, compile_pattern('only'), tasks[0]) == (tasks[0], 0)


def test_search_without_match_raises(make_list):
    tasklist = make_list({'description': 'a'}, {'description': 'b'})
    with pytest.raises(NoMatch) as info:
        find_next(tasklist, compile_pattern('zzz'), tasklist.head)
    assert info.value.pattern == 'zzz'


def test_wrap_onto_hidden_head_keeps_ordinals_right(make_list):
    tasklist = make_list(
        {'description': 'hidden', 'visible': False},
        {'description': 'first'},
        {'description': 'match'},
        {'description': 'last'},
    )
    tasks = list(tasklist)
    assert find_next(tasklist, compile_pattern('match'), tasks[3]) == (tasks[2], 1)


def test_search_from_nothing_starts_at_the_head(make_list):
    tasklist = make_list({'description': 'match'}, {'description': 'other'})
    assert find_next(tasklist, compile_pattern('match'), None) == (tasklist.head, 0)


def test_search_in_empty_list(make_list):
    with pytest.raises(NoMatch):
        find_next(make_list(), compile_pattern('x'), None)
