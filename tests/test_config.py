import logging

import pytest

from config import Config, config_path, load_config


def test_defaults():
    config = Config()
    assert config.sortmode == 'd'
    assert config.filter_persist and config.filter_cascade
    assert (config.nc_timeout, config.statusbar_timeout, config.loglvl) == (500, 3, 0)


def test_config_file_is_applied_line_by_line(tmp_path, caplog):
    path = tmp_path / 'config'
    path.write_text(
        '# tasknc settings\n'
        'sortmode = p\n'
        'filter_persist=0   # keep filters separate\n'
        'nc_timeout = soon\n'
        'bogus = 1\n'
        'no separator here\n'
        'version = 9\n'
        'tasknc_version = 9\n'
        'loglvl = 2\n'
    )
    with caplog.at_level(logging.ERROR, logger='config'):
        config = load_config(path)
    assert config.sortmode == 'p'
    assert config.filter_persist is False
    assert config.filter_cascade is True
    assert config.nc_timeout == 500
    assert config.loglvl == 2
    assert config.version == ''
    assert 'unhandled config line: no separator here' in caplog.text
    assert 'parsing bogus configuration' in caplog.text


def test_missing_file_keeps_defaults(tmp_path, caplog):
    with caplog.at_level(logging.ERROR, logger='config'):
        config = load_config(tmp_path / 'absent')
    assert config == Config()
    assert 'could not be opened' in caplog.text


def test_config_path_follows_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv('XDG_CONFIG_HOME', str(tmp_path))
    assert config_path() == tmp_path / 'tasknc' / 'config'


@pytest.mark.parametrize('name, raw, shown', [
    ('sortmode', 'R', 'r'),
    ('filter_cascade', '0', '0'),
    ('statusbar_timeout', ' 7 ', '7'),
    ('tasknc_version', '2.6.2', '2.6.2'),
])
def test_set_and_show(name, raw, shown):
    config = Config()
    config.set(name, raw)
    assert config.show(name) == shown


@pytest.mark.parametrize('name, raw', [
    ('sortmode', 'due'),
    ('sortmode', 'x'),
    ('filter_persist', 'true'),
    ('loglvl', 'lots'),
    ('colour', 'red'),
])
def test_set_rejects_bad_values(name, raw):
    with pytest.raises(ValueError):
        Config().set(name, raw)
