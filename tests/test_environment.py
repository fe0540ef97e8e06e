import logging

import pytest

import unithelper


CONFIG = """
[aliases]
kg_ha = kg/ha
Share = 1

[units]
placeholders = widget, soil layer,

[conversion]
precision = 60

[logging]
level = warning
"""


@pytest.fixture
def local_config(tmp_path, monkeypatch):
    """Create a configuration file in the working directory."""
    path = tmp_path / 'unithelper.ini'
    path.write_text(CONFIG)
    monkeypatch.chdir(tmp_path)
    unithelper.instance.cache_clear()
    yield path
    unithelper.instance.cache_clear()
    logging.getLogger('unithelper').setLevel(logging.NOTSET)


def test_environment(local_config):
    """Read one section of the local configuration file."""
    env = unithelper.Environment('aliases')
    assert env.path == local_config.resolve()
    assert dict(env) == {'kg_ha': 'kg/ha', 'Share': '1'}
    assert len(env) == 2
    assert env['Share'] == '1'
    assert 'share' not in env
    with pytest.raises(KeyError) as err:
        env['bogus']
    assert "unithelper.aliases has no value for 'bogus'" in str(err.value)


def test_environment_missing_section(local_config):
    """Treat a missing section as empty."""
    env = unithelper.Environment('missing')
    assert len(env) == 0
    assert env.get('anything') is None
    assert str(env) == '{}'


def test_configure(local_config):
    """Collect engine options from the configuration file."""
    options = unithelper.configure()
    assert options == {
        'aliases': {'kg_ha': 'kg/ha', 'Share': '1'},
        'placeholders': ['widget', 'soil layer'],
        'precision': 60,
    }


def test_instance(local_config):
    """Create one engine from the configuration file."""
    engine = unithelper.instance()
    assert unithelper.instance() is engine
    assert engine.aliases['kg_ha'] == 'kg/ha'
    assert engine.describe('Share') == 'Share'
    assert [u.name for u in engine.list_units('X')] == [
        'widget', 'soil layer',
    ]
    assert logging.getLogger('unithelper').level == logging.WARNING
