"""
Tests for the graph_equivalence.config file.
"""

import pytest
from graph_equivalence import compare, config
from graph_equivalence.messages import limit_repr


@pytest.fixture(autouse=True)
def _restore_defaults(monkeypatch):
    yield
    monkeypatch.undo()
    config.reset_defaults()


def test_defaults():
    assert config.get_default('strict_types') is False
    assert config.get_default('max_repr_length') == 1000

    with pytest.raises(KeyError):
        config.get_default('unordered')


def test_set_default():
    """Defaults are used when a call does not pass its own value"""
    assert compare(1, 1.0) is None
    config.set_default('strict_types', True)
    assert compare(1, 1.0) is not None
    assert compare(1, 1.0, strict_types=False) is None

    config.set_default('max_repr_length', 3)
    assert limit_repr('abcdef') == "'ab..."

    config.reset_defaults()
    assert config.get_default('strict_types') is False


def test_set_default_validation():
    with pytest.raises(KeyError):
        config.set_default('unordered', True)
    with pytest.raises(TypeError):
        config.set_default('strict_types', 1)
    with pytest.raises(TypeError):
        config.set_default('max_repr_length', True)
    with pytest.raises(ValueError):
        config.set_default('max_repr_length', 0)


def test_environment_variables(monkeypatch):
    """Environment variables are read when defaults are (re)loaded"""
    monkeypatch.setenv('GRAPH_EQUIVALENCE_STRICT_TYPES', ' Yes ')
    monkeypatch.setenv('GRAPH_EQUIVALENCE_MAX_REPR_LENGTH', '20')
    config.reset_defaults()
    assert config.get_default('strict_types') is True
    assert config.get_default('max_repr_length') == 20

    monkeypatch.setenv('GRAPH_EQUIVALENCE_STRICT_TYPES', 'off')
    config.reset_defaults()
    assert config.get_default('strict_types') is False


def test_bad_environment_variables(monkeypatch):
    """Unparseable values raise, and leave the current defaults alone"""
    monkeypatch.setenv('GRAPH_EQUIVALENCE_STRICT_TYPES', 'maybe')
    with pytest.raises(ValueError):
        config.reset_defaults()
    assert config.get_default('strict_types') is False

    monkeypatch.delenv('GRAPH_EQUIVALENCE_STRICT_TYPES')
    for raw in ['-1', 'lots']:
        monkeypatch.setenv('GRAPH_EQUIVALENCE_MAX_REPR_LENGTH', raw)
        with pytest.raises(ValueError):
            config.reset_defaults()
