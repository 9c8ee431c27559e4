"""
Package-wide defaults used by the equivalence checks.

Defaults can be set with environment variables before import:
    - GRAPH_EQUIVALENCE_STRICT_TYPES: '1', 'true', 'yes', 'on' (or their negations) to choose the type policy
    - GRAPH_EQUIVALENCE_MAX_REPR_LENGTH: positive int, max characters of a value shown in failure messages

or changed at runtime with :func:`set_default`.
"""

import os
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from typing import Any, Dict


_ENV_PREFIX = 'GRAPH_EQUIVALENCE_'
_TRUE_STRINGS = ('1', 'true', 'yes', 'on')
_FALSE_STRINGS = ('0', 'false', 'no', 'off')

# Name -> (type, builtin default value)
_DEFAULT_SPECS = {
    'strict_types': (bool, False),
    'max_repr_length': (int, 1000),
}


def _parse_env_value(name: 'str', raw: 'str') -> 'Any':
    """Converts the string value of an environment variable into the type expected for default `name`"""
    t = _DEFAULT_SPECS[name][0]
    if t is bool:
        if raw.strip().lower() in _TRUE_STRINGS:
            return True
        if raw.strip().lower() in _FALSE_STRINGS:
            return False
        raise ValueError("Could not parse environment variable %s as a bool: %s" % (_ENV_PREFIX + name.upper(), repr(raw)))

    try:
        return _validate(name, int(raw.strip()))
    except ValueError:
        raise ValueError("Could not parse environment variable %s as a positive int: %s" % (_ENV_PREFIX + name.upper(), repr(raw)))


def _validate(name: 'str', value: 'Any') -> 'Any':
    t = _DEFAULT_SPECS[name][0]

    # bool is a subclass of int, but should never count as one here
    if not isinstance(value, t) or (t is int and isinstance(value, bool)):
        raise TypeError("Default %s must be of type %s, not %s" % (repr(name), repr(t.__name__), repr(type(value).__name__)))
    if t is int and value <= 0:
        raise ValueError("Default %s must be positive, got %d" % (repr(name), value))
    return value


def _load_defaults() -> 'Dict[str, Any]':
    ret = {}
    for name, (_, default) in _DEFAULT_SPECS.items():
        raw = os.environ.get(_ENV_PREFIX + name.upper())
        ret[name] = default if raw is None else _parse_env_value(name, raw)
    return ret


_DEFAULTS = _load_defaults()


def get_default(name: 'str') -> 'Any':
    """Returns the current value of the default with the given name"""
    if name not in _DEFAULT_SPECS:
        raise KeyError("Unknown default: %s" % repr(name))
    return _DEFAULTS[name]


def set_default(name: 'str', value: 'Any') -> 'None':
    """Sets the default with the given name.

    Args:
        name (str): the name of the default. One of 'strict_types', 'max_repr_length'
        value (Any): the new value. Must be a bool for 'strict_types' and a positive int for 'max_repr_length'
    """
    if name not in _DEFAULT_SPECS:
        raise KeyError("Unknown default: %s" % repr(name))
    _DEFAULTS[name] = _validate(name, value)


def reset_defaults() -> 'None':
    """Resets all defaults back to their values at import time (including environment variables)"""
    defaults = _load_defaults()
    _DEFAULTS.clear()
    _DEFAULTS.update(defaults)
