"""
Runtime type helpers used to decide how two objects are compared.

Every object in a compared graph falls into exactly one :class:`NodeKind`:
    - NULL: None
    - VALUE: compared with the built-in '==' (numbers, bools, enums, dates/times, bytes-like, types, singletons, numpy
      scalars and 0-d arrays, and anything passed to :func:`register_value_type`)
    - TEXT: str (including subclasses and numpy str_)
    - MAPPING: any collections.abc.Mapping
    - SEQUENCE: any other iterable, including numpy arrays with at least one dimension
    - COMPOSITE: everything else, compared member by member
"""

import dataclasses
import datetime
import numbers
import uuid
from collections.abc import Iterable, Mapping
from decimal import Decimal
from enum import Enum
from functools import cached_property
import numpy as np
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from typing import Any, List


SingletonObjects = (None, Ellipsis, NotImplemented)
_PROPERTY_TYPES = (property, cached_property)


class _Missing:
    """Placeholder for a member or key that exists on the expected object but not on the actual one"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return '<missing>'

    def __bool__(self):
        return False


MISSING = _Missing()


class NodeKind(Enum):
    NULL = 'null'
    VALUE = 'value'
    TEXT = 'text'
    SEQUENCE = 'sequence'
    MAPPING = 'mapping'
    COMPOSITE = 'composite'


# Types compared with their own '==' rather than structurally. numbers.Number covers int, float, complex, Decimal,
# Fraction and the numpy numeric scalars
_VALUE_TYPES = [
    bool, numbers.Number, np.generic, Enum, datetime.date, datetime.time, datetime.timedelta, uuid.UUID,
    bytes, bytearray, memoryview, type,
]


def register_value_type(t: 'type') -> 'None':
    """Registers a type whose instances should be compared with their own '==' instead of member by member.

    Subclasses of `t` are also treated as value types. Registering is meant to happen once at import time.

    Args:
        t (type): the type to register
    """
    if not isinstance(t, type):
        raise TypeError("Can only register types as value types, not %s" % repr(type(t).__name__))
    if t not in _VALUE_TYPES:
        _VALUE_TYPES.append(t)


def is_value(obj: 'Any') -> 'bool':
    # Enum first, so str/int mixin enums are still compared as values
    if any(obj is x for x in SingletonObjects) or isinstance(obj, Enum):
        return True
    if isinstance(obj, str):
        return False
    if isinstance(obj, np.ndarray):
        return obj.ndim == 0
    return isinstance(obj, tuple(_VALUE_TYPES))


def is_text(obj: 'Any') -> 'bool':
    return isinstance(obj, str)


def is_mapping(obj: 'Any') -> 'bool':
    return isinstance(obj, Mapping)


def is_namedtuple(obj: 'Any') -> 'bool':
    return isinstance(obj, tuple) and isinstance(getattr(type(obj), '_fields', None), tuple)


def is_sequence(obj: 'Any') -> 'bool':
    """True if `obj` is an iterable container whose elements should be compared (not text, bytes, mappings, etc.)"""
    return classify(obj) is NodeKind.SEQUENCE


def is_iterable(obj: 'Any') -> 'bool':
    """True if the elements of `obj` can be compared as a sequence, whatever kind `obj` itself is classified as.

    Unlike :func:`is_sequence`, this is true for namedtuples and other composites that can also be iterated.
    """
    if obj is None or is_value(obj) or is_text(obj) or is_mapping(obj):
        return False
    return isinstance(obj, Iterable)


def is_bool(obj: 'Any') -> 'bool':
    return isinstance(obj, (bool, np.bool_))


def is_number(obj: 'Any') -> 'bool':
    """True for non-bool numbers. Bools are NOT numbers here, no matter what python thinks"""
    return isinstance(obj, (numbers.Number, np.number)) and not is_bool(obj)


def is_nan(obj: 'Any') -> 'bool':
    """True for NaN numbers and NaT datetimes, including inside 0-d numpy arrays"""
    if isinstance(obj, np.ndarray):
        return obj.ndim == 0 and is_nan(obj[()])
    if isinstance(obj, (np.datetime64, np.timedelta64)):
        return bool(np.isnat(obj))
    if isinstance(obj, Decimal):
        return obj.is_nan()
    if isinstance(obj, (float, complex, np.floating, np.complexfloating)):
        return bool(np.isnan(obj))
    return False


def classify(obj: 'Any') -> 'NodeKind':
    """Returns the :class:`NodeKind` used to compare the given object"""
    if obj is None:
        return NodeKind.NULL
    if is_value(obj):
        return NodeKind.VALUE
    if is_text(obj):
        return NodeKind.TEXT
    if is_mapping(obj):
        return NodeKind.MAPPING
    if is_namedtuple(obj):
        return NodeKind.COMPOSITE
    if isinstance(obj, Iterable):
        return NodeKind.SEQUENCE
    return NodeKind.COMPOSITE


def type_name(t: 'type') -> 'str':
    """Display name of a type: the bare qualified name for builtins, 'module.QualName' otherwise"""
    qualname = getattr(t, '__qualname__', None) or getattr(t, '__name__', repr(t))
    module = getattr(t, '__module__', None)
    if module in (None, 'builtins'):
        return qualname
    return '%s.%s' % (module, qualname)


def member_names(obj: 'Any') -> 'List[str]':
    """Returns the public member names of a composite object, in a deterministic order.

    Order is:
        1. dataclass fields in declaration order, or namedtuple fields
        2. otherwise, __slots__ entries walking the MRO base class first, then the instance __dict__ in insertion order,
           then properties (and cached properties) walking the MRO base class first, in class body order

    Names starting with an underscore are skipped.
    """
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        names = [f.name for f in dataclasses.fields(obj)]
    elif is_namedtuple(obj):
        names = list(type(obj)._fields)
    else:
        names = []
        mro = [k for k in reversed(type(obj).__mro__) if k is not object]

        for klass in mro:
            slots = klass.__dict__.get('__slots__', ())
            names.extend([slots] if isinstance(slots, str) else slots)

        properties = []
        for klass in mro:
            properties.extend(k for k, v in klass.__dict__.items() if isinstance(v, _PROPERTY_TYPES))

        # Cached properties end up in the instance __dict__ once accessed
        instance_dict = getattr(obj, '__dict__', None)
        if isinstance(instance_dict, dict):
            names.extend(k for k in instance_dict if k not in properties)

        names.extend(properties)

    # Remove private names and duplicates, keeping first occurrences
    seen = set()
    ret = []
    for name in names:
        if not isinstance(name, str) or name.startswith('_') or name in seen:
            continue
        seen.add(name)
        ret.append(name)
    return ret

