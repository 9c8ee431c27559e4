"""
Structural (deep) equivalence of object graphs, for use in test assertions.

Two objects are equivalent when:
    - both are None
    - they are values (see :mod:`graph_equivalence.pytypes`) that are equal using '=='. Two NaNs are equivalent
    - they are strings with exactly the same characters (case-sensitive, no normalization)
    - they are sequences with the same number of elements, and every expected element can be matched to a distinct
      equivalent actual element, in any order
    - they are mappings with the same keys, and equivalent values at every key
    - they are composite objects whose public members (as found on the expected object) are all equivalent

Type compatibility is checked before any of that. With `strict_types=True` both objects must be of the exact same type.
Otherwise (the default) the actual object may also be an instance of a subclass of the expected object's type, or both
objects may be sequences, mappings or (non-bool) numbers of differing types.

Comparison stops at the first difference found (depth first, members in order), which is reported along with the path
from the root object to where the difference was found.

NOTE: there is no cycle detection. Comparing self-referential graphs that are not the identical objects will recurse
until python gives up.
"""

import logging
from collections.abc import Iterator
from .pytypes import (NodeKind, MISSING, classify, is_bool, is_iterable, is_mapping, is_nan, is_number,
    is_sequence, member_names, type_name)
from .messages import EquivalenceCheckingError, EquivalenceError, MismatchReport, render_path, safe_repr
from . import config
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from typing import Any, List, Optional, Union
    from .messages import ComparisonPath, MessageFactory


_logger = logging.getLogger(__name__)

# Marks a kwarg that was not passed, so the configured default should be used
_DEFAULT = object()


class EquivalenceComparer:
    """Compares two object graphs. One instance is used per top-level comparison, and holds only per-call settings.

    Every comparison method returns None if the objects are equivalent, and a :class:`MismatchReport` otherwise.
    """

    def __init__(self, strict_types: 'bool' = False, custom_message: 'Optional[MessageFactory]' = None,
        caller_name: 'Optional[str]' = None):
        """
        Args:
            strict_types (bool): if True, the actual and expected objects must always have exactly the same type
            custom_message (Optional[MessageFactory]): zero-arg callable giving extra text for failure messages. It is
                stored on reports, never called here
            caller_name (Optional[str]): name of the assertion function that started the comparison
        """
        self.strict_types = strict_types
        self.custom_message = custom_message
        self.caller_name = caller_name

        # id -> (iterator, its elements). Iterators can only be read once, but loose matching may need them many times
        self._consumed_iterators = {}

    def compare(self, actual: 'Any', expected: 'Any', path: 'ComparisonPath' = ()) -> 'Optional[MismatchReport]':
        """Compares `actual` against `expected`, returning None if they are equivalent, or the first mismatch"""
        try:
            return self._compare_objects(actual, expected, path)
        except (EquivalenceCheckingError, RecursionError):
            raise
        except Exception:
            raise EquivalenceCheckingError("Could not determine equivalence between objects\nactual: %s\nexpected: %s" %
                (safe_repr(actual), safe_repr(expected)))

    def _fail(self, actual: 'Any', expected: 'Any', path: 'ComparisonPath') -> 'MismatchReport':
        return MismatchReport(actual, expected, path, self.custom_message, self.caller_name)

    def _compare_objects(self, actual, expected, path):
        # Null handling
        if expected is None or actual is None:
            if expected is None and actual is None:
                return None
            return self._fail(actual, expected, path)

        kind = classify(expected)
        if not self._types_compatible(actual, expected, kind):
            return self._fail(type(actual), type(expected), path)
        path = _annotate(path, type(expected))

        # Checked before values too, so values with a non-reflexive '==' are still equivalent to themselves
        if actual is expected:
            return None

        if kind is NodeKind.VALUE:
            return self._compare_values(actual, expected, path)

        try:
            if kind is NodeKind.TEXT:
                return self._compare_strings(actual, expected, path)
            elif kind is NodeKind.SEQUENCE:
                return self._compare_sequences(actual, expected, path)
            elif kind is NodeKind.MAPPING:
                return self._compare_mappings(actual, expected, path)
            return self._compare_members(actual, expected, path)

        except (EquivalenceCheckingError, RecursionError):
            raise
        except Exception:
            raise EquivalenceCheckingError("Could not determine equivalence at path %s between objects of types %s and %s" %
                (repr(path), repr(type(actual).__name__), repr(type(expected).__name__)))

    def _types_compatible(self, actual, expected, kind):
        """Whether `actual` can be compared against `expected` (of the given kind) at all"""
        # The comparison is driven by the expected kind, which the actual object must support
        if kind is NodeKind.SEQUENCE and not is_iterable(actual):
            return False
        if kind is NodeKind.MAPPING and not is_mapping(actual):
            return False

        actual_type, expected_type = type(actual), type(expected)
        if actual_type is expected_type:
            return True
        if self.strict_types:
            return False

        # Bools never match up with other numbers, even though they subclass int
        if is_bool(actual) or is_bool(expected):
            return is_bool(actual) and is_bool(expected)

        return isinstance(actual, expected_type) \
            or (is_sequence(actual) and is_sequence(expected)) \
            or (is_mapping(actual) and is_mapping(expected)) \
            or (is_number(actual) and is_number(expected))

    def _compare_values(self, actual, expected, path):
        if is_nan(actual) and is_nan(expected):
            return None
        try:
            values_equal = bool(actual == expected)
        except Exception:
            raise EquivalenceCheckingError("Could not determine equality of values at path %s\nactual: %s\nexpected: %s" %
                (repr(path), safe_repr(actual), safe_repr(expected)))
        return None if values_equal else self._fail(actual, expected, path)

    def _compare_strings(self, actual, expected, path):
        # Plain str equality, so subclasses overriding __eq__ can't loosen the check
        if not str.__eq__(actual, expected):
            return self._fail(actual, expected, path)
        return None

    def _compare_sequences(self, actual, expected, path):
        expected_list = self._as_list(expected)
        actual_list = self._as_list(actual)

        if len(actual_list) != len(expected_list):
            return self._fail(len(actual_list), len(expected_list), path + ('Count',))

        unmatched_indices = list(range(len(actual_list)))
        for i, expected_item in enumerate(expected_list):
            report = self._loose_match(unmatched_indices, actual_list, expected_item, path + ('Element [%d]' % i,))
            if report is not None:
                return report

        return None

    def _as_list(self, obj: 'Any') -> 'List[Any]':
        """The elements of an iterable. Iterators are only read once per comparison, and their elements remembered"""
        if not isinstance(obj, Iterator):
            return list(obj)
        if id(obj) not in self._consumed_iterators:
            self._consumed_iterators[id(obj)] = (obj, list(obj))
        return self._consumed_iterators[id(obj)][1]

    def _loose_match(self, unmatched_indices: 'List[int]', actual_list: 'List[Any]', expected_item: 'Any',
        path: 'ComparisonPath') -> 'Optional[MismatchReport]':
        """Matches `expected_item` against the first equivalent unmatched actual element, and consumes its index.

        If nothing matches, the report from the last candidate tried is returned.
        """
        report = None
        for position, index in enumerate(unmatched_indices):
            report = self._compare_objects(actual_list[index], expected_item, path)
            if report is None:
                del unmatched_indices[position]
                return None
            if _logger.isEnabledFor(logging.DEBUG):
                _logger.debug("Discarding loose match candidate at actual index %d for path %s", index, render_path(path))
        return report

    def _compare_mappings(self, actual, expected, path):
        if len(actual) != len(expected):
            return self._fail(len(actual), len(expected), path + ('Count',))

        for key, expected_value in expected.items():
            key_path = path + ('Key [%s]' % repr(key),)
            if key not in actual:
                return self._fail(MISSING, expected_value, key_path)

            report = self._compare_objects(actual[key], expected_value, key_path)
            if report is not None:
                return report

        return None

    def _compare_members(self, actual, expected, path):
        names = member_names(expected)

        # Nothing to compare member by member, so the best we can do is the object's own '=='
        if len(names) == 0:
            return None if bool(actual == expected) else self._fail(actual, expected, path)

        for name in names:
            # Unset slots or attributes on the expected object have nothing to compare against
            expected_value = getattr(expected, name, MISSING)
            if expected_value is MISSING:
                continue

            actual_value = getattr(actual, name, MISSING)
            member_path = path + (name,)

            if actual_value is MISSING:
                return self._fail(MISSING, expected_value, member_path)

            report = self._compare_objects(actual_value, expected_value, member_path)
            if report is not None:
                return report

        return None


def _annotate(path: 'ComparisonPath', t: 'type') -> 'ComparisonPath':
    """Appends the type name to the last segment of the path, adding a root segment if the path is empty"""
    if len(path) == 0:
        path = ('',)
    return path[:-1] + (path[-1] + ' [%s]' % type_name(t),)


def _message_factory(custom_message: 'Union[None, str, MessageFactory]') -> 'Optional[MessageFactory]':
    """Converts a custom message (None, a str, or a zero-arg callable) into a zero-arg callable, or None"""
    if custom_message is None or callable(custom_message):
        return custom_message
    if isinstance(custom_message, str):
        return lambda: custom_message
    raise TypeError("`custom_message` must be None, a str, or a zero-argument callable, not %s" %
        repr(type(custom_message).__name__))


def _strict_types(strict_types: 'Any') -> 'bool':
    if strict_types is _DEFAULT:
        return config.get_default('strict_types')
    if not isinstance(strict_types, bool):
        raise TypeError("`strict_types` must be a bool, not %s" % repr(type(strict_types).__name__))
    return strict_types


def compare(actual: 'Any', expected: 'Any', custom_message: 'Union[None, str, MessageFactory]' = None,
    strict_types: 'bool' = _DEFAULT, caller_name: 'str' = 'compare') -> 'Optional[MismatchReport]':
    """Compares two objects for equivalence without raising on a mismatch.

    Args:
        actual (Any): the object produced by the code under test
        expected (Any): the object it should be equivalent to
        custom_message (Union[None, str, MessageFactory]): extra info to attach to the report. Callables are not called
        strict_types (bool): if True, the types of all compared objects must exactly match. Defaults to the configured
            'strict_types' default (False unless changed)
        caller_name (str): name of the assertion function to show in failure messages

    Returns:
        Optional[MismatchReport]: None if the objects are equivalent, otherwise the first mismatch found
    """
    comparer = EquivalenceComparer(_strict_types(strict_types), _message_factory(custom_message), caller_name)
    return comparer.compare(actual, expected)


def _assert(actual, expected, custom_message, strict_types, caller_name):
    report = compare(actual, expected, custom_message=custom_message, strict_types=strict_types, caller_name=caller_name)
    if report is not None:
        _logger.debug("%s failed at path %s", caller_name, render_path(report.path))
        raise EquivalenceError(report)


def assert_equivalent(actual: 'Any', expected: 'Any', custom_message: 'Union[None, str, MessageFactory]' = None,
    strict_types: 'bool' = _DEFAULT) -> 'None':
    """Asserts that `actual` is structurally equivalent to `expected`.

    Args:
        actual (Any): the object produced by the code under test
        expected (Any): the object it should be equivalent to
        custom_message (Union[None, str, MessageFactory]): extra info shown on failure. Can be a str, or a zero-arg
            callable which is only called if the assertion fails
        strict_types (bool): if True, the types of all compared objects must exactly match. Defaults to the configured
            'strict_types' default (False unless changed)

    Raises:
        EquivalenceError: if the objects are not equivalent. The first mismatch is available as `.report`
        EquivalenceCheckingError: if equivalence could not be determined (eg: a property getter raised an error)
    """
    _assert(actual, expected, custom_message, strict_types, 'assert_equivalent')


def should_be_equivalent_to(actual: 'Any', expected: 'Any', custom_message: 'Union[None, str, MessageFactory]' = None,
    strict_types: 'bool' = _DEFAULT) -> 'None':
    """Same as :func:`assert_equivalent`, reporting itself as 'should_be_equivalent_to' in failure messages"""
    _assert(actual, expected, custom_message, strict_types, 'should_be_equivalent_to')


def equivalent(actual: 'Any', expected: 'Any', strict_types: 'bool' = _DEFAULT, raise_err: 'bool' = False) -> 'bool':
    """
    Determines whether `actual` is structurally equivalent to `expected`.

    Args:
        actual (Any): object to check equivalence
        expected (Any): object to check equivalence against. Its type and members decide how the check is done
        strict_types (bool): if True, the types of all compared objects must exactly match
        raise_err (bool): if True, then an ``EquivalenceError`` will be raised whenever the objects are not equivalent,
            along with the path to the first difference. Defaults to False.
    """
    report = compare(actual, expected, strict_types=strict_types, caller_name='equivalent')
    if report is None:
        return True
    if raise_err:
        raise EquivalenceError(report)
    return False
