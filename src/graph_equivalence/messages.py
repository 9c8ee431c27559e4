"""
Failure values and the errors raised by the equivalence checks.

A failed comparison produces a :class:`MismatchReport`. It is only turned into text (and the custom message callback
only called) once it is surfaced to the user as an :class:`EquivalenceError`.
"""

from typing import Any, Callable, NamedTuple, Optional, Tuple
from typing_extensions import TypeAlias
from . import config


ComparisonPath: TypeAlias = Tuple[str, ...]
MessageFactory: TypeAlias = Callable[[], Optional[str]]

ROOT_NAME = 'root'


class MismatchReport(NamedTuple):
    """The first point of divergence between two object graphs"""
    actual: Any
    expected: Any
    path: ComparisonPath
    custom_message: Optional[MessageFactory] = None
    caller_name: Optional[str] = None

    def resolve_message(self) -> 'Optional[str]':
        """Calls the custom message callback (if there is one) and returns its result"""
        return None if self.custom_message is None else self.custom_message()

    def rendered_path(self) -> 'str':
        return render_path(self.path)


def render_path(path: 'ComparisonPath', root: 'str' = ROOT_NAME) -> 'str':
    """Renders a path like: 'root [pkg.Order].lines [list].Element [1] [pkg.Line].qty [int]'

    The first segment always belongs to the root object, and so is appended directly to `root`.
    """
    if len(path) == 0:
        return root
    return root + path[0] + ''.join('.' + segment for segment in path[1:])


def limit_repr(obj: 'Any', limit: 'Optional[int]' = None) -> 'str':
    """repr() of the given object, cut down to `limit` characters (defaults to the configured max_repr_length)"""
    limit = config.get_default('max_repr_length') if limit is None else limit
    obj_str = repr(obj)
    return obj_str if len(obj_str) <= limit else (obj_str[:limit] + '...')


def safe_repr(obj: 'Any', limit: 'Optional[int]' = None) -> 'str':
    """Same as :func:`limit_repr`, but never raises. Objects with a broken __repr__ get a placeholder"""
    try:
        return limit_repr(obj, limit)
    except Exception:
        return '<unrepresentable %s object>' % type(obj).__name__


def format_report(report: 'MismatchReport') -> 'str':
    """Formats a report into the message shown to the user. Calls the report's custom message callback. Never raises"""
    lines = [
        '%s: comparing object equivalence at path:' % (report.caller_name or 'assert_equivalent'),
        '    ' + report.rendered_path(),
        '',
        '    Expected value to be',
        safe_repr(report.expected),
        '    but was',
        safe_repr(report.actual),
    ]

    # A broken callback must not hide the mismatch itself
    try:
        custom_message = report.resolve_message()
    except Exception as e:
        custom_message = '<custom message raised %s: %s>' % (type(e).__name__, e)
    if custom_message is not None:
        lines.extend(['', 'Additional Info:', '    ' + str(custom_message)])

    return '\n'.join(lines)


class EquivalenceError(AssertionError):
    """Error raised whenever two objects are not equivalent. The failure data is available as `.report`"""

    def __init__(self, report: 'MismatchReport'):
        self.report = report
        super().__init__(format_report(report))


class EquivalenceCheckingError(Exception):
    """Error raised whenever there is an unexpected problem attempting to check equivalence between two objects"""
