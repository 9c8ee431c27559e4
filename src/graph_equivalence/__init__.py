import logging
from .equivalence import EquivalenceComparer, assert_equivalent, compare, equivalent, should_be_equivalent_to
from .messages import EquivalenceCheckingError, EquivalenceError, MismatchReport
from .pytypes import MISSING, NodeKind, register_value_type

__version__ = '0.1.0'
__all__ = ['EquivalenceComparer', 'assert_equivalent', 'compare', 'equivalent', 'should_be_equivalent_to',
    'EquivalenceCheckingError', 'EquivalenceError', 'MismatchReport', 'MISSING', 'NodeKind', 'register_value_type']

logging.getLogger(__name__).addHandler(logging.NullHandler())
