# -*- coding: utf-8 -*-
"""
``WHERE`` conditions built from a mapping.

"""

from relbulk.interfaces import ValidationError

from .expressions import And
from .expressions import Column
from .expressions import bindparam
from .query import Query

#: Values of these types become ``IN`` comparisons. Strings and bytes
#: are sequences too, but are compared for equality.
SEQUENCE_TYPES = (list, tuple, set, frozenset)

def is_sequence_value(value):
    return isinstance(value, SEQUENCE_TYPES)


def condition_expression(condition):
    """
    Return an `And` expression matching every key in the *condition*
    mapping.

    Keys are visited in sorted order. A sequence value becomes
    ``key IN (:cond_key)``; the binding layer is responsible for
    expanding the sequence. Empty sequences match nothing useful,
    so they are skipped.

    :raises ValidationError: If no comparisons remain.
    """
    if not condition:
        raise ValidationError("condition is empty")

    comparisons = []
    for key in sorted(condition):
        value = condition[key]
        column = Column(key)
        param = bindparam('cond_' + key, value)
        if is_sequence_value(value):
            if not value:
                continue
            comparisons.append(column.in_(param))
        else:
            comparisons.append(column == param)

    if not comparisons:
        raise ValidationError(
            "condition is empty; make sure the condition input is valid"
        )
    return And(*comparisons)


class Condition(Query):
    """
    A free-standing condition, as it would appear after ``WHERE``.
    """

    def __init__(self, condition):
        self.expression = condition_expression(condition)

    def __compile_visit__(self, compiler):
        compiler.visit(self.expression)


def build_condition(condition, dialect=None):
    """
    Compile the *condition* mapping into ``(text, binds)``.

        >>> build_condition({'name': 'A', 'id': [1, 2]}).stmt
        'id IN (:cond_id) AND name = :cond_name'
    """
    return Condition(condition).compiled(dialect)
