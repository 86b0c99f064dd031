# -*- coding: utf-8 -*-
"""
The ``DELETE`` statement.

"""

from .condition import condition_expression
from .query import Query
from .query import WhereClause
from .query import require_table


class Delete(Query):
    """
    ``DELETE FROM table WHERE <condition>``

    With no condition at all, every row is deleted; that form is
    only produced by :func:`build_empty_table`.
    """

    where_clause = None

    def __init__(self, table, condition=None, everything=False):
        self.table = require_table(table)
        if not everything:
            self.where_clause = WhereClause(condition_expression(condition))

    def __compile_visit__(self, compiler):
        compiler.emit_keyword('DELETE FROM')
        compiler.visit(self.table)
        if self.where_clause is not None:
            compiler.visit(self.where_clause)


def build_delete(table, condition, dialect=None):
    """
    Compile a ``DELETE`` of the rows matching *condition*.

        >>> build_delete('users', {'id': 1}).stmt
        'DELETE FROM users WHERE id = :cond_id'
    """
    return Delete(table, condition).compiled(dialect)


def build_empty_table(table, dialect=None):
    """
    Compile a ``DELETE`` of every row in *table*.
    """
    return Delete(table, everything=True).compiled(dialect)
