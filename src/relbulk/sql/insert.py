# -*- coding: utf-8 -*-
"""
The ``INSERT`` statement.

"""

from relbulk.interfaces import ValidationError

from .expressions import Column
from .expressions import ExpressionList
from .expressions import bindparam
from .query import Query
from .query import require_table


class Insert(Query):
    """
    ``INSERT INTO table (c1, c2) VALUES (:c1, :c2)``

    The columns and bind names come from a sample row, sorted by
    name. The statement text doesn't depend on the sample's values,
    so it can be reused to insert any row with the same columns.
    """

    def __init__(self, table, sample_row):
        self.table = require_table(table)
        if not sample_row:
            raise ValidationError("data is empty")
        names = sorted(sample_row)
        self.column_list = ExpressionList(Column(name) for name in names)
        self.values = ExpressionList(bindparam(name, sample_row[name]) for name in names)

    def __compile_visit__(self, compiler):
        compiler.emit_keyword('INSERT INTO')
        compiler.visit(self.table)
        compiler.emit(' ')
        compiler.visit_grouped(self.column_list)
        compiler.emit_keyword('VALUES')
        compiler.visit_grouped(self.values)


def build_insert(table, sample_row, dialect=None):
    """
    Compile an ``INSERT`` shaped like *sample_row*.

        >>> build_insert('users', {'name': 'A', 'id': 1}).stmt
        'INSERT INTO users (id, name) VALUES (:id, :name)'
    """
    return Insert(table, sample_row).compiled(dialect)
