# -*- coding: utf-8 -*-
"""
The ``UPDATE`` statement, for one set of values or for many rows at
once.

"""

from relbulk.interfaces import ValidationError

from .condition import condition_expression
from .expressions import And
from .expressions import AssignmentExpression
from .expressions import CaseExpression
from .expressions import Column
from .expressions import ExpressionList
from .expressions import Grouped
from .expressions import bindparam
from .query import Query
from .query import WhereClause
from .query import require_table


class _SetClause(object):

    def __init__(self, assignments):
        self.assignments = ExpressionList(assignments)

    def __compile_visit__(self, compiler):
        compiler.emit_keyword('SET')
        compiler.visit(self.assignments)


class Update(Query):
    """
    ``UPDATE table SET a = :val_a WHERE <condition>``
    """

    def __init__(self, table, payload, condition):
        self.table = require_table(table)
        if not payload:
            raise ValidationError("payload is empty")
        if not condition:
            raise ValidationError("condition is empty")

        self.set_clause = _SetClause(
            AssignmentExpression(Column(key), bindparam('val_' + key, payload[key]))
            for key in sorted(payload)
        )
        self.where_clause = WhereClause(condition_expression(condition))

    def __compile_visit__(self, compiler):
        compiler.emit_keyword('UPDATE')
        compiler.visit(self.table)
        compiler.visit(self.set_clause)
        compiler.visit(self.where_clause)


def build_update(table, payload, condition, dialect=None):
    """
    Compile an ``UPDATE`` of a single set of values.

        >>> build_update('users', {'name': 'A'}, {'id': 1}).stmt
        'UPDATE users SET name = :val_name WHERE id = :cond_id'
    """
    return Update(table, payload, condition).compiled(dialect)


class BulkUpdate(Query):
    """
    One ``UPDATE`` covering many rows.

    Each non-key column gets a ``CASE`` choosing the value for the
    row whose keys match; columns a row doesn't mention keep their
    current value. The ``WHERE`` clause restricts the statement to
    the rows being updated::

        UPDATE t
        SET name = (CASE WHEN id = :id_0 THEN :name_0
                         WHEN id = :id_1 THEN :name_1
                         ELSE name END)
        WHERE id IN (:id_0, :id_1)

    Bind names are ``<column>_<index>``, where index is the position
    of the row in *rows*. The rows are not modified.
    """

    def __init__(self, table, rows, key_columns):
        self.table = require_table(table)
        if not rows:
            raise ValidationError("data is empty")
        if not key_columns:
            raise ValidationError("key edit is empty")
        if isinstance(key_columns, str):
            key_columns = (key_columns,)

        keys = sorted(set(key_columns))
        cases = {}  # {column name: CaseExpression}
        key_params = {key: [] for key in keys}

        for index, row in enumerate(rows):
            predicate = []
            for key in keys:
                if key not in row:
                    raise ValidationError(
                        "row %d is missing key column %r" % (index, key)
                    )
                param = bindparam('%s_%d' % (key, index), row[key])
                predicate.append(AssignmentExpression(Column(key), param))
                key_params[key].append(param)
            predicate = And(*predicate)

            for column in sorted(row):
                if column in key_params:
                    continue
                case = cases.get(column)
                if case is None:
                    case = cases[column] = CaseExpression(Column(column))
                case.when(predicate, bindparam('%s_%d' % (column, index), row[column]))

        if cases:
            assignments = [
                AssignmentExpression(Column(column), Grouped(cases[column]))
                for column in sorted(cases)
            ]
        else:
            # Only keys were given. Nothing changes, but the statement
            # must still be valid.
            assignments = [AssignmentExpression(Column(keys[0]), Column(keys[0]))]
        self.set_clause = _SetClause(assignments)
        self.where_clause = WhereClause(And(*[
            Column(key).in_(key_params[key])
            for key in keys
        ]))

    def __compile_visit__(self, compiler):
        compiler.emit_keyword('UPDATE')
        compiler.visit(self.table)
        compiler.visit(self.set_clause)
        compiler.visit(self.where_clause)


def build_bulk_update(table, rows, key_columns, dialect=None):
    """
    Compile a single ``UPDATE`` for all of *rows*, matching records
    on *key_columns*.
    """
    return BulkUpdate(table, rows, key_columns).compiled(dialect)
