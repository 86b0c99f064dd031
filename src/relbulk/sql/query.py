# -*- coding: utf-8 -*-
"""
Compiled queries ready for execution.

"""
import re

from relbulk.interfaces import ValidationError

from .dialect import DefaultDialect
from .expressions import Table

DEFAULT_DIALECT = DefaultDialect()


def require_table(table):
    if not table:
        raise ValidationError("table is empty")
    return Table(table)


class Clause(object):
    """
    A portion of a SQL statement.
    """


class WhereClause(Clause):

    def __init__(self, expression):
        self.expression = expression

    def __compile_visit__(self, compiler):
        compiler.emit_keyword('WHERE')
        compiler.visit(self.expression)


class Query(Clause):
    """
    A complete statement.

    Subclasses validate their inputs in ``__init__`` and know how to
    visit themselves; :meth:`compiled` produces the text and the binds.
    """

    def __str__(self):
        return str(self.compiled())

    def compiled(self, dialect=None):
        return CompiledQuery(self, dialect or DEFAULT_DIALECT)


class CompiledQuery(object):
    """
    Represents a completed query: the statement text and the mapping
    of bind names to values.

    Instances are immutable and unpack as a pair::

        stmt, params = compiled
    """

    __slots__ = (
        'stmt',
        'params',
    )

    def __init__(self, root, dialect=DEFAULT_DIALECT):
        compiler = dialect.compiler(root)
        stmt, params = compiler.compile()
        object.__setattr__(self, 'stmt', stmt)
        object.__setattr__(self, 'params', params)

    def __setattr__(self, name, value):
        raise AttributeError("CompiledQuery is immutable")

    def __iter__(self):
        return iter((self.stmt, self.params))

    def __eq__(self, other):
        if isinstance(other, CompiledQuery):
            return (self.stmt, self.params) == (other.stmt, other.params)
        return NotImplemented

    def __hash__(self):
        return hash(self.stmt)

    def __repr__(self):
        return "<%s %s %r>" % (type(self).__name__, self.stmt, self.params)

    def __str__(self):
        return self.stmt

    def execute(self, executor, params=None):
        """
        Send this query to the
        :class:`relbulk.interfaces.IStatementExecutor` *executor*,
        using *params* instead of the compiled binds if given.

        Returns the rows affected.
        """
        return executor.execute(self.stmt, self.params if params is None else params)


_WHITESPACE = re.compile(r'\s+')

def uglify_query(query):
    """
    Remove all formatting from *query*, collapsing runs of
    whitespace into a single space.

    This lets tests write expected SQL readably::

        >>> uglify_query('''
        ...    UPDATE t
        ...    SET a = :a
        ... ''')
        'UPDATE t SET a = :a'
    """
    return _WHITESPACE.sub(' ', str(query)).strip()
