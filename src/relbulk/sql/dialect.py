# -*- coding: utf-8 -*-
"""
RDBMS-specific SQL.

"""
from io import StringIO
from sys import intern

from zope.interface import implementer

from .interfaces import IDBDialect


@implementer(IDBDialect)
class DefaultDialect(object):
    """
    Writes placeholders in the ``named`` style: ``:name``.

    This is what sqlite3 and Oracle drivers accept directly, and
    what most binding layers expect as input.
    """

    paramstyle = 'named'

    def compiler_class(self):
        return Compiler

    def compiler(self, root):
        return self.compiler_class()(root, self)

    def placeholder(self, key):
        return ':' + key

    def __eq__(self, other):
        if isinstance(other, DefaultDialect):
            return other.paramstyle == self.paramstyle
        return NotImplemented # pragma: no cover

    def __hash__(self):
        return hash(self.paramstyle)

    def __repr__(self):
        return "<%s at %x paramstyle=%s>" % (
            type(self).__name__,
            id(self),
            self.paramstyle
        )


class PyformatDialect(DefaultDialect):
    """
    Writes placeholders in the ``pyformat`` style: ``%(name)s``.

    For drivers such as psycopg2 and the MySQL drivers.
    """

    paramstyle = 'pyformat'

    def placeholder(self, key):
        return '%%(%s)s' % (key,)


def dialect_for_paramstyle(paramstyle):
    """
    Return a dialect for the DB-API *paramstyle*.
    """
    for kind in (DefaultDialect, PyformatDialect):
        if kind.paramstyle == paramstyle:
            return kind()
    raise ValueError("Unsupported paramstyle %r" % (paramstyle,))


class Compiler(object):
    """
    Walks a tree of nodes, writing SQL text into a buffer and
    collecting the bind parameters it meets.

    Each node has a ``__compile_visit__(compiler)`` method that calls
    back into the compiler's ``emit`` and ``visit`` methods.
    """

    def __init__(self, root, dialect):
        self.buf = StringIO()
        self.params = {}
        self.root = root
        self.dialect = dialect # type: DefaultDialect

    def __repr__(self):
        return "<%s %s %r>" % (
            type(self).__name__,
            self.buf.getvalue(),
            self.params
        )

    def compile(self):
        self.visit(self.root)
        return self.finalize()

    def finalize(self):
        return intern(self.buf.getvalue().strip()), self.params

    def visit(self, node):
        """
        Returns whatever the ``__compile_visit__`` method of the *node*
        returns.
        """
        meth = getattr(node, '__compile_visit__', None)
        if meth is None:
            raise AttributeError("No way to visit node", node)
        return meth(self)

    def _last_char(self):
        value = self.buf.getvalue()
        return value[-1] if value else ' '

    def emit(self, *contents):
        for content in contents:
            self.buf.write(content)

    def emit_w_padding_space(self, value):
        ended_in_space = self._last_char() == ' '
        value = value.strip()
        if not ended_in_space:
            self.buf.write(' ')
        self.emit(value, ' ')

    emit_keyword = emit_w_padding_space

    def emit_identifier(self, identifier):
        if self._last_char() not in ('(', ' '):
            self.emit(' ')
        self.emit(identifier)

    def visit_csv(self, nodes):
        self.visit(nodes[0])
        for node in nodes[1:]:
            self.emit(', ')
            self.visit(node)

    def visit_joined(self, keyword, nodes):
        self.visit(nodes[0])
        for node in nodes[1:]:
            self.emit_keyword(keyword)
            self.visit(node)

    def visit_grouped(self, clause):
        self.emit('(')
        self.visit(clause)
        self.emit(')')

    def visit_op(self, op):
        if self._last_char() != ' ':
            self.emit(' ')
        self.emit(op, ' ')

    def visit_column(self, column_node):
        self.emit_identifier(column_node.name)

    def visit_table(self, table_node):
        self.emit_identifier(table_node.name)

    def visit_bind_param(self, bind_param):
        key = bind_param.key
        if key in self.params and self.params[key] is not bind_param.value:
            # The same name may be referenced more than once, but
            # only ever for the same value.
            if self.params[key] != bind_param.value:
                raise AssertionError("Bind %r used for different values" % (key,))
        self.params[key] = bind_param.value
        self.emit(self.dialect.placeholder(key))

    def visit_case(self, case):
        self.emit('CASE')
        for condition, result in case.whens:
            self.emit_keyword('WHEN')
            self.visit(condition)
            self.emit_keyword('THEN')
            self.visit(result)
        self.emit_keyword('ELSE')
        self.visit(case.else_)
        self.emit(' END')
