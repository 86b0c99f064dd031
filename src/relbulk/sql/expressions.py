# -*- coding: utf-8 -*-
"""
Expressions in the AST.

"""

from zope.interface import implementer

from .interfaces import IBindParam


class Expression(object):
    """
    A SQL expression.
    """

    __slots__ = ()


class Column(Expression):

    __slots__ = (
        'name',
    )

    def __init__(self, name):
        self.name = name

    def __str__(self):
        return self.name

    def __repr__(self):
        return '<Column %s>' % (self.name,)

    def __compile_visit__(self, compiler):
        compiler.visit_column(self)

    def __eq__(self, other):
        return EqualExpression(self, other)

    __hash__ = object.__hash__

    def in_(self, other):
        return InExpression(self, other)


class Table(Expression):

    __slots__ = (
        'name',
    )

    def __init__(self, name):
        self.name = name

    def __str__(self):
        return self.name

    def __compile_visit__(self, compiler):
        compiler.visit_table(self)


@implementer(IBindParam)
class BindParam(Expression):

    __slots__ = (
        'key',
        'value',
    )

    def __init__(self, key, value):
        self.key = key
        self.value = value

    def __str__(self):
        return ':' + self.key

    def __repr__(self):
        return '<BindParam %s=%r>' % (self.key, self.value)

    def __compile_visit__(self, compiler):
        compiler.visit_bind_param(self)


def bindparam(key, value):
    return BindParam(key, value)


class BinaryExpression(Expression):
    """
    Expresses a comparison.
    """

    __slots__ = (
        'op',
        'lhs',
        'rhs',
    )

    def __init__(self, op, lhs, rhs):
        self.op = op
        self.lhs = lhs # type: Column
        self.rhs = rhs

    def __str__(self):
        return '%s %s %s' % (
            self.lhs,
            self.op,
            self.rhs
        )

    def _visit_lhs(self, compiler):
        compiler.visit(self.lhs)

    def _visit_rhs(self, compiler):
        compiler.visit(self.rhs)

    def __compile_visit__(self, compiler):
        self._visit_lhs(compiler)
        compiler.visit_op(self.op)
        self._visit_rhs(compiler)


class EqualExpression(BinaryExpression):

    __slots__ = ()

    def __init__(self, lhs, rhs):
        BinaryExpression.__init__(self, '=', lhs, rhs)

AssignmentExpression = EqualExpression


class InExpression(BinaryExpression):
    __slots__ = ()

    def __init__(self, lhs, rhs):
        if isinstance(rhs, (list, tuple)):
            rhs = ExpressionList(rhs)
        BinaryExpression.__init__(self, 'IN', lhs, rhs)

    def _visit_rhs(self, compiler):
        compiler.visit_grouped(self.rhs)


class ExpressionList(Expression):
    """
    Comma separated expressions.
    """

    __slots__ = (
        'expressions',
    )

    def __init__(self, expressions):
        self.expressions = tuple(expressions)

    def __compile_visit__(self, compiler):
        compiler.visit_csv(self.expressions)


class And(Expression):
    """
    The conjunction of any number of expressions.

    Unlike a binary ``AND``, the parts are not grouped in parentheses;
    they are expected to be simple comparisons.
    """

    __slots__ = (
        'expressions',
    )

    def __init__(self, *expressions):
        self.expressions = expressions

    def __compile_visit__(self, compiler):
        compiler.visit_joined('AND', self.expressions)


class Grouped(Expression):

    __slots__ = (
        'expression',
    )

    def __init__(self, expression):
        self.expression = expression

    def __compile_visit__(self, compiler):
        compiler.visit_grouped(self.expression)


class CaseExpression(Expression):
    """
    ``CASE WHEN <condition> THEN <result> ... ELSE <else_> END``
    """

    __slots__ = (
        'whens',
        'else_',
    )

    def __init__(self, else_, whens=()):
        self.else_ = else_
        self.whens = list(whens)

    def when(self, condition, result):
        self.whens.append((condition, result))
        return self

    def __compile_visit__(self, compiler):
        compiler.visit_case(self)
