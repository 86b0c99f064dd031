# -*- coding: utf-8 -*-
##############################################################################
#
# Copyright (c) 2026 Zope Foundation and Contributors.
# All Rights Reserved.
#
# This software is subject to the provisions of the Zope Public License,
# Version 2.1 (ZPL).  A copy of the ZPL should accompany this distribution.
# THIS SOFTWARE IS PROVIDED "AS IS" AND ANY AND ALL EXPRESS OR IMPLIED
# WARRANTIES ARE DISCLAIMED, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED
# WARRANTIES OF TITLE, MERCHANTABILITY, AGAINST INFRINGEMENT, AND FITNESS
# FOR A PARTICULAR PURPOSE.
#
##############################################################################

"""
Tests for expressions.

"""

from relbulk.tests import TestCase

from ..dialect import DefaultDialect
from .. import expressions


class _Root(object):

    def __init__(self, node):
        self.node = node

    def __compile_visit__(self, compiler):
        compiler.visit(self.node)


class TestExpressions(TestCase):

    def _compile(self, node):
        return DefaultDialect().compiler(_Root(node)).compile()

    def test_equal(self):
        expr = expressions.Column('id') == expressions.bindparam('cond_id', 1)
        self.assertIsInstance(expr, expressions.EqualExpression)
        self.assertEqual(self._compile(expr), ('id = :cond_id', {'cond_id': 1}))

    def test_in_list(self):
        expr = expressions.Column('id').in_([
            expressions.bindparam('id_0', 1),
            expressions.bindparam('id_1', 2),
        ])
        self.assertEqual(
            self._compile(expr),
            ('id IN (:id_0, :id_1)', {'id_0': 1, 'id_1': 2})
        )

    def test_in_single_param(self):
        expr = expressions.Column('id').in_(expressions.bindparam('cond_id', [1, 2]))
        self.assertEqual(self._compile(expr)[0], 'id IN (:cond_id)')

    def test_and(self):
        expr = expressions.And(
            expressions.Column('a') == expressions.bindparam('a_0', 1),
            expressions.Column('b') == expressions.bindparam('b_0', 2),
            expressions.Column('c') == expressions.bindparam('c_0', 3),
        )
        self.assertEqual(self._compile(expr)[0], 'a = :a_0 AND b = :b_0 AND c = :c_0')

    def test_case(self):
        case = expressions.CaseExpression(expressions.Column('name'))
        case.when(expressions.Column('id') == expressions.bindparam('id_0', 1),
                  expressions.bindparam('name_0', 'A'))
        stmt, _ = self._compile(expressions.Grouped(case))
        self.assertEqual(stmt, '(CASE WHEN id = :id_0 THEN :name_0 ELSE name END)')

    def test_str(self):
        expr = expressions.Column('id') == expressions.bindparam('cond_id', 1)
        self.assertEqual(str(expr), 'id = :cond_id')
        self.assertEqual(str(expressions.Table('users')), 'users')
