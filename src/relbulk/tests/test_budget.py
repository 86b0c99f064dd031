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

from relbulk.tests import TestCase
from relbulk.interfaces import ValidationError
from relbulk.sql import PyformatDialect
from relbulk.sql import build_bulk_update

from .. import budget


class TestMaxBatchRows(TestCase):

    def test_known_value(self):
        self.assertEqual(budget.max_batch_rows(10, 40), 16383)

    def test_custom_limit(self):
        self.assertEqual(budget.max_batch_rows(10, 40, 100), 25)
        self.assertEqual(budget.max_batch_rows(1, 3, 2), 0)

    def test_result_fits_limit(self):
        for row_count in (1, 7, 100, 5000):
            for fields in (1, 3, 17):
                total = fields * row_count
                rows = budget.max_batch_rows(row_count, total)
                with self.subTest(row_count=row_count, fields=fields):
                    self.assertLessEqual(rows * fields, budget.PLACEHOLDER_LIMIT)
                    self.assertGreater((rows + 1) * fields, budget.PLACEHOLDER_LIMIT)

    def test_requires_positive(self):
        for args in ((0, 40), (10, 0), (10, 40, 0), (-1, 40)):
            with self.assertRaises(ValidationError):
                budget.max_batch_rows(*args)


class TestEstimates(TestCase):

    def test_bulk_update_known_values(self):
        self.assertEqual(budget.estimate_bulk_update_fields(10, 4, 1), 70)
        self.assertEqual(budget.estimate_bulk_update_fields(2, 4, 1), 14)

    def test_bulk_update_formula(self):
        for n, f, k in ((1, 1, 1), (3, 5, 2), (100, 10, 3)):
            self.assertEqual(
                budget.estimate_bulk_update_fields(n, f, k),
                (f - k) * n + k * n * (f - k) + k * n
            )

    def test_bulk_update_matches_compiled(self):
        rows = [
            {'a': i, 'b': i * 2, 'x': 'x', 'y': 'y', 'z': 'z'}
            for i in range(6)
        ]
        compiled = build_bulk_update('t', rows, ['a', 'b'])
        self.assertEqual(
            budget.count_placeholders(compiled),
            budget.estimate_bulk_update_fields(6, 5, 2)
        )

    def test_insert(self):
        self.assertEqual(budget.estimate_insert_fields(10, 4), 40)
        with self.assertRaises(ValidationError):
            budget.estimate_insert_fields(10, 0)


class TestCountPlaceholders(TestCase):

    def test_named(self):
        self.assertEqual(
            budget.count_placeholders('a = :a_0 AND b IN (:b_0, :b_1)'),
            3
        )

    def test_repeats_count(self):
        self.assertEqual(budget.count_placeholders(':id_0 :id_0'), 2)

    def test_ignores_casts(self):
        self.assertEqual(budget.count_placeholders('a = :a_0::text'), 1)

    def test_pyformat(self):
        compiled = build_bulk_update('t', [{'id': 1, 'v': 2}], ['id'], PyformatDialect())
        self.assertEqual(budget.count_placeholders(compiled), 3)
