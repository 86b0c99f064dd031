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

import doctest
import logging
import os
import threading
import unittest

from relbulk.tests import TestCase
from relbulk.tests import mock

from .. import _util


class TestEnviron(TestCase):

    KEY = 'RELBULK_TEST_UTIL_VAL'

    def tearDown(self):
        os.environ.pop(self.KEY, None)

    def test_missing(self):
        self.assertEqual(_util.get_positive_integer_from_environ(self.KEY, 7), 7)

    def test_positive_integer(self):
        os.environ[self.KEY] = '12'
        self.assertEqual(_util.get_positive_integer_from_environ(self.KEY, 7), 12)

    def test_positive_integer_rejects_zero(self):
        os.environ[self.KEY] = '0'
        with self.assertLogs('relbulk', 'ERROR'):
            self.assertEqual(_util.get_positive_integer_from_environ(self.KEY, 7), 7)

    def test_garbage(self):
        os.environ[self.KEY] = 'many'
        with self.assertLogs('relbulk', 'ERROR'):
            self.assertEqual(_util.get_positive_integer_from_environ(self.KEY, 7), 7)

    def test_boolean(self):
        for val, expected in (('1', True), ('0', False), ('on', True), ('false', False)):
            os.environ[self.KEY] = val
            self.assertEqual(_util.get_boolean_from_environ(self.KEY, None), expected)

    def test_duration(self):
        os.environ[self.KEY] = '2m'
        self.assertEqual(_util.get_duration_from_environ(self.KEY, None), 120.0)


class TestLogTimed(TestCase):

    thresholds = [(logging.DEBUG, 1.0), (logging.INFO, 2.0), (logging.ERROR, 10.0)]

    def test_wraps(self):
        @_util.log_timed
        def func(arg):
            "Doc"
            return arg * 2

        self.assertEqual(func(2), 4)
        self.assertEqual(func.__name__, 'func')
        self.assertEqual(func.__doc__, 'Doc')

    def test_level_for_duration(self):
        self.assertEqual(_util.level_for_duration(0.5, self.thresholds), 0)
        self.assertEqual(_util.level_for_duration(1.0, self.thresholds), logging.DEBUG)
        self.assertEqual(_util.level_for_duration(3.0, self.thresholds), logging.INFO)
        self.assertEqual(_util.level_for_duration(60, self.thresholds), logging.ERROR)

    def test_default_thresholds_sorted(self):
        durations = [seconds for _, seconds in _util.LOG_TIMED_THRESHOLDS]
        self.assertEqual(durations, sorted(durations))

    def test_logs_slow_calls(self):
        def func():
            "Does nothing"

        log = logging.getLogger('relbulk.tests.timing')
        with self.assertLogs(log, 'DEBUG') as logs:
            _util.log_duration(log, func, (), 2.5, self.thresholds)
        self.assertEqual(logs.output, ['INFO:relbulk.tests.timing:Function func took 2.500s.'])

    def test_details_for_very_slow_calls(self):
        def func():
            "Does nothing"

        log = logging.getLogger('relbulk.tests.timing')
        with self.assertLogs(log, 'DEBUG') as logs:
            _util.log_duration(log, func, ('executor',), 12, self.thresholds)
        self.assertLength(logs.records, 1)
        self.assertEqual(logs.records[0].levelno, logging.ERROR)
        self.assertIn("(self=('executor',))", logs.output[0])

    def test_fast_calls_not_logged(self):
        def func():
            "Does nothing"

        log = logging.getLogger('relbulk.tests.timing')
        with mock.patch.object(log, 'log') as log_method:
            _util.log_duration(log, func, (), 0.5, self.thresholds)
        log_method.assert_not_called()


class TestMisc(TestCase):

    def test_thread_spawn(self):
        done = threading.Event()
        thread = _util.thread_spawn(done.set, name='setter')
        thread.join(5)
        self.assertTrue(done.is_set())
        self.assertTrue(thread.daemon)
        self.assertEqual(thread.name, 'relbulk-setter')

    def test_trace_level(self):
        self.assertEqual(logging.getLevelName(_util.TRACE), 'TRACE')

    def test_parse_boolean(self):
        self.assertTrue(_util.parse_boolean('1'))
        self.assertFalse(_util.parse_boolean('0'))
        self.assertTrue(_util.parse_boolean('yes'))
        with self.assertRaises(ValueError):
            _util.parse_boolean('maybe')


def test_suite():
    suite = unittest.defaultTestLoader.loadTestsFromName(__name__)
    for name in ('relbulk._util',
                 'relbulk.budget',
                 'relbulk.drivers',
                 'relbulk.paginate',
                 'relbulk.sql.condition',
                 'relbulk.sql.delete',
                 'relbulk.sql.insert',
                 'relbulk.sql.query',
                 'relbulk.sql.update'):
        suite.addTest(doctest.DocTestSuite(name))
    return suite
