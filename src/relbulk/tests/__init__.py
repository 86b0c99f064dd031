"""relbulk.tests package"""

import threading
import unittest
from unittest import mock # pylint:disable=unused-import

from zope.interface import implementer

from relbulk.interfaces import IStatementExecutor
from relbulk.sql.dialect import DefaultDialect


class TestCase(unittest.TestCase):
    """
    General tests. This class supplies some supporting help for
    assertions.
    """

    none = unittest.TestCase.assertIsNone

    def assertIsEmpty(self, container, msg=None):
        self.assertLength(container, 0, msg)

    assertEmpty = assertIsEmpty

    def assertLength(self, container, length, msg=None):
        self.assertEqual(len(container), length,
                         '%s -- %s' % (msg, container) if msg else container)


class MockCursor(object):
    closed = False
    rowcount = 1

    def __init__(self, conn=None):
        self.executed = []
        self.connection = conn

    def execute(self, stmt, params=None):
        if self.connection is not None and self.connection.fail_with is not None:
            raise self.connection.fail_with
        self.executed.append((stmt, params))

    def executemany(self, stmt, rows):
        if self.connection is not None and self.connection.fail_with is not None:
            raise self.connection.fail_with
        self.executed.append((stmt, list(rows)))

    def close(self):
        self.closed = True


class MockConnection(object):
    closed = False
    fail_with = None

    def __init__(self):
        self.cursors = []
        self.commits = 0
        self.rollbacks = 0

    @property
    def executed(self):
        return [e for cursor in self.cursors for e in cursor.executed]

    def cursor(self):
        cursor = MockCursor(self)
        self.cursors.append(cursor)
        return cursor

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


@implementer(IStatementExecutor)
class MockStatementExecutor(object):
    """
    Records what would be executed.

    Set *fail_when* to a callable taking ``(stmt, params)``; if it
    returns an exception, that exception is raised instead.
    """

    closed = False
    rowcount = 1

    def __init__(self, fail_when=None, dialect=None):
        self.fail_when = fail_when
        self.dialect = dialect or DefaultDialect()
        self.executed = []
        self.executed_many = []
        self._lock = threading.Lock()

    def _maybe_fail(self, stmt, params):
        if self.fail_when is not None:
            ex = self.fail_when(stmt, params)
            if ex is not None:
                raise ex

    def execute(self, stmt, params):
        self._maybe_fail(stmt, params)
        with self._lock:
            self.executed.append((stmt, dict(params)))
        return self.rowcount

    def executemany(self, stmt, rows):
        self._maybe_fail(stmt, rows)
        with self._lock:
            self.executed_many.append((stmt, list(rows)))

    def close(self):
        self.closed = True
