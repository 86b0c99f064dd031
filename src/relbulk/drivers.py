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
Statement executors for DB-API 2.0 connections.

The compiler produces named binds, and lets a single bind hold a
sequence for ``IN`` comparisons. Drivers don't accept that, so
the statement is rewritten here, right before it is sent.
"""
import logging
import re
import threading

from zope.interface import implementer

from relbulk._util import TRACE
from relbulk.interfaces import IStatementExecutor
from relbulk.sql.condition import is_sequence_value
from relbulk.sql.dialect import DefaultDialect
from relbulk.sql.dialect import dialect_for_paramstyle

logger = logging.getLogger(__name__)

def _placeholder_pattern(dialect, key):
    if dialect.paramstyle == 'named':
        return re.compile(r'(?<![:\w]):%s(?!\w)' % (re.escape(key),))
    return re.compile(re.escape(dialect.placeholder(key)))


def expand_sequence_params(stmt, params, dialect=None):
    """
    Rewrite *stmt* so that each sequence-valued bind in *params* is
    replaced by one placeholder per element.

    Returns the new ``(stmt, params)``; if nothing needed expanding,
    the arguments are returned unchanged::

        >>> expand_sequence_params('id IN (:cond_id)', {'cond_id': [1, 2]})
        ('id IN (:cond_id__0, :cond_id__1)', {'cond_id__0': 1, 'cond_id__1': 2})

    An empty sequence becomes ``NULL``, which matches nothing.
    """
    dialect = dialect or DefaultDialect()
    expanded = None
    for key, value in params.items():
        if not is_sequence_value(value):
            continue
        if expanded is None:
            expanded = dict(params)
        del expanded[key]

        names = []
        for index, element in enumerate(value):
            name = '%s__%d' % (key, index)
            names.append(name)
            expanded[name] = element
        replacement = ', '.join(dialect.placeholder(name) for name in names) or 'NULL'
        stmt = _placeholder_pattern(dialect, key).sub(lambda _m: replacement, stmt)

    if expanded is None:
        return stmt, params
    return stmt, expanded


@implementer(IStatementExecutor)
class DBAPIStatementExecutor(object):
    """
    Executes statements on a single DB-API connection.

    Cursor use is serialized with a lock, so one instance may be
    shared by all the worker threads of a batch executor. (The
    connection itself must allow being used from threads other than
    the one that created it; for :mod:`sqlite3`, pass
    ``check_same_thread=False`` when connecting.)

    Each statement is committed as soon as it succeeds; if it fails,
    the connection is rolled back.

    The placeholder format comes from *dialect* or, if that's not
    given, from *paramstyle*, normally the driver module's own
    ``paramstyle`` attribute (for example ``psycopg2.paramstyle``).
    With neither, ``named`` placeholders are used.
    """

    def __init__(self, connection, dialect=None, paramstyle=None):
        self.connection = connection
        if dialect is None:
            dialect = dialect_for_paramstyle(paramstyle or DefaultDialect.paramstyle)
        self.dialect = dialect
        self._lock = threading.Lock()

    def __repr__(self):
        return "<%s at %x connection=%r dialect=%r>" % (
            type(self).__name__,
            id(self),
            self.connection,
            self.dialect,
        )

    def execute(self, stmt, params):
        stmt, params = expand_sequence_params(stmt, params, self.dialect)
        logger.log(TRACE, "Executing %s", stmt)
        with self._lock:
            cursor = self.connection.cursor()
            try:
                cursor.execute(stmt, params)
                count = cursor.rowcount
            except Exception:
                self.connection.rollback()
                raise
            else:
                self.connection.commit()
            finally:
                cursor.close()
        return count

    def executemany(self, stmt, rows):
        logger.log(TRACE, "Executing %s for %d rows", stmt, len(rows))
        with self._lock:
            cursor = self.connection.cursor()
            try:
                cursor.executemany(stmt, rows)
            except Exception:
                self.connection.rollback()
                raise
            else:
                self.connection.commit()
            finally:
                cursor.close()

    def close(self):
        with self._lock:
            self.connection.close()
