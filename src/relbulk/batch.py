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
"""Bulk table row insert/update support.

Rows are divided into units of work: a page of rows that shares one
statement, or a single row. Units run in a bounded pool of threads,
or one after another on the calling thread.

When units run in the pool, every unit that was started runs to
completion even if another has already failed; afterwards only the
first failure is raised.
"""
import enum
import logging
import queue
import threading

from zope.interface import implementer

from relbulk._util import TRACE
from relbulk._util import log_timed
from relbulk._util import metricmethod_sampled
from relbulk._util import thread_spawn
from relbulk.budget import count_placeholders
from relbulk.budget import estimate_bulk_update_fields
from relbulk.budget import estimate_insert_fields
from relbulk.budget import max_batch_rows
from relbulk.interfaces import CompileError
from relbulk.interfaces import ExecutionError
from relbulk.interfaces import IBatchExecutor
from relbulk.interfaces import ValidationError
from relbulk.options import Options
from relbulk.paginate import paged
from relbulk.sql import DefaultDialect
from relbulk.sql import build_bulk_update
from relbulk.sql import build_delete
from relbulk.sql import build_empty_table
from relbulk.sql import build_insert
from relbulk.sql import build_update

logger = logging.getLogger(__name__)


class Strategy(enum.Enum):
    """
    How :meth:`BatchExecutor.update_bulk` turns rows into statements.
    """

    #: One ``UPDATE ... CASE`` statement per page of rows; pages run
    #: in the pool.
    BULK_STATEMENT = 'bulk_statement'
    #: One ``UPDATE`` per row; rows run in the pool.
    PARALLEL_ROWS = 'parallel_rows'
    #: One ``UPDATE`` per row, in order, on the calling thread,
    #: stopping at the first failure.
    SEQUENTIAL_ROWS = 'sequential_rows'


def split_row(row, key_columns):
    """
    Divide *row* into the values to write and the condition that
    matches its record.

    Returns ``(values, condition)``, two new dictionaries; *row* itself
    is left alone, so it can be used again.

    :raises ValidationError: If *row* lacks one of the *key_columns*.
    """
    values = dict(row)
    condition = {}
    for key in key_columns:
        if key not in values:
            raise ValidationError("data not have %r property" % (key,))
        condition[key] = values.pop(key)
    return values, condition


class WorkUnit(object):
    """
    One page or row of work.

    Moves from ``PENDING`` to ``RUNNING`` to either ``SUCCEEDED``
    or ``FAILED``.
    """

    PENDING = 'pending'
    RUNNING = 'running'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'

    state = PENDING
    error = None
    result = None

    def __init__(self, kind, number, compile_func, execute_func):
        #: ``'page'`` or ``'row'``
        self.kind = kind
        #: One-based position among the units of this operation.
        self.number = number
        self._compile = compile_func
        self._execute = execute_func

    def __repr__(self):
        return "<%s %s %d %s>" % (
            type(self).__name__,
            self.kind,
            self.number,
            self.state
        )

    def run(self):
        """
        Compile and execute this unit.

        Returns the error that made the unit fail, or None. Errors are
        never raised from here, since this runs in a worker thread.
        """
        assert self.state == self.PENDING, self
        self.state = self.RUNNING
        try:
            try:
                compiled = self._compile()
            except ValidationError as ex:
                raise CompileError(self.kind, self.number, ex) from ex
            try:
                self.result = self._execute(compiled)
            except Exception as ex: # pylint:disable=broad-except
                raise ExecutionError(self.kind, self.number, ex) from ex
        except (CompileError, ExecutionError) as ex:
            self.state = self.FAILED
            self.error = ex
            logger.debug("%s failed: %s", self, ex)
        except Exception as ex: # pylint:disable=broad-except
            self.state = self.FAILED
            self.error = ex
            logger.exception("Unexpected error in %s", self)
        else:
            self.state = self.SUCCEEDED
            logger.log(TRACE, "%s finished", self)
        return self.error


@implementer(IBatchExecutor)
class BatchExecutor(object):
    """
    Writes many rows to a table without exceeding the placeholder
    limit of any single statement.

    *statement_executor* provides
    :class:`relbulk.interfaces.IStatementExecutor`. Options may be
    given as an :class:`relbulk.options.Options` instance, as keyword
    arguments, or both (keywords win).
    """

    def __init__(self, statement_executor, options=None, dialect=None, **kwoptions):
        if options is None:
            options = Options(**kwoptions)
        elif kwoptions:
            options = options.copy(**kwoptions)
        if options.worker_count <= 0:
            raise ValidationError("worker size min 1")
        if options.batch_size <= 0:
            raise ValidationError("batch size min 1")
        self.statement_executor = statement_executor
        self.options = options
        if dialect is None:
            dialect = getattr(statement_executor, 'dialect', None) or DefaultDialect()
        self.dialect = dialect

    def __repr__(self):
        return "<%s at %x workers=%d batch=%d executor=%r>" % (
            type(self).__name__,
            id(self),
            self.options.worker_count,
            self.options.batch_size,
            self.statement_executor,
        )

    @staticmethod
    def _check_table_and_rows(table, rows, field_count):
        if not table:
            raise ValidationError("table is empty")
        if not rows:
            raise ValidationError("data is empty")
        if field_count <= 0:
            raise ValidationError("field size minimum 1")

    def _page_size(self, row_count, total_fields, cap=None):
        page_size = max_batch_rows(row_count, total_fields, self.options.placeholder_limit)
        if cap is not None and cap < page_size:
            page_size = cap
        if page_size < 1:
            raise ValidationError(
                "A single row needs more than %d placeholders" % (self.options.placeholder_limit,)
            )
        return page_size

    @metricmethod_sampled
    @log_timed
    def create_bulk(self, table, rows, field_count):
        self._check_table_and_rows(table, rows, field_count)
        # Every row is expected to have the sample's columns.
        stmt, _ = build_insert(table, rows[0], self.dialect)

        row_count = len(rows)
        page_size = self._page_size(row_count, estimate_insert_fields(row_count, field_count))
        pages = paged(rows, page_size)
        logger.debug("Inserting %d rows into %s in %d pages of up to %d rows",
                     row_count, table, len(pages), page_size)

        executemany = self.statement_executor.executemany
        units = [
            WorkUnit('page', number, lambda page=page: page,
                     lambda page: executemany(stmt, page))
            for number, page in enumerate(pages, 1)
        ]
        self._run_pooled(units, self.options.worker_count)

    @metricmethod_sampled
    @log_timed
    def update_bulk(self, table, rows, key_columns, field_count,
                    strategy=None, worker_count=None):
        self._check_table_and_rows(table, rows, field_count)
        if not key_columns:
            raise ValidationError("key edits is empty")
        if isinstance(key_columns, str):
            key_columns = (key_columns,)
        # Every strategy sees the same key set.
        key_columns = tuple(sorted(set(key_columns)))
        if field_count < len(key_columns):
            raise ValidationError(
                "field size %d is less than the %d key columns" % (field_count, len(key_columns))
            )
        if worker_count is None:
            worker_count = self.options.worker_count
        if worker_count <= 0:
            raise ValidationError("worker size min 1")
        if strategy is None:
            strategy = self.options.strategy or Strategy.BULK_STATEMENT
        if not isinstance(strategy, Strategy):
            raise ValidationError("strategy must be a Strategy, not %r" % (strategy,))

        if strategy is Strategy.BULK_STATEMENT:
            units = self._bulk_statement_units(table, rows, key_columns, field_count)
            self._run_pooled(units, worker_count)
        elif strategy is Strategy.PARALLEL_ROWS:
            units = self._row_units(table, rows, key_columns)
            self._run_pooled(units, worker_count)
        elif strategy is Strategy.SEQUENTIAL_ROWS:
            units = self._row_units(table, rows, key_columns)
            self._run_sequential(units)
        else: # pragma: no cover
            raise AssertionError("Unknown strategy", strategy)

    def _bulk_statement_units(self, table, rows, key_columns, field_count):
        row_count = len(rows)
        total_fields = estimate_bulk_update_fields(row_count, field_count, len(key_columns))
        page_size = self._page_size(row_count, total_fields, self.options.batch_size)
        pages = paged(rows, page_size)
        logger.debug("Updating %d rows in %s in %d pages of up to %d rows",
                     row_count, table, len(pages), page_size)

        limit = self.options.placeholder_limit
        def compile_page(page):
            compiled = build_bulk_update(table, page, key_columns, self.dialect)
            # Rows with more columns than *field_count* said would
            # make the estimate too small.
            used = count_placeholders(compiled)
            if used > limit:
                raise ValidationError(
                    "statement needs %d placeholders; the limit is %d" % (used, limit)
                )
            return compiled

        return [
            WorkUnit('page', number, lambda page=page: compile_page(page), self._execute_compiled)
            for number, page in enumerate(pages, 1)
        ]

    def _row_units(self, table, rows, key_columns):
        def compile_row(row):
            values, condition = split_row(row, key_columns)
            return build_update(table, values, condition, self.dialect)

        return [
            WorkUnit('row', number, lambda row=row: compile_row(row), self._execute_compiled)
            for number, row in enumerate(rows, 1)
        ]

    def _execute_compiled(self, compiled):
        return compiled.execute(self.statement_executor)

    def _run_pooled(self, units, worker_count):
        """
        Run all *units* with at most *worker_count* at a time, then
        raise the first error, if any.
        """
        slots = threading.BoundedSemaphore(worker_count)
        errors = queue.Queue(len(units))

        def work(unit):
            try:
                error = unit.run()
                if error is not None:
                    errors.put_nowait(error)
            finally:
                slots.release()

        try:
            for unit in units:
                slots.acquire()
                try:
                    thread_spawn(work, (unit,), name='%s-%d' % (unit.kind, unit.number))
                except BaseException:
                    slots.release()
                    raise
        finally:
            # Wait for everything we started by taking every slot.
            for _ in range(worker_count):
                slots.acquire()
            for _ in range(worker_count):
                slots.release()

        if errors.empty():
            return
        first = errors.get_nowait()
        while not errors.empty():
            logger.debug("Discarding additional error: %s", errors.get_nowait())
        raise first

    def _run_sequential(self, units):
        for unit in units:
            error = unit.run()
            if error is None:
                continue
            if isinstance(error, (CompileError, ExecutionError)):
                raise type(error)(
                    unit.kind, unit.number, error.error,
                    message="stopped at row %d: %s" % (unit.number, error.error)
                ) from error.error
            raise error

    @metricmethod_sampled
    def update(self, table, payload, condition):
        return build_update(table, payload, condition, self.dialect).execute(self.statement_executor)

    @metricmethod_sampled
    def delete(self, table, condition):
        return build_delete(table, condition, self.dialect).execute(self.statement_executor)

    def empty_table(self, table):
        return build_empty_table(table, self.dialect).execute(self.statement_executor)

    def close(self):
        self.statement_executor.close()
