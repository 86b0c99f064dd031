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
Interfaces and exceptions for RelBulk components.

These interfaces serve as documentation and for validation of the
objects that collaborate to write rows in bulk.
"""

from zope.interface import Attribute
from zope.interface import Interface

# pylint:disable=inherit-non-class,no-method-argument,no-self-argument


class IStatementExecutor(Interface):
    """
    The primitive that sends compiled SQL to the database.

    Implementations must be safe to call from multiple threads at
    once; the batch executor runs units of work concurrently.
    """

    dialect = Attribute("The `relbulk.sql.interfaces.IDBDialect` whose placeholders "
                        "the statements sent here must use.")

    def execute(stmt, params):
        """
        Execute the statement text *stmt* with the mapping *params*
        of bind names to values.

        Returns the number of rows affected, as reported by the
        database (which may be -1 if the driver doesn't know).
        """

    def executemany(stmt, rows):
        """
        Execute the fixed statement *stmt* once for each mapping in
        the sequence *rows*.
        """

    def close():
        """
        Release any resources. The executor should not be used after this.
        """


class IBatchExecutor(Interface):
    """
    Applies bulk writes to a table, keeping each statement under the
    placeholder limit.
    """

    options = Attribute("The `relbulk.options.Options` in use.")

    def create_bulk(table, rows, field_count):
        """
        Insert all *rows* into *table*.

        *field_count* is the number of columns each row is expected
        to have; it's used to size the pages.

        :raises ValidationError: If the inputs are unusable. Nothing
            is sent to the database in that case.
        :raises ExecutionError: If any page fails.
        """

    def update_bulk(table, rows, key_columns, field_count, strategy=None, worker_count=None):
        """
        Update all *rows* in *table*, matching existing records on
        the *key_columns*.

        *strategy* is a member of `relbulk.batch.Strategy`; if not
        given, the configured default is used.

        :raises ValidationError: If the inputs are unusable.
        :raises CompileError: If a unit could not be compiled.
        :raises ExecutionError: If a unit failed in the database.
        """

    def update(table, payload, condition):
        """
        Update the records in *table* matching *condition* with the
        values in *payload*. Returns the rows affected.
        """

    def delete(table, condition):
        """
        Delete the records in *table* matching *condition*.
        Returns the rows affected.
        """

    def empty_table(table):
        """
        Delete every record in *table*.
        """

    def close():
        """
        Close the underlying statement executor.
        """


class ValidationError(ValueError):
    """
    Raised when the inputs to a compiler or executor function cannot
    produce a valid statement.

    Nothing has been sent to the database when this is raised.
    """


class _UnitErrorMixin(object):

    #: The kind of unit that failed, ``'page'`` or ``'row'``.
    unit_kind = None
    #: The one-based number of that unit.
    unit_number = None
    #: The exception that was raised by the unit.
    error = None

    def _init_unit(self, unit_kind, unit_number, error):
        self.unit_kind = unit_kind
        self.unit_number = unit_number
        self.error = error


class CompileError(_UnitErrorMixin, ValidationError):
    """
    A unit of work (a page or a row) could not be compiled.

    The statement for that unit was never sent.
    """

    def __init__(self, unit_kind, unit_number, error, message=None):
        if message is None:
            message = "Failed to build query for %s %d: %s" % (unit_kind, unit_number, error)
        ValidationError.__init__(self, message)
        self._init_unit(unit_kind, unit_number, error)


class ExecutionError(_UnitErrorMixin, Exception):
    """
    The statement executor raised an error for a unit of work.
    """

    def __init__(self, unit_kind, unit_number, error, message=None):
        if message is None:
            message = "Error when writing %s %d: %s" % (unit_kind, unit_number, error)
        Exception.__init__(self, message)
        self._init_unit(unit_kind, unit_number, error)
