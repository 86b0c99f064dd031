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
Placeholder budgeting.

A database accepts only so many bind placeholders in one statement
(MySQL, for example, counts them in an unsigned 16-bit integer).
These functions decide how many rows can share a statement before
anything is compiled, so that a compiled statement never has to be
truncated.
"""
import re

from relbulk.interfaces import ValidationError

#: The most placeholders a single statement may contain: the largest
#: unsigned 16-bit integer.
PLACEHOLDER_LIMIT = 65535

def _require_positive(**kw):
    for name, value in sorted(kw.items()):
        if value <= 0:
            raise ValidationError("%s must be at least 1, not %r" % (name, value))


def max_batch_rows(row_count, estimated_total_fields, limit=PLACEHOLDER_LIMIT):
    """
    Return the most rows that can go into one statement.

    *row_count* rows are expected to need *estimated_total_fields*
    placeholders altogether; the answer is scaled so that the
    placeholders used by that many rows stay within *limit*::

        >>> max_batch_rows(10, 40)
        16383
    """
    _require_positive(row_count=row_count,
                      estimated_total_fields=estimated_total_fields,
                      limit=limit)
    return row_count * limit // estimated_total_fields


def estimate_bulk_update_fields(row_count, fields_per_row, key_count):
    """
    Count the placeholders a bulk ``UPDATE`` over *row_count* rows
    will use.

    Each non-key value is bound once, and its ``CASE`` arm repeats
    one equality comparison per key column. The ``WHERE`` clause
    lists each row's keys once more::

        >>> estimate_bulk_update_fields(10, 4, 1)
        70
    """
    _require_positive(row_count=row_count,
                      fields_per_row=fields_per_row,
                      key_count=key_count)
    value_fields_per_row = fields_per_row - key_count
    value_fields = value_fields_per_row * row_count
    per_value_key_repeats = key_count * row_count * value_fields_per_row
    where_fields = key_count * row_count
    return value_fields + per_value_key_repeats + where_fields


def estimate_insert_fields(row_count, fields_per_row):
    """
    Count the placeholders needed to insert *row_count* rows.
    """
    _require_positive(row_count=row_count, fields_per_row=fields_per_row)
    return fields_per_row * row_count


_NAMED_PLACEHOLDER = re.compile(r"(?<![:\w]):\w+|%\(\w+\)s")

def count_placeholders(stmt):
    """
    Count the bind placeholders in the statement text *stmt*.

    Each reference counts, even if the same name is used more than
    once; that's how drivers that use positional parameters see it.
    Accepts a `relbulk.sql.query.CompiledQuery` or a string.
    """
    return len(_NAMED_PLACEHOLDER.findall(str(stmt)))
