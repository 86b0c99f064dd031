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
A small abstraction layer for the SQL that writes rows.

Features:

    - Always use bind parameters; each compiled statement carries the
      mapping of bind names to values.

    - Deterministic output: columns and keys are always visited in
      sorted order, so the same input produces the same text.

    - The placeholder format is chosen by a dialect (``:name`` by
      default, ``%(name)s`` for pyformat drivers).

Each ``build_*`` function returns a
:class:`~relbulk.sql.query.CompiledQuery`, which unpacks as
``(stmt, params)``, or raises
:class:`~relbulk.interfaces.ValidationError`.
"""

from .dialect import DefaultDialect
from .dialect import PyformatDialect
from .dialect import Compiler
from .dialect import dialect_for_paramstyle

from .query import CompiledQuery
from .query import uglify_query

from .condition import build_condition
from .insert import build_insert
from .update import build_update
from .update import build_bulk_update
from .delete import build_delete
from .delete import build_empty_table

__all__ = [
    # Dialect
    "DefaultDialect",
    "PyformatDialect",
    "Compiler",
    "dialect_for_paramstyle",

    # Results
    "CompiledQuery",
    "uglify_query",

    # Statements
    "build_condition",
    "build_insert",
    "build_update",
    "build_bulk_update",
    "build_delete",
    "build_empty_table",
]
