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
Bulk inserts and updates for relational tables that stay within
the database's bind placeholder limit.
"""

from relbulk.batch import BatchExecutor
from relbulk.batch import Strategy
from relbulk.drivers import DBAPIStatementExecutor
from relbulk.interfaces import CompileError
from relbulk.interfaces import ExecutionError
from relbulk.interfaces import ValidationError
from relbulk.options import Options

__all__ = [
    'BatchExecutor',
    'CompileError',
    'DBAPIStatementExecutor',
    'ExecutionError',
    'Options',
    'Strategy',
    'ValidationError',
]
