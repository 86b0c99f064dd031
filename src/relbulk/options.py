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

from relbulk._util import get_positive_integer_from_environ
from relbulk.budget import PLACEHOLDER_LIMIT

#: Default number of concurrent workers for the pooled strategies.
DEFAULT_WORKER_COUNT = get_positive_integer_from_environ(
    'RELBULK_WORKER_COUNT',
    1
)

#: Default maximum number of rows in one bulk ``UPDATE`` statement.
DEFAULT_BATCH_SIZE = get_positive_integer_from_environ(
    'RELBULK_BATCH_SIZE',
    100
)

#: The placeholder ceiling of the target database.
DEFAULT_PLACEHOLDER_LIMIT = get_positive_integer_from_environ(
    'RELBULK_PLACEHOLDER_LIMIT',
    PLACEHOLDER_LIMIT
)


class Options(object):
    """Options for configuring and tuning a batch executor.

    These parameters can be provided as keyword options in the
    :class:`relbulk.batch.BatchExecutor` constructor. For example::

        executor = BatchExecutor(statement_executor, worker_count=8)

    Alternatively, the constructor accepts an options parameter,
    which should be an Options instance.
    """

    #: How many units of work may run at the same time.
    worker_count = DEFAULT_WORKER_COUNT
    #: The most rows a bulk ``UPDATE`` statement will cover. The
    #: placeholder budget may make pages smaller than this.
    batch_size = DEFAULT_BATCH_SIZE
    #: The most bind placeholders one statement may contain.
    placeholder_limit = DEFAULT_PLACEHOLDER_LIMIT
    #: The `relbulk.batch.Strategy` used by ``update_bulk`` when none
    #: is given. ``None`` means ``Strategy.BULK_STATEMENT``.
    strategy = None

    def __init__(self, **kwoptions):
        for key, value in kwoptions.items():
            if not hasattr(self, key):
                raise TypeError("Unknown parameter: %s (Known: %s)" % (
                    key,
                    self.valid_option_names()
                ))
            setattr(self, key, value)

    @classmethod
    def valid_option_names(cls):
        return sorted(
            x
            for x in vars(cls)
            if not callable(getattr(cls, x)) and not x.startswith('_')
        )

    def __repr__(self):
        opts = []
        for k, v in sorted(self.__dict__.items()):
            opt = '%s=%r' % (k, v)
            opts.append(opt)
        opts = ', '.join(opts)
        return 'relbulk.options.Options(%s)' % (opts,)

    def __eq__(self, other):
        if not isinstance(other, Options):
            return NotImplemented
        return all(getattr(self, key) == getattr(other, key)
                   for key in self.valid_option_names())

    def __hash__(self):
        # Equal objects must have equal hashes; we don't expect to
        # hash these, so a constant is enough.
        return 42

    def copy(self, **kw):
        """
        Produce a copy of these options, with keyword arguments overriding.
        """
        options = dict(self.__dict__)
        options.update(kw)
        return self.__class__(**options)
