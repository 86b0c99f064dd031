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
Splitting rows into pages.
"""
import itertools

from relbulk.interfaces import ValidationError

def _check_page_size(page_size):
    if page_size <= 0:
        raise ValidationError("page size must be at least 1, not %r" % (page_size,))


def page_count(length, page_size):
    """
    The number of pages *length* items fill at *page_size* per page.
    """
    _check_page_size(page_size)
    return -(-length // page_size)


def paged(sequence, page_size):
    """
    Return a list of contiguous slices of *sequence*, each at most
    *page_size* long. Only the last may be shorter.

        >>> [len(p) for p in paged(list(range(35)), 10)]
        [10, 10, 10, 5]
    """
    count = page_count(len(sequence), page_size)
    return [
        sequence[start:start + page_size]
        for start in range(0, count * page_size, page_size)
    ]


def iter_pages(iterable, page_size):
    """
    Like :func:`paged`, but works on any iterable and produces lists
    lazily. Never more than one page is materialized at a time.
    """
    _check_page_size(page_size)
    iterable = iter(iterable)
    for head in iterable:
        page = [head]
        page.extend(itertools.islice(iterable, page_size - 1))
        yield page
