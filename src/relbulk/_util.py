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
Logging levels, settings read from the environment, call timing,
and worker threads.

"""
import logging
import os
import threading
from functools import wraps
from time import perf_counter

from logging import DEBUG
from logging import INFO
from logging import WARN
from logging import ERROR

from ZConfig.datatypes import asBoolean
from ZConfig.datatypes import integer
from ZConfig.datatypes import RangeCheckedConversion
from ZConfig.datatypes import stock_datatypes

from perfmetrics import Metric

#: Finer than DEBUG; used for very chatty per-unit messages.
TRACE = 5
logging.addLevelName(TRACE, 'TRACE')

_logger = logging.getLogger('relbulk')
perf_logger = _logger.getChild('timing')

__all__ = [
    'TRACE',
    'get_boolean_from_environ',
    'get_duration_from_environ',
    'get_non_negative_float_from_environ',
    'get_positive_integer_from_environ',
    'log_timed',
    'metricmethod_sampled',
    'thread_spawn',
]

positive_integer = RangeCheckedConversion(integer, min=1)
non_negative_float = RangeCheckedConversion(float, min=0)


def _from_environ(environ_name, default, convert, logger):
    raw = os.environ.get(environ_name)
    if raw is None:
        return default
    try:
        value = convert(raw)
    except (ValueError, TypeError):
        logger.exception("Ignoring unparseable %s=%r; using %r",
                         environ_name, raw, default)
        return default
    logger.debug("Using %s=%r from the environment", environ_name, value)
    return value


def get_positive_integer_from_environ(environ_name, default, logger=_logger):
    return _from_environ(environ_name, default, positive_integer, logger)

def get_non_negative_float_from_environ(environ_name, default, logger=_logger):
    return _from_environ(environ_name, default, non_negative_float, logger)


def parse_boolean(val):
    # ZConfig doesn't know the digits.
    if val in ('0', '1'):
        return val == '1'
    return asBoolean(val)

def get_boolean_from_environ(environ_name, default, logger=_logger):
    return _from_environ(environ_name, default, parse_boolean, logger)


def _seconds(val):
    if any(unit in val for unit in ' wdhms'):
        return stock_datatypes['timedelta'](val).total_seconds()
    return float(val)

def get_duration_from_environ(environ_name, default, logger=_logger):
    """
    Return a number of seconds from the environment *environ_name*,
    or *default*.

    A plain number is taken as seconds; otherwise ZConfig's interval
    syntax (``3m``, ``1m 3.2s``) is used::

        >>> import os
        >>> os.environ['RELBULK_TEST_VAL'] = '2.3'
        >>> get_duration_from_environ('RELBULK_TEST_VAL', None)
        2.3
        >>> os.environ['RELBULK_TEST_VAL'] = '1m 3.2s'
        >>> get_duration_from_environ('RELBULK_TEST_VAL', None)
        63.2
        >>> os.environ['RELBULK_TEST_VAL'] = 'soon'
        >>> get_duration_from_environ('RELBULK_TEST_VAL', 42)
        42
        >>> del os.environ['RELBULK_TEST_VAL']
    """
    return _from_environ(environ_name, default, _seconds, logger)


def _level_number(name):
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError("Unknown logging level %r" % (name,))
    return level


#: ``(level, seconds)`` pairs, shortest first. A timed call lasting at
#: least *seconds* is logged at *level*.
LOG_TIMED_THRESHOLDS = sorted(
    [
        (level, get_duration_from_environ(
            'RELBULK_PERF_LOG_%s_MIN' % (logging.getLevelName(level),),
            default,
            logger=perf_logger))
        for level, default in (
            (TRACE, 0.31),
            (DEBUG, 1.24),
            (INFO, 3.03),
            (WARN, 9.24),
            (ERROR, 20.10),
        )
    ],
    key=lambda pair: pair[1]
)

#: Calls logged at this level or above also report the load average
#: and the object that was called.
LOG_TIMED_DETAILS_LEVEL = _from_environ('RELBULK_PERF_LOG_DETAILS_LEVEL', WARN,
                                        _level_number, perf_logger)

_LOG_TIMED_ENABLED = get_boolean_from_environ('RELBULK_PERF_LOG_ENABLE', True,
                                              logger=perf_logger)


def level_for_duration(duration, thresholds=None):
    """
    Return the logging level for a call that took *duration* seconds,
    or 0 if it was too quick to log.
    """
    if thresholds is None:
        thresholds = LOG_TIMED_THRESHOLDS
    level = 0
    for candidate, minimum in thresholds:
        if duration < minimum:
            break
        level = candidate
    return level


def log_duration(logger, func, args, duration, thresholds=None):
    level = level_for_duration(duration, thresholds)
    if not level or not logger.isEnabledFor(level):
        return

    if level < LOG_TIMED_DETAILS_LEVEL:
        logger.log(level, "Function %s took %.3fs.", func.__name__, duration)
        return

    try:
        load = os.getloadavg()
    except (OSError, AttributeError):
        load = "<unknown load>"
    logger.log(level, "Function %s took %.3fs. (load=%s) (self=%r)",
               func.__name__, duration, load, args[:1])


def log_timed(func):
    """
    Decorator that logs how long each call of *func* takes, at a
    level chosen from `LOG_TIMED_THRESHOLDS`.
    """
    if not _LOG_TIMED_ENABLED:
        return func

    logger = logging.getLogger(func.__module__).getChild('timing')

    @wraps(func)
    def timed(*args, **kwargs):
        begin = perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            log_duration(logger, func, args, perf_counter() - begin)

    return timed


METRIC_SAMPLE_RATE = get_non_negative_float_from_environ('RELBULK_PERF_STATSD_SAMPLE_RATE', 0.1,
                                                         logger=perf_logger)

#: Times and counts method calls in statsd, for a sample of calls.
metricmethod_sampled = Metric(method=True, rate=METRIC_SAMPLE_RATE)


def thread_spawn(func, args=(), name=None):
    """
    Start a daemon thread running ``func(*args)`` and return it.
    """
    t = threading.Thread(target=func, args=args,
                         name='relbulk-%s' % (name or func.__name__,))
    t.daemon = True
    t.start()
    return t
