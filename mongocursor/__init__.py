# -*- coding: utf-8 -*-
"""MongoCursor.

Retrying and Loggable wrappers for MongoDB Cursors.
"""
from .connections import find
from .drivers import LoggableCursor, RetryableCursor
from .exceptions import InvalidConfiguration, QueryExecutionFailed
from .version import __author__, __author_email__, __description__, __title__, __version__


__all__ = (
    'find',
    'LoggableCursor',
    'RetryableCursor',
    'InvalidConfiguration',
    'QueryExecutionFailed',
)
