"""Exceptions for MongoCursor.
"""
from typing import Optional


class CursorException(Exception):
    """Base class for other exceptions"""

    code: int = 0
    message: str = ''

    def __init__(self, *args: object, message: str = '', code: int = None) -> None:
        if not message and args:
            message = str(args[0])
            args = args[1:]
        self.args = (
            message,
            code,
            *args
        )
        self.message = message
        self.code = code
        super(CursorException, self).__init__(message)

    def __repr__(self):
        return f"{self.__class__.__name__}({self.args!r})"

    def __str__(self):
        return f"{self.__class__.__name__}: {self.message}"

    def get(self):
        return self.message


class InvalidConfiguration(CursorException, ValueError):
    """Raised when a Cursor is built with invalid arguments."""


class NotSupported(CursorException):
    """Not Supported functionality"""


class DriverError(CursorException):
    """Error raised by the underlying Driver Cursor."""


class QueryExecutionFailed(DriverError):
    """Query could not be executed, even after retrying.

    The last error raised by the driver is kept on ``error``.
    """

    def __init__(
        self,
        *args: object,
        message: str = '',
        code: int = None,
        error: Optional[BaseException] = None,
        attempts: int = 1
    ) -> None:
        self.error = error
        self.attempts = attempts
        if not message and not args:
            message = f"Query failed after {attempts} attempt(s): {error}"
        super(QueryExecutionFailed, self).__init__(*args, message=message, code=code)
