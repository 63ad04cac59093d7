from .loggers import logger_callable

__all__ = [
    "logger_callable"
]
