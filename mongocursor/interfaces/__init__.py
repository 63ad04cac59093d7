"""Interfaces for MongoCursor."""
from .cursors import CursorMutators, Query

__all__ = ('CursorMutators', 'Query', )
