from typing import Any, Optional, Union
from collections.abc import Iterable, Mapping
from abc import ABC, abstractmethod
from copy import deepcopy
from dataclasses import dataclass, field
from types import MappingProxyType


def _as_projection(fields: Union[Mapping, Iterable[str], None]) -> dict:
    """Projection as a mapping of field name to inclusion flag."""
    if fields is None:
        return {}
    if isinstance(fields, Mapping):
        return deepcopy(dict(fields))
    if isinstance(fields, str):
        return {fields: 1}
    return {name: 1 for name in fields}


@dataclass(frozen=True)
class Query:
    """
    Query.

    Criteria and Projection used to open a Cursor, captured once.
    """

    criteria: Mapping[str, Any] = field(default_factory=dict)
    fields: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def capture(
        cls,
        criteria: Optional[Mapping[str, Any]] = None,
        fields: Union[Mapping[str, Any], Iterable[str], None] = None
    ) -> "Query":
        return cls(
            criteria=MappingProxyType(deepcopy(dict(criteria or {}))),
            fields=MappingProxyType(_as_projection(fields))
        )

    def as_dict(self) -> dict:
        """Fresh, mutable copy of the query criteria."""
        return deepcopy(dict(self.criteria))

    def projection(self) -> dict:
        """Fresh, mutable copy of the projection."""
        return deepcopy(dict(self.fields))


class CursorMutators(ABC):
    """
    Interface for Cursors that can be configured before iteration.

    Every mutator returns the cursor, for call chaining.
    """

    @property
    @abstractmethod
    def query(self) -> dict:
        """Query criteria used to open the cursor."""

    @property
    @abstractmethod
    def fields(self) -> dict:
        """Projection used to open the cursor."""

    @abstractmethod
    def hint(self, key_pattern: Any) -> "CursorMutators":
        """Use the index described by key_pattern."""

    @abstractmethod
    def limit(self, num: int) -> "CursorMutators":
        """Return at most num documents."""

    @abstractmethod
    def skip(self, num: int) -> "CursorMutators":
        """Skip the first num documents."""

    @abstractmethod
    def snapshot(self) -> "CursorMutators":
        """Isolate the cursor from concurrent writes."""

    @abstractmethod
    def sort(self, fields: Any) -> "CursorMutators":
        """Order the results."""
