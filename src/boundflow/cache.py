"""Local cache store consulted before (or instead of) the network."""

from __future__ import annotations

import copy
from collections.abc import Hashable
from typing import Any, Protocol


class CacheStore(Protocol):
    """Structural cache interface used by operations.

    Keys are operation-defined. Reads must be fast and never wait on the
    network; the mediator awaits nothing but the optional testing delay
    before calling :meth:`read`.
    """

    def read(self, key: Hashable) -> Any | None:
        ...

    def write(self, key: Hashable, record: Any) -> None:
        ...

    def delete(self, key: Hashable) -> None:
        ...


class MemoryCacheStore:
    """In-process cache with read-after-write visibility.

    Records are deep-copied in and out so callers cannot mutate cached
    state by accident.
    """

    def __init__(self) -> None:
        self._records: dict[Hashable, Any] = {}

    def read(self, key: Hashable) -> Any | None:
        record = self._records.get(key)
        if record is None:
            return None
        return copy.deepcopy(record)

    def write(self, key: Hashable, record: Any) -> None:
        self._records[key] = copy.deepcopy(record)

    def delete(self, key: Hashable) -> None:
        self._records.pop(key, None)

    def clear(self) -> None:
        self._records.clear()

    def __contains__(self, key: Hashable) -> bool:
        return key in self._records

    def __len__(self) -> int:
        return len(self._records)
