"""Operation descriptors accepted by :meth:`BoundflowClient.submit`."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from boundflow._transport import TransportOutcome
from boundflow.resource import Translation

P = TypeVar("P")
T = TypeVar("T")


@dataclass(frozen=True)
class Operation(Generic[P, T]):
    """Everything the client needs to run one kind of request.

    ``cache_then_network`` opts into showing cached data while the network
    refreshes it. Without it, a connected client goes straight to the
    network and the cache is only consulted offline.
    """

    name: str
    create_call: Callable[[P], Awaitable[TransportOutcome[Any]]]
    handle_success: Callable[[P, Any], Translation[T] | Awaitable[Translation[T]]]
    validate: Callable[[P], str | None] | None = None
    load_from_cache: Callable[[P], T | None | Awaitable[T | None]] | None = None
    cache_then_network: bool = False
    slot_key: Callable[[P], str] | None = None

    def slot(self, params: P) -> str:
        if self.slot_key is None:
            return self.name
        return f"{self.name}:{self.slot_key(params)}"
