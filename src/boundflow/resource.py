"""Network/cache bound resource mediator.

:class:`BoundResourceMediator` turns three plain functions into a
:class:`~boundflow.stream.StateStream`:

``create_call()``
    Performs the remote call and returns a
    :data:`~boundflow._transport.TransportOutcome`.
``handle_success(body)``
    Classifies a success body into a :class:`Translation` (payload or
    domain error). May also raise :class:`~boundflow.exceptions.BoundflowDomainError`.
``load_from_cache()``
    Optional. Returns cached data or ``None``.

Emission order for one invocation is ``Loading``, then an interim
``Success(is_final=False)`` when cached data exists and the network will
be consulted, then one terminal state.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from boundflow._constants import ERROR_UNKNOWN
from boundflow._transport import SuccessEmpty, SuccessWithBody, TransportFailure, TransportOutcome
from boundflow.config import BoundflowConfig
from boundflow.exceptions import BoundflowDomainError
from boundflow.jobs import JobRegistry
from boundflow.models.state import Empty, Error, ErrorPresentation, Loading, RequestState, Success
from boundflow.stream import Emit, StateStream

_logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Translation(Generic[T]):
    """Verdict of a result translator on a success-shaped response."""

    is_domain_error: bool = False
    error_message: str | None = None
    payload: T | None = None

    @classmethod
    def success(cls, payload: T) -> Translation[T]:
        return cls(payload=payload)

    @classmethod
    def domain_error(cls, message: str) -> Translation[T]:
        return cls(is_domain_error=True, error_message=message)


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class BoundResourceMediator:
    """Decides cache vs network and produces the state stream for one invocation."""

    def __init__(
        self,
        registry: JobRegistry,
        *,
        network_delay: float = 0.0,
        cache_delay: float = 0.0,
    ) -> None:
        self._registry = registry
        self._network_delay = network_delay
        self._cache_delay = cache_delay

    @classmethod
    def from_config(cls, registry: JobRegistry, config: BoundflowConfig) -> BoundResourceMediator:
        return cls(
            registry,
            network_delay=config.testing_network_delay,
            cache_delay=config.testing_cache_delay,
        )

    @property
    def registry(self) -> JobRegistry:
        return self._registry

    def run(
        self,
        slot: str,
        *,
        should_fetch_from_network: bool | Callable[[], bool | Awaitable[bool]],
        create_call: Callable[[], Awaitable[TransportOutcome[Any]]],
        handle_success: Callable[[Any], Translation[T] | Awaitable[Translation[T]]],
        load_from_cache: Callable[[], T | None | Awaitable[T | None]] | None = None,
        cache_when_connected: bool = True,
    ) -> StateStream[T]:
        """Build the (lazy) state stream for one invocation of *slot*.

        Parameters
        ----------
        slot : str
            Logical identity used for supersession (e.g. ``"login"``).
        should_fetch_from_network : bool or callable
            Whether the network may be consulted at all. When ``False`` the
            stream ends with the cached data, or ``Empty`` without it. A
            callable is evaluated once the invocation starts, so a slow
            connectivity check runs inside the job rather than at submit time.
        create_call : callable
            Returns an awaitable transport outcome. Only called when the
            network is consulted.
        handle_success : callable
            Translator for ``SuccessWithBody`` outcomes.
        load_from_cache : callable, optional
            Cache loader. Omit for operations without a cache.
        cache_when_connected : bool
            When ``False`` the cache loader is only used while offline.
        """

        async def produce(emit: Emit) -> None:
            emit(Loading())

            if callable(should_fetch_from_network):
                fetch = bool(await _resolve(should_fetch_from_network()))
            else:
                fetch = should_fetch_from_network

            cached: T | None = None
            if load_from_cache is not None and (cache_when_connected or not fetch):
                if self._cache_delay:
                    await asyncio.sleep(self._cache_delay)
                cached = await _resolve(load_from_cache())
                _logger.debug("Cache %s for slot %s", "hit" if cached is not None else "miss", slot)

            if not fetch:
                emit(Success(cached) if cached is not None else Empty())
                return

            if cached is not None:
                emit(Success(cached, is_final=False))

            if self._network_delay:
                await asyncio.sleep(self._network_delay)
            outcome = await create_call()
            emit(await self._translate(slot, outcome, handle_success))

        return StateStream(slot, produce, registry=self._registry)

    async def _translate(
        self,
        slot: str,
        outcome: TransportOutcome[Any],
        handle_success: Callable[[Any], Translation[T] | Awaitable[Translation[T]]],
    ) -> RequestState[T]:
        if isinstance(outcome, SuccessWithBody):
            try:
                translation: Translation[T] = await _resolve(handle_success(outcome.body))
            except BoundflowDomainError as exc:
                _logger.debug("Domain error in slot %s: %s", slot, exc)
                return Error(str(exc) or ERROR_UNKNOWN, ErrorPresentation.DIALOG)
            if translation.is_domain_error:
                _logger.debug("Domain error in slot %s: %s", slot, translation.error_message)
                return Error(translation.error_message or ERROR_UNKNOWN, ErrorPresentation.DIALOG)
            return Success(translation.payload)

        if isinstance(outcome, SuccessEmpty):
            return Empty()

        if isinstance(outcome, TransportFailure):
            _logger.debug("Transport failure in slot %s: %s", slot, outcome.message)
            return Error(outcome.message or ERROR_UNKNOWN, ErrorPresentation.DIALOG)

        raise TypeError(f"Unsupported transport outcome: {outcome!r}")
