"""HTTP transport producing raw transport outcomes."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeAlias, TypeVar, Union

import aiohttp
from pydantic import BaseModel, ValidationError

from boundflow._constants import ERROR_UNKNOWN, NETWORK_ERROR_TIMEOUT, UNABLE_TO_RESOLVE_HOST, USER_AGENT
from boundflow._redact import redact_for_log
from boundflow.config import BoundflowConfig
from boundflow.exceptions import BoundflowTransportError

_logger = logging.getLogger(__name__)

B = TypeVar("B")
M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True, slots=True)
class ApiRequest:
    """One outbound call, relative to the configured base URL."""

    method: str
    path: str
    data: Mapping[str, str] | None = None
    params: Mapping[str, str] | None = None
    headers: Mapping[str, str] | None = None


@dataclass(frozen=True, slots=True)
class SuccessWithBody(Generic[B]):
    body: B


@dataclass(frozen=True, slots=True)
class SuccessEmpty:
    """2xx without content (e.g. HTTP 204)."""


@dataclass(frozen=True, slots=True)
class TransportFailure:
    message: str
    status_code: int | None = None


TransportOutcome: TypeAlias = Union[SuccessWithBody[B], SuccessEmpty, TransportFailure]


class RemoteCaller(Protocol):
    """Structural interface for anything that can perform an API call.

    Implementations never raise for network or server failures; those
    are reported as :class:`TransportFailure` outcomes. Cancellation is
    delivered as :class:`asyncio.CancelledError` and must release the
    underlying connection.
    """

    async def invoke(self, request: ApiRequest, response_model: type[M]) -> TransportOutcome[M]:
        ...


def _server_error_message(text: str) -> str:
    """Extract a human readable message from an error body, if any."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return ""
    if not isinstance(payload, dict):
        return ""
    for key in ("error_message", "detail", "response"):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


class HttpRemoteCaller:
    """aiohttp based :class:`RemoteCaller` with a fixed total timeout."""

    def __init__(self, config: BoundflowConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.network_timeout)

    def _url(self, path: str) -> str:
        base = self._config.base_url
        if not base.endswith("/"):
            base = f"{base}/"
        return f"{base}{path.lstrip('/')}"

    async def _send(self, request: ApiRequest) -> tuple[int, str]:
        headers: dict[str, str] = {"user-agent": USER_AGENT}
        if request.headers:
            headers.update(request.headers)

        url = self._url(request.path)
        _logger.debug("%s %s", request.method, url)
        if self._config.api_trace_enabled:
            _logger.debug(
                "Request %s data=%s params=%s",
                request.path,
                redact_for_log(request.data),
                redact_for_log(request.params),
            )

        try:
            async with self._http.request(
                request.method,
                url,
                data=dict(request.data) if request.data else None,
                params=dict(request.params) if request.params else None,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                status = resp.status
        except TimeoutError as exc:
            raise BoundflowTransportError(NETWORK_ERROR_TIMEOUT, endpoint=request.path) from exc
        except aiohttp.ClientError as exc:
            raise BoundflowTransportError(
                f"{UNABLE_TO_RESOLVE_HOST}: {exc}",
                endpoint=request.path,
            ) from exc

        if not 200 <= status < 300:
            raise BoundflowTransportError(
                _server_error_message(text) or f"HTTP {status} from {request.path}",
                status_code=status,
                endpoint=request.path,
            )
        return status, text

    async def invoke(self, request: ApiRequest, response_model: type[M]) -> TransportOutcome[M]:
        """Perform *request* and classify the result.

        Returns
        -------
        TransportOutcome
            ``SuccessWithBody`` with the validated model, ``SuccessEmpty``
            for HTTP 204 or a blank body, ``TransportFailure`` otherwise.
        """
        try:
            status, text = await self._send(request)
        except BoundflowTransportError as exc:
            _logger.debug("Transport failure on %s: %s", exc.endpoint, exc)
            return TransportFailure(str(exc), status_code=exc.status_code)

        if status == 204 or not text.strip():
            return SuccessEmpty()

        try:
            payload: Any = json.loads(text)
        except json.JSONDecodeError:
            _logger.debug("Invalid JSON from %s: %s", request.path, text[:200])
            return TransportFailure(ERROR_UNKNOWN, status_code=status)

        if self._config.api_trace_enabled:
            _logger.debug("Response %s: %s", request.path, redact_for_log(payload))

        try:
            body = response_model.model_validate(payload)
        except ValidationError as exc:
            _logger.debug("Unexpected response shape from %s: %s", request.path, exc)
            return TransportFailure(ERROR_UNKNOWN, status_code=status)
        return SuccessWithBody(body)
