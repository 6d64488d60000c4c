from __future__ import annotations

from typing import Any

import aiohttp
import pytest

from boundflow._constants import ERROR_UNKNOWN, NETWORK_ERROR_TIMEOUT, UNABLE_TO_RESOLVE_HOST
from boundflow._transport import ApiRequest, HttpRemoteCaller, SuccessEmpty, SuccessWithBody, TransportFailure
from boundflow.config import BoundflowConfig
from boundflow.models.auth import LoginResponse
from boundflow.models.blog import BlogListResponse


class _FakeResponse:
    def __init__(self, status: int, text: str) -> None:
        self.status = status
        self._text = text

    async def text(self) -> str:
        return self._text


class _FakeRequestContext:
    def __init__(self, response: _FakeResponse | None, exc: BaseException | None) -> None:
        self._response = response
        self._exc = exc

    async def __aenter__(self) -> _FakeResponse:
        if self._exc is not None:
            raise self._exc
        assert self._response is not None
        return self._response

    async def __aexit__(self, *exc: Any) -> None:
        return None


class _FakeHttpSession:
    def __init__(self, status: int = 200, text: str = "", exc: BaseException | None = None) -> None:
        self._response = _FakeResponse(status, text)
        self._exc = exc
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> _FakeRequestContext:
        self.calls.append((method, url, kwargs))
        return _FakeRequestContext(self._response, self._exc)


_LOGIN = ApiRequest(method="POST", path="account/login", data={"username": "me@example.com", "password": "pw"})


def _caller(http: _FakeHttpSession, **config: Any) -> HttpRemoteCaller:
    return HttpRemoteCaller(BoundflowConfig(**config), http)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_success_body_is_validated_into_model() -> None:
    http = _FakeHttpSession(200, '{"response": "Successfully authenticated.", "pk": 5, "token": "abc", "email": "me@example.com"}')

    outcome = await _caller(http).invoke(_LOGIN, LoginResponse)

    assert isinstance(outcome, SuccessWithBody)
    assert outcome.body.pk == 5
    assert outcome.body.token == "abc"
    assert outcome.body.raw["email"] == "me@example.com"

    method, url, kwargs = http.calls[0]
    assert method == "POST"
    assert url == "https://open-api.xyz/api/account/login"
    assert kwargs["data"] == {"username": "me@example.com", "password": "pw"}
    assert kwargs["timeout"].total == 6.0


@pytest.mark.asyncio
async def test_base_url_without_trailing_slash() -> None:
    http = _FakeHttpSession(200, '{"results": []}')
    request = ApiRequest(method="GET", path="blog/list", params={"search": "cats"})

    outcome = await _caller(http, base_url="http://localhost:8000/api").invoke(request, BlogListResponse)

    assert outcome == SuccessWithBody(BlogListResponse(results=[], raw={"results": []}))
    assert http.calls[0][1] == "http://localhost:8000/api/blog/list"
    assert http.calls[0][2]["params"] == {"search": "cats"}


@pytest.mark.asyncio
@pytest.mark.parametrize(("status", "text"), [(204, ""), (200, "   ")])
async def test_no_content_is_success_empty(status: int, text: str) -> None:
    outcome = await _caller(_FakeHttpSession(status, text)).invoke(_LOGIN, LoginResponse)

    assert outcome == SuccessEmpty()


@pytest.mark.asyncio
async def test_server_error_uses_message_from_body() -> None:
    http = _FakeHttpSession(500, '{"detail": "Server is down"}')

    outcome = await _caller(http).invoke(_LOGIN, LoginResponse)

    assert outcome == TransportFailure("Server is down", status_code=500)


@pytest.mark.asyncio
async def test_server_error_without_body_reports_status() -> None:
    outcome = await _caller(_FakeHttpSession(404, "<html>")).invoke(_LOGIN, LoginResponse)

    assert isinstance(outcome, TransportFailure)
    assert outcome.status_code == 404
    assert "HTTP 404" in outcome.message


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["not json", "[1, 2]"])
async def test_unparseable_success_body_is_unknown_error(text: str) -> None:
    outcome = await _caller(_FakeHttpSession(200, text)).invoke(_LOGIN, LoginResponse)

    assert outcome == TransportFailure(ERROR_UNKNOWN, status_code=200)


@pytest.mark.asyncio
async def test_timeout_is_transport_failure() -> None:
    outcome = await _caller(_FakeHttpSession(exc=TimeoutError())).invoke(_LOGIN, LoginResponse)

    assert outcome == TransportFailure(NETWORK_ERROR_TIMEOUT)


@pytest.mark.asyncio
async def test_connection_error_is_transport_failure() -> None:
    http = _FakeHttpSession(exc=aiohttp.ClientConnectionError("connection refused"))

    outcome = await _caller(http).invoke(_LOGIN, LoginResponse)

    assert isinstance(outcome, TransportFailure)
    assert outcome.message.startswith(UNABLE_TO_RESOLVE_HOST)
    assert outcome.status_code is None
