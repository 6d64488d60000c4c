"""High-level async client: submit operations, observe their state streams."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, TypeVar

import aiohttp

from boundflow._api import auth as _auth_api
from boundflow._api import blog as _blog_api
from boundflow._transport import HttpRemoteCaller, RemoteCaller
from boundflow.cache import CacheStore, MemoryCacheStore
from boundflow.config import BoundflowConfig
from boundflow.connectivity import ConnectivityProbe, SocketConnectivityProbe
from boundflow.exceptions import BoundflowStreamError
from boundflow.jobs import JobRegistry
from boundflow.models.auth import (
    AuthViewState,
    LoginResponse,
    RegistrationResponse,
)
from boundflow.models.blog import BlogListResponse, BlogViewState
from boundflow.operations import Operation
from boundflow.resource import BoundResourceMediator, Translation
from boundflow.session import SessionManager
from boundflow.stream import StateStream
from boundflow.validation import BlogSearchFields, LoginFields, RegistrationFields

_logger = logging.getLogger(__name__)

P = TypeVar("P")
T = TypeVar("T")

LOGIN_SLOT = "login"
REGISTER_SLOT = "register"
BLOG_SEARCH_SLOT = "blog_search"


def _account_cache_key(pk: int) -> tuple[str, int]:
    return ("account_properties", pk)


class BoundflowClient:
    """Async client for the open-api.xyz account and blog API.

    Every operation returns a lazy :class:`~boundflow.stream.StateStream`.
    Submitting an operation again for the same slot supersedes the
    previous invocation.

    Usage::

        async with BoundflowClient(config) as client:
            async for state in client.login("me@example.com", "secret"):
                ...
    """

    def __init__(
        self,
        config: BoundflowConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        caller: RemoteCaller | None = None,
        connectivity: ConnectivityProbe | None = None,
        cache: CacheStore | None = None,
    ) -> None:
        self._config = config or BoundflowConfig()
        self._external_session = session is not None
        self._http_session = session
        self._caller = caller
        self._owns_caller = caller is None
        self._cache: CacheStore = cache if cache is not None else MemoryCacheStore()
        self._session_manager = SessionManager(
            connectivity or SocketConnectivityProbe.from_config(self._config),
            self._cache,
        )
        self._registry = JobRegistry()
        self._mediator = BoundResourceMediator.from_config(self._registry, self._config)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> BoundflowClient:
        if self._owns_caller:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._caller = HttpRemoteCaller(self._config, self._http_session)
        self._session_manager.restore()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.cancel_active_jobs()
        if self._owns_caller:
            self._caller = None
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def session(self) -> SessionManager:
        return self._session_manager

    @property
    def registry(self) -> JobRegistry:
        return self._registry

    @property
    def cache(self) -> CacheStore:
        return self._cache

    def _require_caller(self) -> RemoteCaller:
        if self._caller is None:
            raise BoundflowStreamError("Client not initialized. Use 'async with BoundflowClient(...) as client:'")
        return self._caller

    # ------------------------------------------------------------------
    # Generic submission
    # ------------------------------------------------------------------

    def submit(self, operation: Operation[P, T], params: P) -> StateStream[T]:
        """Run *operation* with *params* and return its state stream.

        Validation happens first; a failing form yields a stream with a
        single ``Error`` and touches neither connectivity, cache nor
        network.
        """
        slot = operation.slot(params)
        if operation.validate is not None:
            error = operation.validate(params)
            if error:
                _logger.debug("Validation failed for slot %s: %s", slot, error)
                return StateStream.failure(error, slot=slot)

        self._require_caller()

        cache_loader = None
        loader = operation.load_from_cache
        if loader is not None:

            def cache_loader() -> Any:
                return loader(params)

        return self._mediator.run(
            slot,
            should_fetch_from_network=self._is_connected,
            create_call=lambda: operation.create_call(params),
            handle_success=lambda body: operation.handle_success(params, body),
            load_from_cache=cache_loader,
            cache_when_connected=operation.cache_then_network,
        )

    async def _is_connected(self) -> bool:
        # Socket checks block, keep them off the event loop.
        return await asyncio.to_thread(
            self._session_manager.is_connected_to_the_internet
        )

    def cancel(self, slot: str) -> bool:
        """Tear down the invocation running in *slot*, if any."""
        return self._registry.cancel(slot)

    def cancel_active_jobs(self) -> int:
        _logger.debug("Cancelling on-going jobs")
        return self._registry.cancel_all()

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def _call(self, request: Any, response_model: Any) -> Any:
        return self._require_caller().invoke(request, response_model)

    def _persist_auth(self, translation: Translation[AuthViewState], response: LoginResponse | RegistrationResponse) -> None:
        view_state = translation.payload
        if translation.is_domain_error or view_state is None or view_state.auth_token is None:
            return
        properties = _auth_api.account_properties_from(response)
        self._cache.write(_account_cache_key(properties.pk), properties)
        self._session_manager.login(view_state.auth_token)

    def _handle_login(self, _fields: LoginFields, response: LoginResponse) -> Translation[AuthViewState]:
        translation = _auth_api.translate_login_response(response)
        self._persist_auth(translation, response)
        return translation

    def _handle_registration(
        self, _fields: RegistrationFields, response: RegistrationResponse
    ) -> Translation[AuthViewState]:
        translation = _auth_api.translate_registration_response(response)
        self._persist_auth(translation, response)
        return translation

    def _create_login_call(self, fields: LoginFields) -> Any:
        return self._call(_auth_api.build_login_request(fields), LoginResponse)

    def _create_registration_call(self, fields: RegistrationFields) -> Any:
        return self._call(_auth_api.build_registration_request(fields), RegistrationResponse)

    @property
    def login_operation(self) -> Operation[LoginFields, AuthViewState]:
        return Operation(
            name=LOGIN_SLOT,
            create_call=self._create_login_call,
            handle_success=self._handle_login,
            validate=LoginFields.validation_error,
        )

    @property
    def registration_operation(self) -> Operation[RegistrationFields, AuthViewState]:
        return Operation(
            name=REGISTER_SLOT,
            create_call=self._create_registration_call,
            handle_success=self._handle_registration,
            validate=RegistrationFields.validation_error,
        )

    def login(self, email: str, password: str) -> StateStream[AuthViewState]:
        """Authenticate; on success the session holds the new token."""
        return self.submit(self.login_operation, LoginFields(email, password))

    def register(
        self,
        email: str,
        username: str,
        password: str,
        confirm_password: str,
    ) -> StateStream[AuthViewState]:
        """Create an account; on success the session holds the new token."""
        return self.submit(
            self.registration_operation,
            RegistrationFields(email, username, password, confirm_password),
        )

    def logout(self) -> None:
        self.cancel_active_jobs()
        self._session_manager.logout()

    # ------------------------------------------------------------------
    # Blog
    # ------------------------------------------------------------------

    def _load_blog_posts(self, fields: BlogSearchFields) -> BlogViewState | None:
        cached = self._cache.read(_blog_api.blog_cache_key(fields.query))
        return _blog_api.view_state_from_cache(fields.query, cached)

    def _create_blog_search_call(self, fields: BlogSearchFields) -> Any:
        request = _blog_api.build_blog_search_request(fields.query, self._session_manager.cached_token)
        return self._call(request, BlogListResponse)

    def _handle_blog_list(self, fields: BlogSearchFields, response: BlogListResponse) -> Translation[BlogViewState]:
        translation = _blog_api.translate_blog_list(fields.query, response)
        if translation.payload is not None:
            self._cache.write(_blog_api.blog_cache_key(fields.query), translation.payload.posts)
        return translation

    @property
    def blog_search_operation(self) -> Operation[BlogSearchFields, BlogViewState]:
        return Operation(
            name=BLOG_SEARCH_SLOT,
            create_call=self._create_blog_search_call,
            handle_success=self._handle_blog_list,
            validate=BlogSearchFields.validation_error,
            load_from_cache=self._load_blog_posts,
            cache_then_network=True,
        )

    def search_blog_posts(self, query: str) -> StateStream[BlogViewState]:
        """Search blog posts: cached results first, then the network's."""
        return self.submit(self.blog_search_operation, BlogSearchFields(query))
