"""Session state: connectivity gate and the current auth token."""

from __future__ import annotations

import logging

from boundflow.cache import CacheStore
from boundflow.connectivity import ConnectivityProbe
from boundflow.models.auth import AuthToken

_logger = logging.getLogger(__name__)

#: Cache key under which the active token is persisted.
AUTH_TOKEN_KEY = ("auth_token", "active")


class SessionManager:
    """Holds the authenticated token and answers "are we online?".

    The token is persisted in the cache store so a new manager built on
    the same store can :meth:`restore` it.
    """

    def __init__(self, connectivity: ConnectivityProbe, cache: CacheStore) -> None:
        self._connectivity = connectivity
        self._cache = cache
        self._token: AuthToken | None = None

    @property
    def cached_token(self) -> AuthToken | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    def is_connected_to_the_internet(self) -> bool:
        reachable = self._connectivity.is_reachable()
        if not reachable:
            _logger.debug("Network unreachable")
        return reachable

    def login(self, token: AuthToken) -> None:
        _logger.debug("Session started for account %s", token.account_pk)
        self._token = token
        self._cache.write(AUTH_TOKEN_KEY, token)

    def logout(self) -> None:
        if self._token is not None:
            _logger.debug("Session ended for account %s", self._token.account_pk)
        self._token = None
        self._cache.delete(AUTH_TOKEN_KEY)

    def restore(self) -> AuthToken | None:
        """Reload a previously persisted token, if any."""
        token = self._cache.read(AUTH_TOKEN_KEY)
        self._token = token if isinstance(token, AuthToken) else None
        return self._token
