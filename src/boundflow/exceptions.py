"""Custom exception hierarchy for boundflow."""

from __future__ import annotations


class BoundflowError(Exception):
    """Base exception for all boundflow errors."""


class BoundflowConfigError(BoundflowError):
    """Invalid or missing configuration."""


class BoundflowStreamError(BoundflowError):
    """A state stream or client was used outside its lifecycle."""


class BoundflowTransportError(BoundflowError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class BoundflowDomainError(BoundflowError):
    """Business failure reported through a success-shaped response.

    Result translators raise this (or return a domain-error
    :class:`~boundflow.resource.Translation`) when the server answered
    HTTP 200 but the payload says the operation failed.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class BoundflowAuthenticationError(BoundflowDomainError):
    """Login or registration rejected by the server."""
