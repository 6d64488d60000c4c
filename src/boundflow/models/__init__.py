"""Public data models for boundflow."""

from boundflow.models.auth import (
    AccountProperties,
    AuthToken,
    AuthViewState,
    LoginResponse,
    RegistrationResponse,
)
from boundflow.models.blog import BlogListResponse, BlogPost, BlogViewState
from boundflow.models.state import Empty, Error, ErrorPresentation, Loading, RequestState, Success

__all__ = [
    "AccountProperties",
    "AuthToken",
    "AuthViewState",
    "BlogListResponse",
    "BlogPost",
    "BlogViewState",
    "Empty",
    "Error",
    "ErrorPresentation",
    "Loading",
    "LoginResponse",
    "RegistrationResponse",
    "RequestState",
    "Success",
]
