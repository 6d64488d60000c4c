"""Account and authentication models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from boundflow.models._base import ApiBaseModel


class LoginResponse(ApiBaseModel):
    """Body of ``POST account/login``.

    The server answers HTTP 200 even for bad credentials; in that case
    ``response`` is ``"Error"`` and ``error_message`` explains why.
    """

    response: str = ""
    error_message: str = ""
    token: str = ""
    pk: int = -1
    email: str = ""


class RegistrationResponse(ApiBaseModel):
    """Body of ``POST account/register``."""

    response: str = ""
    error_message: str = ""
    email: str = ""
    username: str = ""
    pk: int = -1
    token: str = ""


class AuthToken(BaseModel):
    """Token issued for an account after login or registration."""

    model_config = ConfigDict(frozen=True)

    account_pk: int
    token: str = Field(repr=False)


class AccountProperties(BaseModel):
    model_config = ConfigDict(frozen=True)

    pk: int
    email: str
    username: str = ""


class AuthViewState(BaseModel):
    """Payload delivered to the caller by the auth operations."""

    model_config = ConfigDict(frozen=True)

    auth_token: AuthToken | None = None
