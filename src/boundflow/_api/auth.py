"""Login and registration endpoints.

Endpoints:
  - account/login
  - account/register

Both answer HTTP 200 with ``response == "Error"`` when the credentials
or the registration data are rejected, so the translators below are the
place where those failures become domain errors.
"""

from __future__ import annotations

import logging

from boundflow._constants import ERROR_UNKNOWN, GENERIC_AUTH_ERROR
from boundflow._redact import redact_for_log
from boundflow._transport import ApiRequest
from boundflow.models.auth import (
    AccountProperties,
    AuthToken,
    AuthViewState,
    LoginResponse,
    RegistrationResponse,
)
from boundflow.resource import Translation
from boundflow.validation import LoginFields, RegistrationFields

_logger = logging.getLogger(__name__)

LOGIN_ENDPOINT = "account/login"
REGISTER_ENDPOINT = "account/register"


def build_login_request(fields: LoginFields) -> ApiRequest:
    """Form-encoded login request; the API names the email field ``username``."""
    return ApiRequest(
        method="POST",
        path=LOGIN_ENDPOINT,
        data={"username": fields.email, "password": fields.password},
    )


def build_registration_request(fields: RegistrationFields) -> ApiRequest:
    return ApiRequest(
        method="POST",
        path=REGISTER_ENDPOINT,
        data={
            "email": fields.email,
            "username": fields.username,
            "password": fields.password,
            "password2": fields.confirm_password,
        },
    )


def _translate_auth(response: LoginResponse | RegistrationResponse) -> Translation[AuthViewState]:
    if response.response == GENERIC_AUTH_ERROR:
        return Translation.domain_error(response.error_message or ERROR_UNKNOWN)
    if not response.token or response.pk < 0:
        return Translation.domain_error(ERROR_UNKNOWN)
    return Translation.success(AuthViewState(auth_token=AuthToken(account_pk=response.pk, token=response.token)))


def translate_login_response(response: LoginResponse) -> Translation[AuthViewState]:
    """Turn a login body into the auth view state, or a domain error."""
    _logger.debug("Login response: %s", redact_for_log(response))
    return _translate_auth(response)


def translate_registration_response(response: RegistrationResponse) -> Translation[AuthViewState]:
    _logger.debug("Registration response: %s", redact_for_log(response))
    return _translate_auth(response)


def account_properties_from(response: LoginResponse | RegistrationResponse) -> AccountProperties:
    username = response.username if isinstance(response, RegistrationResponse) else ""
    return AccountProperties(pk=response.pk, email=response.email, username=username)
