"""Pre-flight form checks for the auth operations.

Each ``*Fields`` class returns ``None`` when the form may be submitted, or
the message to show the user otherwise. A failing form never reaches the
connectivity probe, the cache or the network.
"""

from __future__ import annotations

from dataclasses import dataclass

MUST_FILL_ALL_LOGIN_FIELDS = "You can't login without an email and password."
MUST_FILL_ALL_REGISTRATION_FIELDS = "All fields are required."
PASSWORDS_DO_NOT_MATCH = "Passwords must match."
EMPTY_SEARCH_QUERY = "Enter something to search for."


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


@dataclass(frozen=True, slots=True)
class LoginFields:
    email: str
    password: str

    def validation_error(self) -> str | None:
        if _blank(self.email) or _blank(self.password):
            return MUST_FILL_ALL_LOGIN_FIELDS
        return None


@dataclass(frozen=True, slots=True)
class RegistrationFields:
    email: str
    username: str
    password: str
    confirm_password: str

    def validation_error(self) -> str | None:
        if any(_blank(value) for value in (self.email, self.username, self.password, self.confirm_password)):
            return MUST_FILL_ALL_REGISTRATION_FIELDS
        if self.password != self.confirm_password:
            return PASSWORDS_DO_NOT_MATCH
        return None


@dataclass(frozen=True, slots=True)
class BlogSearchFields:
    query: str

    def validation_error(self) -> str | None:
        if _blank(self.query):
            return EMPTY_SEARCH_QUERY
        return None
