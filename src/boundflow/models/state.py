"""Request states emitted by a :class:`~boundflow.stream.StateStream`.

A stream for one invocation emits ``Loading``, optionally an interim
``Success`` built from cached data, and then exactly one terminal state:
a final ``Success``, an ``Error`` or ``Empty``. A superseded or cancelled
invocation ends without a terminal state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeAlias, TypeVar, Union

T = TypeVar("T")


class ErrorPresentation(StrEnum):
    """How a consumer should surface an error. Does not change its meaning."""

    SILENT = "silent"
    TOAST = "toast"
    DIALOG = "dialog"
    RETRY_PROMPT = "retry-prompt"


@dataclass(frozen=True, slots=True)
class Loading:
    progress: Any = None

    @property
    def is_terminal(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """A payload. ``is_final=False`` marks the interim cache emission."""

    payload: T
    is_final: bool = True

    @property
    def is_terminal(self) -> bool:
        return self.is_final


@dataclass(frozen=True, slots=True)
class Error:
    message: str
    presentation: ErrorPresentation = ErrorPresentation.DIALOG

    @property
    def is_terminal(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Empty:
    """Finished without an error and without data."""

    @property
    def is_terminal(self) -> bool:
        return True


RequestState: TypeAlias = Union[Loading, Success[T], Error, Empty]
