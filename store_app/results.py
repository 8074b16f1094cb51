"""
Success/failure contract shared by the API client and the store.

Every remote call made by the store is folded into a :class:`Result`.
The call site then decides how to surface a failure: read operations
record a human-readable message on the store, write operations call
:meth:`Result.unwrap` to re-raise the original error to their caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Coarse classification of a failed remote call."""

    TIMEOUT = "timeout"
    NETWORK = "network"
    HTTP = "http"
    DECODE = "decode"


class ApiError(Exception):
    """
    Raised by the API client when a request cannot be completed.

    Attributes:
        kind: Category of the failure (see ``ErrorKind``).
        message: Human-readable detail, taken from the server body when
            one was returned.
        status_code: HTTP status for ``ErrorKind.HTTP`` failures,
            otherwise ``None``.
    """

    def __init__(self, kind: ErrorKind, message: str, status_code: int | None = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.kind.value} error ({self.status_code}): {self.message}"
        return f"{self.kind.value} error: {self.message}"


@dataclass(frozen=True, slots=True)
class Failure:
    """Tagged failure carried by an unsuccessful :class:`Result`."""

    kind: ErrorKind
    message: str
    error: BaseException | None = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> Failure:
        """
        Classify an exception raised while talking to the API.

        ``ApiError`` keeps its own kind; anything else (typically a
        malformed row rejected by a model parser) is a decode failure.
        """
        if isinstance(exc, ApiError):
            return cls(kind=exc.kind, message=exc.message, error=exc)
        return cls(kind=ErrorKind.DECODE, message=str(exc) or type(exc).__name__, error=exc)


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """Either a value or a :class:`Failure`, never both."""

    value: Any = None
    failure: Failure | None = None

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failed(cls, failure: Failure) -> Result[T]:
        return cls(failure=failure)

    @property
    def ok(self) -> bool:
        return self.failure is None

    def unwrap(self) -> T:
        """
        Return the value, or re-raise the error behind the failure.

        Raises:
            ApiError: The captured ``ApiError`` itself, or a fresh one built
                from the failure and chained to the captured exception
                (e.g. a row that failed to parse).
        """
        if self.failure is None:
            return self.value
        if isinstance(self.failure.error, ApiError):
            raise self.failure.error
        raise ApiError(self.failure.kind, self.failure.message) from self.failure.error
