"""Outcome types returned by every provider client."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")

_BAD_GATEWAY = 502
_BAD_REQUEST = 400


class ErrorKind(StrEnum):
    """Category of a failed provider call."""

    INVALID_INPUT = "invalid_input"
    UPSTREAM_STATUS = "upstream_status"
    TRANSPORT = "transport"
    MALFORMED = "malformed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ProviderError:
    """Why a provider call produced no value."""

    provider: str
    kind: ErrorKind
    message: str
    status_code: int | None = None

    @property
    def http_status(self) -> int:
        """Status code to report when surfacing this error over HTTP."""
        if self.kind == ErrorKind.INVALID_INPUT:
            return _BAD_REQUEST
        if self.status_code is not None and self.status_code >= _BAD_REQUEST:
            return self.status_code
        return _BAD_GATEWAY


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful provider call. An empty value means the provider found nothing."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap_or(self, default: T) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed provider call."""

    error: ProviderError

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap_or(self, default: T) -> T:
        return default


Result = Ok[T] | Err
