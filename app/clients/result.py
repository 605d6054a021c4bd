"""Explicit success/failure wrapper returned by every adapter call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from app.clients.errors import UpstreamError

_T = TypeVar("_T")


@dataclass(frozen=True)
class FetchResult(Generic[_T]):
    """Outcome of an upstream call: a value on success, the error otherwise."""

    value: _T | None = None
    error: UpstreamError | None = None

    @classmethod
    def success(cls, value: _T) -> FetchResult[_T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: UpstreamError) -> FetchResult[_T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_code(self) -> str | None:
        return self.error.code if self.error else None

    def value_or(self, default: _T) -> _T:
        """Return the value, or ``default`` when the call failed."""
        if self.error is not None or self.value is None:
            return default
        return self.value
