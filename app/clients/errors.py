"""Shared error classes for the upstream API clients."""

from __future__ import annotations


class UpstreamError(RuntimeError):
    """Base error for upstream client failures."""

    def __init__(self, message: str, code: str = "UPSTREAM_ERROR", *, source: str = "upstream") -> None:
        super().__init__(message)
        self.code = code
        self.source = source


class UpstreamNotConfiguredError(UpstreamError):
    """Raised when the credential or identity an integration needs is absent."""

    def __init__(self, source: str, message: str | None = None) -> None:
        super().__init__(message or f"{source} integration is not configured", "NOT_CONFIGURED", source=source)


class UpstreamRateLimitError(UpstreamError):
    """Raised when an upstream responds with HTTP 429 or an exhausted quota."""

    def __init__(self, source: str) -> None:
        super().__init__(f"Rate limited by {source}", f"{source.upper()}_429", source=source)


class UpstreamTimeoutError(UpstreamError):
    """Raised when an upstream request times out."""

    def __init__(self, source: str) -> None:
        super().__init__(f"{source} request timed out", f"{source.upper()}_TIMEOUT", source=source)


class UpstreamNotFoundError(UpstreamError):
    """Raised when the upstream has no record for the requested identity."""

    def __init__(self, source: str, message: str | None = None) -> None:
        super().__init__(message or f"{source} resource not found", f"{source.upper()}_NOT_FOUND", source=source)


class UpstreamSchemaError(UpstreamError):
    """Raised when an upstream payload does not match the expected schema."""

    def __init__(self, source: str, message: str | None = None) -> None:
        super().__init__(
            message or f"Unexpected {source} response schema",
            f"{source.upper()}_SCHEMA_ERR",
            source=source,
        )
