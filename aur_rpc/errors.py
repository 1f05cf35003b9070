"""Error taxonomy for AUR RPC calls.

Every failure a call can produce is one of the classes below. Both the
blocking and the async client raise exactly the same types for the same
conditions, so callers can share their `except` clauses between them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

__all__ = [
    "AurError",
    "BadRequestError",
    "DecodeError",
    "FormatError",
    "InvalidRequestError",
    "TransportError",
    "UriError",
]


class AurError(RuntimeError):
    """Base class for all errors raised by the RPC clients."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = str(message)
        self.status_code = int(status_code) if status_code is not None else None

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (status={self.status_code})"


class FormatError(AurError):
    """Raised when the query string itself cannot be composed."""


class UriError(AurError):
    """Raised when the assembled request URL is not a valid absolute URI."""


class TransportError(AurError):
    """Raised when the HTTP client fails to complete the exchange."""


class _ResponseError(AurError):
    def __init__(self, message: str, response: "httpx.Response") -> None:
        super().__init__(message, status_code=response.status_code)
        self.response = response


class BadRequestError(_ResponseError):
    """The service answered 400. `response` holds the raw reply."""


class InvalidRequestError(_ResponseError):
    """The service answered with a status other than 200 or 400."""


class DecodeError(AurError):
    """Raised when a 200 body is not JSON or does not match the envelope schema."""
