"""Shared HTTP helpers built on top of httpx.

Both client flavours issue a single streamed GET, classify the status line
with `classify_response`, then either raise the classified error or decode
the body with `decode_envelope`. Only the waiting differs between them.
"""

from __future__ import annotations

from typing import TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from aur_rpc.errors import (
    AurError,
    BadRequestError,
    DecodeError,
    InvalidRequestError,
    TransportError,
)

__all__ = [
    "build_get",
    "classify_response",
    "decode_envelope",
    "response_error",
    "transport_error",
]

log = logger.bind(module="net.http")

_MAX_ERROR_TEXT_CHARS = 2048

ModelT = TypeVar("ModelT", bound=BaseModel)
ErrorKind = type[BadRequestError] | type[InvalidRequestError]


def _truncate(text: str, *, limit: int) -> str:
    """Return a truncated string with an ellipsis when needed."""
    if limit <= 0:
        return ""
    if len(text) <= limit:
        return text
    head = text[: max(0, limit - 3)].rstrip()
    return f"{head}..."


def _safe_response_text(response: httpx.Response) -> str:
    """Best-effort extraction of response text for error messages.

    The returned value is trimmed and truncated to keep logs readable.
    """
    try:
        text = (response.text or "").strip()
    except Exception:
        try:
            text = response.content.decode("utf-8", errors="replace").strip()
        except Exception:
            text = ""
    return _truncate(text, limit=_MAX_ERROR_TEXT_CHARS)


def build_get(client: httpx.Client | httpx.AsyncClient, url: httpx.URL) -> httpx.Request:
    """Build the GET request (empty body) for a resolved RPC URL."""
    log.debug("GET {}", url)
    return client.build_request("GET", url, headers={"Accept": "application/json"})


def classify_response(response: httpx.Response) -> ErrorKind | None:
    """Map a status code to the error it raises, or None for 200.

    Only the status line is inspected, so this can run before the body is read.
    """
    if response.status_code == httpx.codes.OK:
        return None
    log.warning("RPC call to {} answered {}", response.request.url, response.status_code)
    if response.status_code == httpx.codes.BAD_REQUEST:
        return BadRequestError
    return InvalidRequestError


def response_error(kind: ErrorKind, response: httpx.Response) -> AurError:
    """Build a classified error once the response body has been read."""
    default = "Bad request" if kind is BadRequestError else "Invalid request"
    return kind(_safe_response_text(response) or default, response)


def transport_error(exc: httpx.RequestError) -> TransportError:
    return TransportError(f"HTTP request failed: {exc}")


def decode_envelope(content: bytes, model: type[ModelT]) -> ModelT:
    """Decode a UTF-8 JSON body into `model`.

    Raises:
        DecodeError: When the body is not JSON or does not match the schema.
    """
    try:
        return model.model_validate_json(content)
    except ValidationError as exc:
        raise DecodeError(f"Invalid response body: {exc}") from exc
