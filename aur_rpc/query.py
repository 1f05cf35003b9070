"""Query-string construction and URL validation for the RPC endpoint.

Both client flavours build their request URLs through this module, so the
query strings they send are identical byte for byte.
"""

from __future__ import annotations

from typing import Final, Iterable
from urllib.parse import quote

import httpx

from aur_rpc.errors import FormatError, UriError
from aur_rpc.models import RelationKind

__all__ = [
    "DEFAULT_API_VERSION",
    "DEFAULT_ENDPOINT",
    "build_info_url",
    "build_search_url",
    "resolve_uri",
]

DEFAULT_ENDPOINT: Final[str] = "https://aur.archlinux.org/rpc/"
DEFAULT_API_VERSION: Final[int] = 5

_ALLOWED_SCHEMES: Final[frozenset[str]] = frozenset({"http", "https"})


def _stringify(value: object) -> str:
    try:
        text = str(value)
    except Exception as exc:
        raise FormatError(f"Cannot format query value {type(value).__name__}: {exc}") from exc
    if not isinstance(text, str):
        raise FormatError(f"Query value {type(value).__name__} did not format to text.")
    return text


def _encode_pair(key: str, value: object) -> str:
    text = _stringify(value)
    try:
        encoded = quote(text, safe="")
    except UnicodeEncodeError as exc:
        raise FormatError(f"Cannot percent-encode query value {text!r}: {exc}") from exc
    return f"{quote(key, safe='[]')}={encoded}"


def _compose(endpoint: str, version: int, pairs: Iterable[tuple[str, object]]) -> str:
    base = _stringify(endpoint).strip()
    parts = [_encode_pair("v", version)]
    parts.extend(_encode_pair(key, value) for key, value in pairs)
    separator = "&" if "?" in base else "?"
    return f"{base}{separator}{'&'.join(parts)}"


def build_info_url(
    packages: Iterable[object],
    *,
    endpoint: str = DEFAULT_ENDPOINT,
    version: int = DEFAULT_API_VERSION,
) -> str:
    """Return the URL for an info request.

    Every package becomes one `arg[]` parameter, in input order and without
    de-duplication. An empty iterable yields a query with no `arg[]` at all.

    Raises:
        TypeError: `packages` is a single str or bytes rather than a collection.
        FormatError: A package name could not be formatted.
    """
    if isinstance(packages, (str, bytes)):
        raise TypeError("packages must be a collection of names, not a single string.")
    pairs: list[tuple[str, object]] = [("type", "info")]
    pairs.extend(("arg[]", package) for package in packages)
    return _compose(endpoint, version, pairs)


def build_search_url(
    query: str | None = None,
    *,
    maintainer: str | None = None,
    by: RelationKind | str | None = None,
    endpoint: str = DEFAULT_ENDPOINT,
    version: int = DEFAULT_API_VERSION,
) -> str:
    """Return the URL for a search request.

    Parameters left as None are omitted from the query string entirely. An
    empty string is still sent (as `arg=`), which is how orphan searches are
    expressed.

    Raises:
        ValueError: `by` is not a known relation token.
        FormatError: A parameter could not be formatted.
    """
    pairs: list[tuple[str, object]] = [("type", "search")]
    if query is not None:
        pairs.append(("arg", query))
    if by is not None:
        pairs.append(("by", RelationKind(by).value))
    if maintainer is not None:
        pairs.append(("maintainer", maintainer))
    return _compose(endpoint, version, pairs)


def resolve_uri(text: str) -> httpx.URL:
    """Parse an assembled URL, rejecting anything that is not absolute http(s)."""
    try:
        url = httpx.URL(text)
    except httpx.InvalidURL as exc:
        raise UriError(f"Invalid request URL {text!r}: {exc}") from exc
    if url.scheme not in _ALLOWED_SCHEMES:
        raise UriError(f"Invalid request URL {text!r}: scheme must be http or https.")
    if not url.host:
        raise UriError(f"Invalid request URL {text!r}: host is empty.")
    return url
