"""Blocking client for the AUR RPC endpoint.

`BaseAurClient` holds everything both client flavours share: the endpoint,
URL construction and the derived operations. `AurClient` performs each call
on the calling thread through an `httpx.Client`; see `aur_rpc.aio` for the
asyncio flavour.
"""

from __future__ import annotations

import threading
import weakref
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Iterable

import httpx
from loguru import logger

from aur_rpc.models import PackageDetail, PackageSummary, RelationKind, SearchEnvelope
from aur_rpc.net.http import (
    build_get,
    classify_response,
    decode_envelope,
    response_error,
    transport_error,
)
from aur_rpc.query import (
    DEFAULT_API_VERSION,
    DEFAULT_ENDPOINT,
    build_info_url,
    build_search_url,
    resolve_uri,
)

if TYPE_CHECKING:
    from aur_rpc.config import Settings

__all__ = [
    "AurClient",
    "BaseAurClient",
    "DEFAULT_USER_AGENT",
    "InfoEnvelope",
    "SearchResults",
]

log = logger.bind(module="client")

DEFAULT_USER_AGENT = "aur-rpc"
_MIN_TIMEOUT_SECONDS = 0.1

InfoEnvelope = SearchEnvelope[PackageDetail]
SearchResults = SearchEnvelope[PackageSummary]


class BaseAurClient(ABC):
    """Operations common to the blocking and async clients."""

    def __init__(
        self,
        *,
        endpoint: str = DEFAULT_ENDPOINT,
        version: int = DEFAULT_API_VERSION,
        timeout_seconds: float = 10.0,
        follow_redirects: bool = True,
        user_agent: str | None = DEFAULT_USER_AGENT,
    ) -> None:
        self.endpoint = endpoint
        self.version = int(version)
        self.timeout_seconds = float(timeout_seconds)
        self.follow_redirects = bool(follow_redirects)
        self.user_agent = user_agent

    @classmethod
    def from_settings(cls, settings: "Settings | None" = None, **kwargs: Any):
        """Build a client from host settings; keyword arguments take precedence."""
        if settings is None:
            from aur_rpc.config import get_settings

            settings = get_settings()
        options: dict[str, Any] = {
            "endpoint": settings.endpoint,
            "version": settings.api_version,
            "timeout_seconds": settings.timeout_seconds,
            "follow_redirects": settings.follow_redirects,
            "user_agent": settings.user_agent,
        }
        options.update(kwargs)
        return cls(**options)

    def _client_options(self) -> dict[str, Any]:
        """Keyword arguments for an owned httpx client."""
        headers: dict[str, str] = {}
        if self.user_agent:
            headers["User-Agent"] = self.user_agent
        return {
            "timeout": max(_MIN_TIMEOUT_SECONDS, self.timeout_seconds),
            "follow_redirects": self.follow_redirects,
            "headers": headers,
        }

    def _info_url(self, packages: Iterable[object]) -> httpx.URL:
        text = build_info_url(packages, endpoint=self.endpoint, version=self.version)
        return resolve_uri(text)

    def _search_url(
        self,
        query: str | None,
        *,
        maintainer: str | None = None,
        by: RelationKind | None = None,
    ) -> httpx.URL:
        text = build_search_url(
            query,
            maintainer=maintainer,
            by=by,
            endpoint=self.endpoint,
            version=self.version,
        )
        return resolve_uri(text)

    @abstractmethod
    def info(self, packages: Iterable[object]):
        """Fetch detail records for the named packages."""

    @abstractmethod
    def search(self, query: str | None = None, maintainer: str | None = None):
        """Search by free text, optionally filtered by maintainer."""

    @abstractmethod
    def search_by(self, query: str, by: RelationKind):
        """Search `query` against the field selected by `by`.

        Raises:
            ValueError: `by` is not a `RelationKind` or known relation token.

        Otherwise raises the same errors as `info`.
        """

    def orphans(self):
        """Search for packages without a maintainer."""
        return self.search_by("", RelationKind.MAINTAINER)


class AurClient(BaseAurClient):
    """Blocking RPC client.

    Notes:
        - Pass `http_client` to reuse an existing `httpx.Client`; it is never
          closed by this object.
        - Otherwise a client is built on first use from the timeout/redirect/
          user agent options and released by `close()` (or the context manager).
        - Each call issues exactly one GET and never retries.
    """

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
        **options: Any,
    ) -> None:
        super().__init__(**options)
        self.transport = transport
        self._client: httpx.Client | None = http_client
        self._owns_client = http_client is None
        self._finalizer: weakref.finalize | None = None
        self._lock = threading.Lock()

    def open(self) -> None:
        """Create the owned `httpx.Client` if there is none yet."""
        with self._lock:
            if self._client is not None:
                return
            kwargs = self._client_options()
            if self.transport is not None:
                kwargs["transport"] = self.transport
            self._client = httpx.Client(**kwargs)
            log.debug("Opened owned httpx client for {}", self.endpoint)
            # Ensure we don't leak open pools if callers forget to close explicitly.
            self._finalizer = weakref.finalize(self, self._client.close)

    def close(self) -> None:
        """Close the owned `httpx.Client`, if any."""
        with self._lock:
            if self._finalizer is not None:
                self._finalizer.detach()
                self._finalizer = None
            if not self._owns_client or self._client is None:
                return
            self._client.close()
            self._client = None

    def __enter__(self) -> "AurClient":
        self.open()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    def info(self, packages: Iterable[object]) -> InfoEnvelope:
        """Fetch detail records for the named packages.

        Raises:
            FormatError: A package name could not be formatted.
            UriError: The assembled URL is not a valid absolute URI.
            TransportError: The HTTP exchange failed.
            BadRequestError: The service answered 400.
            InvalidRequestError: The service answered anything else but 200.
            DecodeError: The body does not match the envelope schema.
        """
        return self._call(self._info_url(packages), InfoEnvelope)

    def search(self, query: str | None = None, maintainer: str | None = None) -> SearchResults:
        """Search by free text and/or maintainer; None parameters are not sent.

        Raises the same errors as `info`.
        """
        return self._call(self._search_url(query, maintainer=maintainer), SearchResults)

    def search_by(self, query: str, by: RelationKind) -> SearchResults:
        """Search `query` against the field selected by `by`.

        Raises:
            ValueError: `by` is not a `RelationKind` or known relation token.

        Otherwise raises the same errors as `info`.
        """
        return self._call(self._search_url(query, by=by), SearchResults)

    def _call(self, url: httpx.URL, model: type[SearchEnvelope[Any]]) -> Any:
        self.open()
        assert self._client is not None
        request = build_get(self._client, url)
        try:
            response = self._client.send(request, stream=True)
            try:
                error_kind = classify_response(response)
                response.read()
            finally:
                response.close()
        except httpx.RequestError as exc:
            raise transport_error(exc) from exc
        if error_kind is not None:
            raise response_error(error_kind, response)
        return decode_envelope(response.content, model)
