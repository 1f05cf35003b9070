"""asyncio client for the AUR RPC endpoint.

`AsyncAurClient` mirrors `AurClient` method for method. Each operation is a
coroutine: it suspends while the connection is established, while waiting
for the status line and while the body streams in. Cancelling the awaiting
task aborts the exchange; nothing is decoded or returned afterwards.
"""

from __future__ import annotations

from typing import Any, Iterable

import httpx
from loguru import logger

from aur_rpc.client import BaseAurClient, InfoEnvelope, SearchResults
from aur_rpc.models import RelationKind, SearchEnvelope
from aur_rpc.net.http import (
    build_get,
    classify_response,
    decode_envelope,
    response_error,
    transport_error,
)

__all__ = ["AsyncAurClient"]

log = logger.bind(module="aio")


class AsyncAurClient(BaseAurClient):
    """Async RPC client backed by an `httpx.AsyncClient`.

    An injected `http_client` is left open by `aclose()`; a client built here
    is owned and closed by it (or by `async with`).
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        **options: Any,
    ) -> None:
        super().__init__(**options)
        self.transport = transport
        self._client: httpx.AsyncClient | None = http_client
        self._owns_client = http_client is None

    def open(self) -> None:
        if self._client is not None:
            return
        kwargs = self._client_options()
        if self.transport is not None:
            kwargs["transport"] = self.transport
        self._client = httpx.AsyncClient(**kwargs)
        log.debug("Opened owned httpx async client for {}", self.endpoint)

    async def aclose(self) -> None:
        """Close the owned `httpx.AsyncClient`, if any."""
        if not self._owns_client or self._client is None:
            return
        await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "AsyncAurClient":
        self.open()
        return self

    async def __aexit__(self, exc_type: object, exc: object, tb: object) -> None:
        await self.aclose()

    async def info(self, packages: Iterable[object]) -> InfoEnvelope:
        """Fetch detail records for the named packages.

        Raises the same errors, for the same conditions, as `AurClient.info`.
        """
        return await self._call(self._info_url(packages), InfoEnvelope)

    async def search(self, query: str | None = None, maintainer: str | None = None) -> SearchResults:
        return await self._call(self._search_url(query, maintainer=maintainer), SearchResults)

    async def search_by(self, query: str, by: RelationKind) -> SearchResults:
        """Search `query` against the field selected by `by`.

        Raises:
            ValueError: `by` is not a `RelationKind` or known relation token.

        Otherwise raises the same errors as `AurClient.info`.
        """
        return await self._call(self._search_url(query, by=by), SearchResults)

    async def _call(self, url: httpx.URL, model: type[SearchEnvelope[Any]]) -> Any:
        self.open()
        assert self._client is not None
        request = build_get(self._client, url)
        try:
            response = await self._client.send(request, stream=True)
            try:
                error_kind = classify_response(response)
                await response.aread()
            finally:
                await response.aclose()
        except httpx.RequestError as exc:
            raise transport_error(exc) from exc
        if error_kind is not None:
            raise response_error(error_kind, response)
        return decode_envelope(response.content, model)
