from __future__ import annotations

import asyncio

import httpx
import pytest

from aur_rpc.aio import AsyncAurClient
from aur_rpc.errors import BadRequestError, DecodeError, InvalidRequestError, TransportError, UriError
from aur_rpc.models import PackageDetail, RelationKind


def _client(handler, **options) -> AsyncAurClient:
    return AsyncAurClient(transport=httpx.MockTransport(handler), **options)


def test_info_resolves_to_decoded_envelope(info_body: bytes) -> None:
    seen: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=info_body, request=request)

    async def run():
        async with _client(handler) as client:
            return await client.info(["yay", "paru"])

    result = asyncio.run(run())
    assert len(seen) == 1
    assert seen[0].method == "GET"
    assert seen[0].url.params.get_list("arg[]") == ["yay", "paru"]
    assert isinstance(result.results[0], PackageDetail)
    assert result.result_count == 1


def test_search_by_and_orphans(make_envelope) -> None:
    params: list[dict[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        params.append(dict(request.url.params))
        return httpx.Response(200, content=make_envelope([], query_type="search"), request=request)

    async def run() -> None:
        async with _client(handler) as client:
            await client.search_by("rust", RelationKind.NAME)
            await client.orphans()
            await client.search(None, maintainer="jguer")

    asyncio.run(run())
    assert params == [
        {"v": "5", "type": "search", "arg": "rust", "by": "name"},
        {"v": "5", "type": "search", "arg": "", "by": "maintainer"},
        {"v": "5", "type": "search", "maintainer": "jguer"},
    ]


def test_status_classification_matches_blocking_client() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        status = 400 if request.url.params.get("arg") == "bad" else 503
        return httpx.Response(status, content=b"nope", request=request)

    async def run() -> None:
        async with _client(handler) as client:
            with pytest.raises(BadRequestError) as bad:
                await client.search("bad")
            assert bad.value.response.text == "nope"
            with pytest.raises(InvalidRequestError) as invalid:
                await client.search("down")
            assert invalid.value.status_code == 503

    asyncio.run(run())


def test_malformed_body_raises_decode_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>", request=request)

    async def run() -> None:
        async with _client(handler) as client:
            await client.info(["yay"])

    with pytest.raises(DecodeError):
        asyncio.run(run())


def test_connection_failure_raises_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    async def run() -> None:
        async with _client(handler) as client:
            await client.info(["yay"])

    with pytest.raises(TransportError, match="timed out"):
        asyncio.run(run())


def test_invalid_endpoint_raises_uri_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover - must not run
        raise AssertionError("request should not be sent")

    async def run() -> None:
        async with _client(handler, endpoint="/relative/rpc/") as client:
            await client.search("yay")

    with pytest.raises(UriError):
        asyncio.run(run())


def test_cancellation_aborts_without_result(search_body: bytes) -> None:
    started = asyncio.Event()
    completed: list[object] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        started.set()
        await asyncio.sleep(3600)
        return httpx.Response(200, content=search_body, request=request)  # pragma: no cover

    async def run() -> None:
        async with _client(handler) as client:
            task = asyncio.create_task(client.search("yay"))
            task.add_done_callback(lambda t: completed.append(t.cancelled()))
            await started.wait()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

    asyncio.run(run())
    assert completed == [True]


def test_injected_async_client_is_left_open(search_body: bytes) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=search_body, request=request)

    async def run() -> bool:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        async with AsyncAurClient(http) as client:
            await client.search("yay")
        still_open = not http.is_closed
        await http.aclose()
        return still_open

    assert asyncio.run(run()) is True
