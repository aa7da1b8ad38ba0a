"""Tests for the Watchmode availability resolver."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from app.config import Settings
from app.services.watchmode import WatchmodeClient


def build_settings(**overrides: Any) -> Settings:
    base: dict[str, Any] = {"WATCHMODE_API_KEY": "wm-key", "_env_file": None}
    base.update(overrides)
    return Settings(**base)  # type: ignore[arg-type]


def _client(handler, **overrides: Any) -> tuple[httpx.AsyncClient, WatchmodeClient]:
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="https://watchmode.example.com/v1"
    )
    return http_client, WatchmodeClient(build_settings(**overrides), http_client)


@pytest.mark.anyio("asyncio")
async def test_resolve_sources_dedupes_and_caps_services() -> None:
    """Rent and buy offers for the same service collapse into one name."""

    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path.endswith("/search/"):
            return httpx.Response(200, json={"title_results": [{"id": 1234}]})
        return httpx.Response(
            200,
            json=[
                {"name": "Apple TV", "type": "rent"},
                {"name": "Apple TV", "type": "buy"},
                {"name": "Netflix", "type": "sub"},
                {"name": "Tubi", "type": "free"},
                {"name": "Cable", "type": "tve"},
                {"name": "Vudu", "type": "buy"},
                {"name": "Prime Video", "type": "rent"},
                {"name": "Google Play", "type": "buy"},
            ],
        )

    http_client, client = _client(handler)
    async with http_client:
        services = await client.resolve_sources(550)

    assert services == ["Apple TV", "Netflix", "Tubi", "Vudu", "Prime Video"]
    search_params = requests[0].url.params
    assert search_params["apiKey"] == "wm-key"
    assert search_params["search_field"] == "tmdb_id"
    assert search_params["search_value"] == "550"
    assert search_params["types"] == "movie"
    assert requests[1].url.path == "/v1/title/1234/sources/"


@pytest.mark.anyio("asyncio")
async def test_resolve_sources_without_key_skips_requests() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={})

    http_client, client = _client(handler, WATCHMODE_API_KEY=None)
    async with http_client:
        assert await client.resolve_sources(550) == []

    assert requests == []


@pytest.mark.anyio("asyncio")
async def test_resolve_sources_unknown_title_is_empty() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"title_results": []})

    http_client, client = _client(handler)
    async with http_client:
        assert await client.resolve_sources(550) == []

    assert len(requests) == 1


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize("status", [401, 500])
async def test_resolve_sources_error_status_is_empty(status: int) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/search/"):
            return httpx.Response(200, json={"title_results": [{"id": 9}]})
        return httpx.Response(status, json={"error": "nope"})

    http_client, client = _client(handler)
    async with http_client:
        assert await client.resolve_sources(550) == []


@pytest.mark.anyio("asyncio")
async def test_resolve_sources_transport_error_is_empty() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    http_client, client = _client(handler)
    async with http_client:
        assert await client.resolve_sources(550) == []


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize(
    "search_payload",
    [{"title_results": {"id": 1}}, {"title_results": "1"}, ["unexpected"]],
)
async def test_resolve_sources_malformed_search_is_empty(search_payload: Any) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=search_payload)

    http_client, client = _client(handler)
    async with http_client:
        assert await client.resolve_sources(5) == []

    assert len(requests) == 1


@pytest.mark.anyio("asyncio")
async def test_resolve_sources_ignores_malformed_offer_types() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/search/"):
            return httpx.Response(200, json={"title_results": [{"id": 9}]})
        return httpx.Response(
            200,
            json=[
                {"name": "Odd", "type": ["sub"]},
                {"name": "Weird", "type": {"kind": "free"}},
                "not-a-source",
                {"name": "Netflix", "type": "sub"},
            ],
        )

    http_client, client = _client(handler)
    async with http_client:
        assert await client.resolve_sources(5) == ["Netflix"]
