from __future__ import annotations

import json

import httpx
import pytest

from app.infrastructure.external.notion.notion_client import NotionClient, NotionCredentials
from app.shared.exceptions.domain import NotionApiException

from notion_fakes import entry


def _client(handler) -> NotionClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return NotionClient(
        NotionCredentials(token="secret_abc", notion_version="2022-06-28"),
        base_url="https://api.notion.test/v1/",
        http_client=http,
    )


@pytest.mark.asyncio
async def test_search_sends_headers_and_database_filter() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"results": [{"object": "database", "id": "db-1"}]})

    async with _client(handler) as client:
        results = await client.search("CompX Fairness Indicator")

    assert results == [{"object": "database", "id": "db-1"}]
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.notion.test/v1/search"
    assert request.headers["Authorization"] == "Bearer secret_abc"
    assert request.headers["Notion-Version"] == "2022-06-28"
    assert json.loads(request.content) == {
        "query": "CompX Fairness Indicator",
        "filter": {"value": "database", "property": "object"},
    }


@pytest.mark.asyncio
async def test_query_database_follows_cursor_and_drops_partial_objects() -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        bodies.append(body)
        if "start_cursor" not in body:
            return httpx.Response(
                200,
                json={
                    "results": [
                        {"object": "page", "id": "p1", "properties": entry()},
                        {"object": "page", "id": "partial"},
                    ],
                    "has_more": True,
                    "next_cursor": "cur-2",
                },
            )
        return httpx.Response(
            200,
            json={"results": [{"object": "page", "id": "p2", "properties": entry()}], "has_more": False, "next_cursor": None},
        )

    query_filter = {"and": [{"property": "State", "select": {"is_not_empty": True}}]}
    async with _client(handler) as client:
        pages = await client.query_database("db-1", filter=query_filter)

    assert [p.page_id for p in pages] == ["p1", "p2"]
    assert bodies[0]["filter"] == query_filter
    assert bodies[1]["start_cursor"] == "cur-2"


@pytest.mark.asyncio
async def test_update_page_patches_properties() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"object": "page", "id": "p1"})

    props = {"Status": {"status": {"name": "Evaluation Complete!"}}}
    async with _client(handler) as client:
        response = await client.update_page("p1", props)

    assert response["id"] == "p1"
    assert seen[0].method == "PATCH"
    assert seen[0].url.path == "/v1/pages/p1"
    assert json.loads(seen[0].content) == {"properties": props}


@pytest.mark.asyncio
async def test_non_2xx_raises_notion_api_exception() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"code": "unauthorized"})

    async with _client(handler) as client:
        with pytest.raises(NotionApiException) as exc_info:
            await client.search("x")

    assert exc_info.value.upstream_status == 401
    assert exc_info.value.status_code == 502
    assert "401" in exc_info.value.message


@pytest.mark.asyncio
async def test_transport_error_raises_notion_api_exception() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(NotionApiException, match="connection refused"):
            await client.search("x")


@pytest.mark.asyncio
async def test_non_json_success_body_raises_notion_api_exception() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>gateway</html>")

    async with _client(handler) as client:
        with pytest.raises(NotionApiException) as exc_info:
            await client.search("x")

    assert exc_info.value.status_code == 502
    assert exc_info.value.upstream_status == 200
