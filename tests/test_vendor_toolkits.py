from __future__ import annotations

import json

import httpx
import pytest

from toolkit_dev.config import ImageConfig
from toolkit_dev.errors import MissingCredentialError
from toolkit_dev.tools.executor import execute_tool
from toolkit_dev.tools.types import ToolFailureClass
from toolkit_dev.toolkits.registry import get_server_toolkit
from toolkit_dev.toolkits.types import ToolkitContext


def _context(accounts, handler, **kwargs) -> ToolkitContext:
    return ToolkitContext(accounts=accounts, transport=httpx.MockTransport(handler), **kwargs)


class TestGithubToolkit:
    @pytest.mark.asyncio
    async def test_search_repos(self, accounts) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "total_count": 1,
                    "items": [
                        {
                            "full_name": "octo/hello",
                            "html_url": "https://github.com/octo/hello",
                            "stargazers_count": 42,
                            "description": None,
                            "owner": {"login": "octo"},
                        }
                    ],
                },
            )

        tools = await get_server_toolkit("github").get_tools({}, _context(accounts, handler))
        result = await execute_tool(tools["search-repos"], {"query": "hello"})

        assert result.ok is True
        assert result.result["repositories"][0]["full_name"] == "octo/hello"
        assert result.message == "Found 1 repositories"
        assert seen[0].url.path == "/search/repositories"
        assert seen[0].url.params["q"] == "hello"
        assert seen[0].headers["authorization"] == "Bearer github-token"

    @pytest.mark.asyncio
    async def test_upstream_error_is_a_tool_failure(self, accounts) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"message": "Not Found"})

        tools = await get_server_toolkit("github").get_tools({}, _context(accounts, handler))
        result = await execute_tool(tools["get-user-data"], {"username": "ghost"})

        assert result.ok is False
        assert result.failure_class == ToolFailureClass.TOOL_UPSTREAM_ERROR
        assert "GitHub returned 404 for GET /users/ghost" in result.failure_message


class TestSpotifyToolkit:
    @pytest.mark.asyncio
    async def test_get_playlists(self, accounts) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["limit"] == "5"
            return httpx.Response(
                200,
                json={
                    "items": [
                        {
                            "id": "p1",
                            "name": "Focus",
                            "external_urls": {"spotify": "https://open.spotify.com/playlist/p1"},
                            "images": [{"url": "https://img/p1.jpg"}],
                        }
                    ]
                },
            )

        tools = await get_server_toolkit("spotify").get_tools({}, _context(accounts, handler))
        result = await execute_tool(tools["get-playlists"], {"limit": 5})

        assert result.result == {
            "playlists": [
                {
                    "id": "p1",
                    "name": "Focus",
                    "url": "https://open.spotify.com/playlist/p1",
                    "image": "https://img/p1.jpg",
                }
            ]
        }
        assert result.message == "Found 1 playlists"


class TestTwitterToolkit:
    @pytest.mark.asyncio
    async def test_search_joins_authors(self, accounts) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/2/tweets/search/recent"
            return httpx.Response(
                200,
                json={
                    "data": [{"id": "t1", "text": "hello", "author_id": "u1"}],
                    "includes": {"users": [{"id": "u1", "username": "jack", "name": "Jack"}]},
                    "meta": {"next_token": "abc"},
                },
            )

        tools = await get_server_toolkit("twitter").get_tools({}, _context(accounts, handler))
        result = await execute_tool(tools["search-tweets"], {"query": "hello"})

        assert result.ok is True
        assert result.result["tweets"][0]["author_username"] == "jack"
        assert result.result["next_token"] == "abc"

    @pytest.mark.asyncio
    async def test_errors_are_prefixed(self, accounts) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, text="slow down")

        tools = await get_server_toolkit("twitter").get_tools({}, _context(accounts, handler))
        result = await execute_tool(tools["get-user"], {"username": "@jack"})

        assert result.ok is False
        assert result.failure_message.startswith("Failed to get user: Twitter returned 429")


class TestImageToolkit:
    @pytest.mark.asyncio
    async def test_requires_api_key(self, accounts) -> None:
        ctx = ToolkitContext(accounts=accounts, image=ImageConfig(api_base="https://img.test/v1", api_key=""))
        with pytest.raises(MissingCredentialError, match="TOOLKIT_IMAGE_API_KEY"):
            await get_server_toolkit("image").get_tools({}, ctx)

    @pytest.mark.asyncio
    async def test_generate_returns_data_url_for_b64(self, accounts) -> None:
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"data": [{"b64_json": "AAAA"}]})

        ctx = _context(
            accounts,
            handler,
            image=ImageConfig(api_base="https://img.test/v1", api_key="sk-test"),
        )
        tools = await get_server_toolkit("image").get_tools({"model": "openai:gpt-image-1"}, ctx)
        result = await execute_tool(tools["generate"], {"prompt": "a red fox"})

        assert result.result == {"url": "data:image/png;base64,AAAA"}
        assert bodies[0]["model"] == "gpt-image-1"
