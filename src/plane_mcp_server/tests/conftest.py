"""Pytest configuration for Plane MCP server tests.

Provides a fake Plane backend plus client, dispatcher and handler
fixtures wired to it.

Usage::

    pytest
"""

import httpx
import pytest

from plane_mcp_server.client import PlaneApiClient
from plane_mcp_server.mcp import McpMethodHandler, ToolDispatcher
from plane_mcp_server.tests.fakes import (
    API_KEY,
    BASE_URL,
    WORKSPACE_SLUG,
    FakePlaneBackend,
)


@pytest.fixture
def backend() -> FakePlaneBackend:
    return FakePlaneBackend()


@pytest.fixture
def plane_client(backend: FakePlaneBackend) -> PlaneApiClient:
    """Client bound to the fake backend (base URL given with a trailing slash)."""
    return PlaneApiClient(
        api_key=API_KEY,
        base_url=f"{BASE_URL}/",
        workspace_slug=WORKSPACE_SLUG,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(backend)),
    )


@pytest.fixture
def dispatcher(plane_client: PlaneApiClient) -> ToolDispatcher:
    return ToolDispatcher(plane_client)


@pytest.fixture
def mcp_handler(dispatcher: ToolDispatcher) -> McpMethodHandler:
    return McpMethodHandler(dispatcher)


@pytest.fixture
def plane_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set the required Plane environment variables."""
    monkeypatch.setenv("PLANE_API_KEY", API_KEY)
    monkeypatch.setenv("PLANE_BASE_URL", f"{BASE_URL}/")
    monkeypatch.setenv("PLANE_WORKSPACE_SLUG", WORKSPACE_SLUG)
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("HOST", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
