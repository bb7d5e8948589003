"""Unit tests for the Plane REST client.

All HTTP traffic goes through ``httpx.MockTransport`` (see
``FakePlaneBackend`` in ``fakes``) so no Plane instance is required.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, PropertyMock

import httpx
import pytest

from plane_mcp_server.client import (
    PlaneApiClient,
    PlaneApiError,
    PlaneHttpError,
    PlaneTransportError,
)
from plane_mcp_server.config import PlaneConfig
from plane_mcp_server.models import (
    CommentCreate,
    IssueCreate,
    IssueUpdate,
    PlaneIssue,
    PlaneWorkspace,
)
from plane_mcp_server.tests.fakes import (
    API_KEY,
    BASE_URL,
    PROJECTS_PATH,
    WORKSPACE_SLUG,
)

ISSUE = {
    "id": "i1",
    "name": "Login fails",
    "state": "s1",
    "priority": "high",
    "assignees": ["u1"],
    "labels": [],
    "sequence_id": 42,
}


# ============================================================================
# Request construction
# ============================================================================


class TestRequestConstruction:
    """Tests for URLs, headers and bodies built by the client."""

    @pytest.mark.asyncio
    async def test_get_workspace_url_and_headers(self, backend, plane_client):
        backend.add("GET", f"/api/v1/workspaces/{WORKSPACE_SLUG}/", {"id": "w1"})

        await plane_client.get_workspace()

        request = backend.last_request
        assert str(request.url) == f"{BASE_URL}/api/v1/workspaces/{WORKSPACE_SLUG}/"
        assert request.headers["X-API-Key"] == API_KEY
        assert request.headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_get_sends_no_body(self, backend, plane_client):
        backend.add("GET", f"{PROJECTS_PATH}/p1/issues/i1/", ISSUE)

        await plane_client.get_issue("p1", "i1")

        assert backend.last_request.content == b""

    @pytest.mark.asyncio
    async def test_create_issue_sends_only_set_fields(self, backend, plane_client):
        backend.add("POST", f"{PROJECTS_PATH}/p1/issues/", ISSUE, status_code=201)

        await plane_client.create_issue(
            "p1", IssueCreate(name="Login fails", priority="high")
        )

        assert backend.last_request.method == "POST"
        assert backend.last_json_body() == {"name": "Login fails", "priority": "high"}

    @pytest.mark.asyncio
    async def test_update_issue_uses_patch(self, backend, plane_client):
        backend.add("PATCH", f"{PROJECTS_PATH}/p1/issues/i1/", ISSUE)

        await plane_client.update_issue("p1", "i1", IssueUpdate(state_id="s2"))

        assert backend.last_request.method == "PATCH"
        assert backend.last_json_body() == {"state_id": "s2"}

    @pytest.mark.asyncio
    async def test_add_issue_comment_body(self, backend, plane_client):
        backend.add(
            "POST",
            f"{PROJECTS_PATH}/p1/issues/i1/comments/",
            {"id": "c1", "comment_html": "<p>hi</p>"},
        )

        comment = await plane_client.add_issue_comment(
            "p1", "i1", CommentCreate(comment_html="<p>hi</p>")
        )

        assert backend.last_json_body() == {"comment_html": "<p>hi</p>"}
        assert comment.id == "c1"


# ============================================================================
# list_issues filters
# ============================================================================


class TestListIssuesFilters:
    """Tests for query-string construction in list_issues."""

    @pytest.mark.asyncio
    async def test_filters_in_insertion_order(self, backend, plane_client):
        backend.add("GET", f"{PROJECTS_PATH}/p1/issues/", {"results": []})

        await plane_client.list_issues("p1", {"state_id": "s1", "priority": "high"})

        assert "state_id=s1&priority=high" in str(backend.last_request.url)

    @pytest.mark.asyncio
    async def test_none_values_are_dropped(self, backend, plane_client):
        backend.add("GET", f"{PROJECTS_PATH}/p1/issues/", {"results": []})

        await plane_client.list_issues(
            "p1", {"state_id": "s1", "priority": None, "search": None}
        )

        url = str(backend.last_request.url)
        assert "state_id=s1" in url
        assert "priority" not in url
        assert "search" not in url
        assert "None" not in url

    @pytest.mark.asyncio
    async def test_no_filters_means_no_query_string(self, backend, plane_client):
        backend.add("GET", f"{PROJECTS_PATH}/p1/issues/", {"results": []})

        await plane_client.list_issues("p1")

        assert backend.last_request.url.query == b""

    @pytest.mark.asyncio
    async def test_integral_float_limit_sent_as_int(self, backend, plane_client):
        backend.add("GET", f"{PROJECTS_PATH}/p1/issues/", {"results": []})

        await plane_client.list_issues("p1", {"limit": 25.0})

        assert "limit=25" in str(backend.last_request.url)
        assert "25.0" not in str(backend.last_request.url)


# ============================================================================
# Responses
# ============================================================================


class TestResponses:
    """Tests for response decoding and the list envelope."""

    @pytest.mark.asyncio
    async def test_list_unwraps_envelope(self, backend, plane_client):
        backend.add(
            "GET",
            "/api/v1/workspaces/",
            {
                "results": [{"id": "w1", "name": "Acme", "slug": "acme"}],
                "count": 1,
                "total_pages": 1,
                "next_cursor": None,
                "prev_cursor": None,
            },
        )

        workspaces = await plane_client.list_workspaces()

        assert len(workspaces) == 1
        assert isinstance(workspaces[0], PlaneWorkspace)
        assert workspaces[0].slug == "acme"

    @pytest.mark.asyncio
    async def test_list_without_results_is_empty(self, backend, plane_client):
        backend.add("GET", f"{PROJECTS_PATH}/", {"count": 0})

        assert await plane_client.list_projects() == []

    @pytest.mark.asyncio
    async def test_list_accepts_bare_array(self, backend, plane_client):
        backend.add("GET", f"{PROJECTS_PATH}/p1/states/", [{"id": "s1", "name": "Todo"}])

        states = await plane_client.get_project_states("p1")

        assert [state.id for state in states] == ["s1"]

    @pytest.mark.asyncio
    async def test_list_returns_first_page_only(self, backend, plane_client):
        backend.add(
            "GET",
            f"{PROJECTS_PATH}/p1/cycles/",
            {"results": [{"id": "c1"}], "next_cursor": "100:1:0"},
        )

        cycles = await plane_client.list_cycles("p1")

        assert [cycle.id for cycle in cycles] == ["c1"]
        assert len(backend.requests) == 1

    @pytest.mark.asyncio
    async def test_unknown_fields_are_preserved(self, backend, plane_client):
        backend.add("GET", f"{PROJECTS_PATH}/p1/issues/i1/", ISSUE)

        issue = await plane_client.get_issue("p1", "i1")

        assert isinstance(issue, PlaneIssue)
        assert issue.model_extra == {"sequence_id": 42}
        assert issue.to_dict() == ISSUE

    @pytest.mark.asyncio
    async def test_204_maps_to_success(self, backend, plane_client):
        backend.add("DELETE", f"{PROJECTS_PATH}/p1/issues/i1/", status_code=204)

        assert await plane_client.delete_issue("p1", "i1") == {"success": True}

    @pytest.mark.asyncio
    async def test_malformed_json_raises(self, backend, plane_client):
        backend.add("GET", f"{PROJECTS_PATH}/p1/", text="<html>oops</html>")

        with pytest.raises(PlaneApiError, match="Invalid JSON"):
            await plane_client.get_project("p1")


# ============================================================================
# Errors
# ============================================================================


class TestErrors:
    """Tests for HTTP and transport error translation."""

    @pytest.mark.asyncio
    async def test_non_2xx_raises_with_status_and_body(self, backend, plane_client):
        backend.add(
            "GET",
            f"{PROJECTS_PATH}/p1/modules/m1/",
            status_code=404,
            text='{"detail": "Module not found"}',
        )

        with pytest.raises(PlaneHttpError) as exc_info:
            await plane_client.get_module("p1", "m1")

        assert exc_info.value.status_code == 404
        assert exc_info.value.body == '{"detail": "Module not found"}'
        assert str(exc_info.value) == 'API error (404): {"detail": "Module not found"}'

    @pytest.mark.asyncio
    async def test_unreadable_error_body_uses_placeholder(self):
        response = MagicMock(spec=httpx.Response)
        response.is_success = False
        response.status_code = 502
        type(response).text = PropertyMock(side_effect=httpx.ResponseNotRead())
        http_client = MagicMock(spec=httpx.AsyncClient)
        http_client.request = AsyncMock(return_value=response)
        client = PlaneApiClient(API_KEY, BASE_URL, WORKSPACE_SLUG, http_client=http_client)

        with pytest.raises(PlaneHttpError) as exc_info:
            await client.list_projects()

        assert exc_info.value.body == "Unknown error"
        assert "502" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_connection_failure_raises_transport_error(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = PlaneApiClient(
            API_KEY,
            BASE_URL,
            WORKSPACE_SLUG,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(refuse)),
        )

        with pytest.raises(PlaneTransportError, match="connection refused"):
            await client.list_modules("p1")

    @pytest.mark.asyncio
    async def test_error_is_raised_once_without_retry(self, backend, plane_client):
        backend.add("GET", f"{PROJECTS_PATH}/", status_code=503, text="busy")

        with pytest.raises(PlaneHttpError):
            await plane_client.list_projects()

        assert len(backend.requests) == 1


# ============================================================================
# Construction
# ============================================================================


class TestConstruction:
    """Tests for client construction and lifecycle."""

    def test_from_config(self):
        config = PlaneConfig(
            api_key="k", base_url="https://plane.example", workspace_slug="team"
        )
        client = PlaneApiClient.from_config(config)
        assert client.workspace_slug == "team"

    @pytest.mark.asyncio
    async def test_async_context_manager_closes_http_client(self):
        http_client = MagicMock(spec=httpx.AsyncClient)
        http_client.aclose = AsyncMock()

        async with PlaneApiClient("k", BASE_URL, "team", http_client=http_client):
            pass

        http_client.aclose.assert_awaited_once()
