"""Async HTTP client for the Plane REST API.

Wraps the ``/api/v1/workspaces/{slug}/...`` endpoints used by the MCP
tools. Every method issues exactly one request: there are no retries,
no pagination beyond the first page, and no timeout beyond the httpx
default.
"""

from __future__ import annotations

import json
import logging
from typing import Any, TypeVar

import httpx

from plane_mcp_server.config import PlaneConfig
from plane_mcp_server.models import (
    CommentCreate,
    IssueCreate,
    IssueUpdate,
    PlaneComment,
    PlaneCycle,
    PlaneIssue,
    PlaneListEnvelope,
    PlaneModule,
    PlaneProject,
    PlaneResource,
    PlaneState,
    PlaneWorkspace,
)

logger = logging.getLogger(__name__)

ResourceT = TypeVar("ResourceT", bound=PlaneResource)

_BODY_METHODS = frozenset({"POST", "PATCH", "PUT"})
_UNREADABLE_BODY = "Unknown error"


class PlaneApiError(Exception):
    """Raised when a Plane API call cannot produce a result."""


class PlaneHttpError(PlaneApiError):
    """Raised when the Plane API answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API error ({status_code}): {body}")


class PlaneTransportError(PlaneApiError):
    """Raised when the Plane API is unreachable or the connection fails."""


def _query_value(value: Any) -> Any:
    """Render integral floats (``50.0`` from JSON) as plain integers."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class PlaneApiClient:
    """Thin wrapper around the Plane REST API for one workspace.

    Example:
        >>> async with PlaneApiClient(api_key, base_url, "acme") as client:
        ...     issues = await client.list_issues(project_id, {"priority": "high"})
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        workspace_slug: str,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._workspace_slug = workspace_slug
        self._http = http_client or httpx.AsyncClient()

    @classmethod
    def from_config(cls, config: PlaneConfig) -> "PlaneApiClient":
        """Create a client from validated configuration."""
        return cls(
            api_key=config.api_key,
            base_url=config.base_url,
            workspace_slug=config.workspace_slug,
        )

    @property
    def workspace_slug(self) -> str:
        return self._workspace_slug

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._http.aclose()

    async def __aenter__(self) -> "PlaneApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _project_path(self, project_id: str) -> str:
        return f"/api/v1/workspaces/{self._workspace_slug}/projects/{project_id}"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Issue one request and return the decoded JSON body.

        Args:
            method: HTTP method.
            path: Path below the base URL, starting with ``/api/v1/``.
            body: JSON-serialisable payload, only sent for POST/PATCH/PUT.
            params: Query parameters.

        Returns:
            Decoded JSON, or ``{"success": True}`` for 204 No Content.

        Raises:
            PlaneHttpError: On a non-2xx response.
            PlaneTransportError: If the request never got a response.
            PlaneApiError: If the response body is not valid JSON.
        """
        url = f"{self._base_url}{path}"
        headers = {
            "Content-Type": "application/json",
            "X-API-Key": self._api_key,
        }
        content = None
        if body is not None and method in _BODY_METHODS:
            content = json.dumps(body)

        logger.debug("Plane request: %s %s", method, path)

        try:
            response = await self._http.request(
                method,
                url,
                headers=headers,
                content=content,
                params=params,
            )
        except httpx.HTTPError as exc:
            logger.error("Plane request failed: %s %s error=%s", method, path, exc)
            raise PlaneTransportError(
                f"Request to {url} failed: {exc}"
            ) from exc

        if not response.is_success:
            try:
                error_text = response.text
            except (httpx.HTTPError, httpx.StreamError, UnicodeDecodeError):
                error_text = _UNREADABLE_BODY
            logger.warning(
                "Plane API error: %s %s status=%d", method, path, response.status_code
            )
            raise PlaneHttpError(response.status_code, error_text)

        if response.status_code == 204:
            return {"success": True}

        try:
            return response.json()
        except ValueError as exc:
            raise PlaneApiError(
                f"Invalid JSON in response from {method} {path}: {exc}"
            ) from exc

    async def _get_one(self, path: str, model: type[ResourceT]) -> ResourceT:
        data = await self._request("GET", path)
        return model.model_validate(data)

    async def _get_list(
        self,
        path: str,
        model: type[ResourceT],
        params: dict[str, Any] | None = None,
    ) -> list[ResourceT]:
        data = await self._request("GET", path, params=params)
        if isinstance(data, list):
            items = data
        else:
            envelope = PlaneListEnvelope.model_validate(data)
            if envelope.next_cursor:
                logger.debug(
                    "Plane list %s has more pages (next_cursor=%s); only the first is returned",
                    path,
                    envelope.next_cursor,
                )
            items = envelope.results or []
        return [model.model_validate(item) for item in items]

    # ------------------------------------------------------------------
    # Workspaces
    # ------------------------------------------------------------------

    async def get_workspace(self) -> PlaneWorkspace:
        """Get details of the configured workspace."""
        return await self._get_one(
            f"/api/v1/workspaces/{self._workspace_slug}/", PlaneWorkspace
        )

    async def list_workspaces(self) -> list[PlaneWorkspace]:
        """List all workspaces the API key can access."""
        return await self._get_list("/api/v1/workspaces/", PlaneWorkspace)

    # ------------------------------------------------------------------
    # Projects & states
    # ------------------------------------------------------------------

    async def list_projects(self) -> list[PlaneProject]:
        """List all projects in the workspace."""
        return await self._get_list(
            f"/api/v1/workspaces/{self._workspace_slug}/projects/", PlaneProject
        )

    async def get_project(self, project_id: str) -> PlaneProject:
        return await self._get_one(f"{self._project_path(project_id)}/", PlaneProject)

    async def get_project_states(self, project_id: str) -> list[PlaneState]:
        return await self._get_list(
            f"{self._project_path(project_id)}/states/", PlaneState
        )

    # ------------------------------------------------------------------
    # Cycles & modules
    # ------------------------------------------------------------------

    async def list_cycles(self, project_id: str) -> list[PlaneCycle]:
        return await self._get_list(
            f"{self._project_path(project_id)}/cycles/", PlaneCycle
        )

    async def get_cycle(self, project_id: str, cycle_id: str) -> PlaneCycle:
        return await self._get_one(
            f"{self._project_path(project_id)}/cycles/{cycle_id}/", PlaneCycle
        )

    async def list_modules(self, project_id: str) -> list[PlaneModule]:
        return await self._get_list(
            f"{self._project_path(project_id)}/modules/", PlaneModule
        )

    async def get_module(self, project_id: str, module_id: str) -> PlaneModule:
        return await self._get_one(
            f"{self._project_path(project_id)}/modules/{module_id}/", PlaneModule
        )

    # ------------------------------------------------------------------
    # Issues
    # ------------------------------------------------------------------

    async def list_issues(
        self,
        project_id: str,
        filters: dict[str, Any] | None = None,
    ) -> list[PlaneIssue]:
        """List issues of a project.

        Args:
            project_id: Project to list issues from.
            filters: Query filters such as ``state_id`` or ``priority``.
                ``None`` values are dropped rather than sent.

        Returns:
            Issues on the first page of results.
        """
        params = {
            key: _query_value(value)
            for key, value in (filters or {}).items()
            if value is not None
        }
        return await self._get_list(
            f"{self._project_path(project_id)}/issues/",
            PlaneIssue,
            params=params or None,
        )

    async def get_issue(self, project_id: str, issue_id: str) -> PlaneIssue:
        return await self._get_one(
            f"{self._project_path(project_id)}/issues/{issue_id}/", PlaneIssue
        )

    async def create_issue(self, project_id: str, data: IssueCreate) -> PlaneIssue:
        result = await self._request(
            "POST",
            f"{self._project_path(project_id)}/issues/",
            body=data.model_dump(exclude_unset=True),
        )
        return PlaneIssue.model_validate(result)

    async def update_issue(
        self, project_id: str, issue_id: str, data: IssueUpdate
    ) -> PlaneIssue:
        result = await self._request(
            "PATCH",
            f"{self._project_path(project_id)}/issues/{issue_id}/",
            body=data.model_dump(exclude_unset=True),
        )
        return PlaneIssue.model_validate(result)

    async def delete_issue(self, project_id: str, issue_id: str) -> dict[str, Any]:
        """Delete an issue. Plane answers 204, surfaced as ``{"success": True}``."""
        return await self._request(
            "DELETE", f"{self._project_path(project_id)}/issues/{issue_id}/"
        )

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    async def list_issue_comments(
        self, project_id: str, issue_id: str
    ) -> list[PlaneComment]:
        return await self._get_list(
            f"{self._project_path(project_id)}/issues/{issue_id}/comments/",
            PlaneComment,
        )

    async def add_issue_comment(
        self, project_id: str, issue_id: str, data: CommentCreate
    ) -> PlaneComment:
        result = await self._request(
            "POST",
            f"{self._project_path(project_id)}/issues/{issue_id}/comments/",
            body=data.model_dump(exclude_unset=True),
        )
        return PlaneComment.model_validate(result)
