"""Tool dispatcher: maps MCP tool calls onto Plane API client methods.

The dispatcher validates arguments against the tool's input schema,
invokes exactly one ``PlaneApiClient`` method and wraps the outcome in an
``McpToolCallResult``. It never raises: failures come back as results
with ``isError`` set so a single bad call cannot take the host down.
"""

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from plane_mcp_server.client import PlaneApiClient, PlaneApiError
from plane_mcp_server.mcp.schemas import McpTool, McpToolCallResult
from plane_mcp_server.mcp.tools import PLANE_TOOLS, get_tool, normalize_tool_name
from plane_mcp_server.models import (
    CommentCreate,
    IssueCreate,
    IssueUpdate,
    PlaneResource,
)

logger = logging.getLogger(__name__)

ToolHandler = Callable[[dict[str, Any]], Awaitable[Any]]


class ToolArgumentError(ValueError):
    """Raised when tool arguments do not satisfy the tool's input schema."""


# ============================================================================
# Argument validation
# ============================================================================


def _check_value(field: str, value: Any, spec: dict[str, Any]) -> None:
    expected = spec.get("type")
    if expected == "string":
        if not isinstance(value, str):
            raise ToolArgumentError(f"Argument '{field}' must be a string")
        allowed = spec.get("enum")
        if allowed and value not in allowed:
            raise ToolArgumentError(
                f"Argument '{field}' must be one of: {', '.join(allowed)}"
            )
    elif expected == "number":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ToolArgumentError(f"Argument '{field}' must be a number")
    elif expected == "array":
        if not isinstance(value, list) or not all(
            isinstance(item, str) for item in value
        ):
            raise ToolArgumentError(f"Argument '{field}' must be an array of strings")


def validate_arguments(tool: McpTool, arguments: dict[str, Any]) -> dict[str, Any]:
    """Validate arguments against a tool's input schema.

    Args:
        tool: The tool whose schema applies.
        arguments: Raw arguments from the MCP client.

    Returns:
        The declared arguments that were provided, in schema order.
        Undeclared keys and ``None`` values are dropped.

    Raises:
        ToolArgumentError: If a required argument is missing or a value
            has the wrong type.
    """
    schema = tool.input_schema
    missing = [field for field in schema.required if arguments.get(field) is None]
    if missing:
        raise ToolArgumentError(f"Missing required argument(s): {', '.join(missing)}")

    validated: dict[str, Any] = {}
    for field, spec in schema.properties.items():
        value = arguments.get(field)
        if value is None:
            continue
        _check_value(field, value, spec)
        validated[field] = value
    return validated


def _to_jsonable(result: Any) -> Any:
    if isinstance(result, PlaneResource):
        return result.to_dict()
    if isinstance(result, list):
        return [_to_jsonable(item) for item in result]
    return result


# ============================================================================
# Dispatcher
# ============================================================================


class ToolDispatcher:
    """Routes tool calls to a ``PlaneApiClient``.

    Holds no state between calls other than the injected client.
    """

    def __init__(self, client: PlaneApiClient) -> None:
        self._client = client
        self._handlers: dict[str, ToolHandler] = {
            "list-workspaces": self._list_workspaces,
            "get-workspace": self._get_workspace,
            "list-projects": self._list_projects,
            "get-project": self._get_project,
            "get-project-states": self._get_project_states,
            "list-cycles": self._list_cycles,
            "get-cycle": self._get_cycle,
            "list-modules": self._list_modules,
            "get-module": self._get_module,
            "list-issues": self._list_issues,
            "get-issue": self._get_issue,
            "create-issue": self._create_issue,
            "update-issue": self._update_issue,
            "delete-issue": self._delete_issue,
            "list-issue-comments": self._list_issue_comments,
            "add-issue-comment": self._add_issue_comment,
        }

    @property
    def client(self) -> PlaneApiClient:
        return self._client

    def list_tools(self) -> list[McpTool]:
        """Return the tool catalog in declaration order."""
        return list(PLANE_TOOLS)

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None = None
    ) -> McpToolCallResult:
        """Execute a tool and wrap the outcome.

        Args:
            name: Tool identifier; ``_`` and ``-`` are interchangeable.
            arguments: Tool arguments.

        Returns:
            A result with one text item: pretty-printed JSON on success,
            ``Error: <message>`` with ``is_error=True`` on failure.
        """
        tool = get_tool(name)
        handler = self._handlers.get(normalize_tool_name(name))
        if tool is None or handler is None:
            logger.warning("MCP unknown tool: %s", name)
            return McpToolCallResult.text(f"Error: Unknown tool: {name}", is_error=True)

        try:
            validated = validate_arguments(tool, arguments or {})
            result = await handler(validated)
        except ToolArgumentError as argument_error:
            logger.warning("Tool %s rejected arguments: %s", tool.name, argument_error)
            return McpToolCallResult.text(f"Error: {argument_error}", is_error=True)
        except PlaneApiError as api_error:
            logger.warning("Tool %s failed: %s", tool.name, api_error)
            return McpToolCallResult.text(f"Error: {api_error}", is_error=True)
        except Exception as execution_error:
            logger.exception("Tool %s raised unexpectedly", tool.name)
            return McpToolCallResult.text(f"Error: {execution_error}", is_error=True)

        return McpToolCallResult.text(json.dumps(_to_jsonable(result), indent=2))

    # ------------------------------------------------------------------
    # Workspaces & projects
    # ------------------------------------------------------------------

    async def _list_workspaces(self, args: dict[str, Any]) -> Any:
        return await self._client.list_workspaces()

    async def _get_workspace(self, args: dict[str, Any]) -> Any:
        return await self._client.get_workspace()

    async def _list_projects(self, args: dict[str, Any]) -> Any:
        return await self._client.list_projects()

    async def _get_project(self, args: dict[str, Any]) -> Any:
        return await self._client.get_project(args["project_id"])

    async def _get_project_states(self, args: dict[str, Any]) -> Any:
        return await self._client.get_project_states(args["project_id"])

    # ------------------------------------------------------------------
    # Cycles & modules
    # ------------------------------------------------------------------

    async def _list_cycles(self, args: dict[str, Any]) -> Any:
        return await self._client.list_cycles(args["project_id"])

    async def _get_cycle(self, args: dict[str, Any]) -> Any:
        return await self._client.get_cycle(args["project_id"], args["cycle_id"])

    async def _list_modules(self, args: dict[str, Any]) -> Any:
        return await self._client.list_modules(args["project_id"])

    async def _get_module(self, args: dict[str, Any]) -> Any:
        return await self._client.get_module(args["project_id"], args["module_id"])

    # ------------------------------------------------------------------
    # Issues & comments
    # ------------------------------------------------------------------

    async def _list_issues(self, args: dict[str, Any]) -> Any:
        filters = dict(args)
        project_id = filters.pop("project_id")
        return await self._client.list_issues(project_id, filters)

    async def _get_issue(self, args: dict[str, Any]) -> Any:
        return await self._client.get_issue(args["project_id"], args["issue_id"])

    async def _create_issue(self, args: dict[str, Any]) -> Any:
        payload = dict(args)
        project_id = payload.pop("project_id")
        return await self._client.create_issue(
            project_id, IssueCreate.model_validate(payload)
        )

    async def _update_issue(self, args: dict[str, Any]) -> Any:
        payload = dict(args)
        project_id = payload.pop("project_id")
        issue_id = payload.pop("issue_id")
        return await self._client.update_issue(
            project_id, issue_id, IssueUpdate.model_validate(payload)
        )

    async def _delete_issue(self, args: dict[str, Any]) -> Any:
        return await self._client.delete_issue(args["project_id"], args["issue_id"])

    async def _list_issue_comments(self, args: dict[str, Any]) -> Any:
        return await self._client.list_issue_comments(
            args["project_id"], args["issue_id"]
        )

    async def _add_issue_comment(self, args: dict[str, Any]) -> Any:
        return await self._client.add_issue_comment(
            args["project_id"],
            args["issue_id"],
            CommentCreate(comment_html=args["comment_html"]),
        )
