"""Static catalog of Plane tools exposed over MCP.

Tool names are kebab-case. Lookups accept ``_`` in place of ``-`` so
``create_issue`` and ``create-issue`` resolve to the same tool.
"""

from plane_mcp_server.mcp.schemas import McpTool, McpToolInputSchema
from plane_mcp_server.models import PRIORITIES


def normalize_tool_name(name: str) -> str:
    """Canonical form of a tool identifier (``_`` and ``-`` are equivalent)."""
    return name.strip().replace("_", "-")


def _string(description: str) -> dict:
    return {"type": "string", "description": description}


def _string_array(description: str) -> dict:
    return {"type": "array", "items": {"type": "string"}, "description": description}


def _priority(description: str) -> dict:
    return {"type": "string", "description": description, "enum": list(PRIORITIES)}


# -------- WORKSPACES --------

LIST_WORKSPACES_TOOL = McpTool(
    name="list-workspaces",
    description="List all workspaces the API key has access to",
    input_schema=McpToolInputSchema(),
)

GET_WORKSPACE_TOOL = McpTool(
    name="get-workspace",
    description="Get details about the current workspace",
    input_schema=McpToolInputSchema(),
)

# -------- PROJECTS & STATES --------

LIST_PROJECTS_TOOL = McpTool(
    name="list-projects",
    description="List all projects in the workspace",
    input_schema=McpToolInputSchema(),
)

GET_PROJECT_TOOL = McpTool(
    name="get-project",
    description="Get detailed information about a specific project",
    input_schema=McpToolInputSchema(
        properties={"project_id": _string("ID of the project to retrieve")},
        required=["project_id"],
    ),
)

GET_PROJECT_STATES_TOOL = McpTool(
    name="get-project-states",
    description="Get all states available in a project",
    input_schema=McpToolInputSchema(
        properties={"project_id": _string("ID of the project to get states from")},
        required=["project_id"],
    ),
)

# -------- CYCLES & MODULES --------

LIST_CYCLES_TOOL = McpTool(
    name="list-cycles",
    description="List all cycles in a project",
    input_schema=McpToolInputSchema(
        properties={"project_id": _string("ID of the project to get cycles from")},
        required=["project_id"],
    ),
)

GET_CYCLE_TOOL = McpTool(
    name="get-cycle",
    description="Get detailed information about a specific cycle",
    input_schema=McpToolInputSchema(
        properties={
            "project_id": _string("ID of the project containing the cycle"),
            "cycle_id": _string("ID of the cycle to retrieve"),
        },
        required=["project_id", "cycle_id"],
    ),
)

LIST_MODULES_TOOL = McpTool(
    name="list-modules",
    description="List all modules in a project",
    input_schema=McpToolInputSchema(
        properties={"project_id": _string("ID of the project to get modules from")},
        required=["project_id"],
    ),
)

GET_MODULE_TOOL = McpTool(
    name="get-module",
    description="Get detailed information about a specific module",
    input_schema=McpToolInputSchema(
        properties={
            "project_id": _string("ID of the project containing the module"),
            "module_id": _string("ID of the module to retrieve"),
        },
        required=["project_id", "module_id"],
    ),
)

# -------- ISSUES --------

LIST_ISSUES_TOOL = McpTool(
    name="list-issues",
    description="List issues from a project with optional filtering",
    input_schema=McpToolInputSchema(
        properties={
            "project_id": _string("ID of the project to get issues from"),
            "state_id": _string("Filter by state ID (optional)"),
            "priority": _priority("Filter by priority (optional)"),
            "cycle_id": _string("Filter by cycle ID (optional)"),
            "module_id": _string("Filter by module ID (optional)"),
            "assignee_id": _string("Filter by assignee ID (optional)"),
            "created_by": _string("Filter by creator ID (optional)"),
            "search": _string("Search term to filter issues (optional)"),
            "limit": {
                "type": "number",
                "description": "Maximum number of issues to return (default: 50)",
            },
        },
        required=["project_id"],
    ),
)

GET_ISSUE_TOOL = McpTool(
    name="get-issue",
    description="Get detailed information about a specific issue",
    input_schema=McpToolInputSchema(
        properties={
            "project_id": _string("ID of the project containing the issue"),
            "issue_id": _string("ID of the issue to retrieve"),
        },
        required=["project_id", "issue_id"],
    ),
)

CREATE_ISSUE_TOOL = McpTool(
    name="create-issue",
    description="Create a new issue in a project",
    input_schema=McpToolInputSchema(
        properties={
            "project_id": _string("ID of the project where the issue should be created"),
            "name": _string("Title of the issue"),
            "description_html": _string("HTML description of the issue"),
            "priority": _priority("Priority of the issue"),
            "state_id": _string("ID of the state for this issue (optional)"),
            "assignees": _string_array(
                "Array of user IDs to assign to this issue (optional)"
            ),
            "cycle_id": _string(
                "ID of the cycle to associate with this issue (optional)"
            ),
            "module_id": _string(
                "ID of the module to associate with this issue (optional)"
            ),
            "labels": _string_array("Array of label IDs to add to this issue (optional)"),
        },
        required=["project_id", "name"],
    ),
)

UPDATE_ISSUE_TOOL = McpTool(
    name="update-issue",
    description="Update an existing issue in a project",
    input_schema=McpToolInputSchema(
        properties={
            "project_id": _string("ID of the project containing the issue"),
            "issue_id": _string("ID of the issue to update"),
            "name": _string("Updated title of the issue (optional)"),
            "description_html": _string(
                "Updated HTML description of the issue (optional)"
            ),
            "priority": _priority("Updated priority of the issue (optional)"),
            "state_id": _string("Updated state ID of the issue (optional)"),
            "assignees": _string_array(
                "Updated array of user IDs to assign to this issue (optional)"
            ),
            "cycle_id": _string("Updated cycle ID for this issue (optional)"),
            "module_id": _string("Updated module ID for this issue (optional)"),
            "labels": _string_array(
                "Updated array of label IDs for this issue (optional)"
            ),
        },
        required=["project_id", "issue_id"],
    ),
)

DELETE_ISSUE_TOOL = McpTool(
    name="delete-issue",
    description="Delete an issue from a project",
    input_schema=McpToolInputSchema(
        properties={
            "project_id": _string("ID of the project containing the issue"),
            "issue_id": _string("ID of the issue to delete"),
        },
        required=["project_id", "issue_id"],
    ),
)

# -------- COMMENTS --------

LIST_ISSUE_COMMENTS_TOOL = McpTool(
    name="list-issue-comments",
    description="List all comments on an issue",
    input_schema=McpToolInputSchema(
        properties={
            "project_id": _string("ID of the project containing the issue"),
            "issue_id": _string("ID of the issue to get comments from"),
        },
        required=["project_id", "issue_id"],
    ),
)

ADD_ISSUE_COMMENT_TOOL = McpTool(
    name="add-issue-comment",
    description="Add a comment to an issue",
    input_schema=McpToolInputSchema(
        properties={
            "project_id": _string("ID of the project containing the issue"),
            "issue_id": _string("ID of the issue to add comment to"),
            "comment_html": _string("HTML content of the comment"),
        },
        required=["project_id", "issue_id", "comment_html"],
    ),
)

# -------- REGISTRY --------

PLANE_TOOLS: list[McpTool] = [
    LIST_WORKSPACES_TOOL,
    GET_WORKSPACE_TOOL,
    LIST_PROJECTS_TOOL,
    GET_PROJECT_TOOL,
    GET_PROJECT_STATES_TOOL,
    LIST_CYCLES_TOOL,
    GET_CYCLE_TOOL,
    LIST_MODULES_TOOL,
    GET_MODULE_TOOL,
    LIST_ISSUES_TOOL,
    GET_ISSUE_TOOL,
    CREATE_ISSUE_TOOL,
    UPDATE_ISSUE_TOOL,
    DELETE_ISSUE_TOOL,
    LIST_ISSUE_COMMENTS_TOOL,
    ADD_ISSUE_COMMENT_TOOL,
]

TOOL_REGISTRY: dict[str, McpTool] = {tool.name: tool for tool in PLANE_TOOLS}


def get_tool(name: str) -> McpTool | None:
    """Look up a tool by name, accepting ``_`` or ``-`` separators."""
    return TOOL_REGISTRY.get(normalize_tool_name(name))
