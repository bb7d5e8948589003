"""HTTP transport bindings for the MCP handler."""

from plane_mcp_server.routes.mcp import register_mcp_routes
from plane_mcp_server.routes.sse import SseSessionRegistry, register_sse_routes

__all__ = [
    "SseSessionRegistry",
    "register_mcp_routes",
    "register_sse_routes",
]
