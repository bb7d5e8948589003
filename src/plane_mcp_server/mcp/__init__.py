"""MCP (Model Context Protocol) module.

This module implements the MCP protocol layer that exposes the Plane
REST API as a set of tools. External MCP clients (Claude Desktop,
Cursor, etc.) talk to it over stdio, Streamable HTTP or SSE.

MCP Specification: https://modelcontextprotocol.io/
"""

from plane_mcp_server.mcp.dispatcher import ToolArgumentError, ToolDispatcher
from plane_mcp_server.mcp.handlers import (
    McpMessageError,
    McpMethodHandler,
    parse_message,
)
from plane_mcp_server.mcp.schemas import (
    JsonRpcError,
    JsonRpcErrorCode,
    JsonRpcRequest,
    JsonRpcResponse,
    McpCapabilities,
    McpInitializeParams,
    McpInitializeResult,
    McpServerInfo,
    McpTool,
    McpToolCallContentItem,
    McpToolCallParams,
    McpToolCallResult,
    McpToolInputSchema,
    McpToolsListResult,
    create_error_response,
    create_success_response,
)
from plane_mcp_server.mcp.tools import PLANE_TOOLS, get_tool

__all__ = [
    # Handler & dispatch
    "McpMessageError",
    "McpMethodHandler",
    "ToolArgumentError",
    "ToolDispatcher",
    "parse_message",
    # Tool catalog
    "PLANE_TOOLS",
    "get_tool",
    # JSON-RPC types
    "JsonRpcError",
    "JsonRpcErrorCode",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "create_error_response",
    "create_success_response",
    # MCP types
    "McpCapabilities",
    "McpInitializeParams",
    "McpInitializeResult",
    "McpServerInfo",
    "McpTool",
    "McpToolCallContentItem",
    "McpToolCallParams",
    "McpToolCallResult",
    "McpToolInputSchema",
    "McpToolsListResult",
]
