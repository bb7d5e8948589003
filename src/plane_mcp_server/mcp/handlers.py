"""MCP Protocol method handlers.

Implements the JSON-RPC 2.0 method handlers for the MCP protocol. The
handler is transport-agnostic: stdio, Streamable HTTP and SSE bindings
all decode messages with :func:`parse_message` and pass them to
:meth:`McpMethodHandler.handle_request`.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from plane_mcp_server.mcp.dispatcher import ToolDispatcher
from plane_mcp_server.mcp.schemas import (
    JsonRpcErrorCode,
    JsonRpcRequest,
    JsonRpcResponse,
    McpCapabilities,
    McpInitializeParams,
    McpInitializeResult,
    McpServerInfo,
    McpToolCallParams,
    McpToolsListResult,
    create_error_response,
    create_success_response,
)

logger = logging.getLogger(__name__)

# MCP Protocol version we support (2025-03-26, Streamable HTTP Transport)
PROTOCOL_VERSION = "2025-03-26"

# Server information
SERVER_INFO = McpServerInfo(
    name="plane-mcp-server",
    version="1.0.0",
)


class McpMessageError(Exception):
    """Raised when a raw message cannot be decoded into a JSON-RPC request.

    Carries the JSON-RPC error response the transport should send back.
    """

    def __init__(self, response: JsonRpcResponse):
        self.response = response
        super().__init__(response.error.message if response.error else "")


def parse_message(body: str | bytes) -> JsonRpcRequest:
    """Decode a raw JSON-RPC message.

    Args:
        body: Message text as received from the transport.

    Returns:
        The validated JSON-RPC request.

    Raises:
        McpMessageError: With a ``PARSE_ERROR`` response for invalid JSON or
            an ``INVALID_REQUEST`` response for a malformed message.
    """
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")

    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        logger.error("MCP parse error: %s", e)
        raise McpMessageError(
            create_error_response(
                None, JsonRpcErrorCode.PARSE_ERROR, f"Parse error: {e}"
            )
        ) from e

    if not isinstance(data, dict):
        raise McpMessageError(
            create_error_response(
                None,
                JsonRpcErrorCode.INVALID_REQUEST,
                "Request must be a JSON object",
            )
        )

    try:
        return JsonRpcRequest.model_validate(data)
    except ValidationError as e:
        logger.error("MCP invalid request: %s", e)
        request_id = data.get("id")
        if not isinstance(request_id, (str, int)):
            request_id = None
        raise McpMessageError(
            create_error_response(
                request_id,
                JsonRpcErrorCode.INVALID_REQUEST,
                f"Invalid request: {e}",
            )
        ) from e


class McpMethodHandler:
    """Handler for MCP JSON-RPC methods.

    Routes incoming JSON-RPC requests to the appropriate handler and
    wires ``tools/call`` to the tool dispatcher.
    """

    def __init__(self, dispatcher: ToolDispatcher) -> None:
        """Initialize the method handler.

        Args:
            dispatcher: Executes ``tools/call`` requests.
        """
        self._dispatcher = dispatcher

    @property
    def dispatcher(self) -> ToolDispatcher:
        return self._dispatcher

    async def handle_request(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """Route a JSON-RPC request to the appropriate handler.

        Args:
            request: The JSON-RPC request to handle.

        Returns:
            JSON-RPC response with result or error. Transports drop the
            response when the request is a notification.
        """
        method = request.method
        params = request.params or {}

        logger.debug("MCP request: method=%s, id=%s", method, request.id)

        # Route to appropriate handler
        handler_map = {
            "initialize": self._handle_initialize,
            "initialized": self._handle_initialized,
            "notifications/initialized": self._handle_initialized,
            "tools/list": self._handle_tools_list,
            "tools/call": self._handle_tools_call,
            "prompts/list": self._handle_prompts_list,
            "resources/list": self._handle_resources_list,
            "ping": self._handle_ping,
        }

        handler = handler_map.get(method)
        if handler is None and method.startswith("notifications/"):
            logger.debug("MCP notification ignored: %s", method)
            return create_success_response(request.id, {})
        if handler is None:
            logger.warning("MCP method not found: %s", method)
            return create_error_response(
                request.id,
                JsonRpcErrorCode.METHOD_NOT_FOUND,
                f"Method not found: {method}",
            )

        try:
            result = await handler(params)
            return create_success_response(request.id, result)
        except ValueError as value_error:
            logger.error("MCP invalid params: %s", value_error)
            return create_error_response(
                request.id,
                JsonRpcErrorCode.INVALID_PARAMS,
                str(value_error),
            )
        except Exception as handler_error:
            logger.exception("MCP internal error: %s", handler_error)
            return create_error_response(
                request.id,
                JsonRpcErrorCode.INTERNAL_ERROR,
                f"Internal error: {handler_error}",
            )

    async def handle_message(self, body: str | bytes) -> JsonRpcResponse | None:
        """Decode and handle one raw message.

        Returns:
            The response to send, or ``None`` for notifications.
        """
        try:
            request = parse_message(body)
        except McpMessageError as message_error:
            return message_error.response

        response = await self.handle_request(request)
        if request.is_notification:
            return None
        return response

    async def _handle_initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        """Answer the handshake. The server keeps no per-client state."""
        try:
            init_params = McpInitializeParams.model_validate(params)
        except ValidationError as parse_error:
            logger.warning("Failed to parse initialize params: %s", parse_error)
        else:
            logger.info(
                "MCP client connected: %s v%s (protocol %s)",
                init_params.client_info.name,
                init_params.client_info.version,
                init_params.protocol_version,
            )

        result = McpInitializeResult(
            protocol_version=PROTOCOL_VERSION,
            server_info=SERVER_INFO,
            capabilities=McpCapabilities(),
        )
        return result.model_dump(by_alias=True, exclude_none=True)

    async def _handle_initialized(self, params: dict[str, Any]) -> dict[str, Any]:
        logger.info("MCP client initialization complete")
        return {}

    async def _handle_tools_list(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle the tools/list method.

        The catalog is static, so the pagination cursor is ignored.
        """
        result = McpToolsListResult(tools=self._dispatcher.list_tools())
        return result.model_dump(by_alias=True)

    async def _handle_tools_call(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle the tools/call method.

        Tool-level failures (unknown tool, bad arguments, Plane errors)
        come back as a result with ``isError`` set, not a JSON-RPC error.
        """
        try:
            call_params = McpToolCallParams.model_validate(params)
        except ValidationError as validation_error:
            raise ValueError(
                f"Invalid tool call params: {validation_error}"
            ) from validation_error

        result = await self._dispatcher.call_tool(
            call_params.name, call_params.arguments
        )
        return result.model_dump(by_alias=True, exclude_none=True)

    async def _handle_prompts_list(self, params: dict[str, Any]) -> dict[str, Any]:
        """We don't expose prompts, so return empty list."""
        return {"prompts": []}

    async def _handle_resources_list(self, params: dict[str, Any]) -> dict[str, Any]:
        """We don't expose resources, so return empty list."""
        return {"resources": []}

    async def _handle_ping(self, params: dict[str, Any]) -> dict[str, Any]:
        return {}
