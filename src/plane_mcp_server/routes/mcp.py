"""MCP Protocol route handlers.

Implements the MCP (Model Context Protocol) HTTP endpoints according to
the Streamable HTTP Transport specification.

Endpoints:
- POST /mcp/ - JSON-RPC 2.0 message handler
- GET /mcp/ - Returns 405 (streaming not supported on this endpoint)
- DELETE /mcp/ - Returns 404 (stateless, no session to terminate)
"""

import json
import logging
from typing import TYPE_CHECKING

from robyn import Response

from plane_mcp_server.mcp import (
    JsonRpcErrorCode,
    McpMessageError,
    McpMethodHandler,
    create_error_response,
    parse_message,
)
from plane_mcp_server.routes.helpers import error_response

if TYPE_CHECKING:
    from robyn import Robyn

logger = logging.getLogger(__name__)


def _rpc_response(status_code: int, payload: dict) -> Response:
    return Response(
        status_code,
        {"Content-Type": "application/json"},
        json.dumps(payload),
    )


def register_mcp_routes(app: "Robyn", handler: McpMethodHandler) -> None:
    """Register MCP protocol routes on the Robyn application.

    Args:
        app: The Robyn application instance.
        handler: Handles decoded JSON-RPC requests.
    """

    @app.post("/mcp/")
    async def post_mcp(request) -> Response:
        """Handle MCP JSON-RPC 2.0 messages.

        Returns:
            - 200: Successful JSON-RPC response
            - 202: Notification accepted (no content)
            - 400: Bad request (invalid JSON or message format)
            - 500: Internal server error
        """
        accept_header = request.headers.get("accept") or ""
        if "application/json" not in accept_header:
            # Be lenient - many clients don't set this correctly
            logger.debug("MCP request without application/json Accept header")

        try:
            rpc_request = parse_message(request.body or b"")
        except McpMessageError as message_error:
            return _rpc_response(400, message_error.response.model_dump())

        try:
            response = await handler.handle_request(rpc_request)
        except Exception as e:
            logger.exception("MCP handler error: %s", e)
            error = create_error_response(
                rpc_request.id,
                JsonRpcErrorCode.INTERNAL_ERROR,
                f"Internal error: {e}",
            )
            return _rpc_response(500, error.model_dump())

        # Notifications don't get responses
        if rpc_request.is_notification:
            return Response(202, {"Content-Type": "application/json"}, "")

        return _rpc_response(200, response.model_dump())

    @app.get("/mcp/")
    async def get_mcp(request) -> Response:
        """GET is for server-to-client streaming, which /mcp/ doesn't offer."""
        return Response(
            405,
            {"Content-Type": "application/json", "Allow": "POST, DELETE"},
            json.dumps({"error": "GET method not allowed; use /sse for streaming"}),
        )

    @app.delete("/mcp/")
    async def delete_mcp(request) -> Response:
        """DELETE terminates sessions; this endpoint is stateless."""
        return error_response("Session not found (endpoint is stateless)", 404)

    logger.info("MCP routes registered: POST/GET/DELETE /mcp/")
