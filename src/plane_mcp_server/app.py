"""Plane MCP server application and entry point.

Builds the Plane API client from validated configuration, wires it into
the tool dispatcher and serves MCP over stdio (default) or, when
``PORT`` is set, over HTTP with both the Streamable HTTP (``/mcp/``) and
SSE (``/sse`` + ``/messages``) bindings.
"""

import asyncio
import json
import logging
import sys

from robyn import Request, Robyn

from plane_mcp_server import __version__
from plane_mcp_server.client import PlaneApiClient
from plane_mcp_server.config import Config, ConfigurationError
from plane_mcp_server.mcp import McpMethodHandler, PLANE_TOOLS, ToolDispatcher
from plane_mcp_server.routes import register_mcp_routes, register_sse_routes
from plane_mcp_server.stdio import run_stdio

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

# Keys whose values must never appear in debug logs.
_SENSITIVE_KEYS = frozenset(
    {
        "authorization",
        "api_key",
        "apikey",
        "api-key",
        "token",
        "secret",
        "password",
        "credential",
    }
)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging on stderr; stdout is reserved for stdio MCP."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
        stream=sys.stderr,
    )


# ---------------------------------------------------------------------------
# Debug request logging
# ---------------------------------------------------------------------------


def _is_sensitive_key(key: str) -> bool:
    """Check if a key name contains any sensitive keyword (substring match).

    Catches ``X-API-Key``, ``PLANE_API_KEY``, ``x-auth-token`` and similar,
    not just exact matches.
    """
    lower = key.lower()
    return any(sensitive in lower for sensitive in _SENSITIVE_KEYS)


def _mask_sensitive(obj: object, _depth: int = 0) -> None:
    """Recursively mask values of sensitive keys in a dict/list, in-place.

    Handles nested structures up to depth 5 to avoid pathological payloads.
    """
    if _depth > 5:
        return
    if isinstance(obj, dict):
        for key in obj:
            if isinstance(key, str) and _is_sensitive_key(key):
                obj[key] = "***"
            else:
                _mask_sensitive(obj[key], _depth + 1)
    elif isinstance(obj, list):
        for item in obj:
            _mask_sensitive(item, _depth + 1)


async def log_request(request: Request) -> Request:
    """Log incoming requests at DEBUG level.

    Kept as a standalone function so it can be tested without Robyn's
    ``@app.before_request()`` decorator.
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return request

    url = getattr(request, "url", None)
    path = getattr(url, "path", None) or "/"
    method = getattr(request, "method", "?")

    logger.debug("▶ %s %s", method, path)

    if method in ("POST", "PUT", "PATCH"):
        raw_body = getattr(request, "body", None)
        if raw_body:
            body_str = (
                raw_body
                if isinstance(raw_body, str)
                else raw_body.decode("utf-8", errors="replace")
            )
            try:
                body_obj = json.loads(body_str)
            except (json.JSONDecodeError, TypeError):
                logger.debug("  body (raw): %s", body_str[:2048])
            else:
                _mask_sensitive(body_obj)
                logger.debug("  body: %s", json.dumps(body_obj, default=str)[:4096])

    return request


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def build_handler(config: Config) -> McpMethodHandler:
    """Create the Plane client, dispatcher and JSON-RPC handler."""
    client = PlaneApiClient.from_config(config.plane)
    return McpMethodHandler(ToolDispatcher(client))


def create_app(handler: McpMethodHandler) -> Robyn:
    """Create the Robyn application serving both HTTP MCP bindings."""
    app = Robyn(__file__)

    @app.before_request()
    async def request_logging_middleware(request: Request) -> Request:
        return await log_request(request)

    @app.shutdown_handler
    async def on_shutdown() -> None:
        await handler.dispatcher.client.aclose()
        logger.info("Shutdown: Plane HTTP client closed")

    @app.get("/health")
    async def health() -> dict:
        """Health check endpoint."""
        return {"status": "ok"}

    @app.get("/")
    async def root() -> dict:
        """Service information."""
        return {
            "service": "plane-mcp-server",
            "version": __version__,
            "workspace": handler.dispatcher.client.workspace_slug,
            "tools": len(PLANE_TOOLS),
            "transports": ["streamable-http", "sse"],
        }

    register_mcp_routes(app, handler)
    register_sse_routes(app, handler)
    return app


# ============================================================================
# Main Entry Point
# ============================================================================


async def _serve_stdio(handler: McpMethodHandler) -> None:
    try:
        await run_stdio(handler)
    finally:
        await handler.dispatcher.client.aclose()


def main() -> None:
    """Start the Plane MCP server on the configured transport."""
    try:
        config = Config.from_env()
    except ConfigurationError as config_error:
        configure_logging()
        logger.error("Fatal configuration error: %s", config_error)
        sys.exit(1)

    configure_logging(config.server.log_level)
    handler = build_handler(config)

    if config.server.transport == "http":
        logger.info(
            "Plane MCP Server starting on %s:%d (workspace=%s)",
            config.server.host,
            config.server.port,
            config.plane.workspace_slug,
        )
        create_app(handler).start(host=config.server.host, port=config.server.port)
    else:
        asyncio.run(_serve_stdio(handler))


if __name__ == "__main__":
    main()
