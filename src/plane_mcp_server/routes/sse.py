"""SSE (Server-Sent Events) transport for MCP.

Implements the HTTP+SSE binding used by hosted MCP clients:

- GET /sse - opens an event stream. The first event (``endpoint``) tells
  the client where to POST its messages; every JSON-RPC response is then
  delivered as a ``message`` event on the same stream.
- POST /messages?sessionId=<id> - accepts one JSON-RPC message for an
  open session and answers 202; the response travels over the stream.

Sessions are inserted when a stream opens and removed when it closes.
There is no idle expiry: a stream whose close is never observed keeps
its entry.
"""

import asyncio
import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, AsyncGenerator

from robyn import Response
from robyn.responses import SSEResponse
from robyn.robyn import Headers

from plane_mcp_server.mcp import McpMessageError, McpMethodHandler, parse_message
from plane_mcp_server.routes.helpers import error_response, json_response

if TYPE_CHECKING:
    from robyn import Robyn

logger = logging.getLogger(__name__)

MESSAGES_PATH = "/messages"


def sse_headers() -> Headers:
    """Create headers for an SSE stream."""
    headers = Headers({})
    headers.set("Content-Type", "text/event-stream; charset=utf-8")
    headers.set("Cache-Control", "no-cache")
    headers.set("Connection", "keep-alive")
    headers.set("X-Accel-Buffering", "no")
    headers.set("Access-Control-Allow-Origin", "*")
    headers.set("Access-Control-Allow-Headers", "Cache-Control")
    return headers


def format_sse_event(event_type: str, data: Any) -> str:
    """Format data as an SSE event.

    ```
    event: <event_type>
    data: <payload>

    ```

    Strings are sent as-is, anything else is serialized as compact JSON.
    """
    if isinstance(data, str):
        payload = data
    else:
        payload = json.dumps(data, separators=(",", ":"))

    return f"event: {event_type}\ndata: {payload}\n\n"


@dataclass
class SseSession:
    """One open SSE stream and its outbound message queue."""

    session_id: str
    queue: asyncio.Queue = field(default_factory=asyncio.Queue)

    @property
    def endpoint(self) -> str:
        return f"{MESSAGES_PATH}?sessionId={self.session_id}"


class SseSessionRegistry:
    """Maps session IDs to open SSE streams."""

    def __init__(self) -> None:
        self._sessions: dict[str, SseSession] = {}

    def open(self, session_id: str | None = None) -> SseSession:
        """Register a new session, generating an ID when none is given."""
        session = SseSession(session_id=session_id or uuid.uuid4().hex)
        if session.session_id in self._sessions:
            logger.warning("SSE session %s reopened; replacing", session.session_id)
        self._sessions[session.session_id] = session
        logger.info(
            "SSE session opened: %s (active=%d)", session.session_id, len(self)
        )
        return session

    def get(self, session_id: str) -> SseSession | None:
        return self._sessions.get(session_id)

    def close(self, session: SseSession) -> None:
        """Remove ``session`` unless a reconnect has already replaced it."""
        if self._sessions.get(session.session_id) is not session:
            return
        del self._sessions[session.session_id]
        logger.info("SSE session closed: %s (active=%d)", session.session_id, len(self))

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


def register_sse_routes(
    app: "Robyn",
    handler: McpMethodHandler,
    sessions: SseSessionRegistry | None = None,
) -> SseSessionRegistry:
    """Register the SSE transport routes on the Robyn application.

    Args:
        app: The Robyn application instance.
        handler: Handles decoded JSON-RPC requests.
        sessions: Session table; a fresh one is created when omitted.

    Returns:
        The session registry backing the routes.
    """
    registry = sessions if sessions is not None else SseSessionRegistry()

    @app.get("/sse")
    async def open_sse_stream(request):
        """Open an SSE stream bound to a new (or client-chosen) session."""
        session = registry.open(request.query_params.get("sessionId"))

        async def event_stream() -> AsyncGenerator[str, None]:
            try:
                yield format_sse_event("endpoint", session.endpoint)
                while True:
                    message = await session.queue.get()
                    yield format_sse_event("message", message)
            finally:
                registry.close(session)

        return SSEResponse(
            content=event_stream(),
            status_code=200,
            headers=sse_headers(),
        )

    @app.post(MESSAGES_PATH)
    async def post_message(request) -> Response:
        """Accept a client message for an open session."""
        session_id = request.query_params.get("sessionId")
        session = registry.get(session_id) if session_id else None
        if session is None:
            return error_response("Session not found", 404)

        try:
            rpc_request = parse_message(request.body or b"")
        except McpMessageError as message_error:
            return json_response(message_error.response.model_dump(), 400)

        try:
            response = await handler.handle_request(rpc_request)
        except Exception as e:
            logger.exception("Error handling SSE message: %s", e)
            return error_response("Internal server error", 500)

        if not rpc_request.is_notification:
            await session.queue.put(response.model_dump())

        return Response(202, {"Content-Type": "text/plain"}, "Accepted")

    logger.info("SSE routes registered: GET /sse, POST %s", MESSAGES_PATH)
    return registry
