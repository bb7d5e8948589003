"""MCP Protocol Pydantic schemas.

Only the subset of JSON-RPC 2.0 and MCP this server sends or receives:
the initialize handshake, tools/list and tools/call with text content.
MCP models use snake_case attributes and camelCase on the wire.
"""

from enum import IntEnum
from typing import Any, Literal

from pydantic import BaseModel, Field, model_serializer
from pydantic.alias_generators import to_camel


class JsonRpcErrorCode(IntEnum):
    """Standard JSON-RPC 2.0 error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


# ============================================================================
# JSON-RPC 2.0 envelope
# ============================================================================


class JsonRpcRequest(BaseModel):
    """Incoming request; a missing ``id`` marks a notification."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: str | int | None = None
    method: str
    params: dict[str, Any] | None = None

    @property
    def is_notification(self) -> bool:
        return self.id is None


class JsonRpcError(BaseModel):
    code: int
    message: str


class JsonRpcResponse(BaseModel):
    """Outgoing response carrying either ``result`` or ``error``, never both."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: str | int | None = None
    result: Any = None
    error: JsonRpcError | None = None

    @model_serializer
    def serialize_envelope(self) -> dict[str, Any]:
        envelope: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is None:
            envelope["result"] = self.result
        else:
            envelope["error"] = {"code": self.error.code, "message": self.error.message}
        return envelope


def create_error_response(
    request_id: str | int | None, code: int, message: str
) -> JsonRpcResponse:
    """Create a JSON-RPC error response."""
    return JsonRpcResponse(id=request_id, error=JsonRpcError(code=code, message=message))


def create_success_response(request_id: str | int | None, result: Any) -> JsonRpcResponse:
    """Create a JSON-RPC success response."""
    return JsonRpcResponse(id=request_id, result=result)


# ============================================================================
# MCP payloads
# ============================================================================


class McpModel(BaseModel):
    """Base for MCP payloads: camelCase aliases, snake_case accepted too."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class McpClientInfo(McpModel):
    name: str
    version: str


class McpInitializeParams(McpModel):
    """``initialize`` params. Only used for logging who connected."""

    client_info: McpClientInfo
    protocol_version: str


class McpServerInfo(McpModel):
    name: str = "plane-mcp-server"
    version: str = "1.0.0"


class McpCapabilities(McpModel):
    """Server capabilities. This server only offers tools."""

    tools: dict[str, Any] = Field(default_factory=dict)


class McpInitializeResult(McpModel):
    protocol_version: str
    server_info: McpServerInfo = Field(default_factory=McpServerInfo)
    capabilities: McpCapabilities = Field(default_factory=McpCapabilities)


class McpToolInputSchema(McpModel):
    """JSON Schema object describing a tool's arguments."""

    type: Literal["object"] = "object"
    properties: dict[str, Any] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)


class McpTool(McpModel):
    name: str
    description: str
    input_schema: McpToolInputSchema


class McpToolsListResult(McpModel):
    tools: list[McpTool]


class McpToolCallParams(McpModel):
    """``tools/call`` params."""

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class McpToolCallContentItem(McpModel):
    type: Literal["text"] = "text"
    text: str


class McpToolCallResult(McpModel):
    """``tools/call`` result; tool failures set ``isError`` instead of raising."""

    content: list[McpToolCallContentItem]
    is_error: bool = False

    @classmethod
    def text(cls, text: str, *, is_error: bool = False) -> "McpToolCallResult":
        """Build a result holding a single text content item."""
        return cls(content=[McpToolCallContentItem(text=text)], is_error=is_error)
