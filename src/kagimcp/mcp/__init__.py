"""MCP protocol server — framing, codec, session lifecycle and the serve loop."""

from kagimcp.mcp.errors import (
    InternalError,
    InvalidParamsError,
    InvalidRequestError,
    MethodNotFoundError,
    ParseError,
    ProtocolError,
    TransportError,
)
from kagimcp.mcp.models import (
    MCP_PROTOCOL_VERSION,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    TextContent,
    ToolDescriptor,
    ToolResult,
)
from kagimcp.mcp.server import MCPServer
from kagimcp.mcp.session import Session, SessionState
from kagimcp.mcp.transport import MCPTransport, StdioTransport

__all__ = [
    "MCP_PROTOCOL_VERSION",
    "InternalError",
    "InvalidParamsError",
    "InvalidRequestError",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MCPServer",
    "MCPTransport",
    "MethodNotFoundError",
    "ParseError",
    "ProtocolError",
    "Session",
    "SessionState",
    "StdioTransport",
    "TextContent",
    "ToolDescriptor",
    "ToolResult",
    "TransportError",
]
