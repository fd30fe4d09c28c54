"""Error types for the MCP server.

Transport errors are fatal. Protocol errors carry a JSON-RPC error code and are
answered with an ``error`` response; the session continues.
"""

from __future__ import annotations

from typing import Any

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class TransportError(Exception):
    """Reading from or writing to the message stream failed."""


class ProtocolError(Exception):
    """Base error for all JSON-RPC level failures."""

    code: int = INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        *,
        request_id: int | str | None = None,
        data: Any = None,
    ) -> None:
        self.message = message
        self.request_id = request_id
        self.data = data
        super().__init__(message)


class ParseError(ProtocolError):
    """The frame is not valid JSON."""

    code = PARSE_ERROR


class InvalidRequestError(ProtocolError):
    """The frame is not a valid JSON-RPC request, or is illegal in the current state."""

    code = INVALID_REQUEST


class MethodNotFoundError(ProtocolError):
    """The method is not part of the server's surface."""

    code = METHOD_NOT_FOUND

    def __init__(self, method: str, *, request_id: int | str | None = None) -> None:
        self.method = method
        super().__init__(f"Method not found: {method}", request_id=request_id)


class InvalidParamsError(ProtocolError):
    """The method's ``params`` are malformed."""

    code = INVALID_PARAMS


class InternalError(ProtocolError):
    """An unexpected failure while handling a request."""

    code = INTERNAL_ERROR
