"""Message codec — text frames to typed JSON-RPC envelopes and back."""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from kagimcp.mcp.errors import InvalidRequestError, ParseError, ProtocolError
from kagimcp.mcp.models import JsonRpcError, JsonRpcRequest, JsonRpcResponse
from kagimcp.utils.validation import first_error


def decode_request(frame: str) -> JsonRpcRequest:
    """Parse one frame into a :class:`JsonRpcRequest`.

    Raises
    ------
    ParseError
        If *frame* is not valid JSON.
    InvalidRequestError
        If the JSON is not a single, well-formed JSON-RPC 2.0 request. The
        request id is kept on the error when one could be read.
    """
    try:
        raw = json.loads(frame)
    except ValueError as exc:
        msg = f"Parse error: {exc}"
        raise ParseError(msg) from exc

    if isinstance(raw, list):
        msg = "Invalid request: batch requests are not supported"
        raise InvalidRequestError(msg)
    if not isinstance(raw, dict):
        msg = "Invalid request: expected a JSON object"
        raise InvalidRequestError(msg)

    request_id = _readable_id(raw)
    if "id" in raw and raw["id"] is None:
        msg = "Invalid request: 'id' must be a string or an integer"
        raise InvalidRequestError(msg)
    if raw.get("jsonrpc") != "2.0":
        msg = "Invalid request: 'jsonrpc' must be exactly \"2.0\""
        raise InvalidRequestError(msg, request_id=request_id)
    if "method" not in raw:
        msg = "Invalid request: missing 'method'"
        raise InvalidRequestError(msg, request_id=request_id)

    try:
        return JsonRpcRequest.model_validate(raw)
    except ValidationError as exc:
        msg = f"Invalid request: {first_error(exc)}"
        raise InvalidRequestError(msg, request_id=request_id) from exc


def encode_response(response: JsonRpcResponse) -> str:
    """Serialize *response* to a single-line JSON frame (no trailing newline)."""
    return json.dumps(response.to_wire(), ensure_ascii=False, separators=(",", ":"), default=str)


def success(request_id: int | str | None, result: Any) -> JsonRpcResponse:
    return JsonRpcResponse(id=request_id, result=result)


def failure(request_id: int | str | None, exc: ProtocolError) -> JsonRpcResponse:
    """Build the ``error`` response for *exc*."""
    return JsonRpcResponse(
        id=request_id,
        error=JsonRpcError(code=exc.code, message=exc.message, data=exc.data),
    )


def _readable_id(raw: dict[str, Any]) -> int | str | None:
    value = raw.get("id")
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, str)):
        return value
    return None
