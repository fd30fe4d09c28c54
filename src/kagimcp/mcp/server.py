"""MCPServer — the reader loop and JSON-RPC method routing.

Frames are read strictly in order and every request is admitted against the
session state as it is read, so a call read before ``shutdown`` is drained
and one read after it is rejected. Lifecycle methods are answered inline by
the reader; every other admitted request runs as its own task and writes its
response when it finishes, so responses appear in completion order and the
host matches them by ``id``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from kagimcp import SERVER_NAME, __version__
from kagimcp.mcp import codec
from kagimcp.mcp.errors import (
    InternalError,
    InvalidParamsError,
    MethodNotFoundError,
    ProtocolError,
    TransportError,
)
from kagimcp.mcp.models import (
    MCP_PROTOCOL_VERSION,
    CallToolParams,
    InitializeParams,
    JsonRpcRequest,
    JsonRpcResponse,
)
from kagimcp.mcp.session import SessionState
from kagimcp.utils.telemetry import request_span
from kagimcp.utils.validation import first_error

if TYPE_CHECKING:
    from kagimcp.mcp.session import Session
    from kagimcp.mcp.transport import MCPTransport
    from kagimcp.tools.dispatcher import ToolDispatcher

logger = logging.getLogger(__name__)

_INLINE_METHODS = frozenset({"initialize", "shutdown"})


class MCPServer:
    """Serves one MCP session over a transport.

    Usage::

        server = MCPServer(session, dispatcher, transport)
        await server.serve()   # returns after shutdown or end-of-stream
    """

    def __init__(
        self,
        session: Session,
        dispatcher: ToolDispatcher,
        transport: MCPTransport,
    ) -> None:
        self._session = session
        self._dispatcher = dispatcher
        self._transport = transport
        self._in_flight: set[asyncio.Task[None]] = set()
        self._reader: asyncio.Task[None] | None = None
        self._fatal: TransportError | None = None

    @property
    def session(self) -> Session:
        return self._session

    async def serve(self) -> None:
        """Run until end-of-stream.

        After ``shutdown`` the loop keeps reading so each later request still
        gets its error response.

        Raises
        ------
        TransportError
            If reading or writing the stream fails.
        """
        self._reader = asyncio.create_task(self._read_loop())
        try:
            await self._reader
        except asyncio.CancelledError:
            if self._fatal is None:
                raise
        finally:
            if self._fatal is not None:
                for task in list(self._in_flight):
                    task.cancel()
        if self._fatal is not None:
            raise self._fatal

    async def handle(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """Answer a single admitted request (never a notification)."""
        with request_span(request.method, request.id):
            try:
                result = await self._route(request)
            except ProtocolError as exc:
                logger.debug("Request %s (%s) rejected: %s", request.id, request.method, exc)
                return codec.failure(request.id, exc)
            except Exception as exc:
                logger.exception("Unhandled error in %s", request.method)
                return codec.failure(request.id, InternalError(f"Internal error: {exc}"))
            return codec.success(request.id, result)

    # ------------------------------------------------------------------
    # Reader loop
    # ------------------------------------------------------------------

    async def _read_loop(self) -> None:
        async for frame in self._transport.frames():
            try:
                request = codec.decode_request(frame)
            except ProtocolError as exc:
                logger.warning("Rejected frame: %s", exc)
                self._send(codec.failure(exc.request_id, exc))
                continue

            if request.is_notification:
                self._on_notification(request)
                continue

            try:
                self._admit(request)
            except ProtocolError as exc:
                logger.debug("Request %s (%s) rejected: %s", request.id, request.method, exc)
                self._send(codec.failure(request.id, exc))
                continue

            if request.method in _INLINE_METHODS:
                response = await self.handle(request)
                if self._session.state is SessionState.SHUTTING_DOWN:
                    await self._drain()
                self._send(response)
                continue

            task = asyncio.create_task(self._run(request))
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)

        await self._drain()

    def _admit(self, request: JsonRpcRequest) -> None:
        """Check the session state when the request is read, not when it runs."""
        if request.method != "initialize":
            self._session.require_initialized(request.method)

    async def _run(self, request: JsonRpcRequest) -> None:
        response = await self.handle(request)
        try:
            self._send(response)
        except TransportError as exc:
            logger.error("Cannot write response %s: %s", request.id, exc)
            self._fatal = exc
            if self._reader is not None:
                self._reader.cancel()

    async def _drain(self) -> None:
        if self._in_flight:
            logger.debug("Draining %d in-flight request(s)", len(self._in_flight))
            await asyncio.gather(*self._in_flight, return_exceptions=True)

    def _send(self, response: JsonRpcResponse) -> None:
        self._transport.write(codec.encode_response(response))

    def _on_notification(self, request: JsonRpcRequest) -> None:
        logger.debug("Notification %s ignored (state=%s)", request.method, self._session.state.value)

    # ------------------------------------------------------------------
    # Method routing
    # ------------------------------------------------------------------

    async def _route(self, request: JsonRpcRequest) -> Any:
        method = request.method
        if method == "initialize":
            return self._initialize(request)
        if method == "tools/list":
            return {"tools": [d.to_wire() for d in self._dispatcher.registry.descriptors()]}
        if method == "tools/call":
            return await self._call_tool(request)
        if method == "ping":
            return {}
        if method == "shutdown":
            self._session.shutdown()
            return {}
        raise MethodNotFoundError(method, request_id=request.id)

    def _initialize(self, request: JsonRpcRequest) -> dict[str, Any]:
        try:
            params = InitializeParams.model_validate(self._params(request))
        except ValidationError as exc:
            msg = f"Invalid params: {first_error(exc)}"
            raise InvalidParamsError(msg, request_id=request.id) from exc
        self._session.initialize(params)
        return {
            "protocolVersion": MCP_PROTOCOL_VERSION,
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
        }

    async def _call_tool(self, request: JsonRpcRequest) -> dict[str, Any]:
        try:
            params = CallToolParams.model_validate(self._params(request))
        except ValidationError as exc:
            msg = f"Invalid params: {first_error(exc)}"
            raise InvalidParamsError(msg, request_id=request.id) from exc

        result = await self._dispatcher.call(params.name, params.arguments)
        return result.to_wire()

    @staticmethod
    def _params(request: JsonRpcRequest) -> dict[str, Any]:
        if isinstance(request.params, list):
            msg = f"Invalid params: '{request.method}' expects an object"
            raise InvalidParamsError(msg, request_id=request.id)
        return request.params_object()
