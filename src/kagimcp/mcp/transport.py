"""Stdio transport — newline-delimited UTF-8 JSON frames.

The transport owns no protocol knowledge: it yields one text frame per input
line and writes one line per outgoing frame, flushing after each.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import AsyncIterator
from typing import BinaryIO, Protocol, runtime_checkable

from kagimcp.mcp.errors import TransportError

logger = logging.getLogger(__name__)

MAX_FRAME_BYTES = 16 * 1024 * 1024


@runtime_checkable
class MCPTransport(Protocol):
    """Abstract transport for MCP JSON-RPC communication."""

    def frames(self) -> AsyncIterator[str]: ...
    def write(self, frame: str) -> None: ...


class StdioTransport:
    """Reads frames from an :class:`asyncio.StreamReader`, writes to a binary stream.

    Usage::

        transport = await StdioTransport.connect()
        async for frame in transport.frames():
            ...
            transport.write(reply)
    """

    def __init__(self, reader: asyncio.StreamReader, writer: BinaryIO) -> None:
        self._reader = reader
        self._writer = writer

    @classmethod
    async def connect(cls) -> StdioTransport:
        """Attach to the process's stdin/stdout."""
        loop = asyncio.get_running_loop()
        reader = asyncio.StreamReader(limit=MAX_FRAME_BYTES)
        protocol = asyncio.StreamReaderProtocol(reader)
        try:
            await loop.connect_read_pipe(lambda: protocol, sys.stdin)
        except (OSError, ValueError) as exc:
            msg = f"Cannot read from stdin: {exc}"
            raise TransportError(msg) from exc
        return cls(reader, sys.stdout.buffer)

    async def frames(self) -> AsyncIterator[str]:
        """Yield decoded frames until end-of-stream; blank lines are skipped."""
        while True:
            try:
                line = await self._reader.readline()
            except (asyncio.LimitOverrunError, ValueError) as exc:
                msg = f"Frame exceeds {MAX_FRAME_BYTES} bytes"
                raise TransportError(msg) from exc
            except OSError as exc:
                msg = f"Read failed: {exc}"
                raise TransportError(msg) from exc

            if not line:
                logger.debug("End of input stream")
                return

            try:
                text = line.decode("utf-8")
            except UnicodeDecodeError as exc:
                msg = f"Frame is not valid UTF-8: {exc}"
                raise TransportError(msg) from exc

            text = text.strip()
            if text:
                yield text

    def write(self, frame: str) -> None:
        """Write *frame* followed by a newline and flush."""
        try:
            self._writer.write(frame.encode("utf-8") + b"\n")
            self._writer.flush()
        except (OSError, ValueError) as exc:
            msg = f"Write failed: {exc}"
            raise TransportError(msg) from exc
