"""Session — the protocol lifecycle state machine.

``UNINITIALIZED -> INITIALIZED -> SHUTTING_DOWN``; transitions never go back.
Only ``initialize`` and ``shutdown`` mutate the session, and both run on the
server's reader loop, so every request dispatched after a transition observes
the new state.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from kagimcp.mcp.errors import InvalidRequestError

if TYPE_CHECKING:
    from kagimcp.config import ServerConfig
    from kagimcp.mcp.models import Implementation, InitializeParams

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    SHUTTING_DOWN = "shutting_down"


class Session:
    """Per-process protocol session.

    ``config`` is read-only and may be shared by any number of in-flight
    requests.
    """

    def __init__(self, config: ServerConfig) -> None:
        self._config = config
        self._state = SessionState.UNINITIALIZED
        self.client_capabilities: dict[str, Any] = {}
        self.client_info: Implementation | None = None
        self.protocol_version: str | None = None

    @property
    def config(self) -> ServerConfig:
        return self._config

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._state is SessionState.INITIALIZED

    def initialize(self, params: InitializeParams) -> None:
        """Record the host's capabilities and move to ``INITIALIZED``.

        A second ``initialize`` is rejected: capabilities cannot be
        renegotiated mid-session.
        """
        if self._state is SessionState.INITIALIZED:
            msg = "Server already initialized"
            raise InvalidRequestError(msg)
        self._reject_if_shutting_down()

        self.client_capabilities = dict(params.capabilities)
        self.client_info = params.client_info
        self.protocol_version = params.protocol_version
        self._state = SessionState.INITIALIZED
        logger.info(
            "Session initialized (client=%s, protocol=%s)",
            params.client_info.name if params.client_info else "unknown",
            params.protocol_version,
        )

    def shutdown(self) -> None:
        """Move to ``SHUTTING_DOWN``."""
        self.require_initialized("shutdown")
        self._state = SessionState.SHUTTING_DOWN
        logger.info("Session shutting down")

    def require_initialized(self, method: str) -> None:
        """Raise unless *method* may run in the current state."""
        if self._state is SessionState.UNINITIALIZED:
            msg = f"Server not initialized: call 'initialize' before '{method}'"
            raise InvalidRequestError(msg)
        self._reject_if_shutting_down()

    def _reject_if_shutting_down(self) -> None:
        if self._state is SessionState.SHUTTING_DOWN:
            msg = "Server is shutting down"
            raise InvalidRequestError(msg)
