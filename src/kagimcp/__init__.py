"""kagimcp — Kagi search, summarizer and FastGPT tools over the Model Context Protocol."""

from __future__ import annotations

__version__ = "0.1.0"

SERVER_NAME = "kagi-mcp-server"
