"""Tool layer — registry, typed arguments, dispatch and result formatting."""

from kagimcp.tools.dispatcher import ToolDispatcher, describe_upstream_error
from kagimcp.tools.registry import TOOL_DESCRIPTORS, ToolRegistry

__all__ = [
    "TOOL_DESCRIPTORS",
    "ToolDispatcher",
    "ToolRegistry",
    "describe_upstream_error",
]
