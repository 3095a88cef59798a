"""Tool definitions, registry and implementations."""

from copilot.tools.base import ToolDefinition, ToolEffect, ToolHandler
from copilot.tools.registry import ToolRegistry

__all__ = [
    "ToolDefinition",
    "ToolEffect",
    "ToolHandler",
    "ToolRegistry",
]
