"""
Tool Registry - explicit mapping of tool name to typed handler.

Arguments are validated against the tool's JSON schema before the handler is
called, so handlers only ever see input that matches their contract.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from copilot.errors import DuplicateKey, ToolExecutionError, UnknownTool
from copilot.observability import record_tool_invocation
from copilot.tools.base import ToolDefinition, ToolHandler
from copilot.utils.validation import (
    validate_json_schema,
    validate_tool_arguments,
    validate_tool_name,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisteredTool:
    definition: ToolDefinition
    handler: ToolHandler


class ToolRegistry:
    """
    Registry of tools the copilot may call.

    Tools are registered at startup and are immutable afterwards.
    """

    def __init__(self):
        self._tools: Dict[str, RegisteredTool] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def register(self, definition: ToolDefinition, handler: ToolHandler) -> None:
        """
        Register a tool.

        Raises:
            SchemaViolation: If the name or input schema is invalid
            DuplicateKey: If a tool with the same name is already registered
        """
        validate_tool_name(definition.name)
        validate_json_schema(definition.input_schema)

        if definition.name in self._tools:
            raise DuplicateKey(f"Tool '{definition.name}' is already registered")

        self._tools[definition.name] = RegisteredTool(definition=definition, handler=handler)
        logger.debug(f"Registered tool '{definition.name}' ({definition.effect.value})")

    def get(self, name: str) -> Optional[ToolDefinition]:
        tool = self._tools.get(name)
        return tool.definition if tool else None

    def require(self, name: str) -> ToolDefinition:
        """Get a tool definition or raise UnknownTool."""
        definition = self.get(name)
        if definition is None:
            raise UnknownTool(f"Tool '{name}' is not registered")
        return definition

    def definitions(self) -> List[ToolDefinition]:
        return [tool.definition for tool in self._tools.values()]

    def schemas(self) -> List[Dict[str, Any]]:
        """All tools in OpenAI function-tool format."""
        return [tool.definition.to_openai_schema() for tool in self._tools.values()]

    def is_mutating(self, name: str) -> bool:
        return self.require(name).requires_confirmation

    async def invoke(self, name: str, arguments: Dict[str, Any]) -> Any:
        """
        Validate arguments and run a tool's handler.

        Raises:
            UnknownTool: If no tool is registered under `name`
            SchemaViolation: If arguments don't match the input schema
            ToolExecutionError: If the handler fails; the original error is `cause`
        """
        definition = self.require(name)
        validate_tool_arguments(arguments, definition.input_schema)
        handler = self._tools[name].handler

        start_time = time.time()
        try:
            result = await handler(arguments)
        except Exception as e:
            duration = time.time() - start_time
            record_tool_invocation(
                tool_name=name,
                effect=definition.effect.value,
                execution_time=duration,
                success=False,
                error_type=type(e).__name__,
            )
            logger.warning(f"Tool '{name}' failed after {duration:.2f}s: {e}")
            raise ToolExecutionError(name, e) from e

        duration = time.time() - start_time
        record_tool_invocation(
            tool_name=name,
            effect=definition.effect.value,
            execution_time=duration,
            success=True,
        )
        logger.info(f"Tool '{name}' completed in {duration:.2f}s")
        return result
