"""
Tool definitions.

A tool is a named operation the copilot may invoke. Each one declares a JSON
schema for its input and whether it only reads data or mutates it; mutating
tools are only ever run after the user has explicitly confirmed.
"""
import enum
from typing import Any, Awaitable, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ToolEffect(str, enum.Enum):
    """Side-effect classification of a tool."""

    READ_ONLY = "read-only"
    MUTATING = "mutating"


# Handlers receive validated arguments and return a JSON-serializable result
ToolHandler = Callable[[Dict[str, Any]], Awaitable[Any]]


class ToolDefinition(BaseModel):
    """Static description of a tool, fixed at registration time."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    input_schema: Dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )
    effect: ToolEffect = ToolEffect.READ_ONLY
    # str.format template rendered with the call arguments when asking the
    # user to confirm a mutating call
    confirmation_template: Optional[str] = None

    @property
    def requires_confirmation(self) -> bool:
        return self.effect == ToolEffect.MUTATING

    def describe_call(self, arguments: Dict[str, Any]) -> str:
        """Human-readable summary of a call, used in confirmation prompts."""
        if self.confirmation_template:
            try:
                return self.confirmation_template.format(**arguments)
            except (KeyError, IndexError, ValueError):
                pass
        rendered = ", ".join(f"{key}={value!r}" for key, value in arguments.items())
        return f"{self.name}({rendered})"

    def to_openai_schema(self) -> Dict[str, Any]:
        """Function-tool entry for an OpenAI-compatible chat completions request."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_schema,
            },
        }
