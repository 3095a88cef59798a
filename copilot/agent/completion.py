"""
Chat completion capability.

Sends the full transcript and the available tools to an OpenAI-compatible
chat completions endpoint and returns either the final assistant message or
the tool calls the model asked for. Stateless per call.
"""
import json
import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union

from pydantic import BaseModel, Field

from copilot.agent.models import Role, Turn
from copilot.config import settings
from copilot.errors import ProviderUnavailable, SchemaViolation
from copilot.utils.http import build_auth_headers, post_json

logger = logging.getLogger(__name__)


class FinalMessage(BaseModel):
    content: str


class ToolCallRequest(BaseModel):
    id: str
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


CompletionResult = Union[FinalMessage, List[ToolCallRequest]]


class CompletionCapability(Protocol):
    """complete(history, tools) -> FinalMessage | list[ToolCallRequest]"""

    async def complete(
        self,
        history: Sequence[Turn],
        tools: Sequence[Dict[str, Any]],
    ) -> CompletionResult:
        ...


def _serialize(value: Any) -> str:
    return json.dumps(value, default=str)


def build_messages(history: Sequence[Turn], system_prompt: Optional[str] = None) -> List[Dict[str, Any]]:
    """Convert transcript turns into chat completion messages."""
    messages: List[Dict[str, Any]] = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})

    for turn in history:
        if turn.role == Role.USER:
            messages.append({"role": "user", "content": turn.content})

        elif turn.role == Role.ASSISTANT and turn.tool_invocations:
            messages.append({
                "role": "assistant",
                "content": turn.content or None,
                "tool_calls": [
                    {
                        "id": invocation.id,
                        "type": "function",
                        "function": {
                            "name": invocation.name,
                            "arguments": _serialize(invocation.arguments),
                        },
                    }
                    for invocation in turn.tool_invocations
                ],
            })

        elif turn.role == Role.ASSISTANT:
            messages.append({"role": "assistant", "content": turn.content})

        else:
            for invocation in turn.tool_invocations:
                body = {"error": invocation.error} if invocation.failed else invocation.result
                messages.append({
                    "role": "tool",
                    "tool_call_id": invocation.id,
                    "content": _serialize(body),
                })

    return messages


class CompletionClient:
    """Client for an OpenAI / Azure OpenAI chat completions endpoint."""

    def __init__(
        self,
        endpoint_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        system_prompt: Optional[str] = None,
        timeout: Optional[float] = None,
        temperature: Optional[float] = None,
        api_key_header: Optional[str] = None,
    ):
        """
        Initialize the completion client.

        Args:
            endpoint_url: Full chat completions URL (defaults to settings)
            api_key: API key (defaults to settings)
            model: Model or deployment name (defaults to settings)
            system_prompt: Instructions prepended to every request
            timeout: Request timeout in seconds
            temperature: Sampling temperature
            api_key_header: "Authorization" for bearer tokens, "api-key" for Azure
        """
        self.endpoint_url = endpoint_url or settings.CHAT_COMPLETION_URL
        self.api_key = api_key or settings.CHAT_API_KEY
        self.model = model or settings.CHAT_MODEL
        self.system_prompt = system_prompt if system_prompt is not None else settings.SYSTEM_PROMPT
        self.timeout = timeout or settings.CHAT_TIMEOUT
        self.temperature = settings.CHAT_TEMPERATURE if temperature is None else temperature
        self.api_key_header = api_key_header or settings.API_KEY_HEADER

    async def complete(
        self,
        history: Sequence[Turn],
        tools: Sequence[Dict[str, Any]],
    ) -> CompletionResult:
        """
        Request the next assistant step.

        Raises:
            ProviderUnavailable: On timeouts, transport errors or malformed responses
            SchemaViolation: If a tool call carries arguments that are not a JSON object
        """
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": build_messages(history, self.system_prompt),
            "temperature": self.temperature,
        }
        if tools:
            payload["tools"] = list(tools)
            payload["tool_choice"] = "auto"

        data = await post_json(
            self.endpoint_url,
            payload,
            headers=build_auth_headers(self.api_key, self.api_key_header),
            timeout=self.timeout,
            service="chat completion service",
        )
        return self._parse_response(data)

    def _parse_response(self, data: Any) -> CompletionResult:
        try:
            message = data["choices"][0]["message"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderUnavailable("Invalid response format from chat completion service") from e

        tool_calls = message.get("tool_calls") or []
        if tool_calls:
            requests = [self._parse_tool_call(call) for call in tool_calls]
            logger.debug(f"Completion requested tools: {[r.name for r in requests]}")
            return requests

        return FinalMessage(content=message.get("content") or "")

    def _parse_tool_call(self, call: Dict[str, Any]) -> ToolCallRequest:
        function = call.get("function") or {}
        raw_arguments = function.get("arguments") or "{}"
        try:
            arguments = json.loads(raw_arguments) if isinstance(raw_arguments, str) else raw_arguments
        except json.JSONDecodeError as e:
            raise SchemaViolation(
                f"Tool call '{function.get('name')}' has arguments that are not valid JSON"
            ) from e

        if not isinstance(arguments, dict):
            raise SchemaViolation(f"Tool call '{function.get('name')}' arguments must be an object")

        return ToolCallRequest(id=call.get("id", ""), name=function.get("name", ""), arguments=arguments)
