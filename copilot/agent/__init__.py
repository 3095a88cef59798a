"""Conversational agent: session state, completion client, confirmation gate."""

from copilot.agent.completion import (
    CompletionCapability,
    CompletionClient,
    FinalMessage,
    ToolCallRequest,
)
from copilot.agent.confirmation import ConfirmationGate, is_affirmative
from copilot.agent.copilot import MaintenanceCopilot, TurnResult
from copilot.agent.models import AgentState, Role, Session, ToolInvocation, Turn
from copilot.agent.sessions import InMemorySessionStore, SessionStore

__all__ = [
    "AgentState",
    "CompletionCapability",
    "CompletionClient",
    "ConfirmationGate",
    "FinalMessage",
    "InMemorySessionStore",
    "MaintenanceCopilot",
    "Role",
    "Session",
    "SessionStore",
    "ToolCallRequest",
    "ToolInvocation",
    "Turn",
    "TurnResult",
    "is_affirmative",
]
