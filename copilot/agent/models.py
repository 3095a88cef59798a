"""
Conversation state models.

A Session is plain serializable data: the copilot takes one in and hands a
new one back for every turn, so any worker can continue any conversation.
"""
import enum
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, enum.Enum):
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class AgentState(str, enum.Enum):
    """Where a session is in the chat state machine."""

    IDLE = "idle"
    AWAITING_COMPLETION = "awaiting_completion"
    EXECUTING_TOOLS = "executing_tools"
    AWAITING_CONFIRMATION = "awaiting_confirmation"


class ToolInvocation(BaseModel):
    """A requested tool call and, once executed, its result or failure."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)
    result: Optional[Any] = None
    error: Optional[str] = None
    executed: bool = False

    @property
    def failed(self) -> bool:
        return self.error is not None

    def with_result(self, result: Any) -> "ToolInvocation":
        return self.model_copy(update={"result": result, "executed": True})

    def with_error(self, message: str) -> "ToolInvocation":
        return self.model_copy(update={"error": message, "executed": True})


class Turn(BaseModel):
    """One message in the transcript. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str = ""
    tool_invocations: List[ToolInvocation] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_now)

    @classmethod
    def user(cls, content: str) -> "Turn":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str, tool_invocations: Optional[List[ToolInvocation]] = None) -> "Turn":
        return cls(role=Role.ASSISTANT, content=content, tool_invocations=tool_invocations or [])

    @classmethod
    def tool(cls, invocation: ToolInvocation) -> "Turn":
        return cls(role=Role.TOOL, tool_invocations=[invocation])


class Session(BaseModel):
    """
    One conversation: an append-only transcript plus state machine position.

    Every mutator returns a new Session; the original is left untouched so a
    failed turn can be discarded by simply keeping the previous value.
    """

    session_id: str
    turns: List[Turn] = Field(default_factory=list)
    state: AgentState = AgentState.IDLE
    # Mutating calls proposed to the user and not yet confirmed
    pending_action: List[ToolInvocation] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    def append(self, turn: Turn) -> "Session":
        return self.model_copy(update={"turns": [*self.turns, turn], "updated_at": _now()})

    def transition(self, state: AgentState) -> "Session":
        return self.model_copy(update={"state": state})

    def with_pending(self, invocations: List[ToolInvocation]) -> "Session":
        return self.model_copy(update={"pending_action": list(invocations)})

    def last_index_of(self, role: Role) -> Optional[int]:
        for index in range(len(self.turns) - 1, -1, -1):
            if self.turns[index].role == role:
                return index
        return None
