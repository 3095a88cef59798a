"""
Confirmation gate for mutating tools.

A mutating tool only runs when the latest user turn is an explicit
affirmative given in reply to an assistant turn, i.e. the user has just
answered a proposal. Anything else turns the call into a question.
"""
import logging
import re
from typing import List, Sequence

from copilot.agent.completion import ToolCallRequest
from copilot.agent.models import Role, Session, ToolInvocation
from copilot.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

_AFFIRMATIVE = re.compile(
    r"\b(yes|yep|yeah|yup|sure|ok|okay|confirm|confirmed|correct|absolutely|proceed|"
    r"go ahead|please do|do it|save it|sounds good|that's right)\b"
)
_NEGATIVE = re.compile(
    r"\b(no|nope|don't|dont|do not|not|cancel|stop|wait|never|hold on)\b"
)


def is_affirmative(text: str) -> bool:
    """True if `text` reads as an explicit yes with no negation in it."""
    normalized = " ".join(text.lower().replace("’", "'").split())
    if not normalized or _NEGATIVE.search(normalized):
        return False
    return _AFFIRMATIVE.search(normalized) is not None


class ConfirmationGate:
    """Decides whether a round of tool calls may run without asking the user."""

    def __init__(self, registry: ToolRegistry):
        self.registry = registry

    def mutating_calls(self, calls: Sequence[ToolCallRequest]) -> List[ToolCallRequest]:
        """
        Mutating calls in a round.

        Raises:
            UnknownTool: If any call names an unregistered tool
        """
        return [call for call in calls if self.registry.is_mutating(call.name)]

    def has_confirmation(self, session: Session) -> bool:
        """True if the latest user turn confirms a proposal made just before it."""
        index = session.last_index_of(Role.USER)
        if index is None or index == 0:
            return False
        if session.turns[index - 1].role != Role.ASSISTANT:
            return False
        return is_affirmative(session.turns[index].content)

    def confirmation_request(self, invocations: Sequence[ToolInvocation]) -> str:
        """Question put to the user in place of the blocked calls."""
        actions = [
            self.registry.require(invocation.name).describe_call(invocation.arguments)
            for invocation in invocations
        ]
        if len(actions) == 1:
            summary = f"I'm about to {actions[0]}."
        else:
            summary = "I'm about to:\n" + "\n".join(f"- {action}" for action in actions)
        return f"{summary} Shall I go ahead? Please reply yes to confirm."
