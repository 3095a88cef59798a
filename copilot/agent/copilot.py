"""
Maintenance copilot.

Runs the chat state machine for a session:

    Idle -> AwaitingCompletion -> (final message) -> Idle
                               -> (tool calls) -> ExecutingTools -> AwaitingCompletion
                               -> (unconfirmed mutating call) -> AwaitingConfirmation -> Idle

A turn works on a copy of the session and only the finished copy is stored,
so a turn that fails part way leaves the stored transcript holding nothing
but the user's message.
"""
import asyncio
import logging
import time
import uuid
import weakref
from dataclasses import dataclass
from typing import List, Optional, Sequence

from copilot.agent.completion import CompletionCapability, FinalMessage, ToolCallRequest
from copilot.agent.confirmation import ConfirmationGate
from copilot.agent.models import AgentState, Session, ToolInvocation, Turn
from copilot.agent.sessions import InMemorySessionStore, SessionStore
from copilot.config import settings
from copilot.errors import ToolExecutionError, ToolLoopExceeded
from copilot.observability import create_span, record_chat_turn
from copilot.tools.registry import ToolRegistry
from copilot.utils.validation import validate_text

logger = logging.getLogger(__name__)

APOLOGY_MESSAGE = (
    "I'm sorry, I wasn't able to finish that request. "
    "Please try again or rephrase what you need."
)


@dataclass(frozen=True)
class TurnResult:
    """Outcome of one user turn."""

    session: Session
    reply: str
    outcome: str = "completed"
    rounds: int = 0


@dataclass
class _WorkingTurn:
    session: Session
    rounds: int = 0
    confirmed: bool = False


class MaintenanceCopilot:
    """Conversational agent that answers hotel questions and files maintenance requests."""

    def __init__(
        self,
        completion: CompletionCapability,
        registry: ToolRegistry,
        sessions: Optional[SessionStore] = None,
        max_tool_rounds: Optional[int] = None,
    ):
        self.completion = completion
        self.registry = registry
        self.sessions = sessions if sessions is not None else InMemorySessionStore()
        self.max_tool_rounds = max_tool_rounds or settings.AGENT_MAX_TOOL_ROUNDS
        self.gate = ConfirmationGate(registry)
        # Lock objects live only while some turn for the session holds one
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def _lock_for(self, session_id: str) -> asyncio.Lock:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_id] = lock
        return lock

    async def chat(self, session_id: str, user_text: str) -> str:
        """
        Process one user message in a stored session and return the reply.

        Calls for the same session run one at a time in arrival order.

        Raises:
            InvalidInput: If the message is empty or too long
            ProviderUnavailable: If the completion service fails
            UnknownTool: If the model calls a tool that doesn't exist
            SchemaViolation: If the model calls a tool with invalid arguments
        """
        validate_text(user_text)

        async with self._lock_for(session_id):
            stored = await self.sessions.get(session_id)
            committed = (stored or Session(session_id=session_id)).append(Turn.user(user_text))

            try:
                result = await self._run(committed)
            except BaseException:
                await self.sessions.save(committed.transition(AgentState.IDLE))
                logger.warning(f"Session '{session_id}': turn failed, kept user message only")
                raise

            await self.sessions.save(result.session)
            return result.reply

    async def process_turn(self, session: Session, user_text: str) -> TurnResult:
        """
        Process one user message against a caller-held session.

        The given session is not modified; the returned TurnResult carries
        the updated copy.
        """
        validate_text(user_text)
        return await self._run(session.append(Turn.user(user_text)))

    async def ask(self, user_text: str) -> str:
        """One-shot question without a stored conversation."""
        result = await self.process_turn(Session(session_id=uuid.uuid4().hex), user_text)
        return result.reply

    async def reset(self, session_id: str) -> bool:
        """Forget a session's transcript."""
        async with self._lock_for(session_id):
            return await self.sessions.delete(session_id)

    async def _run(self, session: Session) -> TurnResult:
        start_time = time.time()
        span = create_span(
            name="copilot.turn",
            attributes={"session.id": session.session_id, "session.turns": len(session.turns)},
        )
        work = _WorkingTurn(session=session, confirmed=self.gate.has_confirmation(session))
        outcome = "error"
        try:
            try:
                result = await self._loop(work)
            except ToolLoopExceeded as e:
                logger.warning(f"Session '{session.session_id}': {e}")
                result = self._finish(work, APOLOGY_MESSAGE, outcome="tool_loop_exceeded")
            outcome = result.outcome
            span.set_attribute("copilot.outcome", outcome)
            span.set_attribute("copilot.rounds", result.rounds)
            return result
        finally:
            span.end()
            record_chat_turn(rounds=work.rounds, outcome=outcome, duration=time.time() - start_time)

    async def _loop(self, work: _WorkingTurn) -> TurnResult:
        session_id = work.session.session_id

        while True:
            self._transition(work, AgentState.AWAITING_COMPLETION)
            completion = await self.completion.complete(work.session.turns, self.registry.schemas())

            if isinstance(completion, FinalMessage):
                return self._finish(work, completion.content)

            if work.rounds >= self.max_tool_rounds:
                raise ToolLoopExceeded(self.max_tool_rounds)

            mutating = self.gate.mutating_calls(completion)
            if mutating and not work.confirmed:
                return self._ask_for_confirmation(work, completion)

            if mutating:
                # One confirmation authorizes one round of mutating calls
                work.confirmed = False
                logger.info(
                    f"Session '{session_id}': running confirmed {[c.name for c in mutating]}"
                )

            await self._execute_round(work, completion)

    async def _execute_round(self, work: _WorkingTurn, calls: Sequence[ToolCallRequest]) -> None:
        self._transition(work, AgentState.EXECUTING_TOOLS)
        work.rounds += 1

        requested = [
            ToolInvocation(id=call.id, name=call.name, arguments=call.arguments)
            for call in calls
        ]
        session = work.session.append(Turn.assistant("", tool_invocations=requested))

        # Sequential: later calls may depend on what earlier ones changed
        for invocation in requested:
            try:
                result = await self.registry.invoke(invocation.name, invocation.arguments)
                executed = invocation.with_result(result)
            except ToolExecutionError as e:
                executed = invocation.with_error(str(e.cause) or type(e.cause).__name__)
            session = session.append(Turn.tool(executed))

        work.session = session

    def _ask_for_confirmation(
        self,
        work: _WorkingTurn,
        calls: Sequence[ToolCallRequest],
    ) -> TurnResult:
        pending: List[ToolInvocation] = [
            ToolInvocation(id=call.id, name=call.name, arguments=call.arguments)
            for call in calls
            if self.registry.is_mutating(call.name)
        ]
        self._transition(work, AgentState.AWAITING_CONFIRMATION)
        logger.info(
            f"Session '{work.session.session_id}': holding {[p.name for p in pending]} "
            f"for user confirmation"
        )
        work.session = work.session.with_pending(pending)
        return self._finish(
            work,
            self.gate.confirmation_request(pending),
            outcome="confirmation_required",
            keep_pending=True,
        )

    def _finish(
        self,
        work: _WorkingTurn,
        reply: str,
        outcome: str = "completed",
        keep_pending: bool = False,
    ) -> TurnResult:
        session = work.session.append(Turn.assistant(reply))
        if not keep_pending:
            session = session.with_pending([])
        work.session = session
        self._transition(work, AgentState.IDLE)
        return TurnResult(session=work.session, reply=reply, outcome=outcome, rounds=work.rounds)

    def _transition(self, work: _WorkingTurn, state: AgentState) -> None:
        if work.session.state != state:
            logger.debug(
                f"Session '{work.session.session_id}': {work.session.state.value} -> {state.value}"
            )
            work.session = work.session.transition(state)
