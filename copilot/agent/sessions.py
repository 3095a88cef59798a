"""
Session storage.

Sessions are stored in serialized form so a stored session can never be
mutated through a reference held by a running turn. Any store that can keep
a JSON document per key can back the copilot.
"""
import logging
from abc import ABC, abstractmethod
from typing import Optional

from cachetools import TTLCache

from copilot.agent.models import Session
from copilot.config import settings

logger = logging.getLogger(__name__)


class SessionStore(ABC):
    """Keyed storage for conversation sessions."""

    @abstractmethod
    async def get(self, session_id: str) -> Optional[Session]:
        ...

    @abstractmethod
    async def save(self, session: Session) -> None:
        ...

    @abstractmethod
    async def delete(self, session_id: str) -> bool:
        ...


class InMemorySessionStore(SessionStore):
    """Process-local store with idle expiry and a bound on the session count."""

    def __init__(self, max_sessions: Optional[int] = None, ttl_seconds: Optional[float] = None):
        self._sessions: TTLCache = TTLCache(
            maxsize=max_sessions or settings.SESSION_MAX_COUNT,
            ttl=ttl_seconds or settings.SESSION_TTL_SECONDS,
        )

    def __len__(self) -> int:
        return len(self._sessions)

    async def get(self, session_id: str) -> Optional[Session]:
        data = self._sessions.get(session_id)
        if data is None:
            return None
        return Session.model_validate_json(data)

    async def save(self, session: Session) -> None:
        self._sessions[session.session_id] = session.model_dump_json()

    async def delete(self, session_id: str) -> bool:
        removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info(f"Cleared session '{session_id}'")
        return removed
