"""Session store abstraction and in-memory implementation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from backend.chat.session import ChatSession

logger = logging.getLogger("llantera.store")


class SessionStore(ABC):
    """Abstract interface for holding live chat sessions."""

    @abstractmethod
    def add(self, session: "ChatSession") -> None:
        """Register a newly opened session."""

    @abstractmethod
    def get(self, session_id: str) -> "ChatSession | None":
        """Return the session or ``None`` when unknown."""

    @abstractmethod
    def pop(self, session_id: str) -> "ChatSession | None":
        """Forget a session and hand it back for closing."""

    @abstractmethod
    def iter_sessions(self) -> Iterable[str]:
        """Iterate over known session identifiers."""

    async def close_all(self) -> None:
        for session_id in list(self.iter_sessions()):
            session = self.pop(session_id)
            if session is None:
                continue
            try:
                await session.close()
            except Exception:  # noqa: BLE001
                logger.exception("Failed to close session %s", session_id)


class InMemorySessionStore(SessionStore):
    """Sessions keyed by id for the lifetime of the process."""

    def __init__(self) -> None:
        self._sessions: dict[str, "ChatSession"] = {}

    def add(self, session: "ChatSession") -> None:
        self._sessions[session.id] = session

    def get(self, session_id: str) -> "ChatSession | None":
        return self._sessions.get(session_id)

    def pop(self, session_id: str) -> "ChatSession | None":
        return self._sessions.pop(session_id, None)

    def iter_sessions(self) -> Iterable[str]:
        return sorted(self._sessions)
