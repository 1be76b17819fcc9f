"""In-memory session registry and lifecycle management."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field

from grid_snake.config import GameConfig
from grid_snake.scheduler import Scheduler
from grid_snake.server.models import SessionSummary
from grid_snake.session import GameSession, SessionState

logger = logging.getLogger(__name__)

_MAX_STOPPED_SESSIONS = 100


@dataclass
class SessionEntry:
    """A registered session plus bookkeeping."""

    session_id: str
    session: GameSession
    created_at: float = field(default_factory=time.monotonic)
    stopped_at: float | None = None


class SessionManager:
    """Central registry owning every live :class:`GameSession`."""

    def __init__(
        self,
        config: GameConfig | None = None,
        scheduler: Scheduler | None = None,
        max_stopped_sessions: int = _MAX_STOPPED_SESSIONS,
    ) -> None:
        if max_stopped_sessions < 0:
            raise ValueError("max_stopped_sessions must be >= 0.")
        self.config = config if config is not None else GameConfig()
        self._scheduler = scheduler
        self._sessions: dict[str, SessionEntry] = {}
        self._max_stopped_sessions = max_stopped_sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def create_session(self, seed: int | None = None) -> SessionEntry:
        """Register a new idle session and return its entry."""
        session_id = uuid.uuid4().hex[:12]
        session = GameSession(self.config, scheduler=self._scheduler, seed=seed)
        entry = SessionEntry(session_id=session_id, session=session)
        session.subscribe(lambda state: self._on_state(entry, state.state))
        self._sessions[session_id] = entry
        logger.info("Session %s created.", session_id)
        return entry

    def get(self, session_id: str) -> SessionEntry:
        entry = self._sessions.get(session_id)
        if entry is None:
            raise KeyError(f"Session {session_id} not found.")
        return entry

    def list_sessions(self) -> list[SessionSummary]:
        return [self.summary(e) for e in self._sessions.values()]

    @staticmethod
    def summary(entry: SessionEntry) -> SessionSummary:
        session = entry.session
        return SessionSummary(
            session_id=entry.session_id,
            state=session.state,
            score=session.score,
            tick=session.tick_count,
        )

    def remove(self, session_id: str) -> None:
        """Stop and forget a session."""
        entry = self._sessions.pop(session_id, None)
        if entry is None:
            raise KeyError(f"Session {session_id} not found.")
        entry.session.stop()
        logger.info("Session %s removed.", session_id)

    def _on_state(self, entry: SessionEntry, state: SessionState) -> None:
        if state is SessionState.STOPPED:
            entry.stopped_at = time.monotonic()
            self._prune_stopped_sessions()
        else:
            entry.stopped_at = None

    def _prune_stopped_sessions(self) -> None:
        """Bound retained stopped sessions to avoid unbounded registry growth."""
        stopped = [
            e for e in self._sessions.values()
            if e.session.state is SessionState.STOPPED
        ]
        overflow = len(stopped) - self._max_stopped_sessions
        if overflow <= 0:
            return

        stopped.sort(
            key=lambda e: e.stopped_at if e.stopped_at is not None else e.created_at,
        )
        for stale in stopped[:overflow]:
            self._sessions.pop(stale.session_id, None)
        logger.info(
            "Pruned %d stopped sessions (retaining up to %d).",
            overflow,
            self._max_stopped_sessions,
        )

    def cleanup(self) -> None:
        """Stop every session's tick task and clear the registry."""
        for entry in list(self._sessions.values()):
            entry.session.stop()
        self._sessions.clear()
        logger.info("SessionManager cleanup complete.")
