"""In-memory registry of cube game sessions."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable

from .engine import CubeEngine, parse_move
from .types import CubeState, GameSession, SessionStatus

logger = logging.getLogger(__name__)


class SessionNotFoundError(LookupError):
    """Raised when a session id is not registered."""

    def __init__(self, session_id: str):
        super().__init__(f"Game session {session_id} not found")
        self.session_id = session_id


class DuplicateSessionError(ValueError):
    """Raised when creating a session under an id already in use."""


def epoch_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class _Entry:
    engine: CubeEngine
    session: GameSession
    lock: threading.RLock = field(default_factory=threading.RLock)


class SessionRegistry:
    """Maps session ids to a cube engine plus its session metadata.

    Every mutating call on one id runs under that id's lock, and callers only
    ever receive copies of the stored session and state.
    """

    def __init__(self, clock: Callable[[], int] | None = None):
        self._clock = clock if clock is not None else epoch_ms
        self._lock = threading.Lock()
        self._entries: dict[str, _Entry] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._entries

    def _entry(self, session_id: str) -> _Entry:
        with self._lock:
            entry = self._entries.get(session_id)
        if entry is None:
            raise SessionNotFoundError(session_id)
        return entry

    def create(
        self,
        session_id: str,
        initial_state: CubeState | Mapping[str, Any] | None = None,
        difficulty: int | None = None,
    ) -> GameSession:
        if difficulty is not None and (
            isinstance(difficulty, bool) or not isinstance(difficulty, int) or difficulty < 0
        ):
            raise ValueError("difficulty must be a non-negative integer")

        engine = CubeEngine(initial_state)
        now = self._clock()
        session = GameSession(
            id=session_id,
            cube_state=engine.get_state(),
            created_at=now,
            last_activity=now,
            status=SessionStatus.ACTIVE,
            scramble_moves=difficulty or None,
        )

        with self._lock:
            if session_id in self._entries:
                raise DuplicateSessionError(f"Game session {session_id} already exists")
            self._entries[session_id] = _Entry(engine=engine, session=session)

        logger.info("session %s created (scramble_moves=%s)", session_id, session.scramble_moves)
        return session.copy()

    def get(self, session_id: str) -> GameSession | None:
        with self._lock:
            entry = self._entries.get(session_id)
        if entry is None:
            return None
        with entry.lock:
            return entry.session.copy()

    def list_sessions(self) -> list[GameSession]:
        with self._lock:
            entries = list(self._entries.values())
        out = []
        for entry in entries:
            with entry.lock:
                out.append(entry.session.copy())
        return out

    def apply_move(self, session_id: str, token: str) -> CubeState:
        return self.apply_move_session(session_id, token).cube_state

    def apply_move_session(self, session_id: str, token: str) -> GameSession:
        """Apply one move and return the session copied under the same lock as the write."""
        entry = self._entry(session_id)
        parse_move(token)

        with entry.lock:
            session = entry.session
            if session.status is SessionStatus.COMPLETED:
                logger.debug("session %s is completed; ignoring move %s", session_id, token)
                return session.copy()

            state = entry.engine.execute_move(token)
            session.cube_state = state
            session.last_activity = self._clock()
            if state.solved:
                session.status = SessionStatus.COMPLETED
                logger.info("session %s solved after %d moves", session_id, len(state.move_history))
            return session.copy()

    def finish(self, session_id: str) -> GameSession:
        entry = self._entry(session_id)
        with entry.lock:
            entry.session.status = SessionStatus.COMPLETED
            entry.session.last_activity = self._clock()
            logger.info("session %s finished", session_id)
            return entry.session.copy()
