"""Rubik 3x3 cube game package."""

from .engine import CubeEngine
from .sessions import DuplicateSessionError, SessionNotFoundError, SessionRegistry
from .solved_check import is_solved
from .state_codec import InvalidMoveError, StateValidationError
from .types import CubeState, GameSession, SessionStatus

__all__ = [
    "CubeEngine",
    "CubeState",
    "DuplicateSessionError",
    "GameSession",
    "InvalidMoveError",
    "SessionNotFoundError",
    "SessionRegistry",
    "SessionStatus",
    "StateValidationError",
    "is_solved",
]
