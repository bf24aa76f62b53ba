"""Shared value types for the cube engine and session registry."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

import numpy as np

from .actions import solved_state
from .solved_check import is_solved
from .state_codec import (
    StateValidationError,
    faces_to_stickers,
    stickers_to_faces,
    validate_history,
    validate_stickers,
)


@dataclass(eq=False)
class CubeState:
    stickers: np.ndarray  # shape (54,), color ids in FACE_ORDER layout
    solved: bool = True
    move_history: list[str] = field(default_factory=list)

    @classmethod
    def solved_cube(cls) -> CubeState:
        return cls(stickers=solved_state())

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> CubeState:
        """Build a validated state from the ``{faces, solved, moveHistory}`` snapshot shape.

        ``solved`` is recomputed from the stickers; the payload's flag is ignored.
        """
        if not isinstance(payload, Mapping):
            raise StateValidationError("State must be an object")
        if "faces" not in payload:
            raise StateValidationError("Missing required field: faces")
        stickers = faces_to_stickers(payload["faces"])
        history = validate_history(payload.get("moveHistory", []))
        return cls(stickers=stickers, solved=is_solved(stickers), move_history=history)

    def validated(self) -> CubeState:
        """Return a checked copy with ``solved`` recomputed."""
        stickers = validate_stickers(self.stickers)
        return CubeState(stickers, is_solved(stickers), validate_history(self.move_history))

    def copy(self) -> CubeState:
        return CubeState(self.stickers.copy(), bool(self.solved), list(self.move_history))

    @property
    def faces(self) -> dict[str, list[list[str]]]:
        return stickers_to_faces(self.stickers)

    def same_stickers(self, other: CubeState) -> bool:
        return np.array_equal(self.stickers, other.stickers)

    def to_dict(self) -> dict[str, Any]:
        return {
            "faces": self.faces,
            "solved": bool(self.solved),
            "moveHistory": list(self.move_history),
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CubeState):
            return NotImplemented
        return (
            self.same_stickers(other)
            and bool(self.solved) == bool(other.solved)
            and self.move_history == other.move_history
        )


class SessionStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass
class GameSession:
    id: str
    cube_state: CubeState
    created_at: int  # epoch ms
    last_activity: int  # epoch ms
    status: SessionStatus = SessionStatus.ACTIVE
    scramble_moves: int | None = None

    def copy(self) -> GameSession:
        return replace(self, cube_state=self.cube_state.copy())

    def to_dict(self) -> dict[str, Any]:
        out = {
            "id": self.id,
            "cubeState": self.cube_state.to_dict(),
            "createdAt": self.created_at,
            "lastActivity": self.last_activity,
            "status": self.status.value,
        }
        if self.scramble_moves is not None:
            out["scrambleMoves"] = self.scramble_moves
        return out

    def summary(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "status": self.status.value,
            "createdAt": self.created_at,
            "lastActivity": self.last_activity,
            "scrambleMoves": self.scramble_moves,
            "moveHistory": len(self.cube_state.move_history),
        }
