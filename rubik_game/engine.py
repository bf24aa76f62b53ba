"""Core 3x3 Rubik cube engine."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Any

import numpy as np

from .actions import MOVE_TOKENS, QUARTER_TURN_PERMUTATIONS, SCRAMBLE_TOKENS, TURN_SUFFIXES
from .solved_check import is_solved
from .state_codec import InvalidMoveError, StateValidationError, render_text
from .types import CubeState

DEFAULT_SCRAMBLE_MOVES = 20


def parse_move(token: Any) -> tuple[str, int]:
    """Split a move token into (face letter, clockwise quarter turns)."""
    if not isinstance(token, str) or token not in MOVE_TOKENS:
        raise InvalidMoveError(f"Unknown move: {token!r}; allowed: {' '.join(MOVE_TOKENS)}")
    return token[0], TURN_SUFFIXES[token[1:]]


def _coerce_state(state: CubeState | Mapping[str, Any]) -> CubeState:
    if isinstance(state, CubeState):
        return state.validated()
    return CubeState.from_dict(state)


class CubeEngine:
    """Thread-safe 3x3 cube engine accepting the 18 face-turn tokens."""

    def __init__(
        self,
        initial_state: CubeState | Mapping[str, Any] | None = None,
        rng: np.random.Generator | None = None,
    ):
        self._lock = threading.RLock()
        self._rng = rng if rng is not None else np.random.default_rng()
        self._state = CubeState.solved_cube() if initial_state is None else _coerce_state(initial_state)

    @classmethod
    def create(cls, rng: np.random.Generator | None = None) -> CubeEngine:
        return cls(rng=rng)

    def get_state(self) -> CubeState:
        with self._lock:
            return self._state.copy()

    def set_state(self, state: CubeState | Mapping[str, Any]) -> CubeState:
        new_state = _coerce_state(state)
        with self._lock:
            self._state = new_state
            return self._state.copy()

    def is_solved(self) -> bool:
        with self._lock:
            return is_solved(self._state.stickers)

    def execute_move(self, token: str) -> CubeState:
        letter, quarter_turns = parse_move(token)
        perm = QUARTER_TURN_PERMUTATIONS[letter]

        with self._lock:
            stickers = self._state.stickers
            # X' is X three times and X2 is X twice, literally.
            for _ in range(quarter_turns):
                stickers = stickers[perm]
            self._state.stickers = stickers
            self._state.move_history.append(token)
            self._state.solved = is_solved(stickers)
            return self._state.copy()

    def scramble(
        self, move_count: int = DEFAULT_SCRAMBLE_MOVES, seed: int | None = None
    ) -> tuple[CubeState, list[str]]:
        if isinstance(move_count, bool) or not isinstance(move_count, int) or move_count < 0:
            raise StateValidationError("Scramble move count must be a non-negative integer")

        with self._lock:
            rng = np.random.default_rng(seed) if seed is not None else self._rng
            tokens: list[str] = []
            for _ in range(move_count):
                token = SCRAMBLE_TOKENS[int(rng.integers(len(SCRAMBLE_TOKENS)))]
                self.execute_move(token)
                tokens.append(token)
            return self._state.copy(), tokens

    def render_text(self) -> str:
        with self._lock:
            return render_text(self._state.stickers)
