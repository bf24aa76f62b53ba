"""Solved-state checks for the Rubik simulator."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from .actions import FACE_ORDER, N_FACES, STICKERS_PER_FACE
from .state_codec import validate_stickers


def is_solved(state: Sequence[int] | np.ndarray) -> bool:
    """True when each face is a single color; which color sits where is not checked."""
    faces = validate_stickers(state).reshape(N_FACES, STICKERS_PER_FACE)
    return bool(np.all(faces == faces[:, :1]))


def unsolved_faces(state: Sequence[int] | np.ndarray) -> list[str]:
    faces = validate_stickers(state).reshape(N_FACES, STICKERS_PER_FACE)
    return [FACE_ORDER[i] for i in range(N_FACES) if np.any(faces[i] != faces[i, 0])]
