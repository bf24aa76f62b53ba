"""State validation and codec helpers."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import numpy as np

from .actions import (
    COLOR_CODES,
    COLOR_INDEX,
    FACE_INDEX,
    FACE_ORDER,
    FACE_SIZE,
    MOVE_TOKENS,
    N_FACES,
    SNAPSHOT_FACES,
    STATE_SIZE,
    STICKERS_PER_FACE,
)


class StateValidationError(ValueError):
    """Raised when an input state is invalid."""


class InvalidMoveError(StateValidationError):
    """Raised for a move token outside the 18-token alphabet."""


def validate_stickers(state: Sequence[int] | np.ndarray) -> np.ndarray:
    """Validate color ids and return a canonical flat copy (length 54)."""
    arr = np.asarray(state)
    if arr.dtype.kind not in "iu":
        raise StateValidationError("State must contain integer color IDs")
    arr = arr.astype(np.int16).reshape(-1)
    if arr.size != STATE_SIZE:
        raise StateValidationError(f"State must have {STATE_SIZE} stickers, got {arr.size}")

    if np.any(arr < 0) or np.any(arr >= N_FACES):
        raise StateValidationError("State contains invalid color IDs; allowed values are 0..5")

    counts = np.bincount(arr, minlength=N_FACES)
    expected = np.full(N_FACES, STICKERS_PER_FACE, dtype=np.int64)
    if not np.array_equal(counts, expected):
        raise StateValidationError(
            f"Invalid sticker counts; each color must appear exactly {STICKERS_PER_FACE} times"
        )

    return arr.astype(np.int8, copy=True)


def faces_to_stickers(faces: Mapping[str, Sequence[Sequence[str]]]) -> np.ndarray:
    """Convert a ``{face: 3x3 color codes}`` mapping into validated color ids."""
    if not isinstance(faces, Mapping):
        raise StateValidationError("faces must be an object keyed by face name")

    missing = [face for face in FACE_ORDER if face not in faces]
    if missing:
        raise StateValidationError(f"faces is missing: {', '.join(missing)}")
    unknown = sorted(map(str, set(faces) - set(FACE_ORDER)))
    if unknown:
        raise StateValidationError(f"Unknown faces: {', '.join(unknown)}")

    stickers = np.empty(STATE_SIZE, dtype=np.int16)
    for face in FACE_ORDER:
        grid = faces[face]
        if isinstance(grid, str) or not isinstance(grid, Sequence) or len(grid) != FACE_SIZE:
            raise StateValidationError(f"Face {face} must have {FACE_SIZE} rows")
        base = FACE_INDEX[face] * STICKERS_PER_FACE
        for row, cells in enumerate(grid):
            if isinstance(cells, str) or not isinstance(cells, Sequence) or len(cells) != FACE_SIZE:
                raise StateValidationError(f"Face {face} row {row} must have {FACE_SIZE} stickers")
            for col, code in enumerate(cells):
                if not isinstance(code, str) or code not in COLOR_INDEX:
                    raise StateValidationError(
                        f"Face {face} has unknown color {code!r}; allowed: {' '.join(COLOR_CODES)}"
                    )
                stickers[base + row * FACE_SIZE + col] = COLOR_INDEX[code]

    return validate_stickers(stickers)


def stickers_to_faces(state: Sequence[int] | np.ndarray) -> dict[str, list[list[str]]]:
    grids = np.asarray(state).reshape(N_FACES, FACE_SIZE, FACE_SIZE)
    return {
        face: [[COLOR_CODES[int(v)] for v in row] for row in grids[FACE_INDEX[face]]]
        for face in SNAPSHOT_FACES
    }


def validate_history(history: Sequence[str]) -> list[str]:
    if isinstance(history, str) or not isinstance(history, Sequence):
        raise StateValidationError("moveHistory must be a list of move tokens")
    bad = [token for token in history if token not in MOVE_TOKENS]
    if bad:
        raise StateValidationError(f"moveHistory contains unknown moves: {bad!r}")
    return list(history)


def render_text(state: Sequence[int] | np.ndarray) -> str:
    """Render the unfolded net: top, then left|front|right|back, then bottom."""
    faces = stickers_to_faces(state)
    pad = " " * (2 * FACE_SIZE + 2)
    lines = [pad + " ".join(row) for row in faces["top"]]
    lines.append("")
    for i in range(FACE_SIZE):
        lines.append(" | ".join(" ".join(faces[face][i]) for face in ("left", "front", "right", "back")))
    lines.append("")
    lines.extend(pad + " ".join(row) for row in faces["bottom"])
    return "\n".join(lines) + "\n"
