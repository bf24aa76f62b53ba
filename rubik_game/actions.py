"""Move tables and sticker layout for the 3x3 Rubik cube."""

from __future__ import annotations

import numpy as np

# Internal face order; each face occupies STICKERS_PER_FACE consecutive slots.
FACE_ORDER = ("top", "right", "front", "bottom", "left", "back")
FACE_INDEX = {face: i for i, face in enumerate(FACE_ORDER)}
N_FACES = 6
FACE_SIZE = 3
STICKERS_PER_FACE = FACE_SIZE * FACE_SIZE
STATE_SIZE = N_FACES * STICKERS_PER_FACE

# Color code painted on each face of the solved cube, in FACE_ORDER.
COLOR_CODES = ("W", "R", "G", "Y", "O", "B")
COLOR_INDEX = {code: i for i, code in enumerate(COLOR_CODES)}

# Order used for snapshots and rendering.
SNAPSHOT_FACES = ("front", "back", "left", "right", "top", "bottom")

MOVE_FACES = {
    "U": "top",
    "D": "bottom",
    "L": "left",
    "R": "right",
    "F": "front",
    "B": "back",
}

# Token suffix -> number of clockwise quarter turns.
TURN_SUFFIXES = {"": 1, "'": 3, "2": 2}

MOVE_TOKENS = tuple(f"{letter}{suffix}" for suffix in TURN_SUFFIXES for letter in "UDLRFB")
SCRAMBLE_TOKENS = tuple(token for token in MOVE_TOKENS if not token.endswith("2"))

# Net layout (faces read from outside the cube):
#
#            top
#   left   front   right   back
#           bottom
#
# Side faces have row 0 toward top. Top is read from above with row 0 toward
# back, bottom from below with row 0 toward front. Column 0 of back sits next
# to right.


def _row(face: str, row: int, reverse: bool = False) -> tuple[str, tuple[tuple[int, int], ...]]:
    cols = range(FACE_SIZE - 1, -1, -1) if reverse else range(FACE_SIZE)
    return face, tuple((row, col) for col in cols)


def _col(face: str, col: int, reverse: bool = False) -> tuple[str, tuple[tuple[int, int], ...]]:
    rows = range(FACE_SIZE - 1, -1, -1) if reverse else range(FACE_SIZE)
    return face, tuple((row, col) for row in rows)


# Clockwise quarter turn: the i-th sticker of each strip moves to the i-th
# sticker of the next strip, the last strip feeding the first.
EDGE_CYCLES = {
    "U": (_row("front", 0), _row("left", 0), _row("back", 0), _row("right", 0)),
    "D": (_row("front", 2), _row("right", 2), _row("back", 2), _row("left", 2)),
    "R": (_col("front", 2), _col("top", 2), _col("back", 0, reverse=True), _col("bottom", 2)),
    "L": (_col("front", 0), _col("bottom", 0), _col("back", 2, reverse=True), _col("top", 0)),
    "F": (_row("top", 2), _col("right", 0), _row("bottom", 0, reverse=True), _col("left", 2, reverse=True)),
    "B": (_row("top", 0), _col("left", 0, reverse=True), _row("bottom", 2, reverse=True), _col("right", 2)),
}


def sticker_index(face: str, row: int, col: int) -> int:
    return FACE_INDEX[face] * STICKERS_PER_FACE + row * FACE_SIZE + col


def solved_state() -> np.ndarray:
    """Return the canonical solved flat state of length 54."""
    return np.repeat(np.arange(N_FACES, dtype=np.int8), STICKERS_PER_FACE)


def _generate_quarter_turn_permutation(letter: str) -> np.ndarray:
    """Gather indices for one clockwise turn: ``new_state = state[perm]``."""
    face = MOVE_FACES[letter]
    perm = np.arange(STATE_SIZE, dtype=np.int32)

    last = FACE_SIZE - 1
    for row in range(FACE_SIZE):
        for col in range(FACE_SIZE):
            perm[sticker_index(face, col, last - row)] = sticker_index(face, row, col)

    strips = EDGE_CYCLES[letter]
    for k, (src_face, src_cells) in enumerate(strips):
        dst_face, dst_cells = strips[(k + 1) % len(strips)]
        for (src_row, src_col), (dst_row, dst_col) in zip(src_cells, dst_cells):
            perm[sticker_index(dst_face, dst_row, dst_col)] = sticker_index(src_face, src_row, src_col)

    if len(set(perm.tolist())) != STATE_SIZE:
        raise RuntimeError(f"Move {letter} is not a permutation of the {STATE_SIZE} stickers")
    return perm


QUARTER_TURN_PERMUTATIONS = {letter: _generate_quarter_turn_permutation(letter) for letter in MOVE_FACES}
