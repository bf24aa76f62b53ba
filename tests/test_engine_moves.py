import unittest

import numpy as np

from rubik_game.actions import (
    FACE_INDEX,
    MOVE_FACES,
    MOVE_TOKENS,
    N_FACES,
    QUARTER_TURN_PERMUTATIONS,
    SCRAMBLE_TOKENS,
    STATE_SIZE,
    STICKERS_PER_FACE,
)
from rubik_game.engine import CubeEngine
from rubik_game.state_codec import InvalidMoveError, StateValidationError

ADJACENT = {
    "U": "FRBL",
    "D": "FRBL",
    "F": "URDL",
    "B": "URDL",
    "L": "UFDB",
    "R": "UFDB",
}


def color_counts(engine: CubeEngine) -> np.ndarray:
    return np.bincount(engine.get_state().stickers.astype(np.int64), minlength=N_FACES)


class TestEngineMoves(unittest.TestCase):
    def test_new_engine_is_solved_with_empty_history(self):
        engine = CubeEngine.create()
        state = engine.get_state()
        self.assertTrue(engine.is_solved())
        self.assertTrue(state.solved)
        self.assertEqual(state.move_history, [])
        for face, grid in state.faces.items():
            self.assertEqual(len({code for row in grid for code in row}), 1, msg=face)

    def test_inverse_moves_restore_state(self):
        for letter in MOVE_FACES:
            engine = CubeEngine()
            engine.scramble(15, seed=3)
            initial = engine.get_state()
            engine.execute_move(letter)
            engine.execute_move(f"{letter}'")
            self.assertTrue(initial.same_stickers(engine.get_state()), msg=f"Failed for {letter}/{letter}'")

    def test_four_quarter_turns_restore_state(self):
        for letter in MOVE_FACES:
            engine = CubeEngine()
            engine.scramble(15, seed=5)
            initial = engine.get_state()
            for _ in range(4):
                engine.execute_move(letter)
            self.assertTrue(initial.same_stickers(engine.get_state()), msg=f"Failed for {letter}")

    def test_half_turn_equals_two_quarter_turns(self):
        for letter in MOVE_FACES:
            e1 = CubeEngine()
            e2 = CubeEngine()
            e1.scramble(10, seed=11)
            e2.scramble(10, seed=11)
            e1.execute_move(f"{letter}2")
            e2.execute_move(letter)
            e2.execute_move(letter)
            self.assertTrue(e1.get_state().same_stickers(e2.get_state()), msg=f"Failed for {letter}2")

    def test_u_then_u_prime_records_both_moves(self):
        engine = CubeEngine()
        initial = engine.get_state()
        s1 = engine.execute_move("U")
        self.assertFalse(s1.solved)
        s2 = engine.execute_move("U'")
        self.assertTrue(s2.solved)
        self.assertTrue(s2.same_stickers(initial))
        self.assertEqual(s2.move_history, ["U", "U'"])

    def test_r2_twice_returns_to_solved(self):
        engine = CubeEngine()
        engine.execute_move("R2")
        self.assertFalse(engine.is_solved())
        state = engine.execute_move("R2")
        self.assertTrue(state.solved)
        self.assertEqual(len(state.move_history), 2)

    def test_every_single_move_unsolves(self):
        for token in MOVE_TOKENS:
            engine = CubeEngine()
            state = engine.execute_move(token)
            self.assertFalse(state.solved, msg=token)
            self.assertFalse(engine.is_solved(), msg=token)

    def test_sticker_counts_preserved(self):
        engine = CubeEngine()
        rng = np.random.default_rng(17)
        for _ in range(200):
            engine.execute_move(MOVE_TOKENS[int(rng.integers(len(MOVE_TOKENS)))])
            self.assertTrue(np.array_equal(color_counts(engine), np.full(N_FACES, STICKERS_PER_FACE)))

    def test_opposite_faces_commute(self):
        for a, b in (("U", "D"), ("L", "R"), ("F", "B")):
            e1 = CubeEngine()
            e2 = CubeEngine()
            e1.execute_move(a)
            e1.execute_move(b)
            e2.execute_move(b)
            e2.execute_move(a)
            self.assertTrue(e1.get_state().same_stickers(e2.get_state()), msg=f"{a}/{b}")

    def test_adjacent_face_commutator_has_order_six(self):
        """X Y X' Y' on two adjacent faces repeats after exactly 6 applications."""
        for x, neighbours in ADJACENT.items():
            for y in neighbours:
                engine = CubeEngine()
                solved = engine.get_state()
                for rep in range(1, 7):
                    for token in (x, y, f"{x}'", f"{y}'"):
                        engine.execute_move(token)
                    back = engine.get_state().same_stickers(solved)
                    self.assertEqual(back, rep == 6, msg=f"({x} {y} {x}' {y}') x{rep}")

    def test_turns_carry_neighbour_colors(self):
        engine = CubeEngine()
        faces = engine.execute_move("U").faces
        self.assertEqual(faces["front"][0], ["R", "R", "R"])
        self.assertEqual(faces["left"][0], ["G", "G", "G"])
        self.assertEqual(faces["front"][1], ["G", "G", "G"])

        faces = CubeEngine().execute_move("R").faces
        self.assertEqual([row[2] for row in faces["front"]], ["Y", "Y", "Y"])
        self.assertEqual([row[2] for row in faces["top"]], ["G", "G", "G"])
        self.assertEqual([row[0] for row in faces["back"]], ["W", "W", "W"])

        faces = CubeEngine().execute_move("F").faces
        self.assertEqual(faces["top"][2], ["O", "O", "O"])
        self.assertEqual([row[0] for row in faces["right"]], ["W", "W", "W"])
        self.assertEqual(faces["bottom"][0], ["R", "R", "R"])

    def test_turn_moves_face_and_adjacent_strips(self):
        """Each quarter turn moves 8 stickers on its face and 12 on the bordering strips."""
        base = np.arange(STATE_SIZE)
        for letter, perm in QUARTER_TURN_PERMUTATIONS.items():
            changed = base[perm] != base

            face_start = FACE_INDEX[MOVE_FACES[letter]] * STICKERS_PER_FACE
            face_end = face_start + STICKERS_PER_FACE
            changed_on_face = int(changed[face_start:face_end].sum())
            changed_total = int(changed.sum())

            self.assertEqual(changed_on_face, 8, msg=f"{letter}: expected 8 moved on turning face")
            self.assertEqual(changed_total - changed_on_face, 12, msg=f"{letter}: expected 12 on strips")

    def test_invalid_move_leaves_state_untouched(self):
        engine = CubeEngine()
        engine.execute_move("F")
        before = engine.get_state()
        for token in ("X", "u", "U3", "U'2", "", None, 3):
            with self.assertRaises(InvalidMoveError):
                engine.execute_move(token)
        self.assertEqual(engine.get_state(), before)

    def test_scramble_is_deterministic_for_fixed_seed(self):
        s1, t1 = CubeEngine().scramble(30, seed=123)
        s2, t2 = CubeEngine().scramble(30, seed=123)
        self.assertEqual(t1, t2)
        self.assertEqual(s1, s2)

    def test_scramble_uses_injected_generator(self):
        s1, t1 = CubeEngine(rng=np.random.default_rng(42)).scramble(25)
        s2, t2 = CubeEngine(rng=np.random.default_rng(42)).scramble(25)
        self.assertEqual(t1, t2)
        self.assertTrue(s1.same_stickers(s2))

    def test_scramble_draws_quarter_turns_and_records_each(self):
        state, tokens = CubeEngine().scramble(300, seed=9)
        self.assertEqual(len(tokens), 300)
        self.assertEqual(state.move_history, tokens)
        self.assertTrue(set(tokens) <= set(SCRAMBLE_TOKENS))
        self.assertEqual(set(tokens), set(SCRAMBLE_TOKENS))

    def test_default_scramble_is_twenty_moves(self):
        state, tokens = CubeEngine().scramble()
        self.assertEqual(len(tokens), 20)
        self.assertEqual(len(state.move_history), 20)

    def test_scramble_rejects_bad_counts(self):
        engine = CubeEngine()
        for count in (-1, 2.5, True, "3"):
            with self.assertRaises(StateValidationError):
                engine.scramble(count)

    def test_zero_move_scramble_stays_solved(self):
        state, tokens = CubeEngine().scramble(0)
        self.assertEqual(tokens, [])
        self.assertTrue(state.solved)


if __name__ == "__main__":
    unittest.main()
