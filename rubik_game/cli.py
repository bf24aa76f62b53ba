"""CLI entrypoint for the cube game."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TextIO

from .engine import DEFAULT_SCRAMBLE_MOVES, CubeEngine
from .server import CubeHTTPServer
from .solved_check import unsolved_faces
from .state_codec import InvalidMoveError
from .types import CubeState

QUIT_WORDS = ("quit", "exit", "q")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rubik 3x3 cube game")
    sub = parser.add_subparsers(dest="mode", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"]
    )

    serve = sub.add_parser("serve", parents=[common], help="Run the HTTP game API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    play = sub.add_parser("play", parents=[common], help="Play one cube in the terminal")
    play.add_argument("--scramble-steps", type=int, default=DEFAULT_SCRAMBLE_MOVES)
    play.add_argument("--seed", type=int, default=None)

    return parser


def play(engine: CubeEngine, stdin: TextIO, stdout: TextIO) -> bool:
    """Read move tokens until the cube is solved or the player quits."""
    stdout.write(engine.render_text())
    while not engine.is_solved():
        stdout.write("move> ")
        stdout.flush()
        line = stdin.readline()
        if not line:
            break
        tokens = line.split()
        if tokens and tokens[0].lower() in QUIT_WORDS:
            break
        for token in tokens:
            try:
                engine.execute_move(token)
            except InvalidMoveError as exc:
                stdout.write(f"{exc}\n")
                break
            if engine.is_solved():
                break
        stdout.write(engine.render_text())
        state = engine.get_state()
        mixed = unsolved_faces(state.stickers)
        stdout.write(f"moves={len(state.move_history)} mixed faces: {', '.join(mixed) or 'none'}\n")

    solved = engine.is_solved()
    if solved:
        stdout.write(f"Solved in {len(engine.get_state().move_history)} moves\n")
    return solved


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    if args.mode == "serve":
        server = CubeHTTPServer(host=args.host, port=args.port)
        print(f"Rubik game server listening on http://{server.host}:{server.port}", flush=True)
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
        finally:
            server.shutdown()
        return

    if args.mode == "play":
        if args.scramble_steps < 0:
            parser.error("--scramble-steps must be non-negative")
        engine = CubeEngine.create()
        engine.scramble(args.scramble_steps, seed=args.seed)
        # Scrambled moves are not the player's; start counting from zero.
        engine.set_state(CubeState(engine.get_state().stickers))
        play(engine, sys.stdin, sys.stdout)
        return

    parser.error(f"Unsupported mode: {args.mode}")


if __name__ == "__main__":
    main()
