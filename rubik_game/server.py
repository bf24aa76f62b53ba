"""HTTP API server for cube game sessions."""

from __future__ import annotations

import json
import logging
import secrets
import string
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable
from urllib.parse import unquote, urlsplit

import numpy as np

from .engine import DEFAULT_SCRAMBLE_MOVES, CubeEngine
from .sessions import SessionNotFoundError, SessionRegistry, epoch_ms
from .state_codec import StateValidationError, render_text
from .types import CubeState, GameSession, SessionStatus

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_game_id() -> str:
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"cube_{epoch_ms()}_{suffix}"


def next_action(state: CubeState, status: SessionStatus) -> str:
    if state.solved or status is SessionStatus.COMPLETED:
        return "finish"
    return "manipulateCube"


class CubeHTTPServer:
    def __init__(
        self,
        registry: SessionRegistry | None = None,
        host: str = "127.0.0.1",
        port: int = 8000,
        on_update: Callable[[str, dict[str, Any]], Any] | None = None,
        rng: np.random.Generator | None = None,
    ):
        self.registry = registry if registry is not None else SessionRegistry()
        self.on_update = on_update
        self._rng = rng if rng is not None else np.random.default_rng()
        self._rng_lock = threading.Lock()

        handler_cls = self._build_handler()
        self.httpd = ThreadingHTTPServer((host, port), handler_cls)
        self.host, self.port = self.httpd.server_address[:2]

    def _notify(self, session: GameSession) -> None:
        if self.on_update is None:
            return
        try:
            self.on_update(session.id, session.to_dict())
        except Exception:
            logger.exception("on_update observer failed for session %s", session.id)

    def start_game(
        self, scramble: bool = True, difficulty: int = DEFAULT_SCRAMBLE_MOVES, seed: int | None = None
    ) -> GameSession:
        if isinstance(difficulty, bool) or not isinstance(difficulty, int) or difficulty < 0:
            raise StateValidationError("difficulty must be a non-negative integer")
        if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
            raise StateValidationError("seed must be an integer or null")

        with self._rng_lock:
            engine = CubeEngine.create(rng=self._rng)
            if scramble:
                engine.scramble(difficulty, seed=seed)
        session = self.registry.create(
            new_game_id(), engine.get_state(), difficulty=difficulty if scramble else None
        )
        self._notify(session)
        return session

    def _build_handler(self):
        parent = self

        class Handler(BaseHTTPRequestHandler):
            server_version = "RubikGame/1.0"

            def log_message(self, fmt: str, *args):
                return

            def _send_json(self, code: int, payload: Any):
                body = json.dumps(payload).encode("utf-8")
                self.send_response(code)
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            def _read_json(self) -> dict[str, Any]:
                try:
                    length = int(self.headers.get("Content-Length", "0"))
                except ValueError as exc:
                    raise StateValidationError("Content-Length must be an integer") from exc
                if length < 0:
                    raise StateValidationError("Content-Length must be non-negative")
                if length == 0:
                    return {}
                data = self.rfile.read(length)
                try:
                    obj = json.loads(data.decode("utf-8"))
                except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                    raise StateValidationError(f"Invalid JSON body: {exc}") from exc
                if not isinstance(obj, dict):
                    raise StateValidationError("JSON body must be an object")
                return obj

            def _route(self) -> list[str]:
                path = urlsplit(self.path).path
                return [unquote(part) for part in path.strip("/").split("/") if part]

            def do_GET(self):
                parts = self._route()
                try:
                    if parts == ["health"]:
                        self._send_json(200, {"ready": True, "sessions": len(parent.registry)})
                        return

                    if parts == ["games"]:
                        self._send_json(200, [s.summary() for s in parent.registry.list_sessions()])
                        return

                    if len(parts) in (2, 3) and parts[0] == "cube":
                        session = parent.registry.get(parts[1])
                        if session is None:
                            raise SessionNotFoundError(parts[1])
                        if len(parts) == 2:
                            self._send_json(
                                200,
                                {
                                    "gameId": session.id,
                                    "state": session.cube_state.to_dict(),
                                    "status": session.status.value,
                                    "nextAction": next_action(session.cube_state, session.status),
                                },
                            )
                            return
                        if parts[2] == "text":
                            text = render_text(session.cube_state.stickers)
                            self._send_json(200, {"gameId": session.id, "text": text})
                            return

                except SessionNotFoundError as exc:
                    self._send_json(404, {"error": str(exc)})
                    return

                self._send_json(404, {"error": "Not Found"})

            def do_POST(self):
                parts = self._route()
                try:
                    body = self._read_json()

                    if parts == ["games"]:
                        scramble = body.get("scramble", True)
                        if not isinstance(scramble, bool):
                            raise StateValidationError("scramble must be a boolean")
                        session = parent.start_game(
                            scramble=scramble,
                            difficulty=body.get("difficulty", DEFAULT_SCRAMBLE_MOVES),
                            seed=body.get("seed"),
                        )
                        self._send_json(
                            201,
                            {
                                "gameId": session.id,
                                "cube": session.cube_state.to_dict(),
                                "scrambleMoves": session.scramble_moves,
                                "nextAction": next_action(session.cube_state, session.status),
                            },
                        )
                        return

                    if len(parts) == 3 and parts[0] == "cube" and parts[2] == "move":
                        if "move" not in body:
                            raise StateValidationError("Missing required field: move")
                        game_id = parts[1]
                        session = parent.registry.apply_move_session(game_id, body["move"])
                        parent._notify(session)
                        self._send_json(
                            200,
                            {
                                "gameId": game_id,
                                "state": session.cube_state.to_dict(),
                                "status": session.status.value,
                                "nextAction": next_action(session.cube_state, session.status),
                            },
                        )
                        return

                    if len(parts) == 3 and parts[0] == "cube" and parts[2] == "finish":
                        session = parent.registry.finish(parts[1])
                        parent._notify(session)
                        self._send_json(
                            200,
                            {
                                "gameId": session.id,
                                "cube": session.cube_state.to_dict(),
                                "status": session.status.value,
                                "nextAction": None,
                            },
                        )
                        return

                except StateValidationError as exc:
                    self._send_json(400, {"error": str(exc)})
                    return
                except SessionNotFoundError as exc:
                    self._send_json(404, {"error": str(exc)})
                    return

                self._send_json(404, {"error": "Not Found"})

        return Handler

    def serve_forever(self):
        self.httpd.serve_forever()

    def shutdown(self):
        self.httpd.shutdown()
        self.httpd.server_close()
