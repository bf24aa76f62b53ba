"""HTTP client for the cube game server."""

from __future__ import annotations

import json
from urllib import request


class CubeAPIClient:
    def __init__(self, host: str = "127.0.0.1", port: int = 8000, timeout: float = 10.0):
        self.base = f"http://{host}:{port}"
        self.timeout = timeout

    def _call(self, method: str, path: str, payload: dict | None = None):
        data = None
        headers = {}
        if payload is not None:
            data = json.dumps(payload).encode("utf-8")
            headers["Content-Type"] = "application/json"
        req = request.Request(url=f"{self.base}{path}", method=method, data=data, headers=headers)
        with request.urlopen(req, timeout=self.timeout) as resp:
            return json.loads(resp.read().decode("utf-8"))

    def health(self) -> dict:
        return self._call("GET", "/health")

    def list_games(self) -> list[dict]:
        return self._call("GET", "/games")

    def start_game(self, scramble: bool = True, difficulty: int = 20, seed: int | None = None) -> dict:
        payload = {"scramble": bool(scramble), "difficulty": int(difficulty)}
        if seed is not None:
            payload["seed"] = int(seed)
        return self._call("POST", "/games", payload)

    def get_cube(self, game_id: str) -> dict:
        return self._call("GET", f"/cube/{game_id}")

    def get_text(self, game_id: str) -> str:
        return self._call("GET", f"/cube/{game_id}/text")["text"]

    def move(self, game_id: str, move: str) -> dict:
        return self._call("POST", f"/cube/{game_id}/move", {"move": move})

    def finish(self, game_id: str) -> dict:
        return self._call("POST", f"/cube/{game_id}/finish", {})
