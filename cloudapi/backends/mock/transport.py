"""Mock HTTP transport for testing."""

from __future__ import annotations

from collections import deque
from typing import Callable

import requests

Responder = Callable[[dict], "tuple[int, str]"]


class MockTransport:
    """Serves canned responses keyed by (method, url) and records every call.

    A route may hold a queue of responses (consumed in order, the last one
    repeating) or a callable that receives the recorded call and returns
    (status, body). Unknown routes answer 404.
    """

    def __init__(self):
        self.calls: list[dict] = []
        self._routes: dict[tuple[str, str], deque | Responder] = {}
        self._failures: set[tuple[str, str]] = set()

    def add(self, method: str, url: str, body: str = "", status: int = 200) -> None:
        key = (method.upper(), url)
        queue = self._routes.get(key)
        if not isinstance(queue, deque):
            queue = deque()
            self._routes[key] = queue
        queue.append((status, body))

    def add_callback(self, method: str, url: str, responder: Responder) -> None:
        self._routes[(method.upper(), url)] = responder

    def fail(self, method: str, url: str) -> None:
        """Make requests to this route raise a connection error."""
        self._failures.add((method.upper(), url))

    def request(
        self,
        method: str,
        url: str,
        *,
        auth: tuple[str, str] | None = None,
        params: dict | None = None,
        data: dict | None = None,
    ) -> tuple[int, str]:
        key = (method.upper(), url)
        call = {"method": key[0], "url": url, "auth": auth, "params": params, "data": data}
        self.calls.append(call)

        if key in self._failures:
            raise requests.ConnectionError(f"Connection refused: {url}")

        route = self._routes.get(key)
        if route is None:
            return 404, ""
        if callable(route):
            return route(call)
        if len(route) > 1:
            return route.popleft()
        return route[0]

    def calls_to(self, method: str, url: str) -> list[dict]:
        return [c for c in self.calls if c["method"] == method.upper() and c["url"] == url]
