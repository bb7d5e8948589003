"""Shared test harness for capturing and testing Robyn route handler closures.

Robyn registers route handlers as closures inside ``register_*_routes(app)``.
``RouteCapture`` mimics the Robyn decorator interface so tests can collect
those closures and call them directly with a ``MockRequest``.

Usage::

    capture = RouteCapture()
    register_mcp_routes(capture, handler)

    post = capture.get_handler("POST", "/mcp/")
    response = await post(MockRequest(body={...}, method="POST"))
    assert response.status_code == 200
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Coroutine
from unittest.mock import MagicMock

from robyn import Response


class MockRequest:
    """Minimal Request-like object accepted by Robyn route handlers.

    Attributes:
        body: Raw request body (bytes, str, or dict; a dict is auto-serialised).
        query_params: URL query parameters.
        headers: HTTP headers dict.
        method: HTTP method string.
        url: Pseudo URL path.
    """

    def __init__(
        self,
        body: Any = "",
        query_params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
        method: str = "GET",
        url: str = "/",
    ) -> None:
        if isinstance(body, (dict, list)):
            self.body = json.dumps(body).encode()
        elif isinstance(body, str):
            self.body = body.encode() if body else b""
        elif isinstance(body, bytes):
            self.body = body
        else:
            self.body = b""

        self.path_params: dict[str, str] = {}
        self.query_params = query_params or {}
        self.headers = headers or {}
        self.method = method
        self.url = MagicMock()
        self.url.path = url


@dataclass
class _CapturedRoute:
    """A single captured route handler."""

    method: str
    path: str
    handler: Callable[..., Coroutine]


class RouteCapture:
    """Drop-in replacement for ``Robyn`` that captures route handlers."""

    def __init__(self) -> None:
        self._routes: list[_CapturedRoute] = []

    def get(self, path: str):
        return self._make_decorator("GET", path)

    def post(self, path: str):
        return self._make_decorator("POST", path)

    def delete(self, path: str):
        return self._make_decorator("DELETE", path)

    def get_handler(self, method: str, path: str) -> Callable[..., Coroutine] | None:
        """Look up a captured handler by HTTP method and path."""
        method_upper = method.upper()
        for route in self._routes:
            if route.method == method_upper and route.path == path:
                return route.handler
        return None

    def list_routes(self) -> list[tuple[str, str]]:
        """Return ``[(method, path), ...]`` of all captured routes."""
        return [(r.method, r.path) for r in self._routes]

    def _make_decorator(self, method: str, path: str):
        def decorator(func):
            self._routes.append(_CapturedRoute(method=method, path=path, handler=func))
            return func

        return decorator


def response_json(response: Response) -> Any:
    """Parse a Robyn ``Response.description`` as JSON."""
    body = response.description
    if isinstance(body, bytes):
        body = body.decode()
    return json.loads(body)
