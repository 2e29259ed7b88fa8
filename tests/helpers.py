"""
Helper utilities for tests.
"""

from dataclasses import dataclass, field
from typing import Any

from routestack.routing.route import Route


class RecordingRouter:
    """Matcher stand-in that records every route it is given."""

    def __init__(self, fail_on: str | None = None):
        self.routes: list[Route] = []
        self.fail_on = fail_on

    def add_route(self, route: Route) -> Route:
        if self.fail_on is not None and route.path == self.fail_on:
            raise ValueError(f"Malformed path template {route.path!r}")

        self.routes.append(route)
        return route

    @property
    def paths(self) -> list[str]:
        return [route.path for route in self.routes]


class DictResolver:
    """Resolver backed by a plain dict that counts lookups."""

    def __init__(self, entries: dict[Any, Any] | None = None):
        self.entries = dict(entries or {})
        self.lookups: list[Any] = []

    def get(self, identifier: Any) -> Any:
        self.lookups.append(identifier)
        return self.entries[identifier]


@dataclass
class FakeRequest:
    path: str
    method: str = "GET"
    scheme: str = "http"
    host: str | None = None
    port: int | None = None
    trail: list[str] = field(default_factory=list)


class RecordingMiddleware:
    """Appends its name to the request trail and passes the request on."""

    def __init__(self, name: str = "recording"):
        self.name = name
        self.calls = 0

    async def process(self, request, handler):
        self.calls += 1
        request.trail.append(self.name)
        return await handler.handle(request)


class ShortCircuitMiddleware:
    """Answers the request itself without calling the next handler."""

    def __init__(self, response: Any = "short-circuit"):
        self.response = response

    async def process(self, request, handler):
        request.trail.append("short-circuit")
        return self.response


class EndpointHandler:
    """Final handler of a pipeline."""

    def __init__(self, response: Any = "endpoint"):
        self.response = response
        self.requests = []

    async def handle(self, request):
        self.requests.append(request)
        request.trail.append("endpoint")
        return self.response


shared_middleware = RecordingMiddleware("shared")


def make_scope(
    path: str = "/",
    method: str = "GET",
    scheme: str = "http",
    headers: list[tuple[bytes, bytes]] | None = None,
    server: tuple[str, int | None] | None = ("testserver", 80),
) -> dict[str, Any]:
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "scheme": scheme,
        "path": path,
        "raw_path": path.encode(),
        "query_string": b"",
        "root_path": "",
        "headers": headers or [],
        "client": ("127.0.0.1", 54321),
        "server": server,
    }
