"""
Protocol definitions for routestack.

These protocols describe the collaborators routestack consumes but does not
implement: the path matcher routes are handed to, the dependency lookup used
to resolve middleware identifiers, and the request/handler shapes used while a
middleware chain runs.
"""

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from routestack.routing.route import Route


class RouterProtocol(Protocol):
    """Protocol for the matcher that routes are registered with."""

    @abstractmethod
    def add_route(self, route: "Route") -> "Route":
        """Register a route with the matcher and return it, possibly mutated."""
        ...


class ResolverProtocol(Protocol):
    """Protocol for dependency lookup.

    A bevy ``Container`` satisfies this protocol for class identifiers.
    """

    @abstractmethod
    def get(self, identifier: Any) -> Any:
        """Return the object registered for ``identifier``."""
        ...


class RequestProtocol(Protocol):
    """The parts of a request that routestack reads."""

    @property
    def path(self) -> str: ...

    @property
    def method(self) -> str: ...

    @property
    def scheme(self) -> str: ...

    @property
    def host(self) -> str | None: ...

    @property
    def port(self) -> int | None: ...


@runtime_checkable
class RequestHandlerProtocol(Protocol):
    """Protocol for anything that can produce a response for a request."""

    @abstractmethod
    async def handle(self, request: RequestProtocol) -> Any:
        """Handle the request and return a response."""
        ...


@runtime_checkable
class MiddlewareProtocol(Protocol):
    """Protocol for request processing units in a middleware stack."""

    @abstractmethod
    async def process(
        self, request: RequestProtocol, handler: RequestHandlerProtocol
    ) -> Any:
        """Process the request, optionally delegating to ``handler``."""
        ...
