"""Request-time driver for route middleware stacks.

Declared stacks are templates. Each request gets its own ``MiddlewarePipeline``
over a copy of the stacks that apply to the matched route, and the pipeline
consumes that copy one middleware at a time.
"""

import logging
from typing import TYPE_CHECKING, Any

from routestack.exceptions import MiddlewareResolutionException
from routestack.middleware.stack import MiddlewareStack
from routestack.protocols import (
    RequestHandlerProtocol,
    RequestProtocol,
    ResolverProtocol,
)

if TYPE_CHECKING:
    from routestack.routing.group import RouteGroup
    from routestack.routing.route import Route

logger = logging.getLogger(__name__)


class MiddlewarePipeline(RequestHandlerProtocol):
    """Runs a middleware stack in order and then a final handler.

    The pipeline is itself the handler passed to every middleware, so calling
    ``handler.handle(request)`` from a middleware moves on to the next one.
    The stack given to the pipeline is copied; the original is left intact.

    Examples:
        ```python
        pipeline = MiddlewarePipeline(route.middleware_stack, container, endpoint)
        response = await pipeline.handle(request)
        ```

    Args:
        stack: The middleware to run, front first.
        resolver: Lookup for middleware identifiers in the stack.
        handler: Called once the stack is exhausted.
    """

    def __init__(
        self,
        stack: MiddlewareStack,
        resolver: ResolverProtocol,
        handler: RequestHandlerProtocol,
    ):
        self._stack = stack.copy()
        self._resolver = resolver
        self._handler = handler

    @property
    def remaining(self) -> int:
        return len(self._stack)

    async def handle(self, request: RequestProtocol) -> Any:
        entry = self._stack.peek()
        middleware = self._stack.shift(self._resolver)
        if middleware is None:
            return await self._handler.handle(request)

        if not callable(getattr(middleware, "process", None)):
            logger.error(f"Resolved middleware {middleware!r} has no process() method")
            raise MiddlewareResolutionException(
                f"{entry.value!r} resolved to {middleware!r}, which is not a middleware",
                identifier=entry.value,
            )

        return await middleware.process(request, self)


def enclosing_groups(route: "Route") -> list["RouteGroup"]:
    """The groups around a route, outermost first."""
    from routestack.routing.group import RouteGroup

    groups = []
    group = route.parent_group
    while isinstance(group, RouteGroup):
        groups.append(group)
        group = group.router

    return list(reversed(groups))


def route_middleware(route: "Route") -> MiddlewareStack:
    """A fresh stack of every middleware that applies to a route.

    Enclosing group stacks come first, outermost group first, followed by the
    route's own stack.
    """
    stack = MiddlewareStack()
    for group in enclosing_groups(route):
        stack.extend(group.middleware_stack.entries())

    return stack.extend(route.middleware_stack.entries())


def build_pipeline(
    route: "Route", resolver: ResolverProtocol, handler: RequestHandlerProtocol
) -> MiddlewarePipeline:
    """Build the pipeline for one request to ``route``."""
    return MiddlewarePipeline(route_middleware(route), resolver, handler)
