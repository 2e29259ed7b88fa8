import logging
from typing import Any

from routestack.protocols import (
    MiddlewareProtocol,
    RequestHandlerProtocol,
    RequestProtocol,
    ResolverProtocol,
)

logger = logging.getLogger(__name__)


class ConditionalPrefixMiddleware(MiddlewareProtocol):
    """Runs a wrapped middleware only for requests under a path prefix.

    The wrapped middleware is looked up through the resolver on every call, so
    nothing is cached between requests. Requests whose path does not start
    with the prefix (compared case-insensitively) go straight to the next
    handler.

    Examples:
        ```python
        api_auth = ConditionalPrefixMiddleware(container, "/api", ApiKeyMiddleware)

        # /api/widgets runs ApiKeyMiddleware, /static/app.js skips it
        response = await api_auth.process(request, handler)
        ```

    Args:
        resolver: Lookup used to turn ``middleware`` into a middleware instance.
        prefix: Path prefix the request path must start with.
        middleware: Identifier of the wrapped middleware.
    """

    __slots__ = ("_middleware", "_prefix", "_resolver")

    def __init__(self, resolver: ResolverProtocol, prefix: str, middleware: Any):
        self._resolver = resolver
        self._prefix = prefix
        self._middleware = middleware

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def middleware(self) -> Any:
        return self._middleware

    def matches(self, path: str) -> bool:
        return path.lower().startswith(self._prefix.lower())

    async def process(
        self, request: RequestProtocol, handler: RequestHandlerProtocol
    ) -> Any:
        if self.matches(request.path):
            logger.debug(
                f"Path {request.path!r} matches prefix {self._prefix!r}, running {self._middleware!r}"
            )
            return await self._resolver.get(self._middleware).process(request, handler)

        return await handler.handle(request)

    def __repr__(self) -> str:
        return f"ConditionalPrefixMiddleware(prefix={self._prefix!r}, middleware={self._middleware!r})"
