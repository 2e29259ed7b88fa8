"""Route value object for routestack."""

import re
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from routestack.exceptions import InvalidArgumentException
from routestack.middleware.prefix import ConditionalPrefixMiddleware
from routestack.middleware.stack import MiddlewareStack, MiddlewareStackView
from routestack.protocols import RequestProtocol, ResolverProtocol

if TYPE_CHECKING:
    from routestack.routing.group import RouteGroup

# RFC 7230 token characters
HTTP_TOKEN = re.compile(r"^[!#$%&'*+.^_`|~0-9A-Za-z-]+$")


def prefix_path(prefix: str, path: str) -> str:
    """Join a group prefix and a route path with exactly one separator.

    A bare ``/`` path maps onto the prefix itself.

    Examples:
        >>> prefix_path("/admin", "/users")
        '/admin/users'
        >>> prefix_path("/admin", "/")
        '/admin'
    """
    if path == "/":
        return prefix

    return f"{prefix.rstrip('/')}/{path.lstrip('/')}"


def validate_http_methods(methods: Sequence[str]) -> tuple[str, ...]:
    """Validate HTTP method names and normalize them to upper case.

    Order and duplicates are kept as given.

    Raises:
        InvalidArgumentException: If the methods are a bare string, the list is
            empty or any entry is not a valid HTTP token.
    """
    if isinstance(methods, str):
        raise InvalidArgumentException(
            f"HTTP methods must be a list of method names, got the string {methods!r}"
        )

    if not methods:
        raise InvalidArgumentException(
            "HTTP methods argument was empty; must contain at least one method"
        )

    for method in methods:
        if not isinstance(method, str) or not HTTP_TOKEN.match(method):
            raise InvalidArgumentException(
                f"One or more HTTP methods were invalid: {method!r} is not a valid HTTP method"
            )

    return tuple(method.upper() for method in methods)


def validate_schemes(schemes: Iterable[str]) -> tuple[str, ...]:
    if isinstance(schemes, str):
        raise InvalidArgumentException(
            f"Schemes must be a list of scheme names, got the string {schemes!r}"
        )

    schemes = tuple(schemes)
    if not schemes:
        raise InvalidArgumentException(
            "Schemes argument was empty; must contain at least one scheme"
        )

    for scheme in schemes:
        if not isinstance(scheme, str) or not scheme:
            raise InvalidArgumentException(f"Invalid scheme {scheme!r}")

    return tuple(scheme.lower() for scheme in schemes)


class Route:
    """A single route declaration.

    Routes combine a path, a callback and the HTTP methods they answer to. Two
    routes with the same path and overlapping methods cannot live in the same
    collector, while the same path with disjoint methods is fine and usually
    points at different callbacks.

    The callback and the options are never interpreted here; they are carried
    to the matcher the route is registered with. Host, port and scheme
    constraints narrow what a matched path accepts.

    Examples:
        ```python
        route = Route("/users/{id:int}", "myapp.users:show", methods=["get"])
        route.allowed_methods  # ("GET",)
        route.name  # "/users/{id:int}:GET"

        route.set_host("api.example.com").set_schemes(["https"])
        route.middleware(RateLimitMiddleware)
        ```

    Args:
        path: The path template to match.
        callback: What should handle the request once the route is matched.
        name: Route name; defaults to the path, suffixed with the methods when
            the route is method-constrained.
        methods: Allowed HTTP methods, ``None`` (``HTTP_METHOD_ANY``) for any.
    """

    HTTP_METHOD_ANY = None
    HTTP_METHOD_SEPARATOR = ":"

    def __init__(
        self,
        path: str,
        callback: Any,
        name: str | None = None,
        methods: Sequence[str] | None = HTTP_METHOD_ANY,
    ):
        self._path = path
        self._callback = callback
        self._methods = (
            validate_http_methods(methods)
            if methods is not self.HTTP_METHOD_ANY
            else self.HTTP_METHOD_ANY
        )
        self._name = name or None
        self._host: str | None = None
        self._port: int | None = None
        self._schemes: tuple[str, ...] | None = None
        self._options: dict[str, Any] = {}
        self._middleware_stack = MiddlewareStack()
        self._parent_group: RouteGroup | None = None

    @property
    def path(self) -> str:
        return self._path

    def set_path(self, path: str) -> "Route":
        self._path = path
        return self

    @property
    def callback(self) -> Any:
        return self._callback

    @property
    def name(self) -> str:
        """The route name, or the default name derived from the current path."""
        return self._name if self._name is not None else self.default_name

    @property
    def default_name(self) -> str:
        if self.allows_any_method():
            return self._path

        return self._path + self.HTTP_METHOD_SEPARATOR + self.HTTP_METHOD_SEPARATOR.join(
            self._methods
        )

    @property
    def has_explicit_name(self) -> bool:
        return self._name is not None

    def set_name(self, name: str) -> "Route":
        self._name = name
        return self

    @property
    def allowed_methods(self) -> tuple[str, ...] | None:
        """The allowed methods, or ``HTTP_METHOD_ANY``."""
        return self._methods

    def allows_method(self, method: str) -> bool:
        return self.allows_any_method() or method.upper() in self._methods

    def allows_any_method(self) -> bool:
        return self._methods is self.HTTP_METHOD_ANY

    @property
    def host(self) -> str | None:
        return self._host

    def set_host(self, host: str | None) -> "Route":
        self._host = host
        return self

    @property
    def port(self) -> int | None:
        return self._port

    def set_port(self, port: int | None) -> "Route":
        self._port = port
        return self

    @property
    def schemes(self) -> tuple[str, ...] | None:
        return self._schemes

    def set_schemes(self, schemes: Iterable[str] | None) -> "Route":
        self._schemes = validate_schemes(schemes) if schemes is not None else None
        return self

    def set_scheme(self, scheme: str) -> "Route":
        return self.set_schemes([scheme])

    def allows_scheme(self, scheme: str) -> bool:
        return self.allows_any_scheme() or scheme.lower() in self._schemes

    def allows_any_scheme(self) -> bool:
        return self._schemes is None

    @property
    def options(self) -> dict[str, Any]:
        return self._options

    def set_options(self, options: dict[str, Any]) -> "Route":
        self._options = options
        return self

    @property
    def parent_group(self) -> "RouteGroup | None":
        return self._parent_group

    def set_parent_group(self, group: "RouteGroup") -> "Route":
        """Attach the route to the group that declared it.

        The group's full prefix is prepended unless the path already starts
        with it, so applying the same group again leaves the path alone.
        """
        prefix = group.full_prefix
        if not self._path.startswith(prefix):
            self._path = prefix_path(prefix, self._path)

        self._parent_group = group
        return self

    def matches_request(self, request: RequestProtocol) -> bool:
        """Check the scheme, host and port constraints against a request.

        Matchers call this after the path and method matched, for the
        conditions a path template cannot express.
        """
        if not self.allows_scheme(request.scheme):
            return False

        if self._host is not None and self._host != request.host:
            return False

        return self._port is None or self._port == request.port

    @property
    def middleware_stack(self) -> MiddlewareStack:
        return self._middleware_stack

    def middleware(self, middleware: Any) -> "Route":
        self._middleware_stack.append(middleware)
        return self

    def middlewares(self, middlewares: Iterable[Any]) -> "Route":
        self._middleware_stack.extend(middlewares)
        return self

    def prepend_middleware(self, middleware: Any) -> "Route":
        self._middleware_stack.prepend(middleware)
        return self

    def lazy_pipe(
        self, prefix: str, resolver: ResolverProtocol, middleware: Any = None
    ) -> "Route":
        """Append a middleware that only runs for paths under ``prefix``.

        Without ``middleware``, ``prefix`` itself is appended as a plain entry.
        """
        if middleware is None:
            return self.middleware(prefix)

        return self.middleware(ConditionalPrefixMiddleware(resolver, prefix, middleware))

    def shift_middleware(self, resolver: ResolverProtocol) -> Any | None:
        return self._middleware_stack.shift(resolver)

    def get_middleware_stack(self) -> MiddlewareStackView:
        return self._middleware_stack.view()

    def __repr__(self) -> str:
        methods = "ANY" if self.allows_any_method() else ",".join(self._methods)
        return f"<Route {self.name!r} {methods} {self._path!r}>"
