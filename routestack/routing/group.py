import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from routestack.middleware.prefix import ConditionalPrefixMiddleware
from routestack.middleware.stack import MiddlewareStack, MiddlewareStackView
from routestack.protocols import ResolverProtocol, RouterProtocol
from routestack.routing.collection import RouteCollection
from routestack.routing.route import Route, prefix_path

if TYPE_CHECKING:
    from routestack.routing.collector import RouteCollector

logger = logging.getLogger(__name__)


class RouteGroup(RouteCollection):
    """Routes declared together under a shared prefix and middleware.

    A group is created by ``RouteCollector.group()`` (or ``RouteGroup.group()``
    for nesting) and runs its builder exactly once, immediately, with itself
    as the only argument. Every route declared through the group has the
    prefix prepended to its path before it is handed to the owning router.

    The group's middleware stack belongs to the group; member routes keep
    their own stacks. A request pipeline runs the enclosing groups' stacks
    before the route's.

    Examples:
        ```python
        def admin_routes(group: RouteGroup):
            group.get("/users", "myapp.admin:list_users", "admin.users")
            group.get("/", "myapp.admin:dashboard").set_scheme("https")

            group.group("/reports", lambda reports: reports.get("/daily", daily_report))

        collector.group("/admin", admin_routes).middleware(AdminOnlyMiddleware)
        # Routes: /admin/users, /admin, /admin/reports/daily
        ```

    Args:
        prefix: Path prefix for every route in the group.
        builder: Called once with the group to declare its routes.
        router: The collector or enclosing group routes are forwarded to.
    """

    def __init__(
        self,
        prefix: str,
        builder: Callable[["RouteGroup"], Any],
        router: "RouteCollector | RouteGroup | RouterProtocol",
    ):
        self._prefix = prefix
        self._builder = builder
        self._router = router
        self._middleware_stack = MiddlewareStack()

    def __call__(self) -> None:
        """Run the builder."""
        self._builder(self)

    @property
    def prefix(self) -> str:
        return self._prefix

    def get_prefix(self) -> str:
        return self._prefix

    @property
    def full_prefix(self) -> str:
        """The prefix including every enclosing group's prefix."""
        if isinstance(self._router, RouteGroup):
            return prefix_path(self._router.full_prefix, self._prefix)

        return self._prefix

    @property
    def router(self) -> "RouteCollector | RouteGroup | RouterProtocol":
        return self._router

    def add_route(self, route: Route) -> Route:
        """Prefix the route, forward it to the owning router and attach it to this group.

        Routes without an explicit name keep deriving their default name from
        the path, so the name reflects the prefixed path.
        """
        route.set_path(prefix_path(self._prefix, route.path))
        route = self._router.add_route(route)
        route.set_parent_group(self)
        return route

    def group(self, prefix: str, builder: Callable[["RouteGroup"], Any]) -> "RouteGroup":
        """Create a nested group whose routes are forwarded through this one."""
        group = RouteGroup(prefix, builder, self)
        logger.debug(f"Creating group {prefix!r} inside {self._prefix!r}")
        group()
        return group

    def crud(self, controller: Any, prefix_name: str) -> "RouteGroup":
        """Declare the conventional CRUD routes for ``controller`` under this group."""
        self.crud_routes(controller, prefix_name)
        return self

    @property
    def middleware_stack(self) -> MiddlewareStack:
        return self._middleware_stack

    def middleware(self, middleware: Any) -> "RouteGroup":
        self._middleware_stack.append(middleware)
        return self

    def middlewares(self, middlewares: Iterable[Any]) -> "RouteGroup":
        self._middleware_stack.extend(middlewares)
        return self

    def prepend_middleware(self, middleware: Any) -> "RouteGroup":
        self._middleware_stack.prepend(middleware)
        return self

    def lazy_pipe(
        self, prefix: str, resolver: ResolverProtocol, middleware: Any = None
    ) -> "RouteGroup":
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
        return f"<RouteGroup {self.full_prefix!r}>"
