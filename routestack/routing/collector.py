import logging
import threading
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from routestack.exceptions import DuplicateRouteException
from routestack.protocols import RouterProtocol
from routestack.routing.collection import RouteCollection
from routestack.routing.duplicates import DuplicateRouteDetector
from routestack.routing.group import RouteGroup
from routestack.routing.route import Route

logger = logging.getLogger(__name__)


class RouteCollector(RouteCollection):
    """Registry of every route declared for a matcher.

    The collector builds routes, checks them for conflicts with the routes it
    already holds, hands them to the matcher and indexes them by name. Route
    groups and CRUD route sets are created through it.

    Features:
    - ``route()`` for arbitrary method lists plus ``get``, ``post``, ``put``,
      ``patch``, ``delete``, ``head``, ``options`` and ``any``
    - Duplicate detection on path and method overlap, and on route names
    - Prefixed route groups with their own middleware, nestable
    - Conventional CRUD route sets
    - Lookup of registered routes by name

    Examples:
        ```python
        collector = RouteCollector(matcher)

        collector.get("/", "myapp.pages:home", "home")
        collector.route("/search", "myapp.search:search", methods=["GET", "POST"])

        collector.group("/admin", lambda group: group.get("/users", list_users))
        collector.crud("/posts", "myapp.posts:PostController", "post")

        collector.get_route_name("post.edit").path  # "/posts/{id:int}"
        ```

    Args:
        router: The matcher routes are registered with.
        detect_duplicates: Raise ``DuplicateRouteException`` for conflicting
            routes. When disabled, later routes replace earlier ones in the name
            index and a warning is logged.
    """

    def __init__(self, router: RouterProtocol, detect_duplicates: bool = True):
        self._router = router
        self._detect_duplicates = detect_duplicates
        self._duplicate_route_detector: DuplicateRouteDetector | None = None
        # Insertion ordered, so the detector sees routes in registration order
        self._routes: dict[str, Route] = {}
        self._groups: list[RouteGroup] = []
        self._lock = threading.RLock()

    @property
    def router(self) -> RouterProtocol:
        return self._router

    @property
    def detect_duplicates(self) -> bool:
        return self._detect_duplicates

    def add_route(self, route: Route) -> Route:
        """Register a route with the matcher and index it by name.

        Raises:
            DuplicateRouteException: If the route conflicts with a registered one.
        """
        with self._lock:
            self._detect_duplicate(route)
            route = self._router.add_route(route)
            name = route.name
            if name in self._routes:
                logger.warning(
                    f"Route name {name!r} is already registered, replacing {self._routes[name]!r}"
                )

            # The index key must not drift if the route's path changes later
            route.set_name(name)
            self._routes[name] = route

        logger.debug(f"Registered {route!r}")
        return route

    def group(self, prefix: str, builder: Callable[[RouteGroup], Any]) -> RouteGroup:
        """Create a route group and run its builder immediately."""
        group = RouteGroup(prefix, builder, self)
        self._groups.append(group)
        logger.debug(f"Creating group {prefix!r}")
        group()
        return group

    def crud(self, prefix_path: str, controller: Any, prefix_name: str) -> RouteGroup:
        """Declare the conventional CRUD routes for ``controller`` under ``prefix_path``."""
        return self.group(prefix_path, lambda group: group.crud(controller, prefix_name))

    def get_routes(self) -> Mapping[str, Route]:
        """All registered routes by name, as a read-only view."""
        return MappingProxyType(self._routes)

    def get_route_name(self, name: str) -> Route | None:
        return self._routes.get(name)

    def get_groups(self) -> list[RouteGroup]:
        return list(self._groups)

    def _detect_duplicate(self, route: Route) -> None:
        if not self._detect_duplicates:
            return

        if self._duplicate_route_detector is None:
            self._duplicate_route_detector = DuplicateRouteDetector()

        self._duplicate_route_detector.detect_duplicate(route, self._routes.values())
        if route.name in self._routes:
            raise DuplicateRouteException(
                f"Duplicate route name {route.name!r}; already used by {self._routes[route.name]!r}",
                path=route.path,
                name=route.name,
            )
