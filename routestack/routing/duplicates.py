import logging
from collections.abc import Iterable

from routestack.exceptions import DuplicateRouteException
from routestack.routing.route import Route

logger = logging.getLogger(__name__)


def methods_overlap(first: Route, second: Route) -> bool:
    """Whether two routes could both answer the same HTTP method."""
    if first.allows_any_method() or second.allows_any_method():
        return True

    return not set(first.allowed_methods).isdisjoint(second.allowed_methods)


class DuplicateRouteDetector:
    """Detects routes that would make dispatch ambiguous.

    Two routes collide when their paths are identical and their methods
    overlap, either because one of them allows any method or because they
    share at least one method. Host, port and scheme constraints are not
    considered; the path and method pair alone must be unique.

    The check is a pure function of the candidate and the routes already
    accepted. It raises on conflict and otherwise does nothing.
    """

    def detect_duplicate(self, route: Route, existing_routes: Iterable[Route]) -> None:
        """Raise if ``route`` collides with any of ``existing_routes``.

        Raises:
            DuplicateRouteException: If a route with the same path and an
                overlapping method set was already accepted.
        """
        for existing in existing_routes:
            if existing.path != route.path or not methods_overlap(existing, route):
                continue

            logger.debug(f"Route {route!r} conflicts with {existing!r}")
            raise DuplicateRouteException(
                self._conflict_message(route, existing), path=route.path, name=route.name
            )

    @staticmethod
    def _conflict_message(route: Route, existing: Route) -> str:
        if route.allows_any_method():
            methods = "any method"
        else:
            methods = ", ".join(route.allowed_methods)

        return (
            f"Duplicate route detected; path {route.path!r} answering to {methods} "
            f"conflicts with the already registered route {existing.name!r}"
        )
