"""Route declaration, grouping and duplicate detection."""

from routestack.routing.collection import CRUD_ID_SEGMENT, RouteCollection
from routestack.routing.collector import RouteCollector
from routestack.routing.duplicates import DuplicateRouteDetector
from routestack.routing.group import RouteGroup
from routestack.routing.route import Route

__all__ = [
    "CRUD_ID_SEGMENT",
    "DuplicateRouteDetector",
    "Route",
    "RouteCollection",
    "RouteCollector",
    "RouteGroup",
]
