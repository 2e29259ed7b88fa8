"""routestack: route registration, route groups and middleware composition."""

from routestack.exceptions import (
    DuplicateRouteException,
    InvalidArgumentException,
    MiddlewareResolutionException,
    RouteStackException,
    RoutingConfigError,
)
from routestack.middleware import (
    ConditionalPrefixMiddleware,
    MiddlewarePipeline,
    MiddlewareStack,
    build_pipeline,
)
from routestack.resolvers import ContainerResolver
from routestack.routing import (
    DuplicateRouteDetector,
    Route,
    RouteCollector,
    RouteGroup,
)

__all__ = [
    "ConditionalPrefixMiddleware",
    "ContainerResolver",
    "DuplicateRouteDetector",
    "DuplicateRouteException",
    "InvalidArgumentException",
    "MiddlewarePipeline",
    "MiddlewareResolutionException",
    "MiddlewareStack",
    "Route",
    "RouteCollector",
    "RouteGroup",
    "RouteStackException",
    "RoutingConfigError",
    "build_pipeline",
]
