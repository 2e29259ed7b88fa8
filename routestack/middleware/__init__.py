"""Middleware stacks, prefix-gated middleware and the request pipeline."""

from routestack.middleware.pipeline import (
    MiddlewarePipeline,
    build_pipeline,
    route_middleware,
)
from routestack.middleware.prefix import ConditionalPrefixMiddleware
from routestack.middleware.stack import (
    Identifier,
    MiddlewareStack,
    MiddlewareStackView,
    Unit,
)

__all__ = [
    "ConditionalPrefixMiddleware",
    "Identifier",
    "MiddlewarePipeline",
    "MiddlewareStack",
    "MiddlewareStackView",
    "Unit",
    "build_pipeline",
    "route_middleware",
]
