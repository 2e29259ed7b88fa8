"""Middleware resolution backed by a bevy container."""

import importlib
import logging
from typing import Any

from bevy import get_registry
from bevy.containers import Container

from routestack.exceptions import MiddlewareResolutionException
from routestack.protocols import ResolverProtocol

logger = logging.getLogger(__name__)


def import_from_string(import_str: str) -> Any:
    """Import an object from a ``"module.path:symbol"`` string.

    The symbol may be a dotted attribute path (``"myapp.middleware:Auth.for_api"``).

    Raises:
        MiddlewareResolutionException: If the string is malformed or the import fails.

    Examples:
        ```python
        auth_class = import_from_string("myapp.middleware:AuthMiddleware")
        ```
    """
    if ":" not in import_str:
        raise MiddlewareResolutionException(
            f"Invalid import string format '{import_str}'. Expected 'module.path:symbol'.",
            identifier=import_str,
        )

    module_path, object_path = import_str.split(":", 1)

    try:
        target = importlib.import_module(module_path)
        for part in object_path.split("."):
            target = getattr(target, part)

        return target
    except (ImportError, AttributeError) as e:
        raise MiddlewareResolutionException(
            f"Failed to import '{import_str}': {str(e)}", identifier=import_str
        ) from e


class ContainerResolver(ResolverProtocol):
    """Resolves middleware identifiers through a bevy container.

    Class identifiers are fetched from the container. Import strings are
    imported first; classes found that way are fetched from the container
    as well, anything else (a module level middleware instance, for example)
    is returned as imported.

    Examples:
        ```python
        resolver = ContainerResolver()
        resolver.add(AuthMiddleware, AuthMiddleware(realm="admin"))

        resolver.get(AuthMiddleware)
        resolver.get("myapp.middleware:AuthMiddleware")
        ```

    Args:
        container: The container to resolve from. A new container from the
            global bevy registry is created when omitted.
    """

    def __init__(self, container: Container | None = None):
        self._container = container or get_registry().create_container()

    @property
    def container(self) -> Container:
        return self._container

    def add(self, dependency_type: type, instance: Any) -> "ContainerResolver":
        self._container.add(dependency_type, instance)
        return self

    def get(self, identifier: type | str) -> Any:
        target = import_from_string(identifier) if isinstance(identifier, str) else identifier
        if not isinstance(target, type):
            return target

        try:
            return self._container.get(target)
        except Exception as e:
            logger.error(f"Could not resolve middleware {identifier!r}: {e}")
            raise MiddlewareResolutionException(
                f"Could not resolve middleware {identifier!r}: {e}", identifier=identifier
            ) from e
