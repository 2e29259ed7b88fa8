"""Route declaration helpers shared by collectors and groups.

Everything here builds a ``Route`` and hands it to ``add_route``, so whatever
the concrete collection does there (duplicate checks, prefixing, naming)
applies no matter which helper declared the route.
"""

from collections.abc import Sequence
from typing import Any

from routestack.routing.route import Route

# Typed path parameter accepting only numeric ids
CRUD_ID_SEGMENT = "/{id:int}"


def controller_action(controller: Any, action: str) -> Any:
    """Build the callback for one action of a controller.

    Import-string controllers get the action appended as an attribute path
    (``"myapp.posts:PostController.index"``); any other controller is paired
    with the action name.
    """
    if isinstance(controller, str):
        return f"{controller}.{action}"

    return controller, action


class RouteCollection:
    """Mixin providing ``route()``, the per-verb helpers and ``crud_routes()``.

    Subclasses implement ``add_route``.
    """

    def add_route(self, route: Route) -> Route:
        raise NotImplementedError

    def route(
        self,
        path: str,
        callback: Any,
        name: str | None = None,
        methods: Sequence[str] | None = Route.HTTP_METHOD_ANY,
    ) -> Route:
        """Declare a route answering to ``methods``, or to any method when None."""
        return self.add_route(Route(path, callback, name, methods))

    def get(self, path: str, callback: Any, name: str | None = None) -> Route:
        return self.route(path, callback, name, ["GET"])

    def post(self, path: str, callback: Any, name: str | None = None) -> Route:
        return self.route(path, callback, name, ["POST"])

    def put(self, path: str, callback: Any, name: str | None = None) -> Route:
        return self.route(path, callback, name, ["PUT"])

    def patch(self, path: str, callback: Any, name: str | None = None) -> Route:
        return self.route(path, callback, name, ["PATCH"])

    def delete(self, path: str, callback: Any, name: str | None = None) -> Route:
        return self.route(path, callback, name, ["DELETE"])

    def head(self, path: str, callback: Any, name: str | None = None) -> Route:
        return self.route(path, callback, name, ["HEAD"])

    def options(self, path: str, callback: Any, name: str | None = None) -> Route:
        return self.route(path, callback, name, ["OPTIONS"])

    def any(self, path: str, callback: Any, name: str | None = None) -> Route:
        return self.route(path, callback, name, Route.HTTP_METHOD_ANY)

    def crud_routes(self, controller: Any, prefix_name: str) -> list[Route]:
        """Declare the conventional create/read/update/delete routes for a controller.

        Routes, relative to this collection:

        - ``<prefix_name>.index``: GET ``/``
        - ``<prefix_name>.create``: GET ``/new``
        - ``<prefix_name>.create.post``: POST ``/new``
        - ``<prefix_name>.edit``: GET ``/{id:int}``
        - ``<prefix_name>.edit.post``: POST ``/{id:int}``
        - ``<prefix_name>.delete``: DELETE ``/{id:int}``
        """
        return [
            self.get("/", controller_action(controller, "index"), f"{prefix_name}.index"),
            self.get("/new", controller_action(controller, "create"), f"{prefix_name}.create"),
            self.post(
                "/new", controller_action(controller, "create"), f"{prefix_name}.create.post"
            ),
            self.get(
                CRUD_ID_SEGMENT, controller_action(controller, "edit"), f"{prefix_name}.edit"
            ),
            self.post(
                CRUD_ID_SEGMENT,
                controller_action(controller, "edit"),
                f"{prefix_name}.edit.post",
            ),
            self.delete(
                CRUD_ID_SEGMENT,
                controller_action(controller, "delete"),
                f"{prefix_name}.delete",
            ),
        ]
