class RouteStackException(Exception):
    """Base exception for routestack."""
    message: str

    def __init__(self, message: str | None = None, *args):
        super().__init__(message, *args)
        # Fall back to the first extra arg, then the class name, when no message is given
        if message is not None:
            self.message = message
        elif args and args[0]:
            self.message = str(args[0])
        else:
            self.message = self.__class__.__name__

    def __str__(self) -> str:
        return self.message


class InvalidArgumentException(RouteStackException, ValueError):
    """Raised when a route is declared with malformed HTTP methods or schemes."""


class DuplicateRouteException(RouteStackException):
    """Raised when a route conflicts with one already registered.

    The conflict is either the same path with overlapping HTTP methods or a
    name that is already taken in the collector's registry.
    """

    def __init__(self, message: str, path: str | None = None, name: str | None = None):
        super().__init__(message)
        self.path = path
        self.name = name


class MiddlewareResolutionException(RouteStackException, RuntimeError):
    """Raised when a middleware identifier cannot be turned into a usable middleware."""

    def __init__(self, message: str, identifier=None):
        super().__init__(message)
        self.identifier = identifier


class RoutingConfigError(RouteStackException):
    """Raised for errors while loading routing configuration."""
