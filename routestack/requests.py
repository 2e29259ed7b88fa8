from asgiref.typing import Scope

DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443}


class Request:
    """Read-only view of an ASGI HTTP scope.

    Exposes the parts of a request that route constraints and prefix
    middleware look at: path, method, scheme, host and port.
    """

    def __init__(self, scope: Scope):
        if scope["type"] != "http":
            raise RuntimeError("Request only supports HTTP scope")

        self.scope = scope

    @property
    def method(self) -> str:
        return self.scope.get("method", "")

    @property
    def scheme(self) -> str:
        return self.scope.get("scheme", "http")

    @property
    def path(self) -> str:
        return self.scope.get("path", "")

    @property
    def headers(self) -> dict:
        return {
            name.decode("latin-1").lower(): value.decode("latin-1")
            for name, value in self.scope.get("headers", [])
        }

    @property
    def server(self):
        return self.scope.get("server")

    @property
    def host(self) -> str | None:
        """The host name from the Host header, else the server address."""
        if host_header := self.headers.get("host"):
            return _split_host(host_header)[0]

        if self.server:
            return self.server[0]

        return None

    @property
    def port(self) -> int | None:
        """The port from the Host header, else the server port, else the scheme default."""
        if host_header := self.headers.get("host"):
            port = _split_host(host_header)[1]
            if port is not None:
                return port
        elif self.server and self.server[1] is not None:
            return self.server[1]

        return DEFAULT_PORTS.get(self.scheme)

    def __repr__(self) -> str:
        return f"<Request {self.method} {self.scheme}://{self.host}{self.path}>"


def _split_host(value: str) -> tuple[str, int | None]:
    # IPv6 literals keep their brackets, e.g. "[::1]:8000"
    host, sep, port = value.rpartition(":")
    if not sep or not port.isdigit() or (host.startswith("[") and not host.endswith("]")):
        return value.lower(), None

    return host.lower(), int(port)
