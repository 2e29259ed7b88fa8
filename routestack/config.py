import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypedDict

import yaml

from routestack.exceptions import RoutingConfigError
from routestack.middleware.prefix import ConditionalPrefixMiddleware
from routestack.middleware.stack import MiddlewareStack
from routestack.protocols import ResolverProtocol, RouterProtocol
from routestack.routing.collector import RouteCollector
from routestack.routing.group import RouteGroup
from routestack.routing.route import Route

logger = logging.getLogger(__name__)

# Default config file name
DEFAULT_CONFIG_FILE = "routing.yaml"

ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


class MiddlewareConfig(TypedDict, total=False):
    entry: str
    prefix: str


class RouteConfig(TypedDict, total=False):
    path: str
    handler: str
    name: str
    methods: list[str]
    host: str
    port: int
    schemes: list[str]
    options: dict[str, Any]
    middleware: list["str | MiddlewareConfig"]


class CrudConfig(TypedDict, total=False):
    prefix: str
    controller: str
    name: str


class GroupConfig(TypedDict, total=False):
    prefix: str
    middleware: list["str | MiddlewareConfig"]
    routes: list[RouteConfig]
    groups: list["GroupConfig"]
    crud: list[CrudConfig]


class RoutingConfig(TypedDict, total=False):
    detect_duplicates: bool
    middleware: list["str | MiddlewareConfig"]
    routes: list[RouteConfig]
    groups: list[GroupConfig]
    crud: list[CrudConfig]


@dataclass
class RoutingSetup:
    """Result of building routes from configuration."""

    collector: RouteCollector
    middleware: MiddlewareStack


def load_raw_config(config_path: str | Path) -> dict[str, Any]:
    """Read a YAML file into a dict, or ``{}`` when the file is missing or empty.

    Raises:
        RoutingConfigError: If the file cannot be parsed or does not hold a mapping.
    """
    path = Path(config_path)
    if not path.exists():
        logger.debug(f"No routing configuration at {path}")
        return {}

    try:
        with path.open() as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise RoutingConfigError(f"Error loading configuration from {path}: {e}") from e

    match config:
        case None:
            return {}
        case dict():
            return config
        case _:
            raise RoutingConfigError(
                f"Invalid configuration format in {path}. Expected a dictionary, "
                f"got {type(config).__name__}."
            )


def _substitute_env_vars(config: Any) -> Any:
    """Replace ``${VAR_NAME}`` references with environment variable values.

    Raises:
        RoutingConfigError: If a referenced environment variable is not set.
    """

    def replace_env_var(match: re.Match) -> str:
        env_var = match.group(1)
        env_value = os.getenv(env_var)
        if env_value is None:
            raise RoutingConfigError(f"Required environment variable '{env_var}' is not set")

        return env_value

    match config:
        case str():
            return ENV_VAR_PATTERN.sub(replace_env_var, config)
        case dict():
            return {k: _substitute_env_vars(v) for k, v in config.items()}
        case list():
            return [_substitute_env_vars(item) for item in config]
        case _:
            return config


def load_config(config_path: str | Path = DEFAULT_CONFIG_FILE) -> RoutingConfig:
    """
    Load the ``routing`` section of a configuration file.

    Environment variables referenced as ``${VAR_NAME}`` are substituted.

    Example file:

    ```yaml
    routing:
      detect_duplicates: true
      middleware:
        - myapp.middleware:RequestIdMiddleware
        - entry: myapp.middleware:ApiKeyMiddleware
          prefix: /api
      routes:
        - path: /
          handler: myapp.pages:home
          name: home
          methods: [GET]
      groups:
        - prefix: /admin
          middleware: [myapp.middleware:AdminOnlyMiddleware]
          routes:
            - path: /users
              handler: myapp.admin:list_users
              methods: [GET]
      crud:
        - prefix: /posts
          controller: myapp.posts:PostController
          name: post
    ```

    Raises:
        RoutingConfigError: If the file is invalid or references unset variables.
    """
    config = _substitute_env_vars(load_raw_config(config_path))
    routing = config.get("routing", {})
    if routing is None:
        routing = {}

    if not isinstance(routing, dict):
        raise RoutingConfigError(
            f"Invalid 'routing' section in {config_path}. Expected a dictionary."
        )

    return routing


def build_routes(
    config: RoutingConfig, router: RouterProtocol, resolver: ResolverProtocol
) -> RoutingSetup:
    """Declare the configured routes, groups and middleware.

    Handlers are kept as the configured strings; middleware entries are added
    as lazy identifiers and only resolved when a request consumes them.

    Raises:
        RoutingConfigError: If an entry is missing a required field.
        DuplicateRouteException: If configured routes conflict.
        InvalidArgumentException: If a route has invalid methods or schemes.
    """
    collector = RouteCollector(router, config.get("detect_duplicates", True))
    middleware = MiddlewareStack()
    for entry in _section(config, "middleware"):
        _add_middleware(middleware, entry, resolver)

    _declare(collector, config, resolver)

    logger.debug(
        f"Built {len(collector.get_routes())} routes and {len(middleware)} application middleware from config"
    )
    return RoutingSetup(collector, middleware)


def _declare(
    target: RouteCollector | RouteGroup,
    config: RoutingConfig | GroupConfig,
    resolver: ResolverProtocol,
) -> None:
    for route_config in _section(config, "routes"):
        route = target.route(
            _require(route_config, "path", "route"),
            _require(route_config, "handler", "route"),
            route_config.get("name"),
            route_config.get("methods"),
        )
        _configure_route(route, route_config, resolver)

    for crud_config in _section(config, "crud"):
        prefix_name = _require(crud_config, "name", "crud")
        controller = _require(crud_config, "controller", "crud")
        if isinstance(target, RouteCollector):
            target.crud(_require(crud_config, "prefix", "crud"), controller, prefix_name)
        elif prefix := crud_config.get("prefix"):
            target.group(prefix, lambda group: group.crud(controller, prefix_name))
        else:
            target.crud(controller, prefix_name)

    for group_config in _section(config, "groups"):
        group = target.group(
            _require(group_config, "prefix", "group"),
            lambda group, group_config=group_config: _declare(group, group_config, resolver),
        )
        for entry in _section(group_config, "middleware"):
            _add_middleware(group.middleware_stack, entry, resolver)


def _configure_route(route: Route, config: RouteConfig, resolver: ResolverProtocol) -> None:
    if "host" in config:
        route.set_host(config["host"])
    if "port" in config:
        route.set_port(_port(config["port"]))
    if "schemes" in config:
        route.set_schemes(config["schemes"])
    if "options" in config:
        route.set_options(config["options"])

    for entry in _section(config, "middleware"):
        _add_middleware(route.middleware_stack, entry, resolver)


def _add_middleware(
    stack: MiddlewareStack, entry: "str | MiddlewareConfig", resolver: ResolverProtocol
) -> None:
    match entry:
        case str():
            stack.append(entry)
        case {"entry": str() as identifier, "prefix": str() as prefix}:
            stack.append(ConditionalPrefixMiddleware(resolver, prefix, identifier))
        case {"entry": str() as identifier}:
            stack.append(identifier)
        case _:
            raise RoutingConfigError(f"Invalid middleware config: {entry!r}")


def _require(config: dict[str, Any], key: str, kind: str) -> Any:
    if not isinstance(config, dict):
        raise RoutingConfigError(f"{kind.capitalize()} config must be a mapping, got {config!r}")

    if key not in config:
        raise RoutingConfigError(f"{kind.capitalize()} config missing '{key}': {config!r}")

    return config[key]


def _section(config: dict[str, Any], key: str) -> list[Any]:
    # A key present without a value ("routes:") loads as None
    entries = config.get(key) or []
    if not isinstance(entries, list):
        raise RoutingConfigError(f"Config '{key}' must be a list, got {entries!r}")

    return entries


def _port(value: Any) -> int | None:
    if value is None:
        return None

    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise RoutingConfigError(f"Invalid route port {value!r}") from e
