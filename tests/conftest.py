import pytest

from routestack.routing.collector import RouteCollector
from tests.helpers import DictResolver, EndpointHandler, RecordingRouter


@pytest.fixture
def router() -> RecordingRouter:
    return RecordingRouter()


@pytest.fixture
def collector(router: RecordingRouter) -> RouteCollector:
    return RouteCollector(router)


@pytest.fixture
def resolver() -> DictResolver:
    return DictResolver()


@pytest.fixture
def endpoint() -> EndpointHandler:
    return EndpointHandler()
