import pytest
from bevy import get_registry

from routestack.exceptions import MiddlewareResolutionException
from routestack.middleware.pipeline import MiddlewarePipeline
from routestack.middleware.stack import MiddlewareStack
from routestack.resolvers import ContainerResolver, import_from_string
from tests.helpers import EndpointHandler, FakeRequest, RecordingMiddleware, shared_middleware


class TestImportFromString:
    def test_imports_symbol(self):
        assert import_from_string("tests.helpers:RecordingMiddleware") is RecordingMiddleware

    def test_imports_nested_attribute(self):
        assert import_from_string("tests.helpers:RecordingMiddleware.process") is (
            RecordingMiddleware.process
        )

    def test_missing_colon(self):
        with pytest.raises(MiddlewareResolutionException, match="Expected 'module.path:symbol'"):
            import_from_string("tests.helpers.RecordingMiddleware")

    def test_missing_module(self):
        with pytest.raises(MiddlewareResolutionException) as exc_info:
            import_from_string("tests.does_not_exist:Thing")

        assert exc_info.value.identifier == "tests.does_not_exist:Thing"

    def test_missing_symbol(self):
        with pytest.raises(MiddlewareResolutionException):
            import_from_string("tests.helpers:DoesNotExist")


class TestContainerResolver:
    def test_resolves_registered_class(self):
        middleware = RecordingMiddleware("auth")
        resolver = ContainerResolver().add(RecordingMiddleware, middleware)

        assert resolver.get(RecordingMiddleware) is middleware

    def test_resolves_import_string_to_registered_class(self):
        middleware = RecordingMiddleware("auth")
        resolver = ContainerResolver().add(RecordingMiddleware, middleware)

        assert resolver.get("tests.helpers:RecordingMiddleware") is middleware

    def test_import_string_to_instance_is_returned_as_is(self):
        assert ContainerResolver().get("tests.helpers:shared_middleware") is shared_middleware

    def test_uses_given_container(self):
        container = get_registry().create_container()
        middleware = RecordingMiddleware("given")
        container.add(RecordingMiddleware, middleware)
        resolver = ContainerResolver(container)

        assert resolver.container is container
        assert resolver.get(RecordingMiddleware) is middleware

    def test_unimportable_identifier_raises(self):
        with pytest.raises(MiddlewareResolutionException):
            ContainerResolver().get("tests.does_not_exist:Thing")

    @pytest.mark.asyncio
    async def test_bevy_container_drives_a_pipeline(self):
        middleware = RecordingMiddleware("container")
        resolver = ContainerResolver().add(RecordingMiddleware, middleware)
        stack = MiddlewareStack([RecordingMiddleware, "tests.helpers:shared_middleware"])
        request = FakeRequest("/")

        await MiddlewarePipeline(stack, resolver, EndpointHandler()).handle(request)

        assert request.trail == ["container", "shared", "endpoint"]
