import pytest

from routestack.exceptions import DuplicateRouteException
from routestack.routing.duplicates import DuplicateRouteDetector, methods_overlap
from routestack.routing.route import Route


@pytest.fixture
def detector() -> DuplicateRouteDetector:
    return DuplicateRouteDetector()


@pytest.mark.parametrize(
    ("first", "second"),
    [
        (["GET"], ["GET"]),
        (["GET", "POST"], ["POST", "PUT"]),
        (None, ["DELETE"]),
        (["PATCH"], None),
        (None, None),
        (["get"], ["GET"]),
    ],
)
def test_overlapping_methods_on_same_path_conflict(detector, first, second):
    existing = Route("/users", "first", methods=first)
    candidate = Route("/users", "second", "users.second", methods=second)

    with pytest.raises(DuplicateRouteException) as exc_info:
        detector.detect_duplicate(candidate, [existing])

    assert exc_info.value.path == "/users"
    assert "/users" in str(exc_info.value)


def test_disjoint_methods_on_same_path_do_not_conflict(detector):
    existing = Route("/users", "list", methods=["GET", "HEAD"])
    candidate = Route("/users", "create", methods=["POST"])

    detector.detect_duplicate(candidate, [existing])


def test_different_paths_do_not_conflict(detector):
    existing = Route("/users", "list")
    candidate = Route("/users/{id}", "show")

    detector.detect_duplicate(candidate, [existing])


def test_no_existing_routes(detector):
    detector.detect_duplicate(Route("/users", "list"), [])


def test_host_and_scheme_constraints_are_ignored(detector):
    existing = Route("/users", "list", methods=["GET"]).set_host("a.example.com")
    candidate = (
        Route("/users", "list_b", methods=["GET"])
        .set_host("b.example.com")
        .set_scheme("https")
    )

    with pytest.raises(DuplicateRouteException):
        detector.detect_duplicate(candidate, [existing])


def test_conflict_names_existing_route(detector):
    existing = Route("/users", "list", "users.index", ["GET"])
    candidate = Route("/users", "other", methods=["GET"])

    with pytest.raises(DuplicateRouteException) as exc_info:
        detector.detect_duplicate(candidate, [existing])

    assert "users.index" in str(exc_info.value)
    assert exc_info.value.name == "/users:GET"


def test_detection_is_pure(detector):
    existing = [Route("/users", "list", methods=["GET"])]
    candidate = Route("/users", "create", methods=["POST"])

    detector.detect_duplicate(candidate, existing)
    detector.detect_duplicate(candidate, existing)

    assert len(existing) == 1
    assert candidate.path == "/users"


def test_methods_overlap():
    get = Route("/", "h", methods=["GET"])
    post = Route("/", "h", methods=["POST"])
    anything = Route("/", "h")

    assert not methods_overlap(get, post)
    assert methods_overlap(get, anything)
    assert methods_overlap(anything, post)
    assert methods_overlap(get, Route("/", "h", methods=["HEAD", "GET"]))
