"""Tests for path joining."""

import pytest

from fluentroute import RoutePath, join_path


def test_join_on_empty_path_keeps_segment_verbatim():
    assert join_path("", "x") == "x"
    assert join_path("", "/x/") == "/x/"


def test_join_uses_exactly_one_separator():
    assert join_path("x/", "/y") == "x/y"
    assert join_path("x", "y") == "x/y"
    assert join_path("x///", "///y") == "x/y"


def test_empty_segment_is_a_no_op():
    assert join_path("/api/", "") == "/api/"
    assert join_path("/api", "") == "/api"


def test_should_handle_slashes_between_segments():
    path = RoutePath().join("tst").join("tst").join("/tst/").join("tst///").join("////tst")
    assert str(path) == "tst/tst/tst/tst/tst"


def test_should_preserve_prefix_slash():
    assert str(RoutePath().join("/tst").join("tst")) == "/tst/tst"


def test_should_preserve_trailing_slash():
    assert str(RoutePath().join("tst").join("tst/")) == "tst/tst/"


def test_internal_slash_runs_collapse():
    assert str(RoutePath().join("/api//v1").join("items///all")) == "/api/v1/items/all"


def test_join_from_root_prefix():
    assert str(RoutePath("/").join("api/v1")) == "/api/v1"
    assert str(RoutePath("/").join("")) == "/"


@pytest.mark.parametrize(
    "a, b, c",
    [
        ("x", "y", "z"),
        ("/x/", "/y/", "/z/"),
        ("x//", "y", "//z"),
        ("/", "api", "v1/"),
    ],
)
def test_join_is_associative(a, b, c):
    assert join_path(join_path(a, b), c) == join_path(a, join_path(b, c))


def test_route_path_is_immutable():
    base = RoutePath("/api")
    joined = base.join("v1")
    assert str(base) == "/api"
    assert str(joined) == "/api/v1"
    with pytest.raises(AttributeError):
        base.value = "/other"  # type: ignore[misc]


def test_empty_route_path_is_falsy():
    assert not RoutePath()
    assert RoutePath("/")
