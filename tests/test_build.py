"""Tests for flattening route trees into descriptors."""

import dataclasses

import pytest

from fluentroute import RouteDescriptor, RouteTreeSealed, root


def h1(request):
    return 1


def h2(request):
    return 2


def h3(request):
    return 3


def h4(request):
    return 4


def h5(request):
    return 5


def mw1(request, call_next):
    return call_next(request)


def mw2(request, call_next):
    return call_next(request)


def test_basic_route_flattens_root_endpoints():
    descriptors = root().get(h1).post(h2).build()
    assert [(d.path, d.method) for d in descriptors] == [("/", "GET"), ("/", "POST")]
    assert all(d.middleware == () for d in descriptors)


def test_nested_route_scenario():
    tree = (
        root()
        .get(h1)
        .post(h2)
        .at("api/v1", lambda r: r.get(h3).post(h4))
        .at("api/v2", lambda r: r.get(h5))
    )
    descriptors = tree.build()
    assert len(descriptors) == 5
    assert [d.path for d in descriptors] == ["/", "/", "/api/v1", "/api/v1", "/api/v2"]
    assert [d.method for d in descriptors] == ["GET", "POST", "GET", "POST", "GET"]
    assert [d.handler.func for d in descriptors] == [h1, h2, h3, h4, h5]


def test_middleware_scenario():
    tree = root().at(
        "path",
        lambda r: r.with_(
            mw1,
            lambda r2: r2.at("subpath", lambda r3: r3.with_(mw2, lambda r4: r4.get(h1))).get(h2),
        ),
    )
    by_handler = {d.handler.func: d for d in tree.build()}
    nested = by_handler[h1]
    direct = by_handler[h2]
    assert nested.path == "/path/subpath"
    assert [ref.middleware for ref in nested.middleware] == [mw1, mw2]
    assert direct.path == "/path"
    assert [ref.middleware for ref in direct.middleware] == [mw1]


def test_own_endpoints_come_before_branches():
    tree = root().at("a", lambda r: r.get(h1)).get(h2).at("b", lambda r: r.get(h3))
    assert [d.handler.func for d in tree.build()] == [h2, h1, h3]


def test_middleware_outside_scope_is_not_inherited():
    tree = root().with_(mw1, lambda r: r.at("inner", lambda r2: r2.get(h1))).at(
        "outer", lambda r: r.get(h2)
    )
    chains = {d.path: len(d.middleware) for d in tree.build()}
    assert chains == {"/inner": 1, "/outer": 0}


def test_descriptor_count_matches_declared_endpoints():
    tree = (
        root()
        .get(h1)
        .all(h2)
        .at("a", lambda r: r.put(h3).at("b", lambda r2: r2.delete(h4).patch(h5)))
        .with_(mw1, lambda r: r.at("c", lambda r2: r2.all(h1)))
    )
    assert len(tree.build()) == 6


def test_catch_all_descriptor_has_no_method():
    (descriptor,) = root().at("files", lambda r: r.all(h1)).build()
    assert descriptor.method is None
    assert descriptor.label == "ANY /files"


def test_descriptor_carries_route_name():
    descriptors = root().at("articles", lambda r: r.name("articles").get(h1).post(h2)).build()
    assert [d.name for d in descriptors] == ["articles", "articles"]
    assert descriptors[0].label == "articles"


def test_descriptor_is_frozen():
    (descriptor,) = root().get(h1).build()
    assert isinstance(descriptor, RouteDescriptor)
    with pytest.raises(dataclasses.FrozenInstanceError):
        descriptor.path = "/other"  # type: ignore[misc]


def test_shared_middleware_ref_is_reused():
    tree = root().with_(mw1, lambda r: r.get(h1).at("x", lambda r2: r2.get(h2)))
    first, second = tree.build()
    assert first.middleware[0] is second.middleware[0]


def test_build_consumes_the_tree():
    tree = root().get(h1)
    tree.build()
    with pytest.raises(RouteTreeSealed, match="already built"):
        tree.build()
    with pytest.raises(RouteTreeSealed):
        tree.post(h2)


def test_empty_tree_builds_nothing():
    assert root().build() == []
    assert root().at("a", lambda r: r.at("b", lambda r2: r2)).build() == []
