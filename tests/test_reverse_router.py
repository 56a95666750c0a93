"""Tests for route names and reverse routing."""

import uuid

import pytest

from fluentroute import ReverseRouter, RouteNotFound, RouteParameterError, root
from fluentroute.core.reverse import fill_template, placeholders


def endpoint(request):
    return "ok"


def auth(request, call_next):
    return call_next(request)


def build_tree():
    return (
        root()
        .name("home")
        .get(endpoint)
        .at(
            "api/v1",
            lambda api: api.with_(
                auth,
                lambda secured: secured.at(
                    "articles",
                    lambda articles: articles.name("articles")
                    .get(endpoint)
                    .at("{slug}", lambda article: article.name("article").get(endpoint)),
                ),
            ),
        )
        .at("files/", lambda files: files.at("{rest:path}", lambda r: r.name("file").get(endpoint)))
    )


def test_resolve_returns_composed_path():
    router = build_tree().reverse_router()
    assert router.resolve("articles") == "/api/v1/articles"
    assert router.resolve("home") == "/"
    assert router.resolve("article") == "/api/v1/articles/{slug}"


def test_names_are_collected_depth_first():
    assert build_tree().names() == [
        ("home", "/"),
        ("articles", "/api/v1/articles"),
        ("article", "/api/v1/articles/{slug}"),
        ("file", "/files/{rest:path}"),
    ]


def test_unknown_name_raises_not_found():
    router = build_tree().reverse_router()
    with pytest.raises(RouteNotFound, match="No route named 'missing'"):
        router.resolve("missing")
    with pytest.raises(KeyError):
        router.resolve("missing")


def test_reverse_router_works_before_and_after_build():
    tree = build_tree()
    before = tree.reverse_router()
    tree.build()
    after = tree.reverse_router()
    assert dict(before.items()) == dict(after.items())
    assert len(after) == 4
    assert "article" in after
    assert "ghost" not in after


def test_unnamed_tree_has_empty_reverse_router():
    router = root().get(endpoint).reverse_router()
    assert len(router) == 0
    assert router.names() == ()


def test_insert_overwrites_existing_name():
    router = ReverseRouter({"a": "/one"})
    router.insert("a", "/two")
    assert router.resolve("a") == "/two"


def test_resolve_with_substitutes_placeholders():
    router = build_tree().reverse_router()
    assert router.resolve_with("article", {"slug": "hello"}) == "/api/v1/articles/hello"
    assert router.resolve_with("article", slug="hello world") == "/api/v1/articles/hello%20world"


def test_resolve_with_encodes_slashes_except_for_path_converter():
    router = build_tree().reverse_router()
    assert router.resolve_with("article", slug="a/b") == "/api/v1/articles/a%2Fb"
    assert router.resolve_with("file", rest="docs/guide v2.md") == "/files/docs/guide%20v2.md"


def test_resolve_with_without_placeholders():
    router = build_tree().reverse_router()
    assert router.resolve_with("articles") == "/api/v1/articles"


def test_resolve_with_missing_parameter():
    router = build_tree().reverse_router()
    with pytest.raises(RouteParameterError, match="Missing parameter"):
        router.resolve_with("article")


def test_resolve_with_unexpected_parameter():
    router = build_tree().reverse_router()
    with pytest.raises(RouteParameterError, match="Unexpected parameter"):
        router.resolve_with("article", slug="x", page=2)


def test_resolve_with_unknown_name():
    with pytest.raises(RouteNotFound):
        ReverseRouter().resolve_with("nothing", id=1)


def test_typed_placeholders_are_validated():
    router = ReverseRouter(
        {
            "item": "/items/{id:int}",
            "price": "/prices/{amount:float}",
            "session": "/sessions/{key:uuid}",
        }
    )
    assert router.resolve_with("item", id=42) == "/items/42"
    assert router.resolve_with("item", id="7") == "/items/7"
    assert router.resolve_with("price", amount=2.5) == "/prices/2.5"
    key = uuid.UUID("12345678-1234-5678-1234-567812345678")
    assert router.resolve_with("session", key=str(key)) == f"/sessions/{key}"
    with pytest.raises(RouteParameterError, match="Invalid value for parameter 'id'"):
        router.resolve_with("item", id="abc")
    with pytest.raises(RouteParameterError):
        router.resolve_with("session", key="not-a-uuid")


def test_numbers_are_accepted_for_string_placeholders():
    router = ReverseRouter({"article": "/articles/{slug}"})
    assert router.resolve_with("article", slug=7) == "/articles/7"


def test_empty_value_is_rejected_for_segment_placeholders():
    router = ReverseRouter({"article": "/articles/{slug}"})
    with pytest.raises(RouteParameterError, match="cannot be empty"):
        router.resolve_with("article", slug="")


def test_unknown_converter_is_rejected():
    with pytest.raises(RouteParameterError, match="Unknown converter 'date'"):
        fill_template("/days/{day:date}", {"day": "2024-01-01"})


def test_placeholders_listing():
    assert placeholders("/a/{x}/b/{y:int}/{rest:path}") == [
        ("x", "str"),
        ("y", "int"),
        ("rest", "path"),
    ]
    assert placeholders("/plain/path") == []


def test_placeholder_named_like_arguments():
    router = ReverseRouter({"user": "/users/{name}/{params}"})
    assert router.resolve_with("user", name="ada", params="p") == "/users/ada/p"
