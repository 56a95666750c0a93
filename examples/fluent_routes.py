"""
Example showing how to describe a route tree with fluentroute and register it.
"""

from __future__ import annotations

import logging

from fluentroute import RouteTable, root


def index(request):
    return "index"


def list_articles(request):
    return ["hello-world"]


def create_article(request):
    return {"status": "created"}


def show_article(request):
    return f"article:{request}"


def require_token(request, call_next):
    if request == "denied":
        return "403"
    return call_next(request)


def build_routes():
    return (
        root()
        .get(index)
        .at(
            "api/v1",
            lambda api: api.with_(
                "logging",
                lambda logged: logged.at(
                    "articles",
                    lambda articles: articles.name("articles")
                    .get(list_articles)
                    .with_(require_token, lambda secured: secured.post(create_article))
                    .at("{slug}", lambda article: article.name("article").get(show_article)),
                ),
            ),
        )
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    routes = build_routes()
    names = routes.reverse_router()
    table = RouteTable().register(routes)
    for path, method in table.entries():
        print(f"{method or 'ANY':7} {path}")
    print(names.resolve_with("article", slug="hello world"))
    print(table.dispatch("GET", names.resolve("articles"), "req"))
