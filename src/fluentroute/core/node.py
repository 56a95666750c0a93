"""Route tree builder (source of truth).

The module exposes :class:`RouteNode` and the :func:`root` factory. A tree is
described with self-returning builder calls and then flattened into
``RouteDescriptor`` values for an external router.

Construction
------------
``root(prefix="/", **options)`` returns the root node: path ``prefix``, no
middleware, no name, no endpoints, no branches. ``options`` are merged with
``DEFAULT_OPTIONS`` through ``SmartOptions`` and shared by every node of the
tree:

- ``strict_names`` (True): a name already used anywhere in the subtree raises
  ``DuplicateRouteName``. When False, the reverse router keeps the last one.
- ``strict_endpoints`` (True): a ``(path, method)`` already declared by another
  node of the subtree raises ``DuplicateEndpoint``. When False both are
  flattened and the external router decides.

Builder calls
-------------
- ``at(segment, routes)``: child with ``path.join(segment)`` and the same
  middleware; ``with_(middleware, routes, **config)``: child with the same
  path and the middleware appended (see ``pipeline.as_middleware``).
  ``routes(child)`` populates the child and must return it (or ``None``).
  After the callback the child is checked against the subtree indexes, sealed
  and appended. Any error raised inside the callback propagates untouched and
  nothing is appended.
- ``method(http_method, handler)`` / verb shortcuts / ``all(handler)``: one
  handler per key on this node, last write wins. The catch-all key is ``None``.
- ``name(n)``: a node is named at most once.
- ``serve_dir`` / ``serve_file``: register file endpoints (``fluentroute.files``).

Every call returns ``self``. Calls on a sealed node raise ``RouteTreeSealed``.

Indexes
-------
Each node keeps ``_names`` (name → path) and ``_routes`` (set of
``(path, method)``) for its whole subtree. A child's indexes are merged into
the parent's when it is appended; conflicts are detected there, so every
error surfaces while the tree is being described.

Flattening and naming
---------------------
- ``build()`` emits this node's endpoints (insertion order) then each branch's
  output in branch order. It seals the tree and may run once.
- ``names()`` yields ``(name, path)`` pairs in the same traversal order;
  ``reverse_router()`` loads them into a ``ReverseRouter``. Neither touches
  middleware, and ``reverse_router`` may run before or after ``build``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from smartseeds import SmartOptions

from fluentroute.core.base import (
    HandlerRef,
    MiddlewareRef,
    RouteDescriptor,
    as_handler,
    normalize_method,
)
from fluentroute.core.path import RoutePath
from fluentroute.core.pipeline import as_middleware
from fluentroute.core.reverse import ReverseRouter
from fluentroute.errors import DuplicateEndpoint, DuplicateRouteName, RouteTreeSealed

__all__ = ["RouteNode", "root", "DEFAULT_OPTIONS"]

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS: Dict[str, Any] = {
    "strict_names": True,
    "strict_endpoints": True,
}

RouteKey = Tuple[str, Optional[str]]


def root(prefix: str = "/", **options: Any) -> "RouteNode":
    """Start a route tree at ``prefix``."""
    opts = SmartOptions(options, defaults=DEFAULT_OPTIONS)
    return RouteNode(RoutePath(prefix), (), options=opts)


class RouteNode:
    """One level of the route tree.

    Responsibilities:
    - accumulate path and middleware context for its subtree
    - hold this level's endpoints and optional name
    - flatten the subtree into route descriptors and collect route names
    """

    __slots__ = (
        "path",
        "middleware",
        "_name",
        "_endpoints",
        "_branches",
        "_options",
        "_names",
        "_routes",
        "_sealed",
        "_built",
    )

    def __init__(
        self,
        path: RoutePath,
        middleware: Tuple[MiddlewareRef, ...] = (),
        *,
        options: Any = None,
    ) -> None:
        self.path = path
        self.middleware = tuple(middleware)
        self._name: Optional[str] = None
        self._endpoints: Dict[Optional[str], HandlerRef] = {}
        self._branches: List[RouteNode] = []
        self._options = options if options is not None else SmartOptions({}, defaults=DEFAULT_OPTIONS)
        self._names: Dict[str, str] = {}
        self._routes: Set[RouteKey] = set()
        self._sealed = False
        self._built = False

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def route_name(self) -> Optional[str]:
        return self._name

    @property
    def endpoints(self) -> Dict[Optional[str], HandlerRef]:
        return dict(self._endpoints)

    @property
    def branches(self) -> Tuple["RouteNode", ...]:
        return tuple(self._branches)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def _option(self, key: str) -> Any:
        return getattr(self._options, key, DEFAULT_OPTIONS[key])

    def _ensure_open(self) -> None:
        if self._sealed:
            raise RouteTreeSealed(
                f"Route node at '{self.path}' is sealed; declare routes inside its callback"
            )

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------
    def at(self, segment: str, routes: Callable[["RouteNode"], Any]) -> "RouteNode":
        """Add sub-routes under ``segment``."""
        self._ensure_open()
        return self._add_branch(self.path.join(segment), self.middleware, routes)

    def with_(self, middleware: Any, routes: Callable[["RouteNode"], Any], **config: Any) -> "RouteNode":
        """Add sub-routes wrapped by ``middleware``."""
        self._ensure_open()
        ref = as_middleware(middleware, **config)
        return self._add_branch(self.path, self.middleware + (ref,), routes)

    def _add_branch(
        self,
        path: RoutePath,
        middleware: Tuple[MiddlewareRef, ...],
        routes: Callable[["RouteNode"], Any],
    ) -> "RouteNode":
        child = RouteNode(path, middleware, options=self._options)
        result = routes(child)
        if result is not None and result is not child:
            raise TypeError(
                f"Route callback for '{path}' must return the node it received (or None), "
                f"got {type(result).__name__}"
            )
        self._merge_indexes(child)
        child._sealed = True
        self._branches.append(child)
        return self

    def _merge_indexes(self, child: "RouteNode") -> None:
        if self._option("strict_names"):
            for name, path in child._names.items():
                if name in self._names:
                    raise DuplicateRouteName(name, path)
        if self._option("strict_endpoints"):
            for key in child._routes:
                if key in self._routes:
                    raise DuplicateEndpoint(*key)
        self._names.update(child._names)
        self._routes.update(child._routes)

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------
    def method(self, http_method: str, handler: Any) -> "RouteNode":
        """Add an endpoint for ``http_method``."""
        self._ensure_open()
        return self._add_endpoint(normalize_method(http_method), handler)

    def all(self, handler: Any) -> "RouteNode":
        """Add a catch-all endpoint, matching any method."""
        self._ensure_open()
        return self._add_endpoint(None, handler)

    def _add_endpoint(self, method: Optional[str], handler: Any) -> "RouteNode":
        ref = as_handler(handler)
        key = (str(self.path), method)
        if method not in self._endpoints and key in self._routes and self._option("strict_endpoints"):
            raise DuplicateEndpoint(*key)
        self._endpoints[method] = ref
        self._routes.add(key)
        return self

    def get(self, handler: Any) -> "RouteNode":
        return self.method("GET", handler)

    def head(self, handler: Any) -> "RouteNode":
        return self.method("HEAD", handler)

    def post(self, handler: Any) -> "RouteNode":
        return self.method("POST", handler)

    def put(self, handler: Any) -> "RouteNode":
        return self.method("PUT", handler)

    def delete(self, handler: Any) -> "RouteNode":
        return self.method("DELETE", handler)

    def options(self, handler: Any) -> "RouteNode":
        return self.method("OPTIONS", handler)

    def connect(self, handler: Any) -> "RouteNode":
        return self.method("CONNECT", handler)

    def patch(self, handler: Any) -> "RouteNode":
        return self.method("PATCH", handler)

    def trace(self, handler: Any) -> "RouteNode":
        return self.method("TRACE", handler)

    # ------------------------------------------------------------------
    # Naming
    # ------------------------------------------------------------------
    def name(self, name: str) -> "RouteNode":
        """Make this a named route."""
        self._ensure_open()
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Route name must be a non-empty string")
        path = str(self.path)
        if self._name is not None:
            raise DuplicateRouteName(name, path, existing=self._name)
        if name in self._names and self._option("strict_names"):
            raise DuplicateRouteName(name, path)
        self._name = name
        self._names[name] = path
        return self

    # ------------------------------------------------------------------
    # File endpoints
    # ------------------------------------------------------------------
    def serve_dir(self, directory: Any, *, param: str = "path", index: str = "index.html") -> "RouteNode":
        """Serve ``directory`` below this node, capturing the sub-path as ``param``."""
        from fluentroute.files import serve_dir

        return serve_dir(self, directory, param=param, index=index)

    def serve_file(self, file: Any) -> "RouteNode":
        """Serve a single file at this node."""
        from fluentroute.files import serve_file

        return serve_file(self, file)

    # ------------------------------------------------------------------
    # Flattening
    # ------------------------------------------------------------------
    def build(self) -> List[RouteDescriptor]:
        """Flatten the tree into route descriptors (consumes the tree)."""
        if self._built:
            raise RouteTreeSealed(f"Route tree at '{self.path}' was already built")
        self._sealed = True
        self._built = True
        descriptors = self._flatten()
        logger.debug("Flattened %d route(s) from '%s'", len(descriptors), self.path)
        return descriptors

    def _flatten(self) -> List[RouteDescriptor]:
        path = str(self.path)
        descriptors = [
            RouteDescriptor(
                path=path,
                method=method,
                middleware=self.middleware,
                handler=handler,
                name=self._name,
            )
            for method, handler in self._endpoints.items()
        ]
        for branch in self._branches:
            descriptors.extend(branch._flatten())
        return descriptors

    def names(self) -> List[Tuple[str, str]]:
        """Return ``(name, path)`` for every named node, depth-first."""
        collected: List[Tuple[str, str]] = []
        if self._name is not None:
            collected.append((self._name, str(self.path)))
        for branch in self._branches:
            collected.extend(branch.names())
        return collected

    def reverse_router(self) -> ReverseRouter:
        """Construct a reverse router for the named routes of this tree."""
        router = ReverseRouter()
        for name, path in self.names():
            router.insert(name, path)
        return router

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def describe(self) -> Dict[str, Any]:
        """Return a nested snapshot of the subtree."""
        result: Dict[str, Any] = {
            "path": str(self.path),
            "middleware": [ref.name for ref in self.middleware],
            "endpoints": [method or "ANY" for method in self._endpoints],
        }
        if self._name is not None:
            result["name"] = self._name
        if self._branches:
            result["branches"] = [branch.describe() for branch in self._branches]
        return result

    def __repr__(self) -> str:
        label = f" name={self._name!r}" if self._name else ""
        return f"<RouteNode path={str(self.path)!r}{label} endpoints={len(self._endpoints)} branches={len(self._branches)}>"
