"""Router collaborator contract and an in-memory implementation (source of truth).

``Router`` protocol
-------------------
Anything exposing
``register_endpoint(path, method, middleware, handler, *, name=None)``.
``method`` is an upper-case HTTP method or ``None`` for a catch-all;
``middleware`` is the ordered chain (first element outermost); ``name`` is the
route name of the declaring node (``None`` when unnamed), so routers can key
per-route configuration the way ``RouteDescriptor.label`` does. Server adapters
typically call :func:`fluentroute.core.pipeline.compose` on the descriptor, or
hand the chain to their own middleware system.

``register(router, tree)``
--------------------------
Builds ``tree`` (consuming it) and calls ``register_endpoint`` once per
descriptor in flatten order. Returns the descriptors.

``RouteTable``
--------------
Exact-path table keyed by ``(path, method)`` storing composed callables.

- ``register_endpoint`` builds a descriptor (name included) and hands it to
  ``add``, so ``register(table, tree)`` and ``table.register(tree)`` give
  middleware the same route labels.
- ``add(descriptor)`` composes the chain; a repeated key raises
  ``ValueError`` unless the table was created with ``replace=True``.
- ``register(tree)`` builds ``tree`` and adds every descriptor, keeping route
  names so middleware sees route labels. Returns the table.
- ``lookup(method, path)`` returns the exact-method entry, else the path's
  catch-all, else raises ``RouteNotFound``. ``method`` is normalized.
- ``dispatch(method, path, request)`` looks up and invokes.
- ``entries()`` returns the registered keys in registration order.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Protocol, Tuple

from fluentroute.core.base import (
    HandlerRef,
    MiddlewareRef,
    RouteDescriptor,
    normalize_method,
)
from fluentroute.core.pipeline import compose
from fluentroute.errors import RouteNotFound

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from fluentroute.core.node import RouteNode

__all__ = ["Router", "RouteTable", "register"]

logger = logging.getLogger(__name__)


class Router(Protocol):
    """A component where flattened routes can be registered, like a web server."""

    def register_endpoint(
        self,
        path: str,
        method: Optional[str],
        middleware: Tuple[MiddlewareRef, ...],
        handler: HandlerRef,
        *,
        name: Optional[str] = None,
    ) -> None: ...


def register(router: Router, tree: "RouteNode") -> List[RouteDescriptor]:
    """Register every route of ``tree`` on ``router``."""
    descriptors = tree.build()
    for descriptor in descriptors:
        logger.debug(
            "Registering %s %s (%d middleware)",
            descriptor.method or "ANY",
            descriptor.path,
            len(descriptor.middleware),
        )
        router.register_endpoint(
            descriptor.path,
            descriptor.method,
            descriptor.middleware,
            descriptor.handler,
            name=descriptor.name,
        )
    return descriptors


class RouteTable:
    """In-memory router dispatching on exact paths."""

    __slots__ = ("_routes", "_replace", "_use_smartasync")

    def __init__(self, *, replace: bool = False, use_smartasync: bool = False) -> None:
        self._routes: Dict[Tuple[str, Optional[str]], Callable] = {}
        self._replace = replace
        self._use_smartasync = use_smartasync

    def register_endpoint(
        self,
        path: str,
        method: Optional[str],
        middleware: Tuple[MiddlewareRef, ...],
        handler: HandlerRef,
        *,
        name: Optional[str] = None,
    ) -> None:
        self.add(RouteDescriptor(path, method, tuple(middleware), handler, name=name))

    def add(self, descriptor: RouteDescriptor) -> None:
        """Compose and store a single descriptor."""
        key = (descriptor.path, descriptor.method)
        if key in self._routes and not self._replace:
            raise ValueError(f"Route collision: {descriptor.method or 'ANY'} '{descriptor.path}'")
        self._routes[key] = compose(descriptor, use_smartasync=self._use_smartasync)

    def register(self, tree: "RouteNode") -> "RouteTable":
        """Register every route of ``tree``, keeping route names for middleware labels."""
        for descriptor in tree.build():
            self.add(descriptor)
        return self

    def lookup(self, method: str, path: str) -> Callable:
        normalized = normalize_method(method)
        handler = self._routes.get((path, normalized))
        if handler is None:
            handler = self._routes.get((path, None))
        if handler is None:
            raise RouteNotFound(f"No route for {normalized} '{path}'")
        return handler

    def dispatch(self, method: str, path: str, request: Any = None) -> Any:
        """Fetch and invoke the handler for ``method`` and ``path``."""
        return self.lookup(method, path)(request)

    def entries(self) -> Tuple[Tuple[str, Optional[str]], ...]:
        return tuple(self._routes)

    def __len__(self) -> int:
        return len(self._routes)
