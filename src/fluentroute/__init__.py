"""fluentroute public API surface (source of truth).

Recreate the module with these rules:
- Public exports: ``root``, ``RouteNode``, ``RouteDescriptor``,
  ``ReverseRouter``, ``RouteTable``, ``register``, ``compose``,
  ``BaseMiddleware``, ``register_middleware`` and the error classes.
- Middleware registration: import built-in middleware (``logging``) for its
  side effect of calling ``register_middleware(<class>)``. Imports are done
  lazily via ``import_module`` to avoid cycles.

Constraints
-----------
- Import must stay lightweight: no tree construction beyond middleware
  registration.
- Version string lives here as ``__version__`` and must remain available for
  packaging tools.

Example::

    from fluentroute import RouteTable, root

    routes = (
        root()
        .get(index)
        .at("api/v1", lambda r: r.with_("logging", lambda r: r.get(list_items).name("items")))
    )
    names = routes.reverse_router()
    table = RouteTable().register(routes)
"""

from importlib import import_module

__version__ = "0.3.0"

from .core import (
    HandlerRef,
    MiddlewareRef,
    ReverseRouter,
    RouteDescriptor,
    RouteNode,
    RoutePath,
    RouteTable,
    Router,
    available_middleware,
    compose,
    join_path,
    register,
    register_middleware,
    root,
)
from .errors import (
    DuplicateEndpoint,
    DuplicateRouteName,
    PathEscapeError,
    RouteError,
    RouteNotFound,
    RouteParameterError,
    RouteTreeSealed,
)
from .middleware import BaseMiddleware

# Import middleware to trigger auto-registration (lazy to avoid cycles)
for _middleware in ("logging",):
    import_module(f"{__name__}.middleware.{_middleware}")
del _middleware

__all__ = [
    "BaseMiddleware",
    "DuplicateEndpoint",
    "DuplicateRouteName",
    "HandlerRef",
    "MiddlewareRef",
    "PathEscapeError",
    "ReverseRouter",
    "RouteDescriptor",
    "RouteError",
    "RouteNode",
    "RouteNotFound",
    "RouteParameterError",
    "RoutePath",
    "RouteTable",
    "RouteTreeSealed",
    "Router",
    "available_middleware",
    "compose",
    "join_path",
    "register",
    "register_middleware",
    "root",
]
