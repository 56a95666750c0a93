"""Core runtime aggregator (source of truth).

Purpose: expose the route-tree building blocks from a single module. No extra
logic beyond imports/exports.

Guarantees
----------
- Importing this module performs only imports; it does not register
  middleware or build trees.
- Public API mirrors underlying modules 1:1:
  * ``path`` → ``RoutePath``, ``join_path``
  * ``base`` → ``HandlerRef``, ``MiddlewareRef``, ``RouteDescriptor``
  * ``node`` → ``RouteNode``, ``root``
  * ``reverse`` → ``ReverseRouter``
  * ``pipeline`` → ``compose``, ``as_middleware`` and the middleware registry
  * ``router`` → ``Router`` protocol, ``RouteTable``, ``register``
"""

from .base import HTTP_METHODS, HandlerRef, MiddlewareRef, RouteDescriptor, as_handler
from .node import RouteNode, root
from .path import RoutePath, join_path
from .pipeline import as_middleware, available_middleware, compose, register_middleware
from .reverse import ReverseRouter
from .router import RouteTable, Router, register

__all__ = [
    "HTTP_METHODS",
    "HandlerRef",
    "MiddlewareRef",
    "RouteDescriptor",
    "RouteNode",
    "RoutePath",
    "ReverseRouter",
    "RouteTable",
    "Router",
    "as_handler",
    "as_middleware",
    "available_middleware",
    "compose",
    "join_path",
    "register",
    "register_middleware",
    "root",
]
