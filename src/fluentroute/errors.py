"""Error taxonomy for fluentroute.

Every error derives from :class:`RouteError` and from the builtin exception a
caller would naturally catch (``ValueError`` for conflicting declarations,
``KeyError`` for failed lookups, ...), so ``except ValueError`` keeps working
for code that does not know about this module.

Construction-time errors (``DuplicateRouteName``, ``DuplicateEndpoint``) are
raised by builder calls and propagate through every enclosing ``at``/``with_``
callback; the tree expression never yields a value in that case.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "RouteError",
    "DuplicateRouteName",
    "DuplicateEndpoint",
    "RouteNotFound",
    "RouteParameterError",
    "RouteTreeSealed",
    "PathEscapeError",
]


class RouteError(Exception):
    """Base class for every fluentroute error."""


class DuplicateRouteName(RouteError, ValueError):
    """A route name was assigned twice (same node, or two nodes of one tree)."""

    def __init__(self, name: str, path: str, existing: Optional[str] = None):
        self.name = name
        self.path = path
        self.existing = existing
        if existing is not None:
            message = f"Route at '{path}' already has name '{existing}' (cannot rename to '{name}')"
        else:
            message = f"Route name collision: '{name}' (at '{path}')"
        super().__init__(message)


class DuplicateEndpoint(RouteError, ValueError):
    """Two distinct nodes declare an endpoint for the same path and method."""

    def __init__(self, path: str, method: Optional[str]):
        self.path = path
        self.method = method
        super().__init__(f"Endpoint collision: {method or 'ANY'} '{path}' declared twice")


class RouteNotFound(RouteError, KeyError):
    """Lookup of a route (by name or by path/method) failed."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""


class RouteParameterError(RouteError, ValueError):
    """Parameters passed to a parameterized reverse lookup do not fit the template."""


class RouteTreeSealed(RouteError, RuntimeError):
    """A builder call hit a node that was already attached or built."""


class PathEscapeError(RouteError, PermissionError):
    """A requested file path resolves outside the served base directory."""
