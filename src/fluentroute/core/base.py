"""Lightweight handle and descriptor primitives for fluentroute."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

__all__ = [
    "HTTP_METHODS",
    "HandlerRef",
    "MiddlewareRef",
    "RouteDescriptor",
    "as_handler",
    "normalize_method",
]

HTTP_METHODS = (
    "GET",
    "HEAD",
    "POST",
    "PUT",
    "DELETE",
    "CONNECT",
    "OPTIONS",
    "TRACE",
    "PATCH",
)


@dataclass(frozen=True, eq=False)
class HandlerRef:
    """Shared, immutable handle around a request handler."""

    func: Callable
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return getattr(self.func, "__name__", type(self.func).__name__)

    def __call__(self, *args, **kwargs):
        return self.func(*args, **kwargs)


@dataclass(frozen=True, eq=False)
class MiddlewareRef:
    """Shared, immutable handle around a middleware value.

    ``middleware`` is either a ``BaseMiddleware`` instance or a plain callable
    ``fn(request, call_next)``. The same ref can sit in many chains.
    """

    middleware: Any
    name: str


@dataclass(frozen=True)
class RouteDescriptor:
    """One flattened endpoint: path, method (``None`` = catch-all), chain, handler."""

    path: str
    method: Optional[str]
    middleware: Tuple[MiddlewareRef, ...]
    handler: HandlerRef
    name: Optional[str] = None

    @property
    def label(self) -> str:
        return self.name or f"{self.method or 'ANY'} {self.path}"


def as_handler(value: Any) -> HandlerRef:
    """Wrap ``value`` in a :class:`HandlerRef` (idempotent)."""
    if isinstance(value, HandlerRef):
        return value
    if not callable(value):
        raise TypeError(f"Handler must be callable, got {type(value).__name__}")
    return HandlerRef(value)


def normalize_method(method: str) -> str:
    """Upper-case ``method`` and check it is a known HTTP method."""
    if not isinstance(method, str):
        raise TypeError(f"HTTP method must be a string, got {type(method).__name__}")
    normalized = method.strip().upper()
    if normalized not in HTTP_METHODS:
        raise ValueError(
            f"Unsupported HTTP method '{method}'. Known methods: {', '.join(HTTP_METHODS)}"
        )
    return normalized
