"""Middleware registry and handler composition (source of truth).

Global registry
---------------
``register_middleware(middleware_class, name=None)`` validates that
``middleware_class`` is a ``BaseMiddleware`` subclass carrying a non-empty
``middleware_code``. Without ``name`` the code is used and re-registering it
with a different class raises ``ValueError`` (same class: idempotent). An
explicit ``name`` always overwrites. ``available_middleware`` returns a shallow
copy of the registry.

Normalization
-------------
``as_middleware(value, **config)`` turns whatever a caller hands to
``RouteNode.with_`` into a ``MiddlewareRef``:

- ``MiddlewareRef``: returned unchanged (``config`` not allowed).
- ``str``: looked up in the registry and instantiated with ``config``; unknown
  names raise ``ValueError`` listing the available ones.
- ``BaseMiddleware`` instance: wrapped, named after ``instance.name``.
- other callables: wrapped as function middleware ``fn(request, call_next)``.
- anything else: ``TypeError``.

Composition
-----------
``compose(descriptor, *, use_smartasync=False)`` walks ``descriptor.middleware``
in reverse so the first-appended middleware ends up outermost. Each
``BaseMiddleware`` layer is produced by ``wrap_handler(descriptor, wrapped)``
and guarded: when the middleware is disabled for ``descriptor.label`` at call
time the guard calls the next layer directly. Function middleware is adapted
as ``fn(request, call_next)``; the layer is async whenever the middleware or
the rest of the chain is, awaiting whatever the middleware returns. The
composed callable is returned, never invoked.
"""

from __future__ import annotations

import inspect
from functools import wraps
from typing import Any, Callable, Dict, Optional, Type

from smartseeds.typeutils import safe_is_instance

from fluentroute.core.base import MiddlewareRef, RouteDescriptor
from fluentroute.middleware._base_middleware import BaseMiddleware

__all__ = ["register_middleware", "available_middleware", "as_middleware", "compose"]

_MIDDLEWARE_REGISTRY: Dict[str, Type[BaseMiddleware]] = {}
_BASE_MIDDLEWARE_PATH = "fluentroute.middleware._base_middleware.BaseMiddleware"


def register_middleware(
    middleware_class: Type[BaseMiddleware], name: Optional[str] = None
) -> None:
    """Register a middleware class globally under its code (or ``name``)."""
    if not isinstance(middleware_class, type) or not issubclass(middleware_class, BaseMiddleware):
        raise TypeError("middleware_class must be a BaseMiddleware subclass")
    if not getattr(middleware_class, "middleware_code", None):
        raise ValueError(
            f"Middleware {middleware_class.__name__} not following standards: "
            "missing middleware_code"
        )
    code = name or middleware_class.middleware_code
    if name is None:
        existing = _MIDDLEWARE_REGISTRY.get(code)
        if existing is not None and existing is not middleware_class:
            raise ValueError(f"Middleware '{code}' already registered")
    _MIDDLEWARE_REGISTRY[code] = middleware_class


def available_middleware() -> Dict[str, Type[BaseMiddleware]]:
    return dict(_MIDDLEWARE_REGISTRY)


def as_middleware(value: Any, **config: Any) -> MiddlewareRef:
    """Normalize a middleware value into a shareable :class:`MiddlewareRef`."""
    if isinstance(value, MiddlewareRef):
        if config:
            raise ValueError("Configuration is not allowed with an existing MiddlewareRef")
        return value
    if isinstance(value, str):
        middleware_class = _MIDDLEWARE_REGISTRY.get(value)
        if middleware_class is None:
            available = ", ".join(sorted(_MIDDLEWARE_REGISTRY)) or "none"
            raise ValueError(
                f"Unknown middleware '{value}'. Register it first. "
                f"Available middleware: {available}"
            )
        instance = middleware_class(**config)
        return MiddlewareRef(instance, instance.name)
    if config:
        raise ValueError("Configuration is only allowed with a registered middleware name")
    if safe_is_instance(value, _BASE_MIDDLEWARE_PATH):
        return MiddlewareRef(value, value.name)
    if callable(value):
        return MiddlewareRef(value, getattr(value, "__name__", type(value).__name__))
    raise TypeError(f"Unsupported middleware: {value!r}")


def compose(descriptor: RouteDescriptor, *, use_smartasync: bool = False) -> Callable:
    """Return the descriptor's handler wrapped by its middleware chain."""
    wrapped: Callable = descriptor.handler.func
    for ref in reversed(descriptor.middleware):
        wrapped = _wrap_layer(ref, descriptor, wrapped)

    if use_smartasync:
        from smartasync import smartasync  # type: ignore

        wrapped = smartasync(wrapped)

    return wrapped


def _wrap_layer(ref: MiddlewareRef, descriptor: RouteDescriptor, call_next: Callable) -> Callable:
    middleware = ref.middleware
    if safe_is_instance(middleware, _BASE_MIDDLEWARE_PATH):
        layer = middleware.wrap_handler(descriptor, call_next)
        return _guard(middleware, descriptor, layer, call_next)

    # A sync middleware over an async chain still yields an awaitable; the
    # layer must look like a coroutine function to the layers above it.
    if (
        inspect.iscoroutinefunction(middleware)
        or inspect.iscoroutinefunction(getattr(middleware, "__call__", None))
        or inspect.iscoroutinefunction(call_next)
    ):

        @wraps(call_next)
        async def async_function_layer(request):
            result = middleware(request, call_next)
            if inspect.isawaitable(result):
                result = await result
            return result

        return async_function_layer

    @wraps(call_next)
    def function_layer(request):
        return middleware(request, call_next)

    return function_layer


def _guard(
    middleware: BaseMiddleware,
    descriptor: RouteDescriptor,
    layer: Callable,
    next_handler: Callable,
) -> Callable:
    if layer is next_handler:
        return next_handler

    if inspect.iscoroutinefunction(layer):

        @wraps(next_handler)
        async def async_wrapper(*args, **kwargs):
            if not middleware.is_enabled(descriptor.label):
                return await next_handler(*args, **kwargs)
            return await layer(*args, **kwargs)

        return async_wrapper

    @wraps(next_handler)
    def wrapper(*args, **kwargs):
        if not middleware.is_enabled(descriptor.label):
            return next_handler(*args, **kwargs)
        return layer(*args, **kwargs)

    return wrapper
