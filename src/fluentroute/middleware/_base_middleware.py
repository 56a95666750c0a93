"""Hook interface and configuration helpers for route middleware.

Subclasses declaring their own ``configure`` get it wrapped at class creation
(``__init_subclass__``): the wrapper parses ``flags``, routes ``_target`` to
the right bucket, validates the keyword arguments against the declared
signature with ``pydantic.validate_call`` (strict, so only real booleans pass
for ``bool`` options) and stores them. The subclass body itself stays empty.
Unknown keys and wrongly typed values raise ``pydantic.ValidationError``.

Middleware without its own ``configure`` accepts any option unchecked.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Dict, Optional

from pydantic import ConfigDict, validate_call

from fluentroute.core.base import RouteDescriptor

__all__ = ["BaseMiddleware"]

_BASE_TARGET = "--base--"


def _wrap_configure(original_configure: Callable) -> Callable:
    """Wrap a middleware's configure() to handle flags, _target, validation and storage."""
    validated = validate_call(original_configure, config=ConfigDict(strict=True))

    @wraps(original_configure)
    def wrapper(
        self: "BaseMiddleware",
        _target: Optional[str] = None,
        *,
        flags: Optional[str] = None,
        **config: Any,
    ) -> None:
        if flags:
            config.update(self._parse_flags(flags))
        validated(self, **config)
        self._write_config(_target, config)

    return wrapper


class BaseMiddleware:
    """Hook interface + configuration helpers for route middleware.

    Configuration lives in two layers: a global bucket and one bucket per
    route label (``descriptor.label``). ``configuration(label)`` merges them,
    per-route values winning.
    """

    middleware_code: str = ""
    middleware_description: str = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "configure" in cls.__dict__:
            cls.configure = _wrap_configure(cls.__dict__["configure"])

    def __init__(
        self,
        name: Optional[str] = None,
        *,
        flags: Optional[str] = None,
        route_config: Optional[Dict[str, Dict[str, Any]]] = None,
        **config: Any,
    ):
        self.name = name or self.middleware_code or self.__class__.__name__.lower()
        self.description = self.middleware_description
        self._global_config: Dict[str, Any] = {"enabled": True}
        self._route_configs: Dict[str, Dict[str, Any]] = {}
        self.configure(flags=flags, **config)
        for label, settings in (route_config or {}).items():
            self.configure(_target=label, **settings)

    def configure(
        self, _target: Optional[str] = None, *, flags: Optional[str] = None, **config: Any
    ) -> None:
        """Update global config, or the bucket of route ``_target`` when given."""
        if flags:
            config.update(self._parse_flags(flags))
        self._write_config(_target, config)

    def _write_config(self, target: Optional[str], config: Dict[str, Any]) -> None:
        if target is None or target == _BASE_TARGET:
            self._global_config.update(config)
            return
        self._route_configs.setdefault(target, {}).update(config)

    def configuration(self, label: Optional[str] = None) -> Dict[str, Any]:
        merged = dict(self._global_config)
        if label and label in self._route_configs:
            merged.update(self._route_configs[label])
        return merged

    def is_enabled(self, label: Optional[str] = None) -> bool:
        return bool(self.configuration(label).get("enabled", True))

    def _parse_flags(self, flags: str) -> Dict[str, bool]:
        mapping: Dict[str, bool] = {}
        for chunk in flags.split(","):
            chunk = chunk.strip()
            if not chunk:
                continue
            if ":" in chunk:
                name, value = chunk.split(":", 1)
                mapping[name.strip()] = value.strip().lower() != "off"
            else:
                mapping[chunk] = True
        return mapping

    def wrap_handler(self, descriptor: RouteDescriptor, call_next: Callable) -> Callable:
        """Wrap handler invocation; default passthrough."""
        return call_next

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"
