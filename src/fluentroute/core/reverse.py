"""Reverse routing: resolve route names back to composed paths.

Plain lookups return the stored path template. Parameterized lookups fill
placeholders written as ``{name}`` or ``{name:converter}``::

    router.resolve_with("article", {"slug": "hello world", "id": 7})
    router.resolve_with("article", slug="hello world", id=7)

Converters: ``str`` (default), ``int``, ``float``, ``uuid`` and ``path``.
Values are coerced with a pydantic ``TypeAdapter`` for the converter type and
percent-encoded; only ``path`` values keep their ``/``. Every placeholder must
receive a value and every value must match a placeholder.
"""

from __future__ import annotations

import re
import uuid
from functools import lru_cache
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple
from urllib.parse import quote

from pydantic import ConfigDict, TypeAdapter, ValidationError

from fluentroute.errors import RouteNotFound, RouteParameterError

__all__ = ["ReverseRouter", "PLACEHOLDER", "CONVERTERS", "placeholders", "fill_template"]

PLACEHOLDER = re.compile(r"\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::(?P<converter>[A-Za-z_]+))?\}")

CONVERTERS: Dict[str, type] = {
    "str": str,
    "int": int,
    "float": float,
    "uuid": uuid.UUID,
    "path": str,
}

_ADAPTER_CONFIG = ConfigDict(coerce_numbers_to_str=True)


@lru_cache(maxsize=None)
def _adapter(converter: str) -> TypeAdapter:
    return TypeAdapter(CONVERTERS[converter], config=_ADAPTER_CONFIG)


def placeholders(template: str) -> List[Tuple[str, str]]:
    """Return ``(name, converter)`` for every placeholder in ``template``."""
    return [
        (match.group("name"), match.group("converter") or "str")
        for match in PLACEHOLDER.finditer(template)
    ]


def fill_template(template: str, params: Mapping[str, Any]) -> str:
    """Substitute ``params`` into ``template``.

    Raises:
        RouteParameterError: missing/unexpected parameters, unknown converters,
            values that fail conversion, empty non-path values.
    """
    declared = placeholders(template)
    declared_names = {name for name, _ in declared}
    missing = [name for name, _ in declared if name not in params]
    if missing:
        raise RouteParameterError(
            f"Missing parameter(s) for '{template}': {', '.join(sorted(set(missing)))}"
        )
    unexpected = sorted(set(params) - declared_names)
    if unexpected:
        raise RouteParameterError(
            f"Unexpected parameter(s) for '{template}': {', '.join(unexpected)}"
        )

    def substitute(match: re.Match) -> str:
        name = match.group("name")
        converter = match.group("converter") or "str"
        if converter not in CONVERTERS:
            raise RouteParameterError(
                f"Unknown converter '{converter}' for parameter '{name}' in '{template}'"
            )
        try:
            value = _adapter(converter).validate_python(params[name])
        except ValidationError as exc:
            raise RouteParameterError(
                f"Invalid value for parameter '{name}' ({converter}): {params[name]!r}"
            ) from exc
        text = str(value)
        if converter == "path":
            return quote(text.strip("/"), safe="/")
        if not text:
            raise RouteParameterError(f"Parameter '{name}' cannot be empty")
        return quote(text, safe="")

    return PLACEHOLDER.sub(substitute, template)


class ReverseRouter:
    """Stores composed route paths by name."""

    __slots__ = ("_routes",)

    def __init__(self, routes: Optional[Mapping[str, str]] = None) -> None:
        self._routes: Dict[str, str] = dict(routes or {})

    def insert(self, name: str, path: str) -> None:
        """Insert a named route (a later insert for the same name wins)."""
        self._routes[name] = path

    def resolve(self, name: str) -> str:
        """Return the composed path of route ``name``."""
        try:
            return self._routes[name]
        except KeyError:
            raise RouteNotFound(f"No route named '{name}'") from None

    def resolve_with(
        self, name: str, params: Optional[Mapping[str, Any]] = None, /, **kwargs: Any
    ) -> str:
        """Resolve route ``name`` and fill its placeholders."""
        merged: Dict[str, Any] = dict(params or {})
        merged.update(kwargs)
        return fill_template(self.resolve(name), merged)

    def names(self) -> Tuple[str, ...]:
        return tuple(self._routes)

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(self._routes.items())

    def __contains__(self, name: object) -> bool:
        return name in self._routes

    def __len__(self) -> int:
        return len(self._routes)

    def __repr__(self) -> str:
        return f"<ReverseRouter routes={len(self._routes)}>"
