"""Path accumulation (source of truth).

``join_path(current, segment)``

- Runs of slashes inside the supplied segment collapse to one.
- ``current`` empty: return the segment (leading/trailing slashes supplied by
  the caller survive).
- ``segment`` empty: return ``current`` verbatim.
- Otherwise: ``current.rstrip("/") + "/" + segment.lstrip("/")``. Exactly one
  separator sits at every join point, whatever either side supplied.

Consequences: a leading ``/`` survives only when it was on the first segment,
a trailing ``/`` survives only when it was on the last one. The function is
pure.

``RoutePath`` wraps the string so a node's path cannot be mutated in place;
``join`` returns a new value.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = ["RoutePath", "join_path"]

_SLASH_RUN = re.compile(r"/{2,}")


def join_path(current: str, segment: str) -> str:
    """Join ``segment`` onto ``current`` with a single ``/`` separator."""
    segment = _SLASH_RUN.sub("/", segment)
    if not current:
        return segment
    if not segment:
        return current
    return f"{current.rstrip('/')}/{segment.lstrip('/')}"


@dataclass(frozen=True)
class RoutePath:
    """Immutable, slash-normalized path built by successive joins."""

    value: str = ""

    def join(self, segment: str) -> "RoutePath":
        return RoutePath(join_path(self.value, segment))

    def __bool__(self) -> bool:
        return bool(self.value)

    def __str__(self) -> str:
        return self.value
