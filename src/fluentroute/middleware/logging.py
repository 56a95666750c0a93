"""Logging middleware (source of truth).

Responsibilities
----------------
- Wrap each handler call and emit configurable messages:
  * ``before`` (default True): ``"{descriptor.label} start"``
  * ``after`` (default True): ``"{descriptor.label} end (<ms> ms)"`` with
    elapsed time in milliseconds and ``{elapsed:.2f}`` formatting.
- Sinks:
  * when ``print`` is true → always ``print(message)``;
  * else when ``log`` is true → ``logger.info(message)`` if the logger reports
    handlers via ``hasHandlers()``, otherwise ``print(message)`` to avoid drops;
  * else → no output.
- ``enabled`` gates the middleware entirely (default True).
- Use a provided ``logging.Logger`` (default ``logging.getLogger("fluentroute")``).

Configuration
-------------
Accepted keys (global or per route label): ``enabled``, ``before``, ``after``,
``log``, ``print``; either as kwargs or as a ``flags`` string
(``"before:off,print"``). Values are checked against ``configure``: unknown keys
or non-boolean values raise ``pydantic.ValidationError``. Usage on a tree::

    root().with_("logging", lambda r: r.get(handler), after=False)

Coroutine handlers get an ``async`` wrapper so the timing covers the awaited
call. Exceptions propagate; the end message is skipped when one is raised.

Registration
------------
At module import the middleware registers itself globally as ``"logging"``.
"""

from __future__ import annotations

import inspect
import logging
import time
from typing import Callable, Optional

from fluentroute.core.base import RouteDescriptor
from fluentroute.core.pipeline import register_middleware
from fluentroute.middleware._base_middleware import BaseMiddleware

__all__ = ["LoggingMiddleware"]


class LoggingMiddleware(BaseMiddleware):
    """Log handler calls with timing."""

    middleware_code = "logging"
    middleware_description = "Logs handler calls with timing"

    def __init__(self, name: Optional[str] = None, *, logger: Optional[logging.Logger] = None, **cfg):
        self._logger = logger or logging.getLogger("fluentroute")
        super().__init__(name, **cfg)

    def configure(
        self,
        enabled: bool = True,
        before: bool = True,
        after: bool = True,
        log: bool = True,
        print: bool = False,  # noqa: A002 - option name mirrors the print sink
    ):
        """Validated and stored by the wrapper installed in ``__init_subclass__``."""

    def _emit(self, message: str, *, cfg: dict) -> None:
        if cfg["print"]:
            print(message)
        elif cfg["log"]:
            # An unconfigured logger would drop the record.
            if self._logger.hasHandlers():
                self._logger.info(message)
            else:
                print(message)

    def wrap_handler(self, descriptor: RouteDescriptor, call_next: Callable):
        """Wrap handler with start/end logging and timing."""
        label = descriptor.label

        if inspect.iscoroutinefunction(call_next):

            async def logged_async(*args, **kwargs):
                cfg = self._effective_config(label)
                if not cfg["enabled"]:
                    return await call_next(*args, **kwargs)
                if cfg["before"]:
                    self._emit(f"{label} start", cfg=cfg)
                t0 = time.perf_counter()
                result = await call_next(*args, **kwargs)
                elapsed = (time.perf_counter() - t0) * 1000
                if cfg["after"]:
                    self._emit(f"{label} end ({elapsed:.2f} ms)", cfg=cfg)
                return result

            return logged_async

        def logged(*args, **kwargs):
            cfg = self._effective_config(label)
            if not cfg["enabled"]:
                return call_next(*args, **kwargs)
            if cfg["before"]:
                self._emit(f"{label} start", cfg=cfg)
            t0 = time.perf_counter()
            result = call_next(*args, **kwargs)
            elapsed = (time.perf_counter() - t0) * 1000
            if cfg["after"]:
                self._emit(f"{label} end ({elapsed:.2f} ms)", cfg=cfg)
            return result

        return logged

    def _effective_config(self, label: str) -> dict:
        defaults = {"enabled": True, "before": True, "after": True, "log": True, "print": False}
        cfg = defaults | self.configuration(label)

        def to_bool(key: str) -> bool:
            val = cfg.get(key)
            return defaults[key] if val is None else bool(val)

        return {key: to_bool(key) for key in defaults}


register_middleware(LoggingMiddleware)
