"""Middleware package initialiser (source of truth).

Rebuild rules:
- Keep this file lightweight; do not import concrete middleware here so
  imports of ``fluentroute.middleware`` remain side-effect free.
- Concrete middleware modules (``logging``) self-register when imported
  elsewhere (see ``fluentroute.__init__`` for eager imports).
"""

from ._base_middleware import BaseMiddleware

__all__ = ["BaseMiddleware"]
