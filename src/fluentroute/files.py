"""Endpoints serving content from the file system.

Paths are resolved and canonicalized when the endpoint is created, so a
missing file or directory fails while the route tree is described. At call
time ``DirEndpoint`` resolves the requested sub-path against its canonical
base and refuses anything escaping it (symlinks included).

Endpoints return the ``pathlib.Path`` to serve; turning it into a response is
the server adapter's job.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Union

from fluentroute.errors import PathEscapeError

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from fluentroute.core.node import RouteNode

__all__ = ["FileEndpoint", "DirEndpoint", "serve_dir", "serve_file"]

PathLike = Union[str, Path]


class FileEndpoint:
    """Serve a single file."""

    __slots__ = ("_file",)

    def __init__(self, file: PathLike) -> None:
        resolved = Path(file).resolve(strict=True)
        if not resolved.is_file():
            raise IsADirectoryError(f"Not a file: {resolved}")
        self._file = resolved

    @property
    def file(self) -> Path:
        return self._file

    def __call__(self, request: Any = None) -> Path:
        return self._file

    def __repr__(self) -> str:
        return f"<FileEndpoint {str(self._file)!r}>"


class DirEndpoint:
    """Serve files below a directory.

    Calling the endpoint with a sub-path string (or a request exposing
    ``path_params``) returns the resolved file. Directories resolve to their
    ``index`` file.

    Raises:
        PathEscapeError: the sub-path resolves outside the directory.
        FileNotFoundError: nothing servable exists at the sub-path, or the
            sub-path is not a valid file name (embedded NUL).
    """

    __slots__ = ("_directory", "_index", "_param")

    def __init__(self, directory: PathLike, *, index: str = "index.html", param: str = "path") -> None:
        resolved = Path(directory).resolve(strict=True)
        if not resolved.is_dir():
            raise NotADirectoryError(f"Not a directory: {resolved}")
        self._directory = resolved
        self._index = index
        self._param = param

    @property
    def directory(self) -> Path:
        return self._directory

    def resolve(self, subpath: str = "") -> Path:
        relative = subpath.lstrip("/")
        if "\x00" in relative:
            raise FileNotFoundError(f"No file at {subpath!r} in '{self._directory}'")
        candidate = (self._directory / relative).resolve() if relative else self._directory
        if not candidate.is_relative_to(self._directory):
            raise PathEscapeError(f"Path '{subpath}' escapes '{self._directory}'")
        if candidate.is_dir():
            candidate = candidate / self._index
        if not candidate.is_file():
            raise FileNotFoundError(f"No file at '{subpath}' in '{self._directory}'")
        return candidate

    def __call__(self, request: Any = "") -> Path:
        if isinstance(request, str):
            return self.resolve(request)
        params = getattr(request, "path_params", None) or {}
        return self.resolve(str(params.get(self._param, "")))

    def __repr__(self) -> str:
        return f"<DirEndpoint {str(self._directory)!r}>"


def serve_dir(
    node: "RouteNode", directory: PathLike, *, param: str = "path", index: str = "index.html"
) -> "RouteNode":
    """Register ``GET`` for everything below ``directory`` on ``node``.

    The endpoint sits on a child segment ``{<param>:path}`` so the server
    captures the requested sub-path under ``param``.
    """
    endpoint = DirEndpoint(directory, index=index, param=param)
    return node.at(f"{{{param}:path}}", lambda route: route.get(endpoint))


def serve_file(node: "RouteNode", file: PathLike) -> "RouteNode":
    """Register ``GET`` for a single file on ``node``."""
    return node.get(FileEndpoint(file))
