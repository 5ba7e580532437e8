"""File serving middleware with directory-escape protection.

Matches the decoded resource against a leading-slash pattern and serves
the file it names under a root directory. Falls through to the next
middleware when the file does not exist.
"""

import logging
import mimetypes
import os
import re
from pathlib import Path
from urllib.parse import unquote

import anyio

from meddle.http.request import Request, State
from meddle.http.response import Response
from meddle.middleware.builtin import short_circuit
from meddle.middleware.protocol import Next

logger = logging.getLogger("meddle.static")

_RESOURCE_PATTERN = re.compile(r"^/+(.*)$", re.DOTALL)


def path_in_dir(path: str, directory: str) -> bool:
    """Whether normalized *path* is *directory* itself or lies beneath it.

    A textual check on normalized paths. The separator boundary keeps
    ``/srv/www-private`` from passing as a child of ``/srv/www``.
    """
    if path == directory:
        return True
    return path.startswith(directory.rstrip(os.sep) + os.sep)


class FileServer:
    """Serve regular files from *root* (default: the current directory).

    Security: the joined path is normalized and must stay under the
    normalized root, checked before any filesystem access. Symlinks are
    then resolved and checked against the real root. Either failure
    answers 400.

    Missing files and directories continue to the next middleware, so
    application handlers or ``NotFound`` decide what happens.

    Usage::

        Stack([URLDecoder(), FileServer("./public"), NotFound()])
    """

    __slots__ = ("_real_root", "_root")

    def __init__(self, root: str | Path | None = None) -> None:
        self._root = os.path.normpath(os.path.abspath(root if root is not None else os.getcwd()))
        self._real_root = os.path.realpath(self._root)

    @property
    def root(self) -> str:
        return self._root

    async def __call__(self, request: Request, response: Response, next: Next) -> Response:
        resource = request.state.get(State.RESOURCE)
        if resource is None:
            resource = unquote(request.path)

        match = _RESOURCE_PATTERN.match(resource)
        if match is None:
            return await next(request, response)

        candidate = os.path.normpath(os.path.join(self._root, match.group(1)))
        if not path_in_dir(candidate, self._root):
            logger.warning("Rejected path outside %s: %r", self._root, resource)
            return short_circuit(response, 400)

        path = anyio.Path(candidate)
        try:
            if not await path.is_file():
                return await next(request, response)
            real = str(await path.resolve())
            if not path_in_dir(real, self._real_root):
                logger.warning("Rejected symlink outside %s: %r", self._real_root, resource)
                return short_circuit(response, 400)
            data = await path.read_bytes()
        except OSError as exc:
            # Unreadable or unnameable paths are treated as missing
            logger.debug("Cannot serve %r: %s", resource, exc)
            return await next(request, response)

        response.write(data)
        if not any(name.lower() == "content-type" for name in response.headers):
            content_type, _ = mimetypes.guess_type(candidate)
            response.headers["Content-Type"] = content_type or "application/octet-stream"
        return response.finish()
