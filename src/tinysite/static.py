import os
from dataclasses import dataclass

from werkzeug.security import safe_join

from .core import FileResponse, Request, Response
from .errors import NotFound
from .handler import Params


@dataclass(frozen=True)
class StaticFiles:
    """Serve files below root, named by one route parameter."""
    root: str | os.PathLike
    param: str = "filepath"

    def handle_request(self, request: Request, params: Params) -> Response:
        filename = safe_join(os.fspath(self.root), params[self.param])
        if filename is None or not os.path.isfile(filename):
            raise NotFound()
        return FileResponse(filename)
