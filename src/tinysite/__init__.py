"""tinysite serves a couple of template-rendered pages and static assets.

Routes are registered on a Router, which wraps a werkzeug URL map, against
Handlers that bundle the shared Env with a function of the form
``fn(env, response, request, params)``.
"""

from .app import create_app
from .config import Env
from .core import FileResponse, Request, Response, StringResponse
from .errors import MethodNotAllowed, NotFound, Redirect, StatusError
from .handler import Handler, Params, RequestHandler
from .router import Router
from .static import StaticFiles

__all__ = [
    "Env", "FileResponse", "Handler", "MethodNotAllowed", "NotFound", "Params",
    "Redirect", "Request", "RequestHandler", "Response", "Router",
    "StaticFiles", "StatusError", "StringResponse", "create_app",
]
