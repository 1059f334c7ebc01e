import html
import logging
import os
import re
import socketserver
import types
import wsgiref.simple_server

from werkzeug import exceptions as wz_exceptions
from werkzeug.routing import Map, Rule

from .core import Request, Response, StringResponse
from .errors import StatusError, status_phrase
from .handler import Params, RequestHandler, internal_error_response, status_error_response
from .static import StaticFiles

import typing as t

log = logging.getLogger(__name__)
access_log = logging.getLogger("tinysite.access")

_Shim = t.Callable[[Request, Params], Response]
_FILEPATH_RE = re.compile(r"<path:(\w+)>$")
_NO_PARAMS: Params = types.MappingProxyType({})


def wrap_handler(handler: RequestHandler) -> _Shim:
    """Glue between a werkzeug match and a RequestHandler."""
    def shim(request: Request, params: dict[str, t.Any]) -> Response:
        return handler.handle_request(request, types.MappingProxyType(params))
    return shim


class Router:
    """Method-scoped routes over a werkzeug URL map, served as a WSGI app.

    Path patterns use werkzeug rule syntax ("/items/<id>",
    "/static/<path:filepath>"). Matching, 404s, 405s and trailing-slash
    redirects all come from werkzeug; conflicting rules are not checked here.
    """

    def __init__(self, *, strict_slashes: bool = True):
        self.url_map = Map(strict_slashes=strict_slashes)
        self.errorhandlers: dict[int, RequestHandler] = {}

    # Setup ---------------------------------------------------------------

    def get(self, path: str, handler: RequestHandler):
        self.handle('GET', path, handler)

    def post(self, path: str, handler: RequestHandler):
        self.handle('POST', path, handler)

    def put(self, path: str, handler: RequestHandler):
        self.handle('PUT', path, handler)

    def delete(self, path: str, handler: RequestHandler):
        self.handle('DELETE', path, handler)

    def handle(self, method: str, path: str, handler: RequestHandler):
        self.url_map.add(Rule(path, methods=[method.upper()],
                              endpoint=wrap_handler(handler)))  # type: ignore[arg-type]

    def serve_files(self, path: str, root: str | os.PathLike):
        """Serve files from root; path must end in a "<path:name>" placeholder.

        "/static/<path:filepath>" with root "static/public" maps
        /static/app.js to static/public/app.js.
        """
        if not (m := _FILEPATH_RE.search(path)):
            raise ValueError(f'path must end with "<path:name>" in path "{path}"')
        self.get(path, StaticFiles(root, m.group(1)))

    def set_errorhandler(self, code: int, handler: RequestHandler):
        self.errorhandlers[code] = handler

    # Request Handling ----------------------------------------------------

    def handle_request(self, request: Request) -> Response:
        try:
            shim, params = self.match(request)
            return shim(request, params)
        except StatusError as http_error:
            return self.handle_error(request, http_error)

    def match(self, request: Request) -> tuple[_Shim, dict[str, t.Any]]:
        adapter = self.url_map.bind_to_environ(request.environ)
        try:
            return t.cast(tuple[_Shim, dict[str, t.Any]], adapter.match())
        except wz_exceptions.HTTPException as ex:
            raise StatusError.from_http_exception(ex) from None

    def handle_error(self, request: Request, http_error: StatusError) -> Response:
        log.debug("HTTP %d for %s %s", http_error.code, request.method, request.path)
        request = request.with_error(http_error)
        if error_handler := self.errorhandlers.get(http_error.code):
            return error_handler.handle_request(request, _NO_PARAMS)
        return self.default_error_handler(request)

    def default_error_handler(self, request: Request) -> Response:
        err = request.http_errors[0]
        resp = StringResponse(http_error=err)
        resp.write(f"<h2>HTTP {resp.code} - {status_phrase(resp.code)}</h2>\n")
        if err.message:
            resp.write(f"<h3>{html.escape(err.message)}</h3>\n")
        if err.desc:
            resp.write(f"<div>{html.escape(err.desc)}</div>\n")
        return resp

    def fallback_error_handler(self, request: Request, http_error: StatusError) -> Response:
        if http_error.has_cause():
            log.error("Unhandled error serving %s %s", request.method, request.path,
                      exc_info=http_error.__cause__)
            return internal_error_response()
        return status_error_response(http_error)

    # Server Running ----------------------------------------------------

    def make_server(self, port=8000, host='', threaded=True):
        svr = wsgiref.simple_server.WSGIServer
        if threaded:  # Add threading mix-in
            svr = type('ThreadedServer', (socketserver.ThreadingMixIn, svr),
                       {'daemon_threads': True})
        return wsgiref.simple_server.make_server(
            host, port, self, server_class=svr, handler_class=_LoggingRequestHandler)

    def serve_forever(self, port=8000, host='', threaded=True):
        server = self.make_server(port, host, threaded)
        log.info("Serving on %s:%s -- ctrl+c to quit.", host, server.server_port)
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
        finally:
            server.server_close()

    def __call__(self, environ, start_response):
        """WSGI entrypoint."""
        request = Request.from_wsgi(environ)
        response = self._wsgi_get_response(request)
        start_response(response.status_line(), response.headers.items())
        return response._wsgi_response()

    def _wsgi_get_response(self, request: Request) -> Response:
        """Handle and finalize the request with 100% error handling."""
        try:
            with StatusError.wrap_exceptions():
                response = self.handle_request(request)
                response._wsgi_finalize(request)
                return response
        except StatusError as ex:
            response = self.fallback_error_handler(request, ex)
            response._wsgi_finalize(request)
            return response


class _LoggingRequestHandler(wsgiref.simple_server.WSGIRequestHandler):
    """Send the access log through logging instead of stderr."""

    def log_message(self, format, *args):  # pylint: disable=redefined-builtin
        access_log.info("%s - %s", self.address_string(), format % args)
