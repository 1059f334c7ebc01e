import logging
from dataclasses import dataclass

from werkzeug import exceptions as wz_exceptions

from .config import Env
from .core import Request, Response, StringResponse
from .errors import StatusError, status_phrase

import typing as t

log = logging.getLogger(__name__)

Params: t.TypeAlias = t.Mapping[str, t.Any]

_ResponseT = t.TypeVar("_ResponseT", bound=Response, contravariant=True)


class HandleFn(t.Protocol[_ResponseT]):
    def __call__(self, env: Env, response: _ResponseT, request: Request,
                 params: Params, /) -> Response | None: ...


@t.runtime_checkable
class RequestHandler(t.Protocol):
    def handle_request(self, request: Request, params: Params) -> Response: ...


@dataclass(frozen=True)
class Handler:
    """Adapts a plain function into a RequestHandler.

    The function gets the shared Env, a response to write into, the request
    and the route parameters. It reports failure by raising: a StatusError
    becomes a response with that status and message, anything else becomes
    a 500 whose body does not mention the cause.
    """
    env: Env
    fn: HandleFn
    response_class: type[Response] = StringResponse

    def handle_request(self, request: Request, params: Params) -> Response:
        http_error = request.http_errors[0] if request.http_errors else None
        response = self.response_class(http_error=http_error)
        try:
            result = self.fn(self.env, response, request, params)
            if result is not None and not isinstance(result, Response):
                raise TypeError(f"handler returned {type(result).__name__}; "
                                "write to the response or return a Response")
        except wz_exceptions.HTTPException as ex:
            return status_error_response(StatusError.from_http_exception(ex))
        except StatusError as err:
            return status_error_response(err)
        except Exception:  # pylint: disable=broad-exception-caught
            log.exception("Unhandled error serving %s %s", request.method, request.path)
            return internal_error_response()
        return result or response


def status_error_response(err: StatusError) -> Response:
    """Write out the status and message the handler asked for."""
    log.warning("HTTP %d - %s", err.status, err)
    return StringResponse(str(err), content_type='text/plain', http_error=err,
                          h={'X-Content-Type-Options': 'nosniff'})


def internal_error_response() -> Response:
    return StringResponse(status_phrase(500), code=500, content_type='text/plain',
                          h={'X-Content-Type-Options': 'nosniff'})
