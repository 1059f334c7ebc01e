import contextlib
import http
from dataclasses import dataclass, field

from werkzeug import exceptions as wz_exceptions
from werkzeug import routing as wz_routing


def status_phrase(code: int) -> str:
    try:
        return http.HTTPStatus(code).phrase
    except ValueError:
        return "StatusPhraseUnknown"


@dataclass(kw_only=True, eq=False)
class StatusError(Exception):
    """An error carrying the HTTP status code the client should see.

    Raise it from a handler function to choose the response status; the
    message becomes the response body. Any other exception is reported to the
    client as a bare 500.
    """
    code: int = field(kw_only=False, default=500)
    message: str | None = field(kw_only=False, default=None)
    desc: str | None = None
    headers: dict[str, str] = field(default_factory=dict)  # type:ignore

    def __str__(self) -> str:
        return self.message or status_phrase(self.code)

    @property
    def status(self) -> int:
        return self.code

    def default_headers(self) -> dict[str, str]: return {}
    def all_headers(self): return self.default_headers() | self.headers
    def has_cause(self): return self.__cause__ is not None

    def causes(self):
        cause = self.__cause__
        seen = []  # circular reference prevention
        while cause:
            if cause in seen:
                break
            yield cause
            seen.append(cause)
            cause = cause.__cause__

    @classmethod
    @contextlib.contextmanager
    def wrap_exceptions(cls, *args, **kwargs):
        try:
            yield
        except StatusError as ex:
            raise ex
        except Exception as ex:
            raise cls(*args, **kwargs) from ex

    @classmethod
    def from_http_exception(cls, ex: wz_exceptions.HTTPException) -> "StatusError":
        """Translate a werkzeug HTTP exception (routing failure or abort())."""
        # werkzeug keeps its stock text on the class; abort(code, msg) sets it per instance
        message = ex.description if ex.description != type(ex).description else None
        match ex:
            case wz_routing.RequestRedirect():
                return Redirect(ex.code, location=ex.new_url)
            case wz_exceptions.MethodNotAllowed():
                return MethodNotAllowed(message=message,
                                        allow=tuple(ex.valid_methods or ()))
            case wz_exceptions.NotFound():
                return NotFound(message=message)
        return StatusError(ex.code or 500, message)


@dataclass(kw_only=True, eq=False)
class NotFound(StatusError):
    code: int = field(kw_only=False, default=404)


@dataclass(kw_only=True, eq=False)
class MethodNotAllowed(StatusError):
    code: int = field(kw_only=False, default=405)
    allow: tuple[str, ...] = field(default_factory=tuple)

    def default_headers(self):
        return {"Allow": ", ".join(self.allow)} if self.allow else {}


@dataclass(kw_only=True, eq=False)
class Redirect(StatusError):
    code: int = field(kw_only=False, default=308)
    location: str

    def default_headers(self):
        return {'Location': self.location}
