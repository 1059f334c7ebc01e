import copy
import mimetypes
import os
import wsgiref.headers
import wsgiref.types
from dataclasses import InitVar, dataclass, field

from .errors import StatusError, status_phrase

import typing as t
Headers = wsgiref.headers.Headers


@dataclass
class Request:
    environ: wsgiref.types.WSGIEnvironment
    path: str
    method: str
    headers: Headers
    http_errors: tuple[StatusError, ...] = field(default_factory=tuple)

    @classmethod
    def from_wsgi(cls, environ: wsgiref.types.WSGIEnvironment):
        hlist = [(k[5:].replace("_", "-").title(), v)
                 for k, v in environ.items() if k.startswith("HTTP_")]
        return cls(environ, environ.get('PATH_INFO') or '/',
                   environ['REQUEST_METHOD'], Headers(hlist))

    def with_error(self, http_error: StatusError) -> t.Self:
        request = copy.copy(self)
        request.http_errors = (http_error, *self.http_errors)
        return request


@dataclass(kw_only=True)
class Response:
    """Status, headers and content type; subclasses produce the body."""
    code: int = 200
    content_type: str | None = None
    charset: str | None = None
    h: InitVar[dict[str, str] | None] = None
    headers: Headers = field(init=False, default=None)  # type:ignore
    http_error: StatusError | None = None

    def __post_init__(self, h: dict[str, str] | None):
        self.headers = Headers(list((h or {}).items()))
        self._body: t.Iterable[bytes] = ()
        if self.http_error:
            self.code = self.http_error.code

    def finalize(self, request: Request) -> t.Iterable[bytes] | bytes | None:
        """Produce the body once the handler is done; None keeps it empty."""
        del request  # unused param
        return None

    def status_line(self) -> str:
        return f"{self.code} {status_phrase(self.code)}"

    def _wsgi_finalize(self, request: Request):
        if (final := self.finalize(request)) is not None:  # pylint: disable=assignment-from-none
            self._body = (final,) if isinstance(final, bytes) else final
        if self.content_type:
            cs = f"; charset={self.charset}" if self.charset else ""
            self.headers.setdefault('Content-Type', f"{self.content_type}{cs}")
        if self.http_error:
            for k, v in self.http_error.all_headers().items():
                self.headers.setdefault(k, v)

    def _wsgi_response(self) -> t.Iterable[bytes]:
        return self._body


@dataclass(kw_only=True)
class StringResponse(Response):
    """Buffers text written by a handler and encodes it on finalize."""
    content: InitVar[str | None] = field(default=None, kw_only=False)
    content_type: str = 'text/html'
    charset: str = 'utf-8'

    def __post_init__(self, h: dict[str, str] | None, content: str | None):
        super().__post_init__(h)
        self._parts: list[str] = []
        if content is not None:
            self.write(content)

    def write(self, content: str):
        if not isinstance(content, str):
            raise TypeError(f"{type(self).__name__}.write() takes str, "
                            f"not {type(content).__name__}")
        self._parts.append(content)

    def text(self) -> str:
        return ''.join(self._parts)

    def finalize(self, request: Request) -> bytes:
        out = self.text().encode(self.charset)
        self.headers.setdefault('Content-Length', str(len(out)))
        return out


@dataclass(kw_only=True)
class FileResponse(Response):
    """A FileResponse streams a file from the filesystem."""
    path: str | os.PathLike = field(kw_only=False)
    chunk_size: int = 32768

    def __post_init__(self, h: dict[str, str] | None):
        super().__post_init__(h)
        if not self.content_type:
            self.content_type = (mimetypes.guess_type(os.fspath(self.path))[0]
                                 or 'application/octet-stream')
        self.headers.setdefault('Content-Length', str(os.path.getsize(self.path)))

    def finalize(self, request: Request) -> t.Iterable[bytes]:
        fp = open(self.path, 'rb')
        if wrapper := request.environ.get('wsgi.file_wrapper'):
            return wrapper(fp, self.chunk_size)
        return self._read_chunks(fp)

    def _read_chunks(self, fp: t.BinaryIO) -> t.Iterator[bytes]:
        with fp:
            while chunk := fp.read(self.chunk_size):
                yield chunk
