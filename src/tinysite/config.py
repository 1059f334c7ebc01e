"""Process configuration shared by every request handler."""
import os
import typing as t
from dataclasses import dataclass, field

import jinja2

DEFAULT_PORT = 8000
DEFAULT_TEMPLATE_DIR = "templates"
DEFAULT_STATIC_DIR = os.path.join("static", "public")


def make_templates(template_dir: str | os.PathLike) -> jinja2.Environment:
    """Build the Jinja2 environment pages render through.

    Undefined variables raise instead of rendering as empty strings, so a
    broken template surfaces as a server error rather than a blank page.
    """
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(os.fspath(template_dir)),
        autoescape=jinja2.select_autoescape(),
        undefined=jinja2.StrictUndefined,
    )


@dataclass(frozen=True)
class Env:
    """Read-only state created once at startup and handed to every handler."""
    host: str = ""
    port: int = DEFAULT_PORT
    template_dir: str = DEFAULT_TEMPLATE_DIR
    static_dir: str = DEFAULT_STATIC_DIR
    templates: jinja2.Environment = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not 0 <= self.port <= 65535:
            raise ValueError(f"port out of range: {self.port}")
        object.__setattr__(self, 'templates', make_templates(self.template_dir))

    @classmethod
    def from_environ(cls, environ: t.Mapping[str, str] | None = None, **overrides) -> "Env":
        """Read PORT, HOST, TEMPLATE_DIR and STATIC_DIR; overrides win over the environment."""
        environ = os.environ if environ is None else environ
        values: dict[str, t.Any] = {
            'host': environ.get('HOST', ''),
            'port': _parse_port(environ.get('PORT')),
            'template_dir': environ.get('TEMPLATE_DIR') or DEFAULT_TEMPLATE_DIR,
            'static_dir': environ.get('STATIC_DIR') or DEFAULT_STATIC_DIR,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def _parse_port(raw: str | None) -> int:
    if not raw:
        return DEFAULT_PORT
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer, got {raw!r}") from None
