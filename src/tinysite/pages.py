"""Page handlers; each renders one template that extends base.html."""
from .config import Env
from .core import Request, StringResponse
from .handler import Params


def render(env: Env, response: StringResponse, name: str, /, **context) -> None:
    """Render a template from env.templates into the response.

    Template errors propagate, which the Handler turns into a 500.
    """
    response.write(env.templates.get_template(name).render(**context))


def index(env: Env, response: StringResponse, request: Request, params: Params):
    render(env, response, "index.html")


def blog(env: Env, response: StringResponse, request: Request, params: Params):
    render(env, response, "blog.html")
