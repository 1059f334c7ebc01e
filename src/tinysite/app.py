from . import pages
from .config import Env
from .handler import Handler
from .router import Router

STATIC_PATH = "/static/<path:filepath>"


def create_app(env: Env) -> Router:
    """Wire the site's routes onto a new Router."""
    router = Router()
    router.serve_files(STATIC_PATH, env.static_dir)
    router.get("/", Handler(env, pages.index))
    router.get("/blog", Handler(env, pages.blog))
    return router
