"""Run the site: python -m tinysite [--host HOST] [--port PORT]."""
import argparse
import logging
import os
import sys

from .app import create_app
from .config import Env
from .log import configure_logging

log = logging.getLogger("tinysite")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="tinysite", description=__doc__)
    parser.add_argument("--host", help="interface to bind (default: $HOST or all)")
    parser.add_argument("--port", type=int, help="port to bind (default: $PORT or 8000)")
    parser.add_argument("--templates", dest="template_dir", help="template directory")
    parser.add_argument("--static", dest="static_dir", help="static asset directory")
    parser.add_argument("--log-level", default=os.environ.get("LOG_LEVEL", "INFO"))
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Program entry point."""
    args = parse_args(argv)
    configure_logging(args.log_level)
    try:
        env = Env.from_environ(host=args.host, port=args.port,
                               template_dir=args.template_dir, static_dir=args.static_dir)
    except ValueError as ex:
        log.critical("Bad configuration: %s", ex)
        return 2
    log.info("Static files from %s, templates from %s", env.static_dir, env.template_dir)

    try:
        create_app(env).serve_forever(env.port, env.host)
    except OSError as ex:
        log.critical("Cannot listen on %s:%s: %s", env.host, env.port, ex)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
