"""``glint`` serve command.

Builds a ``ServeConfig`` from parsed arguments, validates it, configures
logging, and runs the development server.  Fatal errors are reported
once, as ``Error: ...`` on stderr with exit status 1.
"""

import argparse
import logging
import sys

from glint.config import ServeConfig
from glint.errors import GlintError
from glint.inject import InjectAnchor
from glint.watch.filters import parse_exclusions


def build_config(args: argparse.Namespace) -> ServeConfig:
    """Translate CLI arguments into a ``ServeConfig``."""
    return ServeConfig(
        root=args.directory or args.dir_option or ".",
        host=args.host,
        port=args.port,
        debounce=args.debounce,
        exclude=parse_exclusions(args.exclude),
        open_browser=args.open,
        inject_anchor=InjectAnchor(args.inject_at),
        cache_bust=args.cache_bust,
        log_level=args.log_level,
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def serve_directory(args: argparse.Namespace) -> None:
    """Validate the configuration and serve until interrupted."""
    from glint.app import App

    config = build_config(args)
    configure_logging(config.log_level)
    try:
        config.validate()
        App(config).run()
    except GlintError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        pass
