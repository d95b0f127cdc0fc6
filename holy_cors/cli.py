import argparse
import logging
from typing import List, Optional

import uvicorn

from holy_cors import __version__
from holy_cors import vars as env
from holy_cors.config import Configuration

logger = logging.getLogger("uvicorn.error")

BANNER = r"""
    _   _       _          ____  ___  ____  ____  _
   | | | | ___ | |_   _   / ___|/ _ \|  _ \/ ___|| |
   | |_| |/ _ \| | | | | | |   | | | | |_) \___ \| |
   |  _  | (_) | | |_| | | |___| |_| |  _ < ___) |_|
   |_| |_|\___/|_|\__, |  \____|\___/|_| \_\____/(_)
                  |___/
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="holy-cors", description="Holy CORS! A fast CORS proxy for developers"
    )
    parser.add_argument(
        "-p", "--port", type=int, default=env.HOLY_CORS_PORT, help="Port to listen on"
    )
    parser.add_argument(
        "--allow-origin",
        dest="allow_origins",
        action="append",
        default=[],
        metavar="ORIGIN",
        help="Additional origin to allow (repeatable, comma separated values accepted)",
    )
    parser.add_argument(
        "--allow-all-origins",
        dest="allow_all",
        action="store_true",
        default=env.HOLY_CORS_ALLOW_ALL,
        help="Allow all origins (development mode - be careful!)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=env.HOLY_CORS_VERBOSE,
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--bind", default=env.HOLY_CORS_BIND, help="Bind address (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=env.PROXY_TIMEOUT,
        help="Timeout for each outbound request, in seconds",
    )
    parser.add_argument("--version", action="version", version=__version__)
    return parser


def parse_config(argv: Optional[List[str]] = None) -> Configuration:
    args = build_parser().parse_args(argv)

    # Command line origins replace the environment list, as with any other option
    raw_origins = args.allow_origins or env.HOLY_CORS_ORIGINS
    origins = [o.strip() for value in raw_origins for o in value.split(",") if o.strip()]

    return Configuration(
        bind=args.bind,
        port=args.port,
        allow_origins=tuple(origins),
        allow_all=args.allow_all,
        verbose=args.verbose,
        timeout=args.timeout,
    )


def log_startup(config: Configuration) -> None:
    logger.info("Starting Holy CORS proxy...")
    logger.info(f"Listening on http://{config.socket_addr}")

    if config.allow_all:
        logger.info("Mode: Allow ALL origins (development mode)")
    else:
        logger.info("Allowed origins:")
        for origin in sorted(config.allowed_origins()):
            logger.info(f"  - {origin}")

    logger.info(f"Usage: http://localhost:{config.port}/{{TARGET_URL}}")
    logger.info(
        f"Example: http://localhost:{config.port}/https://api.github.com/users/octocat"
    )


def main(argv: Optional[List[str]] = None) -> None:
    config = parse_config(argv)

    print(BANNER)
    print("  A fast CORS proxy for developers\n")

    from holy_cors.server import create_app

    app = create_app(config)
    log_level = "debug" if config.verbose else "info"

    server = uvicorn.Server(
        uvicorn.Config(app, host=config.bind, port=config.port, log_level=log_level)
    )
    # uvicorn sets up its loggers when the config is created
    log_startup(config)
    server.run()
