#!/usr/bin/env python3
"""Run the shift clock API under Uvicorn."""

import argparse
import logging
import os
import sys

import uvicorn

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from core import config  # noqa: E402

logger = logging.getLogger("shift_clock.run")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Start the shift clock API server.")
    parser.add_argument("--host", default=os.getenv("APP_HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.getenv("APP_PORT", "8000")))
    parser.add_argument(
        "--no-reload",
        action="store_true",
        default=os.getenv("APP_RELOAD", "True").lower() not in ("true", "1", "t"),
        help="Disable auto-reload (on by default for local development)",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=config.LOG_LEVEL)

    logger.info(f"Starting shift clock API on {args.host}:{args.port} (timezone {config.APP_TIMEZONE})")

    uvicorn.run(
        "main:app",
        host=args.host,
        port=args.port,
        reload=not args.no_reload,
        log_level=config.LOG_LEVEL.lower(),
        app_dir=PROJECT_ROOT,
        reload_dirs=[PROJECT_ROOT],
    )


if __name__ == "__main__":
    main()
