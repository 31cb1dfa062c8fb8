#!/usr/bin/env python3
"""
noticeboard -- username/password sessions and a shared bulletin board.

Usage:
  python main.py
  python main.py --host 0.0.0.0 --port 8080
  python main.py --reload

Environment variables (see core/config.py for the full list):
  SEED_USERNAME / SEED_PASSWORD   Principal created at startup.
  DEBUG                           Development mode (dev seed password allowed).
  LOG_LEVEL / LOG_DIR             Console level and optional rotating log files.
"""

import argparse

import uvicorn

from core.config import get_settings


def _build_parser(default_host: str, default_port: int) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="noticeboard",
        description="Run the noticeboard API server.",
    )
    parser.add_argument("--host", default=default_host, help=f"Bind address (default: {default_host})")
    parser.add_argument("--port", type=int, default=default_port, help=f"Bind port (default: {default_port})")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")
    return parser


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()
    args = _build_parser(settings.host, settings.port).parse_args(argv)
    uvicorn.run(
        "api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
