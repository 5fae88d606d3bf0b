#!/usr/bin/env python3
"""CLI entrypoint for running the FastAPI app with Uvicorn."""

import argparse
import logging
from pathlib import Path

import uvicorn

from .app import create_app
from .config import get_settings


def main() -> None:
    settings = get_settings()
    default_host = settings.server_host
    default_port = settings.server_port

    parser = argparse.ArgumentParser(description="Chatbot logs API server")
    parser.add_argument("--host", default=default_host, help=f"Host to bind (default: {default_host})")
    parser.add_argument("--port", type=int, default=default_port, help=f"Port to bind (default: {default_port})")
    parser.add_argument("--data-dir", default=None, help=f"Storage directory (default: {settings.data_dir})")
    args = parser.parse_args()

    overrides = {"server_host": args.host, "server_port": args.port}
    if args.data_dir:
        overrides["data_dir"] = Path(args.data_dir).expanduser()
    settings = settings.model_copy(update=overrides)

    # Reduce uvicorn access log noise - only show warnings and errors
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)

    uvicorn.run(
        create_app(settings),
        host=args.host,
        port=args.port,
        log_level="info",
        access_log=False,
    )


if __name__ == "__main__":  # pragma: no cover - CLI invocation guard
    main()
