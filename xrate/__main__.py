"""Process entry point: ``python -m xrate --bind :8080 --db-path /tmp/xrate.db``."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence, Tuple

import uvicorn

from .core.config import get_settings
from .main import create_app


def parse_bind(bind: str) -> Tuple[str, int]:
    """Split ``host:port``; an empty host listens on all interfaces."""
    host, sep, port = bind.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid bind address {bind!r}, expected [host]:port")
    return (host or "0.0.0.0"), int(port)


def main(argv: Sequence[str] | None = None) -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="xrate", description="Exchange rate conversion service")
    parser.add_argument("--bind", default=settings.bind, help="HTTP bind address")
    parser.add_argument("--db-path", type=Path, default=settings.db_path, help="Rate cache database path")
    args = parser.parse_args(argv)

    try:
        host, port = parse_bind(args.bind)
    except ValueError as e:
        parser.error(str(e))

    settings = settings.model_copy(update={"db_path": args.db_path, "bind": args.bind})
    app = create_app(settings_override=settings)
    logging.getLogger("xrate").info("Starting HTTP listener on %s", args.bind)
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
