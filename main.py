"""
Ludo Online - server entry point
Serves the room WebSocket endpoint and the health check.
"""

from __future__ import annotations

import argparse
import sys

import uvicorn
from loguru import logger

from ludo_online.engine.config import server_config
from ludo_online.server import create_app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ludo Online game server")
    parser.add_argument("--host", type=str, default=server_config.HOST)
    parser.add_argument("--port", type=int, default=server_config.PORT)
    parser.add_argument("--log-level", type=str, default=server_config.LOG_LEVEL)
    return parser


def main() -> None:
    args = build_parser().parse_args()
    logger.remove()
    logger.add(sys.stderr, level=args.log_level.upper())
    logger.info(f"HTTP listening on http://{args.host}:{args.port}")
    uvicorn.run(create_app(), host=args.host, port=args.port, log_level="warning")


if __name__ == "__main__":
    main()
