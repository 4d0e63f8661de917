"""Process entrypoint: ``python -m mempool_mcp [--stdio] [--port N] [--mempool-url URL]``."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Sequence

import uvicorn

from mempool_mcp.config import ConfigError, load_env_file, log_config_summary, parse_args, resolve_config
from mempool_mcp.logging_config import configure_logging
from mempool_mcp.mempool_api import MempoolApiClient
from mempool_mcp.server import create_app
from mempool_mcp.stdio import run_stdio

logger = logging.getLogger("mempool_mcp")


def main(argv: Sequence[str] | None = None) -> int:
    load_env_file()
    args = parse_args(argv)
    try:
        config = resolve_config(args)
    except ConfigError as exc:
        configure_logging()
        logger.error("%s", exc)
        return 2

    configure_logging(config.log_level, config.log_format)
    client = MempoolApiClient(config)

    if args.stdio:
        asyncio.run(run_stdio(client))
        return 0

    log_config_summary(config, logger)
    uvicorn.run(create_app(config, client=client), host=config.host, port=config.port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
