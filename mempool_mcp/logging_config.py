"""Diagnostic logging setup. Output always goes to stderr, never to stdout."""

from __future__ import annotations

import json
import logging
import sys
from typing import IO, Optional

PLAIN_FORMAT = "[%(levelname)s] %(message)s"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "message": record.getMessage(),
            "name": record.name,
        }
        for key in ("tool", "request_id", "error"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(
    level: str = "INFO",
    fmt: str = "plain",
    stream: Optional[IO[str]] = None,
) -> logging.Handler:
    """Install a single stderr handler on the root logger and return it."""
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    if fmt.lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )
    # httpx logs every request at INFO; keep that out of the diagnostic stream.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return handler
