"""
Configuration helpers for the mempool mining MCP server.

Two settings matter to the adapter: the listening port and the upstream
mempool API base URL. Each is resolved with the precedence command line >
environment > built-in default, and the source of each value is recorded for
diagnostics. A handful of ambient settings (host, timeout, logging) are read
from the environment only.
"""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass
from typing import Literal, Mapping, Optional, Sequence

from dotenv import load_dotenv

APP_VERSION = "0.1.0"

# Default connection settings
DEFAULT_PORT = 3333
DEFAULT_BASE_URL = "https://mempool.space/api"
DEFAULT_HOST = "127.0.0.1"

PORT_ENV_VAR = "PORT"
BASE_URL_ENV_VAR = "MEMPOOL_URL"
HOST_ENV_VAR = "MEMPOOL_MCP_HOST"
TIMEOUT_ENV_VAR = "MEMPOOL_HTTP_TIMEOUT"
LOG_LEVEL_ENV_VAR = "MEMPOOL_MCP_LOG_LEVEL"
LOG_FORMAT_ENV_VAR = "MEMPOOL_MCP_LOG_FORMAT"

ConfigSource = Literal["cli", "env", "default"]


class ConfigError(ValueError):
    """Raised when a configuration value cannot be used."""


def _load_timeout(environ: Mapping[str, str]) -> Optional[float]:
    raw_timeout = environ.get(TIMEOUT_ENV_VAR)
    if raw_timeout:
        try:
            return float(raw_timeout)
        except ValueError:
            return None
    return None


def _parse_port(raw: str) -> int:
    try:
        return int(raw.strip(), 10)
    except ValueError:
        raise ConfigError(f"Invalid {PORT_ENV_VAR} value: {raw!r}") from None


@dataclass(frozen=True, slots=True)
class MempoolConfig:
    """Effective runtime configuration, resolved once at startup."""

    port: int = DEFAULT_PORT
    base_url: str = DEFAULT_BASE_URL
    port_source: ConfigSource = "default"
    url_source: ConfigSource = "default"
    host: str = DEFAULT_HOST
    timeout: Optional[float] = None
    log_level: str = "INFO"
    log_format: str = "plain"


def resolve_config(
    cli_args: Optional[argparse.Namespace] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> MempoolConfig:
    """
    Resolve the effective configuration.

    Args:
        cli_args: Parsed command line (``port`` and ``mempool_url`` attributes
            are consulted when present and truthy).
        environ: Environment mapping; defaults to ``os.environ``.

    Raises:
        ConfigError: if ``PORT`` is set but is not an integer.
    """
    environ = os.environ if environ is None else environ
    cli_port = getattr(cli_args, "port", None) if cli_args is not None else None
    cli_url = getattr(cli_args, "mempool_url", None) if cli_args is not None else None

    port: int = DEFAULT_PORT
    port_source: ConfigSource = "default"
    if cli_port:
        port = int(cli_port)
        port_source = "cli"
    elif environ.get(PORT_ENV_VAR):
        port = _parse_port(environ[PORT_ENV_VAR])
        port_source = "env"

    base_url = DEFAULT_BASE_URL
    url_source: ConfigSource = "default"
    if cli_url:
        base_url = cli_url
        url_source = "cli"
    elif environ.get(BASE_URL_ENV_VAR):
        base_url = environ[BASE_URL_ENV_VAR]
        url_source = "env"

    return MempoolConfig(
        port=port,
        base_url=base_url,
        port_source=port_source,
        url_source=url_source,
        host=environ.get(HOST_ENV_VAR) or DEFAULT_HOST,
        timeout=_load_timeout(environ),
        log_level=environ.get(LOG_LEVEL_ENV_VAR, "INFO"),
        log_format=environ.get(LOG_FORMAT_ENV_VAR, "plain"),
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mempool-mcp-server",
        description="Read-only Bitcoin mining statistics exposed as MCP tools.",
    )
    parser.add_argument("--port", type=int, default=None, help="Port to run the server on")
    parser.add_argument(
        "--mempool-url",
        dest="mempool_url",
        default=None,
        help="Base URL for the Mempool API",
    )
    parser.add_argument(
        "--stdio",
        action="store_true",
        help="Serve MCP over stdin/stdout instead of HTTP",
    )
    parser.add_argument("--version", action="version", version=APP_VERSION)
    return parser.parse_args(list(argv) if argv is not None else None)


def load_env_file() -> None:
    """Load variables from a local .env file without overriding the environment."""
    load_dotenv(override=False)


def log_config_summary(config: MempoolConfig, logger: logging.Logger) -> None:
    logger.info("Configuration:")
    logger.info("- PORT: %s (source: %s)", config.port, config.port_source)
    logger.info("- MEMPOOL_URL: %s (source: %s)", config.base_url, config.url_source)


def load_default_config(environ: Optional[Mapping[str, str]] = None) -> MempoolConfig:
    """
    Configuration from the environment alone, for import-time defaults.

    A malformed PORT is skipped here; the entrypoint reports it through
    resolve_config.
    """
    environ = os.environ if environ is None else environ
    try:
        return resolve_config(None, environ)
    except ConfigError:
        return resolve_config(None, {key: value for key, value in environ.items() if key != PORT_ENV_VAR})


default_config = load_default_config()
