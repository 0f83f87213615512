"""Argument parsing, parameter loading and task output."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import IO, Any

from .config import AppConfig, LoggingConfig, load_config
from .discovery.models import DiscoveryResult
from .exceptions import ConfigError
from .inventory import run_task
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="azure-inventory",
        description="Resolve inventory targets from Azure virtual machines with public IPs",
    )
    parser.add_argument(
        "-c", "--config",
        help="Path to a YAML options file (default: read JSON task parameters from stdin)",
    )
    parser.add_argument(
        "--log-level",
        help="Override the logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "--log-format",
        choices=("json", "text"),
        help="Override the log format",
    )
    return parser


def _read_params(stream: IO[str]) -> dict[str, Any]:
    raw = stream.read().strip()
    if not raw:
        return {}
    try:
        params = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Task parameters are not valid JSON: {exc}") from exc
    if not isinstance(params, dict):
        raise ConfigError("Task parameters must be a JSON object")
    return params


def _load(args: argparse.Namespace, stdin: IO[str]) -> tuple[AppConfig, dict[str, Any] | None]:
    if args.config:
        return load_config(args.config), None
    return AppConfig(), _read_params(stdin)


def main(argv: list[str] | None = None, stdin: IO[str] | None = None, stdout: IO[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    try:
        config, params = _load(args, stdin)
    except ConfigError as exc:
        configure_logging(LoggingConfig(format=args.log_format or "json"))
        logger.error("Configuration error: %s", exc)
        result = DiscoveryResult.failure(exc)
    else:
        configure_logging(LoggingConfig(
            level=args.log_level or config.logging.level,
            format=args.log_format or config.logging.format,
        ))
        result = run_task(config.options if params is None else params, http_config=config.http)

    json.dump(result.to_dict(), stdout)
    stdout.write("\n")
    return 0 if result.ok else 1
