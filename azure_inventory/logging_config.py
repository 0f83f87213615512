"""Log formatting for the inventory task: JSON or text on stderr, with Azure scope ids masked."""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone

from .config import LoggingConfig

# Structured fields the discovery pipeline attaches via ``extra=``
PIPELINE_FIELDS = ("resource_type", "page", "item_count", "total_targets", "elapsed_seconds", "kind")

MASK = "***"

_SCOPE_PATTERNS = (
    re.compile(r"(/subscriptions/)[^/?#\s'\"]+", re.IGNORECASE),
    re.compile(r"(login\.microsoftonline\.com(?::\d+)?/)[^/?#\s'\"]+", re.IGNORECASE),
    re.compile(r"(client_secret=)[^&\s'\"]+"),
    re.compile(r"(Authorization['\"]?\s*[:=]\s*['\"]?\w+ )[^\s'\"]+", re.IGNORECASE),
)


def redact(text: str) -> str:
    """Mask subscription and tenant ids, client secrets and bearer tokens in *text*."""
    for pattern in _SCOPE_PATTERNS:
        text = pattern.sub(rf"\g<1>{MASK}", text)
    return text


def _pipeline_fields(record: logging.LogRecord) -> dict:
    return {key: getattr(record, key) for key in PIPELINE_FIELDS if getattr(record, key, None) is not None}


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": redact(record.getMessage()),
            **_pipeline_fields(record),
        }
        if record.exc_info and record.exc_info[1]:
            payload["exception"] = redact(self.formatException(record.exc_info))

        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines; pipeline fields are appended as key=value."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = _pipeline_fields(record)
        if fields:
            first, sep, rest = line.partition("\n")
            first += " " + " ".join(f"{key}={value}" for key, value in fields.items())
            line = first + sep + rest
        return redact(line)


def configure_logging(config: LoggingConfig) -> None:
    """Route all logging to stderr; stdout is reserved for the task result document."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, config.level.upper(), logging.WARNING))

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if config.format == "json" else TextFormatter())
    root.addHandler(handler)

    # urllib3 logs full request paths at DEBUG
    for noisy in ("urllib3", "requests"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
