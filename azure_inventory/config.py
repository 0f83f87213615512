"""Frozen dataclasses for task options, credentials and the YAML loader."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError, ValidationError

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")

CREDENTIAL_ENV_PREFIX = "AZURE_"
CREDENTIAL_KEYS = ("tenant_id", "client_id", "client_secret", "subscription_id")


def _interpolate_env(value: str, environ: Mapping[str, str]) -> str:
    """Replace ${ENV_VAR} placeholders with environment variable values."""

    def _replace(match: re.Match) -> str:
        env_key = match.group(1)
        env_val = environ.get(env_key)
        if env_val is None:
            raise ConfigError(f"Environment variable '{env_key}' is not set")
        return env_val

    return _ENV_PATTERN.sub(_replace, value)


def _walk_and_interpolate(obj: Any, environ: Mapping[str, str]) -> Any:
    """Recursively interpolate env vars in strings throughout a nested structure."""
    if isinstance(obj, str):
        return _interpolate_env(obj, environ)
    if isinstance(obj, dict):
        return {k: _walk_and_interpolate(v, environ) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_walk_and_interpolate(v, environ) for v in obj]
    return obj


@dataclass(frozen=True)
class Credentials:
    tenant_id: str
    client_id: str
    client_secret: str = field(repr=False)
    subscription_id: str

    def to_dict(self) -> dict[str, str]:
        return {key: getattr(self, key) for key in CREDENTIAL_KEYS}


@dataclass(frozen=True)
class InventoryOptions:
    """Parameters accepted by the inventory task. Every field is optional."""

    tenant_id: str | None = None
    client_id: str | None = None
    client_secret: str | None = field(default=None, repr=False)
    subscription_id: str | None = None
    resource_group: str | None = None
    scale_set: str | None = None
    location: str | None = None
    tags: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> InventoryOptions:
        """Build options from task parameters, ignoring keys we do not know (e.g. ``_task``)."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        tags = kwargs.get("tags")
        if tags is not None and not isinstance(tags, Mapping):
            raise ValidationError("tags must be a mapping of tag name to value")
        return cls(**kwargs)


@dataclass(frozen=True)
class HttpConfig:
    timeout: float = 30
    verify_ssl: bool = True
    management_url: str = "https://management.azure.com"
    authority_url: str = "https://login.microsoftonline.com"


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "WARNING"
    format: str = "json"  # "json" or "text"


@dataclass(frozen=True)
class AppConfig:
    options: InventoryOptions = field(default_factory=InventoryOptions)
    http: HttpConfig = field(default_factory=HttpConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def resolve_credentials(options: InventoryOptions, environ: Mapping[str, str]) -> Credentials:
    """Merge explicit options with ``AZURE_*`` fallbacks from *environ*.

    Explicit options win. Raises ValidationError naming every key that is
    missing from both sources.
    """
    values: dict[str, str | None] = {}
    for key in CREDENTIAL_KEYS:
        values[key] = getattr(options, key) or environ.get(f"{CREDENTIAL_ENV_PREFIX}{key.upper()}") or None

    missing = [key for key, value in values.items() if value is None]
    if missing:
        raise ValidationError(
            f"Parameters {', '.join(missing)} must be specified or set as environment variables",
            details={"missing": missing},
        )
    return Credentials(**values)  # type: ignore[arg-type]


def validate_scope(options: InventoryOptions) -> None:
    """Reject option combinations the management API cannot serve."""
    if options.scale_set and not options.resource_group:
        raise ValidationError("resource_group must be specified in order to filter by scale_set")


_SECTIONS: dict[str, type] = {"options": InventoryOptions, "http": HttpConfig, "logging": LoggingConfig}


def load_config(path: str | Path, environ: Mapping[str, str] | None = None) -> AppConfig:
    """Load and validate configuration from a YAML file."""
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Configuration file not found: {path}")

    with open(path) as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Configuration file is not valid YAML: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError("Configuration file must be a YAML mapping")

    raw = _walk_and_interpolate(raw, os.environ if environ is None else environ)

    sections: dict[str, Any] = {}
    for name, cls in _SECTIONS.items():
        data = raw.get(name) or {}
        if not isinstance(data, dict):
            raise ConfigError(f"'{name}' section must be a mapping")
        if cls is InventoryOptions:
            try:
                sections[name] = InventoryOptions.from_dict(data)
            except ValidationError as exc:
                raise ConfigError(f"options: {exc}") from exc
        else:
            known = {f.name for f in fields(cls)}
            sections[name] = cls(**{k: v for k, v in data.items() if k in known})

    config = AppConfig(**sections)
    _validate(config)
    return config


def _validate(config: AppConfig) -> None:
    """Validate configuration values."""
    if not isinstance(config.http.timeout, (int, float)) or config.http.timeout <= 0:
        raise ConfigError("http.timeout must be a positive number")

    if config.logging.format not in ("json", "text"):
        raise ConfigError("logging.format must be 'json' or 'text'")
