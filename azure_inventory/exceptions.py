"""Custom exception hierarchy for the Azure inventory plugin."""

from __future__ import annotations

from typing import Any


class InventoryError(Exception):
    """Base exception for all inventory errors."""

    kind = "bolt.plugin/inventory-error"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"msg": str(self), "kind": self.kind, "details": self.details}


class ValidationError(InventoryError):
    """Missing credentials or an invalid combination of options."""

    kind = "bolt-plugin/validation-error"


class ConfigError(InventoryError):
    """Unreadable or invalid options file."""

    kind = "bolt-plugin/config-error"


class HttpError(InventoryError):
    """Transport-level failure talking to the token or management endpoint."""

    kind = "bolt.plugin/azure-http-error"


class ApiError(InventoryError):
    """Non-success response from the Azure API."""

    kind = "bolt.plugin/azure-api-error"

    def __init__(self, message: str, status_code: int | None = None, response_body: str | None = None):
        super().__init__(message, details={"status_code": status_code} if status_code else None)
        self.status_code = status_code
        self.response_body = response_body


class UnexpectedError(InventoryError):
    """Any failure that is not one of ours, surfaced through the task boundary."""

    kind = "bolt.plugin/unexpected-error"
