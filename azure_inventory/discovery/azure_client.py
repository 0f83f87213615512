"""REST client for the Azure AD token endpoint and the management API."""

from __future__ import annotations

import logging
import time
from typing import Any
from urllib.parse import urlparse

import requests

from ..config import Credentials, HttpConfig
from ..exceptions import ApiError, HttpError
from .models import Token

logger = logging.getLogger(__name__)

MANAGEMENT_RESOURCE = "https://management.azure.com"


def describe_transport_error(exc: requests.RequestException, url: str) -> str:
    """Describe a transport failure without the request path or query.

    Paths embed the tenant or subscription id, and requests repeats them in
    its messages (`Max retries exceeded with url: /subscriptions/...`).
    """
    if not exc.args:
        return type(exc).__name__
    # urllib3 MaxRetryError carries the underlying socket/TLS error
    reason = getattr(exc.args[0], "reason", None) or exc.args[0]
    text = str(reason)

    parsed = urlparse(url)
    path_and_query = parsed.path + (f"?{parsed.query}" if parsed.query else "")
    for fragment in (url, path_and_query, parsed.path):
        if fragment and fragment != "/":
            text = text.replace(fragment, "")
    return f"{type(exc).__name__}: {text}" if text else type(exc).__name__


def extract_error_message(body: Any) -> str:
    """Pull a readable message out of an Azure error payload.

    Token errors carry a top-level ``error_description``; management API
    errors nest it under ``error.message``.
    """
    if isinstance(body, dict):
        description = body.get("error_description")
        if isinstance(description, str):
            return description
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return "Unknown error"


class AzureRestClient:
    """Thin wrapper around a requests session speaking to Azure endpoints.

    Not shared between threads: each concurrent fetch gets its own client.
    """

    def __init__(self, config: HttpConfig | None = None, session: requests.Session | None = None):
        self._config = config or HttpConfig()
        self._session = session or requests.Session()
        self._session.verify = self._config.verify_ssl
        self._session.headers["Accept"] = "application/json"

    def __enter__(self) -> AzureRestClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    # ── Authentication ──────────────────────────────────────────────

    def acquire_token(self, credentials: Credentials) -> Token:
        """Exchange service principal credentials for a bearer token (client-credentials grant)."""
        url = f"{self._config.authority_url.rstrip('/')}/{credentials.tenant_id}/oauth2/token"
        data = {
            "grant_type": "client_credentials",
            "client_id": credentials.client_id,
            "client_secret": credentials.client_secret,
            "resource": MANAGEMENT_RESOURCE,
        }
        logger.debug("Requesting management API token")
        body = self._request("POST", url, data=data)
        return Token.from_api(body)

    # ── Collections ─────────────────────────────────────────────────

    def get_all_results(self, url: str, token: Token, resource_type: str | None = None) -> list[dict[str, Any]]:
        """Follow ``nextLink`` from *url* until exhausted and return every item in page order."""
        headers = {"Authorization": token.authorization_header}
        items: list[dict[str, Any]] = []
        page = 0
        start = time.monotonic()

        next_url: str | None = url
        while next_url:
            page += 1
            body = self._request("GET", next_url, headers=headers)
            values = body.get("value") if isinstance(body, dict) else None
            if not isinstance(values, list):
                raise ApiError(f"Malformed collection response from {urlparse(next_url).netloc}: missing 'value' list")

            items.extend(values)
            logger.debug(
                "Fetched page %d (%d items)", page, len(values),
                extra={"resource_type": resource_type, "page": page, "item_count": len(values)},
            )
            next_url = body.get("nextLink")

        logger.info(
            "Fetched %d %s across %d page(s)", len(items), resource_type or "items", page,
            extra={
                "resource_type": resource_type,
                "item_count": len(items),
                "elapsed_seconds": round(time.monotonic() - start, 2),
            },
        )
        return items

    # ── Internal HTTP helpers ───────────────────────────────────────

    def _request(self, method: str, url: str, **kwargs) -> Any:
        host = urlparse(url).netloc
        kwargs.setdefault("timeout", self._config.timeout)

        try:
            resp = self._session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            raise HttpError(
                f"Failed to connect to {host}: {describe_transport_error(exc, url)}", details={"host": host},
            ) from exc

        if not 200 <= resp.status_code < 300:
            try:
                body = resp.json()
            except ValueError:
                body = None
            message = f'{resp.status_code} "{resp.reason}": {extract_error_message(body)}'
            raise ApiError(message, status_code=resp.status_code, response_body=resp.text)

        try:
            return resp.json()
        except ValueError as exc:
            raise ApiError(
                f"Malformed response from {host}: body is not JSON",
                status_code=resp.status_code,
                response_body=resp.text,
            ) from exc
