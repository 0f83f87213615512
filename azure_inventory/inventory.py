"""Discovery pipeline: credentials -> token -> concurrent fetches -> join -> targets."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable, Mapping
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Any

from .config import Credentials, HttpConfig, InventoryOptions, resolve_credentials, validate_scope
from .discovery.azure_client import AzureRestClient
from .discovery.endpoints import ResourceType, collection_url
from .discovery.joiner import TargetJoiner, index_by_id
from .discovery.models import (
    DiscoveryResult,
    NetworkInterface,
    PublicIPAddress,
    Target,
    Token,
    VirtualMachine,
)
from .discovery.resource_filter import ResourceFilter
from .exceptions import InventoryError, UnexpectedError

logger = logging.getLogger(__name__)

ClientFactory = Callable[[HttpConfig], AzureRestClient]


class Inventory:
    """Resolves the public targets for one set of task options."""

    def __init__(
        self,
        options: InventoryOptions,
        http_config: HttpConfig | None = None,
        environ: Mapping[str, str] | None = None,
        client_factory: ClientFactory = AzureRestClient,
    ):
        self._options = options
        self._http = http_config or HttpConfig()
        self._environ = os.environ if environ is None else environ
        self._client_factory = client_factory
        self._filter = ResourceFilter.from_options(options)

    def discover(self) -> list[Target]:
        """Run the full pipeline. Raises InventoryError on any failure."""
        start = time.monotonic()

        validate_scope(self._options)
        credentials = resolve_credentials(self._options, self._environ)

        with self._client_factory(self._http) as client:
            token = client.acquire_token(credentials)

        raw_vms, raw_nics, raw_ips = self._fetch_all(credentials, token)

        vms = self._filter.apply([VirtualMachine.from_api(raw) for raw in raw_vms])
        nics = index_by_id(NetworkInterface.from_api(raw) for raw in raw_nics)
        public_ips = index_by_id(PublicIPAddress.from_api(raw) for raw in raw_ips)

        targets = TargetJoiner(nics, public_ips).join(vms)
        logger.info(
            "Discovery complete",
            extra={"total_targets": len(targets), "elapsed_seconds": round(time.monotonic() - start, 2)},
        )
        return targets

    def _fetch_all(
        self, credentials: Credentials, token: Token,
    ) -> tuple[list[dict[str, Any]], list[dict[str, Any]], list[dict[str, Any]]]:
        """Fetch the three collections concurrently; the first failure aborts the whole discovery."""
        order = (ResourceType.VIRTUAL_MACHINES, ResourceType.NETWORK_INTERFACES, ResourceType.PUBLIC_IP_ADDRESSES)

        with ThreadPoolExecutor(max_workers=len(order), thread_name_prefix="azure-fetch") as executor:
            futures: dict[ResourceType, Future] = {
                resource_type: executor.submit(self._fetch, resource_type, credentials, token)
                for resource_type in order
            }
            done, pending = wait(futures.values(), return_when=FIRST_EXCEPTION)
            for future in pending:
                future.cancel()
        # Leaving the executor block waits for any fetch still in flight.

        for resource_type in order:
            future = futures[resource_type]
            if future in done and future.exception() is not None:
                logger.debug("Fetch of %s failed", resource_type.value)
                raise future.exception()  # type: ignore[misc]

        return tuple(futures[resource_type].result() for resource_type in order)  # type: ignore[return-value]

    def _fetch(self, resource_type: ResourceType, credentials: Credentials, token: Token) -> list[dict[str, Any]]:
        url = collection_url(resource_type, credentials, self._options, self._http.management_url)
        with self._client_factory(self._http) as client:
            return client.get_all_results(url, token, resource_type=resource_type.value)


def run_task(
    params: Mapping[str, Any] | InventoryOptions | None,
    http_config: HttpConfig | None = None,
    environ: Mapping[str, str] | None = None,
    client_factory: ClientFactory = AzureRestClient,
) -> DiscoveryResult:
    """Outer boundary: every failure becomes a DiscoveryResult error, nothing escapes."""
    try:
        options = params if isinstance(params, InventoryOptions) else InventoryOptions.from_dict(params)
        targets = Inventory(options, http_config, environ, client_factory).discover()
    except InventoryError as exc:
        logger.error("Inventory failed: %s", exc, extra={"kind": exc.kind})
        return DiscoveryResult.failure(exc)
    except Exception as exc:
        logger.exception("Unexpected error during inventory")
        return DiscoveryResult.failure(UnexpectedError(f"Unexpected error: {exc}"))
    return DiscoveryResult.success(targets)
