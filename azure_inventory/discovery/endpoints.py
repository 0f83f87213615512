"""URL templates and API versions for the collections the inventory reads."""

from __future__ import annotations

from enum import Enum

from ..config import Credentials, InventoryOptions


class ResourceType(str, Enum):
    VIRTUAL_MACHINES = "virtual_machines"
    NETWORK_INTERFACES = "network_interfaces"
    PUBLIC_IP_ADDRESSES = "public_ip_addresses"


SCALE_SET_API_VERSION = "2017-03-30"
DIRECT_API_VERSION = "2019-07-01"

_SUBSCRIPTION = "/subscriptions/{subscription_id}"
_RESOURCE_GROUP = _SUBSCRIPTION + "/resourceGroups/{resource_group}"
_SCALE_SET = _RESOURCE_GROUP + "/providers/Microsoft.Compute/virtualMachineScaleSets/{scale_set}"

# resource type -> (collection under a provider, collection under a scale set)
_COLLECTIONS: dict[ResourceType, tuple[str, str]] = {
    ResourceType.VIRTUAL_MACHINES: ("Microsoft.Compute/virtualmachines", "virtualmachines"),
    ResourceType.NETWORK_INTERFACES: ("Microsoft.Network/networkInterfaces", "networkinterfaces"),
    ResourceType.PUBLIC_IP_ADDRESSES: ("Microsoft.Network/publicIPAddresses", "publicIPAddresses"),
}


def collection_url(
    resource_type: ResourceType,
    credentials: Credentials,
    options: InventoryOptions,
    base_url: str = "https://management.azure.com",
) -> str:
    """Build the list URL for *resource_type* at the narrowest scope the options allow.

    Scale-set scope requires a resource group; callers validate that before
    dispatching any request.
    """
    provider_path, scale_set_path = _COLLECTIONS[resource_type]
    scope = {
        "subscription_id": credentials.subscription_id,
        "resource_group": options.resource_group,
        "scale_set": options.scale_set,
    }

    if options.resource_group and options.scale_set:
        path = f"{_SCALE_SET}/{scale_set_path}"
        api_version = SCALE_SET_API_VERSION
    elif options.resource_group:
        path = f"{_RESOURCE_GROUP}/providers/{provider_path}"
        api_version = DIRECT_API_VERSION
    else:
        path = f"{_SUBSCRIPTION}/providers/{provider_path}"
        api_version = DIRECT_API_VERSION

    return f"{base_url.rstrip('/')}{path.format(**scope)}?api-version={api_version}"
