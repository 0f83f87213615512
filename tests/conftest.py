"""Shared Azure API payloads for the test suite."""

from __future__ import annotations

import pytest

SUB = "sub-1"
RG_PREFIX = f"/subscriptions/{SUB}/resourceGroups"


def nic_id(rg: str, name: str) -> str:
    return f"{RG_PREFIX}/{rg}/providers/Microsoft.Network/networkInterfaces/{name}"


def pip_id(rg: str, name: str) -> str:
    return f"{RG_PREFIX}/{rg}/providers/Microsoft.Network/publicIPAddresses/{name}"


@pytest.fixture
def options_dict() -> dict:
    return {
        "tenant_id": "tenant-1",
        "client_id": "client-1",
        "client_secret": "s3cret",
        "subscription_id": SUB,
    }


@pytest.fixture
def raw_vms() -> list[dict]:
    return [
        {
            "id": f"{RG_PREFIX}/rgtest/providers/Microsoft.Compute/virtualMachines/rgtest-1",
            "name": "rgtest-1",
            "location": "westus",
            "tags": {"Env": "prod"},
            "properties": {
                "networkProfile": {
                    "networkInterfaces": [{"id": nic_id("rgtest", "rgtest-1-nic")}],
                },
            },
        },
        {
            "id": f"{RG_PREFIX}/other/providers/Microsoft.Compute/virtualMachines/no-public-ip",
            "name": "no-public-ip",
            "location": "westus",
            "properties": {
                "networkProfile": {
                    "networkInterfaces": [{"id": nic_id("other", "private-nic")}],
                },
            },
        },
        {
            "id": f"{RG_PREFIX}/other/providers/Microsoft.Compute/virtualMachines/test-instance-1",
            "name": "test-instance-1",
            "location": "eastus",
            "tags": {"Env": "dev"},
            "properties": {
                "networkProfile": {
                    "networkInterfaces": [
                        {"id": nic_id("other", "secondary-nic"), "properties": {"primary": False}},
                        {"id": nic_id("other", "primary-nic"), "properties": {"primary": True}},
                    ],
                },
            },
        },
    ]


@pytest.fixture
def raw_nics() -> list[dict]:
    return [
        {
            "id": nic_id("rgtest", "rgtest-1-nic"),
            "properties": {
                "ipConfigurations": [
                    {"properties": {"publicIPAddress": {"id": pip_id("rgtest", "rgtest-1-ip")}}},
                ],
            },
        },
        {
            "id": nic_id("other", "private-nic"),
            "properties": {"ipConfigurations": [{"properties": {"privateIPAddress": "10.0.0.4"}}]},
        },
        {
            "id": nic_id("other", "secondary-nic"),
            "properties": {
                "ipConfigurations": [
                    {"properties": {"publicIPAddress": {"id": pip_id("other", "secondary-ip")}}},
                ],
            },
        },
        {
            "id": nic_id("other", "primary-nic"),
            "properties": {
                "ipConfigurations": [
                    {"properties": {"publicIPAddress": {"id": pip_id("other", "primary-ip")}}},
                ],
            },
        },
    ]


@pytest.fixture
def raw_ips() -> list[dict]:
    return [
        {"id": pip_id("rgtest", "rgtest-1-ip"), "properties": {"ipAddress": "52.160.41.155"}},
        {"id": pip_id("other", "secondary-ip"), "properties": {"ipAddress": "13.64.0.1"}},
        {"id": pip_id("other", "primary-ip"), "properties": {"ipAddress": "40.118.207.76"}},
    ]
