"""Tests for resource records built from API payloads."""

import pytest

from azure_inventory.discovery.models import (
    DiscoveryResult,
    NetworkInterface,
    PublicIPAddress,
    Target,
    Token,
    VirtualMachine,
)
from azure_inventory.exceptions import ApiError, ValidationError


class TestVirtualMachine:
    def test_from_api(self, raw_vms):
        vm = VirtualMachine.from_api(raw_vms[0])
        assert vm.name == "rgtest-1"
        assert vm.location == "westus"
        assert vm.tags == {"Env": "prod"}
        assert len(vm.network_interfaces) == 1

    def test_missing_network_profile(self):
        vm = VirtualMachine.from_api({"id": "vm", "name": "bare"})
        assert vm.network_interfaces == ()
        assert vm.tags == {}
        assert vm.ordered_nic_ids() == []

    def test_primary_nics_first(self, raw_vms):
        vm = VirtualMachine.from_api(raw_vms[2])
        assert [nic_id.rsplit("/", 1)[-1] for nic_id in vm.ordered_nic_ids()] == ["primary-nic", "secondary-nic"]

    def test_flat_primary_flag(self):
        vm = VirtualMachine.from_api({
            "id": "vm", "name": "vm",
            "properties": {"networkProfile": {"networkInterfaces": [
                {"id": "a"}, {"id": "b", "primary": True},
            ]}},
        })
        assert vm.ordered_nic_ids() == ["b", "a"]

    def test_no_primary_keeps_listed_order(self):
        vm = VirtualMachine.from_api({
            "id": "vm", "name": "vm",
            "properties": {"networkProfile": {"networkInterfaces": [{"id": "a"}, {"id": "b"}]}},
        })
        assert vm.ordered_nic_ids() == ["a", "b"]


class TestNetworkInterface:
    def test_ip_configurations_list(self, raw_nics):
        nic = NetworkInterface.from_api(raw_nics[0])
        assert nic.ip_configurations[0].public_ip_id.endswith("/rgtest-1-ip")

    def test_singular_ip_configuration(self):
        nic = NetworkInterface.from_api({
            "id": "nic",
            "properties": {"ipConfiguration": {"properties": {"publicIPAddress": {"id": "pip"}}}},
        })
        assert [c.public_ip_id for c in nic.ip_configurations] == ["pip"]

    def test_no_public_ip(self, raw_nics):
        nic = NetworkInterface.from_api(raw_nics[1])
        assert nic.ip_configurations[0].public_ip_id is None

    def test_no_configurations(self):
        assert NetworkInterface.from_api({"id": "nic", "properties": {}}).ip_configurations == ()


class TestPublicIPAddress:
    def test_with_fqdn(self):
        pip = PublicIPAddress.from_api({
            "id": "pip",
            "properties": {"ipAddress": "1.2.3.4", "dnsSettings": {"fqdn": "vm.westus.cloudapp.azure.com"}},
        })
        assert pip.ip_address == "1.2.3.4"
        assert pip.fqdn == "vm.westus.cloudapp.azure.com"

    def test_unallocated(self):
        pip = PublicIPAddress.from_api({"id": "pip", "properties": {"publicIPAllocationMethod": "Dynamic"}})
        assert pip.ip_address is None
        assert pip.fqdn is None


class TestToken:
    def test_access_token_not_in_repr(self):
        token = Token.from_api({"token_type": "Bearer", "access_token": "very-secret"})
        assert "very-secret" not in repr(token)

    def test_missing_access_token(self):
        with pytest.raises(ApiError, match="Malformed token response"):
            Token.from_api({"token_type": "Bearer", "expires_in": "3599"})

    def test_missing_token_type_defaults_to_bearer(self):
        assert Token.from_api({"access_token": "abc"}).authorization_header == "Bearer abc"


class TestDiscoveryResult:
    def test_success_shape(self):
        result = DiscoveryResult.success([Target(name="vm1", uri="1.2.3.4")])
        assert result.ok
        assert result.to_dict() == {"targets": [{"name": "vm1", "uri": "1.2.3.4"}]}

    def test_empty_success(self):
        assert DiscoveryResult.success([]).to_dict() == {"targets": []}

    def test_failure_shape(self):
        result = DiscoveryResult.failure(ValidationError("bad input"))
        assert not result.ok
        assert result.to_dict() == {
            "_error": {"msg": "bad input", "kind": "bolt-plugin/validation-error", "details": {}},
        }
