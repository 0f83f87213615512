"""Join VMs to their NICs and public IPs to produce connectable targets."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol, TypeVar

from .models import NetworkInterface, PublicIPAddress, Target, VirtualMachine

logger = logging.getLogger(__name__)


class _Identified(Protocol):
    id: str


R = TypeVar("R", bound=_Identified)


def index_by_id(resources: Iterable[R]) -> dict[str, R]:
    """Map resource id to resource. A repeated id keeps the last occurrence."""
    index: dict[str, R] = {}
    for resource in resources:
        if resource.id in index:
            logger.debug("Duplicate resource id %s, keeping the later entry", resource.id)
        index[resource.id] = resource
    return index


class TargetJoiner:
    """Resolves each VM to the first public IP reachable through its NICs."""

    def __init__(self, nics: dict[str, NetworkInterface], public_ips: dict[str, PublicIPAddress]):
        self._nics = nics
        self._public_ips = public_ips

    def join(self, vms: Iterable[VirtualMachine]) -> list[Target]:
        targets: list[Target] = []
        for vm in vms:
            target = self.target_for(vm)
            if target is None:
                logger.debug("VM %s has no public IP, skipping", vm.name)
                continue
            targets.append(target)
        return targets

    def target_for(self, vm: VirtualMachine) -> Target | None:
        public_ip = next(self._candidate_ips(vm), None)
        if public_ip is None:
            return None
        return Target(name=public_ip.fqdn or vm.name, uri=public_ip.ip_address)  # type: ignore[arg-type]

    def _candidate_ips(self, vm: VirtualMachine) -> Iterable[PublicIPAddress]:
        """Yield allocated public IPs in join order: primary NICs first, then IP configurations in order."""
        for nic_id in vm.ordered_nic_ids():
            nic = self._nics.get(nic_id)
            if nic is None:
                continue
            for ip_config in nic.ip_configurations:
                if not ip_config.public_ip_id:
                    continue
                public_ip = self._public_ips.get(ip_config.public_ip_id)
                if public_ip is not None and public_ip.ip_address:
                    yield public_ip
