"""Typed records for Azure resources, discovered targets and task results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..exceptions import ApiError, InventoryError


def _dig(obj: Any, *path: str) -> Any:
    """Walk nested mappings, returning None as soon as a level is missing."""
    for key in path:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def _first_present(obj: Any, *paths: tuple[str, ...]) -> Any:
    """Return the value at the first path that resolves to something other than None."""
    for path in paths:
        value = _dig(obj, *path)
        if value is not None:
            return value
    return None


@dataclass(frozen=True)
class Token:
    """Bearer token returned by the client-credentials grant."""

    token_type: str
    access_token: str = field(repr=False)

    @property
    def authorization_header(self) -> str:
        return f"{self.token_type} {self.access_token}"

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Token:
        access_token = raw.get("access_token") if isinstance(raw, dict) else None
        if not isinstance(access_token, str) or not access_token:
            raise ApiError("Malformed token response: missing access_token")
        return cls(token_type=raw.get("token_type") or "Bearer", access_token=access_token)


@dataclass(frozen=True)
class NicReference:
    id: str
    primary: bool = False

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> NicReference:
        # Full VM payloads nest the flag under properties; some older payloads flatten it.
        primary = _first_present(raw, ("properties", "primary"), ("primary",))
        return cls(id=raw.get("id", ""), primary=bool(primary))


@dataclass(frozen=True)
class VirtualMachine:
    id: str
    name: str
    location: str | None = None
    tags: dict[str, str] = field(default_factory=dict)
    network_interfaces: tuple[NicReference, ...] = ()

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> VirtualMachine:
        refs = _dig(raw, "properties", "networkProfile", "networkInterfaces") or []
        return cls(
            id=raw.get("id", ""),
            name=raw.get("name", ""),
            location=raw.get("location"),
            tags=dict(raw.get("tags") or {}),
            network_interfaces=tuple(NicReference.from_api(ref) for ref in refs),
        )

    def ordered_nic_ids(self) -> list[str]:
        """NIC ids with primary interfaces first, otherwise in the order the VM lists them."""
        primary = [ref.id for ref in self.network_interfaces if ref.primary]
        secondary = [ref.id for ref in self.network_interfaces if not ref.primary]
        return primary + secondary


@dataclass(frozen=True)
class IpConfiguration:
    public_ip_id: str | None = None

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> IpConfiguration:
        return cls(public_ip_id=_dig(raw, "properties", "publicIPAddress", "id"))


@dataclass(frozen=True)
class NetworkInterface:
    id: str
    ip_configurations: tuple[IpConfiguration, ...] = ()

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> NetworkInterface:
        # Scale-set NICs from older API versions use the singular field name.
        configs = _first_present(raw, ("properties", "ipConfigurations"), ("properties", "ipConfiguration"))
        if isinstance(configs, dict):
            configs = [configs]
        return cls(
            id=raw.get("id", ""),
            ip_configurations=tuple(IpConfiguration.from_api(c) for c in configs or [] if isinstance(c, dict)),
        )


@dataclass(frozen=True)
class PublicIPAddress:
    id: str
    ip_address: str | None = None
    fqdn: str | None = None

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> PublicIPAddress:
        return cls(
            id=raw.get("id", ""),
            ip_address=_dig(raw, "properties", "ipAddress") or None,
            fqdn=_dig(raw, "properties", "dnsSettings", "fqdn") or None,
        )


@dataclass(frozen=True)
class Target:
    """A reachable machine: display name plus the address to connect to."""

    name: str
    uri: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "uri": self.uri}


@dataclass(frozen=True)
class DiscoveryResult:
    """Either a list of targets or the error that aborted discovery, never both."""

    targets: tuple[Target, ...] | None = None
    error: InventoryError | None = None

    @classmethod
    def success(cls, targets: list[Target]) -> DiscoveryResult:
        return cls(targets=tuple(targets))

    @classmethod
    def failure(cls, error: InventoryError) -> DiscoveryResult:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        if self.error is not None:
            return {"_error": self.error.to_dict()}
        return {"targets": [t.to_dict() for t in self.targets or ()]}
