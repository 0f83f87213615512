"""Location and tag filtering for discovered virtual machines."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..config import InventoryOptions
from .models import VirtualMachine

logger = logging.getLogger(__name__)


class ResourceFilter:
    """Keeps VMs in the requested location that carry all requested tags.

    Tag names are compared case-insensitively, values case-sensitively.
    """

    def __init__(self, location: str | None = None, tags: Mapping[str, Any] | None = None):
        self._location = location
        self._tags = {str(name).lower(): str(value) for name, value in (tags or {}).items()}

    @classmethod
    def from_options(cls, options: InventoryOptions) -> ResourceFilter:
        return cls(location=options.location, tags=options.tags)

    def apply(self, vms: list[VirtualMachine]) -> list[VirtualMachine]:
        before = len(vms)
        result = [vm for vm in vms if self._matches(vm)]
        filtered = before - len(result)
        if filtered:
            logger.info("Filter removed %d of %d virtual machines", filtered, before)
        return result

    def _matches(self, vm: VirtualMachine) -> bool:
        if self._location is not None and vm.location != self._location:
            logger.debug("VM %s is in %s, not %s", vm.name, vm.location, self._location)
            return False

        if self._tags:
            present = {name.lower(): value for name, value in vm.tags.items()}
            # All conditions must match (AND)
            for name, value in self._tags.items():
                if present.get(name) != value:
                    logger.debug("VM %s does not match tag %s=%s", vm.name, name, value)
                    return False

        return True
