"""Azure inventory plugin: turn VMs with public IPs into connectable targets."""

from .discovery.models import DiscoveryResult, Target
from .inventory import Inventory, run_task

__all__ = ["DiscoveryResult", "Inventory", "Target", "run_task"]
