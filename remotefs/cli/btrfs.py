"""
btrfs command wrapper for multi-device pools
"""
import shlex
from typing import List, Optional
from .base import CommandWrapper


def _join(devices: List[str]) -> str:
    return " ".join(shlex.quote(device) for device in devices)


class Btrfs(CommandWrapper):
    """Wrapper for btrfs and mkfs.btrfs commands with fluent API"""
    def __init__(self):
        """Initialize with default settings"""
        self._data_profile: Optional[str] = None

    def data_profile(self, value: Optional[str]) -> "Btrfs":
        """Set the data profile used by mkfs, e.g. raid0 (returns self for chaining)."""
        self._data_profile = value
        return self

    def device_scan(self, device: str) -> str:
        """Generate command registering a device; fails when it holds no btrfs"""
        return f"btrfs device scan {shlex.quote(device)} 2>&1"

    def mkfs(self, devices: List[str]) -> str:
        """Generate command creating a filesystem over one or more devices"""
        profile = f" -d {self._data_profile}" if self._data_profile else ""
        return f"mkfs.btrfs{profile} {_join(devices)} 2>&1"

    def device_add(self, devices: List[str], mountpath: str) -> str:
        """Generate command adding devices to a mounted pool"""
        return f"btrfs device add {_join(devices)} {shlex.quote(mountpath)} 2>&1"

    def resize_max(self, mountpath: str) -> str:
        """Generate command growing the filesystem to all available space"""
        return f"btrfs filesystem resize max {shlex.quote(mountpath)} 2>&1"

    def balance(self, mountpath: str) -> str:
        """Generate command redistributing data and metadata across devices"""
        return f"btrfs filesystem balance {shlex.quote(mountpath)} 2>&1"

    def show(self) -> str:
        """Generate command listing known btrfs filesystems"""
        return "btrfs filesystem show 2>&1"
