"""
mdadm command wrapper for software RAID arrays
"""
import shlex
from typing import List, Optional
from .base import CommandWrapper


def _join(devices: List[str]) -> str:
    return " ".join(shlex.quote(device) for device in devices)


class Mdadm(CommandWrapper):
    """Wrapper for mdadm commands with fluent API"""
    def __init__(self):
        """Initialize with default settings"""
        self._verbose: bool = True

    def verbose(self, value: bool = True) -> "Mdadm":
        """Set --verbose on create (returns self for chaining)."""
        self._verbose = value
        return self

    def detail_scan(self) -> str:
        """Generate command listing all assembled arrays"""
        return "mdadm --detail --scan 2>&1"

    def detail(self, target: str) -> str:
        """Generate command describing one array"""
        return f"mdadm --detail {shlex.quote(target)} 2>&1"

    def examine(self, partition: str) -> str:
        """Generate command reading the md superblock of a member device"""
        return f"mdadm --examine {shlex.quote(partition)} 2>&1"

    def find_arrays(self) -> str:
        """Generate command listing md block devices present under /dev"""
        return "find /dev/md* -maxdepth 0 -type b 2>/dev/null || true"

    def create(self, target: str, level: int, devices: List[str]) -> str:
        """Generate command creating an array over devices"""
        verbose = " --verbose" if self._verbose else ""
        return (
            f"mdadm --create{verbose} {shlex.quote(target)} --level={level} "
            f"--raid-devices={len(devices)} {_join(devices)} 2>&1"
        )

    def add(self, target: str, devices: List[str]) -> str:
        """Generate command adding spare devices to an array"""
        return f"mdadm --add {shlex.quote(target)} {_join(devices)} 2>&1"

    def grow(self, target: str, raid_devices: int) -> str:
        """Generate command growing an array to raid_devices active members"""
        return f"mdadm --grow --raid-devices={raid_devices} {shlex.quote(target)} 2>&1"

    @staticmethod
    def parse_detail_scan(output: Optional[str]) -> List[str]:
        """Parse "ARRAY /dev/md0 metadata=1.2 ..." lines into array paths"""
        if not output:
            return []
        arrays = []
        for line in output.splitlines():
            parts = line.split()
            if len(parts) >= 2 and parts[0] == "ARRAY":
                arrays.append(parts[1])
        return arrays

    @staticmethod
    def parse_block_devices(output: Optional[str]) -> List[str]:
        """Parse find output into md device paths"""
        if not output:
            return []
        return [line.strip() for line in output.splitlines() if line.strip().startswith("/dev/md")]
