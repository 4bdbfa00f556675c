"""
lsblk command wrapper for data disk discovery
"""
from typing import Iterable, List, Optional
from .base import CommandWrapper


class Lsblk(CommandWrapper):
    """Wrapper for lsblk with fluent API"""
    def __init__(self):
        """Initialize with default settings"""
        self._major: int = 8

    def major(self, value: int) -> "Lsblk":
        """Only list devices with this major number (returns self for chaining)."""
        self._major = value
        return self

    def list_disks(self) -> str:
        """Generate command listing whole disks by full path, one per line"""
        return f"lsblk -l -d -n -p -I {self._major} -o NAME 2>&1"

    @staticmethod
    def parse_disks(output: Optional[str], excluded: Iterable[str] = ()) -> List[str]:
        """Parse lsblk output into device paths, dropping excluded devices"""
        if not output:
            return []
        skip = set(excluded)
        disks = []
        for line in output.splitlines():
            name = line.strip()
            if not name.startswith("/dev/") or name in skip:
                continue
            disks.append(name)
        return disks
