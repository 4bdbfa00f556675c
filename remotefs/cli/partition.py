"""
Partition table wrappers (partprobe for reading, fdisk for writing)
"""
import re
import shlex
from typing import List, Optional
from .base import CommandWrapper


def partition_path(disk: str, number: int = 1) -> str:
    """Return the device path of a partition: /dev/sdc -> /dev/sdc1, /dev/nvme0n1 -> /dev/nvme0n1p1."""
    separator = "p" if disk[-1:].isdigit() else ""
    return f"{disk}{separator}{number}"


class Partprobe(CommandWrapper):
    """Wrapper for partprobe in dry-run summary mode"""
    def __init__(self):
        """Initialize with default settings"""
        self._dry_run: bool = True

    def dry_run(self, value: bool = True) -> "Partprobe":
        """Do not ask the kernel to re-read the table (returns self for chaining)."""
        self._dry_run = value
        return self

    def summary(self, disk: str) -> str:
        """Generate command printing the partition summary of a disk"""
        flag = "-d -s" if self._dry_run else "-s"
        return f"partprobe {flag} {shlex.quote(disk)} 2>&1"

    @staticmethod
    def parse_partitions(output: Optional[str]) -> List[int]:
        """
        Parse partition numbers from a summary line
        e.g. "/dev/sdc: msdos partitions 1 2 <5>" -> [1, 2, 5]
        """
        if not output:
            return []
        for line in output.splitlines():
            _, sep, rest = line.partition(" partitions")
            if sep:
                return [int(num) for num in re.findall(r"\d+", rest)]
        return []


class Fdisk(CommandWrapper):
    """Wrapper for scripted fdisk partition creation"""
    def __init__(self):
        """Initialize with default settings"""
        self._number: int = 1

    def number(self, value: int) -> "Fdisk":
        """Set partition number (returns self for chaining)."""
        self._number = value
        return self

    def create_primary(self, disk: str) -> str:
        """Generate command creating one primary partition spanning the whole disk"""
        # new, primary, number, default first sector, default last sector, write
        answers = f"n\\np\\n{self._number}\\n\\n\\nw\\n"
        return f"printf '{answers}' | fdisk {shlex.quote(disk)} 2>&1"
