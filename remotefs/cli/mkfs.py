"""
Filesystem creation and resize command wrapper
"""
import shlex
from .base import CommandWrapper

BTRFS = "btrfs"


def is_ext_family(filesystem: str) -> bool:
    """ext2/ext3/ext4 share mkfs.<type> and resize2fs."""
    return filesystem.startswith("ext")


def is_supported(filesystem: str) -> bool:
    """Whether a filesystem type can be formatted and resized."""
    return filesystem == BTRFS or is_ext_family(filesystem)


class Mkfs(CommandWrapper):
    """Wrapper for mkfs/resize commands with fluent API"""
    def __init__(self):
        """Initialize with default settings"""
        # Percentage of blocks reserved for root on ext filesystems
        self._reserved_blocks: int = 0

    def reserved_blocks(self, percent: int) -> "Mkfs":
        """Set ext reserved block percentage (returns self for chaining)."""
        self._reserved_blocks = percent
        return self

    def format(self, device: str, filesystem: str) -> str:
        """Generate command creating a filesystem of the given type on device"""
        if filesystem == BTRFS:
            return f"mkfs.btrfs {shlex.quote(device)} 2>&1"
        if is_ext_family(filesystem):
            return f"mkfs.{filesystem} -m {self._reserved_blocks} {shlex.quote(device)} 2>&1"
        raise ValueError(f"Unknown filesystem: {filesystem}")

    def resize(self, filesystem: str, device: str, mountpath: str) -> str:
        """Generate command growing a mounted filesystem to its device size (resize2fs takes the device)"""
        if filesystem == BTRFS:
            return f"btrfs filesystem resize max {shlex.quote(mountpath)} 2>&1"
        if is_ext_family(filesystem):
            return f"resize2fs {shlex.quote(device)} 2>&1"
        raise ValueError(f"Unknown filesystem: {filesystem}")
