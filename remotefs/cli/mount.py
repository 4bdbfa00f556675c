"""
mount/mountpoint command wrapper
"""
import shlex
from typing import Optional
from .base import CommandWrapper


class Mount(CommandWrapper):
    """Wrapper for mount commands"""
    def __init__(self):
        """Initialize with default settings"""
        self._quiet: bool = True

    def quiet(self, value: bool = True) -> "Mount":
        """Use -q for mountpoint checks (returns self for chaining)."""
        self._quiet = value
        return self

    def mount(self, path: str) -> str:
        """Generate command mounting path using its fstab entry"""
        return f"mount {shlex.quote(path)} 2>&1"

    def is_mountpoint(self, path: str) -> str:
        """Generate command that exits 0 only when path is an active mountpoint"""
        flag = " -q" if self._quiet else ""
        return f"mountpoint{flag} {shlex.quote(path)} 2>&1"

    def list_mounts(self) -> str:
        """Generate command listing active mounts"""
        return "mount 2>&1"

    @staticmethod
    def parse_mount_line(output: Optional[str], path: str) -> Optional[str]:
        """Return the active mount line for path ("<src> on <path> type ...")"""
        if not output:
            return None
        needle = f" on {path.rstrip('/') or '/'} "
        for line in output.splitlines():
            if needle in line:
                return line.strip()
        return None
