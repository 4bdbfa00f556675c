"""
NFS export table wrapper
"""
from typing import Optional
from .base import CommandWrapper


class Exportfs(CommandWrapper):
    """Wrapper for exportfs and /etc/exports lines"""
    def __init__(self):
        """Initialize with default settings"""
        self._client: str = "*"
        self._options: str = "rw,sync,root_squash,no_subtree_check"

    def client(self, value: str) -> "Exportfs":
        """Set allowed client spec (returns self for chaining)."""
        self._client = value
        return self

    def options(self, value: str) -> "Exportfs":
        """Set export options (returns self for chaining)."""
        self._options = value
        return self

    def export_line(self, path: str) -> str:
        """Build the /etc/exports line for path"""
        return f"{path} {self._client}({self._options},mountpoint={path})"

    def list_verbose(self) -> str:
        """Generate command listing active exports"""
        return "exportfs -v 2>&1"

    @staticmethod
    def has_export(exports: Optional[str], path: str) -> bool:
        """Whether an exports table has a line exporting exactly path"""
        if not exports:
            return False
        return any(line.split()[0] == path for line in exports.splitlines() if line.strip())
