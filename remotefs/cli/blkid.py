"""
blkid command wrapper for reading filesystem superblocks
"""
import shlex
from typing import Dict, Optional
from .base import CommandWrapper


class Blkid(CommandWrapper):
    """Wrapper for blkid with fluent API"""
    def __init__(self):
        """Initialize with default settings"""
        self._usage: Optional[str] = None

    def usage(self, value: Optional[str]) -> "Blkid":
        """Restrict probing to a usage class, e.g. filesystem (returns self for chaining)."""
        self._usage = value
        return self

    def probe(self, device: str) -> str:
        """Generate command printing KEY=value tags of a device"""
        usage = f" -u {self._usage}" if self._usage else ""
        return f"blkid{usage} -o export {shlex.quote(device)} 2>&1"

    @staticmethod
    def parse_tags(output: Optional[str]) -> Dict[str, str]:
        """Parse "-o export" output into a tag dictionary"""
        tags: Dict[str, str] = {}
        if not output:
            return tags
        for line in output.splitlines():
            key, sep, value = line.strip().partition("=")
            if sep and key.isupper():
                tags[key] = value.strip().strip('"')
        return tags

    @staticmethod
    def parse_uuid(output: Optional[str]) -> Optional[str]:
        """Filesystem UUID, or None when the device carries no filesystem"""
        return Blkid.parse_tags(output).get("UUID") or None

    @staticmethod
    def parse_type(output: Optional[str]) -> Optional[str]:
        """Filesystem type, or None when the device carries no filesystem"""
        return Blkid.parse_tags(output).get("TYPE") or None
