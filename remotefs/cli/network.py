"""
Network probe wrappers (ping, ip addr)
"""
import re
import shlex
from typing import Optional
from .base import CommandWrapper


class Ping(CommandWrapper):
    """Wrapper for ping liveness checks"""
    def __init__(self):
        """Initialize with default settings"""
        self._count: int = 2

    def count(self, value: int) -> "Ping":
        """Set number of echo requests (returns self for chaining)."""
        self._count = value
        return self

    def ping(self, host: str) -> str:
        """Generate command that exits 0 when host answers"""
        return f"ping -c {self._count} {shlex.quote(host)} > /dev/null 2>&1"


class IpAddr(CommandWrapper):
    """Wrapper for ip addr"""
    def __init__(self):
        """Initialize with default settings"""
        self._interface: str = "eth0"

    def interface(self, name: str) -> "IpAddr":
        """Set network interface (returns self for chaining)."""
        self._interface = name
        return self

    def list(self) -> str:
        """Generate command listing addresses of the interface"""
        return f"ip addr list {shlex.quote(self._interface)} 2>&1"

    @staticmethod
    def parse_ipv4(output: Optional[str]) -> Optional[str]:
        """First IPv4 address from "inet 10.0.0.4/24 ..." lines"""
        if not output:
            return None
        match = re.search(r"^\s*inet\s+(\d{1,3}(?:\.\d{1,3}){3})/", output, re.MULTILINE)
        return match.group(1) if match else None
