"""
GlusterFS command wrapper with fluent API
"""
import logging
import shlex
from typing import List, Optional
from .base import CommandWrapper
logger = logging.getLogger(__name__)
CONNECTED_STATE = "State: Peer in Cluster (Connected)"
STARTED_STATUS = "Status: Started"


class Gluster(CommandWrapper):
    """Wrapper for GlusterFS commands with fluent API"""
    def __init__(self):
        """Initialize with default settings"""
        self._gluster_cmd: str = "gluster"
        self._script_mode: bool = True

    def gluster_cmd(self, cmd: str) -> "Gluster":
        """Set gluster command path (returns self for chaining)."""
        self._gluster_cmd = cmd
        return self

    def script_mode(self, value: bool = True) -> "Gluster":
        """Answer interactive confirmations automatically (returns self for chaining)."""
        self._script_mode = value
        return self

    def _base(self) -> str:
        mode = " --mode=script" if self._script_mode else ""
        return f"{self._gluster_cmd}{mode}"

    def peer_probe(self, host: str) -> str:
        """Generate command to probe a peer node"""
        return f"{self._base()} peer probe {shlex.quote(host)} 2>&1"

    def peer_status(self) -> str:
        """Generate command to get peer status"""
        return f"{self._base()} peer status 2>&1"

    def volume_create(self, volume_name: str, volume_args: List[str], transport: str, bricks: List[str]) -> str:
        """Generate command to create a GlusterFS volume"""
        parts = [self._base(), "volume", "create", shlex.quote(volume_name)]
        parts.extend(volume_args)
        parts.extend(["transport", shlex.quote(transport)])
        parts.extend(shlex.quote(brick) for brick in bricks)
        parts.append("2>&1")
        return " ".join(parts)

    def volume_set(self, volume_name: str, key: str, value: str) -> str:
        """Generate command to set one volume option"""
        return f"{self._base()} volume set {shlex.quote(volume_name)} {shlex.quote(key)} {shlex.quote(value)} 2>&1"

    def volume_start(self, volume_name: str) -> str:
        """Generate command to start a GlusterFS volume"""
        return f"{self._base()} volume start {shlex.quote(volume_name)} 2>&1"

    def volume_info(self, volume_name: str) -> str:
        """Generate command to get volume information"""
        return f"{self._base()} volume info {shlex.quote(volume_name)} 2>&1"

    @staticmethod
    def parse_connected_peers(output: Optional[str]) -> int:
        """Count peers reported as connected members of the trusted pool"""
        if not output:
            return 0
        return sum(1 for line in output.splitlines() if line.strip() == CONNECTED_STATE)

    @staticmethod
    def parse_volume_started(output: Optional[str]) -> bool:
        """Whether "volume info" reports the volume as started"""
        if not output:
            return False
        return any(line.strip() == STARTED_STATUS for line in output.splitlines())
