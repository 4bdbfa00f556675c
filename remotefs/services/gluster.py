"""
Gluster Service - typed accessors over the gluster CLI
"""
import logging
from typing import List
from ..cli import Gluster
from .node import NodeService
logger = logging.getLogger(__name__)


class GlusterService:
    """Service for cluster peer and volume operations on a node"""
    def __init__(self, node: NodeService, gluster_cmd: str = "gluster"):
        self.node = node
        self.gluster_cmd = gluster_cmd

    def _gluster(self) -> Gluster:
        return Gluster().gluster_cmd(self.gluster_cmd)

    def probe_peer(self, host: str) -> bool:
        """One peer probe attempt; failures are expected while the peer boots"""
        result = self.node.run(self._gluster().peer_probe(host))
        if result:
            logger.info("%s", result.output)
        else:
            logger.debug("Peer probe of %s failed: %s", host, result.error_message)
        return result.success

    def connected_peer_count(self) -> int:
        """Number of peers this node sees as connected cluster members"""
        result = self.node.run(self._gluster().peer_status())
        return Gluster.parse_connected_peers(result.output) if result else 0

    def volume_exists(self, volume_name: str) -> bool:
        """Whether the volume is visible to this node"""
        return self.node.run(self._gluster().volume_info(volume_name)).success

    def volume_info(self, volume_name: str) -> str:
        return self.node.run(self._gluster().volume_info(volume_name)).output or ""

    def volume_started(self, volume_name: str) -> bool:
        result = self.node.run(self._gluster().volume_info(volume_name))
        return bool(result) and Gluster.parse_volume_started(result.output)

    def create_volume(self, volume_name: str, volume_args: List[str], transport: str, bricks: List[str]):
        result = self.node.check(
            self._gluster().volume_create(volume_name, volume_args, transport, bricks),
            f"Create gluster volume {volume_name}",
        )
        logger.info("%s", result.output)

    def set_volume_option(self, volume_name: str, key: str, value: str):
        self.node.check(
            self._gluster().volume_set(volume_name, key, value),
            f"Set option {key} on {volume_name}",
        )

    def start_volume(self, volume_name: str):
        result = self.node.check(self._gluster().volume_start(volume_name), f"Start gluster volume {volume_name}")
        logger.info("%s", result.output)
