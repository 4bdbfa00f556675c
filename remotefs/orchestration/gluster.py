"""
GlusterFS cluster bootstrap.

Every node of the peer list runs this independently. The first address in
the list is the leader: it probes the other peers, waits for them to join,
creates, configures and starts the volume. All other nodes only wait for the
volume to become visible. Finally every node mounts the volume through its
own address. The only coordination is polling gluster state; nothing here
talks to another node directly except the leader's peer probes.
"""
from __future__ import annotations
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple
from ..libs.config import GlusterFSConfig, WaitsConfig
from ..libs.errors import ConfigurationError, InvariantError
from ..libs.logger import get_logger
from ..libs.poller import wait_for
from ..services.gluster import GlusterService
from ..services.storage import StorageService
from .mount import STICKY_WORLD_WRITABLE
logger = get_logger(__name__)
DEFAULT_TRANSPORT = "tcp"


class PeerState(Enum):
    """Connectivity of a peer as seen from the leader"""
    UNPROBED = "unprobed"
    PROBING = "probing"
    PEERED = "peered"


class VolumeType(Enum):
    """Layout of the volume across bricks"""
    DISTRIBUTED = "distributed"
    REPLICATED = "replica"
    STRIPED = "stripe"
    CUSTOM = "custom"


class VolumeState(Enum):
    """Lifecycle of the volume during bootstrap"""
    ABSENT = "absent"
    CREATED = "created"
    STARTED = "started"


@dataclass
class ClusterNode:
    """One entry of the ordered peer list."""
    ip_address: str
    ordinal: int
    state: PeerState = PeerState.UNPROBED


@dataclass
class VolumeSpec:
    """Parsed "voltype,transport,key:value,..." server options."""
    name: str
    volume_type: VolumeType
    transport: str = DEFAULT_TRANSPORT
    options: List[Tuple[str, str]] = field(default_factory=list)
    # verbatim create argument for custom layouts, e.g. "replica 2"
    custom_argument: Optional[str] = None
    state: VolumeState = VolumeState.ABSENT


def is_leader(self_ip: str, peers: Sequence[str]) -> bool:
    """The first address of the peer list bootstraps the cluster; no election takes place."""
    return bool(peers) and peers[0] == self_ip


def cluster_nodes(peers: Sequence[str]) -> List[ClusterNode]:
    return [ClusterNode(ip_address=ip, ordinal=index) for index, ip in enumerate(peers)]


def parse_volume_options(server_options: str, volume_name: str) -> VolumeSpec:
    """
    Parse server options of the form voltype,transport,key:value,...
    e.g. "replica,tcp,performance.cache-size:1GB"
    """
    parts = [part.strip() for part in (server_options or "").split(",")]
    voltype = parts[0].lower() if parts and parts[0] else ""
    if not voltype:
        raise ConfigurationError("Volume type missing from server options")
    custom_argument = None
    try:
        volume_type = VolumeType(voltype)
        if volume_type == VolumeType.CUSTOM:
            raise ValueError(voltype)
    except ValueError:
        volume_type = VolumeType.CUSTOM
        custom_argument = voltype
    transport = parts[1].lower() if len(parts) > 1 and parts[1] else DEFAULT_TRANSPORT
    options = []
    for entry in parts[2:]:
        if not entry:
            continue
        key, sep, value = entry.partition(":")
        if not sep or not key:
            raise ConfigurationError(f"Invalid volume option '{entry}', expected key:value")
        options.append((key, value))
    return VolumeSpec(
        name=volume_name,
        volume_type=volume_type,
        transport=transport,
        options=options,
        custom_argument=custom_argument,
    )


def volume_create_arguments(spec: VolumeSpec, node_count: int) -> List[str]:
    """Layout arguments for volume create: replica/stripe use the node count as factor."""
    if spec.volume_type in (VolumeType.REPLICATED, VolumeType.STRIPED):
        return [spec.volume_type.value, str(node_count)]
    if spec.volume_type == VolumeType.CUSTOM:
        return spec.custom_argument.split()
    return []


def build_bricks(peers: Sequence[str], brick_location: str) -> List[str]:
    """One brick per node, in peer list order."""
    return [f"{ip}:{brick_location}" for ip in peers]


def client_fstab_entry(self_ip: str, volume_name: str, mountpath: str) -> str:
    return f"{self_ip}:/{volume_name} {mountpath} glusterfs _netdev,auto 0 2"


class GlusterBootstrap:  # pylint: disable=too-many-instance-attributes
    """Runs the bootstrap protocol for one node."""
    def __init__(
        self,
        gluster: GlusterService,
        storage: StorageService,
        gluster_cfg: GlusterFSConfig,
        waits: WaitsConfig,
        fstab_path: str = "/etc/fstab",
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.gluster = gluster
        self.storage = storage
        self.gluster_cfg = gluster_cfg
        self.waits = waits
        self.fstab_path = fstab_path
        self._sleep = sleep
        self._clock = clock

    def _wait(self, condition, interval, timeout, description):
        return wait_for(condition, interval, timeout, description, clock=self._clock, sleep=self._sleep)

    def probe_peer(self, node: ClusterNode):
        """Probe one peer until it reports peered; PollTimeout after the probe budget."""
        logger.info("Attempting to peer with %s", node.ip_address)
        node.state = PeerState.PROBING

        def attempt() -> bool:
            return self.gluster.node.ping(node.ip_address) and self.gluster.probe_peer(node.ip_address)

        self._wait(attempt, self.waits.peer_probe_interval, self.waits.peer_probe_timeout,
                   f"peer probe of {node.ip_address}")
        node.state = PeerState.PEERED
        logger.info("Peering successful with %s", node.ip_address)

    def wait_for_connections(self, node_count: int):
        """Block until exactly node_count - 1 peers are connected, then settle."""
        expected = node_count - 1
        logger.info("Waiting for %d peers to reach connected state...", expected)
        self._wait(lambda: self.gluster.connected_peer_count() == expected,
                   self.waits.peer_connect_interval, None, f"{expected} connected peers")
        logger.info("%d joined peering", expected)
        self._sleep(self.waits.peer_settle)

    def observe_volume(self, spec: VolumeSpec) -> VolumeState:
        """Record whether the volume is absent, created or already started."""
        if not self.gluster.volume_exists(spec.name):
            spec.state = VolumeState.ABSENT
        elif self.gluster.volume_started(spec.name):
            spec.state = VolumeState.STARTED
        else:
            spec.state = VolumeState.CREATED
        return spec.state

    def create_volume(self, spec: VolumeSpec, peers: Sequence[str]):
        """Create, configure and start the volume (leader only). Failures are fatal."""
        if spec.state == VolumeState.ABSENT:
            bricks = build_bricks(peers, self.gluster_cfg.brick_location)
            volume_args = volume_create_arguments(spec, len(peers))
            logger.info("Creating %s gluster volume %s (%s)", spec.volume_type.value, spec.name, " ".join(bricks))
            self.gluster.create_volume(spec.name, volume_args, spec.transport, bricks)
            spec.state = VolumeState.CREATED
        if spec.state == VolumeState.STARTED:
            return
        for key, value in spec.options:
            logger.info("Setting volume option %s %s", key, value)
            self.gluster.set_volume_option(spec.name, key, value)
        logger.info("Starting gluster volume %s", spec.name)
        self.gluster.start_volume(spec.name)
        spec.state = VolumeState.STARTED

    def bootstrap_leader(self, nodes: List[ClusterNode], spec: VolumeSpec):
        """Peer every other node, wait for convergence, then create the volume."""
        state = self.observe_volume(spec)
        if state == VolumeState.ABSENT:
            for node in nodes[1:]:
                self.probe_peer(node)
            self.wait_for_connections(len(nodes))
        else:
            logger.info("Gluster volume %s already exists (%s)", spec.name, state.value)
        self.create_volume(spec, [node.ip_address for node in nodes])

    def wait_for_volume(self, volume_name: str):
        """Poll until the volume is visible on this node, then allow sub-volumes to settle."""
        logger.info("Waiting for gluster volume %s", volume_name)
        self._wait(lambda: self.gluster.volume_exists(volume_name),
                   self.waits.volume_interval, self.waits.volume_timeout, f"gluster volume {volume_name}")
        logger.info("%s", self.gluster.volume_info(volume_name))
        self._sleep(self.waits.volume_settle)

    def mount_volume(self, self_ip: str, volume_name: str, mountpath: str):
        """Mount the volume through this node's own address."""
        self.storage.node.make_dirs(mountpath)
        entry = client_fstab_entry(self_ip, volume_name, mountpath)
        fstab = self.storage.node.read_file(self.fstab_path)
        if entry in fstab.splitlines():
            logger.info("%s already in fstab", mountpath)
        else:
            logger.info("Adding %s to fstab", mountpath)
            self.storage.node.append_line(self.fstab_path, entry)
        if self.storage.is_mountpoint(mountpath):
            logger.info("Gluster volume %s already mounted at %s", volume_name, mountpath)
        else:
            logger.info("Mounting gluster volume %s locally to %s", volume_name, mountpath)
            self._wait(lambda: self.storage.try_mount(mountpath), self.waits.mount_interval,
                       self.waits.mount_timeout, f"mount of gluster volume {volume_name} at {mountpath}")
        self.storage.node.chmod(mountpath, STICKY_WORLD_WRITABLE)

    def run(self, self_ip: str, peers: Sequence[str], server_options: str, mountpath: str) -> VolumeSpec:
        """Run the whole protocol for this node."""
        if not peers:
            raise ConfigurationError("Peer IPs are required for glusterfs")
        if self_ip not in peers:
            raise InvariantError(f"This node ({self_ip}) is not in the peer list {','.join(peers)}")
        if len(set(peers)) != len(peers):
            raise InvariantError(f"Duplicate addresses in peer list {','.join(peers)}")
        spec = parse_volume_options(server_options, self.gluster_cfg.volume_name)
        nodes = cluster_nodes(peers)
        if is_leader(self_ip, peers):
            logger.info("%s is the bootstrap leader of %d nodes", self_ip, len(nodes))
            self.bootstrap_leader(nodes, spec)
        else:
            logger.info("%s is a follower; leader is %s", self_ip, peers[0])
        self.wait_for_volume(spec.name)
        self.mount_volume(self_ip, spec.name, mountpath)
        return spec
