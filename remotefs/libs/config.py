"""
Configuration data model - class-based representation of the bootstrap flags
and the optional remotefs.yaml tunables
"""
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml
from .errors import ConfigurationError

SERVER_TYPES = ("nfs", "glusterfs")


@dataclass
class ProvisionConfig:  # pylint: disable=too-many-instance-attributes
    """Per-invocation settings (the command line flags)"""
    attach_disks: bool = False
    rebalance: bool = False
    filesystem: str = ""
    peer_ips: List[str] = field(default_factory=list)
    mountpath: str = ""
    optimize_tcp: bool = False
    server_options: str = ""
    premium_storage: bool = False
    raid_level: int = -1
    server_type: str = ""
    offset: bool = False
    # Address of this node, detected from the network interface when unset
    ip_address: Optional[str] = None
    interface: str = "eth0"

    @property
    def raid_requested(self) -> bool:
        """Whether any RAID/pool level was requested (-1 means unset)."""
        return self.raid_level >= 0

    def validate(self):
        """Raise ConfigurationError on values no step can work with."""
        if not self.filesystem:
            raise ConfigurationError("Filesystem type is required")
        if self.server_type not in SERVER_TYPES:
            raise ConfigurationError(f"server_type {self.server_type} not supported.")
        if not self.attach_disks and not self.mountpath:
            raise ConfigurationError("Mount path is required")
        if self.server_type == "glusterfs" and not self.attach_disks and not self.peer_ips:
            raise ConfigurationError("Peer IPs are required for glusterfs")


@dataclass
class DisksConfig:
    """Data disk discovery settings"""
    # lsblk major device number filter (8 = SCSI disks)
    device_major: int = 8
    # OS and ephemeral (resource) disks
    excluded: List[str] = field(default_factory=lambda: ["/dev/sda", "/dev/sdb"])


@dataclass
class GlusterFSConfig:
    """GlusterFS configuration"""
    volume_name: str = "gv0"
    brick_mountpath: str = "/gluster/brick"
    brick_dir: str = "brick0"
    service: str = "glusterfs-server"
    package: str = "glusterfs-server"

    @property
    def brick_location(self) -> str:
        """Directory inside the brick mount handed to gluster as the brick."""
        return f"{self.brick_mountpath.rstrip('/')}/{self.brick_dir}"


@dataclass
class NFSConfig:
    """NFS server configuration"""
    service: str = "nfs-kernel-server.service"
    package: str = "nfs-kernel-server"
    exports_file: str = "/etc/exports"
    export_options: str = "rw,sync,root_squash,no_subtree_check"
    mountd_unit: str = "/lib/systemd/system/nfs-mountd.service"


@dataclass
class WaitsConfig:  # pylint: disable=too-many-instance-attributes
    """Wait/retry configuration, all values in seconds"""
    peer_probe_timeout: int = 900
    peer_probe_interval: float = 1
    peer_connect_interval: float = 1
    peer_settle: float = 5
    volume_timeout: int = 900
    volume_interval: float = 2
    volume_settle: float = 5
    mount_timeout: int = 300
    mount_interval: float = 1
    command_timeout: int = 3600


@dataclass
class PathsConfig:
    """Well-known system paths"""
    fstab: str = "/etc/fstab"
    sysctl_file: str = "/etc/sysctl.d/60-azure-batch-shipyard-remotefs.conf"
    mdstat: str = "/proc/mdstat"
    md_default_target: str = "/dev/md0"


@dataclass
class SSHConfig:
    """SSH configuration for running against a remote node"""
    connect_timeout: int = 10
    batch_mode: bool = True
    default_exec_timeout: int = 3600
    read_buffer_size: int = 4096
    poll_interval: float = 0.05
    default_username: str = "root"
    look_for_keys: bool = True
    allow_agent: bool = True
    sudo: bool = False
    verbose: bool = False


def _section(cls, data: Optional[Dict[str, Any]], name: str):
    """Build a dataclass section from a dict, rejecting unknown keys."""
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration section '{name}' must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown keys in '{name}': {', '.join(unknown)}")
    return cls(**data)


@dataclass
class RemoteFSConfig:  # pylint: disable=too-many-instance-attributes
    """Main configuration class"""
    provision: ProvisionConfig = field(default_factory=ProvisionConfig)
    disks: DisksConfig = field(default_factory=DisksConfig)
    glusterfs: GlusterFSConfig = field(default_factory=GlusterFSConfig)
    nfs: NFSConfig = field(default_factory=NFSConfig)
    waits: WaitsConfig = field(default_factory=WaitsConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    ssh: SSHConfig = field(default_factory=SSHConfig)
    # Remote node to provision over SSH (user@host), None runs locally
    host: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], verbose: bool = False) -> "RemoteFSConfig":
        """Create RemoteFSConfig from dictionary (loaded from YAML)"""
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration root must be a mapping")
        provision_data = dict(data.get("provision") or {})
        if isinstance(provision_data.get("peer_ips"), str):
            provision_data["peer_ips"] = split_peer_ips(provision_data["peer_ips"])
        ssh = _section(SSHConfig, data.get("ssh"), "ssh")
        ssh.verbose = verbose or ssh.verbose
        return cls(
            provision=_section(ProvisionConfig, provision_data, "provision"),
            disks=_section(DisksConfig, data.get("disks"), "disks"),
            glusterfs=_section(GlusterFSConfig, data.get("glusterfs"), "glusterfs"),
            nfs=_section(NFSConfig, data.get("nfs"), "nfs"),
            waits=_section(WaitsConfig, data.get("waits"), "waits"),
            paths=_section(PathsConfig, data.get("paths"), "paths"),
            ssh=ssh,
            host=data.get("host"),
        )

    def apply_args(self, args) -> "RemoteFSConfig":
        """Override values with command line flags that were given"""
        prov = self.provision
        if getattr(args, "attach_disks", False):
            prov.attach_disks = True
        if getattr(args, "rebalance", False):
            prov.rebalance = True
        if getattr(args, "filesystem", None):
            prov.filesystem = args.filesystem.lower()
        if getattr(args, "peer_ips", None):
            prov.peer_ips = split_peer_ips(args.peer_ips.lower())
        if getattr(args, "mountpath", None):
            prov.mountpath = args.mountpath
        if getattr(args, "optimize_tcp", False):
            prov.optimize_tcp = True
        if getattr(args, "server_options", None):
            prov.server_options = args.server_options
        if getattr(args, "premium_storage", False):
            prov.premium_storage = True
        if getattr(args, "raid_level", None) is not None:
            prov.raid_level = args.raid_level
        if getattr(args, "server_type", None):
            prov.server_type = args.server_type.lower()
        if getattr(args, "offset", False):
            prov.offset = True
        if getattr(args, "ip_address", None):
            prov.ip_address = args.ip_address
        if getattr(args, "interface", None):
            prov.interface = args.interface
        if getattr(args, "host", None):
            self.host = args.host
        return self


def split_peer_ips(value: str) -> List[str]:
    """Split a comma separated peer list, keeping order and dropping blanks."""
    return [ip.strip() for ip in value.split(",") if ip.strip()]


def load_config(config_file: Optional[Path] = None, verbose: bool = False) -> RemoteFSConfig:
    """Load configuration from a YAML file, or defaults when no file is given"""
    if config_file is None:
        return RemoteFSConfig.from_dict({}, verbose=verbose)
    config_path = Path(config_file)
    if not config_path.exists():
        raise ConfigurationError(f"Configuration file {config_path} not found")
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as err:
        raise ConfigurationError(f"Error loading configuration: {err}") from err
    return RemoteFSConfig.from_dict(data, verbose=verbose)
