"""
CLI command wrappers with error parsing and structured results
"""
from .base import CommandResult, ErrorType, CommandWrapper
from .apt import Apt
from .blkid import Blkid
from .btrfs import Btrfs
from .exportfs import Exportfs
from .files import FileOps
from .gluster import Gluster
from .lsblk import Lsblk
from .mdadm import Mdadm
from .mkfs import Mkfs
from .mount import Mount
from .network import IpAddr, Ping
from .partition import Fdisk, Partprobe, partition_path
from .sed import Sed
from .sysctl import Sysctl, TCP_TUNING
from .systemctl import SystemCtl
__all__ = [
    "CommandResult",
    "ErrorType",
    "CommandWrapper",
    "Apt",
    "Blkid",
    "Btrfs",
    "Exportfs",
    "FileOps",
    "Gluster",
    "Lsblk",
    "Mdadm",
    "Mkfs",
    "Mount",
    "IpAddr",
    "Ping",
    "Fdisk",
    "Partprobe",
    "partition_path",
    "Sed",
    "Sysctl",
    "TCP_TUNING",
    "SystemCtl",
]
