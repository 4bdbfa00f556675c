"""
Storage Service - typed accessors over disk, RAID, filesystem and mount tools
"""
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional
from ..cli import Blkid, Btrfs, Fdisk, FileOps, Lsblk, Mdadm, Mkfs, Mount, Partprobe
from .node import NodeService
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilesystemInfo:
    """Superblock tags of a device"""
    uuid: Optional[str]
    filesystem: Optional[str]


class StorageService:
    """Service for block device, RAID and filesystem operations on a node"""
    def __init__(self, node: NodeService):
        self.node = node

    # disks and partitions
    def list_disks(self, major: int, excluded: Iterable[str]) -> List[str]:
        """Whole disks of a device class, excluded paths removed"""
        result = self.node.check(Lsblk().major(major).list_disks(), "List block devices")
        return Lsblk.parse_disks(result.output, excluded)

    def partitions(self, disk: str) -> List[int]:
        """Partition numbers present on disk, empty when unpartitioned"""
        result = self.node.run(Partprobe().summary(disk))
        return Partprobe.parse_partitions(result.output) if result else []

    def create_partition(self, disk: str):
        """Create a single primary partition spanning disk"""
        self.node.check(Fdisk().create_primary(disk), f"Partition {disk}")

    # filesystem superblocks
    def filesystem_info(self, device: str, filesystems_only: bool = False) -> FilesystemInfo:
        """UUID and type of the filesystem on device (both None when blank)"""
        blkid = Blkid().usage("filesystem" if filesystems_only else None)
        result = self.node.run(blkid.probe(device))
        if result.failed:
            return FilesystemInfo(None, None)
        return FilesystemInfo(Blkid.parse_uuid(result.output), Blkid.parse_type(result.output))

    def filesystem_uuid(self, device: str) -> Optional[str]:
        """UUID read from the superblock of device"""
        return self.filesystem_info(device).uuid

    # md arrays
    def md_detail_scan(self) -> Optional[List[str]]:
        """Arrays listed by "mdadm --detail --scan", None when the scan itself failed"""
        result = self.node.run(Mdadm().detail_scan())
        return Mdadm.parse_detail_scan(result.output) if result else None

    def md_devices(self) -> List[str]:
        """md block devices present under /dev"""
        return Mdadm.parse_block_devices(self.node.run(Mdadm().find_arrays()).output)

    def is_md_member(self, partition: str) -> bool:
        """Whether partition carries an md superblock; probe failures count as not a member"""
        return self.node.run(Mdadm().examine(partition)).success

    def create_md_array(self, target: str, level: int, devices: List[str]):
        self.node.check(Mdadm().create(target, level, devices), f"Create RAID-{level} array {target}")

    def add_md_devices(self, target: str, devices: List[str]):
        self.node.check(Mdadm().add(target, devices), f"Add devices to {target}")

    def grow_md_array(self, target: str, raid_devices: int):
        self.node.check(Mdadm().grow(target, raid_devices), f"Grow {target}")

    # btrfs pools
    def is_btrfs_member(self, partition: str) -> bool:
        """Whether partition holds btrfs; scan failures count as not a member"""
        return self.node.run(Btrfs().device_scan(partition)).success

    def create_btrfs_pool(self, devices: List[str]):
        self.node.check(Btrfs().data_profile("raid0").mkfs(devices), "Create btrfs pool")

    def add_btrfs_devices(self, devices: List[str], mountpath: str):
        self.node.check(Btrfs().device_add(devices, mountpath), f"Add devices to {mountpath}")

    def resize_btrfs_max(self, mountpath: str):
        self.node.check(Btrfs().resize_max(mountpath), f"Resize btrfs at {mountpath}")

    def balance_btrfs(self, mountpath: str):
        self.node.check(Btrfs().balance(mountpath), f"Rebalance btrfs at {mountpath}")

    def diagnostics(self, filesystem: str, target: Optional[str], mdstat: str) -> str:
        """Pool/array state for the log"""
        if filesystem == "btrfs":
            return self.node.run(Btrfs().show()).output or ""
        parts = [self.node.run(FileOps().cat_kernel_file(mdstat)).output or ""]
        if target:
            parts.append(self.node.run(Mdadm().detail(target)).output or "")
        return "\n".join(part for part in parts if part)

    # formatting
    def format(self, device: str, filesystem: str):
        self.node.check(Mkfs().format(device, filesystem), f"Format {device} as {filesystem}")

    def resize_filesystem(self, filesystem: str, device: str, mountpath: str):
        self.node.check(Mkfs().resize(filesystem, device, mountpath), f"Resize filesystem on {device} at {mountpath}")

    # mounts
    def is_mountpoint(self, path: str) -> bool:
        return self.node.run(Mount().is_mountpoint(path)).success

    def mount(self, path: str):
        self.node.check(Mount().mount(path), f"Mount {path}")

    def try_mount(self, path: str) -> bool:
        """Mount attempt used inside polling loops"""
        return self.node.run(Mount().mount(path)).success

    def mount_line(self, path: str) -> Optional[str]:
        return Mount.parse_mount_line(self.node.run(Mount().list_mounts()).output, path)
