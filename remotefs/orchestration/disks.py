"""Data disk inventory and partition evaluation."""
from __future__ import annotations
from dataclasses import dataclass
from typing import List
from ..cli import partition_path
from ..libs.config import DisksConfig
from ..libs.logger import get_logger
from ..services.storage import StorageService
logger = get_logger(__name__)


@dataclass
class BlockDevice:
    """A data disk attached to this node."""
    path: str
    partitioned: bool = False

    @property
    def first_partition(self) -> str:
        return partition_path(self.path, 1)


@dataclass
class DiskInventory:
    """Data disks and which of them already carried a partition before this run."""
    disks: List[BlockDevice]
    skipped: List[BlockDevice]

    @property
    def count(self) -> int:
        return len(self.disks)

    @property
    def partitions(self) -> List[str]:
        return [disk.first_partition for disk in self.disks]


def discover_data_disks(storage: StorageService, disks_cfg: DisksConfig) -> List[BlockDevice]:
    """List data disks, ignoring the OS and ephemeral devices."""
    paths = storage.list_disks(disks_cfg.device_major, disks_cfg.excluded)
    logger.info("found %d data disks: %s", len(paths), " ".join(paths))
    return [BlockDevice(path) for path in paths]


def ensure_partitions(storage: StorageService, disks: List[BlockDevice]) -> DiskInventory:
    """Partition every disk that has no partition yet; partitioned disks are left alone."""
    skipped = []
    for disk in disks:
        if storage.partitions(disk.path):
            logger.info("%s: partition 1 found. Skipping partitioning.", disk.path)
            disk.partitioned = True
            skipped.append(disk)
            continue
        logger.info("%s: partition 1 not found. Partitioning %s.", disk.path, disk.path)
        storage.create_partition(disk.path)
        disk.partitioned = True
    return DiskInventory(disks=disks, skipped=skipped)


def build_inventory(storage: StorageService, disks_cfg: DisksConfig) -> DiskInventory:
    """Discover data disks and make sure each has its first partition."""
    return ensure_partitions(storage, discover_data_disks(storage, disks_cfg))
