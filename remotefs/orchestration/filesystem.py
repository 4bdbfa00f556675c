"""Filesystem target resolution, formatting and post-grow resize."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
from ..cli.mkfs import is_supported
from ..libs.errors import ConfigurationError, InvariantError
from ..libs.logger import get_logger
from ..services.storage import StorageService
from .disks import DiskInventory
logger = get_logger(__name__)


@dataclass
class FilesystemTarget:
    """Device that carries (or will carry) the mounted filesystem."""
    device: Optional[str]
    filesystem: str
    uuid: Optional[str] = None
    # True when a filesystem or array already exists; such targets are never formatted
    formatted: bool = False
    resize_required: bool = False


def require_supported(filesystem: str):
    """Unknown filesystem types fail before any disk is touched."""
    if not is_supported(filesystem):
        raise ConfigurationError(f"Unknown filesystem: {filesystem}")


def resolve_single_disk_target(storage: StorageService, inventory: DiskInventory, filesystem: str) -> FilesystemTarget:
    """
    Target for a node without RAID: the first partition of its only data disk.
    A partition that already carries a filesystem is reused as is.
    """
    if inventory.count != 1:
        raise ConfigurationError(
            f"Found {inventory.count} data disks without a RAID level; exactly one disk is supported"
        )
    disk = inventory.disks[0]
    target = FilesystemTarget(device=disk.first_partition, filesystem=filesystem)
    if disk in inventory.skipped:
        info = storage.filesystem_info(target.device, filesystems_only=True)
        if info.filesystem:
            logger.info("Existing %s filesystem found on %s", info.filesystem, target.device)
            target.uuid = info.uuid
            target.formatted = True
    return target


def format_target(storage: StorageService, target: FilesystemTarget) -> FilesystemTarget:
    """Create the filesystem when the target is blank, then read its new UUID."""
    if target.formatted:
        logger.info("Skipping format of %s: existing filesystem/array detected", target.device)
        return target
    if not target.device:
        raise InvariantError("Target not specified for format")
    require_supported(target.filesystem)
    logger.info("Creating filesystem on %s.", target.device)
    storage.format(target.device, target.filesystem)
    target.uuid = storage.filesystem_uuid(target.device)
    target.formatted = True
    logger.info("Filesystem %s created on %s with UUID %s", target.filesystem, target.device, target.uuid)
    return target


def resize_filesystem(storage: StorageService, target: FilesystemTarget, mountpath: str):
    """Grow the mounted filesystem after its array gained members."""
    if not target.resize_required:
        return
    require_supported(target.filesystem)
    if not target.device:
        raise InvariantError("Target not specified for resize")
    logger.info("Resizing filesystem on %s at %s.", target.device, mountpath)
    storage.resize_filesystem(target.filesystem, target.device, mountpath)
    target.resize_required = False
