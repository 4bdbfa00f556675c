"""Mount table and active mount reconciliation for the local filesystem."""
from __future__ import annotations
from typing import Optional
from ..cli.mkfs import BTRFS
from ..libs.errors import InvariantError
from ..libs.logger import get_logger
from ..services.storage import StorageService
from .filesystem import FilesystemTarget
logger = get_logger(__name__)
STICKY_WORLD_WRITABLE = "1777"


def mount_options(filesystem: str, premium_storage: bool) -> str:
    """
    fstab options for the storage tier.
    Premium disks sit behind a read-only host cache, so write barriers are
    disabled; standard disks get discard so freed blocks stop being billed.
    """
    if premium_storage:
        extra = ",nobarrier" if filesystem == BTRFS else ",barrier=0"
    else:
        extra = ",discard"
    return f"defaults,noatime{extra}"


def fstab_entry(uuid: str, mountpath: str, filesystem: str, premium_storage: bool) -> str:
    return f"UUID={uuid} {mountpath} {filesystem} {mount_options(filesystem, premium_storage)} 0 2"


def has_uuid_entry(fstab: str, uuid: str) -> bool:
    """Whether some fstab line already mounts this UUID."""
    prefix = f"UUID={uuid}"
    return any(line.startswith(prefix) for line in fstab.splitlines())


class MountReconciler:
    """Ensures a single fstab entry per filesystem UUID and an active mount."""
    def __init__(self, storage: StorageService, fstab_path: str = "/etc/fstab"):
        self.storage = storage
        self.fstab_path = fstab_path

    def ensure_fstab_entry(self, target: FilesystemTarget, mountpath: str, premium_storage: bool) -> bool:
        """Append the fstab line for target unless one exists. Returns True when a line was added."""
        if not target.uuid:
            raise InvariantError("Target UUID not populated!")
        if has_uuid_entry(self.storage.node.read_file(self.fstab_path), target.uuid):
            logger.info("fstab already has an entry for UUID %s", target.uuid)
            return False
        logger.info("Adding %s to mountpoint %s to %s", target.uuid, mountpath, self.fstab_path)
        self.storage.node.append_line(
            self.fstab_path, fstab_entry(target.uuid, mountpath, target.filesystem, premium_storage)
        )
        return True

    def reconcile(self, target: FilesystemTarget, mountpath: str, premium_storage: bool,
                  brick_location: Optional[str] = None, sticky: bool = False) -> bool:
        """
        Mount target at mountpath.
        Args:
            target: Resolved filesystem target, uuid required unless already mounted
            mountpath: Local mount path (the brick mount path for glusterfs)
            premium_storage: Storage tier of the data disks
            brick_location: Brick directory to create below the mount (glusterfs)
            sticky: Make the mount world-writable with the sticky bit (nfs)
        Returns:
            True when a mount was performed, False when mountpath was already mounted
        """
        if self.storage.is_mountpoint(mountpath):
            logger.info("%s is already mounted", mountpath)
            mounted = False
        else:
            self.ensure_fstab_entry(target, mountpath, premium_storage)
            self.storage.node.make_dirs(mountpath)
            self.storage.mount(mountpath)
            if brick_location:
                self.storage.node.make_dirs(brick_location)
            mounted = True
        if sticky:
            self.storage.node.chmod(mountpath, STICKY_WORLD_WRITABLE)
        line = self.storage.mount_line(mountpath)
        if line:
            logger.info("%s", line)
        return mounted
