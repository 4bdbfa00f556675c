"""
Orchestration module - provisioning steps composed from the node services
"""
from .disks import BlockDevice, DiskInventory, build_inventory
from .filesystem import FilesystemTarget, format_target, resize_filesystem, resolve_single_disk_target
from .raid import ProvisioningAction, RaidEngine, RaidObservation, RaidPlan, RaidResult, classify
from .mount import MountReconciler, fstab_entry, mount_options
from .gluster import GlusterBootstrap, VolumeSpec, is_leader, parse_volume_options
from .nfs import NFSExporter
from .prep import NodePreparer
__all__ = [
    "BlockDevice",
    "DiskInventory",
    "build_inventory",
    "FilesystemTarget",
    "format_target",
    "resize_filesystem",
    "resolve_single_disk_target",
    "ProvisioningAction",
    "RaidEngine",
    "RaidObservation",
    "RaidPlan",
    "RaidResult",
    "classify",
    "MountReconciler",
    "fstab_entry",
    "mount_options",
    "GlusterBootstrap",
    "VolumeSpec",
    "is_leader",
    "parse_volume_options",
    "NFSExporter",
    "NodePreparer",
]
