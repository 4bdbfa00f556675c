"""
RAID assembly and resize engine.

Decisions are made by classify(), a pure function over a RaidObservation, so
the create/grow/skip/reject logic can be exercised without touching disks.
RaidEngine gathers the observation, executes the chosen action and resolves
the filesystem target that the formatter and mount reconciler work on.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Tuple, Type
from ..cli.mkfs import BTRFS
from ..libs.errors import BootstrapError, ConfigurationError, InvariantError
from ..libs.logger import get_logger
from ..services.storage import StorageService
from .disks import DiskInventory
from .filesystem import FilesystemTarget
logger = get_logger(__name__)


class ProvisioningAction(Enum):
    """What a provisioning step decided to do"""
    SKIP = "skip"
    CREATE = "create"
    GROW = "grow"
    FORMAT = "format"
    REJECT_UNSUPPORTED = "reject_unsupported"


@dataclass(frozen=True)
class RaidObservation:  # pylint: disable=too-many-instance-attributes
    """Everything classify() needs to know about the disks and any existing array."""
    level: int
    filesystem: str
    total_disks: int
    # partitions that are not yet array/pool members
    non_members: Tuple[str, ...] = ()
    members: Tuple[str, ...] = ()
    # "mdadm --detail --scan" reported at least one array
    array_present: bool = False
    # md device found during the pre-existing scan
    pre_existing_target: Optional[str] = None

    @property
    def pooling(self) -> bool:
        return self.filesystem == BTRFS

    @property
    def non_member_count(self) -> int:
        return len(self.non_members)


@dataclass(frozen=True)
class RaidPlan:
    """Decision produced by classify()"""
    action: ProvisioningAction
    reason: str
    devices: Tuple[str, ...] = ()
    fatal: Optional[Type[BootstrapError]] = None

    def raise_if_rejected(self):
        if self.action == ProvisioningAction.REJECT_UNSUPPORTED:
            raise (self.fatal or ConfigurationError)(self.reason)


def _reject(reason: str, fatal: Type[BootstrapError] = ConfigurationError) -> RaidPlan:
    return RaidPlan(ProvisioningAction.REJECT_UNSUPPORTED, reason, fatal=fatal)


def classify(obs: RaidObservation) -> RaidPlan:
    """Choose the RAID action for the observed disk set."""
    if obs.level < 0:
        return RaidPlan(ProvisioningAction.SKIP, "No RAID level requested")
    if obs.pooling and obs.level != 0:
        return _reject(f"{BTRFS} with non-RAID 0 is not supported.")
    if obs.total_disks <= 0:
        return _reject("No data disks found for RAID setup")
    count = obs.non_member_count
    if count == 0:
        return RaidPlan(ProvisioningAction.SKIP, "No disks require RAID setup")
    if count == obs.total_disks:
        if not obs.pooling and obs.array_present:
            if obs.pre_existing_target is None:
                return _reject("Could not determine pre-existing md target", InvariantError)
            return RaidPlan(
                ProvisioningAction.SKIP,
                f"Not creating a new array since pre-existing md target found: {obs.pre_existing_target}",
            )
        return RaidPlan(
            ProvisioningAction.CREATE,
            f"{obs.total_disks} data disks require RAID setup",
            devices=obs.non_members,
        )
    if 0 < count < obs.total_disks:
        if obs.level != 0:
            return _reject(f"Cannot resize with RAID level of {obs.level}.")
        return RaidPlan(
            ProvisioningAction.GROW,
            f"Mismatch of non-RAID disks {count} to total disks {obs.total_disks}.",
            devices=obs.non_members,
        )
    return _reject(f"Mismatch of non-RAID disks {count} to total disks {obs.total_disks}.")


@dataclass
class RaidArray:  # pylint: disable=too-many-instance-attributes
    """An md array or btrfs pool built over the first partitions of the data disks."""
    target: Optional[str]
    level: int
    filesystem: str
    members: List[str] = field(default_factory=list)
    pre_existing: bool = False
    uuid: Optional[str] = None


@dataclass
class RaidResult:
    """Outcome of RaidEngine.reconcile()"""
    array: RaidArray
    plan: RaidPlan
    # md array was created here and needs a filesystem
    needs_format: bool = False
    # md array grew; the mounted filesystem must be resized
    resized: bool = False

    def to_target(self) -> FilesystemTarget:
        return FilesystemTarget(
            device=self.array.target,
            filesystem=self.array.filesystem,
            uuid=self.array.uuid,
            formatted=not self.needs_format,
            resize_required=self.resized,
        )


class RaidEngine:
    """Observes array/pool state, applies the classified action and resolves the target."""
    def __init__(self, storage: StorageService, md_default_target: str = "/dev/md0", mdstat: str = "/proc/mdstat"):
        self.storage = storage
        self.md_default_target = md_default_target
        self.mdstat = mdstat

    def _find_existing_array(self, array: RaidArray, scan: Optional[List[str]]):
        """Record the first assembled md device as the pre-existing target."""
        if scan is None:
            return
        devices = self.storage.md_devices()
        if not devices:
            logger.info("No pre-existing md target could be found")
            return
        array.target = devices[0]
        array.pre_existing = True
        array.uuid = self.storage.filesystem_info(array.target, filesystems_only=True).uuid
        logger.info("Existing array found: %s", array.target)

    def _is_member(self, filesystem: str, partition: str) -> bool:
        if filesystem == BTRFS:
            return self.storage.is_btrfs_member(partition)
        return self.storage.is_md_member(partition)

    def observe(self, inventory: DiskInventory, level: int, filesystem: str) -> Tuple[RaidArray, RaidObservation]:
        """Scan for an existing array and split partitions into members and non-members."""
        array = RaidArray(target=None, level=level, filesystem=filesystem, members=inventory.partitions)
        scan = None
        if filesystem != BTRFS:
            scan = self.storage.md_detail_scan()
            self._find_existing_array(array, scan)
            if not array.target:
                array.target = self.md_default_target
                logger.info("Setting default target: %s", array.target)
        non_members, members = [], []
        for partition in inventory.partitions:
            (members if self._is_member(filesystem, partition) else non_members).append(partition)
        obs = RaidObservation(
            level=level,
            filesystem=filesystem,
            total_disks=inventory.count,
            non_members=tuple(non_members),
            members=tuple(members),
            array_present=bool(scan),
            pre_existing_target=array.target if array.pre_existing else None,
        )
        return array, obs

    def reconcile(self, inventory: DiskInventory, level: int, filesystem: str,
                  mountpath: str, rebalance: bool = False) -> RaidResult:
        """Bring the array/pool to cover every data disk."""
        if filesystem == BTRFS and level != 0:
            # rejected before any device is scanned
            classify(RaidObservation(level=level, filesystem=filesystem, total_disks=inventory.count)).raise_if_rejected()
        array, obs = self.observe(inventory, level, filesystem)
        plan = classify(obs)
        if plan.action == ProvisioningAction.CREATE and filesystem != BTRFS:
            # an array may have been assembled since the first scan (prior partial run)
            scan = self.storage.md_detail_scan()
            plan = classify(replace(obs, array_present=bool(scan)))
        plan.raise_if_rejected()
        if filesystem != BTRFS and plan.action != ProvisioningAction.CREATE:
            self._require_filesystem(array)
        logger.info("%s", plan.reason)
        result = RaidResult(array=array, plan=plan)
        if plan.action == ProvisioningAction.CREATE:
            self._create(result)
        elif plan.action == ProvisioningAction.GROW:
            self._grow(result, inventory.count, mountpath, rebalance)
        diagnostics = self.storage.diagnostics(filesystem, array.target if filesystem != BTRFS else None, self.mdstat)
        if diagnostics:
            logger.info("%s", diagnostics)
        if filesystem == BTRFS:
            array.target = array.members[0] if array.members else None
            if array.members:
                array.uuid = self.storage.filesystem_uuid(array.members[0])
        return result

    def _require_filesystem(self, array: RaidArray):
        """An md array that is kept or grown must already carry a filesystem."""
        if not array.uuid:
            array.uuid = self.storage.filesystem_info(array.target, filesystems_only=True).uuid
        if not array.uuid:
            raise InvariantError(f"Array {array.target} exists but carries no filesystem")

    def _create(self, result: RaidResult):
        array, devices = result.array, list(result.plan.devices)
        if array.filesystem == BTRFS:
            self.storage.create_btrfs_pool(devices)
            return
        logger.info("Creating RAID-%d array %s over %s", array.level, array.target, " ".join(devices))
        self.storage.create_md_array(array.target, array.level, devices)
        result.needs_format = True

    def _grow(self, result: RaidResult, total_disks: int, mountpath: str, rebalance: bool):
        array, devices = result.array, list(result.plan.devices)
        if array.filesystem == BTRFS:
            logger.info("Adding devices %s to %s", " ".join(devices), mountpath)
            self.storage.add_btrfs_devices(devices, mountpath)
            logger.info("Resizing filesystem at %s.", mountpath)
            self.storage.resize_btrfs_max(mountpath)
            if rebalance:
                logger.info("Rebalancing btrfs on %s.", mountpath)
                self.storage.balance_btrfs(mountpath)
                logger.info("Rebalance of btrfs on %s complete.", mountpath)
            return
        logger.info("Adding devices %s to %s", " ".join(devices), array.target)
        self.storage.add_md_devices(array.target, devices)
        logger.info("Growing array %s to a total of %d devices", array.target, total_disks)
        self.storage.grow_md_array(array.target, total_disks)
        result.resized = True
