"""Provision command: the per-node bootstrap sequence."""
from __future__ import annotations
import sys
import time
import traceback
from dataclasses import dataclass, field
from typing import Callable, Optional, TYPE_CHECKING
from ..libs.command import Command
from ..libs.errors import BootstrapError, ConfigurationError
from ..libs.logger import get_logger
from ..orchestration import (
    FilesystemTarget,
    GlusterBootstrap,
    MountReconciler,
    NFSExporter,
    NodePreparer,
    RaidEngine,
    build_inventory,
    format_target,
    parse_volume_options,
    resize_filesystem,
    resolve_single_disk_target,
)
from ..orchestration.filesystem import require_supported
from ..services.gluster import GlusterService
from ..services.storage import StorageService
if TYPE_CHECKING:
    from ..services.node import NodeService
logger = get_logger(__name__)


@dataclass
class Provision(Command):
    """Prepares the node, builds the storage and publishes it as nfs or glusterfs."""
    node: Optional["NodeService"] = field(default=None)
    sleep: Callable[[float], None] = field(default=time.sleep)
    clock: Callable[[], float] = field(default=time.monotonic)

    def run(self, args):
        """Execute the bootstrap, exiting with status 1 on any bootstrap failure."""
        try:
            self._log_settings()
            self.provision()
        except BootstrapError as err:
            logger.error("Error during provisioning: %s", err)
            logger.debug(traceback.format_exc())
            sys.exit(err.exit_code)

    def _log_settings(self):
        prov = self.cfg.provision
        logger.info("Parameters:")
        logger.info("  Attach mode: %s", prov.attach_disks)
        logger.info("  Rebalance filesystem: %s", prov.rebalance)
        logger.info("  Filesystem: %s", prov.filesystem)
        logger.info("  Mountpath: %s", prov.mountpath)
        logger.info("  Premium storage: %s", prov.premium_storage)
        logger.info("  RAID level: %d", prov.raid_level)
        logger.info("  Server type: %s", prov.server_type)
        logger.info("  Server options: %s", prov.server_options)
        logger.info("  Optimize TCP: %s", prov.optimize_tcp)
        logger.info("  Peer IPs: %s", ",".join(prov.peer_ips))
        logger.info("  VM offset: %s", prov.offset)

    @property
    def local_mountpath(self) -> str:
        """Where the local filesystem is mounted: the brick mount for glusterfs."""
        if self.cfg.provision.server_type == "glusterfs":
            return self.cfg.glusterfs.brick_mountpath
        return self.cfg.provision.mountpath

    def _self_ip(self) -> str:
        prov = self.cfg.provision
        if prov.ip_address:
            return prov.ip_address
        ip_address = self.node.ip_address(prov.interface)
        if not ip_address:
            raise ConfigurationError(f"Could not determine the address of interface {prov.interface}")
        logger.info("Detected address %s on %s", ip_address, prov.interface)
        return ip_address

    def _resolve_target(self, storage: StorageService, inventory) -> FilesystemTarget:
        prov = self.cfg.provision
        if not prov.raid_requested:
            return resolve_single_disk_target(storage, inventory, prov.filesystem)
        engine = RaidEngine(storage, self.cfg.paths.md_default_target, self.cfg.paths.mdstat)
        result = engine.reconcile(inventory, prov.raid_level, prov.filesystem, self.local_mountpath, prov.rebalance)
        return result.to_target()

    def provision(self) -> FilesystemTarget:
        """Run every step in order; each one raises BootstrapError on failure."""
        if self.node is None:
            raise ConfigurationError("No node service configured")
        prov = self.cfg.provision
        prov.validate()
        require_supported(prov.filesystem)
        storage = StorageService(self.node)
        self_ip = None
        if prov.server_type == "glusterfs" and not prov.attach_disks:
            # malformed -o fails before any disk is touched
            parse_volume_options(prov.server_options, self.cfg.glusterfs.volume_name)
            self_ip = self._self_ip()
        if not prov.attach_disks:
            NodePreparer(self.node, self.cfg).run()
        inventory = build_inventory(storage, self.cfg.disks)
        target = format_target(storage, self._resolve_target(storage, inventory))
        if not prov.attach_disks:
            gluster = prov.server_type == "glusterfs"
            MountReconciler(storage, self.cfg.paths.fstab).reconcile(
                target,
                self.local_mountpath,
                prov.premium_storage,
                brick_location=self.cfg.glusterfs.brick_location if gluster else None,
                sticky=not gluster,
            )
        resize_filesystem(storage, target, self.local_mountpath)
        if not prov.attach_disks:
            self._setup_server(storage, self_ip)
        logger.info("Provisioning complete")
        return target

    def _setup_server(self, storage: StorageService, self_ip: Optional[str]):
        prov = self.cfg.provision
        if prov.server_type == "nfs":
            NFSExporter(self.node, self.cfg.nfs).reconcile(prov.mountpath)
        elif prov.server_type == "glusterfs":
            bootstrap = GlusterBootstrap(
                GlusterService(self.node),
                storage,
                self.cfg.glusterfs,
                self.cfg.waits,
                fstab_path=self.cfg.paths.fstab,
                sleep=self.sleep,
                clock=self.clock,
            )
            bootstrap.run(self_ip, prov.peer_ips, prov.server_options, prov.mountpath)
        else:
            raise ConfigurationError(f"server_type {prov.server_type} not supported.")
