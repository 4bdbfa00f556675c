"""
Node preparation: kernel network tuning and installation of the file server
packages and services.
"""
import logging
from ..cli import Apt, Sed, Sysctl, SystemCtl, TCP_TUNING
from ..libs.config import RemoteFSConfig
from ..libs.errors import ConfigurationError
from ..services.node import NodeService
logger = logging.getLogger(__name__)
# nfs-mountd.service ships ordered after the network only and starts before rpcbind
MOUNTD_BROKEN_AFTER = "After=network.target local-fs.target"
MOUNTD_FIXED_AFTER = "After=rpcbind.target"


class NodePreparer:
    """Installs and starts the server software for the configured server type."""
    def __init__(self, node: NodeService, cfg: RemoteFSConfig):
        self.node = node
        self.cfg = cfg

    def tune_tcp(self) -> bool:
        """Write the sysctl drop-in unless it already has content."""
        sysctl_file = self.cfg.paths.sysctl_file
        if self.node.file_has_content(sysctl_file):
            logger.info("%s already present", sysctl_file)
            return False
        logger.info("Writing TCP tuning to %s", sysctl_file)
        self.node.write_file(sysctl_file, Sysctl.render(TCP_TUNING))
        self.node.check(Sysctl.reload(), "Reload sysctl settings")
        return True

    def patch_mountd_unit(self) -> bool:
        unit = self.cfg.nfs.mountd_unit
        content = self.node.read_file(unit)
        if not any(line.startswith(MOUNTD_BROKEN_AFTER) for line in content.splitlines()):
            return False
        logger.info("Patching %s", unit)
        self.node.check(
            Sed().line_start().replace(unit, MOUNTD_BROKEN_AFTER, MOUNTD_FIXED_AFTER),
            f"Patch {unit}",
        )
        return True

    def install_server(self):
        """apt-get install the server package, then enable and start its unit."""
        server_type = self.cfg.provision.server_type
        if server_type == "nfs":
            package, service = self.cfg.nfs.package, self.cfg.nfs.service
        elif server_type == "glusterfs":
            package, service = self.cfg.glusterfs.package, self.cfg.glusterfs.service
        else:
            raise ConfigurationError(f"server_type {server_type} not supported.")
        timeout = self.cfg.waits.command_timeout
        logger.info("Updating package lists")
        self.node.check(Apt().update(), "apt-get update", timeout=timeout)
        logger.info("Installing %s", package)
        self.node.check(Apt().install([package]), f"Install {package}", timeout=timeout)
        if server_type == "nfs":
            self.patch_mountd_unit()
        self.node.check(SystemCtl().daemon_reload(), "systemctl daemon-reload")
        self.node.check(SystemCtl().service(service).enable(), f"Enable {service}")
        self.node.ensure_service_started(service)

    def run(self):
        if self.cfg.provision.optimize_tcp:
            self.tune_tcp()
        self.install_server()
