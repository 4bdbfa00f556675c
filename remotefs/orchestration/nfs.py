"""NFS export reconciler."""
import logging
from ..cli import Exportfs, SystemCtl
from ..libs.config import NFSConfig
from ..services.node import NodeService
logger = logging.getLogger(__name__)


class NFSExporter:
    """Publishes the mounted path through the kernel NFS server."""
    def __init__(self, node: NodeService, nfs_cfg: NFSConfig):
        self.node = node
        self.nfs_cfg = nfs_cfg

    def export_line(self, mountpath: str) -> str:
        return Exportfs().options(self.nfs_cfg.export_options).export_line(mountpath)

    def reconcile(self, mountpath: str) -> bool:
        """Add the export when missing and make sure the server runs. Returns True when an export was added."""
        exports = self.node.read_file(self.nfs_cfg.exports_file)
        added = False
        if Exportfs.has_export(exports, mountpath):
            logger.info("%s already exported", mountpath)
        else:
            logger.info("Adding export for %s", mountpath)
            self.node.append_line(self.nfs_cfg.exports_file, self.export_line(mountpath))
            self.node.check(SystemCtl().service(self.nfs_cfg.service).reload(), f"Reload {self.nfs_cfg.service}")
            listing = self.node.run(Exportfs().list_verbose())
            logger.info("%s", listing.output)
            added = True
        self.node.ensure_service_started(self.nfs_cfg.service)
        return added
