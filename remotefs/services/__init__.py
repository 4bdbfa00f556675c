"""
Services module - command executors and typed service wrappers
"""
from .local import LocalService
from .ssh import SSHService
from .node import NodeService
from .storage import FilesystemInfo, StorageService
from .gluster import GlusterService
__all__ = ["LocalService", "SSHService", "NodeService", "FilesystemInfo", "StorageService", "GlusterService"]
