"""
Systemctl command wrapper with fluent API
"""
import logging
import shlex
from typing import Optional
from .base import CommandWrapper
logger = logging.getLogger(__name__)


class SystemCtl(CommandWrapper):
    """Wrapper for systemctl commands with fluent API"""
    def __init__(self):
        """Initialize with default settings"""
        self._service: Optional[str] = None
        self._no_pager: bool = True

    def service(self, name: str) -> "SystemCtl":
        """Set service name (returns self for chaining)."""
        self._service = name
        return self

    def no_pager(self, value: bool = True) -> "SystemCtl":
        """Use --no-pager flag (returns self for chaining)."""
        self._no_pager = value
        return self

    def _unit(self) -> str:
        if not self._service:
            raise ValueError("Service name must be set")
        return shlex.quote(self._service)

    def enable(self) -> str:
        """Generate command to enable a service"""
        return f"systemctl enable {self._unit()} 2>&1"

    def start(self) -> str:
        """Generate command to start a service"""
        return f"systemctl start {self._unit()} 2>&1"

    def reload(self) -> str:
        """Generate command to reload a service"""
        return f"systemctl reload {self._unit()} 2>&1"

    def status(self) -> str:
        """Generate command to get service status (exit code 0 when running)"""
        pager_flag = " --no-pager" if self._no_pager else ""
        return f"systemctl status {self._unit()}{pager_flag} 2>&1"
