"""
APT-GET command wrapper with fluent API
"""
import logging
import shlex
from typing import Dict, List, Optional
from .base import CommandWrapper
logger = logging.getLogger(__name__)


class Apt(CommandWrapper):
    """Wrapper for apt-get commands with fluent API - generates command strings"""
    def __init__(self):
        """Initialize with default settings"""
        self._quiet: bool = True
        self._no_install_recommends: bool = True
        self._options: Optional[Dict[str, str]] = None

    def quiet(self, value: bool = True) -> "Apt":
        """Set quiet mode (returns self for chaining)."""
        self._quiet = value
        return self

    def no_install_recommends(self, value: bool = True) -> "Apt":
        """Don't install recommended packages (returns self for chaining)."""
        self._no_install_recommends = value
        return self

    def options(self, opts: Dict[str, str]) -> "Apt":
        """Set apt options (returns self for chaining)."""
        self._options = opts
        return self

    def _build_command(self, action: str, flags: List[str], packages: Optional[List[str]] = None) -> str:
        """Build a non-interactive apt-get command"""
        parts = ["DEBIAN_FRONTEND=noninteractive", "apt-get", action]
        parts.extend(flags)
        if self._quiet:
            parts.append("-q")
        for key, value in (self._options or {}).items():
            parts.append(f"-o {key}={shlex.quote(str(value))}")
        if packages:
            parts.extend(shlex.quote(package) for package in packages)
        parts.append("2>&1")
        return " ".join(parts)

    def update(self) -> str:
        """Generate command to update package lists"""
        return self._build_command("update", [])

    def install(self, packages: List[str]) -> str:
        """Generate command to install packages"""
        flags = ["-y"]
        if self._no_install_recommends:
            flags.append("--no-install-recommends")
        return self._build_command("install", flags, packages)
