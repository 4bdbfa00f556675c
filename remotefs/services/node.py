"""
Node Service - runs wrapper-generated commands on a node and returns typed results
"""
import logging
from typing import Optional, Protocol
from ..cli import CommandResult, CommandWrapper, FileOps, IpAddr, Ping, SystemCtl
from ..libs.errors import CommandError
logger = logging.getLogger(__name__)


class Executor(Protocol):  # pylint: disable=too-few-public-methods
    """Anything with execute(command, timeout) -> (output, exit_code): LocalService, SSHService"""
    def execute(self, command: str, timeout: Optional[int] = None) -> tuple[Optional[str], Optional[int]]:
        ...


class NodeService:
    """Service that executes commands on one node through an executor"""
    def __init__(self, executor: Executor, default_timeout: Optional[int] = None):
        """
        Initialize node service
        Args:
            executor: LocalService or SSHService
            default_timeout: Per-command timeout in seconds
        """
        self.executor = executor
        self.default_timeout = default_timeout

    def run(self, command: str, timeout: Optional[int] = None) -> CommandResult:
        """Execute a command and parse the result; never raises on failure"""
        output, exit_code = self.executor.execute(command, timeout=timeout or self.default_timeout)
        result = CommandWrapper.parse_result(output, exit_code)
        if result.failed:
            logger.debug("Command failed (%s): %s - %s", exit_code, command, result.error_message)
        return result

    def check(self, command: str, description: str, timeout: Optional[int] = None) -> CommandResult:
        """Execute a command that must succeed, raising CommandError otherwise"""
        result = self.run(command, timeout=timeout)
        if result.failed:
            raise CommandError(description, command, result.exit_code, result.output)
        return result

    def read_file(self, path: str) -> str:
        """Contents of a file, empty when it does not exist"""
        result = self.run(FileOps().read(path))
        return result.output or ""

    def file_has_content(self, path: str) -> bool:
        """Whether a file exists and is not empty"""
        return FileOps.parse_exists(self.run(FileOps().is_non_empty(path)).output)

    def append_line(self, path: str, line: str):
        """Append one line to a file"""
        self.check(FileOps().append().write(path, line + "\n"), f"Append to {path}")

    def write_file(self, path: str, content: str):
        """Replace a file's content"""
        self.check(FileOps().write(path, content), f"Write {path}")

    def make_dirs(self, path: str):
        """mkdir -p"""
        self.check(FileOps().mkdir(path), f"Create directory {path}")

    def chmod(self, path: str, mode: str):
        """Change permissions of path"""
        self.check(FileOps().chmod(path, mode), f"chmod {mode} {path}")

    def ip_address(self, interface: str) -> Optional[str]:
        """IPv4 address of a network interface"""
        result = self.run(IpAddr().interface(interface).list())
        return IpAddr.parse_ipv4(result.output) if result else None

    def ping(self, host: str) -> bool:
        """Whether host answers echo requests"""
        return self.run(Ping().ping(host)).success

    def service_running(self, service: str) -> bool:
        """systemctl status exits 0 only for running units"""
        return self.run(SystemCtl().service(service).status()).success

    def ensure_service_started(self, service: str):
        """Start a service unless it is already running"""
        if self.service_running(service):
            logger.info("Service %s is running", service)
            return
        logger.info("Starting service %s", service)
        self.check(SystemCtl().service(service).start(), f"Start {service}")
