"""
Local Service - executes commands on this node
"""
import logging
import subprocess
import sys
from typing import Optional
logger = logging.getLogger(__name__)


class LocalService:
    """Service that executes shell commands on the local node"""
    def __init__(self, shell: str = "/bin/bash", default_timeout: int = 3600, verbose: bool = False):
        """
        Initialize local service
        Args:
            shell: Shell used to run command strings
            default_timeout: Command timeout in seconds when none is given
            verbose: Echo command output to stdout
        """
        self.shell = shell
        self.default_timeout = default_timeout
        self.verbose = verbose

    def connect(self) -> bool:
        """Nothing to connect for local execution"""
        return True

    def disconnect(self):
        """Nothing to disconnect for local execution"""

    def is_connected(self) -> bool:
        """Local execution is always available"""
        return True

    def execute(self, command: str, timeout: Optional[int] = None) -> tuple[Optional[str], Optional[int]]:
        """
        Execute command through the shell, stdout and stderr combined
        Args:
            command: Command to execute
            timeout: Command timeout in seconds
        Returns:
            Tuple of (output, exit_code); (None, None) when the command did not complete
        """
        exec_timeout = timeout if timeout else self.default_timeout
        logger.debug("Running: %s", command)
        try:
            completed = subprocess.run(
                [self.shell, "-c", command],
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=exec_timeout,
                check=False,
                text=True,
                errors="replace",
            )
        except subprocess.TimeoutExpired:
            logger.error("Command timeout after %ss - COMMAND FAILED: %s", exec_timeout, command)
            return None, None
        except OSError as exc:
            logger.error("Failed to run command %s: %s", command, exc)
            return None, None
        output = (completed.stdout or "").strip()
        if self.verbose and output:
            sys.stdout.write(output + "\n")
            sys.stdout.flush()
        return output, completed.returncode

    def __enter__(self):
        """Context manager entry"""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.disconnect()
