"""
Base command wrapper with error parsing and command generation
"""
import re
import logging
from enum import Enum
from dataclasses import dataclass
from typing import List, Optional
logger = logging.getLogger(__name__)


class ErrorType(Enum):
    """Error types that can be detected in command output"""
    NONE = "none"
    TIMEOUT = "timeout"
    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    DEVICE_BUSY = "device_busy"
    INVALID_ARGUMENT = "invalid_argument"
    RESOURCE_EXHAUSTED = "resource_exhausted"
    NETWORK_ERROR = "network_error"
    PEER_ERROR = "peer_error"
    COMMAND_FAILED = "command_failed"


@dataclass
class CommandResult:
    """Structured result from command execution"""
    success: bool
    output: Optional[str]
    error_type: ErrorType
    error_message: Optional[str]
    exit_code: Optional[int]

    def __bool__(self):
        """Allow truthiness check: True when command succeeded."""
        return self.success

    @property
    def failed(self) -> bool:
        """Convenience property: True when command failed."""
        return not self.success

    @property
    def has_error(self) -> bool:
        """Whether command parsing detected an error."""
        return self.error_type != ErrorType.NONE

    @property
    def lines(self) -> List[str]:
        """Non-empty output lines with surrounding whitespace removed."""
        if not self.output:
            return []
        return [line.strip() for line in self.output.splitlines() if line.strip()]


class CommandWrapper:  # pylint: disable=too-few-public-methods
    """Base wrapper for CLI commands - generates command strings and parses results"""
    def __init__(self) -> None:
        """Prevent direct instantiation; subclasses should be static collections."""
        raise RuntimeError("CommandWrapper should not be instantiated")
    # Error patterns: (pattern, error_type, description), first match wins
    ERROR_PATTERNS = [
        (r"timeout|timed out", ErrorType.TIMEOUT, "Command timed out"),
        (
            r"permission denied|operation not permitted|must be super-user|only root",
            ErrorType.PERMISSION_DENIED,
            "Permission denied",
        ),
        (
            r"device or resource busy|is mounted|already mounted|in use by",
            ErrorType.DEVICE_BUSY,
            "Device busy",
        ),
        (
            r"already exists|already in peer list|already part of|already a member",
            ErrorType.ALREADY_EXISTS,
            "Resource already exists",
        ),
        (
            r"peer probe: failed|peer rejected|is not connected|transport endpoint is not connected",
            ErrorType.PEER_ERROR,
            "Cluster peer error",
        ),
        (
            r"no route to host|network is unreachable|unknown host|name or service not known|100% packet loss",
            ErrorType.NETWORK_ERROR,
            "Network error",
        ),
        (
            r"no space left|no free space|out of memory",
            ErrorType.RESOURCE_EXHAUSTED,
            "Resource exhausted",
        ),
        (
            r"invalid (?:argument|option|parameter)|unrecognized option|bad option|usage:",
            ErrorType.INVALID_ARGUMENT,
            "Invalid argument",
        ),
        (
            r"not found|no such file|no such device|does not exist|cannot find",
            ErrorType.NOT_FOUND,
            "Resource not found",
        ),
    ]

    @classmethod
    def parse_result(cls, output: Optional[str], exit_code: Optional[int] = None) -> CommandResult:
        """
        Parse command output and return structured result
        Args:
            output: Command output (stdout/stderr combined)
            exit_code: Exit code, None when the command never completed
        Returns:
            CommandResult object
        """
        if exit_code is None:
            return CommandResult(
                success=False,
                output=output,
                error_type=ErrorType.TIMEOUT,
                error_message="Command did not complete (timeout or connection failure)",
                exit_code=None,
            )
        if exit_code == 0:
            return CommandResult(True, output, ErrorType.NONE, None, 0)
        error_type, error_msg = cls._parse_error(output)
        return CommandResult(
            success=False,
            output=output,
            error_type=error_type,
            error_message=error_msg or f"Command failed with exit code {exit_code}",
            exit_code=exit_code,
        )

    @classmethod
    def _parse_error(cls, output: Optional[str]) -> tuple[ErrorType, Optional[str]]:
        """Classify a failed command's output by the first matching error pattern."""
        if not output:
            return ErrorType.COMMAND_FAILED, None
        sanitized = cls._strip_ansi(output)
        for pattern, error_type, description in cls.ERROR_PATTERNS:
            if re.search(pattern, sanitized, re.IGNORECASE):
                return error_type, cls._extract_error_message(sanitized, pattern) or description
        return ErrorType.COMMAND_FAILED, cls._extract_error_message(sanitized, None)

    @staticmethod
    def _strip_ansi(output: str) -> str:
        """Remove terminal escape sequences (pty sessions add them)."""
        return re.sub(r"\x1B[@-_][0-?]*[ -/]*[@-~]", "", output)

    @staticmethod
    def _extract_error_message(output: str, pattern: Optional[str]) -> Optional[str]:
        """Return the matching line, or the last line, truncated to 200 characters"""
        lines = [line.strip() for line in output.splitlines() if line.strip()]
        if not lines:
            return None
        msg = lines[-1]
        if pattern:
            for line in lines:
                if re.search(pattern, line, re.IGNORECASE):
                    msg = line
                    break
        if len(msg) > 200:
            msg = msg[:197] + "..."
        return msg
