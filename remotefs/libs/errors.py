"""
Exception hierarchy for the provisioning run.

Every step raises a subclass of BootstrapError; the provision command catches
it once at the top, logs it and exits with ``exit_code``.
"""
from typing import Optional

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class BootstrapError(RuntimeError):
    """Raised when provisioning cannot continue."""
    exit_code: int = EXIT_FAILURE


class ConfigurationError(BootstrapError):
    """Unsupported filesystem/server type or option combination."""


class InvariantError(BootstrapError):
    """Observed state contradicts what the run requires (missing uuid, ambiguous array)."""


class CommandError(BootstrapError):
    """A command that is not allowed to fail returned a failure."""

    def __init__(self, description: str, command: str, exit_code: Optional[int] = None, output: Optional[str] = None):
        self.description = description
        self.command = command
        self.command_exit_code = exit_code
        self.output = output
        tail = (output or "").strip()[-300:]
        message = f"{description} failed (exit code {exit_code}): {command}"
        if tail:
            message += f"\n{tail}"
        super().__init__(message)


class PollTimeout(BootstrapError):
    """A bounded wait ran out of its wall-clock budget."""

    def __init__(self, description: str, timeout: float, elapsed: float):
        self.description = description
        self.timeout = timeout
        self.elapsed = elapsed
        super().__init__(f"Timed out after {elapsed:.0f}s (budget {timeout:.0f}s) waiting for {description}")
