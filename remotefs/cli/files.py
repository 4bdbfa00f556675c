"""
File and filesystem command wrappers with fluent API
"""
import shlex
from .base import CommandWrapper


def _escape_single_quotes(value: str) -> str:
    return value.replace("'", "'\"'\"'")


class FileOps(CommandWrapper):
    """Wrapper for common file operations with fluent API"""
    def __init__(self):
        """Initialize with default settings"""
        self._append: bool = False
        self._parents: bool = True

    def append(self, value: bool = True) -> "FileOps":
        """Set append mode for write (returns self for chaining)."""
        self._append = value
        return self

    def parents(self, value: bool = True) -> "FileOps":
        """Create parent directories with mkdir (returns self for chaining)."""
        self._parents = value
        return self

    def write(self, path: str, content: str) -> str:
        """Generate command that writes literal content to a file via printf."""
        sanitized = content.replace("\\", "\\\\").replace("%", "%%")
        sanitized = _escape_single_quotes(sanitized)
        redir = ">>" if self._append else ">"
        return f"printf '{sanitized}' {redir} {shlex.quote(path)} 2>&1"

    def read(self, path: str) -> str:
        """Generate command printing a file, empty output when it does not exist."""
        return f"cat {shlex.quote(path)} 2>/dev/null || true"

    def chmod(self, path: str, mode: str) -> str:
        """Generate command to change permissions on path."""
        return f"chmod {mode} {shlex.quote(path)} 2>&1"

    def mkdir(self, path: str) -> str:
        """Generate command to create directory."""
        flag = "-p " if self._parents else ""
        return f"mkdir {flag}{shlex.quote(path)} 2>&1"

    def is_non_empty(self, path: str) -> str:
        """Generate command to check that a file exists and has content."""
        return f"test -s {shlex.quote(path)} && echo exists || echo not_found"

    def cat_kernel_file(self, path: str) -> str:
        """Generate command printing a /proc or /sys file."""
        return f"cat {shlex.quote(path)} 2>&1"

    @staticmethod
    def parse_exists(output) -> bool:
        """Parse output of is_non_empty"""
        return bool(output) and output.strip() == "exists"
