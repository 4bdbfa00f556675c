"""
Sed command wrapper for in-place line rewrites
"""
import re
import shlex
from .base import CommandWrapper


def _escape_single_quotes(value: str) -> str:
    return value.replace("'", "'\"'\"'")


def _escape_pattern(value: str, delimiter: str) -> str:
    """Escape BRE metacharacters so value matches literally."""
    escaped = re.sub(r"([\\.*\[\]^$])", r"\\\1", value)
    return escaped.replace(delimiter, f"\\{delimiter}")


def _escape_replacement(value: str, delimiter: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("&", "\\&")
    return escaped.replace(delimiter, f"\\{delimiter}")


class Sed(CommandWrapper):
    """Wrapper for sed commands with fluent API"""
    def __init__(self):
        """Initialize with default settings"""
        self._delimiter: str = "/"
        self._anchor: bool = False

    def delimiter(self, value: str) -> "Sed":
        """Set delimiter (returns self for chaining)."""
        self._delimiter = value
        return self

    def line_start(self, value: bool = True) -> "Sed":
        """Only match at the start of a line (returns self for chaining)."""
        self._anchor = value
        return self

    def replace(self, path: str, search: str, replacement: str) -> str:
        """Generate sed command replacing literal text in a file."""
        anchor = "^" if self._anchor else ""
        d = self._delimiter
        expression = (
            f"s{d}{anchor}{_escape_pattern(search, d)}{d}"
            f"{_escape_replacement(replacement, d)}{d}g"
        )
        return f"sed -i -e '{_escape_single_quotes(expression)}' {shlex.quote(path)} 2>&1"
