"""Base class for bootstrap commands resolved from the DI container."""
from dataclasses import dataclass
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from .config import RemoteFSConfig


@dataclass
class Command:
    """A command holds the merged configuration and runs against parsed arguments."""
    cfg: "RemoteFSConfig"

    def run(self, args):
        raise NotImplementedError
