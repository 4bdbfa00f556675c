"""
Library modules shared by the provisioning steps:
- config: configuration data model classes
- errors: exception hierarchy mapped to process exit codes
- logger: logging configuration and utilities
- poller: bounded polling helper used by every wait loop
- command: base class for command objects
"""
from . import config
from . import errors
from . import logger
from . import poller
__all__ = ["config", "errors", "logger", "poller"]
