"""Bootstrap commands"""
from .provision import Provision
__all__ = ["Provision"]
