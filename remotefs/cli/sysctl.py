"""
Kernel network tuning wrapper
"""
from typing import Dict
from .base import CommandWrapper

TCP_TUNING: Dict[str, str] = {
    "net.core.rmem_default": "16777216",
    "net.core.wmem_default": "16777216",
    "net.core.rmem_max": "16777216",
    "net.core.wmem_max": "16777216",
    "net.core.netdev_max_backlog": "30000",
    "net.ipv4.tcp_max_syn_backlog": "80960",
    "net.ipv4.tcp_mem": "16777216 16777216 16777216",
    "net.ipv4.tcp_rmem": "4096 87380 16777216",
    "net.ipv4.tcp_wmem": "4096 65536 16777216",
    "net.ipv4.tcp_slow_start_after_idle": "0",
    "net.ipv4.tcp_tw_reuse": "1",
    "net.ipv4.tcp_abort_on_overflow": "1",
    "net.ipv4.route.flush": "1",
}


class Sysctl(CommandWrapper):
    """Wrapper for sysctl drop-in files"""
    @staticmethod
    def render(settings: Dict[str, str]) -> str:
        """Render key=value lines for a sysctl.d file"""
        return "".join(f"{key}={value}\n" for key, value in settings.items())

    @staticmethod
    def reload() -> str:
        """Generate command applying sysctl.d files"""
        return "service procps reload 2>&1"
