"""
SSH Service - runs the provisioning commands on a remote node
"""
import base64
import logging
import shlex
import sys
import time
from pathlib import Path
from typing import Optional
import paramiko
from ..libs.config import SSHConfig
logger = logging.getLogger(__name__)


class SSHService:
    """Service that manages an SSH connection and command execution"""
    def __init__(self, host: str, ssh_config: SSHConfig):
        """
        Initialize SSH service
        Args:
            host: SSH host (format: user@host or just host)
            ssh_config: SSH configuration
        """
        self.host = host
        self.ssh_config = ssh_config
        self._client: Optional[paramiko.SSHClient] = None
        self._connected = False
        if "@" in host:
            self.username, self.hostname = host.split("@", 1)
        else:
            self.username = ssh_config.default_username
            self.hostname = host

    def _load_private_key(self):
        """Load the first readable default private key, None when there is none"""
        for key_path, key_class in (
            (Path.home() / ".ssh" / "id_ed25519", paramiko.Ed25519Key),
            (Path.home() / ".ssh" / "id_rsa", paramiko.RSAKey),
        ):
            if not key_path.exists():
                continue
            try:
                return key_class.from_private_key_file(str(key_path))
            except (paramiko.SSHException, OSError) as exc:
                logger.warning("Failed to load private key %s: %s", key_path, exc)
        return None

    def connect(self) -> bool:
        """
        Establish SSH connection
        Returns:
            True if connection successful, False otherwise
        """
        if self.is_connected():
            return True
        client = paramiko.SSHClient()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        connect_kwargs = {
            "hostname": self.hostname,
            "username": self.username,
            "timeout": self.ssh_config.connect_timeout,
            "look_for_keys": self.ssh_config.look_for_keys,
            "allow_agent": self.ssh_config.allow_agent,
        }
        pkey = self._load_private_key()
        if pkey:
            connect_kwargs["pkey"] = pkey
        try:
            client.connect(**connect_kwargs)
        except paramiko.AuthenticationException as exc:
            logger.error("SSH authentication failed to %s: %s", self.host, exc)
            return False
        except (paramiko.SSHException, OSError) as exc:
            logger.error("SSH connection error to %s: %s", self.host, exc)
            return False
        self._client = client
        self._connected = True
        logger.info("SSH connection established to %s@%s", self.username, self.hostname)
        return True

    def disconnect(self):
        """Close SSH connection"""
        if self._client:
            try:
                self._client.close()
            finally:
                self._client = None
                self._connected = False
            logger.debug("SSH connection closed to %s", self.host)

    def is_connected(self) -> bool:
        """Check if SSH connection is active"""
        if not self._connected or not self._client:
            return False
        transport = self._client.get_transport()
        return transport is not None and transport.is_active()

    def _wrap_sudo(self, command: str) -> str:
        """Run command through a root shell when the login user is not root"""
        if "\n" in command:
            encoded = base64.b64encode(command.encode("utf-8")).decode("ascii")
            return f"sudo -n bash -c 'echo {encoded} | base64 -d | bash'"
        return f"sudo -n bash -c {shlex.quote(command)}"

    def execute(self, command: str, timeout: Optional[int] = None) -> tuple[Optional[str], Optional[int]]:
        """
        Execute command via SSH connection
        Args:
            command: Command to execute
            timeout: Seconds without output before the command is abandoned
        Returns:
            Tuple of (output, exit_code); (None, None) on timeout or connection failure
        """
        if not self.connect():
            logger.error("Cannot execute command: SSH connection not available")
            return None, None
        if self.ssh_config.sudo:
            command = self._wrap_sudo(command)
        logger.debug("Running on %s: %s", self.hostname, command)
        exec_timeout = timeout if timeout else self.ssh_config.default_exec_timeout
        try:
            _, stdout, _ = self._client.exec_command(command, timeout=exec_timeout)
            channel = stdout.channel
            # stderr is merged so output keeps its natural ordering
            channel.set_combine_stderr(True)
            channel.setblocking(0)
            chunks = []
            last_output_time = time.monotonic()
            while True:
                if channel.recv_ready():
                    data = channel.recv(self.ssh_config.read_buffer_size).decode("utf-8", errors="replace")
                    if data:
                        last_output_time = time.monotonic()
                        chunks.append(data)
                        if self.ssh_config.verbose:
                            sys.stdout.write(data)
                            sys.stdout.flush()
                        continue
                if channel.exit_status_ready() and not channel.recv_ready():
                    break
                if time.monotonic() - last_output_time > exec_timeout:
                    logger.error("SSH command timeout after %ss of no output - COMMAND FAILED", exec_timeout)
                    channel.close()
                    return None, None
                time.sleep(self.ssh_config.poll_interval)
            exit_code = channel.recv_exit_status()
            return "".join(chunks).strip(), exit_code
        except (paramiko.SSHException, OSError) as exc:
            logger.error("SSH command execution failed: %s", exc)
            return None, None

    def __enter__(self):
        """Context manager entry"""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.disconnect()
