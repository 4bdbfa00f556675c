"""
Unit tests for SSHService using pytest
"""
from unittest.mock import MagicMock
import paramiko
import pytest
from remotefs.libs.config import SSHConfig
from remotefs.services.ssh import SSHService


@pytest.fixture
def ssh_config():
    """Fixture for SSH config"""
    return SSHConfig(connect_timeout=10, batch_mode=False, poll_interval=0.01)


@pytest.fixture
def ssh_service(ssh_config, mocker):
    """Fixture for SSHService instance without local key lookup"""
    mocker.patch.object(SSHService, "_load_private_key", return_value=None)
    return SSHService("root@10.0.0.4", ssh_config)


def _connected_client():
    mock_client = MagicMock()
    mock_transport = MagicMock()
    mock_transport.is_active.return_value = True
    mock_client.get_transport.return_value = mock_transport
    return mock_client


def _channel(stdout_client, recv_ready, data=b"", exit_status_ready=True, exit_code=0):
    channel = MagicMock()
    channel.recv_ready.side_effect = recv_ready
    channel.recv.return_value = data
    channel.exit_status_ready.return_value = exit_status_ready
    channel.recv_exit_status.return_value = exit_code
    stdout = MagicMock()
    stdout.channel = channel
    stdout_client.exec_command.return_value = (MagicMock(), stdout, MagicMock())
    return channel


def test_init_with_user_at_host(ssh_config):
    """Test initialization with user@host format"""
    service = SSHService("user@host.example.com", ssh_config)
    assert service.username == "user"
    assert service.hostname == "host.example.com"
    assert service._connected is False
    assert service._client is None


def test_init_without_user(ssh_config):
    """Test initialization without user (defaults to root)"""
    service = SSHService("host.example.com", ssh_config)
    assert service.username == ssh_config.default_username
    assert service.hostname == "host.example.com"


def test_connect_success(ssh_service, mocker):
    """Test successful connection"""
    mock_client = _connected_client()
    mocker.patch("remotefs.services.ssh.paramiko.SSHClient", return_value=mock_client)
    assert ssh_service.connect() is True
    assert ssh_service._client == mock_client
    mock_client.connect.assert_called_once_with(
        hostname="10.0.0.4",
        username="root",
        timeout=10,
        look_for_keys=True,
        allow_agent=True,
    )


def test_connect_already_connected(ssh_service):
    """Test connect when already connected"""
    mock_client = _connected_client()
    ssh_service._client = mock_client
    ssh_service._connected = True
    assert ssh_service.connect() is True
    mock_client.connect.assert_not_called()


def test_connect_failure(ssh_service, mocker):
    """Test connect handles network and authentication errors"""
    mock_client = MagicMock()
    mock_client.connect.side_effect = paramiko.AuthenticationException("denied")
    mocker.patch("remotefs.services.ssh.paramiko.SSHClient", return_value=mock_client)
    assert ssh_service.connect() is False
    mock_client.connect.side_effect = OSError("No route to host")
    assert ssh_service.connect() is False
    assert ssh_service._client is None


def test_disconnect(ssh_service):
    """Test disconnect closes the client"""
    mock_client = MagicMock()
    ssh_service._client = mock_client
    ssh_service._connected = True
    ssh_service.disconnect()
    mock_client.close.assert_called_once()
    assert ssh_service._client is None
    assert ssh_service._connected is False


def test_execute_collects_output(ssh_service):
    """Test execute returns combined output and exit code"""
    mock_client = _connected_client()
    ssh_service._client = mock_client
    ssh_service._connected = True
    channel = _channel(mock_client, [True, False, False], data=b"mdadm: array started\n", exit_code=0)
    assert ssh_service.execute("mdadm --detail --scan 2>&1") == ("mdadm: array started", 0)
    channel.set_combine_stderr.assert_called_once_with(True)


def test_execute_idle_timeout(ssh_service):
    """Test execute gives up when the command stays silent"""
    mock_client = _connected_client()
    ssh_service._client = mock_client
    ssh_service._connected = True
    channel = _channel(mock_client, lambda: False, exit_status_ready=False)
    assert ssh_service.execute("sleep 100", timeout=0.02) == (None, None)
    channel.close.assert_called_once()


def test_execute_without_connection(ssh_service, mocker):
    """Test execute fails cleanly when no connection can be made"""
    mocker.patch.object(SSHService, "connect", return_value=False)
    assert ssh_service.execute("true") == (None, None)


def test_execute_with_sudo(ssh_config, mocker):
    """Test commands are wrapped in sudo when configured"""
    mocker.patch.object(SSHService, "_load_private_key", return_value=None)
    ssh_config.sudo = True
    service = SSHService("azureuser@10.0.0.4", ssh_config)
    mock_client = _connected_client()
    service._client = mock_client
    service._connected = True
    _channel(mock_client, [False, False], exit_code=0)
    service.execute("mount /data 2>&1")
    command = mock_client.exec_command.call_args.args[0]
    assert command == "sudo -n bash -c 'mount /data 2>&1'"
