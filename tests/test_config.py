"""
Unit tests for configuration loading and command line overrides
"""
from argparse import Namespace
import pytest
from remotefs.libs.config import RemoteFSConfig, load_config, split_peer_ips
from remotefs.libs.errors import ConfigurationError


def _args(**overrides):
    values = dict(
        attach_disks=False, rebalance=False, filesystem=None, peer_ips=None, mountpath=None,
        optimize_tcp=False, server_options=None, premium_storage=False, raid_level=None,
        server_type=None, offset=False, ip_address=None, interface=None, host=None,
    )
    values.update(overrides)
    return Namespace(**values)


def test_defaults():
    cfg = RemoteFSConfig.from_dict({})
    assert cfg.provision.raid_level == -1
    assert not cfg.provision.raid_requested
    assert cfg.disks.excluded == ["/dev/sda", "/dev/sdb"]
    assert cfg.glusterfs.brick_location == "/gluster/brick/brick0"
    assert cfg.waits.peer_probe_timeout == 900
    assert cfg.waits.mount_timeout == 300
    assert cfg.host is None


def test_apply_args_lowercases_and_splits():
    cfg = RemoteFSConfig.from_dict({}).apply_args(
        _args(filesystem="EXT4", peer_ips="10.0.0.4, 10.0.0.5,", server_type="GlusterFS", raid_level=0)
    )
    assert cfg.provision.filesystem == "ext4"
    assert cfg.provision.peer_ips == ["10.0.0.4", "10.0.0.5"]
    assert cfg.provision.server_type == "glusterfs"
    assert cfg.provision.raid_requested


def test_apply_args_keeps_file_values_when_flag_missing():
    cfg = RemoteFSConfig.from_dict({"provision": {"raid_level": 0, "mountpath": "/data"}})
    cfg.apply_args(_args())
    assert cfg.provision.raid_level == 0
    assert cfg.provision.mountpath == "/data"


def test_peer_ips_string_in_file():
    cfg = RemoteFSConfig.from_dict({"provision": {"peer_ips": "10.0.0.4,10.0.0.5"}})
    assert cfg.provision.peer_ips == ["10.0.0.4", "10.0.0.5"]


def test_unknown_keys_rejected():
    with pytest.raises(ConfigurationError):
        RemoteFSConfig.from_dict({"waits": {"forever": 1}})


def test_section_must_be_mapping():
    with pytest.raises(ConfigurationError):
        RemoteFSConfig.from_dict({"nfs": ["x"]})


@pytest.mark.parametrize("provision", [
    {"server_type": "nfs", "mountpath": "/data"},
    {"filesystem": "ext4", "server_type": "cifs", "mountpath": "/data"},
    {"filesystem": "ext4", "server_type": "nfs"},
    {"filesystem": "ext4", "server_type": "glusterfs", "mountpath": "/data"},
])
def test_validate_rejects(provision):
    cfg = RemoteFSConfig.from_dict({"provision": provision})
    with pytest.raises(ConfigurationError):
        cfg.provision.validate()


def test_attach_mode_needs_no_mountpath():
    cfg = RemoteFSConfig.from_dict({"provision": {"filesystem": "btrfs", "server_type": "nfs", "attach_disks": True}})
    cfg.provision.validate()


def test_load_config_yaml(tmp_path):
    path = tmp_path / "remotefs.yaml"
    path.write_text(
        "provision:\n  filesystem: btrfs\n  raid_level: 0\n"
        "glusterfs:\n  volume_name: shared\n"
        "ssh:\n  sudo: true\n",
        encoding="utf-8",
    )
    cfg = load_config(path, verbose=True)
    assert cfg.provision.filesystem == "btrfs"
    assert cfg.glusterfs.volume_name == "shared"
    assert cfg.ssh.sudo
    assert cfg.ssh.verbose


def test_load_config_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "missing.yaml")


def test_load_config_malformed(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("provision: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(path)


def test_load_config_without_file():
    assert load_config().provision.server_type == ""


def test_split_peer_ips():
    assert split_peer_ips("a,,b ,") == ["a", "b"]
