"""
Unit tests for the GlusterFS bootstrap protocol
"""
import pytest
from remotefs.libs.config import GlusterFSConfig, WaitsConfig
from remotefs.libs.errors import CommandError, ConfigurationError, InvariantError, PollTimeout
from remotefs.orchestration.gluster import (
    GlusterBootstrap,
    VolumeType,
    build_bricks,
    client_fstab_entry,
    is_leader,
    parse_volume_options,
    volume_create_arguments,
)

PEERS = ["10.0.0.4", "10.0.0.5", "10.0.0.6"]
CONNECTED = "State: Peer in Cluster (Connected)"


def _peer_status(connected):
    blocks = [f"Hostname: 10.0.0.{5 + i}\nUuid: {i}\n{CONNECTED}" for i in range(connected)]
    return f"Number of Peers: {connected}\n\n" + "\n\n".join(blocks)


@pytest.fixture
def bootstrap(gluster, storage, clock):
    return GlusterBootstrap(gluster, storage, GlusterFSConfig(), WaitsConfig(), sleep=clock.sleep, clock=clock)


def test_is_leader():
    assert is_leader("10.0.0.4", PEERS)
    assert not is_leader("10.0.0.5", PEERS)
    assert not is_leader("10.0.0.4", [])


def test_option_grammar_replica_with_option():
    spec = parse_volume_options("replica,tcp,performance.cache-size:1GB", "gv0")
    assert spec.volume_type == VolumeType.REPLICATED
    assert spec.transport == "tcp"
    assert spec.options == [("performance.cache-size", "1GB")]
    assert volume_create_arguments(spec, 2) == ["replica", "2"]


def test_option_grammar_distributed_defaults():
    spec = parse_volume_options("Distributed", "gv0")
    assert spec.volume_type == VolumeType.DISTRIBUTED
    assert spec.transport == "tcp"
    assert spec.options == []
    assert volume_create_arguments(spec, 3) == []


def test_option_grammar_stripe_and_custom():
    assert volume_create_arguments(parse_volume_options("stripe,rdma", "gv0"), 4) == ["stripe", "4"]
    spec = parse_volume_options("disperse,tcp", "gv0")
    assert spec.volume_type == VolumeType.CUSTOM
    assert volume_create_arguments(spec, 3) == ["disperse"]


def test_option_values_keep_colons():
    spec = parse_volume_options("distributed,tcp,auth.allow:10.0.0.*,nfs.rpc-auth-allow:a:b", "gv0")
    assert spec.options == [("auth.allow", "10.0.0.*"), ("nfs.rpc-auth-allow", "a:b")]


@pytest.mark.parametrize("options", ["", ",tcp", "replica,tcp,novalue"])
def test_option_grammar_rejects(options):
    with pytest.raises(ConfigurationError):
        parse_volume_options(options, "gv0")


def test_bricks_follow_peer_order():
    assert build_bricks(PEERS, "/gluster/brick/brick0") == [
        "10.0.0.4:/gluster/brick/brick0",
        "10.0.0.5:/gluster/brick/brick0",
        "10.0.0.6:/gluster/brick/brick0",
    ]


def test_leader_converges_three_nodes(executor, bootstrap, clock):
    executor.respond_sequence("volume info gv0", [("Volume gv0 does not exist", 1), ("Volume Name: gv0\nStatus: Started", 0)])
    # second peer answers only on the third probe
    executor.respond_sequence("peer probe 10.0.0.6", [("peer probe: failed", 1), ("peer probe: failed", 1),
                                                      ("peer probe: success.", 0)])
    executor.respond("peer probe 10.0.0.5", "peer probe: success.")
    executor.respond_sequence("peer status", [(_peer_status(0), 0), (_peer_status(1), 0), (_peer_status(2), 0)])
    executor.respond("mountpoint -q", "", 1)
    spec = bootstrap.run("10.0.0.4", PEERS, "distributed,tcp,performance.cache-size:1GB", "/mnt/gluster")
    assert executor.ran("volume create") == [
        "gluster --mode=script volume create gv0 transport tcp 10.0.0.4:/gluster/brick/brick0 "
        "10.0.0.5:/gluster/brick/brick0 10.0.0.6:/gluster/brick/brick0 2>&1"
    ]
    assert executor.ran("volume set") == ["gluster --mode=script volume set gv0 performance.cache-size 1GB 2>&1"]
    assert executor.ran("volume start") == ["gluster --mode=script volume start gv0 2>&1"]
    assert len(executor.ran("peer probe 10.0.0.6")) == 3
    assert executor.ran("peer probe 10.0.0.4") == []
    assert len(executor.ran("peer status")) == 3
    # settle after convergence and after the volume became visible
    assert clock.sleeps.count(5) == 2
    order = [c for c in executor.commands if "volume create" in c or "volume set" in c or "volume start" in c]
    assert ["create" in order[0], "set" in order[1], "start" in order[2]] == [True, True, True]
    assert spec.state.value == "started"


def test_follower_never_creates(executor, bootstrap, clock):
    executor.respond_sequence("volume info gv0", [("Volume gv0 does not exist", 1), ("Volume gv0 does not exist", 1),
                                                  ("Volume Name: gv0\nStatus: Started", 0)])
    executor.respond("mountpoint -q", "", 1)
    bootstrap.run("10.0.0.5", PEERS, "replica,tcp", "/mnt/gluster")
    assert executor.ran("peer probe") == []
    assert executor.ran("volume create") == []
    assert clock.sleeps[:2] == [2, 2]


def test_client_mount_uses_own_address_and_single_fstab_line(executor, bootstrap):
    fstab = {"content": ""}
    executor.respond_with("cat /etc/fstab", lambda _c: (fstab["content"], 0))

    def append(command):
        fstab["content"] += command.split("printf '", 1)[1].split("' >>", 1)[0]
        return "", 0
    executor.respond_with(">> /etc/fstab", append)
    executor.respond("mountpoint -q", "", 1)
    executor.respond_sequence("mount /mnt/gluster", [("Mount failed", 1), ("", 0)])
    bootstrap.mount_volume("10.0.0.5", "gv0", "/mnt/gluster")
    bootstrap.mount_volume("10.0.0.5", "gv0", "/mnt/gluster")
    assert fstab["content"] == client_fstab_entry("10.0.0.5", "gv0", "/mnt/gluster") + "\n"
    assert fstab["content"].startswith("10.0.0.5:/gv0 /mnt/gluster glusterfs _netdev,auto 0 2")
    assert len(executor.ran("chmod 1777 /mnt/gluster")) == 2


def test_unreachable_peer_times_out(executor, bootstrap, clock):
    executor.respond("volume info", "Volume gv0 does not exist", 1)
    executor.respond("ping -c 2 10.0.0.6", "", 1)
    with pytest.raises(PollTimeout):
        bootstrap.run("10.0.0.4", PEERS, "distributed", "/mnt/gluster")
    assert 900 <= clock.now < 902
    assert executor.ran("volume create") == []


def test_volume_never_visible_times_out(executor, bootstrap, clock):
    executor.respond("volume info", "Volume gv0 does not exist", 1)
    with pytest.raises(PollTimeout):
        bootstrap.run("10.0.0.6", PEERS, "distributed", "/mnt/gluster")
    assert 900 <= clock.now < 903


def test_mount_times_out(executor, bootstrap, clock):
    executor.respond("mountpoint -q", "", 1)
    executor.respond("mount /mnt/gluster", "Mount failed", 1)
    with pytest.raises(PollTimeout):
        bootstrap.mount_volume("10.0.0.5", "gv0", "/mnt/gluster")
    assert 300 <= clock.now < 302


def test_volume_create_failure_is_fatal(executor, bootstrap):
    executor.respond("volume info", "Volume gv0 does not exist", 1)
    executor.respond("peer status", _peer_status(2))
    executor.respond("volume create", "volume create: gv0: failed: Brick is already part of a volume", 1)
    with pytest.raises(CommandError):
        bootstrap.run("10.0.0.4", PEERS, "distributed", "/mnt/gluster")
    assert executor.ran("volume start") == []


def test_self_must_be_in_peer_list(bootstrap):
    with pytest.raises(InvariantError):
        bootstrap.run("10.0.0.9", PEERS, "distributed", "/mnt/gluster")


def test_duplicate_peers_rejected(bootstrap):
    with pytest.raises(InvariantError):
        bootstrap.run("10.0.0.4", ["10.0.0.4", "10.0.0.4"], "distributed", "/mnt/gluster")


def test_explicit_factor_is_passed_verbatim():
    spec = parse_volume_options("replica 2,tcp", "gv0")
    assert spec.volume_type == VolumeType.CUSTOM
    assert volume_create_arguments(spec, 4) == ["replica", "2"]


def test_leader_rerun_keeps_started_volume(executor, bootstrap, clock):
    executor.respond("volume info gv0", "Volume Name: gv0\nType: Replicate\nStatus: Started\n")
    executor.respond("mountpoint -q", "", 1)
    spec = bootstrap.run("10.0.0.4", PEERS, "replica,tcp,performance.cache-size:1GB", "/mnt/gluster")
    assert executor.ran("peer probe") == []
    assert executor.ran("peer status") == []
    assert executor.ran("volume create") == []
    assert executor.ran("volume set") == []
    assert executor.ran("volume start") == []
    assert executor.ran("mount /mnt/gluster")
    assert spec.state.value == "started"


def test_leader_rerun_starts_created_volume(executor, bootstrap):
    executor.respond("volume info gv0", "Volume Name: gv0\nType: Distribute\nStatus: Created\n")
    executor.respond("mountpoint -q", "", 1)
    bootstrap.run("10.0.0.4", PEERS, "distributed,tcp,nfs.disable:on", "/mnt/gluster")
    assert executor.ran("peer probe") == []
    assert executor.ran("volume create") == []
    assert executor.ran("volume set") == ["gluster --mode=script volume set gv0 nfs.disable on 2>&1"]
    assert executor.ran("volume start") == ["gluster --mode=script volume start gv0 2>&1"]
