#!/usr/bin/env python3
"""
remotefs bootstrap - prepare the data disks of a storage node and publish
them as an NFS export or a GlusterFS volume
"""
import argparse
import logging
import sys
from pathlib import Path
from dependency_injector import containers, providers
from .commands import Provision
from .libs.config import RemoteFSConfig, load_config
from .libs.errors import ConfigurationError
from .libs.logger import get_logger, init_logger
from .services import LocalService, NodeService, SSHService
logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Provision RAID/btrfs storage and bootstrap an NFS or GlusterFS server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-a", dest="attach_disks", action="store_true", help="Attach mode: only prepare newly attached disks")
    parser.add_argument("-b", dest="rebalance", action="store_true", help="Rebalance btrfs after adding devices")
    parser.add_argument("-f", dest="filesystem", type=str, default=None, help="Filesystem type (btrfs, ext4, ...)")
    parser.add_argument("-i", dest="peer_ips", type=str, default=None, help="Comma separated peer IPs, leader first")
    parser.add_argument("-m", dest="mountpath", type=str, default=None, help="Mount path")
    parser.add_argument("-n", dest="optimize_tcp", action="store_true", help="Apply TCP tuning")
    parser.add_argument("-o", dest="server_options", type=str, default=None, help="Server options: voltype,transport,key:value,...")
    parser.add_argument("-p", dest="premium_storage", action="store_true", help="Data disks are premium storage")
    parser.add_argument("-r", dest="raid_level", type=int, default=None, help="RAID level (-1 for none)")
    parser.add_argument("-s", dest="server_type", type=str, default=None, help="Server type (nfs or glusterfs)")
    parser.add_argument("-v", dest="offset", action="store_true", help="VM offset")
    parser.add_argument("--config", "-c", type=str, default=None, help="Path to YAML configuration file")
    parser.add_argument("--verbose", action="store_true", help="Debug logging and command output")
    parser.add_argument("--log-file", type=str, default=None, help="Also log to this file")
    parser.add_argument("--ip-address", type=str, default=None, help="Address of this node (default: from --interface)")
    parser.add_argument("--interface", type=str, default=None, help="Network interface of this node (default: eth0)")
    parser.add_argument("--host", type=str, default=None, help="Provision a remote node over SSH (user@host)")
    return parser


def get_config(args) -> RemoteFSConfig:
    """Load the YAML file if given and apply command line overrides"""
    config_file = Path(args.config).resolve() if args.config else None
    return load_config(config_file, verbose=args.verbose).apply_args(args)


def create_executor(cfg: RemoteFSConfig):
    """SSH executor for --host, local shell otherwise"""
    if cfg.host:
        return SSHService(cfg.host, cfg.ssh)
    return LocalService(default_timeout=cfg.waits.command_timeout, verbose=cfg.ssh.verbose)


def build_container(args) -> containers.DynamicContainer:
    di = containers.DynamicContainer()
    # Lazy: the config is only loaded when a command is resolved
    di.config = providers.Singleton(get_config, args=args)
    di.executor = providers.Factory(create_executor, cfg=di.config)
    di.node_service = providers.Factory(NodeService, executor=di.executor)
    di.provision = providers.Factory(Provision, cfg=di.config, node=di.node_service)
    return di


def main(argv=None):
    """Main CLI entry point"""
    args = build_parser().parse_args(argv)
    log_level = logging.DEBUG if args.verbose else logging.INFO
    init_logger(level=log_level, log_file=args.log_file)
    di = build_container(args)
    try:
        provision = di.provision()
    except ConfigurationError as err:
        logger.error("%s", err)
        sys.exit(err.exit_code)
    executor = provision.node.executor
    try:
        provision.run(args)
    finally:
        executor.disconnect()


if __name__ == "__main__":
    main()
