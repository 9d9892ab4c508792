"""Command line interface for the network monitor."""

import argparse
import sys
from typing import List, Optional

from linkwatch.shared.config import split_hosts

from .config import NetworkMonitorConfig

EPILOG = """\
Examples:
  %(prog)s -i 10 -l /tmp/monitor.log
  %(prog)s -h 8.8.8.8,1.1.1.1,192.168.1.1
"""


class MonitorArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on bad arguments."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\nUse --help for usage information\n")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {value!r}")
    return number


def _host_list(value: str) -> List[str]:
    hosts = split_hosts(value)
    if not hosts:
        raise argparse.ArgumentTypeError("at least one host is required")
    return hosts


def build_parser() -> MonitorArgumentParser:
    # -h is taken by --hosts, so help is only available as --help
    parser = MonitorArgumentParser(
        prog="linkwatch",
        description="Network connectivity monitor: logs outages and reboots "
                    "the host after sustained loss of connectivity.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("-i", "--interval", type=_positive_int, metavar="SECONDS",
                        help="Set check interval (default: 30)")
    parser.add_argument("-l", "--log", metavar="FILE",
                        help="Set log file path (default: /var/log/network_monitor.log)")
    parser.add_argument("-h", "--hosts", type=_host_list, metavar="HOSTS",
                        help="Comma-separated list of hosts to ping (default: 8.8.8.8,1.1.1.1)")
    parser.add_argument("--no-reboot", action="store_true",
                        help="Disable automatic reboot on network failure")
    parser.add_argument("--failure-threshold", type=_positive_int, metavar="NUM",
                        help="Number of consecutive failures before reboot (default: 6)")
    parser.add_argument("-c", "--config", metavar="FILE",
                        help="YAML configuration file")
    parser.add_argument("--help", action="help",
                        help="Show this help message")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def apply_args(config: NetworkMonitorConfig, args: argparse.Namespace) -> NetworkMonitorConfig:
    """Layer command line overrides on top of a loaded config."""
    changes = {}
    if args.interval is not None:
        changes["interval"] = args.interval
    if args.log is not None:
        changes["log_file"] = args.log
    if args.hosts is not None:
        changes["hosts"] = tuple(args.hosts)
    if args.no_reboot:
        changes["reboot_on_failure"] = False
    if args.failure_threshold is not None:
        changes["failure_threshold"] = args.failure_threshold
    return config.replace(**changes) if changes else config
