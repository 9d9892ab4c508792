"""Routing table and interface diagnostics.

Only used to enrich log lines; nothing in the monitor branches on these
values. Missing information is reported as ``None`` and rendered as
``N/A`` (or ``UNKNOWN`` for the interface state).
"""

import logging
import re
import subprocess
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"

INTERFACE_UP = "UP"
INTERFACE_DOWN = "DOWN"
INTERFACE_UNKNOWN = "UNKNOWN"

_INET_RE = re.compile(r"\binet\s+(\d+(?:\.\d+){3})")


@dataclass
class NetworkInfo:
    """Snapshot of the host's primary network path."""
    interface: Optional[str]
    interface_status: str
    ip_address: Optional[str]
    gateway: Optional[str]

    def summary(self) -> str:
        return (
            f"Gateway: {self.gateway or NOT_AVAILABLE}, "
            f"Interface Status: {self.interface_status}"
        )


def parse_default_route(output: str) -> Tuple[Optional[str], Optional[str]]:
    """Extract (gateway, interface) from ``ip route`` output.

    The first ``default`` line wins. Either value is None if absent.
    """
    for line in output.splitlines():
        tokens = line.split()
        if not tokens or tokens[0] != "default":
            continue
        gateway = _token_after(tokens, "via")
        interface = _token_after(tokens, "dev")
        return gateway, interface
    return None, None


def parse_link_state(output: str) -> str:
    """Map ``ip link show`` output to UP/DOWN."""
    return INTERFACE_UP if "state UP" in output else INTERFACE_DOWN


def parse_ipv4_address(output: str) -> Optional[str]:
    """First IPv4 address in ``ip -4 addr show`` output."""
    match = _INET_RE.search(output)
    return match.group(1) if match else None


def _token_after(tokens, keyword: str) -> Optional[str]:
    try:
        return tokens[tokens.index(keyword) + 1]
    except (ValueError, IndexError):
        return None


class RouteInspector:
    """Query the kernel routing table and links with iproute2."""

    def __init__(
        self,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        timeout: float = 5.0,
    ):
        self._run = runner
        self.timeout = timeout

    def _ip(self, *args: str) -> str:
        try:
            result = self._run(
                ["ip", *args],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug(f"ip {' '.join(args)} failed: {e}")
            return ""
        if result.returncode != 0:
            return ""
        return result.stdout or ""

    def default_route(self) -> Tuple[Optional[str], Optional[str]]:
        return parse_default_route(self._ip("route"))

    def get_default_gateway(self) -> Optional[str]:
        gateway, _ = self.default_route()
        return gateway

    def get_interface_status(self, interface: Optional[str] = None) -> str:
        """State of ``interface``, or of the default-route interface."""
        if interface is None:
            _, interface = self.default_route()
        if not interface:
            return INTERFACE_UNKNOWN
        return parse_link_state(self._ip("link", "show", interface))

    def get_ip_address(self, interface: Optional[str]) -> Optional[str]:
        if not interface:
            return None
        return parse_ipv4_address(self._ip("-4", "addr", "show", interface))

    def network_info(self) -> NetworkInfo:
        gateway, interface = self.default_route()
        return NetworkInfo(
            interface=interface,
            interface_status=self.get_interface_status(interface) if interface else INTERFACE_UNKNOWN,
            ip_address=self.get_ip_address(interface),
            gateway=gateway,
        )
