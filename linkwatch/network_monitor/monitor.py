"""Network Monitor Service - Watches connectivity and reboots after a sustained outage."""

import logging
import signal
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional

from rich.console import Console
from rich.table import Table

from linkwatch.shared.logging import EVENT_LOGGER_NAME

from .config import NetworkMonitorConfig
from .diagnostics import NOT_AVAILABLE, RouteInspector
from .probe import PingProbe, Probe, ProbeResult
from .publisher import StatusPublisher
from .reboot import Rebooter, SystemRebooter

logger = logging.getLogger(__name__)

LOST_STYLE = "bold red"
RESTORED_STYLE = "bold green"
WARNING_STYLE = "bold yellow"


class LinkStatus(Enum):
    """Overall link state across all monitored hosts."""
    UNKNOWN = "unknown"
    UP = "up"
    DOWN = "down"


class LinkEvent(Enum):
    """Transitions worth logging."""
    LOST = "LOST"
    RESTORED = "RESTORED"


@dataclass
class RunState:
    """State carried from one cycle to the next."""
    previous_status: LinkStatus = LinkStatus.UNKNOWN
    current_status: LinkStatus = LinkStatus.UNKNOWN
    consecutive_failures: int = 0


@dataclass
class CycleResult:
    """Outcome of a single cycle."""
    status: LinkStatus
    consecutive_failures: int
    checks: List[ProbeResult] = field(default_factory=list)
    event: Optional[LinkEvent] = None
    reboot_requested: bool = False
    rebooted: bool = False

    @property
    def failed_hosts(self) -> List[str]:
        return [check.host for check in self.checks if not check.success]


class NetworkMonitorService:
    """Polls the configured hosts and acts on sustained outages.

    Every ``interval`` seconds all hosts are probed. The link is up only
    if every host answered. LOST and RESTORED events are logged once per
    transition, and once the number of consecutive failed cycles reaches
    ``failure_threshold`` the host is rebooted (if enabled).
    """

    def __init__(
        self,
        config: NetworkMonitorConfig,
        probe: Optional[Probe] = None,
        rebooter: Optional[Rebooter] = None,
        inspector: Optional[RouteInspector] = None,
        events: Optional[logging.Logger] = None,
        publisher: Optional[StatusPublisher] = None,
        console: Optional[Console] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.probe = probe or PingProbe(config.ping_count, config.ping_timeout)
        self.rebooter = rebooter or SystemRebooter(config.reboot_command)
        self.inspector = inspector or RouteInspector()
        self.events = events or logging.getLogger(EVENT_LOGGER_NAME)
        self.publisher = publisher
        self.console = console or Console()
        self.state = RunState()
        self._sleep = sleep
        self._stop_event = threading.Event()

    def check_all_hosts(self) -> List[ProbeResult]:
        """Probe every configured host, in order."""
        return [self.probe.check(host) for host in self.config.hosts]

    def should_reboot(self) -> bool:
        return (
            self.config.reboot_on_failure
            and self.state.consecutive_failures >= self.config.failure_threshold
        )

    def run_cycle(self) -> CycleResult:
        """Probe all hosts once and update state."""
        checks = self.check_all_hosts()
        all_up = all(check.success for check in checks)
        result = CycleResult(
            status=LinkStatus.UP if all_up else LinkStatus.DOWN,
            consecutive_failures=0,
            checks=checks,
        )

        if all_up:
            self.state.current_status = LinkStatus.UP
            self.state.consecutive_failures = 0

            if self.state.previous_status != LinkStatus.UP:
                self._on_restored()
                result.event = LinkEvent.RESTORED
                self.state.previous_status = LinkStatus.UP
        else:
            self.state.current_status = LinkStatus.DOWN
            self.state.consecutive_failures += 1
            logger.debug(
                f"Cycle failed ({self.state.consecutive_failures} in a row), "
                f"unreachable: {', '.join(result.failed_hosts)}"
            )

            if self.state.previous_status != LinkStatus.DOWN:
                self._on_lost()
                result.event = LinkEvent.LOST
                self.state.previous_status = LinkStatus.DOWN

            if self.should_reboot():
                result.reboot_requested = True
                result.rebooted = self._reboot()

        result.consecutive_failures = self.state.consecutive_failures

        if self.publisher:
            self.publisher.publish_status(
                result.status.value, result.consecutive_failures, checks
            )

        return result

    def _on_lost(self) -> None:
        alert = self.config.alert_on_failure
        message = "Network connectivity LOST"
        self.events.warning(message, extra={"style": LOST_STYLE if alert else None})

        self.events.info(f"Diagnostics - {self.inspector.network_info().summary()}")

        if alert and self.publisher:
            self.publisher.publish_event(LinkEvent.LOST.value, message)

    def _on_restored(self) -> None:
        alert = self.config.alert_on_recovery
        message = "Network connectivity RESTORED"
        self.events.info(message, extra={"style": RESTORED_STYLE if alert else None})

        if alert and self.publisher:
            self.publisher.publish_event(LinkEvent.RESTORED.value, message)

    def _reboot(self) -> bool:
        downtime = self.state.consecutive_failures * self.config.interval
        self.events.critical(
            f"Network connectivity lost for {downtime} seconds. Rebooting system...",
            extra={"style": LOST_STYLE},
        )

        # Give the log a moment to reach the disk
        self._sleep(self.config.reboot_grace)

        if self.rebooter.reboot():
            return True

        self.events.error(
            "Reboot request failed, will retry on the next failed check",
            extra={"style": LOST_STYLE},
        )
        return False

    def show_banner(self) -> None:
        """Print the startup banner with current network information."""
        info = self.inspector.network_info()

        table = Table(show_header=False, box=None, pad_edge=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value", style="white")
        table.add_row("Network Interface:", info.interface or NOT_AVAILABLE)
        table.add_row("Interface Status:", info.interface_status)
        table.add_row("IP Address:", info.ip_address or NOT_AVAILABLE)
        table.add_row("Default Gateway:", info.gateway or NOT_AVAILABLE)
        table.add_row("Monitoring Hosts:", " ".join(self.config.hosts))
        table.add_row("Check Interval:", f"{self.config.interval}s")

        self.console.print("Network Connectivity Monitor Started", style="bold cyan")
        self.console.print("Press Ctrl+C to stop")
        self.console.print(table)
        self.console.print("-" * 40)

    def stop(self) -> None:
        """Ask the loop to finish after the current cycle."""
        self._stop_event.set()

    def _setup_signal_handlers(self) -> Dict[int, object]:
        """Set up signal handlers for graceful shutdown.

        Returns the handlers they replaced. Outside the main thread
        nothing is installed.
        """
        if threading.current_thread() is not threading.main_thread():
            return {}

        def signal_handler(signum, frame):
            signame = signal.Signals(signum).name
            logger.info(f"Received {signame}, shutting down...")
            self.stop()

        previous = {}
        for signum in (signal.SIGINT, signal.SIGTERM):
            previous[signum] = signal.signal(signum, signal_handler)
        return previous

    def run(self) -> int:
        """Run the monitor until stopped or the host is rebooted.

        Returns:
            Process exit status.
        """
        self._stop_event.clear()
        previous_handlers = self._setup_signal_handlers()

        if self.publisher:
            self.publisher.connect()

        try:
            self.show_banner()
            self.events.info("Network monitor started")
            if self.config.reboot_on_failure:
                self.events.info(
                    f"Reboot enabled: System will reboot after "
                    f"{self.config.failure_threshold} consecutive failures"
                )

            while not self._stop_event.is_set():
                result = self.run_cycle()
                if result.rebooted:
                    return 0
                self._stop_event.wait(self.config.interval)
        except KeyboardInterrupt:
            logger.info("Shutting down network monitor...")
        finally:
            for signum, handler in previous_handlers.items():
                # None means the old handler was not installed from Python
                signal.signal(signum, signal.SIG_DFL if handler is None else handler)
            if self.publisher:
                self.publisher.close()

        self.events.info("Network monitor stopped")
        return 0
