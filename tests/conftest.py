"""Shared fixtures: fakes for ping, iproute2, reboot and MQTT."""

import io
import logging
import subprocess

import pytest
from rich.console import Console

from linkwatch.network_monitor.config import NetworkMonitorConfig
from linkwatch.network_monitor.diagnostics import RouteInspector
from linkwatch.network_monitor.monitor import NetworkMonitorService
from linkwatch.network_monitor.probe import Probe, ProbeResult
from linkwatch.network_monitor.reboot import Rebooter
from linkwatch.shared.logging import EVENT_LOGGER_NAME, setup_event_log

ROUTE_OUTPUT = (
    "default via 192.168.1.1 dev eth0 proto dhcp src 192.168.1.50 metric 100\n"
    "192.168.1.0/24 dev eth0 proto kernel scope link src 192.168.1.50 metric 100\n"
)
LINK_UP_OUTPUT = (
    "2: eth0: <BROADCAST,MULTICAST,UP,LOWER_UP> mtu 1500 qdisc fq_codel "
    "state UP mode DEFAULT group default qlen 1000\n"
)
ADDR_OUTPUT = (
    "2: eth0: <BROADCAST,MULTICAST,UP,LOWER_UP> mtu 1500 qdisc fq_codel state UP\n"
    "    inet 192.168.1.50/24 brd 192.168.1.255 scope global dynamic eth0\n"
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in (
        "LINKWATCH_CONFIG",
        "LINKWATCH_INTERVAL",
        "LINKWATCH_HOSTS",
        "LINKWATCH_LOG_FILE",
        "LINKWATCH_FAILURE_THRESHOLD",
        "LINKWATCH_NO_REBOOT",
        "MQTT_BROKER",
        "LOG_LEVEL",
    ):
        # setenv first so anything a .env load adds is undone afterwards
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


class FakeProbe(Probe):
    """Hosts in ``down`` fail, everything else answers."""

    def __init__(self, down=()):
        self.down = set(down)
        self.calls = []
        self.on_check = None

    def check(self, host):
        self.calls.append(host)
        if self.on_check:
            self.on_check(host)
        if host in self.down:
            return ProbeResult(host=host, success=False, error="ping returned 1")
        return ProbeResult(host=host, success=True, latency_ms=12.5)


class SpyRebooter(Rebooter):
    def __init__(self, accept=True):
        self.accept = accept
        self.calls = 0

    def reboot(self):
        self.calls += 1
        return self.accept


class FakeRunner:
    """Stands in for subprocess.run, answering iproute2 queries."""

    def __init__(self, route=ROUTE_OUTPUT, link=LINK_UP_OUTPUT, addr=ADDR_OUTPUT):
        self.outputs = {"route": route, "link": link, "addr": addr}
        self.commands = []

    def __call__(self, args, **kwargs):
        self.commands.append(list(args))
        key = next((a for a in args[1:] if a in self.outputs), None)
        stdout = self.outputs.get(key, "") if key else ""
        return subprocess.CompletedProcess(args, 0, stdout=stdout, stderr="")


class FakePublisher:
    def __init__(self):
        self.statuses = []
        self.events = []
        self.connected = False
        self.closed = False

    def connect(self):
        self.connected = True

    def close(self):
        self.closed = True

    def publish_status(self, status, consecutive_failures, checks):
        self.statuses.append((status, consecutive_failures, [c.host for c in checks]))

    def publish_event(self, event, message):
        self.events.append((event, message))


@pytest.fixture
def log_path(tmp_path):
    return tmp_path / "network_monitor.log"


@pytest.fixture
def console_output():
    return io.StringIO()


@pytest.fixture
def events(log_path, console_output):
    logger = setup_event_log(log_path, Console(file=console_output, width=200))
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logging.getLogger(EVENT_LOGGER_NAME).handlers.clear()


@pytest.fixture
def read_log(log_path):
    def _read():
        if not log_path.exists():
            return []
        return log_path.read_text().splitlines()
    return _read


@pytest.fixture
def probe():
    return FakeProbe()


@pytest.fixture
def rebooter():
    return SpyRebooter()


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def make_service(probe, rebooter, runner, events, console_output):
    sleeps = []

    def _make(**overrides):
        publisher = overrides.pop("publisher", None)
        config = NetworkMonitorConfig(**overrides)
        service = NetworkMonitorService(
            config,
            probe=probe,
            rebooter=rebooter,
            inspector=RouteInspector(runner=runner),
            events=events,
            publisher=publisher,
            console=Console(file=console_output, width=200),
            sleep=sleeps.append,
        )
        service.sleeps = sleeps
        return service

    return _make
