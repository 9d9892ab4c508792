"""Reachability probes for monitored hosts."""

import logging
import subprocess
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class ProbeResult:
    """Result of probing a single host."""
    host: str
    success: bool
    latency_ms: Optional[float] = None
    error: Optional[str] = None
    timestamp: float = field(default_factory=time.time)


class Probe(ABC):
    """Base class for host reachability probes."""

    @abstractmethod
    def check(self, host: str) -> ProbeResult:
        """Probe one host. Must not raise for an unreachable host."""
        pass


class PingProbe(Probe):
    """Probe hosts with the system ``ping`` utility.

    Sends ``count`` echo requests, waiting at most ``timeout`` seconds for
    each reply. The host is reachable iff ping exits with status 0.
    """

    def __init__(
        self,
        count: int = 2,
        timeout: int = 3,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        self.count = count
        self.timeout = timeout
        self._run = runner

    def command(self, host: str) -> list:
        return ["ping", "-c", str(self.count), "-W", str(self.timeout), host]

    def check(self, host: str) -> ProbeResult:
        # ping spaces requests one second apart, so bound the whole run
        deadline = self.count * (self.timeout + 1)
        try:
            start = time.time()
            result = self._run(
                self.command(host),
                capture_output=True,
                timeout=deadline,
            )
            latency = (time.time() - start) * 1000

            if result.returncode == 0:
                return ProbeResult(host=host, success=True, latency_ms=latency)
            return ProbeResult(
                host=host,
                success=False,
                error=f"ping returned {result.returncode}",
            )
        except subprocess.TimeoutExpired:
            return ProbeResult(host=host, success=False, error="timeout")
        except OSError as e:
            logger.warning(f"Could not run ping for {host}: {e}")
            return ProbeResult(host=host, success=False, error=str(e))
