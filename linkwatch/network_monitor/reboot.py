"""System reboot facility."""

import logging
import subprocess
from abc import ABC, abstractmethod
from typing import Callable, Sequence

logger = logging.getLogger(__name__)


class Rebooter(ABC):
    """Base class for anything that can restart the host."""

    @abstractmethod
    def reboot(self) -> bool:
        """Request a reboot. Returns True if the request was accepted."""
        pass


class SystemRebooter(Rebooter):
    """Reboot by running a command, ``/sbin/reboot`` by default.

    Privileges are not checked up front; a refused request shows up as a
    non-zero exit status.
    """

    def __init__(
        self,
        command: Sequence[str] = ("/sbin/reboot",),
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        timeout: float = 30.0,
    ):
        self.command = list(command)
        self._run = runner
        self.timeout = timeout

    def reboot(self) -> bool:
        logger.critical("Initiating system reboot...")
        try:
            result = self._run(self.command, capture_output=True, timeout=self.timeout)
        except subprocess.TimeoutExpired:
            logger.error(f"Reboot command {self.command} timed out")
            return False
        except OSError as e:
            logger.error(f"Reboot command {self.command} failed: {e}")
            return False

        if result.returncode != 0:
            logger.error(f"Reboot command {self.command} returned {result.returncode}")
            return False
        return True
