"""MQTT configuration and utilities."""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .config import parse_flag

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MQTTConfig:
    """MQTT broker configuration."""
    enabled: bool = False
    broker: str = "localhost"
    port: int = 1883
    client_id: str = "linkwatch"
    keepalive: int = 60
    qos: int = 1

    @classmethod
    def from_dict(cls, data: dict) -> "MQTTConfig":
        """Create config from dictionary."""
        return cls(
            enabled=parse_flag(data.get("enabled")),
            broker=data.get("broker", "localhost"),
            port=int(data.get("port", 1883)),
            client_id=data.get("client_id", "linkwatch"),
            keepalive=int(data.get("keepalive", 60)),
            qos=int(data.get("qos", 1)),
        )


def create_payload(
    data: Dict[str, Any],
    source: str = "linkwatch",
    timestamp: Optional[float] = None,
) -> str:
    """Create a standardized JSON payload.

    Args:
        data: Fields to publish.
        source: Identifier of the publishing monitor.
        timestamp: Unix timestamp (defaults to current time).

    Returns:
        JSON string payload.
    """
    payload = dict(data)
    payload["ts"] = timestamp or time.time()
    payload["source"] = source
    return json.dumps(payload)
