"""Publish link status and alerts to MQTT."""

import logging
import time
from typing import Callable, List, Optional

import paho.mqtt.client as mqtt
from paho.mqtt.enums import CallbackAPIVersion

from linkwatch.shared.mqtt import MQTTConfig, create_payload

from .probe import ProbeResult

logger = logging.getLogger(__name__)


def _default_client_factory(config: MQTTConfig) -> mqtt.Client:
    return mqtt.Client(
        callback_api_version=CallbackAPIVersion.VERSION2,
        client_id=f"{config.client_id}-{int(time.time())}",
    )


class StatusPublisher:
    """Publishes cycle status and LOST/RESTORED alerts.

    Publishing is best effort: a broker that cannot be reached disables
    the publisher instead of failing the monitor.
    """

    def __init__(
        self,
        config: MQTTConfig,
        topic: str,
        client_factory: Callable[[MQTTConfig], mqtt.Client] = _default_client_factory,
    ):
        self.config = config
        self.topic = topic
        self._client_factory = client_factory
        self.client: Optional[mqtt.Client] = None

    @property
    def is_connected(self) -> bool:
        return self.client is not None

    def connect(self) -> None:
        """Set up MQTT client for publishing status."""
        client = self._client_factory(self.config)

        def on_connect(client, userdata, flags, reason_code, properties):
            if reason_code == 0:
                logger.info("Connected to MQTT broker")
            else:
                logger.error(f"MQTT connection failed: {reason_code}")

        def on_disconnect(client, userdata, flags, reason_code, properties):
            logger.warning(f"Disconnected from MQTT broker: {reason_code}")

        client.on_connect = on_connect
        client.on_disconnect = on_disconnect

        try:
            client.connect(self.config.broker, self.config.port, self.config.keepalive)
            client.loop_start()
        except (OSError, ValueError) as e:
            logger.error(f"Failed to connect to MQTT broker: {e}")
            return
        self.client = client

    def close(self) -> None:
        if self.client:
            self.client.loop_stop()
            self.client.disconnect()
            self.client = None

    def _publish(self, topic: str, data: dict) -> None:
        if not self.client:
            return
        self.client.publish(topic, create_payload(data), qos=self.config.qos)

    def publish_status(
        self,
        status: str,
        consecutive_failures: int,
        checks: List[ProbeResult],
    ) -> None:
        """Publish the result of one cycle."""
        if not self.client:
            return

        try:
            self._publish(self.topic, {
                "status": status,
                "consecutive_failures": consecutive_failures,
                "failed_hosts": [c.host for c in checks if not c.success],
            })

            for check in checks:
                if check.success and check.latency_ms is not None:
                    self._publish(
                        f"{self.topic}/{check.host}/latency",
                        {"value": round(check.latency_ms, 1), "unit": "ms"},
                    )

            logger.debug(f"Published status: {status}")
        except (OSError, ValueError) as e:
            logger.error(f"Failed to publish status: {e}")

    def publish_event(self, event: str, message: str) -> None:
        """Publish a LOST/RESTORED alert."""
        try:
            self._publish(f"{self.topic}/events", {"event": event, "message": message})
        except (OSError, ValueError) as e:
            logger.error(f"Failed to publish {event} event: {e}")
