"""Configuration for the network monitor."""

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dotenv import load_dotenv

from linkwatch.shared.config import (
    env_flag,
    get_config_path,
    load_yaml_config,
    parse_flag,
    split_hosts,
)
from linkwatch.shared.mqtt import MQTTConfig

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE = "/var/log/network_monitor.log"
FALLBACK_LOG_FILE = "./network_monitor.log"
DEFAULT_HOSTS = ("8.8.8.8", "1.1.1.1")  # Google DNS, Cloudflare DNS


class ConfigError(ValueError):
    """Raised when the monitor configuration is invalid."""

    pass


@dataclass(frozen=True)
class NetworkMonitorConfig:
    """Configuration for network monitoring."""

    # Probe settings
    interval: int = 30  # seconds between cycles
    hosts: Tuple[str, ...] = DEFAULT_HOSTS
    ping_count: int = 2
    ping_timeout: int = 3  # seconds

    # Alerting
    alert_on_failure: bool = True
    alert_on_recovery: bool = True

    # Reboot settings (6 * 30s = 3m)
    reboot_on_failure: bool = True
    failure_threshold: int = 6
    reboot_grace: float = 2.0  # seconds to let the log flush
    reboot_command: Tuple[str, ...] = ("/sbin/reboot",)

    # Event log
    log_file: str = DEFAULT_LOG_FILE

    # MQTT settings
    mqtt: MQTTConfig = field(default_factory=MQTTConfig)
    mqtt_topic: str = "host/system/network"

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict) -> "NetworkMonitorConfig":
        """Create config from dictionary."""
        mqtt_data = data.get("mqtt", {}) or {}

        hosts = data.get("hosts", DEFAULT_HOSTS)
        if isinstance(hosts, str):
            hosts = split_hosts(hosts)

        reboot_command = data.get("reboot_command", ("/sbin/reboot",))
        if isinstance(reboot_command, str):
            reboot_command = reboot_command.split()

        return cls(
            interval=int(data.get("interval", 30)),
            hosts=tuple(hosts),
            ping_count=int(data.get("ping_count", 2)),
            ping_timeout=int(data.get("ping_timeout", 3)),
            alert_on_failure=parse_flag(data.get("alert_on_failure"), default=True),
            alert_on_recovery=parse_flag(data.get("alert_on_recovery"), default=True),
            reboot_on_failure=parse_flag(data.get("reboot_on_failure"), default=True),
            failure_threshold=int(data.get("failure_threshold", 6)),
            reboot_grace=float(data.get("reboot_grace", 2.0)),
            reboot_command=tuple(reboot_command),
            log_file=str(data.get("log_file", DEFAULT_LOG_FILE)),
            mqtt=MQTTConfig.from_dict(mqtt_data),
            mqtt_topic=data.get("mqtt_topic", "host/system/network"),
            log_level=str(data.get("log_level", "INFO")).upper(),
        )

    def replace(self, **changes) -> "NetworkMonitorConfig":
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)

    def validate(self) -> "NetworkMonitorConfig":
        """Check value ranges, returning self.

        Raises:
            ConfigError: If any setting is out of range.
        """
        if self.interval <= 0:
            raise ConfigError(f"interval must be positive, got {self.interval}")
        if not self.hosts:
            raise ConfigError("at least one host must be configured")
        if self.ping_count < 1:
            raise ConfigError(f"ping_count must be at least 1, got {self.ping_count}")
        if self.ping_timeout <= 0:
            raise ConfigError(f"ping_timeout must be positive, got {self.ping_timeout}")
        if self.failure_threshold < 1:
            raise ConfigError(
                f"failure_threshold must be at least 1, got {self.failure_threshold}"
            )
        if self.reboot_grace < 0:
            raise ConfigError(f"reboot_grace must not be negative, got {self.reboot_grace}")
        if not self.reboot_command:
            raise ConfigError("reboot_command must not be empty")
        return self


def resolve_log_file(log_file: str, euid: Optional[int] = None) -> str:
    """Fall back to a local log file when not root and using the system default."""
    if euid is None:
        euid = os.geteuid()
    if euid != 0 and log_file == DEFAULT_LOG_FILE:
        return FALLBACK_LOG_FILE
    return log_file


def load_config(
    config_path: Optional[str] = None,
    env_file: Optional[str] = None,
) -> NetworkMonitorConfig:
    """Load configuration from YAML file and environment.

    Args:
        config_path: Path to YAML config file. If not provided,
                    looks for LINKWATCH_CONFIG env var, then the
                    default /etc/linkwatch/linkwatch.yaml, then
                    falls back to built-in defaults.
        env_file: .env file to load first. If not provided, python-dotenv
                    searches for one.

    Returns:
        NetworkMonitorConfig instance.

    Raises:
        FileNotFoundError: If an explicitly requested file is missing.
        ConfigError: If a value cannot be parsed.
    """
    # .env may itself name the config file
    load_dotenv(env_file)

    if config_path is None:
        config_path = os.environ.get("LINKWATCH_CONFIG")

    data: dict = {}
    if config_path:
        data = load_yaml_config(config_path)
    elif get_config_path().exists():
        data = load_yaml_config()

    # Environment variable overrides
    if interval := os.environ.get("LINKWATCH_INTERVAL"):
        data["interval"] = interval
    if hosts := os.environ.get("LINKWATCH_HOSTS"):
        data["hosts"] = split_hosts(hosts)
    if log_file := os.environ.get("LINKWATCH_LOG_FILE"):
        data["log_file"] = log_file
    if threshold := os.environ.get("LINKWATCH_FAILURE_THRESHOLD"):
        data["failure_threshold"] = threshold
    if env_flag("LINKWATCH_NO_REBOOT"):
        data["reboot_on_failure"] = False
    if mqtt_broker := os.environ.get("MQTT_BROKER"):
        data["mqtt"] = {**(data.get("mqtt") or {}), "broker": mqtt_broker, "enabled": True}
    if log_level := os.environ.get("LOG_LEVEL"):
        data["log_level"] = log_level

    try:
        config = NetworkMonitorConfig.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    logger.debug(f"Loaded configuration from {config_path or 'defaults'}")
    return config

