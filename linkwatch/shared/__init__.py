"""Shared utilities for linkwatch services."""

from .config import load_yaml_config, get_config_path
from .mqtt import MQTTConfig
from .logging import setup_logging, setup_event_log

__all__ = [
    "load_yaml_config",
    "get_config_path",
    "MQTTConfig",
    "setup_logging",
    "setup_event_log",
]
