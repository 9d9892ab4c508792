"""Configuration loading utilities."""

import os
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml

DEFAULT_CONFIG_DIR = Path("/etc/linkwatch")
DEFAULT_CONFIG_NAME = "linkwatch.yaml"


def get_config_path(
    config_name: Optional[str] = None,
    config_dir: Optional[Union[str, Path]] = None,
) -> Path:
    """Get path to a configuration file.

    Args:
        config_name: Name of config file (without path). If None, uses
            linkwatch.yaml.
        config_dir: Directory containing config files. If None, uses
            /etc/linkwatch.

    Returns:
        Path to the configuration file.
    """
    if config_dir is None:
        config_dir = DEFAULT_CONFIG_DIR

    config_dir = Path(config_dir)

    if config_name is None:
        config_name = DEFAULT_CONFIG_NAME

    return config_dir / config_name


def load_yaml_config(config_path: Optional[Union[str, Path]] = None) -> dict:
    """Load YAML configuration file.

    Args:
        config_path: Path to config file. If None, uses get_config_path().

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        yaml.YAMLError: If config file is invalid YAML.
    """
    if config_path is None:
        config_path = get_config_path()
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def split_hosts(value: str) -> List[str]:
    """Split a comma-separated host list, dropping empty entries."""
    return [host.strip() for host in value.split(",") if host.strip()]


def parse_flag(value: Any, default: bool = False) -> bool:
    """Interpret a config value as a boolean.

    Strings such as "false" or "0" (quoted YAML, environment values) are
    read by their meaning rather than by being non-empty.
    """
    if value is None or value == "":
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def env_flag(name: str) -> Optional[bool]:
    """Read a boolean flag from the environment, None if unset."""
    value = os.environ.get(name)
    if value is None or value == "":
        return None
    return parse_flag(value)
