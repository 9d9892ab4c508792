"""Network Monitor Service - Monitors connectivity and reboots on sustained outages."""

__version__ = "0.1.0"

from .monitor import CycleResult, LinkEvent, LinkStatus, NetworkMonitorService, RunState


def main(argv=None) -> int:
    """Entry point for network monitor service."""
    import sys

    from rich.console import Console

    from .cli import apply_args, parse_args
    from .config import ConfigError, load_config, resolve_log_file
    from .monitor import WARNING_STYLE
    from .publisher import StatusPublisher
    from linkwatch.shared.logging import setup_event_log, setup_logging

    args = parse_args(argv)

    try:
        config = apply_args(load_config(args.config), args).validate()
    except (ConfigError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Use --help for usage information", file=sys.stderr)
        return 1

    setup_logging(config.log_level)
    console = Console()

    log_file = resolve_log_file(config.log_file)
    if log_file != config.log_file:
        console.print(
            f"Warning: Not running as root. Using local log file: {log_file}",
            style=WARNING_STYLE,
        )
        config = config.replace(log_file=log_file)

    events = setup_event_log(config.log_file, console)

    publisher = None
    if config.mqtt.enabled:
        publisher = StatusPublisher(config.mqtt, config.mqtt_topic)

    service = NetworkMonitorService(
        config,
        events=events,
        publisher=publisher,
        console=console,
    )
    return service.run()


__all__ = [
    "CycleResult",
    "LinkEvent",
    "LinkStatus",
    "NetworkMonitorService",
    "RunState",
    "main",
]
