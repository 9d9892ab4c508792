"""Logging configuration utilities."""

import logging
from pathlib import Path
from typing import List, Optional, Union

from rich.console import Console
from rich.text import Text

EVENT_LOGGER_NAME = "linkwatch.events"
EVENT_FORMAT = "[%(asctime)s] %(message)s"
EVENT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    quiet_loggers: Optional[List[str]] = None,
) -> None:
    """Configure logging for linkwatch services.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format_string: Custom format string for log messages.
        quiet_loggers: List of logger names to set to WARNING level.
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Convert string to logging level
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format=format_string,
    )

    # Quiet down verbose third-party loggers
    default_quiet = ["paho"]
    quiet_loggers = (quiet_loggers or []) + default_quiet

    for logger_name in quiet_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


class ConsoleEventHandler(logging.Handler):
    """Echo event records to a rich console.

    A record may carry a ``style`` attribute (passed through ``extra``)
    naming the rich style to print it with.
    """

    def __init__(self, console: Optional[Console] = None):
        super().__init__()
        self.console = console or Console()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
            style = getattr(record, "style", None)
            self.console.print(Text(line, style=style or ""), soft_wrap=True)
        except Exception:
            self.handleError(record)


def setup_event_log(
    log_file: Union[str, Path],
    console: Optional[Console] = None,
) -> logging.Logger:
    """Build the append-only event log.

    Lines are written as ``[YYYY-MM-DD HH:MM:SS] message`` to ``log_file``
    (created if missing) and echoed to ``console``.

    Args:
        log_file: Path of the event log file.
        console: Rich console for the echo. Defaults to stdout.

    Returns:
        The configured, non-propagating event logger.
    """
    events = logging.getLogger(EVENT_LOGGER_NAME)
    events.setLevel(logging.INFO)
    events.propagate = False

    for handler in list(events.handlers):
        events.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(EVENT_FORMAT, datefmt=EVENT_DATE_FORMAT)

    file_handler = logging.FileHandler(str(log_file), mode="a", encoding="utf-8")
    file_handler.setFormatter(formatter)
    events.addHandler(file_handler)

    console_handler = ConsoleEventHandler(console)
    console_handler.setFormatter(formatter)
    events.addHandler(console_handler)

    return events
