"""linkwatch - host network connectivity watchdog."""

__version__ = "0.1.0"
