"""Centralized logging utilities with tqdm support and timestamps."""
from __future__ import annotations

import os
import sys
from datetime import datetime

from tqdm import tqdm

# ANSI color codes
COLOR_RESET = "\033[0m"
COLOR_RED = "\033[91m"
COLOR_YELLOW = "\033[93m"
COLOR_GRAY = "\033[90m"

# Log level configuration
LOG_LEVEL_DEBUG = 0
LOG_LEVEL_INFO = 1
LOG_LEVEL_WARNING = 2
LOG_LEVEL_ERROR = 3

_LEVEL_NAMES = {
    "DEBUG": LOG_LEVEL_DEBUG,
    "INFO": LOG_LEVEL_INFO,
    "WARNING": LOG_LEVEL_WARNING,
    "ERROR": LOG_LEVEL_ERROR,
}


def _flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in {"1", "true", "on"}


# Environment variable for log level (default INFO)
_LOG_LEVEL = _LEVEL_NAMES.get(os.environ.get("LOG_LEVEL", "INFO").upper(), LOG_LEVEL_INFO)

# Debug flags from environment
DEBUG_ASSETS = _flag("DEBUG_ASSETS")
DEBUG_NAV = _flag("DEBUG_NAV")
DEBUG_STORE = _flag("DEBUG_STORE")


def set_log_level(level: str) -> None:
    """Override the level picked from LOG_LEVEL (used by the command line)."""
    global _LOG_LEVEL
    _LOG_LEVEL = _LEVEL_NAMES.get(level.upper(), _LOG_LEVEL)


def get_timestamp() -> str:
    """Get current timestamp in [HH:MM:SS.mmm] format."""
    return datetime.now().strftime("[%H:%M:%S.%f")[:-3] + "]"


def _format_message(message: str, prefix: str = "", level: str = "", color: str = "") -> str:
    """Format a log message with timestamp, optional prefix, and color."""
    parts = [get_timestamp()]
    if level:
        parts.append(f"[{level}]")
    if prefix:
        parts.append(f"[{prefix}]")
    parts.append(message)
    formatted = " ".join(parts)

    if color and sys.stderr.isatty():  # Only use colors if output is a terminal
        return f"{color}{formatted}{COLOR_RESET}"
    return formatted


def _write(message: str, file=None) -> None:
    """Write through tqdm so messages never break an active progress bar."""
    tqdm.write(message, file=file or sys.stdout)


def log_debug(message: str, prefix: str = "") -> None:
    """Log a debug message (only if DEBUG level enabled)."""
    if _LOG_LEVEL <= LOG_LEVEL_DEBUG:
        _write(_format_message(message, prefix, "DEBUG", COLOR_GRAY), sys.stderr)


def log_info(message: str, prefix: str = "") -> None:
    """Log an info message."""
    if _LOG_LEVEL <= LOG_LEVEL_INFO:
        _write(_format_message(message, prefix))


def log_warning(message: str, prefix: str = "") -> None:
    """Log a warning message."""
    if _LOG_LEVEL <= LOG_LEVEL_WARNING:
        _write(_format_message(message, prefix, "WARNING", COLOR_YELLOW), sys.stderr)


def log_error(message: str, prefix: str = "") -> None:
    """Log an error message."""
    if _LOG_LEVEL <= LOG_LEVEL_ERROR:
        _write(_format_message(message, prefix, "ERROR", COLOR_RED), sys.stderr)


def is_debug_enabled(category: str = "") -> bool:
    """Check if debug is enabled globally or for a specific category."""
    if _LOG_LEVEL <= LOG_LEVEL_DEBUG:
        return True

    if category == "assets":
        return DEBUG_ASSETS
    elif category == "nav":
        return DEBUG_NAV
    elif category == "store":
        return DEBUG_STORE

    return False
