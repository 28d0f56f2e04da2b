"""Unified logging and debug infrastructure for please.

This module provides:
1. Centralized logging configuration
2. Debug mode via PLEASE_DEBUG env var or programmatic flag
3. Log levels via PLEASE_LOG_LEVEL env var
4. Dual output: Rich console for the operator, rotating file for debugging

Usage:
    from please.utils.logging import get_logger, configure_logging

    # In CLI entry point:
    configure_logging(debug=debug)

    # In any module:
    logger = get_logger(__name__)
    logger.info("Building contrail32.api")
    logger.debug("Detailed debug info")

Environment Variables:
    PLEASE_DEBUG=1          Enable debug mode (verbose output)
    PLEASE_LOG_LEVEL=DEBUG  Set log level (DEBUG, INFO, WARNING, ERROR)
    PLEASE_LOG_FILE=/path   Override log file location
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from please.paths import HostPaths

# Global state
_configured = False
_debug_mode = False
_log_file: Optional[Path] = None

# Shared Rich console instance
console = Console()

# Custom log level for success messages
SUCCESS_LEVEL = 25
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")


def _get_log_file() -> Path:
    """Get the log file path, creating its directory if needed."""
    global _log_file
    if _log_file:
        return _log_file

    env_log_file = os.environ.get("PLEASE_LOG_FILE")
    if env_log_file:
        _log_file = Path(env_log_file)
    else:
        _log_file = HostPaths.log_dir() / "please.log"

    _log_file.parent.mkdir(parents=True, exist_ok=True)
    return _log_file


def is_debug_mode() -> bool:
    """Check if debug mode is enabled."""
    return _debug_mode or os.environ.get("PLEASE_DEBUG", "").lower() in ("1", "true", "yes")


def enable_debug() -> None:
    """Turn on debug output after logging was configured (e.g. from --debug)."""
    global _debug_mode
    _debug_mode = True
    logging.getLogger("please").setLevel(logging.DEBUG)


def configure_logging(
    debug: bool = False,
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
) -> None:
    """Configure the logging system.

    Should be called once at application startup. Later calls are no-ops.

    Args:
        debug: Enable debug mode (debug messages on the console)
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Override log file path
    """
    global _configured, _debug_mode, _log_file

    if _configured:
        return

    _debug_mode = debug or is_debug_mode()

    if log_file:
        _log_file = log_file

    # Determine log level
    if log_level:
        level_name = log_level.upper()
    else:
        level_name = os.environ.get("PLEASE_LOG_LEVEL", "DEBUG" if _debug_mode else "INFO").upper()

    level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger("please")
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    # File handler with rotation
    try:
        file_handler = RotatingFileHandler(
            _get_log_file(),
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)
    except OSError:
        # Can't write log file, continue without it
        pass

    _configured = True

    root_logger.debug(f"Logging configured: level={level_name}, debug={_debug_mode}")
    if _log_file:
        root_logger.debug(f"Log file: {_log_file}")


class PleaseLogger:
    """Logging with Rich console output.

    Provides:
    - Standard log levels (debug, info, error)
    - Success level for green checkmark messages
    - Debug output to console when debug mode enabled
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(name)
        self.console = console

    def debug(self, message: str) -> None:
        """Log debug message.

        Debug only goes to the log file unless debug mode is enabled.
        """
        self.logger.debug(message)
        if is_debug_mode():
            self.console.print(f"[dim][DEBUG] {escape(message)}[/dim]")

    def info(self, message: str) -> None:
        self.logger.info(message)
        self.console.print(f"[blue]{escape(message)}[/blue]")

    def success(self, message: str) -> None:
        """Log success message (green output)."""
        self.logger.log(SUCCESS_LEVEL, message)
        self.console.print(f"[green]✓ {escape(message)}[/green]")

    def error(self, message: str) -> None:
        """Log error message (red output)."""
        self.logger.error(message)
        self.console.print(f"[red]✗ {escape(message)}[/red]")


def get_logger(name: str) -> PleaseLogger:
    """Get or create a logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        PleaseLogger instance
    """
    if not _configured:
        configure_logging()

    # Ensure name is under please namespace
    if not name.startswith("please"):
        name = f"please.{name}"

    return PleaseLogger(name)


def log_startup_info() -> None:
    """Log startup diagnostic information (call from main entry points)."""
    logger = get_logger("please.startup")
    logger.debug(f"Python: {sys.version}")
    logger.debug(f"Platform: {sys.platform}")
    logger.debug(f"CWD: {os.getcwd()}")
    logger.debug(f"Debug mode: {is_debug_mode()}")

    for var in ["PLEASE_DEBUG", "PLEASE_LOG_LEVEL", "PLEASE_CONFIG", "PLEASE_NIX_INSTALLER_URL"]:
        value = os.environ.get(var)
        if value:
            logger.debug(f"ENV {var}={value}")
