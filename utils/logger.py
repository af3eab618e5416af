# utils/logger.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Logging utility for the build scheduler with configurable levels

import logging
import sys
from enum import Enum
from typing import Optional


class LogLevel(Enum):
    """Log levels for the scheduler."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


class SchedulerLogger:
    """Centralized logger for the scheduler with emoji support and structured output."""

    def __init__(self, name: str = "ergon", level: LogLevel = LogLevel.INFO):
        """Initialize the scheduler logger.

        Args:
            name: Logger name
            level: Default logging level
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level.value)

        # Remove existing handlers to avoid duplicates
        self.logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level.value)
        console_handler.setFormatter(SchedulerFormatter())

        self.logger.addHandler(console_handler)

        # Prevent propagation to root logger
        self.logger.propagate = False

    @property
    def level(self) -> int:
        return self.logger.level

    def set_level(self, level: LogLevel):
        """Change the logging level."""
        self.logger.setLevel(level.value)
        for handler in self.logger.handlers:
            handler.setLevel(level.value)

    # Core logging methods
    def debug(self, message: str, **kwargs):
        """Log debug message (detailed internal state)."""
        self.logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs):
        """Log info message (general progress)."""
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message (unexpected but recoverable)."""
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs):
        """Log error message (serious problems)."""
        self.logger.error(message, **kwargs)

    # Specialized methods for scheduling events
    def node_registered(self, identity: str, labels: str):
        self.debug(f"🖥️  Node '{identity}' registered with labels [{labels}]")

    def node_state_changed(self, identity: str, old_state: str, new_state: str):
        self.debug(f"    Node '{identity}': {old_state} → {new_state}")

    def item_submitted(self, item_id: int, task: str, label: Optional[str]):
        label_str = label if label is not None else "<any>"
        self.debug(f"📥 Item #{item_id} ({task}) submitted with label {label_str}")

    def item_assigned(self, item_id: int, task: str, node: str, run_id: str):
        self.info(f"✅ {run_id} (item #{item_id}, {task}) → {node}")

    def item_blocked(self, item_id: int, reason: str):
        self.debug(f"    ⛔ Item #{item_id} blocked: {reason}")

    def item_cancelled(self, item_id: int, cancelled: bool):
        if cancelled:
            self.debug(f"🗑️  Item #{item_id} cancelled while pending")
        else:
            self.debug(f"    Cancellation of item #{item_id} ignored: already assigned")

    def item_completed(self, item_id: int, node: Optional[str]):
        node_str = f" on {node}" if node else ""
        self.debug(f"🏁 Item #{item_id} completed{node_str}")

    def match_pass(self, pass_no: int, idle: int, pending: int, assigned: int):
        self.debug(
            f"  🔍 Match pass {pass_no}: idle={idle}, pending={pending}, assigned={assigned}"
        )

    def validation_result(self, success: bool, message: str = ""):
        """Log validation results."""
        if success:
            self.debug(f"✅ {message}" if message else "✅ Validation successful")
        else:
            self.error(f"❌ {message}" if message else "❌ Validation failed")


class SchedulerFormatter(logging.Formatter):
    """Custom formatter for scheduler logging with clean output."""

    def format(self, record):
        # For INFO level and above, show message only (clean output)
        if record.levelno >= logging.INFO:
            return record.getMessage()

        if record.levelno == logging.DEBUG:
            return f"[DEBUG] {record.getMessage()}"

        return f"[{record.levelname}] {record.getMessage()}"


# Global logger instance
_global_logger: Optional[SchedulerLogger] = None


def get_logger(name: str = "ergon") -> SchedulerLogger:
    """Get or create the global scheduler logger instance.

    Args:
        name: Logger name (default: "ergon")

    Returns:
        SchedulerLogger instance
    """
    global _global_logger
    if _global_logger is None:
        _global_logger = SchedulerLogger(name)
    return _global_logger


def set_log_level(level: LogLevel):
    """Set the global log level.

    Args:
        level: New log level
    """
    logger = get_logger()
    logger.set_level(level)


def configure_logging(verbose: bool = False, debug: bool = False):
    """Configure logging based on command line flags.

    Args:
        verbose: Enable verbose (INFO) output
        debug: Enable debug output (overrides verbose)
    """
    if debug:
        set_log_level(LogLevel.DEBUG)
    elif verbose:
        set_log_level(LogLevel.INFO)
    else:
        set_log_level(LogLevel.WARNING)
