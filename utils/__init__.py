# utils/__init__.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Utility module exports

from .logger import (
    LogLevel,
    SchedulerLogger,
    configure_logging,
    get_logger,
    set_log_level,
)

__all__ = [
    "LogLevel",
    "SchedulerLogger",
    "configure_logging",
    "get_logger",
    "set_log_level",
]
