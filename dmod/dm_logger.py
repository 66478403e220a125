"""
Logging utilities for the module resolver.

This module provides logging functions that respect the ResolverContext
settings (log level and rich format).
"""

#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

import sys
import time
from typing import Optional

from dm_context import ResolverContext, LogLevel


def log(context: ResolverContext, log_level: LogLevel, message: str) -> None:
    """
    Log a message if the context's level admits it.

    Args:
        context:    The resolver context containing the logging level.
        log_level:  The level of the message to log.
        message:    The message to log.
    """
    prefix = ""
    if context.log_rich_format:
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        prefix = {
            LogLevel.ERROR: f"{timestamp} [ERROR] ",
            LogLevel.WARNING: f"{timestamp} [WARNING] ",
            LogLevel.INFO: f"{timestamp} [INFO] ",
            LogLevel.DEBUG: f"{timestamp} [DEBUG] ",
        }.get(log_level, "")
    if context.log_level >= log_level:
        print(f"{prefix}{message}", file=sys.stderr)


def log_error(context: ResolverContext, message: str) -> None:
    """Log an error-level message."""
    log(context, LogLevel.ERROR, message)


def log_warning(context: ResolverContext, message: str) -> None:
    """Log a warning-level message."""
    log(context, LogLevel.WARNING, message)


def log_info(context: ResolverContext, message: str) -> None:
    """Log an info-level message."""
    log(context, LogLevel.INFO, message)


def log_debug(context: ResolverContext, message: str) -> None:
    """Log a debug-level message."""
    log(context, LogLevel.DEBUG, message)


def log_stage(context: ResolverContext, stage: str, module: Optional[str] = None) -> None:
    """
    Log the start of a configuration stage.

    Args:
        context: The resolver context containing logging settings.
        stage: The name of the stage (e.g., "Loading manifest", "Defining").
        module: Optional module name being processed.
    """
    if module:
        log(context, LogLevel.INFO, f"{stage} module '{module}'")
    else:
        log(context, LogLevel.INFO, f"{stage}...")
