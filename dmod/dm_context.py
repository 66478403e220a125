"""
Resolver context for cross-cutting configuration options.

This module defines the ResolverContext dataclass which holds the options that
affect more than one stage of a configuration pass (reference checking,
source discovery, artifact directives, logging).
"""

#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Tuple


class LogLevel(IntEnum):
    """Hierarchical logging levels for the module resolver."""
    SILENT = 0      # No logging
    ERROR = 3       # Error messages only
    WARNING = 6     # Warning messages (default)
    INFO = 10       # Target summaries (-v)
    DEBUG = 30      # Resolved closures and lookups (-vvv)


@dataclass
class ResolverContext:
    """
    Holds options shared by the closure resolver, the module definer and the CLI.

    Attributes:
        log_rich_format:        If True, emit logs with timestamp and level prefix.
        log_level:              Current logging level.
        strict_references:      If True, a reference that is neither a third-party name
                                nor a defined module aborts the module definition.
                                If False, it is reported as a warning and skipped.
        allow_redefinition:     If True, defining a module twice replaces the earlier
                                definition (with a warning) instead of failing.
        source_suffixes:        File suffixes collected when a module does not list
                                its sources explicitly.
        extra_link_libraries:   Libraries appended to every artifact's link line.
        build_shared_libs:      If True, library artifacts are requested as shared objects.
    """
    log_rich_format: bool = False
    log_level: LogLevel = LogLevel.WARNING
    strict_references: bool = True
    allow_redefinition: bool = False
    source_suffixes: Tuple[str, ...] = (".cpp",)
    extra_link_libraries: List[str] = field(default_factory=list)
    build_shared_libs: bool = False

    @staticmethod
    def default() -> 'ResolverContext':
        """Create a ResolverContext with default settings."""
        return ResolverContext(log_level=LogLevel.WARNING)
