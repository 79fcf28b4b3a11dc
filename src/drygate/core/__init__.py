"""Core module exports."""

from drygate.core.errors import (
    BuildAbortedError,
    BuildStoreError,
    ConfigError,
    DryError,
    DuplicationParseError,
    ErrorCode,
    InternalError,
)
from drygate.core.logging import (
    clear_build_id,
    configure_logging,
    get_build_id,
    get_logger,
    set_build_id,
)
from drygate.core.progress import get_console, pluralize, status

__all__ = [
    # Errors
    "BuildAbortedError",
    "BuildStoreError",
    "ConfigError",
    "DryError",
    "DuplicationParseError",
    "ErrorCode",
    "InternalError",
    # Logging
    "clear_build_id",
    "configure_logging",
    "get_build_id",
    "get_logger",
    "set_build_id",
    # Output
    "get_console",
    "pluralize",
    "status",
]
