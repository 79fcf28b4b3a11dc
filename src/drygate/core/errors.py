"""drygate error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Parse
- 4xxx: Build
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_UNSUPPORTED_VERSION = 2003

    # Parse (3xxx)
    PARSE_INVALID_XML = 3001
    PARSE_UNKNOWN_FORMAT = 3002
    PARSE_INVALID_CONTENT = 3003

    # Build (4xxx)
    BUILD_ABORTED = 4001
    BUILD_STORE_CORRUPT = 4002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class DryError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(DryError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def unsupported_version(cls, version: Any) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_UNSUPPORTED_VERSION,
            message=f"Unsupported publisher config version: {version}",
            details={"version": str(version)},
        )


class DuplicationParseError(DryError):
    """A duplication report could not be parsed."""

    @classmethod
    def invalid_xml(cls, path: str, reason: str) -> "DuplicationParseError":
        return cls(
            code=ErrorCode.PARSE_INVALID_XML,
            message=f"Invalid XML in {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def unknown_format(cls, path: str) -> "DuplicationParseError":
        return cls(
            code=ErrorCode.PARSE_UNKNOWN_FORMAT,
            message=f"Could not detect duplication report format for: {path}. "
            "Supported formats: cpd, simian, dupfinder",
            details={"path": path},
        )

    @classmethod
    def invalid_content(cls, path: str, reason: str) -> "DuplicationParseError":
        return cls(
            code=ErrorCode.PARSE_INVALID_CONTENT,
            message=f"Unexpected content in {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class BuildAbortedError(DryError):
    """The build was cancelled while the publisher was running."""

    @classmethod
    def during(cls, phase: str) -> "BuildAbortedError":
        return cls(
            code=ErrorCode.BUILD_ABORTED,
            message=f"Build aborted during {phase}",
            details={"phase": phase},
        )


class BuildStoreError(DryError):
    """Stored build history could not be read."""

    @classmethod
    def corrupt(cls, path: str, reason: str) -> "BuildStoreError":
        return cls(
            code=ErrorCode.BUILD_STORE_CORRUPT,
            message=f"Corrupt build record {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class InternalError(DryError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
