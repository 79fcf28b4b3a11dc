"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (DRYGATE__SECTION__KEY)
3. Repo YAML (.drygate/config.yaml)
4. Global YAML (~/.config/drygate/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    DRYGATE__<SECTION>__<KEY>=<VALUE>

Examples:
    DRYGATE__LOGGING__LEVEL=DEBUG
    DRYGATE__PUBLISHER__PATTERN=build/reports/cpd.xml
    DRYGATE__PUBLISHER__HIGH_THRESHOLD=80
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from drygate.config.constants import (
    CONFIG_VERSION,
    DEFAULT_HIGH_THRESHOLD,
    DEFAULT_NORMAL_THRESHOLD,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
PriorityLimit = Literal["low", "normal", "high"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        DRYGATE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG also mirrors every build console line.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class HealthConfig(BaseModel):
    """Build health report settings.

    Health is reported only when both bounds are set and healthy < unhealthy.
    """

    healthy: int | None = Field(
        default=None,
        description="Report 100% health when fewer warnings than this are found.",
    )
    unhealthy: int | None = Field(
        default=None,
        description="Report 0% health when more warnings than this are found.",
    )
    threshold_limit: PriorityLimit = Field(
        default="low",
        description="Lowest priority counted when evaluating health and stability.",
    )

    @property
    def is_enabled(self) -> bool:
        return (
            self.healthy is not None
            and self.unhealthy is not None
            and 0 <= self.healthy < self.unhealthy
        )


class StabilityThresholds(BaseModel):
    """Warning counts that mark a build unstable or failed.

    A threshold is exceeded when the count is strictly greater than it.
    ``None`` disables the threshold.
    """

    unstable_total_all: int | None = None
    unstable_total_high: int | None = None
    unstable_total_normal: int | None = None
    unstable_total_low: int | None = None
    unstable_new_all: int | None = None
    unstable_new_high: int | None = None
    unstable_new_normal: int | None = None
    unstable_new_low: int | None = None
    failed_total_all: int | None = None
    failed_total_high: int | None = None
    failed_total_normal: int | None = None
    failed_total_low: int | None = None
    failed_new_all: int | None = None
    failed_new_high: int | None = None
    failed_new_normal: int | None = None
    failed_new_low: int | None = None

    @field_validator("*")
    @classmethod
    def validate_non_negative(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError(f"Threshold must be >= 0, got {v}")
        return v

    @property
    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())


class PublisherConfig(BaseModel):
    """Duplicate code publisher configuration (record version 2).

    Env vars:
        DRYGATE__PUBLISHER__PATTERN: Ant file-set pattern of report files
        DRYGATE__PUBLISHER__HIGH_THRESHOLD: Min duplicated lines for high priority
        DRYGATE__PUBLISHER__NORMAL_THRESHOLD: Min duplicated lines for normal priority
    """

    version: Literal[2] = CONFIG_VERSION
    pattern: str = Field(
        default="",
        description="Ant file-set pattern of report files. Blank uses **/cpd.xml.",
    )
    high_threshold: int = Field(
        default=DEFAULT_HIGH_THRESHOLD,
        description="Minimum number of duplicate lines for high priority warnings.",
    )
    normal_threshold: int = Field(
        default=DEFAULT_NORMAL_THRESHOLD,
        description="Minimum number of duplicate lines for normal priority warnings.",
    )
    default_encoding: str | None = Field(
        default=None,
        description="Encoding used to read report files. None honours the XML declaration.",
    )
    health: HealthConfig = Field(default_factory=HealthConfig)
    thresholds: StabilityThresholds = Field(default_factory=StabilityThresholds)
    use_delta_values: bool = Field(
        default=False,
        description="Evaluate 'new' thresholds on the count delta to the reference build "
        "instead of the set difference.",
    )
    can_run_on_failed: bool = Field(
        default=False,
        description="Also publish results for builds that already failed.",
    )
    use_previous_build_as_reference: bool = Field(
        default=False,
        description="Always use the immediately previous build as reference.",
    )
    use_stable_build_as_reference: bool = Field(
        default=False,
        description="Only consider stable builds as reference.",
    )
    should_detect_modules: bool = Field(
        default=False,
        description="Derive module names from Maven POM or Ant build files.",
    )
    can_compute_new: bool = Field(
        default=True,
        description="Compute new and fixed warnings against a reference build.",
    )

    @field_validator("default_encoding")
    @classmethod
    def validate_encoding(cls, v: str | None) -> str | None:
        if not v:
            return None
        import codecs

        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"Unknown encoding: {v}") from e
        return v


class DryConfig(BaseModel):
    """Root configuration for drygate."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    publisher: PublisherConfig = Field(default_factory=PublisherConfig)
