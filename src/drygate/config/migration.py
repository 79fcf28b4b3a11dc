"""Versioned publisher config records and their migration.

Version 1 is the flat layout written by the old publisher: every setting sits
at the top level under its camelCase name, and warning thresholds are strings
where ``""`` means "not set". Version 2 is ``PublisherConfig``.

``migrate_config`` is applied exactly once, when a record is loaded. Records
without a ``version`` key are treated as version 1 if they carry any legacy
camelCase key, otherwise as version 2.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from drygate.config.constants import CONFIG_VERSION
from drygate.config.models import HealthConfig, PublisherConfig, StabilityThresholds
from drygate.core.errors import ConfigError
from drygate.core.logging import get_logger

log = get_logger("config.migration")

_THRESHOLD_NAMES = tuple(StabilityThresholds.model_fields)


class LegacyPublisherRecord(BaseModel):
    """Flat version 1 publisher record."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    healthy: str = ""
    un_healthy: str = Field(default="", alias="unHealthy")
    threshold_limit: str = Field(default="low", alias="thresholdLimit")
    default_encoding: str = Field(default="", alias="defaultEncoding")
    use_delta_values: bool = Field(default=False, alias="useDeltaValues")
    unstable_total_all: str = Field(default="", alias="unstableTotalAll")
    unstable_total_high: str = Field(default="", alias="unstableTotalHigh")
    unstable_total_normal: str = Field(default="", alias="unstableTotalNormal")
    unstable_total_low: str = Field(default="", alias="unstableTotalLow")
    unstable_new_all: str = Field(default="", alias="unstableNewAll")
    unstable_new_high: str = Field(default="", alias="unstableNewHigh")
    unstable_new_normal: str = Field(default="", alias="unstableNewNormal")
    unstable_new_low: str = Field(default="", alias="unstableNewLow")
    failed_total_all: str = Field(default="", alias="failedTotalAll")
    failed_total_high: str = Field(default="", alias="failedTotalHigh")
    failed_total_normal: str = Field(default="", alias="failedTotalNormal")
    failed_total_low: str = Field(default="", alias="failedTotalLow")
    failed_new_all: str = Field(default="", alias="failedNewAll")
    failed_new_high: str = Field(default="", alias="failedNewHigh")
    failed_new_normal: str = Field(default="", alias="failedNewNormal")
    failed_new_low: str = Field(default="", alias="failedNewLow")
    can_run_on_failed: bool = Field(default=False, alias="canRunOnFailed")
    use_previous_build_as_reference: bool = Field(
        default=False, alias="usePreviousBuildAsReference"
    )
    use_stable_build_as_reference: bool = Field(default=False, alias="useStableBuildAsReference")
    should_detect_modules: bool = Field(default=False, alias="shouldDetectModules")
    can_compute_new: bool = Field(default=True, alias="canComputeNew")
    pattern: str = ""
    high_threshold: int = Field(default=0, alias="highThreshold")
    normal_threshold: int = Field(default=0, alias="normalThreshold")


_LEGACY_KEYS = frozenset(
    field.alias for field in LegacyPublisherRecord.model_fields.values() if field.alias
)


def _to_count(raw: str) -> int | None:
    """Legacy thresholds are free text; anything but a non-negative int means unset."""
    raw = raw.strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value >= 0 else None


def _record_version(data: Mapping[str, Any]) -> int:
    if "version" in data:
        try:
            return int(data["version"])
        except (TypeError, ValueError) as e:
            raise ConfigError.unsupported_version(data["version"]) from e
    if _LEGACY_KEYS.intersection(data):
        return 1
    return CONFIG_VERSION


def upgrade_legacy(record: LegacyPublisherRecord) -> PublisherConfig:
    """Map a version 1 record onto the version 2 layout."""
    thresholds = StabilityThresholds(
        **{name: _to_count(getattr(record, name)) for name in _THRESHOLD_NAMES}
    )
    limit = record.threshold_limit.strip().lower()
    health = HealthConfig(
        healthy=_to_count(record.healthy),
        unhealthy=_to_count(record.un_healthy),
        threshold_limit=limit if limit in ("low", "normal", "high") else "low",
    )
    return PublisherConfig(
        pattern=record.pattern,
        high_threshold=record.high_threshold,
        normal_threshold=record.normal_threshold,
        default_encoding=record.default_encoding or None,
        health=health,
        thresholds=thresholds,
        use_delta_values=record.use_delta_values,
        can_run_on_failed=record.can_run_on_failed,
        use_previous_build_as_reference=record.use_previous_build_as_reference,
        use_stable_build_as_reference=record.use_stable_build_as_reference,
        should_detect_modules=record.should_detect_modules,
        can_compute_new=record.can_compute_new,
    )


def migrate_config(data: Mapping[str, Any] | None) -> PublisherConfig:
    """Load a publisher record of any supported version as ``PublisherConfig``.

    Raises:
        ConfigError: If the record version is unknown.
        pydantic.ValidationError: If the record content is invalid.
    """
    data = dict(data or {})
    version = _record_version(data)
    if version == 1:
        data.pop("version", None)
        record = LegacyPublisherRecord.model_validate(data)
        log.info("legacy_config_migrated", from_version=1, to_version=CONFIG_VERSION)
        return upgrade_legacy(record)
    if version == CONFIG_VERSION:
        return PublisherConfig.model_validate(data)
    raise ConfigError.unsupported_version(version)
