"""Config module exports."""

from drygate.config.loader import dump_publisher_config, load_config
from drygate.config.migration import LegacyPublisherRecord, migrate_config, upgrade_legacy
from drygate.config.models import (
    DryConfig,
    HealthConfig,
    LoggingConfig,
    PublisherConfig,
    StabilityThresholds,
)

__all__ = [
    "load_config",
    "dump_publisher_config",
    "migrate_config",
    "upgrade_legacy",
    "LegacyPublisherRecord",
    "DryConfig",
    "HealthConfig",
    "LoggingConfig",
    "PublisherConfig",
    "StabilityThresholds",
]
