"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (DRYGATE__SECTION__KEY)
3. Repo config (.drygate/config.yaml)
4. Global config (~/.config/drygate/config.yaml)
5. Built-in defaults (lowest priority)

The ``publisher`` section of every YAML file goes through ``migrate_config``
before it reaches the settings sources, so version 1 records written by the
old publisher load transparently.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from drygate.config.constants import STATE_DIR
from drygate.config.migration import migrate_config
from drygate.config.models import DryConfig, LoggingConfig, PublisherConfig
from drygate.core.errors import ConfigError
from drygate.core.logging import get_logger

GLOBAL_CONFIG_PATH = Path("~/.config/drygate/config.yaml").expanduser()

log = get_logger("config.loader")


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top-level value must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _migrate_publisher_section(data: dict[str, Any], source: Path) -> dict[str, Any]:
    section = data.get("publisher")
    if section is None:
        return data
    if not isinstance(section, dict):
        raise ConfigError.invalid_value("publisher", section, "must be a mapping")
    try:
        publisher = migrate_config(section)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(["publisher", *(str(loc) for loc in err["loc"])])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    log.debug("publisher_section_loaded", source=str(source))
    return {**data, "publisher": publisher.model_dump(exclude_unset=True)}


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source (thread-safe)."""

    class DrySettings(BaseSettings):
        """Root config. Env vars: DRYGATE__LOGGING__LEVEL, DRYGATE__PUBLISHER__PATTERN, etc."""

        model_config = SettingsConfigDict(
            env_prefix="DRYGATE__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        publisher: PublisherConfig = PublisherConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml files
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return DrySettings


def _warn_on_normalized_thresholds(publisher: PublisherConfig) -> None:
    from drygate.analysis.thresholds import ThresholdValidation

    validation = ThresholdValidation()
    problem = validation.validate_high(
        publisher.normal_threshold, publisher.high_threshold
    ) or validation.validate_normal(publisher.normal_threshold, publisher.high_threshold)
    if problem:
        log.warning(
            "thresholds_normalized",
            reason=problem,
            configured_high=publisher.high_threshold,
            configured_normal=publisher.normal_threshold,
            effective_high=validation.get_high_threshold(
                publisher.normal_threshold, publisher.high_threshold
            ),
            effective_normal=validation.get_normal_threshold(
                publisher.normal_threshold, publisher.high_threshold
            ),
        )


def load_config(
    workspace: Path | None = None,
    *,
    config_file: Path | None = None,
    **kwargs: Any,
) -> DryConfig:
    """Load config: defaults < global yaml < repo yaml < env vars < kwargs.

    Args:
        workspace: Workspace root to load ``.drygate/config.yaml`` from.
                   Defaults to current working directory.
        config_file: Explicit config file used instead of the repo config.
        **kwargs: Override values (highest precedence).

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On invalid YAML syntax, unsupported record versions or
            validation errors.
    """
    workspace = workspace or Path.cwd()
    repo_path = config_file or workspace / STATE_DIR / "config.yaml"

    global_config = _migrate_publisher_section(_load_yaml(GLOBAL_CONFIG_PATH), GLOBAL_CONFIG_PATH)
    repo_config = _migrate_publisher_section(_load_yaml(repo_path), repo_path)
    yaml_config = _deep_merge(global_config, repo_config)

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e

    config = DryConfig.model_validate(settings.model_dump())
    _warn_on_normalized_thresholds(config.publisher)
    return config


def dump_publisher_config(config: PublisherConfig) -> str:
    """Render a publisher record as a ``publisher:`` YAML document."""
    data = {"publisher": config.model_dump(mode="json")}
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
