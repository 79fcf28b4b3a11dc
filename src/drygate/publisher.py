"""Duplicate code publisher.

Glue between a build and the duplicate code analysis: finds the report
files in the build workspace, parses them, attaches the result to the build
and evaluates health and stability.

Typical usage::

    publisher = DryPublisher(load_config(root).publisher)
    result = publisher.publish(build, LocalWorkspace(root), PluginLogger())
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from drygate.actions import DryProjectAction, DryResultAction
from drygate.aggregator import DryAnnotationsAggregator
from drygate.analysis.collector import FilesParser
from drygate.analysis.health import BuildStatus
from drygate.analysis.thresholds import ThresholdValidation
from drygate.build import Build, MatrixBuild
from drygate.config.constants import DEFAULT_DRY_PATTERN, PLUGIN_NAME
from drygate.config.migration import LegacyPublisherRecord, migrate_config, upgrade_legacy
from drygate.config.models import PublisherConfig
from drygate.core.logging import clear_build_id, get_logger, set_build_id
from drygate.parsers import DuplicationParserRegistry
from drygate.result import DryResult
from drygate.workspace import PluginLogger, Workspace

log = get_logger("publisher")


class DryPublisher:
    """Publishes the results of the duplicate code analysis."""

    def __init__(self, config: PublisherConfig | None = None) -> None:
        self._config = config if config is not None else PublisherConfig()
        self._validation = ThresholdValidation()

    @classmethod
    def from_legacy(cls, record: LegacyPublisherRecord | Mapping[str, Any]) -> DryPublisher:
        """Create a publisher from a flat version 1 record."""
        if isinstance(record, LegacyPublisherRecord):
            return cls(upgrade_legacy(record))
        return cls(migrate_config(record))

    @property
    def config(self) -> PublisherConfig:
        return self._config

    @property
    def pattern(self) -> str:
        """Ant file-set pattern of the report files, as configured."""
        return self._config.pattern

    @pattern.setter
    def pattern(self, pattern: str) -> None:
        self._config = self._config.model_copy(update={"pattern": pattern})

    @property
    def high_threshold(self) -> int:
        """Minimum number of duplicate lines for high priority warnings."""
        return self._validation.get_high_threshold(
            self._config.normal_threshold, self._config.high_threshold
        )

    @property
    def normal_threshold(self) -> int:
        """Minimum number of duplicate lines for normal priority warnings."""
        return self._validation.get_normal_threshold(
            self._config.normal_threshold, self._config.high_threshold
        )

    @property
    def default_encoding(self) -> str | None:
        return self._config.default_encoding

    def perform(self, build: Build, workspace: Workspace, logger: PluginLogger) -> DryResult:
        """Parse the report files of a build and attach the result to it.

        Raises:
            OSError: On I/O failures while scanning or reading report files.
            BuildAbortedError: If the build is cancelled during the scan.
        """
        logger.log("Collecting duplicate code analysis files...")

        collector = FilesParser(
            PLUGIN_NAME,
            self._config.pattern or DEFAULT_DRY_PATTERN,
            DuplicationParserRegistry(
                self.normal_threshold,
                self.high_threshold,
                workspace.root,
                self.default_encoding,
            ),
            self._config.should_detect_modules,
            build.is_maven,
            cancel_event=build.cancel_event,
        )
        project = workspace.act(collector)
        logger.log_lines(project.log_messages)

        result = DryResult(
            build=build,
            default_encoding=self.default_encoding,
            project=project,
            use_previous_build_as_reference=self._config.use_previous_build_as_reference,
            use_stable_build_as_reference=self._config.use_stable_build_as_reference,
            can_compute_new=self._config.can_compute_new,
        )
        build.add_action(self._create_action(result))
        return result

    def publish(
        self, build: Build, workspace: Workspace, logger: PluginLogger
    ) -> DryResult | None:
        """Run ``perform`` and apply health and stability to the build.

        Returns None when the build already failed and publishing on failed
        builds is disabled. The build status is only ever lowered.
        """
        set_build_id(build.display_name)
        try:
            if not self._can_continue(build.status):
                logger.log("Skipping publisher since build result is " + build.status.name)
                log.info("publisher_skipped", status=build.status.value)
                return None

            result = self.perform(build, workspace, logger)
            action = build.get_action(DryResultAction)
            assert action is not None

            logger.log(result.summary)
            verdict = action.stability
            if verdict.reason:
                logger.log(verdict.reason)
            if action.health_report is not None:
                logger.log(
                    f"{action.health_report.description} "
                    f"Health: {action.health_report.score}%"
                )
            build.set_status(verdict.status)
            log.info(
                "published",
                warnings=result.number_of_warnings,
                new=result.number_of_new_warnings,
                fixed=result.number_of_fixed_warnings,
                status=build.status.value,
            )
            return result
        finally:
            clear_build_id()

    def _can_continue(self, status: BuildStatus) -> bool:
        return self._config.can_run_on_failed or status.severity < BuildStatus.FAILURE.severity

    def _create_action(self, result: DryResult) -> DryResultAction:
        return DryResultAction(
            result,
            health=self._config.health,
            thresholds=self._config.thresholds,
            use_delta_values=self._config.use_delta_values,
        )

    def create_aggregator(
        self, build: MatrixBuild, logger: PluginLogger
    ) -> DryAnnotationsAggregator:
        """Aggregator combining the run results of a matrix build."""
        return DryAnnotationsAggregator(
            build,
            logger,
            self._config,
            high_threshold=self.high_threshold,
            normal_threshold=self.normal_threshold,
        )

    def get_project_action(self, build: Build) -> DryProjectAction:
        """Job-level action over the build chain ending at ``build``."""
        return DryProjectAction(build)
