"""Combines the per-axis results of a matrix build."""

from __future__ import annotations

from drygate.actions import DryResultAction
from drygate.analysis.models import ParserResult
from drygate.build import MatrixBuild, MatrixRun
from drygate.config.models import PublisherConfig
from drygate.core.errors import InternalError
from drygate.core.logging import get_logger
from drygate.result import DryResult
from drygate.workspace import PluginLogger

log = get_logger("aggregator")


class DryAnnotationsAggregator:
    """Merges the duplicate code results of all runs into the matrix build.

    Lifecycle: ``start_build`` once, ``end_run`` for every finished run,
    ``end_build`` once. The combined result and its action are attached to
    the matrix build in ``end_build``.
    """

    def __init__(
        self,
        build: MatrixBuild,
        logger: PluginLogger,
        config: PublisherConfig,
        *,
        high_threshold: int,
        normal_threshold: int,
    ) -> None:
        self.build = build
        self.logger = logger
        self.config = config
        self.high_threshold = high_threshold
        self.normal_threshold = normal_threshold
        self._project: ParserResult | None = None

    @property
    def default_encoding(self) -> str | None:
        return self.config.default_encoding

    @property
    def use_previous_build_as_reference(self) -> bool:
        return self.config.use_previous_build_as_reference

    @property
    def use_stable_build_as_reference(self) -> bool:
        return self.config.use_stable_build_as_reference

    def start_build(self) -> bool:
        self._project = ParserResult()
        return True

    def end_run(self, run: MatrixRun) -> bool:
        project = self._started()
        action = run.get_action(DryResultAction)
        if action is None:
            self.logger.log(f"No duplicate code results found for run {run.axis}")
            return True
        project.add_project(action.result.project)
        log.debug(
            "run_aggregated",
            run=run.display_name,
            warnings=action.result.number_of_warnings,
        )
        return True

    def end_build(self) -> DryResult:
        project = self._started()
        result = DryResult(
            build=self.build,
            default_encoding=self.default_encoding,
            project=project,
            use_previous_build_as_reference=self.use_previous_build_as_reference,
            use_stable_build_as_reference=self.use_stable_build_as_reference,
            can_compute_new=self.config.can_compute_new,
        )
        action = DryResultAction(
            result,
            health=self.config.health,
            thresholds=self.config.thresholds,
            use_delta_values=self.config.use_delta_values,
        )
        self.build.add_action(action)
        self.build.set_status(action.stability.status)
        self.logger.log(result.summary)
        if action.stability.reason:
            self.logger.log(action.stability.reason)
        self._project = None
        return result

    def _started(self) -> ParserResult:
        if self._project is None:
            raise InternalError.unexpected("aggregator used before start_build")
        return self._project
