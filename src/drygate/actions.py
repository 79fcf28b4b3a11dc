"""Build and project actions.

``DryResultAction`` is attached to every build the publisher ran on and is
how later builds find their reference. ``DryProjectAction`` summarizes the
results of a whole job as a trend over its build chain.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import TYPE_CHECKING, Any

from drygate.analysis.health import (
    HealthReport,
    StabilityVerdict,
    evaluate_health,
    evaluate_stability,
)
from drygate.analysis.models import Priority
from drygate.config.models import HealthConfig, StabilityThresholds

if TYPE_CHECKING:
    from drygate.build import Build
    from drygate.result import DryResult

DISPLAY_NAME = "Duplicate Code"
URL_NAME = "dry"


@dataclass(eq=False)
class DryResultAction:
    """Duplicate code result of one build, with its health and stability."""

    result: DryResult
    health: HealthConfig = field(default_factory=HealthConfig)
    thresholds: StabilityThresholds = field(default_factory=StabilityThresholds)
    use_delta_values: bool = False

    display_name: str = field(default=DISPLAY_NAME, init=False)
    url_name: str = field(default=URL_NAME, init=False)

    @property
    def build(self) -> Build:
        return self.result.build

    @cached_property
    def health_report(self) -> HealthReport | None:
        return evaluate_health(self.health, self.result.counts)

    @cached_property
    def stability(self) -> StabilityVerdict:
        return evaluate_stability(
            self.thresholds,
            self.result.counts,
            self.result.new_counts,
            limit=Priority.from_limit(self.health.threshold_limit),
            use_delta_values=self.use_delta_values,
            delta=self.result.delta,
        )

    @property
    def summary(self) -> str:
        return self.result.summary

    def to_dict(self) -> dict[str, Any]:
        report = self.health_report
        verdict = self.stability
        return {
            "result": self.result.to_dict(),
            "health": (
                {"score": report.score, "description": report.description}
                if report is not None
                else None
            ),
            "status": verdict.status.value,
            "reason": verdict.reason,
        }


@dataclass(frozen=True, slots=True)
class TrendPoint:
    """Warning counts of one build in a project trend."""

    build: int
    high: int
    normal: int
    low: int
    new: int
    fixed: int

    @property
    def total(self) -> int:
        return self.high + self.normal + self.low


@dataclass(eq=False)
class DryProjectAction:
    """Job-level view over the duplicate code results of a build chain."""

    last_build: Build
    display_name: str = field(default=DISPLAY_NAME, init=False)
    url_name: str = field(default=URL_NAME, init=False)

    def results(self) -> list[DryResult]:
        """Results of all builds carrying one, newest first."""
        found = []
        build: Build | None = self.last_build
        while build is not None:
            action = build.get_action(DryResultAction)
            if action is not None:
                found.append(action.result)
            build = build.previous
        return found

    @property
    def last_result(self) -> DryResult | None:
        results = self.results()
        return results[0] if results else None

    @property
    def has_results(self) -> bool:
        return self.last_result is not None

    def trend(self, limit: int | None = None) -> list[TrendPoint]:
        """Per-build counts, oldest first, at most ``limit`` builds."""
        results = self.results()
        if limit is not None:
            results = results[:limit]
        return [
            TrendPoint(
                build=r.build.number,
                high=r.counts.high,
                normal=r.counts.normal,
                low=r.counts.low,
                new=r.number_of_new_warnings,
                fixed=r.number_of_fixed_warnings,
            )
            for r in reversed(results)
        ]
