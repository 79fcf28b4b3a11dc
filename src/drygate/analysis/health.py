"""Health score and build stability evaluation.

Both evaluations are plain functions over configured thresholds and
annotation counts, so they can be used without a publisher:

    report = evaluate_health(config.health, result.counts)
    verdict = evaluate_stability(
        config.thresholds,
        result.counts,
        result.new_counts,
        limit=Priority.from_limit(config.health.threshold_limit),
        use_delta_values=config.use_delta_values,
        delta=result.delta,
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from drygate.analysis.models import AnnotationCounts, Priority
from drygate.config.models import HealthConfig, StabilityThresholds


class BuildStatus(Enum):
    """Build outcome, ordered from best to worst."""

    SUCCESS = "success"
    UNSTABLE = "unstable"
    FAILURE = "failure"
    ABORTED = "aborted"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    def worse_of(self, other: BuildStatus) -> BuildStatus:
        return other if other.severity > self.severity else self


_SEVERITY = {
    BuildStatus.SUCCESS: 0,
    BuildStatus.UNSTABLE: 1,
    BuildStatus.FAILURE: 2,
    BuildStatus.ABORTED: 3,
}


@dataclass(frozen=True, slots=True)
class HealthReport:
    """Health score of a build, 0 (worst) to 100 (best)."""

    score: int
    warnings: int
    description: str


@dataclass(frozen=True, slots=True)
class StabilityVerdict:
    """Outcome of the threshold evaluation."""

    status: BuildStatus
    reason: str = ""

    @property
    def is_success(self) -> bool:
        return self.status is BuildStatus.SUCCESS


def evaluate_health(health: HealthConfig, counts: AnnotationCounts) -> HealthReport | None:
    """Compute the health score, or None if health reporting is disabled."""
    if not health.is_enabled:
        return None
    assert health.healthy is not None and health.unhealthy is not None

    warnings = counts.at_least(Priority.from_limit(health.threshold_limit))
    if warnings < health.healthy:
        score = 100
    elif warnings > health.unhealthy:
        score = 0
    else:
        score = 100 - ((warnings - health.healthy) * 100 // (health.unhealthy - health.healthy))

    noun = "warning" if warnings == 1 else "warnings"
    return HealthReport(
        score=score,
        warnings=warnings,
        description=f"DRY: {warnings} duplicate code {noun} found.",
    )


# (threshold field suffix, priority the count is taken from; None means the limit-filtered total)
_CHECKS: tuple[tuple[str, Priority | None], ...] = (
    ("all", None),
    ("high", Priority.HIGH),
    ("normal", Priority.NORMAL),
    ("low", Priority.LOW),
)


def _exceeded(
    thresholds: StabilityThresholds,
    prefix: str,
    counts: AnnotationCounts,
    limit: Priority,
) -> str | None:
    for suffix, priority in _CHECKS:
        threshold = getattr(thresholds, f"{prefix}_{suffix}")
        if threshold is None:
            continue
        if priority is not None and not limit.includes(priority):
            continue
        count = counts.at_least(limit) if priority is None else counts.of(priority)
        if count > threshold:
            label = "" if priority is None else f"{priority.value} priority "
            return (
                f"{count} {label}warnings exceed the threshold of {threshold} "
                f"by {count - threshold}"
            )
    return None


def evaluate_stability(
    thresholds: StabilityThresholds,
    totals: AnnotationCounts,
    new: AnnotationCounts,
    *,
    limit: Priority = Priority.LOW,
    use_delta_values: bool = False,
    delta: AnnotationCounts | None = None,
) -> StabilityVerdict:
    """Evaluate failure thresholds, then unstable thresholds.

    Args:
        thresholds: Configured thresholds; unset values are skipped.
        totals: Counts of all annotations in the build.
        new: Counts of annotations not present in the reference build.
        limit: Lowest priority taken into account.
        use_delta_values: Evaluate 'new' thresholds on ``delta`` instead of ``new``.
        delta: Per-priority count difference to the reference build.
    """
    new_counts = delta if use_delta_values and delta is not None else new

    for status, kind in ((BuildStatus.FAILURE, "failed"), (BuildStatus.UNSTABLE, "unstable")):
        reason = _exceeded(thresholds, f"{kind}_total", totals, limit)
        if reason:
            return StabilityVerdict(status, f"Total: {reason}")
        reason = _exceeded(thresholds, f"{kind}_new", new_counts, limit)
        if reason:
            return StabilityVerdict(status, f"New: {reason}")

    return StabilityVerdict(BuildStatus.SUCCESS)
