"""Per-build duplicate code result.

A ``DryResult`` is created once per build execution and never changes
afterwards. Everything beyond the parsed project (reference build, new and
fixed warnings, deltas) is derived lazily from the build chain.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING, Any

from drygate.actions import DryResultAction
from drygate.analysis.health import BuildStatus
from drygate.analysis.models import AnnotationCounts, DuplicateCode, ParserResult
from drygate.config.constants import PLUGIN_NAME
from drygate.core.progress import pluralize

if TYPE_CHECKING:
    from drygate.build import Build


@dataclass(frozen=True, eq=False)
class DryResult:
    """Duplicate code warnings of one build, compared to a reference build."""

    build: Build
    default_encoding: str | None
    project: ParserResult
    use_previous_build_as_reference: bool = False
    use_stable_build_as_reference: bool = False
    can_compute_new: bool = True

    @cached_property
    def reference_build(self) -> Build | None:
        """Baseline build for new and fixed warnings.

        Only builds that carry a duplicate code result qualify. With
        ``use_stable_build_as_reference`` they must also have succeeded.
        With ``use_previous_build_as_reference`` the search stops at the
        immediately previous build.
        """
        if not self.can_compute_new:
            return None
        for candidate in self.build.history():
            if self._is_reference_candidate(candidate):
                return candidate
            if self.use_previous_build_as_reference:
                return None
        return None

    def _is_reference_candidate(self, candidate: Build) -> bool:
        if candidate.get_action(DryResultAction) is None:
            return False
        if self.use_stable_build_as_reference:
            return candidate.status is BuildStatus.SUCCESS
        return True

    @cached_property
    def reference_result(self) -> DryResult | None:
        if self.reference_build is None:
            return None
        action = self.reference_build.get_action(DryResultAction)
        return action.result if action is not None else None

    @property
    def annotations(self) -> list[DuplicateCode]:
        return self.project.annotations

    @cached_property
    def new_annotations(self) -> list[DuplicateCode]:
        """Warnings whose key is absent in the reference build.

        Without a reference build every warning is new, unless computing new
        warnings is disabled.
        """
        if not self.can_compute_new:
            return []
        reference = self.reference_result
        if reference is None:
            return list(self.annotations)
        known = {a.key for a in reference.annotations}
        return [a for a in self.annotations if a.key not in known]

    @cached_property
    def fixed_annotations(self) -> list[DuplicateCode]:
        """Warnings of the reference build that are gone in this build."""
        reference = self.reference_result
        if reference is None:
            return []
        current = {a.key for a in self.annotations}
        return [a for a in reference.annotations if a.key not in current]

    @cached_property
    def counts(self) -> AnnotationCounts:
        return self.project.counts

    @cached_property
    def new_counts(self) -> AnnotationCounts:
        return AnnotationCounts.of_annotations(self.new_annotations)

    @cached_property
    def fixed_counts(self) -> AnnotationCounts:
        return AnnotationCounts.of_annotations(self.fixed_annotations)

    @cached_property
    def delta(self) -> AnnotationCounts:
        """Per-priority count change against the reference build."""
        reference = self.reference_result
        if reference is None:
            return self.counts
        return self.counts.minus(reference.counts)

    @property
    def number_of_warnings(self) -> int:
        return self.project.number_of_annotations()

    @property
    def number_of_new_warnings(self) -> int:
        return len(self.new_annotations)

    @property
    def number_of_fixed_warnings(self) -> int:
        return len(self.fixed_annotations)

    @property
    def has_errors(self) -> bool:
        return self.project.has_errors

    @property
    def summary(self) -> str:
        text = (
            f"{PLUGIN_NAME}: {pluralize(self.number_of_warnings, 'duplicate code warning')} "
            f"from {pluralize(self.project.files_parsed, 'analysis', 'analyses')}"
        )
        if self.reference_result is not None:
            text += f" ({self.number_of_new_warnings} new, {self.number_of_fixed_warnings} fixed)"
        return text + "."

    def to_dict(self) -> dict[str, Any]:
        reference = self.reference_build
        return {
            "build": self.build.number,
            "default_encoding": self.default_encoding,
            "reference_build": reference.number if reference is not None else None,
            "use_previous_build_as_reference": self.use_previous_build_as_reference,
            "use_stable_build_as_reference": self.use_stable_build_as_reference,
            "can_compute_new": self.can_compute_new,
            "counts": _counts_dict(self.counts),
            "new": _counts_dict(self.new_counts),
            "fixed": _counts_dict(self.fixed_counts),
            "delta": _counts_dict(self.delta),
            "project": self.project.to_dict(),
        }


def _counts_dict(counts: AnnotationCounts) -> dict[str, int]:
    return {
        "high": counts.high,
        "normal": counts.normal,
        "low": counts.low,
        "total": counts.total,
    }
