"""Duplicate code analysis: annotation model, thresholds and evaluation."""

from drygate.analysis.models import (
    AnnotationCounts,
    CodeLocation,
    DuplicateCode,
    ParserResult,
    Priority,
)
from drygate.analysis.thresholds import ThresholdValidation

__all__ = [
    "AnnotationCounts",
    "CodeLocation",
    "DuplicateCode",
    "ParserResult",
    "Priority",
    "ThresholdValidation",
]
