"""Validation of the duplicated-lines priority thresholds.

A (normal, high) pair is valid when both values are positive and high is
strictly greater than normal. Invalid pairs are never rejected: readers get
the built-in defaults instead, so the effective pair is always consistent.
"""

from drygate.config.constants import DEFAULT_HIGH_THRESHOLD, DEFAULT_NORMAL_THRESHOLD


class ThresholdValidation:
    """Validates and normalizes the thresholds user input."""

    def validate_high(self, normal_threshold: int, high_threshold: int) -> str | None:
        """Return an error message for the high threshold, or None if valid."""
        return self._validate(high_threshold, normal_threshold, high_threshold)

    def validate_normal(self, normal_threshold: int, high_threshold: int) -> str | None:
        """Return an error message for the normal threshold, or None if valid."""
        return self._validate(normal_threshold, normal_threshold, high_threshold)

    def get_high_threshold(self, normal_threshold: int, high_threshold: int) -> int:
        """Effective minimum number of duplicate lines for high priority warnings."""
        if self.is_valid(normal_threshold, high_threshold):
            return high_threshold
        return DEFAULT_HIGH_THRESHOLD

    def get_normal_threshold(self, normal_threshold: int, high_threshold: int) -> int:
        """Effective minimum number of duplicate lines for normal priority warnings."""
        if self.is_valid(normal_threshold, high_threshold):
            return normal_threshold
        return DEFAULT_NORMAL_THRESHOLD

    def is_valid(self, normal_threshold: int, high_threshold: int) -> bool:
        return self._validate(high_threshold, normal_threshold, high_threshold) is None

    def _validate(self, threshold: int, normal_threshold: int, high_threshold: int) -> str | None:
        if threshold <= 0:
            return f"Threshold must be a positive integer, got {threshold}"
        if normal_threshold <= 0:
            return f"Normal threshold must be a positive integer, got {normal_threshold}"
        if high_threshold <= normal_threshold:
            return (
                f"High threshold ({high_threshold}) must be greater than "
                f"normal threshold ({normal_threshold})"
            )
        return None
