"""Duplication parser registry and auto-detection.

This module provides:
- PARSER_REGISTRY: All available parsers, in detection order
- detect_parser: Auto-detect format from file content
- DuplicationParserRegistry: Parses report files with fixed thresholds,
  workspace root and encoding
"""

from collections.abc import Sequence
from pathlib import Path

from drygate.analysis.models import DuplicateCode
from drygate.core.errors import DuplicationParseError

from .base import DuplicationParser, ParseSettings
from .cpd import CpdParser
from .dupfinder import DupFinderParser
from .simian import SimianParser

PARSER_REGISTRY: Sequence[DuplicationParser] = (
    CpdParser(),
    SimianParser(),
    DupFinderParser(),
)

PARSER_BY_FORMAT: dict[str, DuplicationParser] = {p.format_id: p for p in PARSER_REGISTRY}

__all__ = [
    "PARSER_REGISTRY",
    "PARSER_BY_FORMAT",
    "detect_parser",
    "DuplicationParser",
    "DuplicationParserRegistry",
    "ParseSettings",
    "CpdParser",
    "DupFinderParser",
    "SimianParser",
]


def detect_parser(path: Path) -> DuplicationParser | None:
    """Return the first parser in registry order that claims the file."""
    for parser in PARSER_REGISTRY:
        if parser.can_parse(path):
            return parser
    return None


class DuplicationParserRegistry:
    """Parses duplication reports of any supported format.

    Bound to one set of priority thresholds, a workspace root (used to make
    file names relative) and the default encoding for reading reports.
    """

    def __init__(
        self,
        normal_threshold: int,
        high_threshold: int,
        workspace_root: Path | str | None = None,
        default_encoding: str | None = None,
    ) -> None:
        self.settings = ParseSettings(
            normal_threshold=normal_threshold,
            high_threshold=high_threshold,
            workspace_root=Path(workspace_root) if workspace_root is not None else None,
            default_encoding=default_encoding,
        )

    @property
    def normal_threshold(self) -> int:
        return self.settings.normal_threshold

    @property
    def high_threshold(self) -> int:
        return self.settings.high_threshold

    def parse(self, path: Path, *, format_id: str | None = None) -> list[DuplicateCode]:
        """Parse one report file.

        Args:
            path: Report file.
            format_id: Force a specific format (skip auto-detection).

        Raises:
            DuplicationParseError: If the format is unknown or parsing fails.
            OSError: If the file cannot be read.
        """
        if format_id:
            parser = PARSER_BY_FORMAT.get(format_id)
            if parser is None:
                raise DuplicationParseError.unknown_format(str(path))
        else:
            parser = detect_parser(path)
            if parser is None:
                raise DuplicationParseError.unknown_format(str(path))
        return parser.parse(path, self.settings)
