"""Workspace scan: find report files and parse them.

``FilesParser`` is the task the publisher hands to ``Workspace.act``. It
expands an Ant-style file-set pattern below the workspace root, parses every
match with a ``DuplicationParserRegistry`` and gathers annotations, error
messages and build console lines into one ``ParserResult``.

Report content problems (malformed XML, unknown format, empty or unreadable
files) are recorded as error messages and scanning continues. I/O failures
while reading a file propagate as ``OSError``.
"""

from __future__ import annotations

import os
import threading
from dataclasses import replace
from pathlib import Path

from drygate.analysis.models import DuplicateCode, ParserResult
from drygate.analysis.modules import ModuleDetector
from drygate.config.constants import PLUGIN_NAME
from drygate.core.errors import BuildAbortedError, ConfigError, DuplicationParseError
from drygate.core.logging import get_logger
from drygate.core.progress import pluralize
from drygate.parsers import DuplicationParserRegistry

log = get_logger("analysis.collector")

# Ant default excludes: never descend into VCS metadata
VCS_DIRS: frozenset[str] = frozenset(
    (".git", ".svn", ".hg", ".bzr", "CVS", "_darcs", ".drygate")
)


def split_patterns(pattern: str) -> list[str]:
    """Split an Ant file-set pattern list ('a/**/x.xml, b.xml') into patterns."""
    return [p.strip() for p in pattern.split(",") if p.strip()]


def _to_glob(pattern: str) -> str:
    pattern = pattern.replace("\\", "/")
    if pattern.endswith("/"):
        pattern += "**"
    if pattern == "**" or pattern.endswith("/**"):
        pattern += "/*"
    return pattern


def find_files(root: Path, pattern: str) -> list[Path]:
    """All regular files below ``root`` matching the Ant pattern list, sorted."""
    matches: set[Path] = set()
    resolved_root = root.resolve()
    for single in split_patterns(pattern):
        candidate = Path(single)
        if candidate.is_absolute():
            if candidate.is_file():
                matches.add(candidate)
            continue
        try:
            found = list(root.glob(_to_glob(single)))
        except ValueError as e:
            raise ConfigError.invalid_value("pattern", single, str(e)) from e
        for path in found:
            if not path.is_file():
                continue
            # Ant never leaves its base directory, '..' segments included
            if not path.resolve().is_relative_to(resolved_root):
                continue
            relative = path.relative_to(root)
            if VCS_DIRS.intersection(relative.parts[:-1]):
                continue
            matches.add(path)
    return sorted(matches)


class FilesParser:
    """Parses all report files matching a pattern in a workspace."""

    def __init__(
        self,
        plugin_name: str,
        pattern: str,
        registry: DuplicationParserRegistry,
        should_detect_modules: bool = False,
        is_maven_build: bool = False,
        *,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.plugin_name = plugin_name or PLUGIN_NAME
        self.pattern = pattern
        self.registry = registry
        self.should_detect_modules = should_detect_modules
        self.is_maven_build = is_maven_build
        self._cancel_event = cancel_event

    def invoke(self, root: Path) -> ParserResult:
        """Scan ``root`` and parse all matching files.

        Raises:
            OSError: On I/O failures while scanning or reading.
            BuildAbortedError: If the build is cancelled mid-scan.
        """
        result = ParserResult()
        result.log(f"Finding all files that match the pattern {self.pattern}")

        files = find_files(root, self.pattern)
        log.debug(
            "files_found",
            plugin=self.plugin_name,
            pattern=self.pattern,
            root=str(root),
            count=len(files),
        )
        if not files:
            message = f"No files found for pattern '{self.pattern}'. Configuration error?"
            result.add_error_message(message)
            result.log(message)
            return result

        result.log(f"Parsing {pluralize(len(files), 'file')} in {root}")
        detector = None
        if self.should_detect_modules or self.is_maven_build:
            detector = ModuleDetector(root)
        for path in files:
            self._check_cancelled()
            self._parse_file(root, path, result, detector)
        return result

    def _check_cancelled(self) -> None:
        if self._cancel_event is not None and self._cancel_event.is_set():
            raise BuildAbortedError.during("workspace scan")

    def _parse_file(
        self,
        root: Path,
        path: Path,
        result: ParserResult,
        detector: ModuleDetector | None,
    ) -> None:
        display = _display_name(root, path)

        if not os.access(path, os.R_OK):
            self._skip(result, f"Skipping file '{display}' because it is not readable.")
            return
        if path.stat().st_size == 0:
            self._skip(result, f"Skipping file '{display}' because it's empty.")
            return

        try:
            annotations = self.registry.parse(path)
        except DuplicationParseError as e:
            self._skip(
                result, f"Parsing of file '{display}' failed due to an exception: {e.message}"
            )
            log.warning("parse_failed", file=display, error=e.error_name)
            return

        annotations = self._assign_modules(annotations, path, detector)

        added = result.add_annotations(annotations)
        result.files_parsed += 1
        result.log(
            f"Successfully parsed file {display} with {added} unique warnings "
            f"and {len(annotations) - added} duplicates."
        )

    def _assign_modules(
        self,
        annotations: list[DuplicateCode],
        report: Path,
        detector: ModuleDetector | None,
    ) -> list[DuplicateCode]:
        if detector is None:
            return annotations
        report_module = detector.guess_module_name(str(report)) if self.is_maven_build else ""
        assigned = []
        for annotation in annotations:
            module = ""
            if self.should_detect_modules:
                module = detector.guess_module_name(annotation.file_name)
            assigned.append(replace(annotation, module_name=module or report_module))
        return assigned

    @staticmethod
    def _skip(result: ParserResult, message: str) -> None:
        result.add_error_message(message)
        result.log(message)


def _display_name(root: Path, path: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)
