"""Duplication parser protocol and shared parsing helpers."""

from __future__ import annotations

import codecs
import contextlib
import xml.etree.ElementTree as ET
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from drygate.analysis.models import CodeLocation, DuplicateCode, Priority
from drygate.core.errors import DuplicationParseError

_SNIFF_BYTES = 2048

_BOMS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
    (codecs.BOM_UTF8, "utf-8-sig"),
)


@dataclass(frozen=True, slots=True)
class ParseSettings:
    """Settings every parser needs: priority thresholds, workspace and encoding."""

    normal_threshold: int
    high_threshold: int
    workspace_root: Path | None = None
    default_encoding: str | None = None

    def priority(self, lines: int) -> Priority:
        """HIGH at or above the high threshold, NORMAL at or above normal, else LOW."""
        if lines >= self.high_threshold:
            return Priority.HIGH
        if lines >= self.normal_threshold:
            return Priority.NORMAL
        return Priority.LOW

    def relativize(self, file_name: str) -> str:
        """Workspace-relative POSIX path when the file lies below the workspace root."""
        path = Path(file_name)
        if self.workspace_root is not None and path.is_absolute():
            with contextlib.suppress(ValueError):
                path = path.relative_to(self.workspace_root)
        return path.as_posix()


class DuplicationParser(Protocol):
    """Protocol for duplication report parsers.

    Each parser handles one report format and converts it to
    ``DuplicateCode`` annotations.
    """

    @property
    def format_id(self) -> str:
        """Format identifier (e.g., 'cpd', 'simian')."""
        ...

    def can_parse(self, path: Path) -> bool:
        """Check if this parser can handle the given file (content sniffing)."""
        ...

    def parse(self, path: Path, settings: ParseSettings) -> list[DuplicateCode]:
        """Parse a report file into annotations.

        Raises:
            DuplicationParseError: If the content is malformed.
            OSError: If the file cannot be read.
        """
        ...


def sniff_header(path: Path) -> str:
    """First bytes of a file decoded leniently, or '' if unreadable.

    A byte order mark selects the UTF-16 or UTF-32 codec; anything else is
    read as UTF-8.
    """
    if not path.is_file():
        return ""
    try:
        with path.open("rb") as f:
            head = f.read(_SNIFF_BYTES)
    except OSError:
        return ""
    return head.decode(_bom_encoding(head), errors="ignore")


def _bom_encoding(head: bytes) -> str:
    # UTF-32 first: its little-endian BOM starts with the UTF-16 one
    for bom, encoding in _BOMS:
        if head.startswith(bom):
            return encoding
    return "utf-8"


def read_xml_root(path: Path, settings: ParseSettings) -> ET.Element:
    """Parse an XML report and return its root with namespaces stripped.

    A configured default encoding overrides the document's XML declaration.
    Encodings expat cannot decode (multi-byte codecs such as shift_jis) are
    reported as parse errors.
    """
    encoding = settings.default_encoding
    try:
        parser = ET.XMLParser(encoding=encoding) if encoding else None
        tree = ET.parse(path, parser=parser)
    except (ET.ParseError, ValueError, LookupError) as e:
        raise DuplicationParseError.invalid_xml(str(path), str(e)) from e

    root = tree.getroot()
    for elem in root.iter():
        if isinstance(elem.tag, str) and "}" in elem.tag:
            elem.tag = elem.tag.split("}", 1)[1]
    return root


def int_attribute(path: Path, elem: ET.Element, name: str, default: int | None = None) -> int:
    """Read an integer attribute, raising a parse error if it is missing or malformed."""
    raw = elem.get(name)
    if raw is None or not raw.strip():
        if default is not None:
            return default
        raise DuplicationParseError.invalid_content(
            str(path), f"<{elem.tag}> is missing attribute '{name}'"
        )
    try:
        return int(raw.strip())
    except ValueError as e:
        raise DuplicationParseError.invalid_content(
            str(path), f"<{elem.tag}> attribute '{name}' is not an integer: {raw!r}"
        ) from e


def link_blocks(
    locations: Sequence[CodeLocation],
    lines: int,
    settings: ParseSettings,
    *,
    source_format: str,
    fragment: str = "",
    tokens: int | None = None,
) -> list[DuplicateCode]:
    """Create one annotation per block, each linking to all other blocks."""
    priority = settings.priority(lines)
    return [
        DuplicateCode(
            file_name=location.file_name,
            start_line=location.start_line,
            line_count=lines,
            priority=priority,
            source_format=source_format,
            fragment=fragment,
            tokens=tokens,
            links=tuple(other for other in locations if other is not location),
        )
        for location in locations
    ]
