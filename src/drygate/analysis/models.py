"""Duplicate code annotation model.

File-centric model: a single duplication found by a detector (a "set" of
identical blocks) becomes one ``DuplicateCode`` annotation per block, each
linking to its siblings. All report formats convert to this representation.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Priority(Enum):
    """Warning priority derived from the number of duplicated lines."""

    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    @classmethod
    def from_limit(cls, limit: str) -> Priority:
        """Parse a threshold limit ('low', 'normal', 'high'), defaulting to LOW."""
        try:
            return cls(limit.strip().lower())
        except ValueError:
            return cls.LOW

    def includes(self, other: Priority) -> bool:
        """True if ``other`` is counted when this priority is the lower limit."""
        return other.rank >= self.rank


_RANKS = {Priority.HIGH: 3, Priority.NORMAL: 2, Priority.LOW: 1}


@dataclass(frozen=True, slots=True)
class CodeLocation:
    """Position of a duplicated block."""

    file_name: str
    start_line: int
    line_count: int

    @property
    def end_line(self) -> int:
        return self.start_line + max(self.line_count, 1) - 1

    def __str__(self) -> str:
        return f"{self.file_name}:{self.start_line}-{self.end_line}"


@dataclass(frozen=True, slots=True)
class DuplicateCode:
    """One duplicated block, linked to the other blocks of its duplication."""

    file_name: str
    start_line: int
    line_count: int
    priority: Priority
    source_format: str
    fragment: str = ""
    tokens: int | None = None
    module_name: str = ""
    links: tuple[CodeLocation, ...] = ()

    @property
    def end_line(self) -> int:
        return self.start_line + max(self.line_count, 1) - 1

    @property
    def location(self) -> CodeLocation:
        return CodeLocation(self.file_name, self.start_line, self.line_count)

    @property
    def key(self) -> str:
        """Identity across builds.

        Built from the file, the block size and the duplicated text, so a
        block that merely moved within its file is still the same warning.
        Without a code fragment the start line stands in for the text.
        """
        content = self.fragment.strip() if self.fragment.strip() else str(self.start_line)
        digest = hashlib.sha1(
            f"{self.file_name}\0{self.line_count}\0{content}".encode(), usedforsecurity=False
        )
        return digest.hexdigest()[:16]

    @property
    def message(self) -> str:
        others = ", ".join(str(link) for link in self.links) or "no other location"
        return f"Duplicate code: {self.line_count} lines, also found in {others}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_name": self.file_name,
            "start_line": self.start_line,
            "line_count": self.line_count,
            "priority": self.priority.value,
            "source_format": self.source_format,
            "fragment": self.fragment,
            "tokens": self.tokens,
            "module_name": self.module_name,
            "links": [
                {
                    "file_name": link.file_name,
                    "start_line": link.start_line,
                    "line_count": link.line_count,
                }
                for link in self.links
            ],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DuplicateCode:
        return cls(
            file_name=data["file_name"],
            start_line=int(data["start_line"]),
            line_count=int(data["line_count"]),
            priority=Priority(data["priority"]),
            source_format=data.get("source_format", "cpd"),
            fragment=data.get("fragment", ""),
            tokens=data.get("tokens"),
            module_name=data.get("module_name", ""),
            links=tuple(
                CodeLocation(link["file_name"], int(link["start_line"]), int(link["line_count"]))
                for link in data.get("links", [])
            ),
        )


@dataclass(frozen=True, slots=True)
class AnnotationCounts:
    """Number of annotations per priority."""

    high: int = 0
    normal: int = 0
    low: int = 0

    @property
    def total(self) -> int:
        return self.high + self.normal + self.low

    def of(self, priority: Priority) -> int:
        return getattr(self, priority.value)

    def at_least(self, limit: Priority) -> int:
        """Total of all priorities counted with ``limit`` as the lower bound."""
        return sum(self.of(p) for p in Priority if limit.includes(p))

    def minus(self, other: AnnotationCounts) -> AnnotationCounts:
        """Per-priority difference; may be negative."""
        return AnnotationCounts(
            high=self.high - other.high,
            normal=self.normal - other.normal,
            low=self.low - other.low,
        )

    @classmethod
    def of_annotations(cls, annotations: Iterable[DuplicateCode]) -> AnnotationCounts:
        counts = {p: 0 for p in Priority}
        for annotation in annotations:
            counts[annotation.priority] += 1
        return cls(
            high=counts[Priority.HIGH],
            normal=counts[Priority.NORMAL],
            low=counts[Priority.LOW],
        )


def _identity(annotation: DuplicateCode) -> tuple[str, int, int, str]:
    return (annotation.file_name, annotation.start_line, annotation.line_count, annotation.key)


@dataclass(slots=True)
class ParserResult:
    """Everything collected from the report files of one workspace.

    Annotations are deduplicated: the same block reported twice (e.g. by two
    overlapping report files) is kept once.
    """

    annotations: list[DuplicateCode] = field(default_factory=list)
    files_parsed: int = 0
    modules: set[str] = field(default_factory=set)
    error_messages: list[str] = field(default_factory=list)
    log_messages: list[str] = field(default_factory=list)
    _seen: set[tuple[str, int, int, str]] = field(default_factory=set, init=False, repr=False)

    def add_annotations(self, annotations: Iterable[DuplicateCode]) -> int:
        """Add annotations, returning how many were new (not duplicates)."""
        added = 0
        for annotation in annotations:
            identity = _identity(annotation)
            if identity in self._seen:
                continue
            self._seen.add(identity)
            self.annotations.append(annotation)
            if annotation.module_name:
                self.modules.add(annotation.module_name)
            added += 1
        return added

    def add_error_message(self, message: str) -> None:
        self.error_messages.append(message)

    def log(self, message: str) -> None:
        self.log_messages.append(message)

    def add_project(self, other: ParserResult) -> None:
        """Merge another result (e.g. of a matrix axis) into this one."""
        self.add_annotations(other.annotations)
        self.files_parsed += other.files_parsed
        self.modules.update(other.modules)
        self.error_messages.extend(other.error_messages)
        self.log_messages.extend(other.log_messages)

    @property
    def has_errors(self) -> bool:
        return bool(self.error_messages)

    @property
    def counts(self) -> AnnotationCounts:
        return AnnotationCounts.of_annotations(self.annotations)

    def number_of_annotations(self, priority: Priority | None = None) -> int:
        if priority is None:
            return len(self.annotations)
        return sum(1 for a in self.annotations if a.priority is priority)

    def to_dict(self) -> dict[str, Any]:
        return {
            "annotations": [a.to_dict() for a in self.annotations],
            "files_parsed": self.files_parsed,
            "modules": sorted(self.modules),
            "error_messages": list(self.error_messages),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ParserResult:
        result = cls(files_parsed=int(data.get("files_parsed", 0)))
        result.add_annotations(DuplicateCode.from_dict(a) for a in data.get("annotations", []))
        result.modules.update(data.get("modules", []))
        result.error_messages.extend(data.get("error_messages", []))
        return result
