"""Tests for duplication report parsers.

Covers:
- CpdParser, SimianParser, DupFinderParser
- Priority classification through ParseSettings
"""

from __future__ import annotations

from pathlib import Path

import pytest

from drygate.analysis.models import CodeLocation, Priority
from drygate.core.errors import DuplicationParseError, ErrorCode
from drygate.parsers import CpdParser, DupFinderParser, ParseSettings, SimianParser

SETTINGS = ParseSettings(normal_threshold=25, high_threshold=50)

CPD_XML = """<?xml version="1.0" encoding="UTF-8"?>
<pmd-cpd>
  <duplication lines="60" tokens="240">
    <file line="10" endline="69" path="src/Foo.java"/>
    <file line="95" endline="154" path="src/Bar.java"/>
    <codefragment><![CDATA[for (int i = 0; i < n; i++) {]]></codefragment>
  </duplication>
  <duplication lines="12" tokens="40">
    <file line="1" path="src/Baz.java"/>
    <file line="30" path="src/Baz.java"/>
    <file line="60" path="src/Qux.java"/>
    <codefragment>x++;</codefragment>
  </duplication>
</pmd-cpd>
"""

SIMIAN_XML = """<?xml version="1.0"?>
<simian version="2.3.33">
  <check failOnDuplication="true" ignoreCharacterCase="true">
    <set lineCount="30" fingerprint="abc">
      <block sourceFile="src/Foo.java" startLineNumber="11" endLineNumber="40"/>
      <block sourceFile="src/Bar.java" startLineNumber="21" endLineNumber="50"/>
    </set>
    <summary duplicateFileCount="2" duplicateLineCount="60"/>
  </check>
</simian>
"""

DUPFINDER_XML = """<?xml version="1.0" encoding="utf-8"?>
<DuplicatesReport ToolsVersion="8.2">
  <Statistics><CodebaseCost>100</CodebaseCost></Statistics>
  <Duplicates>
    <Duplicate Cost="112">
      <Fragment>
        <FileName>src\\Project\\Foo.cs</FileName>
        <OffsetRange Start="310" End="1127"/>
        <LineRange Start="12" End="35"/>
        <Text>var x = 1;</Text>
      </Fragment>
      <Fragment>
        <FileName>src\\Project\\Bar.cs</FileName>
        <LineRange Start="40" End="100"/>
        <Text>var x = 1;</Text>
      </Fragment>
    </Duplicate>
  </Duplicates>
</DuplicatesReport>
"""


def _write(tmp_path: Path, text: str, name: str = "report.xml") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


class TestParseSettings:
    """Tests for ParseSettings."""

    @pytest.mark.parametrize(
        ("lines", "priority"),
        [
            (1, Priority.LOW),
            (24, Priority.LOW),
            (25, Priority.NORMAL),
            (49, Priority.NORMAL),
            (50, Priority.HIGH),
            (500, Priority.HIGH),
        ],
    )
    def test_priority(self, lines: int, priority: Priority) -> None:
        """HIGH at or above high, NORMAL at or above normal, else LOW."""
        assert SETTINGS.priority(lines) is priority

    def test_relativize_inside_workspace(self, tmp_path: Path) -> None:
        settings = ParseSettings(25, 50, workspace_root=tmp_path)
        assert settings.relativize(str(tmp_path / "src" / "A.java")) == "src/A.java"

    def test_relativize_keeps_outside_paths(self, tmp_path: Path) -> None:
        settings = ParseSettings(25, 50, workspace_root=tmp_path / "ws")
        outside = str(tmp_path / "other" / "A.java")
        assert settings.relativize(outside) == Path(outside).as_posix()


class TestCpdParser:
    """Tests for CpdParser."""

    def test_can_parse(self, tmp_path: Path) -> None:
        parser = CpdParser()
        assert parser.can_parse(_write(tmp_path, CPD_XML))
        assert not parser.can_parse(_write(tmp_path, SIMIAN_XML, "simian.xml"))
        assert not parser.can_parse(tmp_path / "missing.xml")

    def test_one_annotation_per_block(self, tmp_path: Path) -> None:
        annotations = CpdParser().parse(_write(tmp_path, CPD_XML), SETTINGS)

        assert len(annotations) == 5
        assert [a.file_name for a in annotations[:2]] == ["src/Foo.java", "src/Bar.java"]

    def test_blocks_link_to_siblings(self, tmp_path: Path) -> None:
        foo, bar, *_ = CpdParser().parse(_write(tmp_path, CPD_XML), SETTINGS)

        assert foo.links == (CodeLocation("src/Bar.java", 95, 60),)
        assert bar.links == (CodeLocation("src/Foo.java", 10, 60),)

    def test_attributes(self, tmp_path: Path) -> None:
        annotations = CpdParser().parse(_write(tmp_path, CPD_XML), SETTINGS)
        foo = annotations[0]
        baz = annotations[2]

        assert foo.priority is Priority.HIGH
        assert foo.line_count == 60
        assert foo.tokens == 240
        assert foo.fragment == "for (int i = 0; i < n; i++) {"
        assert foo.source_format == "cpd"
        assert baz.priority is Priority.LOW
        assert len(baz.links) == 2

    def test_malformed_xml(self, tmp_path: Path) -> None:
        with pytest.raises(DuplicationParseError) as exc_info:
            CpdParser().parse(_write(tmp_path, "<pmd-cpd><duplication>"), SETTINGS)
        assert exc_info.value.code is ErrorCode.PARSE_INVALID_XML

    def test_missing_lines_attribute(self, tmp_path: Path) -> None:
        text = '<pmd-cpd><duplication><file line="1" path="a"/></duplication></pmd-cpd>'
        with pytest.raises(DuplicationParseError) as exc_info:
            CpdParser().parse(_write(tmp_path, text), SETTINGS)
        assert exc_info.value.code is ErrorCode.PARSE_INVALID_CONTENT

    def test_wrong_root(self, tmp_path: Path) -> None:
        with pytest.raises(DuplicationParseError):
            CpdParser().parse(_write(tmp_path, "<simian/>"), SETTINGS)

    def test_empty_report(self, tmp_path: Path) -> None:
        assert CpdParser().parse(_write(tmp_path, "<pmd-cpd/>"), SETTINGS) == []

    def test_default_encoding_overrides_declaration(self, tmp_path: Path) -> None:
        text = CPD_XML.replace("x++;", "café();")
        path = tmp_path / "latin1.xml"
        path.write_bytes(text.encode("latin-1"))
        settings = ParseSettings(25, 50, default_encoding="ISO-8859-1")

        annotations = CpdParser().parse(path, settings)

        assert annotations[2].fragment == "café();"


class TestSimianParser:
    """Tests for SimianParser."""

    def test_can_parse(self, tmp_path: Path) -> None:
        assert SimianParser().can_parse(_write(tmp_path, SIMIAN_XML))

    def test_parse(self, tmp_path: Path) -> None:
        annotations = SimianParser().parse(_write(tmp_path, SIMIAN_XML), SETTINGS)

        assert [(a.file_name, a.start_line) for a in annotations] == [
            ("src/Foo.java", 11),
            ("src/Bar.java", 21),
        ]
        assert all(a.priority is Priority.NORMAL for a in annotations)
        assert all(a.fragment == "" for a in annotations)
        assert annotations[0].links == (CodeLocation("src/Bar.java", 21, 30),)


class TestDupFinderParser:
    """Tests for DupFinderParser."""

    def test_can_parse(self, tmp_path: Path) -> None:
        assert DupFinderParser().can_parse(_write(tmp_path, DUPFINDER_XML))

    def test_parse(self, tmp_path: Path) -> None:
        foo, bar = DupFinderParser().parse(_write(tmp_path, DUPFINDER_XML), SETTINGS)

        assert foo.file_name == "src/Project/Foo.cs"
        assert bar.file_name == "src/Project/Bar.cs"
        assert foo.line_count == 61
        assert foo.priority is Priority.HIGH
        assert foo.tokens == 112
        assert foo.fragment == "var x = 1;"
