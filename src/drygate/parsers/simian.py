"""Simian XML format parser.

Structure:
<simian version="2.3.33">
  <check failOnDuplication="true" ...>
    <set lineCount="6" fingerprint="...">
      <block sourceFile="/ws/src/Foo.java" startLineNumber="11" endLineNumber="16"/>
      <block sourceFile="/ws/src/Bar.java" startLineNumber="21" endLineNumber="26"/>
    </set>
    <summary duplicateFileCount="2" .../>
  </check>
</simian>

Simian does not report the duplicated text.
"""

from pathlib import Path

from drygate.analysis.models import CodeLocation, DuplicateCode
from drygate.core.errors import DuplicationParseError

from .base import ParseSettings, int_attribute, link_blocks, read_xml_root, sniff_header


class SimianParser:
    """Parser for Simian XML reports."""

    @property
    def format_id(self) -> str:
        return "simian"

    def can_parse(self, path: Path) -> bool:
        return "<simian" in sniff_header(path)

    def parse(self, path: Path, settings: ParseSettings) -> list[DuplicateCode]:
        root = read_xml_root(path, settings)
        if root.tag != "simian":
            raise DuplicationParseError.invalid_content(
                str(path), f"expected <simian> root, found <{root.tag}>"
            )

        annotations: list[DuplicateCode] = []
        for duplicate_set in root.iter("set"):
            lines = int_attribute(path, duplicate_set, "lineCount")
            locations = [
                CodeLocation(
                    file_name=settings.relativize(block.get("sourceFile", "")),
                    start_line=int_attribute(path, block, "startLineNumber"),
                    line_count=lines,
                )
                for block in duplicate_set.findall("block")
                if block.get("sourceFile")
            ]
            if locations:
                annotations.extend(
                    link_blocks(locations, lines, settings, source_format=self.format_id)
                )
        return annotations
