"""PMD CPD XML format parser.

CPD (the PMD copy-paste detector) writes one <duplication> per set of
identical blocks:

<pmd-cpd>
  <duplication lines="33" tokens="120">
    <file line="10" endline="42" path="/ws/src/Foo.java"/>
    <file line="95" endline="127" path="/ws/src/Bar.java"/>
    <codefragment><![CDATA[ ... ]]></codefragment>
  </duplication>
</pmd-cpd>
"""

from pathlib import Path

from drygate.analysis.models import CodeLocation, DuplicateCode
from drygate.core.errors import DuplicationParseError

from .base import ParseSettings, int_attribute, link_blocks, read_xml_root, sniff_header


class CpdParser:
    """Parser for PMD CPD XML reports."""

    @property
    def format_id(self) -> str:
        return "cpd"

    def can_parse(self, path: Path) -> bool:
        header = sniff_header(path)
        return "<pmd-cpd" in header

    def parse(self, path: Path, settings: ParseSettings) -> list[DuplicateCode]:
        root = read_xml_root(path, settings)
        if root.tag != "pmd-cpd":
            raise DuplicationParseError.invalid_content(
                str(path), f"expected <pmd-cpd> root, found <{root.tag}>"
            )

        annotations: list[DuplicateCode] = []
        for duplication in root.findall("duplication"):
            lines = int_attribute(path, duplication, "lines")
            tokens = int_attribute(path, duplication, "tokens", default=0) or None

            locations = [
                CodeLocation(
                    file_name=settings.relativize(block.get("path", "")),
                    start_line=int_attribute(path, block, "line"),
                    line_count=lines,
                )
                for block in duplication.findall("file")
                if block.get("path")
            ]
            if not locations:
                continue

            fragment = duplication.findtext("codefragment", default="")
            annotations.extend(
                link_blocks(
                    locations,
                    lines,
                    settings,
                    source_format=self.format_id,
                    fragment=fragment,
                    tokens=tokens,
                )
            )
        return annotations
