"""ReSharper DupFinder XML format parser.

Structure:
<DuplicatesReport ToolsVersion="8.2">
  <Statistics>...</Statistics>
  <Duplicates>
    <Duplicate Cost="112">
      <Fragment>
        <FileName>src\\Foo.cs</FileName>
        <OffsetRange Start="310" End="1127"/>
        <LineRange Start="12" End="35"/>
        <Text>...</Text>
      </Fragment>
      <Fragment>...</Fragment>
    </Duplicate>
  </Duplicates>
</DuplicatesReport>

Fragments of one duplicate may differ in length; the longest one decides
the line count. File names use Windows separators.
"""

from pathlib import Path

from drygate.analysis.models import CodeLocation, DuplicateCode
from drygate.core.errors import DuplicationParseError

from .base import ParseSettings, int_attribute, link_blocks, read_xml_root, sniff_header


class DupFinderParser:
    """Parser for ReSharper DupFinder XML reports."""

    @property
    def format_id(self) -> str:
        return "dupfinder"

    def can_parse(self, path: Path) -> bool:
        return "<DuplicatesReport" in sniff_header(path)

    def parse(self, path: Path, settings: ParseSettings) -> list[DuplicateCode]:
        root = read_xml_root(path, settings)
        if root.tag != "DuplicatesReport":
            raise DuplicationParseError.invalid_content(
                str(path), f"expected <DuplicatesReport> root, found <{root.tag}>"
            )

        annotations: list[DuplicateCode] = []
        for duplicate in root.iter("Duplicate"):
            blocks: list[tuple[str, int, int, str]] = []
            for fragment in duplicate.findall("Fragment"):
                file_name = (fragment.findtext("FileName") or "").strip()
                line_range = fragment.find("LineRange")
                if not file_name or line_range is None:
                    continue
                start = int_attribute(path, line_range, "Start")
                end = int_attribute(path, line_range, "End", default=start)
                text = fragment.findtext("Text") or ""
                blocks.append((file_name.replace("\\", "/"), start, end, text))

            if not blocks:
                continue

            lines = max(end - start + 1 for _, start, end, _ in blocks)
            locations = [
                CodeLocation(settings.relativize(name), start, lines)
                for name, start, _, _ in blocks
            ]
            annotations.extend(
                link_blocks(
                    locations,
                    lines,
                    settings,
                    source_format=self.format_id,
                    fragment=blocks[0][3],
                    tokens=int_attribute(path, duplicate, "Cost", default=0) or None,
                )
            )
        return annotations
