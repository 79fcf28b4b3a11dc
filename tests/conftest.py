"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages and
provides report-file fixtures shared by the test modules.
"""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))


def _cpd_report(*duplications: tuple[int, list[tuple[str, int]], str]) -> str:
    """Render a CPD report from ``(lines, [(path, line), ...], fragment)`` tuples."""
    parts = ['<?xml version="1.0" encoding="UTF-8"?>', "<pmd-cpd>"]
    for lines, blocks, fragment in duplications:
        parts.append(f'  <duplication lines="{lines}" tokens="{lines * 4}">')
        for path, line in blocks:
            parts.append(f'    <file line="{line}" path="{path}"/>')
        parts.append(f"    <codefragment><![CDATA[{fragment}]]></codefragment>")
        parts.append("  </duplication>")
    parts.append("</pmd-cpd>")
    return "\n".join(parts) + "\n"


@pytest.fixture
def write_cpd(tmp_path: Path) -> Callable[..., Path]:
    """Write a CPD report below tmp_path and return its path."""

    def _write(
        relative: str = "target/cpd.xml",
        *duplications: tuple[int, list[tuple[str, int]], str],
    ) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(_cpd_report(*duplications), encoding="utf-8")
        return path

    return _write
