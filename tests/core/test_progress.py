"""Tests for core/progress.py module.

Covers:
- status() function
- pluralize() function
- make_counts_table() function
"""

from __future__ import annotations

from unittest.mock import patch

from rich.console import Console

from drygate.core.progress import _STYLES, get_console, make_counts_table, pluralize, status


class TestStatus:
    """Tests for status function."""

    def test_prints_message(self) -> None:
        """Prints the message through the shared console."""
        with patch("drygate.core.progress._console") as mock_console:
            status("Collecting reports")
            mock_console.print.assert_called_once()
            assert "Collecting reports" in mock_console.print.call_args[0][0]

    def test_success_style(self) -> None:
        with patch("drygate.core.progress._console") as mock_console:
            status("Done", style="success")
            assert mock_console.print.call_args[0][0].startswith(_STYLES["success"])

    def test_with_indent(self) -> None:
        with patch("drygate.core.progress._console") as mock_console:
            status("Nested", style="none", indent=4)
            assert mock_console.print.call_args[0][0] == "    Nested"

    def test_console_writes_to_stderr(self) -> None:
        assert get_console().stderr is True


class TestPluralize:
    """Tests for pluralize function."""

    def test_singular_count_one(self) -> None:
        assert pluralize(1, "file") == "1 file"

    def test_plural_count_zero(self) -> None:
        assert pluralize(0, "file") == "0 files"

    def test_custom_plural(self) -> None:
        assert pluralize(2, "analysis", "analyses") == "2 analyses"


class TestMakeCountsTable:
    """Tests for make_counts_table function."""

    def test_renders_rows_with_totals(self) -> None:
        """Each row gets a computed total column."""
        table = make_counts_table("Duplicate code", [("Total", 1, 2, 3), ("New", 0, 1, 0)])

        console = Console(record=True, width=80)
        console.print(table)
        text = console.export_text()

        assert "Duplicate code" in text
        assert "High" in text
        assert "6" in text
        assert table.row_count == 2
