"""Tests for drygate publish command."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

from click.testing import CliRunner

from drygate.cli.main import cli
from drygate.history.store import BuildStore

runner = CliRunner()

TWO_BLOCKS = (60, [("src/A.java", 1), ("src/B.java", 10)], "a();")
SMALL_BLOCKS = (30, [("src/C.java", 5), ("src/D.java", 7)], "c();")


def _publish_json(root: Path, *args: str):
    result = runner.invoke(cli, ["publish", str(root), "--json", *args])
    return result, json.loads(result.stdout)


def _write_config(root: Path, text: str) -> None:
    path = root / ".drygate" / "config.yaml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


class TestPublishCommand:
    """drygate publish command tests."""

    def test_clean_workspace_succeeds(self, tmp_path: Path) -> None:
        result, payload = _publish_json(tmp_path)

        assert result.exit_code == 0
        assert payload["build"] == 1
        assert payload["status"] == "success"
        assert payload["result"]["counts"]["total"] == 0
        assert "No files found for pattern '**/cpd.xml'" in result.stderr

    def test_reports_counts(self, tmp_path: Path, write_cpd: Callable[..., Path]) -> None:
        write_cpd("target/cpd.xml", TWO_BLOCKS, SMALL_BLOCKS)

        result, payload = _publish_json(tmp_path)

        assert result.exit_code == 0
        assert payload["result"]["counts"] == {"high": 2, "normal": 2, "low": 0, "total": 4}
        assert payload["result"]["reference_build"] is None

    def test_threshold_options_override_config(
        self, tmp_path: Path, write_cpd: Callable[..., Path]
    ) -> None:
        write_cpd("target/cpd.xml", TWO_BLOCKS, SMALL_BLOCKS)

        _, payload = _publish_json(tmp_path, "--high", "20", "--normal", "10")

        assert payload["result"]["counts"]["high"] == 4

    def test_pattern_option(self, tmp_path: Path, write_cpd: Callable[..., Path]) -> None:
        write_cpd("reports/duplicates.xml", TWO_BLOCKS)

        _, payload = _publish_json(tmp_path, "--pattern", "reports/*.xml")

        assert payload["result"]["counts"]["total"] == 2

    def test_unstable_exit_code(self, tmp_path: Path, write_cpd: Callable[..., Path]) -> None:
        write_cpd("target/cpd.xml", TWO_BLOCKS)
        _write_config(tmp_path, "publisher:\n  thresholds:\n    unstable_total_all: 1\n")

        result = runner.invoke(cli, ["publish", str(tmp_path)])

        assert result.exit_code == 1
        assert "Total: 2 warnings exceed the threshold of 1 by 1" in result.stderr

    def test_failed_exit_code(self, tmp_path: Path, write_cpd: Callable[..., Path]) -> None:
        write_cpd("target/cpd.xml", TWO_BLOCKS)
        _write_config(tmp_path, "publisher:\n  thresholds:\n    failed_total_high: 0\n")

        result, payload = _publish_json(tmp_path)

        assert result.exit_code == 2
        assert payload["status"] == "failure"

    def test_legacy_config_is_migrated(
        self, tmp_path: Path, write_cpd: Callable[..., Path]
    ) -> None:
        write_cpd("target/cpd.xml", TWO_BLOCKS)
        _write_config(tmp_path, "publisher:\n  unstableTotalAll: '0'\n")

        result, _ = _publish_json(tmp_path)

        assert result.exit_code == 1

    def test_records_history_and_uses_reference(
        self, tmp_path: Path, write_cpd: Callable[..., Path]
    ) -> None:
        write_cpd("target/cpd.xml", TWO_BLOCKS)
        _publish_json(tmp_path)
        write_cpd("target/cpd.xml", TWO_BLOCKS, SMALL_BLOCKS)

        result, payload = _publish_json(tmp_path)

        assert result.exit_code == 0
        assert payload["build"] == 2
        assert payload["result"]["reference_build"] == 1
        assert payload["result"]["new"]["total"] == 2
        assert payload["result"]["fixed"]["total"] == 0
        assert [r.number for r in BuildStore(tmp_path).list_records()] == [2, 1]

    def test_no_history(self, tmp_path: Path, write_cpd: Callable[..., Path]) -> None:
        write_cpd("target/cpd.xml", TWO_BLOCKS)

        result, _ = _publish_json(tmp_path, "--no-history")

        assert result.exit_code == 0
        assert BuildStore(tmp_path).list_records() == []

    def test_explicit_build_number(self, tmp_path: Path) -> None:
        _, payload = _publish_json(tmp_path, "--build-number", "42")

        assert payload["build"] == 42
        assert BuildStore(tmp_path).next_build_number() == 43

    def test_failed_build_is_skipped(
        self, tmp_path: Path, write_cpd: Callable[..., Path]
    ) -> None:
        write_cpd("target/cpd.xml", TWO_BLOCKS)

        result, payload = _publish_json(tmp_path, "--status", "failure")

        assert result.exit_code == 2
        assert payload["result"] is None
        assert "Skipping publisher since build result is FAILURE" in result.stderr

    def test_table_output(self, tmp_path: Path, write_cpd: Callable[..., Path]) -> None:
        write_cpd("target/cpd.xml", TWO_BLOCKS)

        result = runner.invoke(cli, ["publish", str(tmp_path)])

        assert result.exit_code == 0
        assert "Total" in result.output
        assert "success" in result.output

    def test_invalid_config_is_reported(self, tmp_path: Path) -> None:
        _write_config(tmp_path, "publisher: [unclosed\n")

        result = runner.invoke(cli, ["publish", str(tmp_path)])

        assert result.exit_code == 1
        assert "Error" in result.output
