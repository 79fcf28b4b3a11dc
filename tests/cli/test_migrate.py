"""Tests for drygate migrate command."""

from __future__ import annotations

from pathlib import Path

import yaml
from click.testing import CliRunner

from drygate.cli.main import cli

runner = CliRunner()

LEGACY_RECORD = """\
pattern: '**/cpd.xml'
highThreshold: 80
normalThreshold: 40
healthy: '0'
unHealthy: '20'
thresholdLimit: high
unstableTotalAll: '10'
failedNewHigh: ''
canRunOnFailed: true
"""


class TestMigrateCommand:
    """drygate migrate command tests."""

    def test_prints_migrated_record(self, tmp_path: Path) -> None:
        source = tmp_path / "legacy.yaml"
        source.write_text(LEGACY_RECORD)

        result = runner.invoke(cli, ["migrate", str(source)])

        assert result.exit_code == 0
        publisher = yaml.safe_load(result.stdout)["publisher"]
        assert publisher["version"] == 2
        assert publisher["high_threshold"] == 80
        assert publisher["normal_threshold"] == 40
        assert publisher["health"] == {"healthy": 0, "unhealthy": 20, "threshold_limit": "high"}
        assert publisher["thresholds"]["unstable_total_all"] == 10
        assert publisher["thresholds"]["failed_new_high"] is None
        assert publisher["can_run_on_failed"] is True

    def test_numeric_legacy_values(self, tmp_path: Path) -> None:
        source = tmp_path / "legacy.yaml"
        source.write_text("healthy: 5\nunHealthy: 10\nunstableTotalAll: 3\n")

        result = runner.invoke(cli, ["migrate", str(source)])

        assert result.exit_code == 0
        publisher = yaml.safe_load(result.stdout)["publisher"]
        assert publisher["health"]["unhealthy"] == 10
        assert publisher["thresholds"]["unstable_total_all"] == 3

    def test_reads_publisher_section_from_json(self, tmp_path: Path) -> None:
        source = tmp_path / "legacy.json"
        source.write_text('{"publisher": {"useDeltaValues": true}}')

        result = runner.invoke(cli, ["migrate", str(source)])

        assert result.exit_code == 0
        assert yaml.safe_load(result.stdout)["publisher"]["use_delta_values"] is True

    def test_writes_output_file(self, tmp_path: Path) -> None:
        source = tmp_path / "legacy.yaml"
        source.write_text(LEGACY_RECORD)
        output = tmp_path / "repo" / ".drygate" / "config.yaml"

        result = runner.invoke(cli, ["migrate", str(source), "-o", str(output)])

        assert result.exit_code == 0
        assert yaml.safe_load(output.read_text())["publisher"]["high_threshold"] == 80

    def test_unsupported_version(self, tmp_path: Path) -> None:
        source = tmp_path / "record.yaml"
        source.write_text("version: 7\n")

        result = runner.invoke(cli, ["migrate", str(source)])

        assert result.exit_code == 1
        assert "version" in result.output

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        source = tmp_path / "record.yaml"
        source.write_text("- a\n- b\n")

        result = runner.invoke(cli, ["migrate", str(source)])

        assert result.exit_code == 1
        assert "must be a mapping" in result.output

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        source = tmp_path / "record.yaml"
        source.write_text("key: [unclosed\n")

        result = runner.invoke(cli, ["migrate", str(source)])

        assert result.exit_code == 1
        assert "Cannot read" in result.output
