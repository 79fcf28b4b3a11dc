"""Tests for workspace.py module."""

from __future__ import annotations

import io
from pathlib import Path

from drygate.workspace import LocalWorkspace, PluginLogger


class _RootRecorder:
    def invoke(self, root: Path) -> Path:
        return root


class TestLocalWorkspace:
    """Tests for LocalWorkspace."""

    def test_root_is_resolved(self, tmp_path: Path) -> None:
        (tmp_path / "ws").mkdir()
        workspace = LocalWorkspace(tmp_path / "ws" / ".." / "ws")
        assert workspace.root == (tmp_path / "ws").resolve()

    def test_act_runs_task_against_root(self, tmp_path: Path) -> None:
        workspace = LocalWorkspace(tmp_path)
        assert workspace.act(_RootRecorder()) == tmp_path.resolve()


class TestPluginLogger:
    """Tests for PluginLogger."""

    def test_prefixes_lines(self) -> None:
        stream = io.StringIO()
        logger = PluginLogger(stream)

        logger.log("Collecting duplicate code analysis files...")
        logger.log_lines(["a", "b"])

        assert stream.getvalue().splitlines() == [
            "[DRY] Collecting duplicate code analysis files...",
            "[DRY] a",
            "[DRY] b",
        ]
        assert logger.lines[-1] == "[DRY] b"

    def test_custom_name(self) -> None:
        logger = PluginLogger(io.StringIO(), name="CPD")
        logger.log("x")
        assert logger.lines == ["[CPD] x"]
