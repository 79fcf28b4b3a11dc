"""Tests for build.py module."""

from __future__ import annotations

from drygate.analysis.health import BuildStatus
from drygate.build import Build, MatrixBuild


class TestBuild:
    """Tests for Build."""

    def test_display_name(self) -> None:
        assert Build(number=7, job="app").display_name == "app #7"

    def test_get_action_returns_newest_of_type(self) -> None:
        build = Build(number=1)
        build.add_action("first")
        build.add_action(3)
        build.add_action("second")

        assert build.get_action(str) == "second"
        assert build.get_action(int) == 3
        assert build.get_action(float) is None

    def test_set_status_only_lowers(self) -> None:
        build = Build(number=1)
        build.set_status(BuildStatus.UNSTABLE)
        build.set_status(BuildStatus.SUCCESS)
        assert build.status is BuildStatus.UNSTABLE

    def test_history_newest_first(self) -> None:
        first = Build(number=1)
        second = Build(number=2, previous=first)
        third = Build(number=3, previous=second)

        assert [b.number for b in third.history()] == [2, 1]


class TestMatrixBuild:
    """Tests for MatrixBuild."""

    def test_runs_link_to_previous_run_of_same_axis(self) -> None:
        first = MatrixBuild(number=1, job="app")
        first_linux = first.add_run("linux")
        first.add_run("windows")
        second = MatrixBuild(number=2, job="app", previous=first)

        run = second.add_run("linux")

        assert run.previous is first_linux
        assert run.parent is second
        assert run.job == "app/linux"
        assert second.run("linux") is run
        assert second.run("mac") is None

    def test_runs_share_cancel_event(self) -> None:
        build = MatrixBuild(number=1)
        run = build.add_run("linux")
        build.cancel_event.set()
        assert run.cancel_event.is_set()
