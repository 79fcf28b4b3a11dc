"""Build context passed to the publisher.

A ``Build`` is the record the publisher reads from and attaches its result
to. Builds of one job form a chain through ``previous``, which is how
reference builds are found. A ``MatrixBuild`` additionally owns one run per
axis combination.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from drygate.analysis.health import BuildStatus


@dataclass(eq=False)
class Build:
    """A single build of a job."""

    number: int
    job: str = "default"
    status: BuildStatus = BuildStatus.SUCCESS
    previous: Build | None = None
    is_maven: bool = False
    actions: list[Any] = field(default_factory=list)
    cancel_event: threading.Event = field(default_factory=threading.Event)

    @property
    def display_name(self) -> str:
        return f"{self.job} #{self.number}"

    def add_action(self, action: Any) -> None:
        self.actions.append(action)

    def get_action[A](self, action_type: type[A]) -> A | None:
        """Most recently attached action of the given type."""
        for action in reversed(self.actions):
            if isinstance(action, action_type):
                return action
        return None

    def set_status(self, status: BuildStatus) -> None:
        """Lower the build status; a status is never improved."""
        self.status = self.status.worse_of(status)

    def history(self) -> Iterator[Build]:
        """Previous builds, newest first."""
        build = self.previous
        while build is not None:
            yield build
            build = build.previous


@dataclass(eq=False)
class MatrixBuild(Build):
    """A build fanned out over axis combinations (e.g. OS x runtime)."""

    runs: list[MatrixRun] = field(default_factory=list)

    def add_run(self, axis: str) -> MatrixRun:
        previous_parent = self.previous if isinstance(self.previous, MatrixBuild) else None
        previous_run = previous_parent.run(axis) if previous_parent else None
        run = MatrixRun(
            number=self.number,
            job=f"{self.job}/{axis}",
            previous=previous_run,
            axis=axis,
            parent=self,
            cancel_event=self.cancel_event,
        )
        self.runs.append(run)
        return run

    def run(self, axis: str) -> MatrixRun | None:
        for run in self.runs:
            if run.axis == axis:
                return run
        return None


@dataclass(eq=False)
class MatrixRun(Build):
    """The build of one axis combination of a matrix build."""

    axis: str = ""
    parent: MatrixBuild | None = None
