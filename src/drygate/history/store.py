"""JSON store of past builds.

Storage layout:
  .drygate/builds/
  ├── 1.json      # One record per build, named by build number
  ├── 2.json
  └── ...

Each record holds the build status, the publisher settings the build ran
with and its parsed project. ``load_history`` turns the records back into a
linked build chain, each build carrying its ``DryResultAction``, so a new
build can find its reference build.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from drygate.actions import DryResultAction
from drygate.analysis.health import BuildStatus
from drygate.analysis.models import ParserResult
from drygate.build import Build
from drygate.config.constants import STATE_DIR
from drygate.config.models import PublisherConfig
from drygate.core.errors import BuildStoreError
from drygate.core.logging import get_logger
from drygate.result import DryResult

log = get_logger("history.store")


@dataclass(frozen=True)
class BuildRecord:
    """Summary of one stored build."""

    number: int
    status: BuildStatus
    recorded_at: str
    path: Path


class BuildStore:
    """One JSON file per build below ``<workspace>/.drygate/builds``."""

    def __init__(self, workspace_root: Path | str, *, base_dir: str = f"{STATE_DIR}/builds"):
        self._builds_dir = Path(workspace_root) / base_dir

    @property
    def builds_dir(self) -> Path:
        return self._builds_dir

    def _record_path(self, number: int) -> Path:
        return self._builds_dir / f"{number}.json"

    def _numbers(self) -> list[int]:
        if not self._builds_dir.exists():
            return []
        return sorted(
            int(path.stem) for path in self._builds_dir.glob("*.json") if path.stem.isdigit()
        )

    def next_build_number(self) -> int:
        numbers = self._numbers()
        return numbers[-1] + 1 if numbers else 1

    def save(self, build: Build, config: PublisherConfig) -> Path:
        """Persist a build that carries a duplicate code result.

        Builds without a result (e.g. skipped because they already failed)
        are stored with their status only.
        """
        action = build.get_action(DryResultAction)
        data: dict[str, Any] = {
            "number": build.number,
            "job": build.job,
            "status": build.status.value,
            "recorded_at": datetime.now(UTC).isoformat(),
            "config": config.model_dump(mode="json"),
            "result": None,
        }
        if action is not None:
            data["result"] = {
                "default_encoding": action.result.default_encoding,
                "project": action.result.project.to_dict(),
            }

        path = self._record_path(build.number)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(data, sort_keys=True, indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
        log.debug("build_saved", number=build.number, path=str(path))
        return path

    def _load_record(self, number: int) -> dict[str, Any]:
        path = self._record_path(number)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise BuildStoreError.corrupt(str(path), str(e)) from e
        if not isinstance(data, dict) or "status" not in data:
            raise BuildStoreError.corrupt(str(path), "not a build record")
        return data

    def list_records(self) -> list[BuildRecord]:
        """All stored builds, newest first."""
        records = []
        for number in reversed(self._numbers()):
            data = self._load_record(number)
            records.append(
                BuildRecord(
                    number=number,
                    status=_status(data, self._record_path(number)),
                    recorded_at=data.get("recorded_at", ""),
                    path=self._record_path(number),
                )
            )
        return records

    def load_history(self) -> Build | None:
        """Rebuild the stored build chain and return its newest build.

        Raises:
            BuildStoreError: If a record cannot be read back.
        """
        latest: Build | None = None
        for number in self._numbers():
            path = self._record_path(number)
            data = self._load_record(number)
            build = Build(
                number=number,
                job=data.get("job", "default"),
                status=_status(data, path),
                previous=latest,
            )
            if data.get("result") is not None:
                build.add_action(_restore_action(build, data, path))
            latest = build
        return latest


def _status(data: dict[str, Any], path: Path) -> BuildStatus:
    try:
        return BuildStatus(data["status"])
    except ValueError as e:
        raise BuildStoreError.corrupt(str(path), f"unknown status {data['status']!r}") from e


def _restore_action(build: Build, data: dict[str, Any], path: Path) -> DryResultAction:
    try:
        config = PublisherConfig.model_validate(data.get("config") or {})
        project = ParserResult.from_dict(data["result"].get("project", {}))
    except (ValidationError, KeyError, TypeError, ValueError) as e:
        raise BuildStoreError.corrupt(str(path), str(e)) from e

    result = DryResult(
        build=build,
        default_encoding=data["result"].get("default_encoding"),
        project=project,
        use_previous_build_as_reference=config.use_previous_build_as_reference,
        use_stable_build_as_reference=config.use_stable_build_as_reference,
        can_compute_new=config.can_compute_new,
    )
    return DryResultAction(
        result,
        health=config.health,
        thresholds=config.thresholds,
        use_delta_values=config.use_delta_values,
    )
