"""Build workspace access and the build console logger.

The publisher never touches the file system directly: it hands a task
to ``Workspace.act``, which runs it against the workspace root. A local
workspace runs it in-process; other implementations may run it elsewhere
(an agent, a container) as long as they return the task's result and
let its exceptions propagate unchanged.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol, TextIO

from drygate.config.constants import PLUGIN_NAME
from drygate.core.logging import get_logger


class FileCallable[T](Protocol):
    """Work to run against a workspace root."""

    def invoke(self, root: Path) -> T: ...


class Workspace(Protocol):
    """File-system accessor for a build workspace."""

    @property
    def root(self) -> Path: ...

    def act[T](self, task: FileCallable[T]) -> T: ...


class LocalWorkspace:
    """Workspace on the local file system."""

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def act[T](self, task: FileCallable[T]) -> T:
        return task.invoke(self._root)

    def __repr__(self) -> str:
        return f"LocalWorkspace({str(self._root)!r})"


class PluginLogger:
    """Build console sink that prefixes every line with the plugin name.

    Lines are also mirrored to the structured log at DEBUG level.
    """

    def __init__(self, stream: TextIO | None = None, *, name: str = PLUGIN_NAME) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._prefix = f"[{name}] "
        self._log = get_logger("console")
        self.lines: list[str] = []

    def log(self, message: str) -> None:
        line = self._prefix + message
        self.lines.append(line)
        self._stream.write(line + "\n")
        self._log.debug("console", line=message)

    def log_lines(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.log(line)
