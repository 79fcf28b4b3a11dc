"""Module name detection from build descriptors.

Walks up from a file's directory towards the workspace root and takes the
name from the first descriptor found:

- pom.xml: <name>, falling back to <artifactId>
- build.xml: the name attribute of <project>
- META-INF/MANIFEST.MF: Bundle-Name, falling back to Bundle-SymbolicName
"""

from __future__ import annotations

import contextlib
import xml.etree.ElementTree as ET
from pathlib import Path

from drygate.core.logging import get_logger

log = get_logger("analysis.modules")

MAVEN_POM = "pom.xml"
ANT_PROJECT = "build.xml"
OSGI_BUNDLE = "META-INF/MANIFEST.MF"


def _strip_namespaces(root: ET.Element) -> ET.Element:
    for elem in root.iter():
        if isinstance(elem.tag, str) and "}" in elem.tag:
            elem.tag = elem.tag.split("}", 1)[1]
    return root


def _maven_name(pom: Path) -> str:
    try:
        root = _strip_namespaces(ET.parse(pom).getroot())
    except (ET.ParseError, ValueError, OSError) as e:
        log.debug("unreadable_descriptor", path=str(pom), error=str(e))
        return ""
    name = (root.findtext("name") or "").strip()
    return name or (root.findtext("artifactId") or "").strip()


def _ant_name(build_file: Path) -> str:
    try:
        root = ET.parse(build_file).getroot()
    except (ET.ParseError, ValueError, OSError) as e:
        log.debug("unreadable_descriptor", path=str(build_file), error=str(e))
        return ""
    return (root.get("name") or "").strip()


def _osgi_name(manifest: Path) -> str:
    try:
        text = manifest.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        log.debug("unreadable_descriptor", path=str(manifest), error=str(e))
        return ""
    headers: dict[str, str] = {}
    for line in text.splitlines():
        key, sep, value = line.partition(":")
        if sep:
            headers[key.strip()] = value.strip()
    symbolic = headers.get("Bundle-SymbolicName", "").split(";", 1)[0].strip()
    return headers.get("Bundle-Name", "") or symbolic


class ModuleDetector:
    """Guesses module names for files below a workspace root."""

    def __init__(self, workspace_root: Path) -> None:
        self._root = workspace_root.resolve()
        self._cache: dict[Path, str] = {}

    def guess_module_name(self, file_name: str) -> str:
        """Module of a (workspace-relative or absolute) file, or '' if unknown."""
        path = Path(file_name)
        if not path.is_absolute():
            path = self._root / path
        directory = path.parent
        with contextlib.suppress(OSError):
            directory = directory.resolve()

        visited: list[Path] = []
        name = ""
        while True:
            if directory in self._cache:
                name = self._cache[directory]
                break
            visited.append(directory)
            name = self._descriptor_name(directory)
            if name or directory == self._root or directory == directory.parent:
                break
            if not directory.is_relative_to(self._root):
                break
            directory = directory.parent

        for seen in visited:
            self._cache[seen] = name
        return name

    def _descriptor_name(self, directory: Path) -> str:
        if (directory / MAVEN_POM).is_file():
            return _maven_name(directory / MAVEN_POM)
        if (directory / ANT_PROJECT).is_file():
            return _ant_name(directory / ANT_PROJECT)
        if (directory / OSGI_BUNDLE).is_file():
            return _osgi_name(directory / OSGI_BUNDLE)
        return ""
