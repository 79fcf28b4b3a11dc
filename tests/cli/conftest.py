"""Fixtures for CLI command tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from drygate.core.logging import configure_logging


@pytest.fixture(autouse=True)
def isolated_cli(tmp_path: Path) -> Generator[None, None, None]:
    """Ignore the user's global config and detach logging from the runner streams."""
    with patch("drygate.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml"):
        yield
    configure_logging(level="WARNING")
