"""Configuration constants.

Values here are fixed by the report formats and the publisher contract and
are NOT user-configurable. For configurable values, see models.py.
"""

PLUGIN_NAME = "DRY"
"""Name used to prefix build console lines and label results."""

DEFAULT_DRY_PATTERN = "**/cpd.xml"
"""Ant file-set pattern used when the configured pattern is blank."""

DEFAULT_HIGH_THRESHOLD = 50
"""Minimum duplicated lines for high priority when the configured pair is invalid."""

DEFAULT_NORMAL_THRESHOLD = 25
"""Minimum duplicated lines for normal priority when the configured pair is invalid."""

CONFIG_VERSION = 2
"""Current publisher config record version. Version 1 is the flat legacy layout."""

STATE_DIR = ".drygate"
"""Per-workspace directory holding config.yaml and build history."""
