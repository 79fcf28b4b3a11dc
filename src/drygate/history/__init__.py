"""Build history persisted in the workspace state directory."""

from drygate.history.store import BuildRecord, BuildStore

__all__ = ["BuildRecord", "BuildStore"]
