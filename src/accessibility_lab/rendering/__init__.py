"""Rendering of reportable check results to records and annotated screenshots."""

from .result_renderer import SNAPSHOT_PREFIX, RenderedResult, ResultRenderer, SnapshotFile

__all__ = ["RenderedResult", "ResultRenderer", "SNAPSHOT_PREFIX", "SnapshotFile"]
