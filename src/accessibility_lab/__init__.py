"""Accessibility checks for Android UI snapshots captured by Firebase Test Lab."""

__version__ = "0.1.0"
