"""Protocol buffer messages used on disk by snapshots and result records."""

from .schema import (
    AccessibilityHierarchyCheckResultProto,
    AccessibilityHierarchyProto,
    CharSequenceProto,
    DeviceStateProto,
    DisplayInfoMetricsProto,
    DisplayInfoProto,
    RectProto,
    SpanProto,
    ViewHierarchyElementProto,
    WindowHierarchyElementProto,
)

__all__ = [
    "AccessibilityHierarchyCheckResultProto",
    "AccessibilityHierarchyProto",
    "CharSequenceProto",
    "DeviceStateProto",
    "DisplayInfoMetricsProto",
    "DisplayInfoProto",
    "RectProto",
    "SpanProto",
    "ViewHierarchyElementProto",
    "WindowHierarchyElementProto",
]
