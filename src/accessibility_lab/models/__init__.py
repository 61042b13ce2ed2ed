"""Data models for accessibility hierarchies and check results."""

from .hierarchy import (
    AccessibilityHierarchy,
    DeviceState,
    DisplayMetrics,
    Rect,
    Span,
    SpannableText,
    SpanType,
    ViewElement,
    WindowElement,
)
from .result import REPORTABLE_TYPES, CheckId, CheckResult, ResultRecord, ResultType

__all__ = [
    "AccessibilityHierarchy",
    "CheckId",
    "CheckResult",
    "DeviceState",
    "DisplayMetrics",
    "REPORTABLE_TYPES",
    "Rect",
    "ResultRecord",
    "ResultType",
    "Span",
    "SpanType",
    "SpannableText",
    "ViewElement",
    "WindowElement",
]
