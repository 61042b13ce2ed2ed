"""Accessibility checks and the runner that applies a preset of them."""

from .base import AccessibilityCheck, CheckConfig, CheckExecutionError
from .content import (
    ClickableSpanCheck,
    DuplicateSpeakableTextCheck,
    EditableContentDescCheck,
    RedundantDescriptionCheck,
    SpeakableTextPresentCheck,
)
from .interaction import (
    DEFAULT_MIN_TOUCH_TARGET_SIZE,
    DuplicateClickableBoundsCheck,
    TouchTargetSizeCheck,
)
from .preset import CHECKS, CheckPreset, RuleRunner, check_class_name, checks_for_preset
from .structure import ClassNameCheck, TraversalOrderCheck

__all__ = [
    "AccessibilityCheck",
    "CHECKS",
    "CheckConfig",
    "CheckExecutionError",
    "CheckPreset",
    "ClassNameCheck",
    "ClickableSpanCheck",
    "DEFAULT_MIN_TOUCH_TARGET_SIZE",
    "DuplicateClickableBoundsCheck",
    "DuplicateSpeakableTextCheck",
    "EditableContentDescCheck",
    "RedundantDescriptionCheck",
    "RuleRunner",
    "SpeakableTextPresentCheck",
    "TouchTargetSizeCheck",
    "TraversalOrderCheck",
    "check_class_name",
    "checks_for_preset",
]
