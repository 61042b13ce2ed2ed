"""Static registry of checks and the versioned presets that group them."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List, Mapping, Sequence, Tuple

from ..models import AccessibilityHierarchy, CheckId, CheckResult
from .base import AccessibilityCheck, CheckConfig, CheckExecutionError
from .content import (
    ClickableSpanCheck,
    DuplicateSpeakableTextCheck,
    EditableContentDescCheck,
    RedundantDescriptionCheck,
    SpeakableTextPresentCheck,
)
from .interaction import DuplicateClickableBoundsCheck, TouchTargetSizeCheck
from .structure import ClassNameCheck, TraversalOrderCheck

logger = logging.getLogger(__name__)

CHECKS: Mapping[CheckId, AccessibilityCheck] = {
    CheckId.SPEAKABLE_TEXT_PRESENT: SpeakableTextPresentCheck(),
    CheckId.EDITABLE_CONTENT_DESC: EditableContentDescCheck(),
    CheckId.TOUCH_TARGET_SIZE: TouchTargetSizeCheck(),
    CheckId.DUPLICATE_SPEAKABLE_TEXT: DuplicateSpeakableTextCheck(),
    CheckId.CLICKABLE_SPAN: ClickableSpanCheck(),
    CheckId.DUPLICATE_CLICKABLE_BOUNDS: DuplicateClickableBoundsCheck(),
    CheckId.REDUNDANT_DESCRIPTION: RedundantDescriptionCheck(),
    CheckId.CLASS_NAME: ClassNameCheck(),
    CheckId.TRAVERSAL_ORDER: TraversalOrderCheck(),
}

_VERSION_1_0: Tuple[CheckId, ...] = (
    CheckId.SPEAKABLE_TEXT_PRESENT,
    CheckId.EDITABLE_CONTENT_DESC,
    CheckId.TOUCH_TARGET_SIZE,
    CheckId.DUPLICATE_SPEAKABLE_TEXT,
)
_VERSION_2_0 = _VERSION_1_0 + (
    CheckId.CLICKABLE_SPAN,
    CheckId.DUPLICATE_CLICKABLE_BOUNDS,
    CheckId.REDUNDANT_DESCRIPTION,
)
_VERSION_3_0 = _VERSION_2_0 + (
    CheckId.CLASS_NAME,
    CheckId.TRAVERSAL_ORDER,
)


class CheckPreset(str, Enum):
    """Named, versioned sets of checks."""

    NO_CHECKS = "no-checks"
    VERSION_1_0 = "1.0"
    VERSION_2_0 = "2.0"
    VERSION_3_0 = "3.0"
    LATEST = "latest"

    @property
    def check_ids(self) -> Tuple[CheckId, ...]:
        return _PRESETS[self]


_PRESETS: Dict[CheckPreset, Tuple[CheckId, ...]] = {
    CheckPreset.NO_CHECKS: (),
    CheckPreset.VERSION_1_0: _VERSION_1_0,
    CheckPreset.VERSION_2_0: _VERSION_2_0,
    CheckPreset.VERSION_3_0: _VERSION_3_0,
    CheckPreset.LATEST: _VERSION_3_0,
}


def checks_for_preset(preset: CheckPreset) -> List[AccessibilityCheck]:
    return [CHECKS[check_id] for check_id in preset.check_ids]


def check_class_name(check_id: CheckId) -> str:
    """Return the fully qualified class name of the registered check."""

    check_class = type(CHECKS[check_id])
    return f"{check_class.__module__}.{check_class.__qualname__}"


class RuleRunner:
    """Run every check of a preset against a hierarchy."""

    def __init__(
        self,
        preset: CheckPreset = CheckPreset.LATEST,
        *,
        checks: Sequence[AccessibilityCheck] | None = None,
    ) -> None:
        self.checks = list(checks) if checks is not None else checks_for_preset(preset)

    def run(
        self,
        hierarchy: AccessibilityHierarchy,
        config: CheckConfig | None = None,
    ) -> List[CheckResult]:
        """Return all results, grouped by check in registration order."""

        config = config or CheckConfig()
        results: List[CheckResult] = []
        for check in self.checks:
            try:
                check_results = check.evaluate(hierarchy, config)
            except Exception as exc:
                raise CheckExecutionError(check.check_id, exc) from exc
            logger.debug("%s produced %d result(s)", check.check_id.value, len(check_results))
            results.extend(check_results)
        return results
