"""Checks concerned with how elements can be touched."""

from __future__ import annotations

from typing import Dict, List

from ..models import AccessibilityHierarchy, CheckId, CheckResult, Rect, ResultType, ViewElement
from .base import AccessibilityCheck, CheckConfig

DEFAULT_MIN_TOUCH_TARGET_SIZE = 48


def _is_touchable(view: ViewElement) -> bool:
    return view.is_visible and (view.clickable or view.long_clickable)


class TouchTargetSizeCheck(AccessibilityCheck):
    """Touch targets must be at least 48x48dp unless configured otherwise."""

    check_id = CheckId.TOUCH_TARGET_SIZE

    RESULT_TOO_SMALL = 1
    RESULT_TOO_NARROW = 2
    RESULT_TOO_SHORT = 3
    RESULT_TOO_SMALL_WITH_DELEGATE = 4

    def evaluate(self, hierarchy: AccessibilityHierarchy, config: CheckConfig) -> List[CheckResult]:
        required = config.min_touch_target_size
        if required is None:
            required = DEFAULT_MIN_TOUCH_TARGET_SIZE
        customized = config.min_touch_target_size is not None
        density = hierarchy.device_state.density

        results: List[CheckResult] = []
        for view in hierarchy.iter_views():
            if not _is_touchable(view):
                continue

            bounds = view.bounds_in_screen
            if bounds is None:
                continue
            width = round(bounds.width / density)
            height = round(bounds.height / density)
            too_narrow = width < required
            too_short = height < required
            if not (too_narrow or too_short):
                continue

            if view.has_touch_delegate:
                result_id = self.RESULT_TOO_SMALL_WITH_DELEGATE
                result_type = ResultType.WARNING
            elif too_narrow and too_short:
                result_id, result_type = self.RESULT_TOO_SMALL, ResultType.ERROR
            elif too_narrow:
                result_id, result_type = self.RESULT_TOO_NARROW, ResultType.ERROR
            else:
                result_id, result_type = self.RESULT_TOO_SHORT, ResultType.ERROR

            results.append(
                self.result(
                    result_id,
                    result_type,
                    view,
                    width=width,
                    height=height,
                    required=required,
                    customized=customized,
                )
            )
        return results


class DuplicateClickableBoundsCheck(AccessibilityCheck):
    """Two clickable elements should never occupy exactly the same area."""

    check_id = CheckId.DUPLICATE_CLICKABLE_BOUNDS

    RESULT_DUPLICATE_BOUNDS = 1

    def evaluate(self, hierarchy: AccessibilityHierarchy, config: CheckConfig) -> List[CheckResult]:
        groups: Dict[Rect, List[ViewElement]] = {}
        for view in hierarchy.iter_views():
            bounds = view.bounds_in_screen
            if not _is_touchable(view) or bounds is None or bounds.is_empty:
                continue
            groups.setdefault(bounds, []).append(view)

        return [
            self.result(
                self.RESULT_DUPLICATE_BOUNDS,
                ResultType.ERROR,
                views[0],
                count=len(views) - 1,
            )
            for views in groups.values()
            if len(views) > 1
        ]
