"""Check interface shared by every accessibility check."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional

from ..models import AccessibilityHierarchy, CheckId, CheckResult, ResultType, ViewElement


class CheckExecutionError(RuntimeError):
    """Raised when a check fails while evaluating a hierarchy."""

    def __init__(self, check_id: CheckId, cause: BaseException) -> None:
        super().__init__(f"{check_id.value} failed: {cause}")
        self.check_id = check_id


@dataclass(frozen=True, slots=True)
class CheckConfig:
    """Options a caller may pass to the checks.

    ``min_touch_target_size`` overrides the default minimum touch target, in dp.
    """

    min_touch_target_size: Optional[int] = None


class AccessibilityCheck(ABC):
    """Abstract base class describing the check contract."""

    check_id: CheckId

    @abstractmethod
    def evaluate(self, hierarchy: AccessibilityHierarchy, config: CheckConfig) -> List[CheckResult]:
        """Evaluate ``hierarchy`` and return results in a stable order."""

    # ------------------------------------------------------------------
    def result(
        self,
        result_id: int,
        result_type: ResultType,
        element: Optional[ViewElement] = None,
        **metadata: Any,
    ) -> CheckResult:
        return CheckResult(
            check_id=self.check_id,
            result_id=result_id,
            result_type=result_type,
            element=element,
            metadata=dict(metadata),
        )
