"""Check result models shared by the checks, renderer and reporting layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from .hierarchy import ViewElement


class ResultType(IntEnum):
    """Severity of a single check finding, numbered as in the record schema."""

    UNKNOWN = 0
    ERROR = 1
    WARNING = 2
    INFO = 3
    NOT_RUN = 4
    SUPPRESSED = 5


REPORTABLE_TYPES = frozenset({ResultType.ERROR, ResultType.WARNING})


class CheckId(str, Enum):
    """Identifiers of every accessibility check known to the runner."""

    SPEAKABLE_TEXT_PRESENT = "SpeakableTextPresentCheck"
    EDITABLE_CONTENT_DESC = "EditableContentDescCheck"
    TOUCH_TARGET_SIZE = "TouchTargetSizeCheck"
    DUPLICATE_SPEAKABLE_TEXT = "DuplicateSpeakableTextCheck"
    CLICKABLE_SPAN = "ClickableSpanCheck"
    DUPLICATE_CLICKABLE_BOUNDS = "DuplicateClickableBoundsCheck"
    REDUNDANT_DESCRIPTION = "RedundantDescriptionCheck"
    CLASS_NAME = "ClassNameCheck"
    TRAVERSAL_ORDER = "TraversalOrderCheck"


@dataclass(slots=True)
class CheckResult:
    """A finding produced by one check for one element (or the whole hierarchy)."""

    check_id: CheckId
    result_id: int
    result_type: ResultType
    element: Optional["ViewElement"] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_reportable(self) -> bool:
        return self.result_type in REPORTABLE_TYPES

    @property
    def hierarchy_source_id(self) -> int:
        return self.element.condensed_unique_id if self.element is not None else 0


@dataclass(frozen=True, slots=True)
class ResultRecord:
    """Serialized form of a reported check result."""

    source_check_class: str
    result_id: int
    result_type: ResultType
    hierarchy_source_id: int
    title: str
    message: str
