"""Immutable models describing a captured accessibility hierarchy."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Iterator, List, Optional, Tuple


class SpanType(IntEnum):
    """Kinds of text markup spans recorded in a snapshot."""

    UNKNOWN = 0
    CLICKABLE = 1
    URL = 2


@dataclass(frozen=True, slots=True)
class Rect:
    """Screen-space rectangle in pixels."""

    left: int = 0
    top: int = 0
    right: int = 0
    bottom: int = 0

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def expanded(self, margin: int) -> "Rect":
        """Return a copy grown by ``margin`` pixels on every side."""

        return Rect(
            left=self.left - margin,
            top=self.top - margin,
            right=self.right + margin,
            bottom=self.bottom + margin,
        )


@dataclass(frozen=True, slots=True)
class Span:
    span_class_name: str = ""
    start: int = 0
    end: int = 0
    flags: int = 0
    type: SpanType = SpanType.UNKNOWN
    url: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SpannableText:
    """Text plus the markup spans attached to it."""

    text: str
    spans: Tuple[Span, ...] = ()

    def __str__(self) -> str:
        return self.text

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


@dataclass(frozen=True, slots=True)
class DisplayMetrics:
    density: float = 0.0
    scaled_density: float = 0.0
    x_dpi: float = 0.0
    y_dpi: float = 0.0
    density_dpi: int = 0
    height_pixels: int = 0
    width_pixels: int = 0


@dataclass(frozen=True, slots=True)
class DeviceState:
    """Device properties at the time the hierarchy was captured."""

    sdk_version: int = 0
    locale: str = ""
    metrics: DisplayMetrics = field(default_factory=DisplayMetrics)
    real_metrics: Optional[DisplayMetrics] = None

    @property
    def density(self) -> float:
        """Display density used to convert pixels to dp, ``1.0`` when unknown."""

        return self.metrics.density if self.metrics.density > 0 else 1.0


@dataclass(frozen=True, slots=True)
class ViewElement:
    """A single view captured inside a window."""

    id: int
    window_id: int = 0
    parent_id: Optional[int] = None
    child_ids: Tuple[int, ...] = ()
    package_name: Optional[str] = None
    class_name: Optional[str] = None
    accessibility_class_name: Optional[str] = None
    resource_name: Optional[str] = None
    content_description: Optional[SpannableText] = None
    text: Optional[SpannableText] = None
    important_for_accessibility: bool = False
    visible_to_user: Optional[bool] = None
    clickable: bool = False
    long_clickable: bool = False
    focusable: bool = False
    editable: Optional[bool] = None
    scrollable: Optional[bool] = None
    checkable: Optional[bool] = None
    checked: Optional[bool] = None
    enabled: bool = False
    has_touch_delegate: Optional[bool] = None
    bounds_in_screen: Optional[Rect] = None
    nonclipped_width: Optional[int] = None
    nonclipped_height: Optional[int] = None
    labeled_by_id: Optional[int] = None
    traversal_before_id: Optional[int] = None
    traversal_after_id: Optional[int] = None

    @property
    def condensed_unique_id(self) -> int:
        """Hierarchy-wide identifier: window id in the high 32 bits."""

        return (self.window_id << 32) | (self.id & 0xFFFFFFFF)

    @property
    def is_visible(self) -> bool:
        return bool(self.visible_to_user)

    @property
    def is_actionable(self) -> bool:
        return self.clickable or self.long_clickable or self.focusable

    @property
    def is_editable(self) -> bool:
        return bool(self.editable)

    def speakable_text(self) -> str:
        """Return the text a screen reader would announce for the element itself."""

        if self.content_description is not None and not self.content_description.is_blank:
            return self.content_description.text.strip()
        if self.text is not None and not self.text.is_blank:
            return self.text.text.strip()
        return ""


@dataclass(frozen=True, slots=True)
class WindowElement:
    """A window and the flat table of views it contains, indexed by view id."""

    id: int
    views: Tuple[ViewElement, ...] = ()
    parent_id: Optional[int] = None
    child_ids: Tuple[int, ...] = ()
    window_id: Optional[int] = None
    layer: Optional[int] = None
    type: Optional[int] = None
    focused: Optional[bool] = None
    active: Optional[bool] = None
    bounds_in_screen: Optional[Rect] = None

    @property
    def root_view(self) -> Optional[ViewElement]:
        return self.views[0] if self.views else None

    def view_by_id(self, view_id: int) -> ViewElement:
        if view_id < 0 or view_id >= len(self.views):
            raise KeyError(f"No view {view_id} in window {self.id}")
        return self.views[view_id]


@dataclass(frozen=True, slots=True)
class AccessibilityHierarchy:
    """A forest of windows plus the device state they were captured on."""

    device_state: DeviceState
    windows: Tuple[WindowElement, ...]
    active_window_id: int = 0

    @property
    def active_window(self) -> WindowElement:
        return self.windows[self.active_window_id]

    def iter_views(self) -> Iterator[ViewElement]:
        """Yield every view of every window in capture order."""

        for window in self.windows:
            yield from window.views

    def view_by_condensed_id(self, condensed_id: int) -> Optional[ViewElement]:
        window_id = condensed_id >> 32
        view_id = condensed_id & 0xFFFFFFFF
        if window_id < 0 or window_id >= len(self.windows):
            return None
        try:
            return self.windows[window_id].view_by_id(view_id)
        except KeyError:
            return None

    def children_of(self, view: ViewElement) -> List[ViewElement]:
        window = self.windows[view.window_id]
        return [window.view_by_id(child_id) for child_id in view.child_ids]

    def descendants_of(self, view: ViewElement) -> List[ViewElement]:
        """Return all descendants of ``view`` in depth-first order."""

        result: List[ViewElement] = []
        for child in self.children_of(view):
            result.append(child)
            result.extend(self.descendants_of(child))
        return result

    def index_by_condensed_id(self) -> Dict[int, ViewElement]:
        return {view.condensed_unique_id: view for view in self.iter_views()}
