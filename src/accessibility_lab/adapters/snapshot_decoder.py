from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from google.protobuf.message import DecodeError as ProtobufDecodeError

from ..models import (
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
from ..protos import AccessibilityHierarchyProto

logger = logging.getLogger(__name__)


class DecodeError(RuntimeError):
    """Exception raised when a hierarchy snapshot cannot be decoded."""


class SnapshotDecoder:
    """Decode ``accessibility<N>.meta`` snapshot files into hierarchy models."""

    def decode(self, path: str | os.PathLike[str]) -> AccessibilityHierarchy:
        """Read and decode the snapshot stored at ``path``."""

        snapshot_path = Path(path)
        try:
            payload = snapshot_path.read_bytes()
        except OSError as exc:
            raise DecodeError(f"Unable to read snapshot {snapshot_path}: {exc}") from exc

        hierarchy = self.decode_bytes(payload, source=str(snapshot_path))
        logger.debug(
            "Decoded %s: %d window(s), %d view(s)",
            snapshot_path.name,
            len(hierarchy.windows),
            sum(len(window.views) for window in hierarchy.windows),
        )
        return hierarchy

    def decode_bytes(self, payload: bytes, *, source: str = "<bytes>") -> AccessibilityHierarchy:
        proto = AccessibilityHierarchyProto()
        try:
            proto.ParseFromString(payload)
        except ProtobufDecodeError as exc:
            raise DecodeError(f"Invalid hierarchy snapshot in {source}: {exc}") from exc

        if not proto.windows:
            raise DecodeError(f"Hierarchy snapshot {source} contains no windows")

        windows = tuple(
            self._build_window(window_proto, position)
            for position, window_proto in enumerate(proto.windows)
        )

        active_window_id = proto.active_window_id
        if active_window_id < 0 or active_window_id >= len(windows):
            raise DecodeError(
                f"Active window {active_window_id} out of range in {source} "
                f"({len(windows)} window(s))"
            )

        return AccessibilityHierarchy(
            device_state=self._build_device_state(proto.device_state),
            windows=windows,
            active_window_id=active_window_id,
        )

    # Message conversion ---------------------------------------------------------
    def _build_device_state(self, proto: Any) -> DeviceState:
        display = proto.default_display_info
        real_metrics: Optional[DisplayMetrics] = None
        if display.HasField("real_metrics"):
            real_metrics = self._build_metrics(display.real_metrics)

        return DeviceState(
            sdk_version=proto.sdk_version,
            locale=proto.locale,
            metrics=self._build_metrics(display.metrics_without_decoration),
            real_metrics=real_metrics,
        )

    def _build_metrics(self, proto: Any) -> DisplayMetrics:
        return DisplayMetrics(
            density=proto.density,
            scaled_density=proto.scaled_density,
            x_dpi=proto.x_dpi,
            y_dpi=proto.y_dpi,
            density_dpi=proto.density_dpi,
            height_pixels=proto.height_pixels,
            width_pixels=proto.width_pixels,
        )

    def _build_window(self, proto: Any, position: int) -> WindowElement:
        # Views refer to each other by their position in the window's view table.
        views: List[ViewElement] = []
        for index, view_proto in enumerate(proto.views):
            if view_proto.id != index:
                raise DecodeError(
                    f"View id {view_proto.id} does not match its position {index} "
                    f"in window {position}"
                )
            views.append(self._build_view(view_proto, position))

        self._check_tree(views, position)

        return WindowElement(
            id=position,
            views=tuple(views),
            parent_id=proto.parent_id if proto.parent_id != -1 else None,
            child_ids=tuple(proto.child_ids),
            window_id=self._optional(proto, "window_id"),
            layer=self._optional(proto, "layer"),
            type=self._optional(proto, "type"),
            focused=self._optional(proto, "focused"),
            active=self._optional(proto, "active"),
            bounds_in_screen=self._optional_rect(proto, "bounds_in_screen"),
        )

    @staticmethod
    def _check_tree(views: List[ViewElement], position: int) -> None:
        """Reject child links that do not form a tree."""

        parents: Dict[int, int] = {}
        for view in views:
            for child_id in view.child_ids:
                if child_id < 0 or child_id >= len(views):
                    raise DecodeError(
                        f"View {view.id} in window {position} references missing child {child_id}"
                    )
                if child_id in parents:
                    raise DecodeError(
                        f"View {child_id} in window {position} has more than one parent "
                        f"({parents[child_id]} and {view.id})"
                    )
                parents[child_id] = view.id

        # With a single parent per view, a cycle is a parent chain that never ends.
        reaches_root: Set[int] = set()
        for view in views:
            chain: List[int] = []
            current: Optional[int] = view.id
            while current is not None and current not in reaches_root:
                if current in chain:
                    raise DecodeError(
                        f"View {current} in window {position} is its own ancestor"
                    )
                chain.append(current)
                current = parents.get(current)
            reaches_root.update(chain)

    def _build_view(self, proto: Any, window_id: int) -> ViewElement:
        return ViewElement(
            id=proto.id,
            window_id=window_id,
            parent_id=proto.parent_id if proto.parent_id != -1 else None,
            child_ids=tuple(proto.child_ids),
            package_name=self._optional(proto, "package_name"),
            class_name=self._optional(proto, "class_name"),
            accessibility_class_name=self._optional(proto, "accessibility_class_name"),
            resource_name=self._optional(proto, "resource_name"),
            content_description=self._build_text(proto, "content_description"),
            text=self._build_text(proto, "text"),
            important_for_accessibility=proto.important_for_accessibility,
            visible_to_user=self._optional(proto, "visible_to_user"),
            clickable=proto.clickable,
            long_clickable=proto.long_clickable,
            focusable=proto.focusable,
            editable=self._optional(proto, "editable"),
            scrollable=self._optional(proto, "scrollable"),
            checkable=self._optional(proto, "checkable"),
            checked=self._optional(proto, "checked"),
            enabled=proto.enabled,
            has_touch_delegate=self._optional(proto, "has_touch_delegate"),
            bounds_in_screen=self._optional_rect(proto, "bounds_in_screen"),
            nonclipped_width=self._optional(proto, "nonclipped_width"),
            nonclipped_height=self._optional(proto, "nonclipped_height"),
            labeled_by_id=self._optional(proto, "labeled_by_id"),
            traversal_before_id=self._optional(proto, "accessibility_traversal_before_id"),
            traversal_after_id=self._optional(proto, "accessibility_traversal_after_id"),
        )

    def _build_text(self, proto: Any, field_name: str) -> Optional[SpannableText]:
        if not proto.HasField(field_name):
            return None

        value = getattr(proto, field_name)
        spans = tuple(
            Span(
                span_class_name=span.span_class_name,
                start=span.start,
                end=span.end,
                flags=span.flags,
                type=SpanType(span.type),
                url=span.url if span.HasField("url") else None,
            )
            for span in value.span
        )
        return SpannableText(text=value.text, spans=spans)

    def _build_rect(self, proto: Any) -> Rect:
        return Rect(left=proto.left, top=proto.top, right=proto.right, bottom=proto.bottom)

    def _optional_rect(self, proto: Any, field_name: str) -> Optional[Rect]:
        if not proto.HasField(field_name):
            return None
        return self._build_rect(getattr(proto, field_name))

    @staticmethod
    def _optional(proto: Any, field_name: str) -> Any:
        return getattr(proto, field_name) if proto.HasField(field_name) else None


__all__ = ["DecodeError", "SnapshotDecoder"]
