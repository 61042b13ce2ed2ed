"""Shared fixtures: hierarchy builders, snapshot writers and a recording runner."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Sequence

import pytest

from accessibility_lab.adapters import CommandResult
from accessibility_lab.models import (
    AccessibilityHierarchy,
    DeviceState,
    DisplayMetrics,
    Rect,
    SpannableText,
    SpanType,
    ViewElement,
    WindowElement,
)
from accessibility_lab.protos import (
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


def build_view(view_id: int, **overrides: Any) -> ViewElement:
    values: Dict[str, Any] = {
        "id": view_id,
        "visible_to_user": True,
        "important_for_accessibility": True,
        "enabled": True,
        "bounds_in_screen": Rect(0, 0, 200, 200),
    }
    for key in ("text", "content_description"):
        if isinstance(overrides.get(key), str):
            overrides[key] = SpannableText(overrides[key])
    values.update(overrides)
    return ViewElement(**values)


def build_hierarchy(*views: ViewElement, density: float = 1.0) -> AccessibilityHierarchy:
    return AccessibilityHierarchy(
        device_state=DeviceState(metrics=DisplayMetrics(density=density)),
        windows=(WindowElement(id=0, views=tuple(views)),),
    )


def build_snapshot_proto(
    views: Sequence[Dict[str, Any]],
    *,
    density: float = 1.0,
) -> AccessibilityHierarchyProto:
    """Build a one-window snapshot; view ids are assigned by position."""

    window = WindowHierarchyElementProto(id=0)
    for index, view_fields in enumerate(views):
        fields = dict(view_fields)
        bounds = fields.pop("bounds", (0, 0, 200, 200))
        text = fields.pop("text", None)
        spans = fields.pop("spans", ())
        description = fields.pop("content_description", None)
        view = ViewHierarchyElementProto(
            id=index,
            visible_to_user=fields.pop("visible_to_user", True),
            important_for_accessibility=fields.pop("important_for_accessibility", True),
            enabled=True,
            bounds_in_screen=RectProto(
                left=bounds[0], top=bounds[1], right=bounds[2], bottom=bounds[3]
            ),
            **fields,
        )
        if text is not None:
            view.text.CopyFrom(
                CharSequenceProto(
                    text=text,
                    span=[_span_proto(span_type, url) for span_type, url in spans],
                )
            )
        if description is not None:
            view.content_description.CopyFrom(CharSequenceProto(text=description))
        window.views.append(view)

    return AccessibilityHierarchyProto(
        device_state=DeviceStateProto(
            sdk_version=33,
            locale="en_US",
            default_display_info=DisplayInfoProto(
                metrics_without_decoration=DisplayInfoMetricsProto(density=density),
            ),
        ),
        active_window_id=0,
        windows=[window],
    )


def _span_proto(span_type: int, url: str | None) -> SpanProto:
    if url is None:
        return SpanProto(type=span_type)
    return SpanProto(type=span_type, url=url)


class RecordingRunner:
    """Command runner double that records invocations instead of spawning processes."""

    def __init__(self, stdout: str = "") -> None:
        self.calls: List[List[str]] = []
        self.capture_flags: List[bool] = []
        self.stdout = stdout

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        capture_output: bool = False,
    ) -> CommandResult:
        command = [str(arg) for arg in args]
        self.calls.append(command)
        self.capture_flags.append(capture_output)
        if command and command[0] == "convert":
            Path(command[-1]).write_bytes(b"annotated")
        return CommandResult(args=command, returncode=0, stdout=self.stdout, stderr="")


@pytest.fixture
def make_view() -> Callable[..., ViewElement]:
    return build_view


@pytest.fixture
def make_hierarchy() -> Callable[..., AccessibilityHierarchy]:
    return build_hierarchy


@pytest.fixture
def write_snapshot() -> Callable[..., Path]:
    def writer(
        directory: Path,
        number: int,
        views: Sequence[Dict[str, Any]],
        *,
        density: float = 1.0,
        screenshot: bool = True,
    ) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"accessibility{number}.meta"
        path.write_bytes(build_snapshot_proto(views, density=density).SerializeToString())
        if screenshot:
            (directory / f"{number}.png").write_bytes(b"\x89PNG")
        return path

    return writer


@pytest.fixture
def recording_runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def error_and_info_views() -> List[Dict[str, Any]]:
    """Snapshot views yielding one ERROR and one INFO result."""

    return [
        # root container
        {
            "important_for_accessibility": False,
            "child_ids": [1, 2],
            "bounds": (0, 0, 1080, 1920),
        },
        # small clickable button: TouchTargetSize ERROR
        {
            "clickable": True,
            "text": "OK",
            "accessibility_class_name": "android.widget.Button",
            "bounds": (100, 100, 120, 120),
            "parent_id": 0,
        },
        # same text, not clickable: DuplicateSpeakableText INFO
        {"text": "OK", "bounds": (200, 300, 600, 360), "parent_id": 0},
    ]


@pytest.fixture
def warning_only_views() -> List[Dict[str, Any]]:
    """Snapshot views yielding a single WARNING result."""

    return [{"text": "Read the terms", "spans": [(int(SpanType.CLICKABLE), None)]}]


@pytest.fixture
def make_snapshot_proto() -> Callable[..., AccessibilityHierarchyProto]:
    return build_snapshot_proto
