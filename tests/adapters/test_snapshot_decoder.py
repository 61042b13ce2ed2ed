from __future__ import annotations

import pytest

from accessibility_lab.adapters import DecodeError, SnapshotDecoder
from accessibility_lab.models import SpanType
from accessibility_lab.protos import (
    AccessibilityHierarchyProto,
    ViewHierarchyElementProto,
    WindowHierarchyElementProto,
)


def test_decode_builds_hierarchy_from_snapshot(tmp_path, write_snapshot, error_and_info_views):
    path = write_snapshot(tmp_path, 1, error_and_info_views, density=2.625)

    hierarchy = SnapshotDecoder().decode(path)

    assert len(hierarchy.windows) == 1
    assert hierarchy.active_window_id == 0
    assert hierarchy.device_state.density == pytest.approx(2.625)
    assert hierarchy.device_state.locale == "en_US"

    root, button, label = hierarchy.active_window.views
    assert root.parent_id is None
    assert root.child_ids == (1, 2)
    assert button.parent_id == 0
    assert button.clickable is True
    assert button.text is not None and button.text.text == "OK"
    assert button.accessibility_class_name == "android.widget.Button"
    assert (button.bounds_in_screen.width, button.bounds_in_screen.height) == (20, 20)
    assert label.content_description is None
    assert [view.id for view in hierarchy.children_of(root)] == [1, 2]


def test_decode_reads_spans_and_optional_fields(tmp_path, write_snapshot):
    views = [
        {
            "text": "Privacy policy",
            "spans": [(int(SpanType.URL), "privacy.html"), (int(SpanType.CLICKABLE), None)],
            "labeled_by_id": 3,
        }
    ]
    path = write_snapshot(tmp_path, 4, views)

    view = SnapshotDecoder().decode(path).active_window.views[0]

    assert view.text is not None
    assert [span.type for span in view.text.spans] == [SpanType.URL, SpanType.CLICKABLE]
    assert view.text.spans[0].url == "privacy.html"
    assert view.text.spans[1].url is None
    assert view.labeled_by_id == 3
    assert view.traversal_before_id is None
    assert view.editable is None


def test_density_defaults_to_one_when_missing(make_snapshot_proto):
    proto = make_snapshot_proto([{}], density=0.0)

    hierarchy = SnapshotDecoder().decode_bytes(proto.SerializeToString())

    assert hierarchy.device_state.density == 1.0


def test_decode_rejects_garbage(tmp_path):
    path = tmp_path / "accessibility1.meta"
    path.write_bytes(b"\xff\xff\xff\xff")

    with pytest.raises(DecodeError) as excinfo:
        SnapshotDecoder().decode(path)

    assert "accessibility1.meta" in str(excinfo.value)


def test_decode_rejects_missing_file(tmp_path):
    with pytest.raises(DecodeError):
        SnapshotDecoder().decode(tmp_path / "accessibility9.meta")


def test_decode_rejects_snapshot_without_windows():
    payload = AccessibilityHierarchyProto().SerializeToString()

    with pytest.raises(DecodeError, match="no windows"):
        SnapshotDecoder().decode_bytes(payload)


def test_decode_rejects_out_of_range_active_window(make_snapshot_proto):
    proto = make_snapshot_proto([{}])
    proto.active_window_id = 3

    with pytest.raises(DecodeError, match="Active window 3"):
        SnapshotDecoder().decode_bytes(proto.SerializeToString())


def test_decode_rejects_view_ids_out_of_position():
    window = WindowHierarchyElementProto(id=0, views=[ViewHierarchyElementProto(id=5)])
    proto = AccessibilityHierarchyProto(windows=[window])

    with pytest.raises(DecodeError, match="does not match its position"):
        SnapshotDecoder().decode_bytes(proto.SerializeToString())


def test_decode_rejects_dangling_child_reference(make_snapshot_proto):
    proto = make_snapshot_proto([{"child_ids": [7]}])

    with pytest.raises(DecodeError, match="missing child 7"):
        SnapshotDecoder().decode_bytes(proto.SerializeToString())


def test_decode_rejects_view_listed_as_its_own_child(make_snapshot_proto):
    proto = make_snapshot_proto([{"clickable": True, "child_ids": [1]}, {"child_ids": [1]}])

    with pytest.raises(DecodeError, match="more than one parent"):
        SnapshotDecoder().decode_bytes(proto.SerializeToString())


def test_decode_rejects_child_shared_by_two_parents(make_snapshot_proto):
    proto = make_snapshot_proto([{"child_ids": [1]}, {"child_ids": [2]}, {"child_ids": [1]}])

    with pytest.raises(DecodeError, match="more than one parent"):
        SnapshotDecoder().decode_bytes(proto.SerializeToString())


def test_decode_rejects_cycle_without_root(make_snapshot_proto):
    proto = make_snapshot_proto([{"child_ids": [1]}, {"child_ids": [0]}])

    with pytest.raises(DecodeError, match="is its own ancestor"):
        SnapshotDecoder().decode_bytes(proto.SerializeToString())


def test_view_without_bounds_has_no_rect(make_snapshot_proto):
    proto = make_snapshot_proto([{}])
    proto.windows[0].views[0].ClearField("bounds_in_screen")

    view = SnapshotDecoder().decode_bytes(proto.SerializeToString()).active_window.views[0]

    assert view.bounds_in_screen is None
