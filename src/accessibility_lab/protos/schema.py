"""Protocol buffer message classes for hierarchy snapshots and result records.

The descriptors are assembled at import time into a private descriptor pool so
that no ``protoc`` step is needed. Field numbers match the files written by
the Accessibility Test Framework on device and read by the reporting step.
"""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

_FIELD = descriptor_pb2.FieldDescriptorProto

HIERARCHY_PACKAGE = "com.google.android.apps.common.testing.accessibility.framework.uielement.proto"
EVALUATION_PACKAGE = "proto"

# (name, number, type, label, type_name, default)
FieldSpec = Tuple[str, int, int, int, str | None, str | None]


def _optional(
    name: str,
    number: int,
    field_type: int,
    type_name: str | None = None,
    default: str | None = None,
) -> FieldSpec:
    return (name, number, field_type, _FIELD.LABEL_OPTIONAL, type_name, default)


def _repeated(name: str, number: int, field_type: int, type_name: str | None = None) -> FieldSpec:
    return (name, number, field_type, _FIELD.LABEL_REPEATED, type_name, None)


def _add_message(
    file_proto: descriptor_pb2.FileDescriptorProto,
    name: str,
    fields: Sequence[FieldSpec],
) -> None:
    message = file_proto.message_type.add(name=name)
    for field_name, number, field_type, label, type_name, default in fields:
        field = message.field.add(name=field_name, number=number, type=field_type, label=label)
        if type_name:
            field.type_name = type_name
        if default is not None:
            field.default_value = default


def _add_enum(
    file_proto: descriptor_pb2.FileDescriptorProto,
    name: str,
    values: Iterable[Tuple[str, int]],
) -> None:
    enum = file_proto.enum_type.add(name=name)
    for value_name, number in values:
        enum.value.add(name=value_name, number=number)


def _hierarchy_file() -> descriptor_pb2.FileDescriptorProto:
    pkg = f".{HIERARCHY_PACKAGE}"
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="AccessibilityHierarchy.proto",
        package=HIERARCHY_PACKAGE,
        syntax="proto2",
    )

    _add_enum(file_proto, "SpanType", [("UNKNOWN", 0), ("CLICKABLE", 1), ("URL", 2)])
    _add_message(
        file_proto,
        "RectProto",
        [
            _optional("left", 1, _FIELD.TYPE_INT32),
            _optional("top", 2, _FIELD.TYPE_INT32),
            _optional("right", 3, _FIELD.TYPE_INT32),
            _optional("bottom", 4, _FIELD.TYPE_INT32),
        ],
    )
    _add_message(
        file_proto,
        "SpanProto",
        [
            _optional("span_class_name", 1, _FIELD.TYPE_STRING),
            _optional("start", 2, _FIELD.TYPE_INT32),
            _optional("end", 3, _FIELD.TYPE_INT32),
            _optional("flags", 4, _FIELD.TYPE_INT32),
            _optional("type", 5, _FIELD.TYPE_ENUM, f"{pkg}.SpanType"),
            _optional("url", 6, _FIELD.TYPE_STRING),
        ],
    )
    _add_message(
        file_proto,
        "CharSequenceProto",
        [
            _optional("text", 1, _FIELD.TYPE_STRING),
            _repeated("span", 2, _FIELD.TYPE_MESSAGE, f"{pkg}.SpanProto"),
        ],
    )
    _add_message(
        file_proto,
        "DisplayInfoMetricsProto",
        [
            _optional("density", 1, _FIELD.TYPE_FLOAT),
            _optional("scaled_density", 2, _FIELD.TYPE_FLOAT),
            _optional("x_dpi", 3, _FIELD.TYPE_FLOAT),
            _optional("y_dpi", 4, _FIELD.TYPE_FLOAT),
            _optional("density_dpi", 5, _FIELD.TYPE_INT32),
            _optional("height_pixels", 6, _FIELD.TYPE_INT32),
            _optional("width_pixels", 7, _FIELD.TYPE_INT32),
        ],
    )
    _add_message(
        file_proto,
        "DisplayInfoProto",
        [
            _optional(
                "metrics_without_decoration",
                1,
                _FIELD.TYPE_MESSAGE,
                f"{pkg}.DisplayInfoMetricsProto",
            ),
            _optional("real_metrics", 2, _FIELD.TYPE_MESSAGE, f"{pkg}.DisplayInfoMetricsProto"),
        ],
    )
    _add_message(
        file_proto,
        "DeviceStateProto",
        [
            _optional("default_display_info", 1, _FIELD.TYPE_MESSAGE, f"{pkg}.DisplayInfoProto"),
            _optional("sdk_version", 2, _FIELD.TYPE_INT32),
            _optional("locale", 3, _FIELD.TYPE_STRING),
        ],
    )
    _add_message(
        file_proto,
        "ViewHierarchyElementProto",
        [
            _optional("id", 1, _FIELD.TYPE_INT32),
            _optional("parent_id", 2, _FIELD.TYPE_INT32, default="-1"),
            _repeated("child_ids", 3, _FIELD.TYPE_INT32),
            _optional("package_name", 4, _FIELD.TYPE_STRING),
            _optional("class_name", 5, _FIELD.TYPE_STRING),
            _optional("resource_name", 6, _FIELD.TYPE_STRING),
            _optional("content_description", 7, _FIELD.TYPE_MESSAGE, f"{pkg}.CharSequenceProto"),
            _optional("text", 8, _FIELD.TYPE_MESSAGE, f"{pkg}.CharSequenceProto"),
            _optional("important_for_accessibility", 9, _FIELD.TYPE_BOOL),
            _optional("visible_to_user", 10, _FIELD.TYPE_BOOL),
            _optional("clickable", 11, _FIELD.TYPE_BOOL),
            _optional("long_clickable", 12, _FIELD.TYPE_BOOL),
            _optional("focusable", 13, _FIELD.TYPE_BOOL),
            _optional("editable", 14, _FIELD.TYPE_BOOL),
            _optional("scrollable", 15, _FIELD.TYPE_BOOL),
            _optional("can_scroll_forward", 16, _FIELD.TYPE_BOOL),
            _optional("can_scroll_backward", 17, _FIELD.TYPE_BOOL),
            _optional("checkable", 18, _FIELD.TYPE_BOOL),
            _optional("checked", 19, _FIELD.TYPE_BOOL),
            _optional("has_touch_delegate", 20, _FIELD.TYPE_BOOL),
            _optional("bounds_in_screen", 21, _FIELD.TYPE_MESSAGE, f"{pkg}.RectProto"),
            _optional("nonclipped_height", 22, _FIELD.TYPE_INT32),
            _optional("nonclipped_width", 23, _FIELD.TYPE_INT32),
            _optional("text_size", 24, _FIELD.TYPE_FLOAT),
            _optional("text_color", 25, _FIELD.TYPE_INT32),
            _optional("background_drawable_color", 26, _FIELD.TYPE_INT32),
            _optional("typeface_style", 27, _FIELD.TYPE_INT32),
            _optional("enabled", 28, _FIELD.TYPE_BOOL),
            _optional("labeled_by_id", 29, _FIELD.TYPE_INT64),
            _optional("accessibility_traversal_before_id", 30, _FIELD.TYPE_INT64),
            _optional("accessibility_traversal_after_id", 31, _FIELD.TYPE_INT64),
            _optional("accessibility_class_name", 32, _FIELD.TYPE_STRING),
        ],
    )
    _add_message(
        file_proto,
        "WindowHierarchyElementProto",
        [
            _optional("id", 1, _FIELD.TYPE_INT32),
            _optional("parent_id", 2, _FIELD.TYPE_INT32, default="-1"),
            _repeated("child_ids", 3, _FIELD.TYPE_INT32),
            _repeated("views", 4, _FIELD.TYPE_MESSAGE, f"{pkg}.ViewHierarchyElementProto"),
            _optional("window_id", 5, _FIELD.TYPE_INT32),
            _optional("layer", 6, _FIELD.TYPE_INT32),
            _optional("type", 7, _FIELD.TYPE_INT32),
            _optional("focused", 8, _FIELD.TYPE_BOOL),
            _optional("accessibility_focused", 9, _FIELD.TYPE_BOOL),
            _optional("active", 10, _FIELD.TYPE_BOOL),
            _optional("bounds_in_screen", 11, _FIELD.TYPE_MESSAGE, f"{pkg}.RectProto"),
        ],
    )
    _add_message(
        file_proto,
        "AccessibilityHierarchyProto",
        [
            _optional("device_state", 1, _FIELD.TYPE_MESSAGE, f"{pkg}.DeviceStateProto"),
            _optional("active_window_id", 2, _FIELD.TYPE_INT32),
            _repeated("windows", 3, _FIELD.TYPE_MESSAGE, f"{pkg}.WindowHierarchyElementProto"),
        ],
    )
    return file_proto


def _evaluation_file() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="AccessibilityEvaluation.proto",
        package=EVALUATION_PACKAGE,
        syntax="proto2",
    )
    _add_enum(
        file_proto,
        "ResultTypeProto",
        [
            ("UNKNOWN", 0),
            ("ERROR", 1),
            ("WARNING", 2),
            ("INFO", 3),
            ("NOT_RUN", 4),
            ("SUPPRESSED", 5),
        ],
    )
    _add_message(
        file_proto,
        "AccessibilityHierarchyCheckResultProto",
        [
            _optional("source_check_class", 1, _FIELD.TYPE_STRING),
            _optional("result_id", 2, _FIELD.TYPE_INT32),
            _optional(
                "result_type", 3, _FIELD.TYPE_ENUM, f".{EVALUATION_PACKAGE}.ResultTypeProto"
            ),
            _optional("hierarchy_source_id", 4, _FIELD.TYPE_INT64),
            _optional("title", 6, _FIELD.TYPE_STRING),
            _optional("message", 7, _FIELD.TYPE_STRING),
        ],
    )
    return file_proto


_POOL = descriptor_pool.DescriptorPool()
_POOL.AddSerializedFile(_hierarchy_file().SerializeToString())
_POOL.AddSerializedFile(_evaluation_file().SerializeToString())


def _message_class(full_name: str):
    return message_factory.GetMessageClass(_POOL.FindMessageTypeByName(full_name))


RectProto = _message_class(f"{HIERARCHY_PACKAGE}.RectProto")
SpanProto = _message_class(f"{HIERARCHY_PACKAGE}.SpanProto")
CharSequenceProto = _message_class(f"{HIERARCHY_PACKAGE}.CharSequenceProto")
DisplayInfoMetricsProto = _message_class(f"{HIERARCHY_PACKAGE}.DisplayInfoMetricsProto")
DisplayInfoProto = _message_class(f"{HIERARCHY_PACKAGE}.DisplayInfoProto")
DeviceStateProto = _message_class(f"{HIERARCHY_PACKAGE}.DeviceStateProto")
ViewHierarchyElementProto = _message_class(f"{HIERARCHY_PACKAGE}.ViewHierarchyElementProto")
WindowHierarchyElementProto = _message_class(f"{HIERARCHY_PACKAGE}.WindowHierarchyElementProto")
AccessibilityHierarchyProto = _message_class(f"{HIERARCHY_PACKAGE}.AccessibilityHierarchyProto")
AccessibilityHierarchyCheckResultProto = _message_class(
    f"{EVALUATION_PACKAGE}.AccessibilityHierarchyCheckResultProto"
)
