"""Read and write ``accessibility<N>_check_result<index>.meta`` record files."""

from __future__ import annotations

from pathlib import Path

from google.protobuf.message import DecodeError as ProtobufDecodeError

from ..models import ResultRecord, ResultType
from ..protos import AccessibilityHierarchyCheckResultProto
from .snapshot_decoder import DecodeError


def encode_record(record: ResultRecord) -> bytes:
    proto = AccessibilityHierarchyCheckResultProto(
        source_check_class=record.source_check_class,
        result_id=record.result_id,
        result_type=int(record.result_type),
        hierarchy_source_id=record.hierarchy_source_id,
        title=record.title,
        message=record.message,
    )
    return proto.SerializeToString()


def decode_record(payload: bytes, *, source: str = "<bytes>") -> ResultRecord:
    proto = AccessibilityHierarchyCheckResultProto()
    try:
        proto.ParseFromString(payload)
    except ProtobufDecodeError as exc:
        raise DecodeError(f"Invalid check result record in {source}: {exc}") from exc

    try:
        result_type = ResultType(proto.result_type)
    except ValueError:
        result_type = ResultType.UNKNOWN

    return ResultRecord(
        source_check_class=proto.source_check_class,
        result_id=proto.result_id,
        result_type=result_type,
        hierarchy_source_id=proto.hierarchy_source_id,
        title=proto.title,
        message=proto.message,
    )


def write_record(path: Path, record: ResultRecord) -> Path:
    path.write_bytes(encode_record(record))
    return path


def read_record(path: Path) -> ResultRecord:
    try:
        payload = path.read_bytes()
    except OSError as exc:
        raise DecodeError(f"Unable to read check result record {path}: {exc}") from exc
    return decode_record(payload, source=str(path))


__all__ = ["decode_record", "encode_record", "read_record", "write_record"]
