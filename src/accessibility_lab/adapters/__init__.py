"""Adapters for snapshot decoding and the external tools the pipeline drives."""

from .commands import CommandError, CommandResult, CommandRunner
from .github import GitHubClient, GitHubError
from .image_annotator import AnnotationError, ImageAnnotator
from .result_records import decode_record, encode_record, read_record, write_record
from .snapshot_decoder import DecodeError, SnapshotDecoder
from .storage import StorageSync, gcs_uri, object_url
from .test_lab import TestLabClient

__all__ = [
    "AnnotationError",
    "CommandError",
    "CommandResult",
    "CommandRunner",
    "DecodeError",
    "GitHubClient",
    "GitHubError",
    "ImageAnnotator",
    "SnapshotDecoder",
    "StorageSync",
    "TestLabClient",
    "decode_record",
    "encode_record",
    "gcs_uri",
    "object_url",
    "read_record",
    "write_record",
]
