from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from accessibility_lab.adapters import ImageAnnotator
from accessibility_lab.checks import CheckPreset, RuleRunner
from accessibility_lab.messages import MessageBundle
from accessibility_lab.models import CheckId
from accessibility_lab.rendering import ResultRenderer
from accessibility_lab.service import (
    AnalysisResult,
    AnalysisService,
    TargetNotFoundError,
    find_snapshots,
)


@pytest.fixture
def echoed() -> List[str]:
    return []


@pytest.fixture
def service(recording_runner, echoed) -> AnalysisService:
    bundle = MessageBundle.load()
    annotator = ImageAnnotator(recording_runner)

    def factory(lang):
        return ResultRenderer(bundle, annotator, lang=lang, echo=echoed.append)

    return AnalysisService(renderer_factory=factory)


def _names(directory: Path) -> List[str]:
    return sorted(path.name for path in directory.iterdir())


def test_find_snapshots_selects_only_snapshot_files_in_numeric_order(tmp_path):
    for name in (
        "accessibility10.meta",
        "accessibility2.meta",
        "accessibility2_check_result0.meta",
        "accessibility.meta",
        "accessibility3xmeta",
        "accessibility4.meta.bak",
        "2.png",
    ):
        (tmp_path / name).write_bytes(b"")
    (tmp_path / "accessibility5.meta").mkdir()

    snapshots = find_snapshots(tmp_path)

    assert [path.name for path in snapshots] == ["accessibility2.meta", "accessibility10.meta"]


def test_find_snapshots_missing_directory(tmp_path):
    with pytest.raises(TargetNotFoundError, match="No test target file found"):
        find_snapshots(tmp_path / "missing")


def test_error_and_info_snapshot_with_screenshot(
    tmp_path, write_snapshot, error_and_info_views, service, echoed, recording_runner
):
    write_snapshot(tmp_path, 1, error_and_info_views)

    result = service.analyze(tmp_path)

    assert isinstance(result, AnalysisResult)
    assert result.succeeded
    assert _names(tmp_path) == [
        "1.png",
        "accessibility1.meta",
        "accessibility1_check_result0.meta",
        "accessibility1_check_result0.png",
    ]
    assert [item.result.check_id for item in result.rendered] == [CheckId.TOUCH_TARGET_SIZE]
    assert echoed == [
        "Touch target",
        result.rendered[0].record.message,
    ]
    assert len(recording_runner.calls) == 1


def test_warning_snapshot_without_screenshot(
    tmp_path, write_snapshot, warning_only_views, service, echoed, caplog
):
    write_snapshot(tmp_path, 2, warning_only_views, screenshot=False)

    with caplog.at_level("WARNING"):
        result = service.analyze(tmp_path)

    assert _names(tmp_path) == ["accessibility2.meta", "accessibility2_check_result0.meta"]
    assert [item.result.check_id for item in result.rendered] == [CheckId.CLICKABLE_SPAN]
    assert echoed[-1] == "Target file 2.png not found."
    assert "2.png" in caplog.text


def test_decode_failure_does_not_stop_remaining_snapshots(
    tmp_path, write_snapshot, error_and_info_views, service
):
    (tmp_path / "accessibility1.meta").write_bytes(b"\xff\xff\xff")
    write_snapshot(tmp_path, 2, error_and_info_views)

    result = service.analyze(tmp_path)

    assert not result.succeeded
    assert list(result.failures) == [(tmp_path / "accessibility1.meta").resolve()]
    assert (tmp_path / "accessibility2_check_result0.meta").exists()


def test_min_touch_target_size_is_forwarded(
    tmp_path, write_snapshot, error_and_info_views, service
):
    write_snapshot(tmp_path, 1, error_and_info_views)

    result = service.analyze(tmp_path, min_touch_target_size=16)

    assert result.rendered == []


def test_target_with_tilde_is_expanded(monkeypatch, tmp_path, write_snapshot, warning_only_views):
    monkeypatch.setenv("HOME", str(tmp_path))
    write_snapshot(tmp_path / "artifacts", 1, warning_only_views)
    runner = RuleRunner(CheckPreset.NO_CHECKS)

    result = AnalysisService(runner=runner).analyze("~/artifacts")

    assert result.target_dir == (tmp_path / "artifacts").resolve()
    assert result.snapshots == [(tmp_path / "artifacts" / "accessibility1.meta").resolve()]


def test_cyclic_snapshot_does_not_stop_remaining_snapshots(
    tmp_path, make_snapshot_proto, write_snapshot, error_and_info_views, service
):
    cyclic = make_snapshot_proto([{"clickable": True, "child_ids": [1]}, {"child_ids": [1]}])
    (tmp_path / "accessibility1.meta").write_bytes(cyclic.SerializeToString())
    write_snapshot(tmp_path, 2, error_and_info_views)

    result = service.analyze(tmp_path)

    assert list(result.failures) == [(tmp_path / "accessibility1.meta").resolve()]
    assert (tmp_path / "accessibility2_check_result0.meta").exists()
