"""Filter check results, persist them, and highlight them on screenshots."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from ..adapters.image_annotator import ImageAnnotator
from ..adapters.result_records import write_record
from ..checks import check_class_name
from ..messages import MessageBundle
from ..models import CheckResult, ResultRecord

logger = logging.getLogger(__name__)

SNAPSHOT_PREFIX = "accessibility"


@dataclass(frozen=True, slots=True)
class SnapshotFile:
    """An input snapshot and the naming scheme of everything derived from it."""

    path: Path
    number: str

    @classmethod
    def from_path(cls, path: Path) -> "SnapshotFile":
        return cls(path=path, number=path.stem[len(SNAPSHOT_PREFIX):])

    @property
    def directory(self) -> Path:
        return self.path.parent

    @property
    def screenshot_path(self) -> Path:
        return self.directory / f"{self.number}.png"

    def record_path(self, index: int) -> Path:
        return self.directory / f"{SNAPSHOT_PREFIX}{self.number}_check_result{index}.meta"

    def image_path(self, index: int) -> Path:
        return self.directory / f"{SNAPSHOT_PREFIX}{self.number}_check_result{index}.png"


@dataclass(slots=True)
class RenderedResult:
    """A reported result and the files written for it."""

    index: int
    result: CheckResult
    record: ResultRecord
    record_path: Path
    image_path: Optional[Path] = None


class ResultRenderer:
    """Keep ERROR/WARNING results and write a record and annotated image for each.

    The output index only disambiguates results of one snapshot within one run.
    It shifts whenever the check set or the severity filter changes.
    """

    def __init__(
        self,
        bundle: MessageBundle,
        annotator: ImageAnnotator | None = None,
        *,
        lang: str | None = None,
        echo: Callable[[str], None] = print,
    ) -> None:
        self.bundle = bundle
        self.annotator = annotator or ImageAnnotator()
        self.locale = bundle.resolve_locale(lang)
        self.echo = echo

    def render(
        self,
        snapshot: SnapshotFile,
        results: Sequence[CheckResult],
    ) -> List[RenderedResult]:
        reportable = [result for result in results if result.is_reportable]
        logger.debug(
            "%s: %d of %d result(s) reportable",
            snapshot.path.name,
            len(reportable),
            len(results),
        )
        return [
            self._render_one(snapshot, index, result) for index, result in enumerate(reportable)
        ]

    def to_record(self, result: CheckResult) -> ResultRecord:
        return ResultRecord(
            source_check_class=check_class_name(result.check_id),
            result_id=result.result_id,
            result_type=result.result_type,
            hierarchy_source_id=result.hierarchy_source_id,
            title=self.bundle.title(result.check_id, self.locale),
            message=self.bundle.message(result, self.locale),
        )

    # ------------------------------------------------------------------
    def _render_one(
        self,
        snapshot: SnapshotFile,
        index: int,
        result: CheckResult,
    ) -> RenderedResult:
        record = self.to_record(result)
        self.echo(record.title)
        self.echo(record.message)

        record_path = write_record(snapshot.record_path(index), record)
        rendered = RenderedResult(
            index=index,
            result=result,
            record=record,
            record_path=record_path,
        )

        screenshot = snapshot.screenshot_path
        if not screenshot.exists():
            logger.warning("Screenshot %s not found, skipping annotation", screenshot)
            self.echo(f"Target file {screenshot.name} not found.")
            return rendered

        if result.element is None or result.element.bounds_in_screen is None:
            logger.debug("%s has no element bounds to highlight", result.check_id.value)
            return rendered

        rendered.image_path = self.annotator.annotate(
            screenshot,
            snapshot.image_path(index),
            result.element.bounds_in_screen,
        )
        return rendered
