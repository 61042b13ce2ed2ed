"""Orchestration layer used by the CLI to analyze a directory of snapshots."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List

from .adapters import DecodeError, ImageAnnotator, SnapshotDecoder
from .checks import CheckConfig, CheckExecutionError, RuleRunner
from .messages import MessageBundle
from .rendering import SNAPSHOT_PREFIX, RenderedResult, ResultRenderer, SnapshotFile

logger = logging.getLogger(__name__)

SNAPSHOT_PATTERN = re.compile(r"accessibility[0-9]+\.meta")
CHECK_RESULT_PATTERN = re.compile(r"accessibility[0-9]+_check_result[0-9]+\.meta")
CHECK_RESULT_IMAGE_PATTERN = re.compile(r"accessibility[0-9]+_check_result[0-9]+\.png")


class TargetNotFoundError(FileNotFoundError):
    """Raised when the directory to analyze cannot be listed."""


@dataclass(slots=True)
class AnalysisResult:
    """Result returned by :class:`AnalysisService` runs."""

    target_dir: Path
    snapshots: List[Path] = field(default_factory=list)
    rendered: List[RenderedResult] = field(default_factory=list)
    failures: Dict[Path, str] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return not self.failures


RendererFactory = Callable[[str | None], ResultRenderer]


def expand_target(target: str | Path) -> Path:
    """Expand a leading ``~`` and return an absolute path."""

    return Path(target).expanduser().resolve()


def find_snapshots(target_dir: Path) -> List[Path]:
    """List ``accessibility<N>.meta`` files in numeric order, nothing else."""

    try:
        entries = list(target_dir.iterdir())
    except (FileNotFoundError, NotADirectoryError) as exc:
        raise TargetNotFoundError(f"No test target file found in {target_dir}") from exc

    snapshots = [
        entry
        for entry in entries
        if entry.is_file() and SNAPSHOT_PATTERN.fullmatch(entry.name)
    ]
    return sorted(snapshots, key=lambda path: int(path.stem[len(SNAPSHOT_PREFIX):]))


class AnalysisService:
    """Decode each snapshot, run the checks, and render the reportable results."""

    def __init__(
        self,
        *,
        decoder: SnapshotDecoder | None = None,
        runner: RuleRunner | None = None,
        bundle: MessageBundle | None = None,
        annotator: ImageAnnotator | None = None,
        renderer_factory: RendererFactory | None = None,
    ) -> None:
        self._decoder = decoder or SnapshotDecoder()
        self._runner = runner or RuleRunner()
        self._bundle = bundle
        self._annotator = annotator
        self._renderer_factory = renderer_factory

    # ------------------------------------------------------------------
    def analyze(
        self,
        target_dir: str | Path,
        *,
        lang: str | None = None,
        min_touch_target_size: int | None = None,
    ) -> AnalysisResult:
        """Analyze every snapshot in ``target_dir``.

        A snapshot that fails to decode is recorded in ``failures`` and the
        remaining snapshots are still processed. A failing check is fatal.
        """

        directory = expand_target(target_dir)
        snapshots = find_snapshots(directory)
        logger.info("Found %d snapshot(s) in %s", len(snapshots), directory)

        renderer = self._resolve_renderer(lang)
        config = CheckConfig(min_touch_target_size=min_touch_target_size)
        result = AnalysisResult(target_dir=directory, snapshots=snapshots)

        for path in snapshots:
            try:
                hierarchy = self._decoder.decode(path)
            except DecodeError as exc:
                logger.error("Skipping %s: %s", path.name, exc)
                result.failures[path] = str(exc)
                continue

            check_results = self._runner.run(hierarchy, config)
            rendered = renderer.render(SnapshotFile.from_path(path), check_results)
            logger.info(
                "%s: %d check result(s), %d reported",
                path.name,
                len(check_results),
                len(rendered),
            )
            result.rendered.extend(rendered)

        return result

    # ------------------------------------------------------------------
    def _resolve_renderer(self, lang: str | None) -> ResultRenderer:
        if self._renderer_factory is not None:
            return self._renderer_factory(lang)

        bundle = self._bundle or MessageBundle.load()
        return ResultRenderer(bundle, self._annotator, lang=lang)


__all__ = [
    "AnalysisResult",
    "AnalysisService",
    "CHECK_RESULT_IMAGE_PATTERN",
    "CHECK_RESULT_PATTERN",
    "CheckExecutionError",
    "DecodeError",
    "SNAPSHOT_PATTERN",
    "TargetNotFoundError",
    "expand_target",
    "find_snapshots",
]
