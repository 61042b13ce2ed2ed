"""End-to-end Firebase Test Lab accessibility pipeline."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .adapters import (
    CommandRunner,
    GitHubClient,
    ImageAnnotator,
    StorageSync,
    TestLabClient,
    gcs_uri,
    object_url,
    read_record,
)
from .config import DeviceSpec, PipelineConfig
from .reporting import COMMENT_HEADER, FOLDED_SUMMARY, ReportEntry, format_comment
from .service import (
    CHECK_RESULT_IMAGE_PATTERN,
    CHECK_RESULT_PATTERN,
    AnalysisResult,
    AnalysisService,
)

logger = logging.getLogger(__name__)

CONSOLE_LOG_NAME = "firebase_os_test_console.log"
RESULTS_DIR_FORMAT = "firebase_test_result_%Y-%m-%d-%H:%M:%S"

_RECORD_NUMBERS = re.compile(r"accessibility([0-9]+)_check_result([0-9]+)")


class AnalysisError(RuntimeError):
    """Raised when snapshots of a device could not be analyzed."""


@dataclass(slots=True)
class PipelineResult:
    """Summary of one pipeline run."""

    results_bucket: str
    results_dir: str
    analyses: Dict[str, AnalysisResult] = field(default_factory=dict)
    entries: List[ReportEntry] = field(default_factory=list)
    comment: Optional[str] = None
    comment_posted: bool = False


GitHubClientFactory = Callable[[PipelineConfig], GitHubClient]


def _default_github_client(config: PipelineConfig) -> GitHubClient:
    return GitHubClient(config.github_owner, config.github_repository, config.github_api_token)


def _record_sort_key(path: Path) -> Tuple[int, int]:
    match = _RECORD_NUMBERS.match(path.stem)
    if match is None:  # pragma: no cover - guarded by CHECK_RESULT_PATTERN
        return (0, 0)
    return (int(match.group(1)), int(match.group(2)))


def find_result_images(device_dir: Path) -> List[Path]:
    return sorted(
        (
            entry
            for entry in device_dir.iterdir()
            if entry.is_file() and CHECK_RESULT_IMAGE_PATTERN.fullmatch(entry.name)
        ),
        key=_record_sort_key,
    )


def collect_entries(
    download_dir: Path,
    devices: Sequence[DeviceSpec],
    *,
    results_bucket: str,
    results_dir: str,
) -> List[ReportEntry]:
    """Read every result record below ``download_dir`` into report entries."""

    entries: List[ReportEntry] = []
    for device in devices:
        device_dir = download_dir / device.name
        if not device_dir.is_dir():
            logger.warning("No artifacts directory for %s", device.name)
            continue

        records = sorted(
            (
                entry
                for entry in device_dir.iterdir()
                if entry.is_file() and CHECK_RESULT_PATTERN.fullmatch(entry.name)
            ),
            key=_record_sort_key,
        )
        for record_path in records:
            record = read_record(record_path)
            image_url = ""
            # Results without a screenshot or element have no annotated image.
            if record_path.with_suffix(".png").is_file():
                image_url = object_url(
                    results_bucket,
                    results_dir,
                    f"{device.name}/artifacts/{record_path.stem}.png",
                )
            entries.append(
                ReportEntry(
                    title=record.title,
                    message=record.message,
                    image_url=image_url,
                    result_type=record.result_type,
                    device=device.name,
                )
            )
    return entries


class LabPipeline:
    """Trigger Robo tests, analyze their snapshots and report to the pull request."""

    def __init__(
        self,
        config: PipelineConfig,
        *,
        runner: CommandRunner | None = None,
        test_lab: TestLabClient | None = None,
        storage: StorageSync | None = None,
        annotator: ImageAnnotator | None = None,
        analysis_service: AnalysisService | None = None,
        github_client_factory: GitHubClientFactory | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.config = config
        runner = runner or CommandRunner()
        self.test_lab = test_lab or TestLabClient(runner)
        self.storage = storage or StorageSync(runner)
        self.annotator = annotator or ImageAnnotator(runner)
        self.analysis_service = analysis_service or AnalysisService(annotator=self.annotator)
        self.github_client_factory = github_client_factory or _default_github_client
        self.clock = clock

    # ------------------------------------------------------------------
    def run(self) -> PipelineResult:
        config = self.config
        config.validate()

        bucket = config.resolved_results_bucket
        results_dir = self.clock().strftime(RESULTS_DIR_FORMAT)
        result = PipelineResult(results_bucket=bucket, results_dir=results_dir)
        download_dir = config.download_dir
        download_dir.mkdir(parents=True, exist_ok=True)

        self.test_lab.activate_service_account(config.gcloud_service_key_file)
        self.test_lab.run_robo_test(
            project_id=config.project_id,
            app_apk=config.app_apk,
            devices=config.devices,
            timeout=config.timeout,
            results_bucket=bucket,
            results_dir=results_dir,
            extra_options=config.extra_test_lab_options,
            console_log=download_dir / CONSOLE_LOG_NAME,
        )

        logger.info("Fetching screenshots and accessibility snapshots from the results bucket")
        for device in config.devices:
            self.storage.download(
                self._remote_dir(bucket, results_dir, device),
                download_dir / device.name,
            )

        logger.info("Running accessibility checks")
        for device in config.devices:
            result.analyses[device.name] = self._analyze_device(download_dir / device.name)

        logger.info("Uploading annotated screenshots and check results")
        for device in config.devices:
            self.storage.upload(
                download_dir / device.name,
                self._remote_dir(bucket, results_dir, device),
            )

        result.entries = collect_entries(
            download_dir,
            config.devices,
            results_bucket=bucket,
            results_dir=results_dir,
        )
        result.comment = self.notify(result.entries)
        result.comment_posted = result.comment is not None
        return result

    def notify(self, entries: Sequence[ReportEntry]) -> Optional[str]:
        """Post the result comment, returning its body, or ``None`` without a PR number."""

        config = self.config
        if config.github_pr_number is None:
            logger.info("No pull request number configured, skipping GitHub comment")
            return None

        comment = format_comment(entries, enable_warning=config.enable_warning)
        logger.info("Comment body:\n%s", comment)

        client = self.github_client_factory(config)
        if config.fold_previous_comments:
            client.fold_comments(config.github_pr_number, COMMENT_HEADER, FOLDED_SUMMARY)
        client.post_comment(config.github_pr_number, comment)
        return comment

    # ------------------------------------------------------------------
    def _analyze_device(self, device_dir: Path) -> AnalysisResult:
        analysis = self.analysis_service.analyze(
            device_dir,
            lang=self.config.lang,
            min_touch_target_size=self.config.min_touch_target_size,
        )
        if not analysis.succeeded:
            names = ", ".join(sorted(path.name for path in analysis.failures))
            raise AnalysisError(f"Failed to decode snapshot(s) in {device_dir}: {names}")

        self.annotator.scale(find_result_images(device_dir))
        return analysis

    @staticmethod
    def _remote_dir(bucket: str, results_dir: str, device: DeviceSpec) -> str:
        return gcs_uri(bucket, results_dir, device.name, "artifacts")


__all__ = [
    "AnalysisError",
    "CONSOLE_LOG_NAME",
    "LabPipeline",
    "PipelineResult",
    "collect_entries",
    "find_result_images",
]
