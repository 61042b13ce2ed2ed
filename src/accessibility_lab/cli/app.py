"""Command-line interface implementation for the accessibility lab tooling."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence

from ..adapters import CommandError, DecodeError, GitHubError
from ..checks import CheckExecutionError
from ..config import ConfigError, DeviceSpec, load_config
from ..messages import MessageBundle, MessageBundleError
from ..pipeline import AnalysisError, LabPipeline, collect_entries
from ..reporting import format_comment
from ..service import AnalysisService, TargetNotFoundError

logger = logging.getLogger(__name__)


def _device_argument(value: str) -> Dict[str, str]:
    """Parse ``model=X,version=Y[,locale=Z][,orientation=W]``."""

    device: Dict[str, str] = {}
    for part in value.split(","):
        if "=" not in part:
            raise argparse.ArgumentTypeError(
                f"Device properties must be in KEY=VALUE form: {part}"
            )
        key, raw = part.split("=", 1)
        device[key.strip()] = raw.strip()
    return device


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected a whole number of dp: {value}") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError(f"Expected a positive number of dp: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI argument parser."""

    parser = argparse.ArgumentParser(
        prog="accessibility-lab",
        description="Accessibility checks for Firebase Test Lab Robo snapshots",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and errors.",
    )
    subparsers = parser.add_subparsers(dest="command")

    analyze_parser = subparsers.add_parser(
        "analyze", help="Run accessibility checks on a directory of snapshots."
    )
    analyze_parser.add_argument(
        "--target",
        required=True,
        help="Directory containing accessibility<N>.meta snapshots and <N>.png screenshots.",
    )
    _add_check_arguments(analyze_parser)

    run_parser = subparsers.add_parser(
        "run", help="Run Robo tests on Test Lab, analyze the results and comment on the PR."
    )
    run_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with pipeline settings. Environment variables and flags override it.",
    )
    run_parser.add_argument("--project-id", default=None, help="Google Cloud project id.")
    run_parser.add_argument(
        "--service-key-file",
        dest="gcloud_service_key_file",
        default=None,
        help="Service account key file used to authenticate gcloud.",
    )
    run_parser.add_argument("--app-apk", default=None, help="APK to test.")
    run_parser.add_argument(
        "--device",
        dest="devices",
        action="append",
        type=_device_argument,
        default=None,
        metavar="model=X,version=Y",
        help="Device to test on. Repeat for several devices.",
    )
    run_parser.add_argument(
        "--download-dir",
        default=None,
        help="Local directory receiving the Test Lab artifacts.",
    )
    run_parser.add_argument("--timeout", default=None, help="Test Lab timeout, e.g. 5m.")
    run_parser.add_argument(
        "--results-bucket",
        default=None,
        help="Results bucket. Defaults to <project-id>_test_results.",
    )
    run_parser.add_argument(
        "--extra-test-lab-options",
        default=None,
        help="Additional options appended to `gcloud firebase test android run`.",
    )
    run_parser.add_argument("--github-owner", default=None)
    run_parser.add_argument("--github-repository", default=None)
    run_parser.add_argument("--github-pr-number", default=None)
    run_parser.add_argument("--github-api-token", default=None)
    run_parser.add_argument(
        "--fold-previous-comments",
        action="store_true",
        default=None,
        help="Collapse earlier result comments on the pull request.",
    )
    _add_warning_argument(run_parser)
    _add_check_arguments(run_parser)

    report_parser = subparsers.add_parser(
        "report", help="Print the pull request comment for already analyzed artifacts."
    )
    report_parser.add_argument(
        "download_dir",
        type=Path,
        help="Directory holding one artifacts directory per device.",
    )
    report_parser.add_argument(
        "--device",
        dest="devices",
        action="append",
        type=_device_argument,
        required=True,
        metavar="model=X,version=Y",
        help="Device whose results are included. Repeat for several devices.",
    )
    report_parser.add_argument("--results-bucket", required=True)
    report_parser.add_argument(
        "--results-dir",
        required=True,
        help="Results directory name inside the bucket.",
    )
    _add_warning_argument(report_parser)

    return parser


def _add_check_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--lang",
        default=None,
        help="Locale of the result messages, e.g. en or ja.",
    )
    parser.add_argument(
        "--min-touch-target-size",
        type=_positive_int,
        default=None,
        help="Minimum touch target size in dp. Defaults to 48.",
    )


def _add_warning_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--disable-warning",
        dest="enable_warning",
        action="store_false",
        default=None,
        help="Leave warnings out of the comment.",
    )


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if verbose:
        logging.getLogger("accessibility_lab").setLevel(logging.DEBUG)
    elif quiet:
        logging.getLogger("accessibility_lab").setLevel(logging.WARNING)
    else:
        logging.getLogger("accessibility_lab").setLevel(logging.INFO)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def create_service(*, extra_message_files: Sequence[Path] | None = None) -> AnalysisService:
    """Create an analysis service with the bundled checks and messages."""

    bundle = MessageBundle.load(extra_message_files)
    return AnalysisService(bundle=bundle)


def _handle_analyze(args: argparse.Namespace) -> int:
    try:
        service = create_service()
        result = service.analyze(
            args.target,
            lang=args.lang,
            min_touch_target_size=args.min_touch_target_size,
        )
    except (TargetNotFoundError, CheckExecutionError, MessageBundleError, CommandError) as exc:
        print(f"Error: {exc}")
        return 2

    if not result.succeeded:
        for path, reason in result.failures.items():
            print(f"Error: {path.name}: {reason}")
        return 2

    return 0


def _run_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    names = (
        "project_id",
        "gcloud_service_key_file",
        "app_apk",
        "devices",
        "download_dir",
        "timeout",
        "results_bucket",
        "extra_test_lab_options",
        "github_owner",
        "github_repository",
        "github_pr_number",
        "github_api_token",
        "fold_previous_comments",
        "enable_warning",
        "lang",
        "min_touch_target_size",
    )
    return {name: getattr(args, name) for name in names}


def _handle_run(args: argparse.Namespace) -> int:
    try:
        config = load_config(args.config, overrides=_run_overrides(args))
        result = LabPipeline(config).run()
    except (
        ConfigError,
        CommandError,
        GitHubError,
        AnalysisError,
        TargetNotFoundError,
        DecodeError,
        CheckExecutionError,
        MessageBundleError,
    ) as exc:
        print(f"Error: {exc}")
        return 2

    if result.comment is not None:
        print(result.comment)
    return 0


def _handle_report(args: argparse.Namespace) -> int:
    try:
        devices: List[DeviceSpec] = [DeviceSpec.from_mapping(raw) for raw in args.devices]
        entries = collect_entries(
            args.download_dir,
            devices,
            results_bucket=args.results_bucket,
            results_dir=args.results_dir,
        )
    except (ConfigError, DecodeError) as exc:
        print(f"Error: {exc}")
        return 2

    enable_warning = True if args.enable_warning is None else args.enable_warning
    print(format_comment(entries, enable_warning=enable_warning))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point used by tests and the ``python -m`` invocation."""

    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    if args.command == "analyze":
        return _handle_analyze(args)
    if args.command == "run":
        return _handle_run(args)
    if args.command == "report":
        return _handle_report(args)

    parser.print_help()
    return 0


def run() -> None:  # pragma: no cover - thin wrapper for module execution
    """Execute the CLI and exit with the produced status code."""

    raise SystemExit(main())


if __name__ == "__main__":  # pragma: no cover - module execution guard
    run()
