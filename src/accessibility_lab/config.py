"""Pipeline configuration loaded from YAML files, environment variables and CLI flags."""

from __future__ import annotations

import argparse
import logging
import os
import re
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, MutableMapping, Optional, Sequence

import yaml

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en_US"
DEFAULT_ORIENTATION = "portrait"
DEFAULT_TIMEOUT = "5m"

# Environment variable names understood by the pipeline, keyed by config field.
ENV_VARS: Mapping[str, str] = {
    "project_id": "PROJECT_ID",
    "gcloud_service_key_file": "GCLOUD_SERVICE_KEY_FILE",
    "devices": "DEVICES",
    "app_apk": "APP_APK",
    "test_params": "TEST_PARAMS",
    "timeout": "TIMEOUT",
    "results_bucket": "FIREBASE_TEST_LAB_RESULTS_BUCKET",
    "extra_test_lab_options": "EXTRA_TEST_LAB_OPTIONS",
    "download_dir": "DOWNLOAD_DIR",
    "github_owner": "GITHUB_OWNER",
    "github_repository": "GITHUB_REPOSITORY",
    "github_pr_number": "GITHUB_PR_NUMBER",
    "github_api_token": "GITHUB_API_TOKEN",
    "enable_warning": "ENABLE_WARNING",
}

REQUIRED_FIELDS = (
    "project_id",
    "gcloud_service_key_file",
    "app_apk",
    "download_dir",
    "github_owner",
    "github_repository",
    "github_api_token",
)

_TIMEOUT_PATTERN = re.compile(r"^[0-9]+[smh]?$")
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ConfigError(ValueError):
    """Raised when the pipeline configuration is missing or invalid."""


@dataclass(frozen=True, slots=True)
class DeviceSpec:
    """One entry of the Test Lab device matrix."""

    model: str
    version: str
    locale: str = DEFAULT_LOCALE
    orientation: str = DEFAULT_ORIENTATION

    @property
    def name(self) -> str:
        """Directory name Test Lab uses for this device's artifacts."""

        return f"{self.model}-{self.version}-{self.locale}-{self.orientation}"

    def as_gcloud_argument(self) -> str:
        return (
            f"model={self.model},version={self.version},"
            f"locale={self.locale},orientation={self.orientation}"
        )

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "DeviceSpec":
        if not isinstance(raw, Mapping):
            raise ConfigError(f"Each device must be a mapping, got: {raw!r}")

        for required in ("model", "version"):
            value = raw.get(required)
            if value is None or not str(value).strip():
                raise ConfigError(f"Each device must have {required} property")

        return cls(
            model=str(raw["model"]).strip(),
            version=str(raw["version"]).strip(),
            locale=str(raw.get("locale") or DEFAULT_LOCALE).strip(),
            orientation=str(raw.get("orientation") or DEFAULT_ORIENTATION).strip(),
        )


@dataclass(slots=True)
class PipelineConfig:
    """Everything the lab pipeline needs to run end to end."""

    project_id: str
    gcloud_service_key_file: Path
    devices: List[DeviceSpec]
    app_apk: Path
    download_dir: Path
    github_owner: str
    github_repository: str
    github_api_token: str
    github_pr_number: Optional[str] = None
    timeout: str = DEFAULT_TIMEOUT
    results_bucket: Optional[str] = None
    extra_test_lab_options: List[str] = field(default_factory=list)
    lang: Optional[str] = None
    min_touch_target_size: Optional[int] = None
    enable_warning: bool = True
    fold_previous_comments: bool = False

    @property
    def resolved_results_bucket(self) -> str:
        return self.results_bucket or f"{self.project_id}_test_results"

    def validate(self) -> None:
        """Check invariants that must hold before any remote call is made."""

        if not self.devices:
            raise ConfigError("Devices have to be at least one")

        seen: Dict[str, DeviceSpec] = {}
        for device in self.devices:
            if device.name in seen:
                raise ConfigError(f"Device {device.name} is listed more than once")
            seen[device.name] = device

        if not _TIMEOUT_PATTERN.match(self.timeout):
            raise ConfigError(f"Invalid timeout '{self.timeout}', expected e.g. '5m' or '300s'")

        if self.min_touch_target_size is not None and self.min_touch_target_size <= 0:
            raise ConfigError("min_touch_target_size must be a positive number of dp")


def load_config(
    config_path: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> PipelineConfig:
    """Merge the config file, environment and explicit overrides into a config."""

    values: MutableMapping[str, Any] = {}
    if config_path is not None:
        values.update(_load_file(config_path))

    environment = os.environ if env is None else env
    for key, env_name in ENV_VARS.items():
        raw = environment.get(env_name)
        if raw is not None and raw != "":
            values[key] = raw

    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    config = _build_config(values)
    config.validate()
    logger.debug(
        "Loaded pipeline config for project %s with %d device(s)",
        config.project_id,
        len(config.devices),
    )
    return config


def parse_test_params(raw: str | Sequence[str] | None) -> Dict[str, Any]:
    """Parse analyzer flags such as ``--lang=ja --min-touch-target-size=40``."""

    if not raw:
        return {}

    args = shlex.split(raw) if isinstance(raw, str) else list(raw)
    parser = argparse.ArgumentParser(add_help=False, exit_on_error=False)
    parser.add_argument("--lang", default=None)
    parser.add_argument("--min-touch-target-size", type=int, default=None)
    try:
        parsed, unknown = parser.parse_known_args(args)
    except argparse.ArgumentError as exc:
        raise ConfigError(f"Invalid test params '{raw}': {exc}") from exc

    if unknown:
        raise ConfigError(f"Unsupported test params: {' '.join(unknown)}")

    result: Dict[str, Any] = {}
    if parsed.lang:
        result["lang"] = parsed.lang
    if parsed.min_touch_target_size is not None:
        result["min_touch_target_size"] = parsed.min_touch_target_size
    return result


# ----------------------------------------------------------------------------
def _load_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in config file {path}") from exc

    if not isinstance(data, Mapping):
        raise ConfigError(f"Config file must contain a mapping: {path}")

    return dict(data)


def _build_config(values: Mapping[str, Any]) -> PipelineConfig:
    missing = [name for name in REQUIRED_FIELDS if not values.get(name)]
    if missing:
        hints = ", ".join(f"{name} ({ENV_VARS[name]})" for name in missing)
        raise ConfigError(f"Missing required configuration: {hints}")

    params = parse_test_params(values.get("test_params"))

    lang = values.get("lang", params.get("lang"))
    min_touch_target_size = values.get(
        "min_touch_target_size", params.get("min_touch_target_size")
    )

    pr_number = values.get("github_pr_number")

    return PipelineConfig(
        project_id=str(values["project_id"]),
        gcloud_service_key_file=Path(str(values["gcloud_service_key_file"])).expanduser(),
        devices=_parse_devices(values.get("devices")),
        app_apk=Path(str(values["app_apk"])).expanduser(),
        download_dir=Path(str(values["download_dir"])).expanduser(),
        github_owner=str(values["github_owner"]),
        github_repository=str(values["github_repository"]),
        github_api_token=str(values["github_api_token"]),
        github_pr_number=str(pr_number) if pr_number not in (None, "") else None,
        timeout=str(values.get("timeout") or DEFAULT_TIMEOUT),
        results_bucket=values.get("results_bucket") or None,
        extra_test_lab_options=_parse_extra_options(values.get("extra_test_lab_options")),
        lang=str(lang) if lang else None,
        min_touch_target_size=_coerce_int(min_touch_target_size, "min_touch_target_size"),
        enable_warning=_coerce_bool(values.get("enable_warning", True), "enable_warning"),
        fold_previous_comments=_coerce_bool(
            values.get("fold_previous_comments", False), "fold_previous_comments"
        ),
    )


def _parse_devices(raw: Any) -> List[DeviceSpec]:
    if raw is None:
        return []

    if isinstance(raw, str):
        try:
            raw = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ConfigError("DEVICES must be a YAML or JSON list of devices") from exc

    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigError("Devices must be a list of mappings")

    return [DeviceSpec.from_mapping(item) for item in raw]


def _parse_extra_options(raw: Any) -> List[str]:
    if not raw:
        return []
    if isinstance(raw, str):
        return shlex.split(raw)
    if isinstance(raw, (list, tuple)):
        return [str(item) for item in raw]
    raise ConfigError("extra_test_lab_options must be a string or a list")


def _coerce_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got '{value}'")


def _coerce_int(value: Any, name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer, got '{value}'") from exc


__all__ = [
    "ConfigError",
    "DEFAULT_LOCALE",
    "DEFAULT_ORIENTATION",
    "DEFAULT_TIMEOUT",
    "DeviceSpec",
    "ENV_VARS",
    "PipelineConfig",
    "load_config",
    "parse_test_params",
]
