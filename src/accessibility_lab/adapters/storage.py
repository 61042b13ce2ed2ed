"""Cloud Storage synchronisation through ``gsutil``."""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import quote

from .commands import CommandRunner

logger = logging.getLogger(__name__)

OBJECT_URL_TEMPLATE = "https://storage.cloud.google.com/{bucket}/{prefix}/{path}?authuser=1"


def gcs_uri(bucket: str, *parts: str) -> str:
    path = "/".join(part.strip("/") for part in parts if part)
    return f"gs://{bucket}/{path}" if path else f"gs://{bucket}"


def object_url(bucket: str, prefix: str, path: str) -> str:
    """Browser URL for an object, used to inline screenshots in PR comments."""

    return OBJECT_URL_TEMPLATE.format(bucket=bucket, prefix=quote(prefix, safe=""), path=path)


class StorageSync:
    """Mirror directories between the local disk and a results bucket."""

    def __init__(self, runner: CommandRunner | None = None, *, gsutil_bin: str = "gsutil") -> None:
        self.runner = runner or CommandRunner()
        self.gsutil_bin = gsutil_bin

    def rsync(self, source: str, destination: str) -> None:
        """Recursive rsync that deletes destination files missing from the source."""

        self.runner.run([self.gsutil_bin, "-m", "rsync", "-d", "-r", source, destination])

    def download(self, remote: str, local_dir: Path) -> None:
        local_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Downloading %s to %s", remote, local_dir)
        self.rsync(remote, str(local_dir))

    def upload(self, local_dir: Path, remote: str) -> None:
        local_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Uploading %s to %s", local_dir, remote)
        self.rsync(str(local_dir), remote)


__all__ = ["OBJECT_URL_TEMPLATE", "StorageSync", "gcs_uri", "object_url"]
