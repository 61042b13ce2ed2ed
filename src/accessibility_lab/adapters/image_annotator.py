"""ImageMagick-backed screenshot annotation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from ..models import Rect
from .commands import CommandError, CommandRunner

logger = logging.getLogger(__name__)

FRAME_MARGIN = 16
FRAME_STROKE_WIDTH = 8
FRAME_COLOR = "#FF0000"
REPORT_IMAGE_WIDTH = 320


class AnnotationError(CommandError):
    """Raised when ImageMagick fails to produce an annotated screenshot."""


class ImageAnnotator:
    """Draw highlight frames on screenshots with ImageMagick's ``convert``."""

    def __init__(
        self,
        runner: CommandRunner | None = None,
        *,
        convert_bin: str = "convert",
        mogrify_bin: str = "mogrify",
        margin: int = FRAME_MARGIN,
        stroke_width: int = FRAME_STROKE_WIDTH,
        color: str = FRAME_COLOR,
    ) -> None:
        self.runner = runner or CommandRunner()
        self.convert_bin = convert_bin
        self.mogrify_bin = mogrify_bin
        self.margin = margin
        self.stroke_width = stroke_width
        self.color = color

    def frame_for(self, bounds: Rect) -> Rect:
        return bounds.expanded(self.margin)

    def build_command(self, source: Path, destination: Path, bounds: Rect) -> List[str]:
        frame = self.frame_for(bounds)
        left, top, right, bottom = frame.left, frame.top, frame.right, frame.bottom
        return [
            self.convert_bin,
            str(source),
            "-fill",
            "none",
            "-strokewidth",
            str(self.stroke_width),
            "-stroke",
            self.color,
            "-draw",
            f"line {left},{top} {right},{top}",
            "-draw",
            f"line {left},{top} {left},{bottom}",
            "-draw",
            f"line {left},{bottom} {right},{bottom}",
            "-draw",
            f"line {right},{top} {right},{bottom}",
            str(destination),
        ]

    def annotate(self, source: Path, destination: Path, bounds: Rect) -> Path:
        """Write a copy of ``source`` with ``bounds`` framed to ``destination``."""

        try:
            self.runner.run(self.build_command(source, destination, bounds))
        except CommandError as exc:
            raise AnnotationError(
                f"Failed to annotate {source.name}: {exc}",
                returncode=exc.returncode,
                stderr=exc.stderr,
            ) from exc
        return destination

    def scale(self, images: Sequence[Path], *, width: int = REPORT_IMAGE_WIDTH) -> None:
        """Shrink report images in place so they fit a PR comment table."""

        if not images:
            logger.debug("No annotated screenshots to scale")
            return

        try:
            self.runner.run([self.mogrify_bin, "-scale", f"{width}x", *map(str, images)])
        except CommandError as exc:
            raise AnnotationError(
                f"Failed to scale annotated screenshots: {exc}",
                returncode=exc.returncode,
                stderr=exc.stderr,
            ) from exc


__all__ = [
    "AnnotationError",
    "FRAME_COLOR",
    "FRAME_MARGIN",
    "FRAME_STROKE_WIDTH",
    "ImageAnnotator",
    "REPORT_IMAGE_WIDTH",
]
