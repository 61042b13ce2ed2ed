"""Markdown rendering of accessibility results for pull request comments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .models import ResultType

COMMENT_HEADER = "## Accessibility Test Result"
FOLDED_SUMMARY = "Open past accessibility test result"
TABLE_HEADER = "|Screenshot|message|Screenshot|message|\n|-|-|-|-|"


@dataclass(frozen=True, slots=True)
class ReportEntry:
    """One reported result as shown in the comment."""

    title: str
    message: str
    image_url: str
    result_type: ResultType
    device: str = ""


def _cell_text(value: str) -> str:
    return value.replace("|", "\\|").replace("\r", "").replace("\n", "<br/>")


def _cells(entry: ReportEntry | None) -> List[str]:
    if entry is None:
        return ["", ""]
    image = f'<img src="{entry.image_url}" loading="lazy">' if entry.image_url else ""
    text = f"**{_cell_text(entry.title)}**<br/>{_cell_text(entry.message)}"
    return [image, text]


def format_rows(entries: Sequence[ReportEntry]) -> str:
    """Lay entries out two per table row."""

    rows: List[str] = []
    for start in range(0, len(entries), 2):
        first = entries[start]
        second = entries[start + 1] if start + 1 < len(entries) else None
        rows.append("|" + "|".join(_cells(first) + _cells(second)) + "|")
    return "\n".join(rows)


def format_summary_line(error_count: int, warning_count: int) -> str:
    if error_count == 0:
        return f"### :white_check_mark: All test passed (with {warning_count} warnings)"
    return f"### :x: {error_count} error found. (with {warning_count} warnings)"


def format_comment(entries: Iterable[ReportEntry], *, enable_warning: bool = True) -> str:
    """Render the PR comment body for the supplied entries."""

    collected = list(entries)
    errors = [entry for entry in collected if entry.result_type == ResultType.ERROR]
    warnings = [entry for entry in collected if entry.result_type == ResultType.WARNING]

    lines: List[str] = [COMMENT_HEADER, format_summary_line(len(errors), len(warnings))]

    if errors:
        lines.extend(["", TABLE_HEADER, format_rows(errors)])

    if enable_warning and warnings:
        lines.extend(
            [
                "",
                "<details>",
                f"<summary>{len(warnings)} warnings. Click here to see details.</summary>",
                "",
                TABLE_HEADER,
                format_rows(warnings),
                "",
                "</details>",
            ]
        )

    lines.append("")
    return "\n".join(lines)


__all__ = [
    "COMMENT_HEADER",
    "FOLDED_SUMMARY",
    "ReportEntry",
    "format_comment",
    "format_rows",
    "format_summary_line",
]
