"""Checks concerned with what a screen reader announces."""

from __future__ import annotations

import re
from typing import Dict, List
from urllib.parse import urlparse

from ..models import (
    AccessibilityHierarchy,
    CheckId,
    CheckResult,
    ResultType,
    SpanType,
    ViewElement,
)
from .base import AccessibilityCheck, CheckConfig

# Role words that TalkBack already announces for the element's type.
REDUNDANT_WORDS = ("button", "checkbox", "checked", "unchecked", "selected", "image")

_WORD_PATTERN = re.compile(r"\w+", re.UNICODE)


def has_speakable_text(hierarchy: AccessibilityHierarchy, view: ViewElement) -> bool:
    """Return ``True`` if ``view`` or a label/non-actionable descendant provides text."""

    if view.speakable_text():
        return True

    if view.labeled_by_id is not None:
        label = hierarchy.view_by_condensed_id(view.labeled_by_id)
        if label is not None and label.speakable_text():
            return True

    for child in hierarchy.children_of(view):
        if child.is_actionable or not child.is_visible:
            continue
        if has_speakable_text(hierarchy, child):
            return True
    return False


class SpeakableTextPresentCheck(AccessibilityCheck):
    """Actionable elements must expose something for a screen reader to say."""

    check_id = CheckId.SPEAKABLE_TEXT_PRESENT

    RESULT_NOT_VISIBLE = 1
    RESULT_MISSING_SPEAKABLE_TEXT = 2

    def evaluate(self, hierarchy: AccessibilityHierarchy, config: CheckConfig) -> List[CheckResult]:
        results: List[CheckResult] = []
        for view in hierarchy.iter_views():
            if not (view.important_for_accessibility and view.is_actionable):
                continue
            if not view.is_visible:
                results.append(self.result(self.RESULT_NOT_VISIBLE, ResultType.NOT_RUN, view))
                continue
            if not has_speakable_text(hierarchy, view):
                results.append(
                    self.result(self.RESULT_MISSING_SPEAKABLE_TEXT, ResultType.ERROR, view)
                )
        return results


class EditableContentDescCheck(AccessibilityCheck):
    """Editable fields should be labelled, not described."""

    check_id = CheckId.EDITABLE_CONTENT_DESC

    RESULT_EDITABLE_WITH_CONTENT_DESC = 1

    def evaluate(self, hierarchy: AccessibilityHierarchy, config: CheckConfig) -> List[CheckResult]:
        results: List[CheckResult] = []
        for view in hierarchy.iter_views():
            if not (view.is_visible and view.is_editable):
                continue
            description = view.content_description
            if description is not None and not description.is_blank:
                results.append(
                    self.result(
                        self.RESULT_EDITABLE_WITH_CONTENT_DESC,
                        ResultType.ERROR,
                        view,
                        content_description=description.text.strip(),
                    )
                )
        return results


class DuplicateSpeakableTextCheck(AccessibilityCheck):
    check_id = CheckId.DUPLICATE_SPEAKABLE_TEXT

    RESULT_CLICKABLE_DUPLICATES = 1
    RESULT_DUPLICATES = 2

    def evaluate(self, hierarchy: AccessibilityHierarchy, config: CheckConfig) -> List[CheckResult]:
        groups: Dict[str, List[ViewElement]] = {}
        for view in hierarchy.iter_views():
            if not (view.is_visible and view.important_for_accessibility):
                continue
            text = view.speakable_text()
            if text:
                groups.setdefault(text, []).append(view)

        results: List[CheckResult] = []
        for text, views in groups.items():
            if len(views) < 2:
                continue
            clickable = [view for view in views if view.clickable or view.long_clickable]
            if len(clickable) >= 2:
                results.append(
                    self.result(
                        self.RESULT_CLICKABLE_DUPLICATES,
                        ResultType.WARNING,
                        clickable[0],
                        speakable_text=text,
                        count=len(views) - 1,
                    )
                )
            else:
                results.append(
                    self.result(
                        self.RESULT_DUPLICATES,
                        ResultType.INFO,
                        views[0],
                        speakable_text=text,
                        count=len(views) - 1,
                    )
                )
        return results


class ClickableSpanCheck(AccessibilityCheck):
    """Inline links are hard to reach with accessibility services."""

    check_id = CheckId.CLICKABLE_SPAN

    RESULT_CLICKABLE_SPAN = 1
    RESULT_RELATIVE_URL = 2

    def evaluate(self, hierarchy: AccessibilityHierarchy, config: CheckConfig) -> List[CheckResult]:
        results: List[CheckResult] = []
        for view in hierarchy.iter_views():
            if not view.is_visible or view.text is None:
                continue
            for span in view.text.spans:
                if span.type == SpanType.URL:
                    if not urlparse(span.url or "").scheme:
                        results.append(
                            self.result(
                                self.RESULT_RELATIVE_URL,
                                ResultType.ERROR,
                                view,
                                url=span.url or "",
                            )
                        )
                        break
                elif span.type == SpanType.CLICKABLE:
                    results.append(
                        self.result(self.RESULT_CLICKABLE_SPAN, ResultType.WARNING, view)
                    )
                    break
        return results


class RedundantDescriptionCheck(AccessibilityCheck):
    check_id = CheckId.REDUNDANT_DESCRIPTION

    RESULT_REDUNDANT_WORD = 1

    def evaluate(self, hierarchy: AccessibilityHierarchy, config: CheckConfig) -> List[CheckResult]:
        results: List[CheckResult] = []
        for view in hierarchy.iter_views():
            if not (view.is_visible and view.important_for_accessibility):
                continue
            description = view.content_description
            if description is None or description.is_blank:
                continue

            words = {word.lower() for word in _WORD_PATTERN.findall(description.text)}
            for word in REDUNDANT_WORDS:
                if word in words:
                    results.append(
                        self.result(
                            self.RESULT_REDUNDANT_WORD,
                            ResultType.WARNING,
                            view,
                            content_description=description.text.strip(),
                            redundant_word=word,
                        )
                    )
                    break
        return results
