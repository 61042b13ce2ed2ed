from __future__ import annotations

import pytest

from accessibility_lab.messages import MessageBundle, MessageBundleError
from accessibility_lab.models import CheckId, CheckResult, ResultType


@pytest.fixture(scope="module")
def bundle() -> MessageBundle:
    return MessageBundle.load()


def _touch_target_result() -> CheckResult:
    return CheckResult(
        check_id=CheckId.TOUCH_TARGET_SIZE,
        result_id=1,
        result_type=ResultType.ERROR,
        metadata={"width": 20, "height": 20, "required": 48, "customized": False},
    )


def test_bundled_locales_cover_every_check(bundle):
    assert {"en", "ja"} <= set(bundle.locales)
    for check_id in CheckId:
        assert bundle.title(check_id, "en") != check_id.value
        assert bundle.title(check_id, "ja") != check_id.value


def test_message_is_formatted_with_result_metadata(bundle):
    message = bundle.message(_touch_target_result(), "en")

    assert "20dp x 20dp" in message
    assert "48dp" in message


@pytest.mark.parametrize(
    ("lang", "expected"),
    [
        (None, "en"),
        ("ja", "ja"),
        ("ja-JP", "ja"),
        ("JA_jp", "ja"),
        ("xx", "en"),
        ("", "en"),
    ],
)
def test_resolve_locale_falls_back_to_default(bundle, lang, expected):
    assert bundle.resolve_locale(lang) == expected


def test_extra_files_override_bundled_messages(tmp_path):
    override = tmp_path / "team.yaml"
    override.write_text(
        "locale: en\n"
        "checks:\n"
        "  TouchTargetSizeCheck:\n"
        "    title: Tap area\n"
        "    messages:\n"
        "      1: 'Too small: {width}x{height}'\n",
        encoding="utf-8",
    )

    bundle = MessageBundle.load([override])

    assert bundle.title(CheckId.TOUCH_TARGET_SIZE, "en") == "Tap area"
    assert bundle.message(_touch_target_result(), "en") == "Too small: 20x20"
    # untouched entries survive the merge
    assert bundle.title(CheckId.CLASS_NAME, "en") == "Item type label"


def test_missing_translation_falls_back_to_default_locale(tmp_path):
    partial = tmp_path / "de.yaml"
    partial.write_text(
        "locale: de\nchecks:\n  ClassNameCheck:\n    title: Elementtyp\n",
        encoding="utf-8",
    )
    bundle = MessageBundle.load([partial])
    result = CheckResult(CheckId.CLASS_NAME, 1, ResultType.WARNING)

    assert bundle.resolve_locale("de_DE") == "de"
    assert bundle.title(CheckId.CLASS_NAME, "de") == "Elementtyp"
    assert bundle.message(result, "de") == bundle.message(result, "en")


def test_template_with_unknown_placeholder_is_returned_raw(tmp_path):
    broken = tmp_path / "broken.yaml"
    broken.write_text(
        "locale: en\nchecks:\n  ClassNameCheck:\n    messages:\n      1: 'Missing {role}'\n",
        encoding="utf-8",
    )
    bundle = MessageBundle.load([broken])

    message = bundle.message(CheckResult(CheckId.CLASS_NAME, 1, ResultType.WARNING), "en")

    assert message == "Missing {role}"


def test_unknown_result_id_has_generic_message(bundle):
    result = CheckResult(CheckId.CLASS_NAME, 42, ResultType.WARNING)

    assert bundle.message(result, "en") == "ClassNameCheck reported result 42."


def test_bundle_file_without_locale_is_rejected(tmp_path):
    invalid = tmp_path / "invalid.yaml"
    invalid.write_text("checks: {}\n", encoding="utf-8")

    with pytest.raises(MessageBundleError, match="does not declare a locale"):
        MessageBundle.load([invalid])
