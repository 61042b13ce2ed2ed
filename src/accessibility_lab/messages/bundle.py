"""Localized titles and messages for check results, loaded from YAML bundles."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Mapping, MutableMapping, Sequence

import yaml

from ..models import CheckId, CheckResult

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"


class MessageBundleError(RuntimeError):
    """Raised when message bundle files cannot be loaded or parsed."""


@dataclass(slots=True)
class CheckMessages:
    """Title plus per-result-id message templates of one check in one locale."""

    title: str | None = None
    messages: Dict[int, str] = field(default_factory=dict)


def _bundled_locale_files() -> List[Path]:
    locale_dir = resources.files("accessibility_lab.messages") / "locales"
    return sorted(
        Path(str(entry)) for entry in locale_dir.iterdir() if entry.name.endswith(".yaml")
    )


class MessageBundle:
    """Resolve human-readable titles and messages for check results.

    Each bundle file declares a ``locale`` and a ``checks`` mapping. Files are
    merged in order, so later files override earlier entries for the same
    locale and check.
    """

    def __init__(
        self,
        catalogs: Mapping[str, Mapping[CheckId, CheckMessages]],
        *,
        default_locale: str = DEFAULT_LOCALE,
    ) -> None:
        if default_locale not in catalogs:
            raise MessageBundleError(f"Default locale '{default_locale}' has no messages")
        self._catalogs = {locale: dict(checks) for locale, checks in catalogs.items()}
        self.default_locale = default_locale

    # ------------------------------------------------------------------
    @classmethod
    def load(
        cls,
        extra_files: Sequence[Path | str] | None = None,
        *,
        default_locale: str = DEFAULT_LOCALE,
    ) -> "MessageBundle":
        """Load the bundled locales, then merge ``extra_files`` over them."""

        paths = _bundled_locale_files()
        if extra_files:
            paths.extend(Path(path) for path in extra_files)

        catalogs: MutableMapping[str, Dict[CheckId, CheckMessages]] = {}
        for path in paths:
            locale, entries = _load_file(path)
            catalog = catalogs.setdefault(locale, {})
            for check_id, messages in entries.items():
                existing = catalog.setdefault(check_id, CheckMessages())
                if messages.title:
                    existing.title = messages.title
                existing.messages.update(messages.messages)

        return cls(catalogs, default_locale=default_locale)

    @property
    def locales(self) -> List[str]:
        return sorted(self._catalogs)

    def resolve_locale(self, lang: str | None) -> str:
        """Return the bundled locale matching ``lang``, or the default locale."""

        if not lang:
            return self.default_locale

        normalized = lang.strip().replace("-", "_").lower()
        if normalized in self._catalogs:
            return normalized

        language = normalized.split("_", 1)[0]
        if language in self._catalogs:
            return language

        logger.debug("No messages for locale '%s', using '%s'", lang, self.default_locale)
        return self.default_locale

    def title(self, check_id: CheckId, locale: str) -> str:
        for candidate in self._lookup_order(locale):
            messages = self._catalogs[candidate].get(check_id)
            if messages is not None and messages.title:
                return messages.title
        return check_id.value

    def message(self, result: CheckResult, locale: str) -> str:
        for candidate in self._lookup_order(locale):
            messages = self._catalogs[candidate].get(result.check_id)
            if messages is None or result.result_id not in messages.messages:
                continue
            return _format(messages.messages[result.result_id], result)
        return f"{result.check_id.value} reported result {result.result_id}."

    # ------------------------------------------------------------------
    def _lookup_order(self, locale: str) -> List[str]:
        order = [locale] if locale in self._catalogs else []
        if self.default_locale not in order:
            order.append(self.default_locale)
        return order


def _format(template: str, result: CheckResult) -> str:
    try:
        return template.format(**result.metadata)
    except (KeyError, IndexError, ValueError):
        logger.warning(
            "Message template for %s/%d does not match result metadata %s",
            result.check_id.value,
            result.result_id,
            sorted(result.metadata),
        )
        return template


def _load_file(path: Path) -> tuple[str, Dict[CheckId, CheckMessages]]:
    if not path.exists():
        raise MessageBundleError(f"Message bundle not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except OSError as exc:  # pragma: no cover - filesystem errors surfaced to caller
        raise MessageBundleError(f"Failed to read message bundle {path}") from exc
    except yaml.YAMLError as exc:
        raise MessageBundleError(f"Invalid YAML in message bundle {path}") from exc

    if not isinstance(data, Mapping):
        raise MessageBundleError(f"Message bundle must be a mapping: {path}")

    locale = data.get("locale")
    if not isinstance(locale, str) or not locale.strip():
        raise MessageBundleError(f"Message bundle {path} does not declare a locale")

    entries: Dict[CheckId, CheckMessages] = {}
    for check_name, config in (data.get("checks") or {}).items():
        try:
            check_id = CheckId(check_name)
        except ValueError:
            logger.warning("Ignoring messages for unknown check '%s' in %s", check_name, path)
            continue
        if not isinstance(config, Mapping):
            continue

        messages = CheckMessages(title=_optional_str(config.get("title")))
        raw_messages: Any = config.get("messages") or {}
        if isinstance(raw_messages, Mapping):
            for result_id, template in raw_messages.items():
                try:
                    messages.messages[int(result_id)] = str(template).strip()
                except (TypeError, ValueError):
                    continue
        entries[check_id] = messages

    return locale.strip().replace("-", "_").lower(), entries


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
