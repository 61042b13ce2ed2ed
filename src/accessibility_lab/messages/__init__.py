"""Localized message bundles for check results."""

from .bundle import DEFAULT_LOCALE, CheckMessages, MessageBundle, MessageBundleError

__all__ = [
    "CheckMessages",
    "DEFAULT_LOCALE",
    "MessageBundle",
    "MessageBundleError",
]
