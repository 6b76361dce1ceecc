from __future__ import annotations


class CookieError(Exception):
    """Base class for editor errors."""


class ConfigError(CookieError):
    """Configuration or syntax file could not be read or decoded."""


class PromptCanceled(CookieError):
    """The user pressed ESC in a status-bar prompt."""


class QuitEditor(CookieError):
    """Raised by the quit command once the confirmation protocol is satisfied."""
