"""Domain errors — custom exceptions for filer settings.

Absorbed failures (missing files, unknown tokens, malformed scalars) never
raise; these exceptions are reserved for programming errors at the edges.
"""


class FilerSettingsError(Exception):
    """Base exception for all filer settings errors."""


class SettingsCodecError(FilerSettingsError, TypeError):
    """Raised when a value outside an enum's declared variants is encoded."""


class ProfileNameError(FilerSettingsError, ValueError):
    """Raised when a profile name is not a single path component."""


class ReadOnlySettingError(FilerSettingsError, AttributeError):
    """Raised when a store-published field is assigned on the settings tree."""
