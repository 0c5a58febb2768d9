"""Exception types shared across precache."""


class PrecacheError(Exception):
    """Base exception for precache errors."""

    pass


class UsageConflictError(PrecacheError):
    """Raised when command-line flags contradict each other."""

    pass


class SchemaError(PrecacheError):
    """Raised when the umbrella flag table is internally inconsistent."""

    pass


class SettingsError(PrecacheError):
    """Raised when the settings file cannot be parsed."""

    pass


class CacheUpdateError(PrecacheError):
    """Raised when the artifact cache could not be brought up to date."""

    pass


class LockTimeoutError(PrecacheError):
    """Raised when the cache lock could not be acquired in time."""

    pass
