"""Exception classes for the kakebo budget engine."""


class KakeboError(Exception):
    """Base exception for kakebo."""
    pass


class InvalidMonthError(KakeboError, ValueError):
    """A month string that is not a valid YYYY-MM value."""
    pass


class ValidationError(KakeboError):
    """A record or goal rejected at the mutation boundary."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.details = details or {}


class RecordNotFoundError(KakeboError, KeyError):
    """Update or delete of a record id the store does not hold."""
    pass


class ConfigError(KakeboError):
    """Configuration-related errors."""
    pass
