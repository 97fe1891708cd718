"""Exception hierarchy for consistent error handling.

All domain exceptions inherit from ConsentryError, which carries a
human-readable message. Subclasses add the context a caller needs to
act on the failure.
"""


class ConsentryError(Exception):
    """Base exception for all Consentry errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class FormatError(ConsentryError):
    """Raised when external input cannot be turned into a consent.

    Covers unknown grant names, missing required keys and date strings
    the date format cannot parse. ``field`` names the offending wire key
    when there is one.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class InvalidStateError(ConsentryError):
    """Raised when a granted consent without a grant date is evaluated."""


class ProfileNotFoundError(ConsentryError):
    """Raised when a store operation targets an unknown profile."""

    def __init__(self, profile_id: str) -> None:
        super().__init__(f"Profile not found: {profile_id}")
        self.profile_id = profile_id
