"""Date format collaborators for consent maps.

Consent maps carry their dates as strings. Parsing and formatting is
delegated to a DateFormat so ingestion layers can plug in their own
representation; IsoDateFormat is the ISO-8601 default.
"""

from datetime import UTC, datetime
from typing import Literal, Protocol

from consentry.exceptions import FormatError

TimeSpec = Literal["auto", "seconds", "milliseconds", "microseconds"]


def ensure_utc(value: datetime) -> datetime:
    """Interpret a naive datetime as UTC, leave aware ones untouched."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class DateFormat(Protocol):
    """Converts between wire strings and timestamps."""

    def parse(self, text: str) -> datetime:
        """Parse a date string, raising FormatError when it is malformed."""
        ...

    def format(self, value: datetime) -> str:
        """Format a timestamp as a date string."""
        ...


class IsoDateFormat:
    """ISO-8601 date format.

    Accepts date-only values ("2020-01-01"), full date-times and a
    trailing "Z". Naive input is read as UTC. Output is always UTC with
    a "Z" suffix; with the default timespec every stored timestamp
    round-trips losslessly.
    """

    def __init__(self, timespec: TimeSpec = "auto") -> None:
        self.timespec = timespec

    def parse(self, text: str) -> datetime:
        if not isinstance(text, str):
            raise FormatError(f"Expected an ISO-8601 string, got {type(text).__name__}")
        try:
            value = datetime.fromisoformat(text.strip())
        except ValueError as exc:
            raise FormatError(f"Invalid ISO-8601 date: {text!r}") from exc
        return ensure_utc(value)

    def format(self, value: datetime) -> str:
        text = ensure_utc(value).astimezone(UTC).isoformat(timespec=self.timespec)
        return text.replace("+00:00", "Z")

    def __repr__(self) -> str:
        return f"IsoDateFormat(timespec={self.timespec!r})"
