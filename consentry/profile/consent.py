"""Consent records and their temporal validity.

A ConsentRecord stores one decision (grant or deny) for one consent
type, bounded by an optional grant date and revoke date. Validity is
never stored; readers evaluate it against "now" or an audit timestamp.
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from consentry.exceptions import FormatError, InvalidStateError
from consentry.observability.logging import get_logger
from consentry.observability.metrics import FORMAT_ERRORS
from consentry.profile.dates import DateFormat, ensure_utc
from consentry.profile.enums import ConsentGrant, Disposition

logger = get_logger(__name__)

TYPE_IDENTIFIER_KEY = "typeIdentifier"
GRANT_KEY = "grant"
GRANT_DATE_KEY = "grantDate"
REVOKE_DATE_KEY = "revokeDate"


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


def _reject(message: str, field: str) -> FormatError:
    FORMAT_ERRORS.labels(field=field).inc()
    logger.warning("consent_map_rejected", field=field, reason=message)
    return FormatError(message, field=field)


def read_type_identifier(data: Mapping[str, Any]) -> str:
    """Read the required type identifier from a consent map."""
    value = data.get(TYPE_IDENTIFIER_KEY)
    if value is None:
        raise _reject("Consent map has no typeIdentifier", TYPE_IDENTIFIER_KEY)
    if not isinstance(value, str):
        raise _reject(
            f"typeIdentifier must be a string, got {type(value).__name__}",
            TYPE_IDENTIFIER_KEY,
        )
    return value


def read_grant(data: Mapping[str, Any]) -> ConsentGrant:
    """Read the required grant name; it must match exactly."""
    value = data.get(GRANT_KEY)
    if value is None:
        raise _reject("Consent map has no grant", GRANT_KEY)
    if isinstance(value, ConsentGrant):
        return value
    if isinstance(value, str):
        try:
            return ConsentGrant[value]
        except KeyError:
            pass
    names = ", ".join(grant.name for grant in ConsentGrant)
    raise _reject(f"Unknown grant {value!r}, expected one of {names}", GRANT_KEY)


def read_date(
    data: Mapping[str, Any], key: str, date_format: DateFormat
) -> datetime | None:
    """Read an optional date; missing, None and blank strings are absent."""
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str) and not value.strip():
        return None
    try:
        return date_format.parse(value)
    except FormatError as exc:
        raise _reject(f"Invalid {key}: {exc.message}", key) from exc


class ConsentRecord(BaseModel):
    """One stored consent decision for a consent type.

    Naive datetimes are read as UTC so that comparisons never mix naive
    and aware values.
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    type_identifier: str = Field(
        ..., description="Externally defined consent type, e.g. newsletter"
    )
    grant: Disposition = Field(..., description="Stored decision")
    grant_date: datetime | None = Field(
        default=None, description="Moment from which the consent applies"
    )
    revoke_date: datetime | None = Field(
        default=None, description="Moment after which it no longer applies"
    )

    @field_validator("grant_date", "revoke_date")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value) if value is not None else None

    def is_valid_at(self, test_time: datetime) -> bool:
        """Whether this consent holds at the given time.

        A denied consent is never valid. A granted one is valid strictly
        after its grant date and strictly before its revoke date, when
        it has one.

        Raises:
            InvalidStateError: If the consent is granted but has no grant date
        """
        if self.grant is not Disposition.GRANT:
            return False
        if self.grant_date is None:
            raise InvalidStateError(
                f"Consent {self.type_identifier!r} is granted without a grant date"
            )
        test_time = ensure_utc(test_time)
        if not self.grant_date < test_time:
            return False
        return self.revoke_date is None or self.revoke_date > test_time

    def is_valid_now(self) -> bool:
        """Whether this consent holds at the current time."""
        return self.is_valid_at(utc_now())

    @classmethod
    def from_map(
        cls, data: Mapping[str, Any], date_format: DateFormat
    ) -> "ConsentRecord":
        """Build a record from its wire map.

        Raises:
            FormatError: If a required key is missing, the grant name is
                unknown or is REVOKE, or a date cannot be parsed
        """
        type_identifier = read_type_identifier(data)
        grant = read_grant(data)
        if grant is ConsentGrant.REVOKE:
            raise _reject(
                "REVOKE removes a consent and cannot be stored as a record",
                GRANT_KEY,
            )
        return cls(
            type_identifier=type_identifier,
            grant=Disposition(grant.value),
            grant_date=read_date(data, GRANT_DATE_KEY, date_format),
            revoke_date=read_date(data, REVOKE_DATE_KEY, date_format),
        )

    def to_map(self, date_format: DateFormat) -> dict[str, Any]:
        """Serialize to the wire map; dates are emitted only when present."""
        data: dict[str, Any] = {
            TYPE_IDENTIFIER_KEY: self.type_identifier,
            GRANT_KEY: self.grant.value,
        }
        if self.grant_date is not None:
            data[GRANT_DATE_KEY] = date_format.format(self.grant_date)
        if self.revoke_date is not None:
            data[REVOKE_DATE_KEY] = date_format.format(self.revoke_date)
        return data
