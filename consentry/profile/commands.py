"""Consent commands accepted by the consent ledger.

Granting and denying store a record; revoking removes whatever record
is held for a consent type. Keeping revoke as a command of its own
means a stored record can only ever be granted or denied.
"""

from collections.abc import Mapping
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from consentry.profile.consent import (
    GRANT_KEY,
    TYPE_IDENTIFIER_KEY,
    ConsentRecord,
    read_grant,
    read_type_identifier,
)
from consentry.profile.dates import DateFormat
from consentry.profile.enums import ConsentGrant, Disposition


class _RecordCommand(BaseModel):
    """Command that stores a record in the ledger.

    The command keeps its own copy of the record, so later changes to the
    record it was built from do not reach the ledger.
    """

    model_config = ConfigDict(frozen=True)

    disposition: ClassVar[Disposition]
    action: ClassVar[str]

    record: ConsentRecord = Field(..., description="Record to store")

    @field_validator("record")
    @classmethod
    def _own_record(cls, value: ConsentRecord) -> ConsentRecord:
        return value.model_copy()

    @model_validator(mode="after")
    def _check_disposition(self) -> "_RecordCommand":
        if self.record.grant is not self.disposition:
            raise ValueError(
                f"{type(self).__name__} needs a {self.disposition.value} record, "
                f"got {self.record.grant.value}"
            )
        return self

    @property
    def type_identifier(self) -> str:
        return self.record.type_identifier

    def to_map(self, date_format: DateFormat) -> dict[str, Any]:
        return self.record.to_map(date_format)


class GrantConsent(_RecordCommand):
    """Store a granted consent, replacing any previous decision."""

    disposition = Disposition.GRANT
    action = "grant"


class DenyConsent(_RecordCommand):
    """Store a denied consent, replacing any previous decision."""

    disposition = Disposition.DENY
    action = "deny"


class RevokeConsent(BaseModel):
    """Remove the decision held for a consent type, if any."""

    model_config = ConfigDict(frozen=True)

    action: ClassVar[str] = "revoke"

    type_identifier: str = Field(..., description="Consent type to remove")

    def to_map(self, date_format: DateFormat) -> dict[str, Any]:  # noqa: ARG002
        return {
            TYPE_IDENTIFIER_KEY: self.type_identifier,
            GRANT_KEY: ConsentGrant.REVOKE.value,
        }


ConsentCommand = GrantConsent | DenyConsent | RevokeConsent


def as_command(record: ConsentRecord) -> GrantConsent | DenyConsent:
    """Wrap a stored record in the command that stores it."""
    if record.grant is Disposition.GRANT:
        return GrantConsent(record=record)
    return DenyConsent(record=record)


def command_from_map(
    data: Mapping[str, Any], date_format: DateFormat
) -> ConsentCommand:
    """Turn a wire consent map into the matching command.

    A REVOKE map only needs its typeIdentifier; dates are ignored.

    Raises:
        FormatError: If the map is malformed
    """
    if read_grant(data) is ConsentGrant.REVOKE:
        return RevokeConsent(type_identifier=read_type_identifier(data))
    return as_command(ConsentRecord.from_map(data, date_format))
