"""Profile domain models.

Contains the consent ledger and the Profile aggregate root.
"""

from collections.abc import Iterator
from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, JsonValue, RootModel

from consentry.profile.commands import ConsentCommand, RevokeConsent, as_command
from consentry.profile.consent import ConsentRecord

ITEM_TYPE = "profile"
SYSTEM_SCOPE = "systemscope"
ANONYMOUS_PROFILE_KEY = "isAnonymousProfile"


def new_profile_id() -> str:
    """Generate a profile identifier."""
    return str(uuid4())


class ConsentLedger(RootModel[dict[str, ConsentRecord]]):
    """Current consent decision per consent type.

    Holds at most one record per type identifier, in insertion order; a
    replaced record keeps its position.
    A missing entry means no decision was recorded, which is not the
    same as a stored denial.
    """

    root: dict[str, ConsentRecord] = Field(default_factory=dict)

    def apply(self, command: ConsentCommand) -> bool:
        """Apply a consent command.

        Grant and deny commands replace whatever was stored for the type
        and return True; the stored record always carries the command's
        disposition. A revoke removes the stored record and returns
        True, or returns False when there was nothing to revoke. Dates
        are not checked here.
        """
        if isinstance(command, RevokeConsent):
            return self.root.pop(command.type_identifier, None) is not None
        record = command.record.model_copy(update={"grant": command.disposition})
        self.root[record.type_identifier] = record
        return True

    def get(self, type_identifier: str) -> ConsentRecord | None:
        return self.root.get(type_identifier)

    def records(self) -> list[ConsentRecord]:
        return list(self.root.values())

    def valid_at(self, test_time: datetime) -> list[str]:
        """Type identifiers whose consent holds at the given time."""
        return [
            type_identifier
            for type_identifier, record in self.root.items()
            if record.is_valid_at(test_time)
        ]

    def __contains__(self, type_identifier: object) -> bool:
        return type_identifier in self.root

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)


class Profile(BaseModel):
    """A customer profile.

    Owns its consent ledger and attribute bags. ``merged_with`` only
    records that this profile was absorbed into another one; moving the
    data is left to the merge executor, and nothing here stops further
    changes to a merged profile.
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    id: str = Field(
        default_factory=new_profile_id,
        frozen=True,
        description="Profile identifier",
    )
    properties: dict[str, JsonValue] = Field(
        default_factory=dict, description="User-visible attributes"
    )
    system_properties: dict[str, JsonValue] = Field(
        default_factory=dict, description="Internal attributes"
    )
    segments: set[str] = Field(
        default_factory=set, description="Segment memberships"
    )
    scores: dict[str, int] | None = Field(
        default=None, description="Scoring results, None until computed"
    )
    merged_with: str | None = Field(
        default=None, description="Profile this one was merged into"
    )
    consents: ConsentLedger = Field(
        default_factory=ConsentLedger, description="Consent decisions"
    )
    version: int = Field(default=0, ge=0, description="Store write counter")

    @property
    def item_type(self) -> str:
        return ITEM_TYPE

    def get_scope(self) -> str:
        """Profiles always live in the shared system scope."""
        return SYSTEM_SCOPE

    def set_property(self, name: str, value: JsonValue) -> None:
        self.properties[name] = value

    def get_property(self, name: str) -> JsonValue:
        """Return the property value, or None when it is not set."""
        return self.properties.get(name)

    def set_consent(self, consent: ConsentCommand | ConsentRecord) -> bool:
        """Apply a consent command to this profile's ledger.

        A bare record is applied as the grant or deny command it implies.
        Returns the ledger's result; False only for a revoke with
        nothing to remove.
        """
        if isinstance(consent, ConsentRecord):
            consent = as_command(consent)
        return self.consents.apply(consent)

    def get_consent(self, type_identifier: str) -> ConsentRecord | None:
        return self.consents.get(type_identifier)

    def is_anonymous_profile(self) -> bool:
        """True only when the isAnonymousProfile system property is boolean True."""
        return self.system_properties.get(ANONYMOUS_PROFILE_KEY) is True
