"""Tests for profile domain models."""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from consentry.exceptions import InvalidStateError
from consentry.profile import (
    SYSTEM_SCOPE,
    ConsentLedger,
    ConsentRecord,
    DenyConsent,
    Disposition,
    GrantConsent,
    Profile,
    RevokeConsent,
    command_from_map,
)


def _grant(type_identifier: str, grant_date: datetime, revoke_date: datetime | None = None) -> GrantConsent:
    return GrantConsent(
        record=ConsentRecord(
            type_identifier=type_identifier,
            grant=Disposition.GRANT,
            grant_date=grant_date,
            revoke_date=revoke_date,
        )
    )


def _deny(type_identifier: str) -> DenyConsent:
    return DenyConsent(
        record=ConsentRecord(type_identifier=type_identifier, grant=Disposition.DENY)
    )


class TestConsentLedger:
    """Tests for ConsentLedger.apply."""

    def test_starts_empty(self) -> None:
        """Should hold no decisions by default."""
        ledger = ConsentLedger()
        assert len(ledger) == 0
        assert ledger.get("newsletter") is None
        assert "newsletter" not in ledger

    def test_grant_inserts(self, t0) -> None:
        """Should store a granted consent and report success."""
        ledger = ConsentLedger()
        assert ledger.apply(_grant("newsletter", t0)) is True
        assert "newsletter" in ledger
        assert ledger.get("newsletter").grant is Disposition.GRANT

    def test_deny_is_stored(self) -> None:
        """Should store a denial as an explicit decision."""
        ledger = ConsentLedger()
        assert ledger.apply(_deny("newsletter")) is True
        assert ledger.get("newsletter").grant is Disposition.DENY

    def test_replace_discards_previous_record(self, t0, t1) -> None:
        """Should replace the stored record without merging old fields."""
        ledger = ConsentLedger()
        ledger.apply(_grant("newsletter", t0, revoke_date=t1))
        assert ledger.apply(_deny("newsletter")) is True

        record = ledger.get("newsletter")
        assert len(ledger) == 1
        assert record.grant is Disposition.DENY
        assert record.grant_date is None
        assert record.revoke_date is None

    def test_replace_keeps_position(self, t0) -> None:
        """Should keep a replaced type at its original position."""
        ledger = ConsentLedger()
        ledger.apply(_grant("newsletter", t0))
        ledger.apply(_grant("analytics", t0))
        ledger.apply(_deny("newsletter"))
        assert list(ledger) == ["newsletter", "analytics"]

    def test_revoke_present(self, t0) -> None:
        """Should remove the record and report success."""
        ledger = ConsentLedger()
        ledger.apply(_grant("newsletter", t0))
        assert ledger.apply(RevokeConsent(type_identifier="newsletter")) is True
        assert "newsletter" not in ledger
        assert len(ledger) == 0

    def test_revoke_absent_is_noop(self, t0) -> None:
        """Should report False and leave the ledger untouched."""
        ledger = ConsentLedger()
        ledger.apply(_grant("analytics", t0))
        before = ledger.model_copy(deep=True)

        assert ledger.apply(RevokeConsent(type_identifier="newsletter")) is False
        assert ledger == before
        assert len(ledger) == 1

    def test_revoke_removes_denial(self) -> None:
        """Should remove an explicit denial too."""
        ledger = ConsentLedger()
        ledger.apply(_deny("newsletter"))
        assert ledger.apply(RevokeConsent(type_identifier="newsletter")) is True
        assert ledger.get("newsletter") is None

    def test_no_temporal_checks_on_apply(self, t0) -> None:
        """Should accept future grants and already expired consents."""
        ledger = ConsentLedger()
        future = datetime.now(UTC) + timedelta(days=365)
        assert ledger.apply(_grant("future", future)) is True
        assert ledger.apply(_grant("expired", t0, revoke_date=t0 + timedelta(days=1))) is True
        assert len(ledger) == 2

    def test_stores_a_copy(self, t0) -> None:
        """Should not share the stored record with the caller."""
        ledger = ConsentLedger()
        command = _grant("newsletter", t0)
        ledger.apply(command)
        command.record.revoke_date = t0 + timedelta(days=1)
        assert ledger.get("newsletter").revoke_date is None

    def test_grant_command_always_stores_grant(self, t0) -> None:
        """Should store the command's disposition even if its record was altered."""
        record = ConsentRecord(
            type_identifier="newsletter", grant=Disposition.GRANT, grant_date=t0
        )
        command = GrantConsent(record=record)
        record.grant = Disposition.DENY
        command.record.grant = Disposition.DENY

        profile = Profile()
        assert profile.set_consent(command) is True
        assert profile.get_consent("newsletter").grant is Disposition.GRANT

    def test_valid_at(self, t0, t1) -> None:
        """Should list the types whose consent holds at a time."""
        ledger = ConsentLedger()
        ledger.apply(_grant("newsletter", t0))
        ledger.apply(_grant("analytics", t0, revoke_date=t1))
        ledger.apply(_deny("profiling"))

        assert ledger.valid_at(t1 + timedelta(days=1)) == ["newsletter"]
        assert ledger.valid_at(t0 + timedelta(days=1)) == ["newsletter", "analytics"]

    def test_valid_at_propagates_missing_grant_date(self, t0) -> None:
        """Should surface a grant that cannot be evaluated."""
        ledger = ConsentLedger()
        ledger.apply(
            GrantConsent(
                record=ConsentRecord(type_identifier="newsletter", grant=Disposition.GRANT)
            )
        )
        with pytest.raises(InvalidStateError):
            ledger.valid_at(t0)


class TestNewsletterScenario:
    """End-to-end grant and revoke of a newsletter consent."""

    def test_grant_then_revoke_twice(self, date_format) -> None:
        """Should follow the ABSENT -> GRANTED -> ABSENT lifecycle."""
        profile = Profile()
        granted = profile.set_consent(
            command_from_map(
                {"typeIdentifier": "newsletter", "grant": "GRANT", "grantDate": "2020-01-01"},
                date_format,
            )
        )
        assert granted is True
        assert len(profile.consents) == 1

        record = profile.get_consent("newsletter")
        assert record.is_valid_at(date_format.parse("2020-06-01")) is True
        assert record.is_valid_at(date_format.parse("2019-01-01")) is False

        revoke = command_from_map({"typeIdentifier": "newsletter", "grant": "REVOKE"}, date_format)
        assert profile.set_consent(revoke) is True
        assert len(profile.consents) == 0
        assert profile.set_consent(revoke) is False


class TestProfile:
    """Tests for Profile model."""

    def test_zero_value_profile(self) -> None:
        """Should initialize collections and leave optional fields unset."""
        profile = Profile()
        assert profile.id
        assert profile.properties == {}
        assert profile.system_properties == {}
        assert profile.segments == set()
        assert profile.scores is None
        assert profile.merged_with is None
        assert len(profile.consents) == 0
        assert profile.version == 0

    def test_generated_ids_are_unique(self) -> None:
        """Should generate a distinct id per profile."""
        assert Profile().id != Profile().id

    def test_explicit_id(self) -> None:
        """Should keep an explicit identifier."""
        assert Profile(id="visitor-1").id == "visitor-1"

    def test_id_is_immutable(self) -> None:
        """Should reject reassigning the identifier."""
        profile = Profile(id="visitor-1")
        with pytest.raises(ValidationError):
            profile.id = "visitor-2"

    def test_properties_pass_through(self) -> None:
        """Should store and return property values as given."""
        profile = Profile()
        profile.set_property("firstName", "Ada")
        profile.set_property("age", 36)
        profile.set_property("tags", ["a", "b"])
        assert profile.get_property("firstName") == "Ada"
        assert profile.get_property("age") == 36
        assert profile.get_property("tags") == ["a", "b"]
        assert profile.get_property("missing") is None

    def test_scope_is_system_wide(self) -> None:
        """Should always report the shared system scope."""
        assert Profile().get_scope() == SYSTEM_SCOPE == "systemscope"
        assert Profile().item_type == "profile"

    def test_scores_distinguish_empty_from_unset(self) -> None:
        """Should keep an empty score map distinct from None."""
        profile = Profile()
        profile.scores = {}
        assert profile.scores == {}
        assert profile.scores is not None

    def test_segments_replaced_wholesale(self) -> None:
        """Should accept a replacement segment set."""
        profile = Profile()
        profile.segments = {"vip", "returning"}
        assert profile.segments == {"vip", "returning"}

    def test_set_consent_accepts_records(self, t0) -> None:
        """Should apply a bare record as the command it implies."""
        profile = Profile()
        record = ConsentRecord(
            type_identifier="newsletter", grant=Disposition.GRANT, grant_date=t0
        )
        assert profile.set_consent(record) is True
        assert profile.get_consent("newsletter") == record

    def test_merged_profile_still_accepts_changes(self, t0) -> None:
        """Should leave guarding merged profiles to callers."""
        profile = Profile(merged_with="survivor")
        assert profile.set_consent(_grant("newsletter", t0)) is True
        profile.set_property("city", "Paris")
        assert profile.merged_with == "survivor"

    def test_not_shared_between_profiles(self, t0) -> None:
        """Should give each profile its own ledger and bags."""
        first, second = Profile(), Profile()
        first.set_consent(_grant("newsletter", t0))
        first.set_property("city", "Paris")
        assert len(second.consents) == 0
        assert second.get_property("city") is None


class TestAnonymousProfile:
    """Tests for is_anonymous_profile."""

    def test_fresh_profile_is_not_anonymous(self) -> None:
        """Should be False without the system property."""
        assert Profile().is_anonymous_profile() is False

    def test_true_flag(self) -> None:
        """Should be True only for boolean True."""
        profile = Profile(system_properties={"isAnonymousProfile": True})
        assert profile.is_anonymous_profile() is True

    @pytest.mark.parametrize("value", [False, "true", 1, None, ["true"], {"value": True}])
    def test_other_values(self, value) -> None:
        """Should treat any other value as not anonymous."""
        profile = Profile(system_properties={"isAnonymousProfile": value})
        assert profile.is_anonymous_profile() is False

    def test_recomputed_each_call(self) -> None:
        """Should reflect later changes to the system property."""
        profile = Profile()
        profile.system_properties["isAnonymousProfile"] = True
        assert profile.is_anonymous_profile() is True
        profile.system_properties["isAnonymousProfile"] = False
        assert profile.is_anonymous_profile() is False
