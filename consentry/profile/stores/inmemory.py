"""In-memory implementation of ProfileStore."""

import asyncio
from datetime import datetime

from consentry.exceptions import InvalidStateError, ProfileNotFoundError
from consentry.observability.logging import get_logger
from consentry.observability.metrics import CONSENT_COMMANDS
from consentry.profile.commands import ConsentCommand
from consentry.profile.consent import utc_now
from consentry.profile.models import Profile
from consentry.profile.store import ProfileStore

logger = get_logger(__name__)


class InMemoryProfileStore(ProfileStore):
    """In-memory implementation of ProfileStore for testing and development.

    Each profile has its own lock, so one mutation per profile is in
    flight at a time. Mutations work on a copy that replaces the stored
    profile once complete, and reads return copies.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._profiles: dict[str, Profile] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    async def get(self, profile_id: str) -> Profile | None:
        """Get a snapshot of a profile."""
        profile = self._profiles.get(profile_id)
        if profile is None:
            return None
        return profile.model_copy(deep=True)

    async def save(self, profile: Profile) -> str:
        """Save a copy of a profile, replacing any stored version.

        The stored copy gets the next version; the caller's object is left
        as it is.
        """
        async with self._locks.setdefault(profile.id, asyncio.Lock()):
            current = self._profiles.get(profile.id)
            stored = profile.model_copy(deep=True)
            stored.version = current.version + 1 if current else 1
            self._profiles[profile.id] = stored
        return profile.id

    async def delete(self, profile_id: str) -> bool:
        """Delete a profile."""
        if profile_id not in self._profiles:
            return False
        async with self._lock_for(profile_id):
            removed = self._profiles.pop(profile_id, None) is not None
        self._locks.pop(profile_id, None)
        return removed

    async def apply_consent(self, profile_id: str, command: ConsentCommand) -> bool:
        """Apply a consent command to a stored profile."""
        async with self._lock_for(profile_id):
            current = self._require(profile_id)
            working = current.model_copy(deep=True)
            applied = working.set_consent(command)
            if applied:
                working.version = current.version + 1
                self._profiles[profile_id] = working

        outcome = "applied" if applied else "noop"
        CONSENT_COMMANDS.labels(action=command.action, outcome=outcome).inc()
        if current.merged_with is not None:
            logger.warning(
                "consent_applied_to_merged_profile",
                profile_id=profile_id,
                merged_with=current.merged_with,
                type_identifier=command.type_identifier,
            )
        logger.info(
            "consent_applied" if applied else "consent_revoke_noop",
            profile_id=profile_id,
            type_identifier=command.type_identifier,
            action=command.action,
        )
        return applied

    async def mark_merged(self, profile_id: str, target_profile_id: str) -> Profile:
        """Record that a profile was merged into another one."""
        async with self._lock_for(profile_id):
            current = self._require(profile_id)
            working = current.model_copy(deep=True)
            working.merged_with = target_profile_id
            working.version = current.version + 1
            self._profiles[profile_id] = working

        logger.info(
            "profile_marked_merged",
            profile_id=profile_id,
            merged_with=target_profile_id,
            target_exists=target_profile_id in self._profiles,
        )
        return working.model_copy(deep=True)

    async def find_by_consent(
        self, type_identifier: str, at: datetime | None = None
    ) -> list[Profile]:
        """Find profiles holding a valid consent of a type at a time (default now)."""
        at = at or utc_now()
        matches: list[Profile] = []
        for profile in list(self._profiles.values()):
            record = profile.get_consent(type_identifier)
            if record is None:
                continue
            try:
                valid = record.is_valid_at(at)
            except InvalidStateError:
                logger.warning(
                    "consent_missing_grant_date",
                    profile_id=profile.id,
                    type_identifier=type_identifier,
                )
                continue
            if valid:
                matches.append(profile.model_copy(deep=True))
        return matches

    def _require(self, profile_id: str) -> Profile:
        profile = self._profiles.get(profile_id)
        if profile is None:
            raise ProfileNotFoundError(profile_id)
        return profile

    def _lock_for(self, profile_id: str) -> asyncio.Lock:
        """Lock of an existing profile; unknown ids never get one."""
        self._require(profile_id)
        return self._locks.setdefault(profile_id, asyncio.Lock())
