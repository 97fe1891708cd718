"""ProfileStore abstract interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from consentry.profile.commands import ConsentCommand
from consentry.profile.models import Profile


class ProfileStore(ABC):
    """Abstract interface for customer profile storage.

    Implementations serialize mutations per profile and hand out
    snapshots, so a reader never sees a ledger or attribute bag halfway
    through a change.
    """

    @abstractmethod
    async def get(self, profile_id: str) -> Profile | None:
        """Get a snapshot of a profile."""
        pass

    @abstractmethod
    async def save(self, profile: Profile) -> str:
        """Save a copy of a profile, replacing any stored version.

        The stored copy carries the next version number; the profile
        passed in is not modified.
        """
        pass

    @abstractmethod
    async def delete(self, profile_id: str) -> bool:
        """Delete a profile."""
        pass

    @abstractmethod
    async def apply_consent(self, profile_id: str, command: ConsentCommand) -> bool:
        """Apply a consent command to a stored profile.

        Raises:
            ProfileNotFoundError: If the profile does not exist
        """
        pass

    @abstractmethod
    async def mark_merged(self, profile_id: str, target_profile_id: str) -> Profile:
        """Record that a profile was merged into another one.

        Raises:
            ProfileNotFoundError: If the merged profile does not exist
        """
        pass

    @abstractmethod
    async def find_by_consent(
        self, type_identifier: str, at: datetime | None = None
    ) -> list[Profile]:
        """Find profiles holding a valid consent of a type at a time (default now)."""
        pass
