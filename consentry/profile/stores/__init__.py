"""Profile stores for customer profiles."""

from consentry.profile.store import ProfileStore
from consentry.profile.stores.inmemory import InMemoryProfileStore

__all__ = [
    "ProfileStore",
    "InMemoryProfileStore",
]
