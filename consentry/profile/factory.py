"""Factories for profile collaborators.

Builds the profile store and the consent date format from settings.
"""

from consentry.config.models.consent import DateFormatConfig
from consentry.config.models.storage import StoreBackendConfig
from consentry.observability.logging import get_logger
from consentry.profile.dates import DateFormat, IsoDateFormat
from consentry.profile.store import ProfileStore
from consentry.profile.stores.inmemory import InMemoryProfileStore

logger = get_logger(__name__)


def create_profile_store(config: StoreBackendConfig) -> ProfileStore:
    """Create a ProfileStore instance based on configuration.

    Raises:
        ValueError: If backend type is not supported
    """
    if config.backend == "inmemory":
        logger.info("creating_profile_store", backend="inmemory")
        return InMemoryProfileStore()

    raise ValueError(f"Unsupported profile store backend: {config.backend}")


def create_date_format(config: DateFormatConfig) -> DateFormat:
    """Create the consent map date format.

    Raises:
        ValueError: If the format kind is not supported
    """
    if config.kind == "iso8601":
        return IsoDateFormat(timespec=config.timespec)

    raise ValueError(f"Unsupported date format: {config.kind}")
