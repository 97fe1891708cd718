"""Configuration section models."""

from consentry.config.models.consent import ConsentConfig, DateFormatConfig
from consentry.config.models.observability import LoggingConfig, ObservabilityConfig
from consentry.config.models.storage import StorageConfig, StoreBackendConfig

__all__ = [
    "ConsentConfig",
    "DateFormatConfig",
    "LoggingConfig",
    "ObservabilityConfig",
    "StorageConfig",
    "StoreBackendConfig",
]
