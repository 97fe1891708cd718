"""Storage backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

BackendType = Literal["inmemory"]


class StoreBackendConfig(BaseModel):
    """Configuration for a single store backend."""

    backend: BackendType = Field(
        default="inmemory",
        description="Backend type",
    )


class StorageConfig(BaseModel):
    """Storage configuration for all stores."""

    profile: StoreBackendConfig = Field(
        default_factory=StoreBackendConfig,
        description="Profile store backend",
    )
