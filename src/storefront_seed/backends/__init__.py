"""Backend implementations for seed data storage."""

from storefront_seed.backends.base import StorageBackend
from storefront_seed.backends.direct import DirectBackend
from storefront_seed.backends.staging import StagingBackend

__all__ = ["StorageBackend", "DirectBackend", "StagingBackend"]
