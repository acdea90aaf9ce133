"""
storefront-seed - Synthetic e-commerce dataset generation

Populates categories, products, customers, addresses, orders, order items and
reviews with internally consistent rows, streaming them to storage in
bounded batches.
"""

from storefront_seed.backends import DirectBackend, StagingBackend
from storefront_seed.config import SeedConfig
from storefront_seed.orchestrator import (
    SeedOrchestrator,
    SeedResult,
    SeedStage,
    SeedState,
    seed_database,
)
from storefront_seed.providers import FieldProvider
from storefront_seed.uniqueness import UniqueValues, generate_unique
from storefront_seed.writer import BatchWriter

__version__ = "0.1.0"

__all__ = [
    "BatchWriter",
    "DirectBackend",
    "FieldProvider",
    "SeedConfig",
    "SeedOrchestrator",
    "SeedResult",
    "SeedStage",
    "SeedState",
    "StagingBackend",
    "UniqueValues",
    "generate_unique",
    "seed_database",
]
