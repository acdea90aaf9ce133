"""Base generator interface."""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Any

from storefront_seed.models import Entity
from storefront_seed.providers import FieldProvider
from storefront_seed.uniqueness import MAX_UNIQUE_RETRIES


class EntityGenerator(ABC):
    """
    Base class for entity generators.

    A generator turns a row count and the foreign-key pools it needs into a
    lazy sequence of fully-populated entities. Nothing is materialized: the
    caller streams the iterator into a ``BatchWriter``.

    Example:
        >>> gen = ProductGenerator(FieldProvider(seed=1))
        >>> products = gen.generate(100, category_ids=[1, 2, 3])
        >>> next(products).sku
        'SKU-...'
    """

    #: Table the generated entities belong to
    table: str

    def __init__(self, fields: FieldProvider, max_unique_retries: int = MAX_UNIQUE_RETRIES):
        """
        Args:
            fields: Random field provider shared by the whole seed run
            max_unique_retries: Retry budget for unique fields
        """
        self.fields = fields
        self.max_unique_retries = max_unique_retries

    @abstractmethod
    def generate(self, *args: Any, **kwargs: Any) -> Iterator[Entity]:
        """Yield generated entities."""

    @staticmethod
    def _check_count(count: int) -> None:
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
