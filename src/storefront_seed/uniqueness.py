"""Uniqueness helpers for fields that must not repeat within a seed run."""

import re
import threading
from collections.abc import Callable, Collection
from typing import TypeVar

from storefront_seed.exceptions import UniqueValueExhaustedError

T = TypeVar("T")

# Maximum attempts to generate a unique value
MAX_UNIQUE_RETRIES = 10

_SLUG_DROP = re.compile(r"[^a-z0-9\s-]")
_SLUG_SPACES = re.compile(r"[\s-]+")


def generate_unique(
    provider: Callable[[], T],
    existing: Collection[T],
    max_attempts: int = MAX_UNIQUE_RETRIES,
    field: str = "value",
) -> T:
    """
    Draw values from ``provider`` until one is not in ``existing``.

    ``existing`` is only read, never modified.

    Args:
        provider: Zero-argument callable producing candidate values
        existing: Values already used in this run
        max_attempts: Number of draws before giving up
        field: Field name reported in the error

    Returns:
        A value not present in ``existing``

    Raises:
        UniqueValueExhaustedError: If every draw collided
    """
    for _ in range(max_attempts):
        value = provider()
        if value not in existing:
            return value
    raise UniqueValueExhaustedError(field, max_attempts)


def slugify(name: str) -> str:
    """Lower-case ``name``, spell out ``&`` and join words with hyphens."""
    slug = name.lower().replace("&", " and ")
    slug = _SLUG_DROP.sub("", slug)
    return _SLUG_SPACES.sub("-", slug).strip("-")


class UniqueValues:
    """
    Thread-safe set of values already emitted for one unique field.

    Example:
        >>> skus = UniqueValues("sku")
        >>> sku = skus.claim(lambda: f"SKU-{fields.alphanumeric(8)}")
    """

    def __init__(self, field: str, max_attempts: int = MAX_UNIQUE_RETRIES):
        self.field = field
        self.max_attempts = max_attempts
        self._values: set = set()
        self._lock = threading.Lock()

    def __contains__(self, value) -> bool:
        with self._lock:
            return value in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def add(self, value) -> None:
        """Mark a value as used (e.g. one already present in storage)."""
        with self._lock:
            self._values.add(value)

    def claim(self, provider: Callable[[], T]) -> T:
        """
        Draw a value with bounded retry and record it as used.

        Raises:
            UniqueValueExhaustedError: If the retry budget is exhausted
        """
        with self._lock:
            value = generate_unique(provider, self._values, self.max_attempts, self.field)
            self._values.add(value)
            return value

    def claim_slug(self, base: str) -> str:
        """
        Record ``base`` or, if taken, the first free ``base-2``, ``base-3``...

        Disambiguation is deterministic and always succeeds.
        """
        with self._lock:
            candidate = base
            suffix = 2
            while candidate in self._values:
                candidate = f"{base}-{suffix}"
                suffix += 1
            self._values.add(candidate)
            return candidate
