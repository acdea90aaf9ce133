"""Foreign-key pools handed from one seed stage to the next.

Two strategies are available:

- ``ReadBackPools`` re-reads id projections from storage at each stage
  transition, so a stage's working set does not depend on the size of the
  stages before it. This is the default.
- ``CachedPools`` records the ids returned by every flush and serves pools
  from memory, trading memory for fewer round trips.
"""

from collections.abc import Sequence
from decimal import Decimal
from typing import Any, Protocol

from storefront_seed.backends.base import StorageBackend
from storefront_seed.models import Entity
from storefront_seed.writer import FlushCallback

# Columns recorded per table, after the id
PROJECTIONS: dict[str, tuple[str, ...]] = {
    "categories": ("parent_category_id",),
    "products": ("price", "is_active"),
    "customers": ("is_active",),
    "orders": (),
}


class IdPools(Protocol):
    def main_category_ids(self) -> list[int]: ...

    def category_ids(self) -> list[int]: ...

    def product_prices(self) -> list[tuple[int, Decimal]]: ...

    def product_ids(self, active_only: bool = False) -> list[int]: ...

    def customer_ids(self, active_only: bool = False) -> list[int]: ...

    def order_ids(self) -> list[int]: ...

    def recorder(self, table: str) -> FlushCallback | None: ...


class ReadBackPools:
    """Build every pool with a projection query against storage."""

    def __init__(self, backend: StorageBackend):
        self.backend = backend

    def _ids(self, table: str, where: dict[str, Any] | None = None) -> list[int]:
        return [row[0] for row in self.backend.fetch(table, ["id"], where)]

    def main_category_ids(self) -> list[int]:
        return self._ids("categories", {"parent_category_id": None})

    def category_ids(self) -> list[int]:
        return self._ids("categories")

    def product_prices(self) -> list[tuple[int, Decimal]]:
        return [(row[0], row[1]) for row in self.backend.fetch("products", ["id", "price"])]

    def product_ids(self, active_only: bool = False) -> list[int]:
        return self._ids("products", {"is_active": True} if active_only else None)

    def customer_ids(self, active_only: bool = False) -> list[int]:
        return self._ids("customers", {"is_active": True} if active_only else None)

    def order_ids(self) -> list[int]:
        return self._ids("orders")

    def recorder(self, table: str) -> FlushCallback | None:
        return None


class CachedPools:
    """Serve pools from ids captured while batches were flushed."""

    def __init__(self):
        self._rows: dict[str, list[tuple]] = {table: [] for table in PROJECTIONS}

    def recorder(self, table: str) -> FlushCallback | None:
        """Return the flush callback that records ``table`` projections."""
        if table not in PROJECTIONS:
            return None
        columns = PROJECTIONS[table]
        rows = self._rows[table]

        def record(entities: Sequence[Entity], ids: Sequence[int]) -> None:
            for entity, entity_id in zip(entities, ids, strict=True):
                rows.append((entity_id, *(getattr(entity, col) for col in columns)))

        return record

    def main_category_ids(self) -> list[int]:
        return [row[0] for row in self._rows["categories"] if row[1] is None]

    def category_ids(self) -> list[int]:
        return [row[0] for row in self._rows["categories"]]

    def product_prices(self) -> list[tuple[int, Decimal]]:
        return [(row[0], row[1]) for row in self._rows["products"]]

    def product_ids(self, active_only: bool = False) -> list[int]:
        return [row[0] for row in self._rows["products"] if row[2] or not active_only]

    def customer_ids(self, active_only: bool = False) -> list[int]:
        return [row[0] for row in self._rows["customers"] if row[1] or not active_only]

    def order_ids(self) -> list[int]:
        return [row[0] for row in self._rows["orders"]]
