"""Staging backend - in-memory backend for seeding without a database."""

import copy
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from storefront_seed.exceptions import StorageError
from storefront_seed.schema import get_table_info


class StagingBackend:
    """
    In-memory backend for testing seed generation without database.

    Simulates database behavior:
    - Assigns sequential ids starting from 1 (like an IDENTITY column)
    - Enforces UNIQUE columns and foreign keys declared in ``schema.TABLES``
    - Rejects a whole batch when any row in it violates a constraint

    Use case: fast unit tests, offline dry runs, prototyping seed logic.
    """

    def __init__(self):
        """Initialize staging backend with empty state."""
        self._data: dict[str, list[dict[str, Any]]] = {}
        self._pk_sequences: dict[str, int] = {}
        self._unique_index: dict[tuple[str, str], set[Any]] = {}
        self._ids: dict[str, set[int]] = {}
        self.insert_calls = 0

    def bulk_insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> list[int]:
        """
        Simulate a bulk insert (assign ids, check constraints, store in memory).

        Args:
            table: Table name
            rows: Row dicts without ``id``

        Returns:
            Ids assigned to the rows, in input order

        Raises:
            StorageError: On a unique or foreign-key violation
        """
        self.insert_calls += 1
        if not rows:
            return []

        table_info = get_table_info(table)
        next_id = self._pk_sequences.get(table, 1)
        batch_ids: set[int] = set()
        batch_unique: dict[str, set[Any]] = {col: set() for col in table_info.unique_columns}

        inserted = []
        for row in rows:
            complete_row = dict(row)
            complete_row["id"] = next_id

            for col, seen in batch_unique.items():
                value = complete_row.get(col)
                if value in seen or value in self._unique_index.get((table, col), ()):
                    raise StorageError(
                        table, f"duplicate key value violates unique constraint on '{col}': {value!r}"
                    )
                seen.add(value)

            for fk in table_info.foreign_keys:
                value = complete_row.get(fk.column)
                if value is None:
                    continue
                known = self._ids.get(fk.referenced_table, set())
                if value not in known and not (fk.is_self_referencing and value in batch_ids):
                    raise StorageError(
                        table,
                        f"foreign key '{fk.column}' references missing "
                        f"{fk.referenced_table}.id = {value!r}",
                    )

            batch_ids.add(next_id)
            inserted.append(complete_row)
            next_id += 1

        # Store in memory only once the whole batch passed
        self._pk_sequences[table] = next_id
        self._data.setdefault(table, []).extend(inserted)
        self._ids.setdefault(table, set()).update(batch_ids)
        for col, values in batch_unique.items():
            self._unique_index.setdefault((table, col), set()).update(values)

        return [row["id"] for row in inserted]

    def count(self, table: str) -> int:
        return len(self._data.get(table, []))

    def fetch(
        self,
        table: str,
        columns: Sequence[str],
        where: Mapping[str, Any] | None = None,
    ) -> list[tuple]:
        """Read a projection of a table ordered by id, with equality filters."""
        where = where or {}
        return [
            tuple(row[col] for col in columns)
            for row in self._data.get(table, [])
            if all(row.get(col) == value for col, value in where.items())
        ]

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Snapshot state and restore it if the block raises."""
        snapshot = copy.deepcopy(
            (self._data, self._pk_sequences, self._unique_index, self._ids)
        )
        try:
            yield
        except BaseException:
            self._data, self._pk_sequences, self._unique_index, self._ids = snapshot
            raise

    def get_data(self, table_name: str) -> list[dict[str, Any]]:
        """
        Get in-memory data for inspection.

        Args:
            table_name: Table name

        Returns:
            List of row dicts for the table
        """
        return self._data.get(table_name, [])

    def clear(self) -> None:
        """Clear all in-memory data and sequences."""
        self._data.clear()
        self._pk_sequences.clear()
        self._unique_index.clear()
        self._ids.clear()
