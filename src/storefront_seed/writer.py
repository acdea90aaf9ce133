"""Bounded batch writer between generators and storage."""

import logging
from collections.abc import Callable, Iterable, Sequence

from storefront_seed.backends.base import StorageBackend
from storefront_seed.exceptions import StorageError
from storefront_seed.models import Entity

logger = logging.getLogger(__name__)

# Rows buffered before a bulk insert is issued
DEFAULT_BATCH_SIZE = 10_000

FlushCallback = Callable[[Sequence[Entity], Sequence[int]], None]


class BatchWriter:
    """
    Buffer entities of one table and write them in bulk.

    Peak memory is bounded by ``batch_size`` regardless of how many entities
    pass through, and storage sees one round trip per batch rather than one
    per row.

    Example:
        >>> with BatchWriter(backend, "products", batch_size=5000) as writer:
        ...     writer.add_all(generator.generate(20_000, category_ids))
        >>> writer.batches_flushed
        4
    """

    def __init__(
        self,
        backend: StorageBackend,
        table: str,
        batch_size: int = DEFAULT_BATCH_SIZE,
        on_flush: FlushCallback | None = None,
    ):
        """
        Args:
            backend: Storage backend receiving bulk inserts
            table: Table every buffered entity belongs to
            batch_size: Flush threshold
            on_flush: Called after each flush with the written entities and
                the ids storage assigned to them
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self.backend = backend
        self.table = table
        self.batch_size = batch_size
        self.on_flush = on_flush
        self.rows_written = 0
        self.batches_flushed = 0
        self._buffer: list[Entity] = []

    def __enter__(self) -> "BatchWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
        else:
            # Abort: the remainder is dropped, committed batches stay
            self._buffer.clear()

    @property
    def pending(self) -> int:
        """Entities buffered but not yet written."""
        return len(self._buffer)

    def add(self, entity: Entity) -> None:
        """Buffer one entity, flushing when the threshold is reached."""
        if entity.table != self.table:
            raise ValueError(
                f"BatchWriter for '{self.table}' cannot accept a '{entity.table}' entity"
            )
        self._buffer.append(entity)
        if len(self._buffer) >= self.batch_size:
            self.flush()

    def add_all(self, entities: Iterable[Entity]) -> int:
        """Buffer every entity of an iterable; returns how many were added."""
        added = 0
        for entity in entities:
            self.add(entity)
            added += 1
        return added

    def flush(self) -> int:
        """
        Write the buffered entities with a single bulk insert.

        Returns:
            Number of rows written (0 when the buffer was empty)

        Raises:
            StorageError: If the bulk insert fails
        """
        if not self._buffer:
            return 0

        batch, self._buffer = self._buffer, []
        try:
            ids = self.backend.bulk_insert(self.table, [entity.to_row() for entity in batch])
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(self.table, e) from e

        self.rows_written += len(batch)
        self.batches_flushed += 1
        logger.info(
            "Inserted %s batch %d (%d rows, %d total)",
            self.table,
            self.batches_flushed,
            len(batch),
            self.rows_written,
        )

        if self.on_flush is not None:
            self.on_flush(batch, ids)
        return len(batch)

    def close(self) -> None:
        """Flush the remainder below the threshold."""
        self.flush()
