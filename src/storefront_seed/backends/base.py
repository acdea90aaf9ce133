"""Storage backend interface consumed by the seed pipeline."""

from collections.abc import Iterator, Mapping, Sequence
from contextlib import AbstractContextManager
from typing import Any, Protocol


class StorageBackend(Protocol):
    """
    The only storage capabilities the generator relies on.

    - ``bulk_insert``: write a batch of rows, return their ids in order
    - ``count``: number of rows in a table
    - ``fetch``: id projections (``SELECT id[, ...] FROM table WHERE ...``)
    - ``transaction``: optional scope making a whole run all-or-nothing
    """

    def bulk_insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> list[int]: ...

    def count(self, table: str) -> int: ...

    def fetch(
        self,
        table: str,
        columns: Sequence[str],
        where: Mapping[str, Any] | None = None,
    ) -> list[tuple]: ...

    def transaction(self) -> AbstractContextManager[Any]: ...


def iter_chunks(rows: Sequence[Any], size: int) -> Iterator[Sequence[Any]]:
    """Split rows into consecutive chunks of at most ``size`` items."""
    for start in range(0, len(rows), size):
        yield rows[start : start + size]
