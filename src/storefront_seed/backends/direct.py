"""Direct INSERT backend - executes SQL against PostgreSQL with psycopg."""

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg import Connection, sql

from storefront_seed.backends.base import iter_chunks
from storefront_seed.exceptions import StorageError
from storefront_seed.schema import create_table_statements, drop_table_statements, get_table_info

logger = logging.getLogger(__name__)


class DirectBackend:
    """
    Write seed data with multi-row INSERT statements.

    Uses PostgreSQL's RETURNING clause to capture the identity ids assigned
    to each row, so callers can cache them instead of re-reading.
    """

    def __init__(self, conn: Connection, schema: str = "public", statement_rows: int = 500):
        """
        Initialize backend.

        Args:
            conn: PostgreSQL connection (autocommit off)
            schema: Schema name for qualified table names
            statement_rows: Rows per INSERT statement within one bulk insert
        """
        self.conn = conn
        self.schema = schema
        self.statement_rows = statement_rows
        self._in_transaction = False

    @classmethod
    def connect(cls, url: str, schema: str = "public", **kwargs: Any) -> "DirectBackend":
        """Open a new connection and wrap it."""
        return cls(psycopg.connect(url, autocommit=False), schema=schema, **kwargs)

    def close(self) -> None:
        self.conn.close()

    def _table(self, table: str) -> sql.Identifier:
        return sql.Identifier(self.schema, table)

    def bulk_insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> list[int]:
        """
        Insert rows and return their generated ids, in input order.

        Args:
            table: Table name
            rows: Row dicts keyed by column name (without ``id``)

        Returns:
            Ids assigned by the database

        Raises:
            StorageError: If any statement fails; the batch is rolled back
                unless the call runs inside ``transaction()``
        """
        if not rows:
            return []

        columns = get_table_info(table).column_names
        single_placeholder = sql.SQL("({})").format(
            sql.SQL(", ").join([sql.Placeholder()] * len(columns))
        )

        ids: list[int] = []
        try:
            with self.conn.cursor() as cur:
                for chunk in iter_chunks(rows, self.statement_rows):
                    query = sql.SQL("INSERT INTO {} ({}) VALUES {} RETURNING id").format(
                        self._table(table),
                        sql.SQL(", ").join(map(sql.Identifier, columns)),
                        sql.SQL(", ").join([single_placeholder] * len(chunk)),
                    )
                    # Flatten values: [row1_col1, row1_col2, row2_col1, ...]
                    values = [row.get(col) for row in chunk for col in columns]
                    cur.execute(query, values)
                    ids.extend(result[0] for result in cur.fetchall())
            if not self._in_transaction:
                self.conn.commit()
        except psycopg.Error as e:
            if not self._in_transaction:
                self.conn.rollback()
            raise StorageError(table, e) from e

        return ids

    def count(self, table: str) -> int:
        query = sql.SQL("SELECT COUNT(*) FROM {}").format(self._table(table))
        try:
            with self.conn.cursor() as cur:
                cur.execute(query)
                return cur.fetchone()[0]
        except psycopg.Error as e:
            raise StorageError(table, e) from e

    def fetch(
        self,
        table: str,
        columns: Sequence[str],
        where: Mapping[str, Any] | None = None,
    ) -> list[tuple]:
        """
        Read a projection of a table ordered by id.

        Args:
            table: Table name
            columns: Columns to select, e.g. ``["id", "price"]``
            where: Equality filters, e.g. ``{"is_active": True}``; ``None``
                values match NULL
        """
        query = sql.SQL("SELECT {} FROM {}").format(
            sql.SQL(", ").join(map(sql.Identifier, columns)), self._table(table)
        )
        params: list[Any] = []
        if where:
            conditions = []
            for col, value in where.items():
                if value is None:
                    conditions.append(sql.SQL("{} IS NULL").format(sql.Identifier(col)))
                else:
                    conditions.append(sql.SQL("{} = %s").format(sql.Identifier(col)))
                    params.append(value)
            query += sql.SQL(" WHERE ") + sql.SQL(" AND ").join(conditions)
        query += sql.SQL(" ORDER BY id")

        try:
            with self.conn.cursor() as cur:
                cur.execute(query, params)
                return cur.fetchall()
        except psycopg.Error as e:
            raise StorageError(table, e) from e

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run the enclosed bulk inserts in a single transaction.

        Per-batch commits are suspended; everything is committed on a clean
        exit and rolled back if the block raises.
        """
        self._in_transaction = True
        try:
            yield
        except BaseException:
            self.conn.rollback()
            raise
        else:
            self.conn.commit()
        finally:
            self._in_transaction = False

    def create_schema(self) -> None:
        """Create the schema and all seeded tables if missing."""
        with self.conn.cursor() as cur:
            cur.execute(
                sql.SQL("CREATE SCHEMA IF NOT EXISTS {}").format(sql.Identifier(self.schema))
            )
            for statement in create_table_statements(self.schema):
                cur.execute(statement)
        self.conn.commit()
        logger.info("Created seed tables in schema '%s'", self.schema)

    def drop_schema(self) -> None:
        """Drop all seeded tables (data included)."""
        with self.conn.cursor() as cur:
            for statement in drop_table_statements(self.schema):
                cur.execute(statement)
        self.conn.commit()
        logger.info("Dropped seed tables in schema '%s'", self.schema)
