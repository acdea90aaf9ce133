"""Pytest configuration and shared fixtures."""

import os
from datetime import datetime

import psycopg
import pytest
from psycopg import Connection

from storefront_seed import FieldProvider, SeedConfig, StagingBackend
from storefront_seed.backends import DirectBackend
from storefront_seed.config import GenerationConfig, WriterConfig

NOW = datetime(2024, 6, 1, 12, 0, 0)

TEST_DATABASE_URL_ENV = "STOREFRONT_SEED_TEST_DATABASE_URL"


@pytest.fixture
def fields() -> FieldProvider:
    """Seeded field provider with a fixed reference time."""
    return FieldProvider(seed=1234, now=NOW)


@pytest.fixture
def staging_backend() -> StagingBackend:
    return StagingBackend()


@pytest.fixture
def small_config() -> SeedConfig:
    """A config with a small category tree and tiny batches."""
    return SeedConfig(
        generation=GenerationConfig(main_category_count=5, sub_category_count=10),
        writer=WriterConfig(batch_size=25),
    )


@pytest.fixture
def db_conn() -> Connection:
    """
    Provide a test database connection.

    Tests using this fixture are skipped unless
    STOREFRONT_SEED_TEST_DATABASE_URL points at a PostgreSQL database.
    """
    url = os.environ.get(TEST_DATABASE_URL_ENV)
    if not url:
        pytest.skip(f"{TEST_DATABASE_URL_ENV} not set")

    conn = psycopg.connect(url, autocommit=False)

    yield conn

    conn.rollback()
    conn.close()


@pytest.fixture
def test_schema(db_conn: Connection) -> str:
    """
    Create the seed tables in a dedicated schema.

    Returns the schema name.
    """
    schema_name = "test_storefront_seed"

    with db_conn.cursor() as cur:
        cur.execute(f"DROP SCHEMA IF EXISTS {schema_name} CASCADE")
        db_conn.commit()

    DirectBackend(db_conn, schema=schema_name).create_schema()

    yield schema_name

    db_conn.rollback()
    with db_conn.cursor() as cur:
        cur.execute(f"DROP SCHEMA IF EXISTS {schema_name} CASCADE")
        db_conn.commit()
