"""Tests for the PostgreSQL backend.

These run only when STOREFRONT_SEED_TEST_DATABASE_URL is set.
"""

import pytest

from storefront_seed import SeedConfig, SeedOrchestrator
from storefront_seed.backends import DirectBackend
from storefront_seed.config import GenerationConfig, WriterConfig
from storefront_seed.exceptions import StorageError
from storefront_seed.orchestrator import STAGE_ORDER

pytestmark = pytest.mark.postgres


@pytest.fixture
def backend(db_conn, test_schema):
    return DirectBackend(db_conn, schema=test_schema, statement_rows=7)


def category(name, parent=None):
    return {
        "name": name,
        "slug": name.lower(),
        "description": f"{name} category",
        "display_order": 0,
        "is_active": True,
        "created_at": "2024-01-01T00:00:00",
        "parent_category_id": parent,
    }


def test_bulk_insert_returns_ids_in_order(backend):
    """Ids come back in input order, across statement chunks."""
    rows = [category(f"Cat{i}") for i in range(20)]

    ids = backend.bulk_insert("categories", rows)

    assert len(ids) == 20
    assert ids == sorted(ids)
    assert backend.count("categories") == 20
    slugs = [row[0] for row in backend.fetch("categories", ["slug"])]
    assert slugs == [f"cat{i}" for i in range(20)]


def test_fetch_null_filter(backend):
    (parent,) = backend.bulk_insert("categories", [category("Parent")])
    backend.bulk_insert("categories", [category("Child", parent=parent)])

    assert backend.fetch("categories", ["id"], {"parent_category_id": None}) == [(parent,)]


def test_unique_violation(backend):
    backend.bulk_insert("categories", [category("A")])

    with pytest.raises(StorageError):
        backend.bulk_insert("categories", [category("A")])

    assert backend.count("categories") == 1


def test_seed_run(backend):
    config = SeedConfig(
        generation=GenerationConfig(main_category_count=5, sub_category_count=10),
        writer=WriterConfig(batch_size=50),
    )
    orchestrator = SeedOrchestrator(backend, config)

    result = orchestrator.seed(20, 10, seed=5)

    assert backend.count("customers") == 20
    assert backend.count("products") == 10
    for stage in STAGE_ORDER:
        assert result.rows[stage.value] == backend.count(stage.value)

    # Second run is a no-op
    assert orchestrator.seed(20, 10).skipped
    assert backend.count("customers") == 20


def test_atomic_rollback(backend):
    with pytest.raises(RuntimeError):
        with backend.transaction():
            backend.bulk_insert("categories", [category("A")])
            raise RuntimeError("boom")

    assert backend.count("categories") == 0
