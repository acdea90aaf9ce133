"""Integration tests for the seed orchestrator against the staging backend."""

import math
from datetime import datetime
from decimal import Decimal

import pytest

from storefront_seed import SeedConfig, SeedOrchestrator, SeedState, StagingBackend, seed_database
from storefront_seed.config import GenerationConfig, WriterConfig
from storefront_seed.exceptions import (
    InvalidSeedConfigError,
    SeedRunError,
    StorageError,
    UniqueValueExhaustedError,
)
from storefront_seed.generators import line_total
from storefront_seed.orchestrator import STAGE_ORDER
from storefront_seed.providers import FieldProvider

NOW = datetime(2024, 6, 1, 12, 0, 0)

TABLES = [stage.value for stage in STAGE_ORDER]


class FailingBackend(StagingBackend):
    """Staging backend that fails the Nth bulk insert into one table."""

    def __init__(self, table: str, fail_on_call: int = 1):
        super().__init__()
        self.fail_table = table
        self.fail_on_call = fail_on_call
        self.table_calls = 0

    def bulk_insert(self, table, rows):
        if table == self.fail_table:
            self.table_calls += 1
            if self.table_calls == self.fail_on_call:
                raise StorageError(table, "disk full")
        return super().bulk_insert(table, rows)


def ids(backend, table):
    return {row["id"] for row in backend.get_data(table)}


@pytest.fixture
def seeded():
    """Staging backend seeded with 10 customers and 5 products."""
    backend = StagingBackend()
    orchestrator = SeedOrchestrator(backend)
    result = orchestrator.seed(customer_count=10, product_count=5, seed=42, now=NOW)
    return backend, orchestrator, result


class TestSmallScenario:
    """seed(10, 5) on an empty store."""

    def test_counts(self, seeded):
        backend, orchestrator, result = seeded

        assert not result.skipped
        assert orchestrator.state == SeedState.COMPLETED
        assert backend.count("customers") == 10
        assert backend.count("products") == 5
        assert backend.count("categories") == 200
        assert backend.count("orders") == 30
        assert backend.count("order_items") >= 30
        assert result.rows == {table: backend.count(table) for table in TABLES}
        assert result.total_rows == sum(result.rows.values())

    def test_referential_integrity(self, seeded):
        """Every foreign key resolves to an existing row."""
        backend, _, _ = seeded
        category_ids = ids(backend, "categories")
        product_ids = ids(backend, "products")
        customer_ids = ids(backend, "customers")
        order_ids = ids(backend, "orders")

        assert all(p["category_id"] in category_ids for p in backend.get_data("products"))
        assert all(a["customer_id"] in customer_ids for a in backend.get_data("addresses"))
        assert all(o["customer_id"] in customer_ids for o in backend.get_data("orders"))
        for item in backend.get_data("order_items"):
            assert item["order_id"] in order_ids
            assert item["product_id"] in product_ids
        for review in backend.get_data("reviews"):
            assert review["product_id"] in product_ids
            assert review["customer_id"] in customer_ids

    def test_every_order_has_items(self, seeded):
        backend, _, _ = seeded
        assert {i["order_id"] for i in backend.get_data("order_items")} == ids(backend, "orders")

    def test_unique_fields(self, seeded):
        backend, _, _ = seeded
        for table, column in [
            ("categories", "slug"),
            ("products", "sku"),
            ("customers", "email"),
            ("orders", "order_number"),
        ]:
            values = [row[column] for row in backend.get_data(table)]
            assert len(values) == len(set(values)), f"{table}.{column} repeats"

    def test_category_hierarchy(self, seeded):
        """Sub-categories point at main categories only."""
        backend, _, _ = seeded
        categories = backend.get_data("categories")
        mains = {c["id"] for c in categories if c["parent_category_id"] is None}
        subs = [c for c in categories if c["parent_category_id"] is not None]

        assert len(mains) == 50
        assert len(subs) == 150
        assert all(c["parent_category_id"] in mains for c in subs)

    def test_values(self, seeded):
        backend, _, _ = seeded
        assert all(p["price"] > 0 for p in backend.get_data("products"))
        assert all(1 <= r["rating"] <= 5 for r in backend.get_data("reviews"))
        for item in backend.get_data("order_items"):
            assert item["total_price"] == line_total(
                item["quantity"], item["unit_price"], item["discount"]
            )
        assert all(c["total_orders"] == 0 for c in backend.get_data("customers"))

    def test_item_price_matches_product(self, seeded):
        backend, _, _ = seeded
        prices = {p["id"]: p["price"] for p in backend.get_data("products")}
        for item in backend.get_data("order_items"):
            assert item["unit_price"] == prices[item["product_id"]]

    def test_enums_stored_as_values(self, seeded):
        backend, _, _ = seeded
        statuses = {o["status"] for o in backend.get_data("orders")}
        assert all(isinstance(status, str) for status in statuses)


class TestIdempotence:
    """A second run is skipped once customers exist."""

    def test_second_run_skipped(self):
        backend = StagingBackend()
        seed_database(backend, 50, 5, seed=1, now=NOW)
        before = {table: backend.count(table) for table in TABLES}

        orchestrator = SeedOrchestrator(backend)
        result = orchestrator.seed(500, 5, seed=2, now=NOW)

        assert result.skipped
        assert result.total_rows == 0
        assert orchestrator.state == SeedState.COMPLETED
        assert backend.count("customers") == 50
        assert {table: backend.count(table) for table in TABLES} == before

    def test_existing_customer_blocks_all_stages(self):
        backend = StagingBackend()
        backend.bulk_insert("customers", [{"email": "existing@example.com"}])

        result = SeedOrchestrator(backend).seed(10, 5)

        assert result.skipped
        assert backend.count("categories") == 0
        assert backend.count("customers") == 1


class TestDeterminism:
    """A fixed seed and reference time reproduce the dataset."""

    def test_same_seed_same_data(self, small_config):
        a, b = StagingBackend(), StagingBackend()
        SeedOrchestrator(a, small_config).seed(20, 10, seed=7, now=NOW)
        SeedOrchestrator(b, small_config).seed(20, 10, seed=7, now=NOW)

        for table in TABLES:
            assert a.get_data(table) == b.get_data(table), f"{table} differs"

    def test_cached_pools_match_read_back(self, small_config):
        """Both pool strategies produce the same dataset."""
        cached_config = small_config.model_copy(update={"id_pools": "cache"})
        a, b = StagingBackend(), StagingBackend()
        SeedOrchestrator(a, small_config).seed(20, 10, seed=7, now=NOW)
        SeedOrchestrator(b, cached_config).seed(20, 10, seed=7, now=NOW)

        for table in TABLES:
            assert a.get_data(table) == b.get_data(table), f"{table} differs"


class TestBatching:
    """Rows reach storage in bounded batches."""

    def test_batch_counts(self):
        config = SeedConfig(
            generation=GenerationConfig(main_category_count=3, sub_category_count=0),
            writer=WriterConfig(batch_size=4),
        )
        backend = StagingBackend()

        result = SeedOrchestrator(backend, config).seed(10, 2, seed=1, now=NOW)

        assert result.batches["customers"] == math.ceil(10 / 4)
        assert result.batches["orders"] == math.ceil(30 / 4)
        assert result.rows["customers"] == 10


class TestCardinalities:
    """Edge cases of the requested counts."""

    def test_zero_customers(self, small_config):
        backend = StagingBackend()
        result = SeedOrchestrator(backend, small_config).seed(0, 5, seed=1, now=NOW)

        assert not result.skipped
        assert backend.count("products") == 5
        assert backend.count("customers") == 0
        assert backend.count("addresses") == 0
        assert backend.count("orders") == 0
        assert backend.count("reviews") == 0

    def test_zero_products(self, small_config):
        """Orders are still created; they just carry no items."""
        backend = StagingBackend()
        SeedOrchestrator(backend, small_config).seed(5, 0, seed=1, now=NOW)

        assert backend.count("orders") == 15
        assert backend.count("order_items") == 0
        assert backend.count("reviews") == 0

    def test_address_customer_limit(self):
        config = SeedConfig(generation=GenerationConfig(address_customer_limit=3))
        backend = StagingBackend()
        SeedOrchestrator(backend, config).seed(10, 1, seed=1, now=NOW)

        owners = {a["customer_id"] for a in backend.get_data("addresses")}
        first_three = sorted(ids(backend, "customers"))[:3]
        assert owners == set(first_three)

    def test_review_volume(self, small_config):
        """A fraction of active products gets a fixed number of reviews each."""
        backend = StagingBackend()
        SeedOrchestrator(backend, small_config).seed(20, 50, seed=3, now=NOW)

        active_products = [p for p in backend.get_data("products") if p["is_active"]]
        expected = math.ceil(len(active_products) * 0.2) * 5
        assert backend.count("reviews") == expected
        active_ids = {p["id"] for p in active_products}
        assert all(r["product_id"] in active_ids for r in backend.get_data("reviews"))


class TestValidation:
    """Invalid parameters are rejected before anything is written."""

    @pytest.mark.parametrize("customers,products", [(-1, 5), (5, -1), (1.5, 5), (True, 5)])
    def test_invalid_counts(self, customers, products):
        backend = StagingBackend()
        orchestrator = SeedOrchestrator(backend)

        with pytest.raises(InvalidSeedConfigError):
            orchestrator.seed(customers, products)

        assert orchestrator.state == SeedState.NOT_STARTED
        assert backend.insert_calls == 0

    def test_sub_categories_without_main(self):
        config = SeedConfig(generation=GenerationConfig(main_category_count=0))

        with pytest.raises(InvalidSeedConfigError, match="main_category_count"):
            SeedOrchestrator(StagingBackend(), config).seed(1, 1)

    def test_products_without_categories(self):
        config = SeedConfig(
            generation=GenerationConfig(main_category_count=0, sub_category_count=0)
        )

        with pytest.raises(InvalidSeedConfigError):
            SeedOrchestrator(StagingBackend(), config).seed(1, 1)


class TestFailure:
    """A failing stage stops the run."""

    def test_failed_stage_reported(self, small_config):
        backend = FailingBackend("orders")
        orchestrator = SeedOrchestrator(backend, small_config)

        with pytest.raises(SeedRunError) as exc_info:
            orchestrator.seed(10, 5, seed=1, now=NOW)

        error = exc_info.value
        assert error.stage == "orders"
        assert error.rows_written == 0
        assert error.completed_stages == ["categories", "products", "customers", "addresses"]
        assert isinstance(error.cause, StorageError)
        assert orchestrator.state == SeedState.FAILED

        # Earlier stages stay committed, later ones never ran
        assert backend.count("customers") == 10
        assert backend.count("orders") == 0
        assert backend.count("order_items") == 0
        assert backend.count("reviews") == 0

    def test_partial_stage_rows_reported(self, small_config):
        backend = FailingBackend("orders", fail_on_call=2)

        with pytest.raises(SeedRunError) as exc_info:
            SeedOrchestrator(backend, small_config).seed(20, 5, seed=1, now=NOW)

        batch_size = small_config.writer.batch_size
        assert exc_info.value.rows_written == batch_size
        assert backend.count("orders") == batch_size

    def test_atomic_run_rolls_back(self, small_config):
        config = small_config.model_copy(update={"atomic": True})
        backend = FailingBackend("reviews")

        with pytest.raises(SeedRunError):
            SeedOrchestrator(backend, config).seed(20, 50, seed=3, now=NOW)

        assert all(backend.count(table) == 0 for table in TABLES)

    def test_unique_exhaustion_is_fatal(self, monkeypatch, small_config):
        monkeypatch.setattr(FieldProvider, "alphanumeric", lambda self, length: "X" * length)
        backend = StagingBackend()

        with pytest.raises(SeedRunError) as exc_info:
            SeedOrchestrator(backend, small_config).seed(5, 5, seed=1, now=NOW)

        assert exc_info.value.stage == "products"
        assert isinstance(exc_info.value.cause, UniqueValueExhaustedError)
        assert backend.count("products") == 0
        assert backend.count("customers") == 0


def test_decimal_columns_survive_storage(seeded):
    backend, _, _ = seeded
    product = backend.get_data("products")[0]
    assert isinstance(product["price"], Decimal)
