"""Tests for foreign-key pool strategies."""

from decimal import Decimal

import pytest

from storefront_seed.backends import StagingBackend
from storefront_seed.generators import CategoryGenerator, CustomerGenerator, ProductGenerator
from storefront_seed.pools import CachedPools, ReadBackPools
from storefront_seed.writer import BatchWriter


@pytest.fixture
def populated(fields):
    """A staging backend plus a cache fed by the same flushes."""
    backend = StagingBackend()
    cache = CachedPools()

    def write(table, entities):
        with BatchWriter(backend, table, batch_size=7, on_flush=cache.recorder(table)) as writer:
            writer.add_all(entities)

    categories = CategoryGenerator(fields)
    write("categories", categories.generate(4))
    write("categories", categories.generate(6, parent_ids=[1, 2, 3, 4]))
    write("products", ProductGenerator(fields).generate(20, category_ids=list(range(1, 11))))
    write("customers", CustomerGenerator(fields).generate(15))
    return backend, cache


def test_read_back_pools(populated):
    backend, _ = populated
    pools = ReadBackPools(backend)

    assert pools.main_category_ids() == [1, 2, 3, 4]
    assert pools.category_ids() == list(range(1, 11))
    assert [pid for pid, _ in pools.product_prices()] == list(range(1, 21))
    assert all(isinstance(price, Decimal) for _, price in pools.product_prices())
    active = {row["id"] for row in backend.get_data("products") if row["is_active"]}
    assert set(pools.product_ids(active_only=True)) == active
    assert pools.order_ids() == []
    assert pools.recorder("products") is None


def test_cached_pools_match_read_back(populated):
    """Both strategies see the same pools."""
    backend, cache = populated
    read_back = ReadBackPools(backend)

    assert cache.main_category_ids() == read_back.main_category_ids()
    assert cache.category_ids() == read_back.category_ids()
    assert cache.product_prices() == read_back.product_prices()
    assert cache.product_ids() == read_back.product_ids()
    assert cache.product_ids(active_only=True) == read_back.product_ids(active_only=True)
    assert cache.customer_ids(active_only=True) == read_back.customer_ids(active_only=True)


def test_cached_pools_ignore_unprojected_tables():
    assert CachedPools().recorder("reviews") is None
