"""Tests for the table dependency graph and schema metadata."""

import pytest

from storefront_seed.dependency import DependencyGraph
from storefront_seed.exceptions import CircularDependencyError, DependencyOrderError
from storefront_seed.orchestrator import STAGE_ORDER
from storefront_seed.schema import (
    TABLES,
    build_dependency_graph,
    create_table_statements,
    drop_table_statements,
    get_table_info,
)


def test_topological_sort_simple():
    graph = DependencyGraph()
    graph.add_dependency("orders", "customers")
    graph.add_dependency("order_items", "orders")

    assert graph.topological_sort() == ["customers", "orders", "order_items"]


def test_self_reference_ignored():
    graph = DependencyGraph()
    graph.add_dependency("categories", "categories")

    assert graph.get_dependencies("categories") == []
    assert graph.topological_sort() == ["categories"]


def test_cycle_detected():
    graph = DependencyGraph()
    graph.add_dependency("a", "b")
    graph.add_dependency("b", "a")

    with pytest.raises(CircularDependencyError) as exc_info:
        graph.topological_sort()
    assert exc_info.value.tables == {"a", "b"}


def test_stage_order_respects_foreign_keys():
    """The fixed seed stage order never writes a child before its parent."""
    build_dependency_graph().validate_order([stage.value for stage in STAGE_ORDER])


def test_validate_order_rejects_child_first():
    with pytest.raises(DependencyOrderError) as exc_info:
        build_dependency_graph().validate_order(["products", "categories"])
    assert exc_info.value.table == "products"
    assert exc_info.value.dependency == "categories"


def test_schema_dependencies():
    graph = build_dependency_graph()

    assert graph.get_dependencies("order_items") == ["orders", "products"]
    assert graph.get_dependencies("reviews") == ["customers", "products"]
    assert graph.get_dependencies("categories") == []


def test_table_metadata():
    assert set(TABLES) == {stage.value for stage in STAGE_ORDER}
    assert get_table_info("products").unique_columns == ["sku"]
    assert [fk.column for fk in get_table_info("categories").get_self_referencing_fks()] == [
        "parent_category_id"
    ]

    with pytest.raises(KeyError):
        get_table_info("widgets")


def test_ddl_statement_per_table():
    assert len(create_table_statements("public")) == len(TABLES)
    assert len(drop_table_statements("public")) == len(TABLES)
