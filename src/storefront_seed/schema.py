"""Table definitions for the seeded e-commerce schema.

The same metadata drives three things: the PostgreSQL DDL used by
``DirectBackend.create_schema()``, the in-memory constraint checks of the
staging backend, and the dependency graph that fixes table ordering.
"""

from psycopg import sql

from storefront_seed.dependency import DependencyGraph
from storefront_seed.models import ColumnInfo, ForeignKeyInfo, TableInfo

TABLES: dict[str, TableInfo] = {
    "categories": TableInfo(
        name="categories",
        columns=[
            ColumnInfo("name", "varchar(200)"),
            ColumnInfo("slug", "varchar(200)", is_unique=True),
            ColumnInfo("description", "text"),
            ColumnInfo("display_order", "integer"),
            ColumnInfo("is_active", "boolean"),
            ColumnInfo("created_at", "timestamp"),
            ColumnInfo("parent_category_id", "integer", is_nullable=True),
        ],
        foreign_keys=[
            ForeignKeyInfo("parent_category_id", "categories", is_self_referencing=True),
        ],
    ),
    "products": TableInfo(
        name="products",
        columns=[
            ColumnInfo("name", "varchar(200)"),
            ColumnInfo("sku", "varchar(50)", is_unique=True),
            ColumnInfo("description", "varchar(2000)"),
            ColumnInfo("price", "numeric(18,2)"),
            ColumnInfo("cost", "numeric(18,2)"),
            ColumnInfo("stock_quantity", "integer"),
            ColumnInfo("category_id", "integer"),
            ColumnInfo("is_active", "boolean"),
            ColumnInfo("is_featured", "boolean"),
            ColumnInfo("weight", "numeric(10,2)"),
            ColumnInfo("manufacturer", "varchar(100)"),
            ColumnInfo("created_at", "timestamp"),
            ColumnInfo("updated_at", "timestamp", is_nullable=True),
            ColumnInfo("view_count", "integer"),
            ColumnInfo("average_rating", "numeric(3,2)"),
            ColumnInfo("review_count", "integer"),
        ],
        foreign_keys=[ForeignKeyInfo("category_id", "categories")],
    ),
    "customers": TableInfo(
        name="customers",
        columns=[
            ColumnInfo("first_name", "varchar(100)"),
            ColumnInfo("last_name", "varchar(100)"),
            ColumnInfo("email", "varchar(256)", is_unique=True),
            ColumnInfo("phone", "varchar(40)"),
            ColumnInfo("city", "varchar(100)"),
            ColumnInfo("country", "varchar(100)"),
            ColumnInfo("date_of_birth", "date"),
            ColumnInfo("created_at", "timestamp"),
            ColumnInfo("last_login_at", "timestamp", is_nullable=True),
            ColumnInfo("is_active", "boolean"),
            ColumnInfo("credit_limit", "numeric(18,2)"),
            ColumnInfo("total_orders", "integer"),
        ],
    ),
    "addresses": TableInfo(
        name="addresses",
        columns=[
            ColumnInfo("customer_id", "integer"),
            ColumnInfo("street", "varchar(200)"),
            ColumnInfo("city", "varchar(100)"),
            ColumnInfo("state", "varchar(100)"),
            ColumnInfo("country", "varchar(100)"),
            ColumnInfo("postal_code", "varchar(20)"),
            ColumnInfo("is_default", "boolean"),
            ColumnInfo("address_type", "varchar(20)"),
            ColumnInfo("created_at", "timestamp"),
        ],
        foreign_keys=[ForeignKeyInfo("customer_id", "customers")],
    ),
    "orders": TableInfo(
        name="orders",
        columns=[
            ColumnInfo("order_number", "varchar(50)", is_unique=True),
            ColumnInfo("customer_id", "integer"),
            ColumnInfo("order_date", "timestamp"),
            ColumnInfo("shipped_date", "timestamp", is_nullable=True),
            ColumnInfo("status", "varchar(20)"),
            ColumnInfo("total_amount", "numeric(18,2)"),
            ColumnInfo("shipping_cost", "numeric(18,2)"),
            ColumnInfo("tax", "numeric(18,2)"),
            ColumnInfo("shipping_address", "varchar(500)"),
            ColumnInfo("billing_address", "varchar(500)"),
            ColumnInfo("notes", "text"),
            ColumnInfo("created_at", "timestamp"),
            ColumnInfo("updated_at", "timestamp", is_nullable=True),
        ],
        foreign_keys=[ForeignKeyInfo("customer_id", "customers")],
    ),
    "order_items": TableInfo(
        name="order_items",
        columns=[
            ColumnInfo("order_id", "integer"),
            ColumnInfo("product_id", "integer"),
            ColumnInfo("quantity", "integer"),
            ColumnInfo("unit_price", "numeric(18,2)"),
            ColumnInfo("discount", "numeric(18,2)"),
            ColumnInfo("total_price", "numeric(18,2)"),
        ],
        foreign_keys=[
            ForeignKeyInfo("order_id", "orders"),
            ForeignKeyInfo("product_id", "products"),
        ],
    ),
    "reviews": TableInfo(
        name="reviews",
        columns=[
            ColumnInfo("product_id", "integer"),
            ColumnInfo("customer_id", "integer"),
            ColumnInfo("rating", "integer"),
            ColumnInfo("title", "varchar(200)"),
            ColumnInfo("comment", "text"),
            ColumnInfo("is_verified_purchase", "boolean"),
            ColumnInfo("created_at", "timestamp"),
            ColumnInfo("updated_at", "timestamp", is_nullable=True),
            ColumnInfo("helpful_count", "integer"),
            ColumnInfo("unhelpful_count", "integer"),
        ],
        foreign_keys=[
            ForeignKeyInfo("product_id", "products"),
            ForeignKeyInfo("customer_id", "customers"),
        ],
    ),
}


def get_table_info(table: str) -> TableInfo:
    """Look up table metadata, raising KeyError for unknown tables."""
    try:
        return TABLES[table]
    except KeyError:
        raise KeyError(f"Unknown table '{table}'. Known tables: {', '.join(TABLES)}") from None


def build_dependency_graph() -> DependencyGraph:
    """Build the foreign-key dependency graph of all seeded tables."""
    graph = DependencyGraph()
    for table_info in TABLES.values():
        graph.add_table(table_info.name)
        for fk in table_info.foreign_keys:
            graph.add_dependency(table_info.name, fk.referenced_table)
    return graph


def create_table_statements(schema: str) -> list[sql.Composed]:
    """
    Render CREATE TABLE statements in dependency order.

    Args:
        schema: PostgreSQL schema the tables live in

    Returns:
        One composed statement per table, parents before children
    """
    statements = []
    for name in build_dependency_graph().topological_sort():
        table_info = TABLES[name]
        parts = [sql.SQL("id INTEGER GENERATED ALWAYS AS IDENTITY PRIMARY KEY")]
        for col in table_info.columns:
            parts.append(
                sql.SQL("{} {}{}{}").format(
                    sql.Identifier(col.name),
                    sql.SQL(col.pg_type),
                    sql.SQL("" if col.is_nullable else " NOT NULL"),
                    sql.SQL(" UNIQUE" if col.is_unique else ""),
                )
            )
        for fk in table_info.foreign_keys:
            parts.append(
                sql.SQL("FOREIGN KEY ({}) REFERENCES {} ({})").format(
                    sql.Identifier(fk.column),
                    sql.Identifier(schema, fk.referenced_table),
                    sql.Identifier(fk.referenced_column),
                )
            )
        statements.append(
            sql.SQL("CREATE TABLE IF NOT EXISTS {} ({})").format(
                sql.Identifier(schema, name), sql.SQL(", ").join(parts)
            )
        )
    return statements


def drop_table_statements(schema: str) -> list[sql.Composed]:
    """Render DROP TABLE statements, children before parents."""
    order = reversed(build_dependency_graph().topological_sort())
    return [
        sql.SQL("DROP TABLE IF EXISTS {} CASCADE").format(sql.Identifier(schema, name))
        for name in order
    ]
