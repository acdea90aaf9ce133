"""Data models and type definitions."""

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar


class AddressType(Enum):
    SHIPPING = "Shipping"
    BILLING = "Billing"
    BOTH = "Both"


class OrderStatus(Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"


@dataclass
class ColumnInfo:
    """
    Column metadata for a seeded table.

    Attributes:
        name: Column name
        pg_type: PostgreSQL data type
        is_nullable: Whether column allows NULL values
        is_unique: Whether column has UNIQUE constraint
    """

    name: str
    pg_type: str
    is_nullable: bool = False
    is_unique: bool = False


@dataclass
class ForeignKeyInfo:
    """
    Foreign key relationship metadata.

    Attributes:
        column: Foreign key column name in this table
        referenced_table: Parent table being referenced
        referenced_column: Column in parent table (always the id)
        is_self_referencing: Whether this FK references the same table
    """

    column: str
    referenced_table: str
    referenced_column: str = "id"
    is_self_referencing: bool = False


@dataclass
class TableInfo:
    """
    Table metadata: columns (excluding the identity ``id``) and foreign keys.

    Attributes:
        name: Table name
        columns: List of column metadata
        foreign_keys: List of foreign key relationships
    """

    name: str
    columns: list[ColumnInfo]
    foreign_keys: list[ForeignKeyInfo] = field(default_factory=list)

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    @property
    def unique_columns(self) -> list[str]:
        return [c.name for c in self.columns if c.is_unique]

    def get_self_referencing_fks(self) -> list[ForeignKeyInfo]:
        """
        Get all self-referencing foreign keys.

        Returns:
            List of ForeignKeyInfo objects where is_self_referencing is True
        """
        return [fk for fk in self.foreign_keys if fk.is_self_referencing]


class Entity:
    """Mixin for seeded entities: table name plus row conversion."""

    table: ClassVar[str]

    def to_row(self) -> dict[str, Any]:
        """
        Convert to a storage row.

        The ``id`` is left out (storage assigns it) and enums are stored by
        name, e.g. ``OrderStatus.SHIPPED`` becomes ``"Shipped"``.
        """
        row: dict[str, Any] = {}
        for f in fields(self):
            if f.name == "id":
                continue
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            row[f.name] = value
        return row


@dataclass
class Category(Entity):
    table: ClassVar[str] = "categories"

    name: str
    slug: str
    description: str
    display_order: int
    is_active: bool
    created_at: datetime
    parent_category_id: int | None = None
    id: int | None = None

    @property
    def is_main(self) -> bool:
        return self.parent_category_id is None


@dataclass
class Product(Entity):
    table: ClassVar[str] = "products"

    name: str
    sku: str
    description: str
    price: Decimal
    cost: Decimal
    stock_quantity: int
    category_id: int
    is_active: bool
    is_featured: bool
    weight: Decimal
    manufacturer: str
    created_at: datetime
    updated_at: datetime | None
    view_count: int
    average_rating: Decimal
    review_count: int
    id: int | None = None


@dataclass
class Customer(Entity):
    """
    A shop customer.

    ``total_orders`` is an advisory, denormalized counter. It is written as 0
    and never recomputed from the orders stage, so it does not match the
    actual number of orders a customer has.
    """

    table: ClassVar[str] = "customers"

    first_name: str
    last_name: str
    email: str
    phone: str
    city: str
    country: str
    date_of_birth: date
    created_at: datetime
    last_login_at: datetime | None
    is_active: bool
    credit_limit: Decimal
    total_orders: int = 0
    id: int | None = None


@dataclass
class Address(Entity):
    table: ClassVar[str] = "addresses"

    customer_id: int
    street: str
    city: str
    state: str
    country: str
    postal_code: str
    is_default: bool
    address_type: AddressType
    created_at: datetime
    id: int | None = None


@dataclass
class Order(Entity):
    table: ClassVar[str] = "orders"

    order_number: str
    customer_id: int
    order_date: datetime
    shipped_date: datetime | None
    status: OrderStatus
    total_amount: Decimal
    shipping_cost: Decimal
    tax: Decimal
    shipping_address: str
    billing_address: str
    notes: str
    created_at: datetime
    updated_at: datetime | None
    id: int | None = None


@dataclass
class OrderItem(Entity):
    table: ClassVar[str] = "order_items"

    order_id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    discount: Decimal
    total_price: Decimal
    id: int | None = None


@dataclass
class Review(Entity):
    table: ClassVar[str] = "reviews"

    product_id: int
    customer_id: int
    rating: int
    title: str
    comment: str
    is_verified_purchase: bool
    created_at: datetime
    updated_at: datetime | None
    helpful_count: int
    unhelpful_count: int
    id: int | None = None
