"""Entity generators, one per seeded table."""

from storefront_seed.generators.base import EntityGenerator
from storefront_seed.generators.catalog import CategoryGenerator, ProductGenerator
from storefront_seed.generators.customers import AddressGenerator, CustomerGenerator
from storefront_seed.generators.orders import OrderGenerator, OrderItemGenerator, line_total
from storefront_seed.generators.reviews import ReviewGenerator

__all__ = [
    "EntityGenerator",
    "CategoryGenerator",
    "ProductGenerator",
    "CustomerGenerator",
    "AddressGenerator",
    "OrderGenerator",
    "OrderItemGenerator",
    "ReviewGenerator",
    "line_total",
]
