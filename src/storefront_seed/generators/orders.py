"""Order and order item generators."""

from collections.abc import Iterable, Iterator, Sequence
from decimal import Decimal

from storefront_seed.exceptions import ForeignKeyPoolError
from storefront_seed.generators.base import EntityGenerator
from storefront_seed.models import Order, OrderItem, OrderStatus
from storefront_seed.providers import CENT, FieldProvider
from storefront_seed.uniqueness import MAX_UNIQUE_RETRIES, UniqueValues

TAX_RATE = Decimal("0.10")
SHIPPED_PROBABILITY = 0.7
ORDER_STATUSES = list(OrderStatus)


def line_total(quantity: int, unit_price: Decimal, discount: Decimal) -> Decimal:
    """quantity x unit_price x (1 - discount), rounded to cents."""
    return (quantity * unit_price * (1 - discount)).quantize(CENT)


class OrderGenerator(EntityGenerator):
    """Generate orders for customers drawn uniformly from a pool."""

    table = "orders"

    def __init__(
        self,
        fields: FieldProvider,
        order_numbers: UniqueValues | None = None,
        max_unique_retries: int = MAX_UNIQUE_RETRIES,
    ):
        super().__init__(fields, max_unique_retries)
        self.order_numbers = (
            order_numbers
            if order_numbers is not None
            else UniqueValues("order_number", max_unique_retries)
        )

    def generate(self, count: int, customer_ids: Sequence[int]) -> Iterator[Order]:
        """
        Generate exactly ``count`` orders.

        Customers are drawn with repetition, so per-customer order counts
        only average out to ``count / len(customer_ids)``.

        Raises:
            ForeignKeyPoolError: If orders are requested with no customers
        """
        self._check_count(count)
        if count and not customer_ids:
            raise ForeignKeyPoolError(self.table, "customers")
        return self._generate(count, customer_ids)

    def _generate(self, count: int, customer_ids: Sequence[int]) -> Iterator[Order]:
        f = self.fields
        for _ in range(count):
            order_date = f.past(2)
            shipped_date = f.between(order_date, f.now) if f.chance(SHIPPED_PROBABILITY) else None
            total_amount = f.money(10, 5000)

            yield Order(
                order_number=self.order_numbers.claim(lambda: f"ORD-{f.alphanumeric(10)}"),
                customer_id=f.pick(customer_ids),
                order_date=order_date,
                shipped_date=shipped_date,
                status=f.pick(ORDER_STATUSES),
                total_amount=total_amount,
                shipping_cost=f.money(5, 50),
                tax=(total_amount * TAX_RATE).quantize(CENT),
                shipping_address=f.full_address(),
                billing_address=f.full_address(),
                notes=f.sentence(),
                created_at=order_date,
                updated_at=shipped_date,
            )


class OrderItemGenerator(EntityGenerator):
    """Generate 1..N line items per order, pricing them from a product snapshot."""

    table = "order_items"

    def generate(
        self,
        order_ids: Iterable[int],
        product_prices: Sequence[tuple[int, Decimal]],
        max_items_per_order: int = 7,
    ) -> Iterator[OrderItem]:
        """
        Args:
            order_ids: Ids of existing orders
            product_prices: ``(product_id, price)`` pairs, loaded once per
                stage rather than looked up per item
            max_items_per_order: Upper bound of items per order

        Raises:
            ForeignKeyPoolError: If there are orders but no products
        """
        if max_items_per_order < 1:
            raise ValueError(f"max_items_per_order must be >= 1, got {max_items_per_order}")
        return self._generate(order_ids, product_prices, max_items_per_order)

    def _generate(
        self,
        order_ids: Iterable[int],
        product_prices: Sequence[tuple[int, Decimal]],
        max_items_per_order: int,
    ) -> Iterator[OrderItem]:
        f = self.fields
        for order_id in order_ids:
            if not product_prices:
                raise ForeignKeyPoolError(self.table, "products")
            for _ in range(f.integer(1, max_items_per_order)):
                product_id, unit_price = f.pick(product_prices)
                quantity = f.integer(1, 4)
                discount = Decimal(f.integer(0, 19)) / 100

                yield OrderItem(
                    order_id=order_id,
                    product_id=product_id,
                    quantity=quantity,
                    unit_price=unit_price,
                    discount=discount,
                    total_price=line_total(quantity, unit_price, discount),
                )
