"""Category and product generators."""

from collections.abc import Iterator, Sequence
from decimal import Decimal

from storefront_seed.exceptions import ForeignKeyPoolError
from storefront_seed.generators.base import EntityGenerator
from storefront_seed.models import Category, Product
from storefront_seed.providers import CENT, FieldProvider
from storefront_seed.uniqueness import MAX_UNIQUE_RETRIES, UniqueValues, slugify

MAX_PRODUCT_REVIEW_COUNT = 500


class CategoryGenerator(EntityGenerator):
    """
    Generate a one-level category hierarchy.

    Main categories are generated first (no parent); sub-categories are then
    generated against the ids storage assigned to the main ones. Slugs are
    derived from the name and disambiguated with a numeric suffix, sharing
    one slug set across both calls.
    """

    table = "categories"

    def __init__(
        self,
        fields: FieldProvider,
        slugs: UniqueValues | None = None,
        max_unique_retries: int = MAX_UNIQUE_RETRIES,
    ):
        super().__init__(fields, max_unique_retries)
        self.slugs = slugs if slugs is not None else UniqueValues("slug", max_unique_retries)

    def generate(self, count: int, parent_ids: Sequence[int] | None = None) -> Iterator[Category]:
        """
        Generate categories.

        Args:
            count: Number of categories to generate
            parent_ids: Ids of main categories. ``None`` generates main
                categories; otherwise each sub-category gets a parent drawn
                uniformly from this pool.

        Returns:
            Lazy iterator of exactly ``count`` categories

        Raises:
            ForeignKeyPoolError: If sub-categories are requested with an empty pool
        """
        self._check_count(count)
        if parent_ids is not None and count and not parent_ids:
            raise ForeignKeyPoolError(self.table, self.table)
        return self._generate(count, parent_ids)

    def _generate(self, count: int, parent_ids: Sequence[int] | None) -> Iterator[Category]:
        f = self.fields
        for index in range(count):
            if parent_ids is None:
                name = f.department()
                parent_id = None
                is_active = f.chance(0.9)
            else:
                name = f.product_name()
                parent_id = f.pick(parent_ids)
                is_active = f.chance(0.85)

            yield Category(
                name=name,
                slug=self.slugs.claim_slug(slugify(name) or "category"),
                description=f.sentence(),
                display_order=index,
                is_active=is_active,
                created_at=f.past(2),
                parent_category_id=parent_id,
            )


class ProductGenerator(EntityGenerator):
    """Generate products spread uniformly over a category pool."""

    table = "products"

    def __init__(
        self,
        fields: FieldProvider,
        skus: UniqueValues | None = None,
        max_unique_retries: int = MAX_UNIQUE_RETRIES,
    ):
        super().__init__(fields, max_unique_retries)
        self.skus = skus if skus is not None else UniqueValues("sku", max_unique_retries)

    def generate(self, count: int, category_ids: Sequence[int]) -> Iterator[Product]:
        """
        Generate products.

        Args:
            count: Number of products to generate
            category_ids: Pool of existing category ids

        Returns:
            Lazy iterator of exactly ``count`` products

        Raises:
            ForeignKeyPoolError: If products are requested with no categories
            UniqueValueExhaustedError: If a SKU cannot be drawn (while iterating)
        """
        self._check_count(count)
        if count and not category_ids:
            raise ForeignKeyPoolError(self.table, "categories")
        return self._generate(count, category_ids)

    def _generate(self, count: int, category_ids: Sequence[int]) -> Iterator[Product]:
        f = self.fields
        for _ in range(count):
            price = f.money(5, 5000)
            cost = (price * f.money(Decimal("0.3"), Decimal("0.7"))).quantize(CENT)
            review_count = f.integer(0, MAX_PRODUCT_REVIEW_COUNT)
            # Unrated products carry a zero rating
            rating = f.money(1, 5) if review_count else Decimal("0.00")

            yield Product(
                name=f.product_name(),
                sku=self.skus.claim(lambda: f"SKU-{f.alphanumeric(8)}"),
                description=f.paragraph(),
                price=price,
                cost=cost,
                stock_quantity=f.integer(0, 1000),
                category_id=f.pick(category_ids),
                is_active=f.chance(0.9),
                is_featured=f.chance(0.1),
                weight=f.money(Decimal("0.1"), 50),
                manufacturer=f.manufacturer(),
                created_at=f.past(2),
                updated_at=f.recent(30),
                view_count=f.integer(0, 10000),
                average_rating=rating,
                review_count=review_count,
            )
