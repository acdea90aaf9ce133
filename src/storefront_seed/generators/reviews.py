"""Review generator."""

import math
from collections.abc import Iterator, Sequence

from storefront_seed.generators.base import EntityGenerator
from storefront_seed.models import Review


class ReviewGenerator(EntityGenerator):
    """
    Generate reviews for a random subset of eligible products.

    Callers pass only active products and active customers. A
    ``product_fraction`` share of the products is reviewed, each receiving
    ``reviews_per_product`` reviews on average; the total is therefore a
    fixed multiple of the eligible product count. Reviews are not tied to
    actual purchases.
    """

    table = "reviews"

    def generate(
        self,
        product_ids: Sequence[int],
        customer_ids: Sequence[int],
        product_fraction: float = 0.2,
        reviews_per_product: int = 5,
    ) -> Iterator[Review]:
        if not 0 <= product_fraction <= 1:
            raise ValueError(f"product_fraction must be within [0, 1], got {product_fraction}")
        self._check_count(reviews_per_product)
        return self._generate(product_ids, customer_ids, product_fraction, reviews_per_product)

    @staticmethod
    def reviewed_product_count(eligible_products: int, product_fraction: float) -> int:
        """Number of distinct products that receive reviews."""
        if not eligible_products or not product_fraction:
            return 0
        return max(1, math.ceil(eligible_products * product_fraction))

    def _generate(
        self,
        product_ids: Sequence[int],
        customer_ids: Sequence[int],
        product_fraction: float,
        reviews_per_product: int,
    ) -> Iterator[Review]:
        if not product_ids or not customer_ids:
            return
        f = self.fields
        reviewed = f.random.sample(
            list(product_ids), self.reviewed_product_count(len(product_ids), product_fraction)
        )
        for _ in range(len(reviewed) * reviews_per_product):
            yield Review(
                product_id=f.pick(reviewed),
                customer_id=f.pick(customer_ids),
                rating=f.integer(1, 5),
                title=f.sentence(4),
                comment=f.paragraph(),
                is_verified_purchase=f.chance(0.7),
                created_at=f.past(1),
                updated_at=f.recent(30) if f.chance(0.2) else None,
                helpful_count=f.integer(0, 100),
                unhelpful_count=f.integer(0, 20),
            )
