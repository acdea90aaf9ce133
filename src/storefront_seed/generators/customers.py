"""Customer and address generators."""

from collections.abc import Iterable, Iterator
from itertools import islice

from storefront_seed.generators.base import EntityGenerator
from storefront_seed.models import Address, AddressType, Customer
from storefront_seed.providers import CITIES, COUNTRIES, FieldProvider
from storefront_seed.uniqueness import MAX_UNIQUE_RETRIES, UniqueValues

ADDRESS_TYPES = list(AddressType)


class CustomerGenerator(EntityGenerator):
    """Generate customers with unique, name-derived email addresses."""

    table = "customers"

    def __init__(
        self,
        fields: FieldProvider,
        emails: UniqueValues | None = None,
        max_unique_retries: int = MAX_UNIQUE_RETRIES,
    ):
        super().__init__(fields, max_unique_retries)
        self.emails = emails if emails is not None else UniqueValues("email", max_unique_retries)

    def generate(self, count: int) -> Iterator[Customer]:
        """
        Generate exactly ``count`` customers.

        ``total_orders`` is always 0: it is an advisory counter and is not
        reconciled with the orders generated later in the run.
        """
        self._check_count(count)
        return self._generate(count)

    def _generate(self, count: int) -> Iterator[Customer]:
        f = self.fields
        for _ in range(count):
            first_name = f.first_name()
            last_name = f.last_name()
            yield Customer(
                first_name=first_name,
                last_name=last_name,
                email=self.emails.claim(lambda: f.email(first_name, last_name)),
                phone=f.phone(),
                city=f.pick(CITIES),
                country=f.pick(COUNTRIES),
                date_of_birth=f.birth_date(),
                created_at=f.past(3),
                last_login_at=f.recent(30),
                is_active=f.chance(0.85),
                credit_limit=f.money(1000, 50000),
                total_orders=0,
            )


class AddressGenerator(EntityGenerator):
    """
    Generate 1..N addresses for a leading subset of customers.

    The first address of each customer is the default one. The country is
    drawn independently of the customer's own country.
    """

    table = "addresses"

    def generate(
        self,
        customer_ids: Iterable[int],
        customer_limit: int | None = None,
        max_per_customer: int = 3,
    ) -> Iterator[Address]:
        """
        Args:
            customer_ids: Pool of existing customer ids, in storage order
            customer_limit: Only the first ``customer_limit`` customers get
                addresses (``None`` for all)
            max_per_customer: Upper bound of addresses per customer
        """
        if customer_limit is not None:
            self._check_count(customer_limit)
        if max_per_customer < 1:
            raise ValueError(f"max_per_customer must be >= 1, got {max_per_customer}")
        return self._generate(customer_ids, customer_limit, max_per_customer)

    def _generate(
        self,
        customer_ids: Iterable[int],
        customer_limit: int | None,
        max_per_customer: int,
    ) -> Iterator[Address]:
        f = self.fields
        for customer_id in islice(customer_ids, customer_limit):
            for position in range(f.integer(1, max_per_customer)):
                yield Address(
                    customer_id=customer_id,
                    street=f.street(),
                    city=f.city(),
                    state=f.state(),
                    country=f.pick(COUNTRIES),
                    postal_code=f.postal_code(),
                    is_default=position == 0,
                    address_type=f.pick(ADDRESS_TYPES),
                    created_at=f.past(2),
                )
