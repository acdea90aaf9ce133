"""Faker-based field providers for realistic e-commerce values."""

import random
import re
import string
import unicodedata
from collections.abc import Sequence
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import TypeVar

from faker import Faker

T = TypeVar("T")

CENT = Decimal("0.01")

COUNTRIES = ["USA", "UK", "Canada", "Germany", "France", "Australia", "Japan", "Brazil"]
CITIES = ["New York", "London", "Toronto", "Berlin", "Paris", "Sydney", "Tokyo", "São Paulo"]
MANUFACTURERS = [
    "Acme Corp",
    "TechPro",
    "GlobalGoods",
    "PremiumBrand",
    "ValueLine",
    "Elite Products",
]

DEPARTMENTS = [
    "Books", "Movies", "Music", "Games", "Electronics", "Computers", "Home",
    "Garden", "Tools", "Grocery", "Health", "Beauty", "Toys", "Kids", "Baby",
    "Clothing", "Shoes", "Jewelery", "Sports", "Outdoors", "Automotive", "Industrial",
]
PRODUCT_ADJECTIVES = [
    "Small", "Ergonomic", "Rustic", "Intelligent", "Gorgeous", "Incredible",
    "Fantastic", "Practical", "Sleek", "Awesome", "Generic", "Handcrafted",
    "Handmade", "Licensed", "Refined", "Unbranded", "Tasty", "Durable",
]
PRODUCT_MATERIALS = [
    "Steel", "Wooden", "Concrete", "Plastic", "Cotton", "Granite", "Rubber",
    "Metal", "Soft", "Fresh", "Frozen", "Bronze", "Leather", "Silk", "Wool",
]
PRODUCT_NOUNS = [
    "Chair", "Car", "Computer", "Keyboard", "Mouse", "Bike", "Ball", "Gloves",
    "Pants", "Shirt", "Table", "Shoes", "Hat", "Towels", "Soap", "Tuna",
    "Chicken", "Fish", "Cheese", "Bacon", "Pizza", "Salad", "Sausages", "Chips",
]

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def _email_part(name: str) -> str:
    ascii_name = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode()
    return _NON_ALNUM.sub("", ascii_name.lower()) or "user"


class FieldProvider:
    """
    Produce plausible scalar values from a single random source.

    Every value is a function of the injected seed and reference time, so two
    providers built with the same ``seed`` and ``now`` yield the same
    sequence. With ``seed=None`` the sequence is not reproducible.

    Args:
        seed: Seed for both the random source and the Faker instance
        now: Reference "current" time for all date fields (default: now)
    """

    def __init__(self, seed: int | None = None, now: datetime | None = None):
        self.random = random.Random(seed)
        self.fake = Faker()
        self.fake.seed_instance(seed)
        self.now = now or datetime.now().replace(microsecond=0)

    # --- primitive draws ---

    def chance(self, probability: float) -> bool:
        """True with the given probability."""
        return self.random.random() < probability

    def integer(self, low: int, high: int) -> int:
        """Uniform integer in [low, high]."""
        return self.random.randint(low, high)

    def money(self, low: float | Decimal, high: float | Decimal) -> Decimal:
        """Uniform amount in [low, high], rounded to cents."""
        value = self.random.uniform(float(low), float(high))
        return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)

    def pick(self, items: Sequence[T]) -> T:
        """Uniform choice from a non-empty sequence."""
        return self.random.choice(items)

    def alphanumeric(self, length: int) -> str:
        """Upper-case alphanumeric string, e.g. for SKUs."""
        alphabet = string.ascii_uppercase + string.digits
        return "".join(self.random.choice(alphabet) for _ in range(length))

    # --- dates ---

    def between(self, start: datetime, end: datetime) -> datetime:
        """Uniform timestamp in [start, end], to the second."""
        if end <= start:
            return start
        span = (end - start).total_seconds()
        return start + timedelta(seconds=int(self.random.uniform(0, span)))

    def past(self, years: float) -> datetime:
        """Timestamp within the last ``years`` years."""
        return self.between(self.now - timedelta(days=365 * years), self.now)

    def recent(self, days: int) -> datetime:
        """Timestamp within the last ``days`` days."""
        return self.between(self.now - timedelta(days=days), self.now)

    def birth_date(self, min_age: int = 18, max_age: int = 68) -> date:
        start = self.now - timedelta(days=365 * max_age)
        end = self.now - timedelta(days=365 * min_age)
        return self.between(start, end).date()

    # --- people and places ---

    def first_name(self) -> str:
        return self.fake.first_name()

    def last_name(self) -> str:
        return self.fake.last_name()

    def email(self, first_name: str, last_name: str) -> str:
        """
        Build an email address from a person's name.

        Not unique by construction: callers that need uniqueness must claim
        the value through ``UniqueValues``.
        """
        first = _email_part(first_name)
        last = _email_part(last_name)
        number = self.random.randint(1, 9999)
        local = self.pick(
            [
                f"{first}.{last}",
                f"{first}_{last}",
                f"{first}{last}{number}",
                f"{first}.{last}{number}",
                f"{first[0]}{last}{number}",
            ]
        )
        return f"{local}@{self.fake.free_email_domain()}"

    def phone(self) -> str:
        return self.fake.phone_number()

    def street(self) -> str:
        return self.fake.street_address()

    def city(self) -> str:
        return self.fake.city()

    def state(self) -> str:
        return self.fake.state()

    def postal_code(self) -> str:
        return self.fake.postcode()

    def full_address(self) -> str:
        return self.fake.address().replace("\n", ", ")

    # --- catalog text ---

    def sentence(self, words: int = 6) -> str:
        return self.fake.sentence(nb_words=words)

    def paragraph(self) -> str:
        return self.fake.paragraph()

    def department(self) -> str:
        """A department name such as "Garden" or "Toys & Games"."""
        if self.chance(0.5):
            return self.pick(DEPARTMENTS)
        first, second = self.random.sample(DEPARTMENTS, 2)
        return f"{first} & {second}"

    def product_name(self) -> str:
        return " ".join(
            (
                self.pick(PRODUCT_ADJECTIVES),
                self.pick(PRODUCT_MATERIALS),
                self.pick(PRODUCT_NOUNS),
            )
        )

    def manufacturer(self) -> str:
        return self.pick(MANUFACTURERS)
