"""Seed orchestrator: runs the seven generation stages in dependency order."""

import logging
import time
from collections.abc import Callable
from contextlib import nullcontext
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from storefront_seed.backends.base import StorageBackend
from storefront_seed.config import SeedConfig
from storefront_seed.exceptions import InvalidSeedConfigError, SeedRunError
from storefront_seed.generators import (
    AddressGenerator,
    CategoryGenerator,
    CustomerGenerator,
    OrderGenerator,
    OrderItemGenerator,
    ProductGenerator,
    ReviewGenerator,
)
from storefront_seed.pools import CachedPools, IdPools, ReadBackPools
from storefront_seed.providers import FieldProvider
from storefront_seed.writer import BatchWriter

logger = logging.getLogger(__name__)


class SeedState(Enum):
    NOT_STARTED = "not_started"
    CHECKING_EXISTING = "checking_existing"
    SEEDING = "seeding"
    COMPLETED = "completed"
    FAILED = "failed"


class SeedStage(Enum):
    """Seed stages in their fixed execution order; values are table names."""

    CATEGORY = "categories"
    PRODUCT = "products"
    CUSTOMER = "customers"
    ADDRESS = "addresses"
    ORDER = "orders"
    ORDER_ITEM = "order_items"
    REVIEW = "reviews"


STAGE_ORDER: list[SeedStage] = list(SeedStage)


@dataclass
class SeedResult:
    """
    Outcome of a seed run.

    Attributes:
        skipped: True when customers already existed and nothing was written
        rows: Rows written per table
        batches: Bulk inserts issued per table
        duration: Wall-clock seconds spent
    """

    skipped: bool = False
    rows: dict[str, int] = field(default_factory=dict)
    batches: dict[str, int] = field(default_factory=dict)
    duration: float = 0.0

    @property
    def total_rows(self) -> int:
        return sum(self.rows.values())


@dataclass
class _RunContext:
    fields: FieldProvider
    pools: IdPools
    customer_count: int
    product_count: int


class SeedOrchestrator:
    """
    Populate an empty store with a consistent synthetic dataset.

    The run is idempotent: if any customer already exists, nothing is
    written. Otherwise the stages of ``STAGE_ORDER`` run one after the other,
    each streaming its generator through a ``BatchWriter``. Foreign-key pools
    are obtained between stages from ``ReadBackPools`` (re-read from storage)
    or ``CachedPools`` depending on ``config.id_pools``.

    A failing stage stops the run; rows already committed stay committed
    unless ``config.atomic`` is set.

    Example:
        >>> orchestrator = SeedOrchestrator(StagingBackend())
        >>> result = orchestrator.seed(customer_count=1000, product_count=500, seed=42)
        >>> result.rows["customers"]
        1000
    """

    def __init__(self, backend: StorageBackend, config: SeedConfig | None = None):
        """
        Args:
            backend: Storage the dataset is written to
            config: Generation and writer settings (defaults if omitted)
        """
        self.backend = backend
        self.config = config or SeedConfig()
        self.state = SeedState.NOT_STARTED
        self.stage: SeedStage | None = None
        self._stages: dict[SeedStage, Callable[[BatchWriter, _RunContext], None]] = {
            SeedStage.CATEGORY: self._seed_categories,
            SeedStage.PRODUCT: self._seed_products,
            SeedStage.CUSTOMER: self._seed_customers,
            SeedStage.ADDRESS: self._seed_addresses,
            SeedStage.ORDER: self._seed_orders,
            SeedStage.ORDER_ITEM: self._seed_order_items,
            SeedStage.REVIEW: self._seed_reviews,
        }

    def seed(
        self,
        customer_count: int,
        product_count: int,
        *,
        seed: int | None = None,
        now: datetime | None = None,
    ) -> SeedResult:
        """
        Run the seed pipeline.

        Args:
            customer_count: Exact number of customers to create
            product_count: Total number of products to create
            seed: Random seed; a fixed seed (with a fixed ``now``) reproduces
                the same dataset
            now: Reference time for generated dates (default: current time)

        Returns:
            SeedResult with per-table row counts, or ``skipped=True``

        Raises:
            InvalidSeedConfigError: If the counts are rejected (nothing written)
            SeedRunError: If a stage fails; carries the stage and row counts
        """
        self._validate(customer_count, product_count)
        started = time.perf_counter()

        self.state = SeedState.CHECKING_EXISTING
        if self.backend.count(SeedStage.CUSTOMER.value) > 0:
            logger.warning("Database already contains customers. Skipping seed.")
            self.state = SeedState.COMPLETED
            return SeedResult(skipped=True)

        logger.info(
            "Starting data seeding: %d customers, %d products (seed=%s, id pools=%s)",
            customer_count,
            product_count,
            seed,
            self.config.id_pools,
        )
        pools: IdPools = (
            CachedPools() if self.config.id_pools == "cache" else ReadBackPools(self.backend)
        )
        ctx = _RunContext(
            fields=FieldProvider(seed=seed, now=now),
            pools=pools,
            customer_count=customer_count,
            product_count=product_count,
        )
        result = SeedResult()
        completed: list[str] = []
        writer: BatchWriter | None = None

        scope = self.backend.transaction() if self.config.atomic else nullcontext()
        try:
            with scope:
                for stage in STAGE_ORDER:
                    self.state = SeedState.SEEDING
                    self.stage = stage
                    writer = BatchWriter(
                        self.backend,
                        stage.value,
                        batch_size=self.config.writer.batch_size,
                        on_flush=pools.recorder(stage.value),
                    )
                    logger.info("Seeding %s...", stage.value)
                    with writer:
                        self._stages[stage](writer, ctx)

                    result.rows[stage.value] = writer.rows_written
                    result.batches[stage.value] = writer.batches_flushed
                    completed.append(stage.value)
                    logger.info(
                        "Completed %s: %d rows in %d batches",
                        stage.value,
                        writer.rows_written,
                        writer.batches_flushed,
                    )
        except Exception as e:
            self.state = SeedState.FAILED
            stage_name = self.stage.value if self.stage else "setup"
            rows_written = writer.rows_written if writer is not None else 0
            logger.exception("Error during data seeding at stage '%s'", stage_name)
            raise SeedRunError(stage_name, rows_written, completed, e) from e

        result.duration = time.perf_counter() - started
        self.state = SeedState.COMPLETED
        logger.info(
            "Data seeding completed: %d rows in %.2fs", result.total_rows, result.duration
        )
        return result

    def _validate(self, customer_count: int, product_count: int) -> None:
        for name, value in (("customer_count", customer_count), ("product_count", product_count)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidSeedConfigError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise InvalidSeedConfigError(f"{name} must be >= 0, got {value}")

        gen = self.config.generation
        if gen.sub_category_count and not gen.main_category_count:
            raise InvalidSeedConfigError(
                "sub_category_count > 0 requires main_category_count > 0"
            )
        if product_count and not (gen.main_category_count + gen.sub_category_count):
            raise InvalidSeedConfigError("products requested but no categories are generated")

    # --- stages ---

    def _seed_categories(self, writer: BatchWriter, ctx: _RunContext) -> None:
        gen = self.config.generation
        generator = CategoryGenerator(ctx.fields, max_unique_retries=gen.max_unique_retries)

        writer.add_all(generator.generate(gen.main_category_count))
        # Sub-categories need the ids storage assigned to the main ones
        writer.flush()
        if gen.sub_category_count:
            writer.add_all(
                generator.generate(gen.sub_category_count, ctx.pools.main_category_ids())
            )

    def _seed_products(self, writer: BatchWriter, ctx: _RunContext) -> None:
        generator = ProductGenerator(
            ctx.fields, max_unique_retries=self.config.generation.max_unique_retries
        )
        writer.add_all(generator.generate(ctx.product_count, ctx.pools.category_ids()))

    def _seed_customers(self, writer: BatchWriter, ctx: _RunContext) -> None:
        generator = CustomerGenerator(
            ctx.fields, max_unique_retries=self.config.generation.max_unique_retries
        )
        writer.add_all(generator.generate(ctx.customer_count))

    def _seed_addresses(self, writer: BatchWriter, ctx: _RunContext) -> None:
        gen = self.config.generation
        writer.add_all(
            AddressGenerator(ctx.fields).generate(
                ctx.pools.customer_ids(),
                customer_limit=gen.address_customer_limit,
                max_per_customer=gen.max_addresses_per_customer,
            )
        )

    def _seed_orders(self, writer: BatchWriter, ctx: _RunContext) -> None:
        gen = self.config.generation
        customer_ids = ctx.pools.customer_ids()
        generator = OrderGenerator(ctx.fields, max_unique_retries=gen.max_unique_retries)
        writer.add_all(generator.generate(len(customer_ids) * gen.orders_per_customer, customer_ids))

    def _seed_order_items(self, writer: BatchWriter, ctx: _RunContext) -> None:
        order_ids = ctx.pools.order_ids()
        # One read of all (id, price) pairs for the whole stage
        product_prices = ctx.pools.product_prices()
        if order_ids and not product_prices:
            logger.warning("No products available; %d orders get no items", len(order_ids))
            return
        writer.add_all(
            OrderItemGenerator(ctx.fields).generate(
                order_ids,
                product_prices,
                max_items_per_order=self.config.generation.max_items_per_order,
            )
        )

    def _seed_reviews(self, writer: BatchWriter, ctx: _RunContext) -> None:
        gen = self.config.generation
        product_ids = ctx.pools.product_ids(active_only=True)
        customer_ids = ctx.pools.customer_ids(active_only=True)
        if not product_ids or not customer_ids:
            logger.warning(
                "Skipping reviews: %d active products, %d active customers",
                len(product_ids),
                len(customer_ids),
            )
            return
        writer.add_all(
            ReviewGenerator(ctx.fields).generate(
                product_ids,
                customer_ids,
                product_fraction=gen.review_product_fraction,
                reviews_per_product=gen.reviews_per_product,
            )
        )


def seed_database(
    backend: StorageBackend,
    customer_count: int,
    product_count: int,
    config: SeedConfig | None = None,
    **kwargs,
) -> SeedResult:
    """Seed ``backend`` in one call; see ``SeedOrchestrator.seed``."""
    return SeedOrchestrator(backend, config).seed(customer_count, product_count, **kwargs)
