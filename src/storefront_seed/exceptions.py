"""Custom exceptions with helpful error messages."""


class StorefrontSeedError(Exception):
    """Base exception for storefront-seed errors."""

    pass


class InvalidSeedConfigError(StorefrontSeedError):
    """Seed parameters rejected before any stage starts."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(
            f"Invalid seed configuration: {reason}\n\n"
            f"Suggestions:\n"
            f"1. Use non-negative counts: seed(customer_count=1000, product_count=500)\n"
            f"2. Keep main_category_count > 0 when sub-categories or products are requested\n"
            f"3. Check storefront-seed.toml and STOREFRONT_SEED_* environment variables"
        )


class UniqueValueExhaustedError(StorefrontSeedError):
    """Could not draw a non-colliding value for a unique field."""

    def __init__(self, field: str, attempts: int):
        self.field = field
        self.attempts = attempts
        super().__init__(
            f"Could not generate a unique value for '{field}' "
            f"after {attempts} attempts.\n\n"
            f"Suggestions:\n"
            f"1. The value space is too small for the requested row count\n"
            f"2. Lower the requested count or raise generation.max_unique_retries\n"
            f"3. Make sure the store was empty before seeding"
        )


class ForeignKeyPoolError(StorefrontSeedError):
    """A stage needs parent ids but the pool is empty."""

    def __init__(self, table: str, referenced_table: str):
        self.table = table
        self.referenced_table = referenced_table
        super().__init__(
            f"Cannot generate '{table}' rows: no '{referenced_table}' ids available.\n\n"
            f"Suggestions:\n"
            f"1. Ensure '{referenced_table}' is seeded before '{table}'\n"
            f"2. Check that the '{referenced_table}' stage produced rows"
        )


class StorageError(StorefrontSeedError):
    """A storage call (bulk insert, count, projection) failed."""

    def __init__(self, table: str, cause: BaseException | str):
        self.table = table
        self.cause = cause
        super().__init__(f"Storage operation on '{table}' failed: {cause}")


class SeedRunError(StorefrontSeedError):
    """A seed run stopped at a stage; later stages were not attempted."""

    def __init__(
        self,
        stage: str,
        rows_written: int,
        completed_stages: list[str],
        cause: BaseException,
    ):
        self.stage = stage
        self.rows_written = rows_written
        self.completed_stages = completed_stages
        self.cause = cause
        last = completed_stages[-1] if completed_stages else "none"
        super().__init__(
            f"Seeding failed during stage '{stage}' after {rows_written} rows "
            f"(last completed stage: {last}): {cause}\n\n"
            f"Rows committed before the failure are not rolled back.\n"
            f"Reset the store before running the seed again, or pass atomic=True."
        )


class CircularDependencyError(StorefrontSeedError):
    """Circular dependency detected in table relationships."""

    def __init__(self, tables: set[str]):
        self.tables = tables
        tables_str = ", ".join(sorted(tables))
        super().__init__(
            f"Circular dependency detected involving tables: {tables_str}\n\n"
            f"Suggestions:\n"
            f"1. Check foreign key relationships for cycles\n"
            f"2. Self-references are allowed and ignored when ordering"
        )


class DependencyOrderError(StorefrontSeedError):
    """A table is scheduled before a table it references."""

    def __init__(self, table: str, dependency: str):
        self.table = table
        self.dependency = dependency
        super().__init__(
            f"Table '{table}' depends on '{dependency}', "
            f"but '{dependency}' is not scheduled before it.\n\n"
            f"Suggestions:\n"
            f"1. Move '{dependency}' earlier in the stage order\n"
            f"2. Use DependencyGraph.topological_sort() to derive a valid order"
        )
