"""
Configuration management for storefront-seed.

Loads and validates configuration from storefront-seed.toml files and
STOREFRONT_SEED_* environment variables using Pydantic.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_FILENAME = "storefront-seed.toml"


class DatabaseConfig(BaseModel):
    """Database connection configuration."""

    url: str = Field(
        default="postgresql://localhost/storefront",
        description="PostgreSQL connection URL",
    )
    schema_name: str = Field(
        default="public",
        alias="schema",
        description="Schema holding the seeded tables",
    )

    model_config = {"populate_by_name": True}


class GenerationConfig(BaseModel):
    """Cardinalities and retry budgets of the generators."""

    main_category_count: int = Field(default=50, ge=0, description="Top-level categories")
    sub_category_count: int = Field(default=150, ge=0, description="Second-level categories")
    address_customer_limit: int = Field(
        default=30_000, ge=0, description="Only the first N customers get addresses"
    )
    max_addresses_per_customer: int = Field(default=3, ge=1)
    orders_per_customer: int = Field(
        default=3, ge=0, description="Orders generated = customers x this factor"
    )
    max_items_per_order: int = Field(default=7, ge=1)
    review_product_fraction: float = Field(
        default=0.2, ge=0, le=1, description="Share of active products that get reviews"
    )
    reviews_per_product: int = Field(default=5, ge=0)
    max_unique_retries: int = Field(
        default=10, ge=1, description="Draws allowed per unique value before failing"
    )


class WriterConfig(BaseModel):
    """Batch writer configuration."""

    batch_size: int = Field(default=10_000, ge=1, description="Rows per bulk insert")


class SeedConfig(BaseSettings):
    """Main configuration for storefront-seed."""

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_SEED_",
        env_nested_delimiter="__",
    )

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    writer: WriterConfig = Field(default_factory=WriterConfig)
    id_pools: Literal["read_back", "cache"] = Field(
        default="read_back",
        description="Re-read foreign-key pools from storage or cache them in memory",
    )
    atomic: bool = Field(
        default=False, description="Wrap the whole run in one storage transaction"
    )

    @classmethod
    def from_toml(cls, path: Path | str) -> SeedConfig:
        """
        Load configuration from TOML file.

        Args:
            path: Path to storefront-seed.toml file

        Returns:
            SeedConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        return cls(**data)

    @classmethod
    def find_and_load(cls, start_dir: Optional[Path] = None) -> SeedConfig:
        """
        Find and load configuration from storefront-seed.toml.

        Searches from start_dir up through parent directories until a file is
        found or the filesystem root is reached.

        Args:
            start_dir: Directory to start search (defaults to current directory)

        Raises:
            FileNotFoundError: If no config file found
        """
        current = Path(start_dir or Path.cwd()).resolve()

        while True:
            config_path = current / CONFIG_FILENAME
            if config_path.exists():
                return cls.from_toml(config_path)

            parent = current.parent
            if parent == current:
                break
            current = parent

        raise FileNotFoundError(
            f"No {CONFIG_FILENAME} found in {start_dir or Path.cwd()} or parent directories. "
            f"Run 'storefront-seed init' to create one."
        )

    def to_toml(self, path: Path | str) -> None:
        """
        Write configuration to TOML file.

        Args:
            path: Path to write storefront-seed.toml
        """
        gen = self.generation
        toml_content = f"""# storefront-seed configuration

id_pools = "{self.id_pools}"
atomic = {str(self.atomic).lower()}

[database]
url = "{self.database.url}"
schema = "{self.database.schema_name}"

[generation]
main_category_count = {gen.main_category_count}
sub_category_count = {gen.sub_category_count}
address_customer_limit = {gen.address_customer_limit}
max_addresses_per_customer = {gen.max_addresses_per_customer}
orders_per_customer = {gen.orders_per_customer}
max_items_per_order = {gen.max_items_per_order}
review_product_fraction = {gen.review_product_fraction}
reviews_per_product = {gen.reviews_per_product}
max_unique_retries = {gen.max_unique_retries}

[writer]
batch_size = {self.writer.batch_size}
"""
        Path(path).write_text(toml_content)
