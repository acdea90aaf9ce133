"""CLI commands for storefront-seed."""

import logging
import sys
from pathlib import Path

import click

from storefront_seed.backends import DirectBackend, StagingBackend
from storefront_seed.config import CONFIG_FILENAME, SeedConfig
from storefront_seed.exceptions import StorefrontSeedError
from storefront_seed.orchestrator import STAGE_ORDER, SeedOrchestrator


def _load_config(config_path: str | None) -> SeedConfig:
    if config_path:
        return SeedConfig.from_toml(config_path)
    try:
        return SeedConfig.find_and_load()
    except FileNotFoundError:
        return SeedConfig()


def _connect(config: SeedConfig) -> DirectBackend:
    return DirectBackend.connect(config.database.url, schema=config.database.schema_name)


@click.group()
@click.version_option(package_name="storefront-seed")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help=f"Config file (default: nearest {CONFIG_FILENAME})",
)
@click.option("-v", "--verbose", is_flag=True, help="Log every batch")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """storefront-seed - synthetic e-commerce dataset generator."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = _load_config(config_path)


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False), default=CONFIG_FILENAME)
@click.option("--force", is_flag=True, help="Overwrite an existing file")
@click.pass_obj
def init(config: SeedConfig, path: str, force: bool) -> None:
    """Write a configuration file with the current settings."""
    target = Path(path)
    if target.exists() and not force:
        click.echo(f"Error: {target} already exists (use --force to overwrite)", err=True)
        sys.exit(1)
    config.to_toml(target)
    click.echo(f"Wrote {target}")


@cli.command("create-schema")
@click.option("--drop", is_flag=True, help="Drop existing seed tables first")
@click.pass_obj
def create_schema(config: SeedConfig, drop: bool) -> None:
    """Create the seeded tables in the configured database."""
    backend = _connect(config)
    try:
        if drop:
            backend.drop_schema()
        backend.create_schema()
    finally:
        backend.close()
    click.echo(f"Schema '{config.database.schema_name}' ready")


@cli.command()
@click.option("--customers", type=click.IntRange(min=0), default=50_000, show_default=True)
@click.option("--products", type=click.IntRange(min=0), default=10_000, show_default=True)
@click.option("--seed", type=int, help="Random seed for a reproducible dataset")
@click.option("--staging", is_flag=True, help="Generate in memory, write nothing")
@click.option("--id-pools", type=click.Choice(["read_back", "cache"]), help="Pool strategy")
@click.option("--batch-size", type=click.IntRange(min=1), help="Rows per bulk insert")
@click.option("--atomic", is_flag=True, help="Single transaction for the run")
@click.pass_obj
def run(
    config: SeedConfig,
    customers: int,
    products: int,
    seed: int | None,
    staging: bool,
    id_pools: str | None,
    batch_size: int | None,
    atomic: bool,
) -> None:
    """Seed the database (skipped when customers already exist)."""
    if id_pools is not None:
        config.id_pools = id_pools
    if batch_size is not None:
        config.writer.batch_size = batch_size
    if atomic:
        config.atomic = True

    backend = StagingBackend() if staging else _connect(config)
    try:
        result = SeedOrchestrator(backend, config).seed(customers, products, seed=seed)
    except StorefrontSeedError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        if isinstance(backend, DirectBackend):
            backend.close()

    if result.skipped:
        click.echo("Database already contains customers; nothing seeded.")
        return

    for stage in STAGE_ORDER:
        table = stage.value
        rows = result.rows.get(table, 0)
        batches = result.batches.get(table, 0)
        click.echo(f"{table:<12} {rows:>10} rows  {batches:>4} batches")
    click.echo(f"Seeded {result.total_rows} rows in {result.duration:.2f}s")


@cli.command()
@click.pass_obj
def status(config: SeedConfig) -> None:
    """Show row counts of the seeded tables."""
    backend = _connect(config)
    try:
        for stage in STAGE_ORDER:
            click.echo(f"{stage.value:<12} {backend.count(stage.value):>10}")
    except StorefrontSeedError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        backend.close()


if __name__ == "__main__":
    cli()
