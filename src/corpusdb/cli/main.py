"""corpusdb CLI - import scraped documentation into a relational store."""

from pathlib import Path

import click

from corpusdb.cli.import_cmd import import_command
from corpusdb.cli.init_db import init_db_command
from corpusdb.cli.reclaim import reclaim_command
from corpusdb.cli.stats import stats_command
from corpusdb.config.loader import load_config
from corpusdb.core.errors import ConfigError
from corpusdb.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="corpusdb")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file (default: ./corpusdb.yaml)",
)
@click.option("--database-url", default=None, help="Override database.url")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    database_url: str | None,
    verbose: bool,
) -> None:
    """corpusdb - idempotent storage of scraped library documentation."""
    overrides: dict[str, dict[str, str]] = {}
    if database_url:
        overrides["database"] = {"url": database_url}
    if verbose:
        overrides["logging"] = {"level": "DEBUG"}
    try:
        config = load_config(config_path, **overrides)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    configure_logging(config=config.logging)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


cli.add_command(init_db_command, name="init-db")
cli.add_command(import_command, name="import")
cli.add_command(reclaim_command, name="reclaim")
cli.add_command(stats_command, name="stats")


if __name__ == "__main__":
    cli()
