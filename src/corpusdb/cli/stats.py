"""corpusdb stats command - show what is stored for a library."""

import json

import click

from corpusdb.cli.utils import open_database
from corpusdb.store.entities import LibraryStore


@click.command()
@click.argument("library")
@click.option("--version", "version", default=None, help="Library version (default: latest)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def stats_command(ctx: click.Context, library: str, version: str | None, as_json: bool) -> None:
    """Show stored namespace and function counts for LIBRARY."""
    with open_database(ctx) as db:
        stats = LibraryStore(db).stats(library, version)

    if stats is None:
        raise click.ClickException(f"Library not found: {library}")

    if as_json:
        click.echo(json.dumps(stats, indent=2))
        return

    click.echo(f"Library: {stats['name']} {stats['version']}")
    click.echo(f"Namespaces: {stats['namespace_count']}")
    click.echo(f"Functions: {stats['function_count']}")
