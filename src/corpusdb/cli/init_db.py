"""corpusdb init-db command - create tables and indexes."""

import click
from rich.console import Console

from corpusdb.cli.utils import get_config, open_database
from corpusdb.store.indexes import create_additional_indexes


@click.command()
@click.option("--drop", is_flag=True, help="Drop existing tables first (destroys data)")
@click.pass_context
def init_db_command(ctx: click.Context, drop: bool) -> None:
    """Create the corpus schema in the configured database."""
    console = Console(stderr=True)
    with open_database(ctx, create=False) as db:
        if drop:
            db.drop_all()
            console.print("[yellow]Dropped existing tables[/yellow]")
        db.create_all()
        create_additional_indexes(db.engine)

    console.print(f"[green]✓[/green] Schema ready at {get_config(ctx).database.url}")
