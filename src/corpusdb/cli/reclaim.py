"""corpusdb reclaim command - delete functions not refreshed since a cutoff."""

import time

import click
from rich.console import Console

from corpusdb.cli.utils import open_database
from corpusdb.store.entities import find_library
from corpusdb.store.reclaim import StaleReclaimer


@click.command()
@click.argument("library")
@click.argument("version")
@click.option(
    "--older-than",
    "older_than",
    type=float,
    required=True,
    help="Reclaim functions not updated in this many hours",
)
@click.option("-y", "--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def reclaim_command(
    ctx: click.Context, library: str, version: str, older_than: float, yes: bool
) -> None:
    """Delete LIBRARY VERSION functions (and their references) not refreshed recently."""
    console = Console(stderr=True)
    cutoff = time.time() - older_than * 3600

    with open_database(ctx) as db:
        with db.session() as session:
            row = find_library(session, library, version)
        if row is None or row.id is None:
            raise click.ClickException(f"Library not found: {library} {version}")

        if not yes:
            console.print(
                f"[bold]Functions of {library} {version} not updated in the last "
                f"{older_than:g} hour(s) will be permanently deleted.[/bold]"
            )
            if not click.confirm("This action cannot be undone. Continue?", default=False):
                console.print("[dim]Cancelled[/dim]")
                return

        reclaimed = StaleReclaimer(db).reclaim(row.id, cutoff)

    if not reclaimed:
        console.print("[dim]Nothing to reclaim[/dim]")
        return
    for ref in reclaimed:
        console.print(f"  [cyan]•[/cyan] {ref}")
    console.print(f"[green]Reclaimed {len(reclaimed)} function(s)[/green]")
