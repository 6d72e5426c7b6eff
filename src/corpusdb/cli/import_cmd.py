"""corpusdb import command - store one or more corpus files."""

import json
from dataclasses import asdict
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from corpusdb.cli.utils import get_config, open_database
from corpusdb.core.errors import CorpusError
from corpusdb.corpus import load_corpus
from corpusdb.importer import Importer, ImportResult


def _summary_table(name: str, result: ImportResult) -> Table:
    table = Table(title=name, show_header=True, header_style="bold")
    table.add_column("Entity")
    table.add_column("Inserted", justify="right")
    table.add_column("Updated", justify="right")
    table.add_column("Skipped", justify="right")
    table.add_column("Failed", justify="right")
    table.add_row(
        "namespaces",
        str(result.namespaces_inserted),
        str(result.namespaces_updated),
        str(result.namespaces_skipped),
        "-",
    )
    table.add_row(
        "functions",
        str(result.functions_inserted),
        str(result.functions_updated),
        str(result.functions_skipped),
        str(result.functions_failed),
    )
    table.add_row(
        "references", str(result.references_created), "-", "-", str(result.reference_failures)
    )
    return table


@click.command()
@click.argument(
    "corpus_files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--reclaim-stale/--no-reclaim-stale",
    default=None,
    help="Delete functions this run did not refresh (default: from config)",
)
@click.option("--json", "as_json", is_flag=True, help="Output results as JSON")
@click.pass_context
def import_command(
    ctx: click.Context,
    corpus_files: tuple[Path, ...],
    reclaim_stale: bool | None,
    as_json: bool,
) -> None:
    """Import scraped corpus files (JSON or YAML), one library per file."""
    console = Console(stderr=True)
    import_config = get_config(ctx).import_run
    if reclaim_stale is not None:
        import_config = import_config.model_copy(update={"reclaim_stale": reclaim_stale})

    failed = False
    results: dict[str, dict[str, object]] = {}
    with open_database(ctx) as db:
        importer = Importer(db, import_config)
        for path in corpus_files:
            try:
                corpus = load_corpus(path)
            except CorpusError as e:
                console.print(f"[red]✗[/red] {path}: {e.message}")
                failed = True
                continue

            result = importer.run(corpus)
            failed = failed or not result.ok
            label = f"{corpus.library.name} {corpus.library.version}"
            if as_json:
                data = asdict(result)
                data["reclaimed"] = [str(ref) for ref in result.reclaimed]
                action = result.library_action
                data["library_action"] = action.value if action else None
                results[str(path)] = data
            else:
                console.print(_summary_table(label, result))

    if as_json:
        click.echo(json.dumps(results, indent=2))
    if failed:
        ctx.exit(1)
