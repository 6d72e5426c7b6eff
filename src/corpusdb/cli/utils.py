"""CLI utilities."""

from collections.abc import Generator
from contextlib import contextmanager

import click

from corpusdb.config.models import CorpusDbConfig
from corpusdb.store.database import Database


def get_config(ctx: click.Context) -> CorpusDbConfig:
    config: CorpusDbConfig = ctx.find_root().obj["config"]
    return config


@contextmanager
def open_database(ctx: click.Context, *, create: bool = True) -> Generator[Database, None, None]:
    """Database for the configured URL, disposed on exit.

    Args:
        create: Create missing tables first (idempotent).
    """
    db = Database(get_config(ctx).database)
    try:
        if create:
            db.create_all()
        yield db
    finally:
        db.dispose()
