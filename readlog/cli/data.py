"""
Data Import Commands
--------------------

Load books and stored streak records from YAML files.

Commands:
    - import-books: Upsert books from a YAML list
    - import-history: Store a legacy or enhanced streak record as-is
"""
from pathlib import Path
from typing import Any, List

import click
import yaml

from readlog.core.exceptions import SerializationError
from readlog.core.logging_manager import handle_cli_error
from readlog.dataclasses.book import Book
from readlog.dataclasses.streak_history import EnhancedStreakHistory, LegacyStreakHistory
from readlog.reconcile.migration import LegacyFormat, detect_legacy_format
from . import CLI_ERRORS, get_db


def _read_yaml(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _book_rows(data: Any) -> List[dict]:
    if isinstance(data, dict):
        data = data.get("books")
    if not isinstance(data, list):
        raise SerializationError("Books file must contain a list of books (or a 'books' list)")
    return data


@click.command("import-books")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def import_books(ctx, file):
    """Import or update books from a YAML file."""
    try:
        books = [Book.from_dict(row) for row in _book_rows(_read_yaml(file))]
        db = get_db(ctx)
        with db.session_scope():
            count = db.books.upsert_many(books)
        click.echo(f"✅ Imported {count} books from {file.name}")

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "import_books", {"file": str(file)})


@click.command("import-history")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def import_history(ctx, file):
    """Store a streak record from a YAML file without changing it."""
    try:
        data = _read_yaml(file)
        detection = detect_legacy_format(data)
        kind = LegacyFormat(detection["format"])
        if kind is LegacyFormat.UNKNOWN:
            raise SerializationError(
                f"Unrecognised streak record: {'; '.join(detection['issues'])}"
            )

        db = get_db(ctx)
        with db.session_scope():
            if kind is LegacyFormat.BASIC_LEGACY:
                db.journal.save_legacy(LegacyStreakHistory.from_dict(data))
            else:
                db.journal.save(EnhancedStreakHistory.from_dict(data))

        click.echo(
            f"✅ Stored {kind.value} record with {detection['data_points']} data points"
        )

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "import_history", {"file": str(file)})
