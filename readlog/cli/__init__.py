#!/usr/bin/env python3
"""
Readlog CLI
-----------

Command-line interface for the reading activity reconciliation engine.

Loads books and streak records from the database, runs the engine, and
saves results. Engine functions never touch the database themselves.

Command Structure:
    - Data: import-books, import-history
    - Journal: checkin, migrate, validate, fix
    - Queries: streak, range, aggregate, patterns, stats

Usage:
    readlog import-books books.yaml
    readlog checkin
    readlog streak
    readlog range 2024-01-01 2024-01-31
    readlog aggregate --by monthly
    readlog validate
    readlog fix
"""
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple, Union

import click
import yaml

from readlog.configs.engine_configs import EngineConfig, load_engine_config
from readlog.core.cli import setup_logger
from readlog.core.clock import Clock, FixedClock, SystemClock
from readlog.core.exceptions import (
    BulkOperationError,
    ConfigError,
    DatabaseError,
    MigrationError,
    SerializationError,
    ValidationError,
)
from readlog.core.paths import CONFIG_PATH, DB_PATH, LOG_DIR
from readlog.core.validators import DataValidator
from readlog.database import ReadlogDB
from readlog.dataclasses.streak_history import EnhancedStreakHistory, LegacyStreakHistory
from readlog.reconcile.journal import create_empty_enhanced_streak_history
from readlog.reconcile.migration import ensure_enhanced_streak_history

# Errors a command reports through handle_cli_error instead of a traceback
CLI_ERRORS = (
    BulkOperationError,
    ConfigError,
    DatabaseError,
    MigrationError,
    SerializationError,
    ValidationError,
    yaml.YAMLError,
    OSError,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    default=str(DB_PATH),
    help="Path to database file",
)
@click.option(
    "--log-dir",
    type=click.Path(),
    default=str(LOG_DIR),
    help="Path to log directory",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(),
    default=str(CONFIG_PATH),
    help="YAML file with engine threshold overrides",
)
@click.option(
    "--today",
    default=None,
    help="Treat this YYYY-MM-DD date as today (reproducible reports)",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show detailed errors and tracebacks",
)
@click.pass_context
def cli(ctx, db_path, log_dir, config_path, today, verbose):
    """Readlog - reading activity reconciliation"""
    ctx.ensure_object(dict)
    ctx.obj["db_path"] = Path(db_path)
    ctx.obj["log_dir"] = Path(log_dir)
    ctx.obj["config_path"] = Path(config_path)
    ctx.obj["today"] = today
    ctx.obj["verbose"] = verbose
    ctx.obj["logger"] = setup_logger(Path(log_dir), "cli", verbose=verbose)


def get_db(ctx) -> ReadlogDB:
    """Get or create database instance from context."""
    if "db" not in ctx.obj:
        ctx.obj["db"] = ReadlogDB(
            db_path=ctx.obj["db_path"],
            log_dir=ctx.obj["log_dir"],
        )
    return ctx.obj["db"]


def get_config(ctx) -> EngineConfig:
    """Engine thresholds, loaded once per invocation."""
    if "config" not in ctx.obj:
        ctx.obj["config"] = load_engine_config(ctx.obj["config_path"])
    return ctx.obj["config"]


def get_clock(ctx) -> Clock:
    """Fixed clock at noon of --today when given, else the system clock."""
    if "clock" not in ctx.obj:
        today = ctx.obj.get("today")
        if today:
            day = DataValidator.parse_iso_date(today)
            ctx.obj["clock"] = FixedClock(datetime(day.year, day.month, day.day, 12, 0))
        else:
            ctx.obj["clock"] = SystemClock()
    return ctx.obj["clock"]


def load_history(db: ReadlogDB) -> Optional[Union[EnhancedStreakHistory, LegacyStreakHistory]]:
    """Stored enhanced journal, else stored legacy record, else None."""
    return db.journal.load_any()


def load_journal(db: ReadlogDB, clock: Clock) -> Tuple[EnhancedStreakHistory, bool]:
    """
    Journal to edit: the stored one, a migrated legacy record, or a new one.

    Returns:
        (journal, created) where created is True when nothing was stored
    """
    stored = db.journal.load_any()
    if stored is None:
        return create_empty_enhanced_streak_history(clock), True
    return ensure_enhanced_streak_history(stored, clock), False


# Import and register command modules
# These imports must come after CLI group definition
from .data import import_books, import_history  # noqa: E402
from .journal import checkin, fix, migrate, validate  # noqa: E402
from .queries import aggregate, patterns, range_, stats, streak  # noqa: E402

cli.add_command(import_books)
cli.add_command(import_history)
cli.add_command(checkin)
cli.add_command(migrate)
cli.add_command(validate)
cli.add_command(fix)
cli.add_command(streak)
cli.add_command(range_)
cli.add_command(aggregate)
cli.add_command(patterns)
cli.add_command(stats)


if __name__ == "__main__":
    cli(obj={})
