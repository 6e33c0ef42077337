"""
Journal Commands
----------------

Edit, migrate, validate and repair the stored reading journal.

Commands:
    - checkin: Record a manual reading day
    - migrate: Upgrade the stored record to the current journal format
    - validate: Run integrity checks and show the report
    - fix: Auto-fix structural issues and save the result
"""
import sys

import click

from readlog.core.logging_manager import handle_cli_error
from readlog.reconcile.journal import record_check_in
from readlog.reconcile.migration import detect_legacy_format, migrate_legacy_data
from readlog.reconcile.streaks import calculate_streaks_from_days
from readlog.validators.integrity import IntegrityValidator
from . import CLI_ERRORS, get_clock, get_config, get_db, load_journal


@click.command()
@click.argument("day", required=False)
@click.option("--notes", default=None, help="Note to attach to the day")
@click.pass_context
def checkin(ctx, day, notes):
    """Record that you read on DAY (default: today)."""
    try:
        db = get_db(ctx)
        clock = get_clock(ctx)
        with db.session_scope():
            journal, _ = load_journal(db, clock)
            journal = record_check_in(journal, day=day, notes=notes, clock=clock)
            db.journal.save(journal)

        summary = calculate_streaks_from_days(journal.entry_dates(), clock=clock)
        key = day or clock.today().isoformat()
        click.echo(f"📖 Checked in {key}")
        click.echo(f"🔥 Current streak: {summary.current_streak} days")

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "checkin", {"day": day})


@click.command()
@click.pass_context
def migrate(ctx):
    """Upgrade the stored streak record to the current journal format."""
    try:
        db = get_db(ctx)
        clock = get_clock(ctx)
        with db.session_scope():
            raw = db.journal.load_raw("enhanced") or db.journal.load_raw("legacy")
            if raw is None:
                click.echo("⚠️  No streak record stored; nothing to migrate")
                return

            detection = detect_legacy_format(raw)
            journal = migrate_legacy_data(raw, clock=clock)
            db.journal.save(journal)

        click.echo(f"🔄 Detected format: {detection['format']}")
        click.echo(
            f"✅ Journal at version {journal.version} with "
            f"{len(journal.reading_day_entries)} entries"
        )

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "migrate")


def _print_issues(title: str, issues) -> None:
    if not issues:
        return
    click.echo(f"\n{title} ({len(issues)}):")
    for issue in issues:
        click.echo(f"  • [{issue.code}] {issue.message}")


@click.command()
@click.pass_context
def validate(ctx):
    """Check the stored journal's integrity. Exits 1 when errors are found."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            journal = db.journal.load()
            books = db.books.list()

        if journal is None:
            click.echo("⚠️  No enhanced journal stored; run 'readlog migrate' first")
            return

        validator = IntegrityValidator(
            config=get_config(ctx), clock=get_clock(ctx), logger=ctx.obj.get("logger")
        )
        report = validator.validate(journal, books)

        status = "✅ Valid" if report.is_valid else "❌ Invalid"
        click.echo(f"\n{status} (score {report.score}/100)")
        _print_issues("Errors", report.errors)
        _print_issues("Warnings", report.warnings)

        click.echo("\n💡 Recommendations:")
        for recommendation in report.recommendations:
            click.echo(f"  • {recommendation}")

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "validate")
        return

    if not report.is_valid:
        sys.exit(1)


@click.command()
@click.option("--dry-run", is_flag=True, help="Report what would be fixed without saving")
@click.pass_context
def fix(ctx, dry_run):
    """Auto-fix structural journal issues."""
    try:
        db = get_db(ctx)
        validator = IntegrityValidator(
            config=get_config(ctx), clock=get_clock(ctx), logger=ctx.obj.get("logger")
        )
        with db.session_scope():
            journal = db.journal.load()
            if journal is None:
                click.echo("⚠️  No enhanced journal stored; nothing to fix")
                return

            result = validator.auto_fix(journal)
            if not dry_run and result.fixed:
                db.journal.save(result.updated_history)

        prefix = "🔍 Would fix" if dry_run else "🔧 Fixed"
        click.echo(f"{prefix} {result.fixed} issues ({result.failed} failed)")

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "fix", {"dry_run": dry_run})
