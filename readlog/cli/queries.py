"""
Query Commands
--------------

Read-only reports over the merged reading day map. Each command merges
the stored streak record with the book list, then queries the result.

Commands:
    - streak: Current and longest streak
    - range: Reading days between two dates
    - aggregate: Reading days and books per day, month or year
    - patterns: Weekday histogram and habits
    - stats: Reading statistics
"""
import click

from readlog.core.logging_manager import handle_cli_error
from readlog.dataclasses.reading_day import ReadingDayMap
from readlog.reconcile.merger import merge_reading_data
from readlog.reconcile.queries import (
    Granularity,
    aggregate_by_period,
    find_reading_patterns,
    get_extended_reading_statistics,
    get_reading_days_in_range,
    get_reading_statistics,
)
from readlog.reconcile.streaks import calculate_streaks_from_days
from . import CLI_ERRORS, get_clock, get_config, get_db, load_history


def _merged(ctx) -> ReadingDayMap:
    db = get_db(ctx)
    with db.session_scope():
        history = load_history(db)
        books = db.books.list()
    return merge_reading_data(
        history,
        books,
        clock=get_clock(ctx),
        config=get_config(ctx),
        logger=ctx.obj.get("logger"),
    )


@click.command()
@click.pass_context
def streak(ctx):
    """Show current and longest reading streaks."""
    try:
        day_map = _merged(ctx)
        summary = calculate_streaks_from_days(day_map.keys(), clock=get_clock(ctx))

        click.echo(f"\n🔥 Current streak: {summary.current_streak} days")
        click.echo(f"🏆 Longest streak: {summary.longest_streak} days")
        last = summary.last_read_date.isoformat() if summary.last_read_date else "never"
        click.echo(f"📅 Last read: {last}")

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "streak")


@click.command("range")
@click.argument("start")
@click.argument("end")
@click.pass_context
def range_(ctx, start, end):
    """List reading days from START to END (inclusive, YYYY-MM-DD)."""
    try:
        entries = get_reading_days_in_range(start, end, _merged(ctx))

        if not entries:
            click.echo(f"No reading days between {start} and {end}")
            return

        click.echo(f"\n📅 {len(entries)} reading days:\n")
        for entry in entries:
            kinds = ", ".join(kind.value for kind in entry.source_kinds)
            books = f"  books: {', '.join(str(b) for b in entry.book_ids)}" if entry.book_ids else ""
            click.echo(f"  {entry.date}  [{kinds}]{books}")

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "range", {"start": start, "end": end})


@click.command()
@click.option(
    "--by",
    "granularity",
    type=click.Choice(Granularity.choices()),
    default=Granularity.MONTHLY.value,
    show_default=True,
    help="Bucket size",
)
@click.pass_context
def aggregate(ctx, granularity):
    """Count reading days and distinct books per bucket."""
    try:
        buckets = aggregate_by_period(_merged(ctx), granularity)

        if not buckets:
            click.echo("No reading days recorded")
            return

        click.echo(f"\n📊 Reading by {Granularity(granularity).name.lower()} bucket:\n")
        for key, bucket in buckets.items():
            click.echo(
                f"  {key}: {bucket['reading_days']:4d} days, {len(bucket['books']):3d} books"
            )

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "aggregate", {"granularity": granularity})


@click.command()
@click.pass_context
def patterns(ctx):
    """Show weekday reading pattern and habits."""
    try:
        result = find_reading_patterns(_merged(ctx), clock=get_clock(ctx))

        click.echo("\n📆 Weekday pattern:\n")
        for weekday, count in result["weekday_pattern"].items():
            click.echo(f"  {weekday:<9} {count:4d}")

        habits = result["reading_habits"]
        preferred = ", ".join(habits["preferred_reading_days"]) or "none"
        click.echo(f"\n⭐ Preferred days: {preferred}")
        click.echo(f"🛋️  Weekend share: {habits['weekend_ratio']:.0%}")

        analysis = result["streak_analysis"]
        click.echo(
            f"🔥 {analysis['total_streaks']} streaks, "
            f"average {analysis['average_streak_length']} days"
        )

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "patterns")


@click.command()
@click.option("--extended", is_flag=True, help="Include frequency, consistency and peaks")
@click.pass_context
def stats(ctx, extended):
    """Show reading statistics."""
    try:
        day_map = _merged(ctx)
        if extended:
            result = get_extended_reading_statistics(day_map, clock=get_clock(ctx))
        else:
            result = get_reading_statistics(day_map)

        click.echo("\n📊 Reading Statistics:\n")
        click.echo(f"  Reading days: {result['total_reading_days']}")
        click.echo(f"  Books: {result['total_books']}")
        for kind, count in result["source_breakdown"].items():
            click.echo(f"  • {kind}: {count}")

        bounds = result["date_range"]
        if bounds["earliest"]:
            click.echo(f"  Range: {bounds['earliest']} → {bounds['latest']}")

        if extended:
            click.echo(f"\n  Weekly frequency: {result['weekly_frequency']}")
            click.echo(f"  Monthly frequency: {result['monthly_frequency']}")
            click.echo(f"  Consistency: {result['consistency_score']:.0%}")
            if result["most_active_month"]:
                click.echo(f"  Most active month: {result['most_active_month']}")
                click.echo(f"  Most active year: {result['most_active_year']}")

    except CLI_ERRORS as e:
        handle_cli_error(ctx, e, "stats", {"extended": extended})
