"""CLI helpers for date range resolution."""

from datetime import date

import click

from posledger.utils.date_parser import PERIODS, get_date_range, parse_date


def period_options(func):
    """Add --start-date/--end-date and the --this-month style period flags."""
    for period in reversed(PERIODS):
        func = click.option(
            f"--{period}", period.replace("-", "_"), is_flag=True, help=f"Limit to {period.replace('-', ' ')}"
        )(func)
    func = click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")(func)
    func = click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")(func)
    return func


def pop_period_flags(kwargs: dict) -> dict[str, bool]:
    """Remove the period flags added by ``period_options`` from command kwargs."""
    return {period: kwargs.pop(period.replace("-", "_")) for period in PERIODS}


def parse_cli_date(ctx, value: str | None, label: str) -> date | None:
    """Parse an optional date option, exiting with an error if it is invalid."""
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    selected = [period for period, is_set in period_flags.items() if is_set]

    if len(selected) > 1:
        click.echo(
            "Error: Only one period option (--this-month, --this-year, --this-week, --last-month, --last-year, --last-week) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if selected and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-month, --this-year, etc.) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if selected:
        return get_date_range(selected[0])

    start = parse_cli_date(ctx, start_date, "start date")
    end = parse_cli_date(ctx, end_date, "end date")
    if start is None and end is None and default_range is not None:
        start, end = default_range
    return start, end
