"""Financial report commands."""

import json

import click

from posledger.cli.date_filters import (
    parse_cli_date,
    period_options,
    pop_period_flags,
    resolve_cli_date_range,
)
from posledger.domain.entities import AccountGroup, to_wire
from posledger.domain.reports import ReportService
from posledger.utils.amount_parser import format_amount

json_option = click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")


def _echo_json(report) -> None:
    click.echo(json.dumps(to_wire(report), indent=2))


def _echo_section(title: str, groups: dict[str, AccountGroup], total) -> None:
    click.echo(f"\n{title}")
    click.echo("-" * 72)
    for name, group in groups.items():
        click.echo(f"  {name}")
        for line in group.accounts:
            code = line.code or ""
            click.echo(f"    {code:6s} {line.name:40s} {format_amount(line.amount):>18s}")
        click.echo(f"    {'':6s} {'Total ' + name:40s} {format_amount(group.total):>18s}")
    click.echo(f"{'Total ' + title:51s} {format_amount(total):>20s}")


@click.group()
def report_group():
    """Balance sheet, income statement and summaries."""
    pass


@report_group.command("balance-sheet")
@click.option("--as-of", "as_of", help="Rebuild balances as of this date")
@json_option
@click.pass_context
def balance_sheet(ctx, as_of: str | None, as_json: bool):
    """Show assets, liabilities and equity."""
    report = ReportService(ctx.obj["db"]).get_balance_sheet(parse_cli_date(ctx, as_of, "as-of date"))
    if as_json:
        _echo_json(report)
    else:
        heading = f"Balance Sheet as of {report.as_of_date}" if report.as_of_date else "Balance Sheet"
        click.echo(heading)
        _echo_section("Assets", report.assets, report.total_assets)
        _echo_section("Liabilities", report.liabilities, report.total_liabilities)
        _echo_section("Equity", report.equity, report.total_equity)

    if not report.balance_check:
        click.echo(
            "WARNING: assets do not equal liabilities plus equity "
            f"({format_amount(report.total_assets)} vs "
            f"{format_amount(report.total_liabilities + report.total_equity)})",
            err=True,
        )
        ctx.exit(2)


@report_group.command("income-statement")
@period_options
@json_option
@click.pass_context
def income_statement(ctx, start_date, end_date, as_json, **kwargs):
    """Show revenue and expenses for a period (default: this year to date)."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(kwargs)
    )
    report = ReportService(ctx.obj["db"]).get_income_statement(start, end)
    if as_json:
        _echo_json(report)
        return

    click.echo(f"Income Statement {report.start_date} to {report.end_date}")
    _echo_section("Revenue", report.revenue, report.total_revenue)
    _echo_section("Expenses", report.expenses, report.total_expenses)
    click.echo()
    click.echo(f"{'Gross Profit':51s} {format_amount(report.gross_profit):>20s}")
    click.echo(f"{'Net Income':51s} {format_amount(report.net_income):>20s}")


@report_group.command("summary")
@period_options
@json_option
@click.pass_context
def summary(ctx, start_date, end_date, as_json, **kwargs):
    """Show dashboard totals from financial records."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(kwargs)
    )
    report = ReportService(ctx.obj["db"]).get_summary(start, end)
    if as_json:
        _echo_json(report)
        return

    click.echo(f"Total income:     {format_amount(report.total_income):>20s}")
    click.echo(f"Total expense:    {format_amount(report.total_expense):>20s}")
    click.echo(f"Net profit:       {format_amount(report.net_profit):>20s}")
    click.echo(f"Transactions:     {report.transaction_count:>20d}")
    click.echo(f"Inventory value:  {format_amount(report.inventory_value):>20s}")
    click.echo(f"Inventory count:  {report.inventory_count:>20d}")

    if report.categories:
        click.echo("\nBy category:")
        for name, item in report.categories.items():
            click.echo(
                f"  {name[:30]:30s} income {format_amount(item.income):>16s} "
                f"expense {format_amount(item.expense):>16s} ({item.count})"
            )
    if report.payment_methods:
        click.echo("\nBy payment method:")
        for name, amount in report.payment_methods.items():
            click.echo(f"  {name[:30]:30s} {format_amount(amount):>16s}")


@report_group.command("trial-balance")
@click.option("--as-of", "as_of", help="Only journal lines dated on or before this date")
@json_option
@click.pass_context
def trial_balance(ctx, as_of: str | None, as_json: bool):
    """Show debit and credit totals per account."""
    report = ReportService(ctx.obj["db"]).get_trial_balance(parse_cli_date(ctx, as_of, "as-of date"))
    if as_json:
        _echo_json(report)
        return

    for row in report.rows:
        click.echo(
            f"{row.code:6s} {row.name[:36]:36s} {format_amount(row.debit_total):>16s} "
            f"{format_amount(row.credit_total):>16s}"
        )
    click.echo("-" * 78)
    click.echo(
        f"{'Total':43s} {format_amount(report.total_debits):>16s} {format_amount(report.total_credits):>16s}"
    )
    click.echo("Balanced" if report.is_balanced else "NOT BALANCED")


@report_group.command("reconcile")
@click.pass_context
def reconcile(ctx):
    """Compare running balances with a replay of the journal."""
    drifts = ReportService(ctx.obj["db"]).reconcile_balances()
    if not drifts:
        click.echo("All account balances match the journal.")
        return

    for drift in drifts:
        click.echo(
            f"{drift.code:6s} {drift.name[:36]:36s} recorded {format_amount(drift.recorded_balance):>16s} "
            f"journal {format_amount(drift.replayed_balance):>16s}"
        )
    ctx.exit(2)


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
