"""Journal entry commands."""

import click

from posledger.cli.date_filters import parse_cli_date
from posledger.cli.error_handling import handle_domain_error
from posledger.domain.errors import DomainError
from posledger.domain.journal import JournalService
from posledger.utils.amount_parser import format_amount


def _parse_line(ctx, value: str) -> dict[str, str]:
    """Parse CODE:DEBIT:CREDIT into a journal line mapping."""
    parts = value.split(":")
    if len(parts) != 3 or not parts[0]:
        click.echo(f"Error: Invalid line '{value}'. Expected CODE:DEBIT:CREDIT", err=True)
        ctx.exit(1)
    code, debit, credit = parts
    return {"account_code": code, "debit_amount": debit or "0", "credit_amount": credit or "0"}


@click.group()
def journal_group():
    """Post and inspect journal entries."""
    pass


@journal_group.command("post")
@click.option("--description", required=True, help="Entry description")
@click.option(
    "--line",
    "lines",
    multiple=True,
    required=True,
    help="Journal line as CODE:DEBIT:CREDIT, e.g. 1111:100000:0 (repeatable)",
)
@click.option("--reference", help="External reference id")
@click.option("--reference-type", help="Tag of the originating event")
@click.option("--date", "entry_date", help="Entry date (defaults to today)")
@click.option("--user", "user_id", default="cli", show_default=True, help="User posting the entry")
@click.pass_context
def post_entry(ctx, description, lines, reference, reference_type, entry_date, user_id):
    """Post a balanced journal entry.

    Examples:
        posledger journal post --description "Owner capital" --line 1111:5000000:0 --line 3100:0:5000000
    """
    service = JournalService(ctx.obj["db"])
    parsed = [_parse_line(ctx, line) for line in lines]
    try:
        entry = service.create_journal_entry(
            description=description,
            lines=parsed,
            user_id=user_id,
            reference=reference,
            reference_type=reference_type,
            entry_date=parse_cli_date(ctx, entry_date, "date"),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Posted {entry.journal_number} (ID: {entry.id}) for {format_amount(entry.total_amount)}")


@journal_group.command("list")
@click.option("--start-date", help="Start date")
@click.option("--end-date", help="End date")
@click.option("--reference-type", help="Only entries with this reference type")
@click.pass_context
def list_entries(ctx, start_date, end_date, reference_type):
    """List journal entries, newest first."""
    service = JournalService(ctx.obj["db"])
    entries = service.list_journal_entries(
        start_date=parse_cli_date(ctx, start_date, "start date"),
        end_date=parse_cli_date(ctx, end_date, "end date"),
        reference_type=reference_type,
    )
    if not entries:
        click.echo("No journal entries found.")
        return

    for entry in entries:
        click.echo(
            f"{entry.id:5d} | {entry.date} | {entry.journal_number:32s} | "
            f"{format_amount(entry.total_amount):>16s} | {entry.description}"
        )


@journal_group.command("show")
@click.argument("entry_id", type=int)
@click.pass_context
def show_entry(ctx, entry_id: int):
    """Show a journal entry with its lines."""
    service = JournalService(ctx.obj["db"])
    try:
        entry = service.get_journal_entry(entry_id)
        lines = service.get_journal_lines(entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"{entry.journal_number}  {entry.date}  {entry.status}")
    click.echo(entry.description)
    if entry.reference_type:
        click.echo(f"Reference: {entry.reference_type} {entry.reference}")
    click.echo("-" * 80)
    for line in lines:
        debit = format_amount(line.debit_amount) if line.debit_amount else ""
        credit = format_amount(line.credit_amount) if line.credit_amount else ""
        click.echo(f"{line.account_code:6s} | {line.description[:36]:36s} | {debit:>14s} | {credit:>14s}")
    click.echo("-" * 80)
    click.echo(f"Total: {format_amount(entry.total_amount)}")


def register_commands(cli):
    """Register journal commands with main CLI."""
    cli.add_command(journal_group, name="journal")
