"""Financial record commands."""

import click

from posledger.cli.date_filters import period_options, pop_period_flags, resolve_cli_date_range
from posledger.cli.error_handling import handle_domain_error
from posledger.domain.entities import RecordType
from posledger.domain.errors import DomainError
from posledger.domain.transaction import TransactionService
from posledger.utils.amount_parser import format_amount


def _service(ctx) -> TransactionService:
    return TransactionService(ctx.obj["db"], account_mapping=ctx.obj["account_mapping"])


@click.group()
def transaction_group():
    """Record and list income, expenses and transfers."""
    pass


@transaction_group.command("add")
@click.option(
    "--type", "record_type", type=click.Choice([t.value for t in RecordType]), required=True
)
@click.option("--category", required=True, help="Category, e.g. 'Sales Revenue'")
@click.option("--amount", required=True, help="Amount as a decimal string, e.g. 150000 or 1,250.50")
@click.option("--description", required=True, help="Description")
@click.option("--subcategory", help="Subcategory")
@click.option("--payment-method", help="cash, bank_transfer, card, ...")
@click.option("--reference", help="External reference id")
@click.option("--reference-type", help="Tag of the originating event")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable)")
@click.option("--from-account", "from_account_code", help="Transfer source account code")
@click.option("--to-account", "to_account_code", help="Transfer destination account code")
@click.option("--user", "user_id", default="cli", show_default=True)
@click.pass_context
def add_transaction(
    ctx,
    record_type,
    category,
    amount,
    description,
    subcategory,
    payment_method,
    reference,
    reference_type,
    tags,
    from_account_code,
    to_account_code,
    user_id,
):
    """Record a financial transaction and post its journal entry.

    Examples:
        posledger transaction add --type income --category "Sales Revenue" --amount 250000 --description "Mouse" --payment-method cash
        posledger transaction add --type transfer --category Transfer --amount 1000000 --description "Deposit" --from-account 1111 --to-account 1112
    """
    service = _service(ctx)
    try:
        record = service.create_transaction(
            record_type=record_type,
            category=category,
            amount=amount,
            description=description,
            user_id=user_id,
            subcategory=subcategory,
            reference_type=reference_type,
            reference=reference,
            payment_method=payment_method,
            tags=list(tags) or None,
            from_account_code=from_account_code,
            to_account_code=to_account_code,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Recorded {record.type.value} {format_amount(record.amount)} (ID: {record.id})")
    if record.journal_entry_id is None:
        click.echo("Warning: no journal entry was posted for this record", err=True)
    else:
        click.echo(f"Journal entry ID: {record.journal_entry_id}")


@transaction_group.command("list")
@period_options
@click.option("--type", "record_type", type=click.Choice([t.value for t in RecordType]))
@click.option("--category", help="Only this category")
@click.option("--reference-type", help="Only this reference type")
@click.pass_context
def list_transactions(ctx, start_date, end_date, record_type, category, reference_type, **kwargs):
    """List financial records, newest first."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(kwargs)
    )
    records = _service(ctx).get_transactions(
        record_type=record_type,
        category=category,
        reference_type=reference_type,
        start_date=start,
        end_date=end,
    )
    if not records:
        click.echo("No transactions found.")
        return

    for record in records:
        journal = "-" if record.journal_entry_id is None else str(record.journal_entry_id)
        click.echo(
            f"{record.id:5d} | {record.created_at:%Y-%m-%d} | {record.type.value:8s} | "
            f"{record.category[:24]:24s} | {format_amount(record.amount):>16s} | JE {journal:>5s} | "
            f"{record.description}"
        )


@transaction_group.command("categories")
@click.pass_context
def list_categories(ctx):
    """List the income and expense categories in use."""
    income, expense = _service(ctx).get_financial_categories()
    click.echo("Income categories:")
    for category in income:
        click.echo(f"  {category}")
    click.echo("Expense categories:")
    for category in expense:
        click.echo(f"  {category}")


@transaction_group.command("clear-service")
@click.argument("service_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def clear_service(ctx, service_id: str, yes: bool):
    """Delete every financial record referencing a service ticket."""
    if not yes and not click.confirm(f"Delete all financial records for service {service_id}?"):
        click.echo("Cancelled.")
        return
    deleted = _service(ctx).clear_service_records(service_id)
    click.echo(f"Deleted {deleted} records")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
