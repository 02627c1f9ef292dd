"""Service ticket commands."""

import click

from posledger.cli.error_handling import handle_domain_error
from posledger.domain.entities import PartUsage
from posledger.domain.errors import DomainError
from posledger.domain.recorders import ServiceRecorder
from posledger.domain.transaction import TransactionService
from posledger.utils.amount_parser import format_amount, parse_amount


def _recorder(ctx) -> ServiceRecorder:
    db = ctx.obj["db"]
    return ServiceRecorder(db, TransactionService(db, account_mapping=ctx.obj["account_mapping"]))


def _parse_part(ctx, value: str) -> PartUsage:
    """Parse NAME:QTY:COST:PRICE; the name may itself contain colons."""
    parts = value.rsplit(":", 3)
    if len(parts) != 4 or not parts[0]:
        click.echo(f"Error: Invalid part '{value}'. Expected NAME:QTY:COST:PRICE", err=True)
        ctx.exit(1)
    name, quantity, cost, price = parts
    try:
        return PartUsage(
            name=name,
            quantity=int(quantity),
            selling_price=parse_amount(price),
            cost_price=parse_amount(cost or "0"),
        )
    except ValueError as e:
        click.echo(f"Error: Invalid part '{value}': {e}", err=True)
        ctx.exit(1)


def _echo_record(label: str, record, none_message: str = "already recorded") -> None:
    if record is None:
        click.echo(f"{label}: {none_message}")
    else:
        click.echo(f"{label}: {format_amount(record.amount)} (ID: {record.id})")


part_option = click.option(
    "--part",
    "parts",
    multiple=True,
    help="Consumed part as NAME:QTY:COST:PRICE (repeatable)",
)


@click.group()
def service_group():
    """Book service ticket events."""
    pass


@service_group.command("complete")
@click.argument("service_id")
@click.option("--amount", help="Repair service income")
@click.option("--description", default="Service", show_default=True)
@click.option("--labor", help="Labor charge")
@part_option
@click.option("--user", "user_id", default="cli", show_default=True)
@click.pass_context
def complete(ctx, service_id, amount, description, labor, parts, user_id):
    """Book the income, labor and parts of a completed ticket.

    Running it again for the same ticket books nothing new.

    Examples:
        posledger service complete SVC-1 --labor 150000 --part "HDD 1TB:2:150000:250000"
    """
    recorder = _recorder(ctx)
    usages = [_parse_part(ctx, part) for part in parts]
    try:
        if amount is not None:
            _echo_record("Service income", recorder.record_service_income(service_id, amount, description, user_id))
        if labor is not None:
            _echo_record(
                "Labor",
                recorder.record_labor_cost(service_id, labor, description, user_id),
                none_message="nothing recorded",
            )
        for usage in usages:
            result = recorder.record_parts_cost(
                service_id, usage.name, usage.quantity, usage.cost_price, usage.selling_price, user_id
            )
            _echo_record(f"Parts cost {usage.name}", result.cost)
            _echo_record(f"Parts sale {usage.name}", result.revenue)
    except DomainError as e:
        handle_domain_error(ctx, e)


@service_group.command("cancel")
@click.argument("service_id")
@click.option("--fee", default="0", show_default=True, help="Cancellation fee charged")
@click.option("--reason", required=True)
@click.option("--after-completion", is_flag=True, help="Reverse a ticket that was already completed")
@click.option("--warranty", is_flag=True, help="Refund a completed ticket under warranty")
@click.option("--labor", default="0", show_default=True, help="Original labor charge to reverse or refund")
@click.option("--parts-cost", default="0", show_default=True, help="Original parts charge refunded under warranty")
@part_option
@click.option("--user", "user_id", default="cli", show_default=True)
@click.pass_context
def cancel(ctx, service_id, fee, reason, after_completion, warranty, labor, parts_cost, parts, user_id):
    """Book the cancellation of a ticket.

    With --warranty the labor and parts income already booked for the ticket
    is reversed and every --part is written off as damaged goods.

    Examples:
        posledger service cancel SVC-1 --reason "Screen still flickers" --warranty --labor 100000 \\
            --parts-cost 600000 --part "LCD 14in:1:400000:600000"
    """
    if after_completion and warranty:
        click.echo("Error: --after-completion and --warranty cannot be combined", err=True)
        ctx.exit(1)

    recorder = _recorder(ctx)
    usages = [_parse_part(ctx, part) for part in parts]
    try:
        if warranty:
            result = recorder.record_service_cancellation_warranty_refund(
                service_id, fee, labor, parts_cost, reason, usages, user_id
            )
        elif after_completion:
            result = recorder.record_service_cancellation_after_completed(
                service_id, fee, reason, labor, usages, user_id
            )
        else:
            if usages:
                click.echo("Error: --part requires --after-completion or --warranty", err=True)
                ctx.exit(1)
            _echo_record(
                "Cancellation fee",
                recorder.record_service_cancellation(service_id, fee, reason, user_id),
                none_message="nothing recorded",
            )
            return
    except DomainError as e:
        handle_domain_error(ctx, e)

    if result is None:
        click.echo("Cancellation already recorded")
        return
    click.echo(f"Created {len(result.records)} records")
    if result.journal_entry is not None:
        click.echo(f"Journal entry {result.journal_entry.journal_number} (ID: {result.journal_entry.id})")


def register_commands(cli):
    """Register service ticket commands with main CLI."""
    cli.add_command(service_group, name="service")
