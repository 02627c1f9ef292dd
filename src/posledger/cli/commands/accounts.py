"""Chart of accounts commands."""

import click

from posledger.cli.error_handling import handle_domain_error
from posledger.domain.chart import AccountRegistry
from posledger.domain.entities import AccountType
from posledger.domain.errors import DomainError
from posledger.utils.amount_parser import format_amount


@click.group()
def accounts_group():
    """Manage the chart of accounts."""
    pass


@accounts_group.command("init")
@click.pass_context
def init_accounts(ctx):
    """Seed the standard chart of accounts.

    Accounts whose code already exists are left untouched, so running this
    again is safe.
    """
    registry = AccountRegistry(ctx.obj["db"])
    created = registry.initialize_default_accounts()
    if created == 0:
        click.echo("Chart of accounts already initialized.")
    else:
        click.echo(f"Created {created} accounts.")


@accounts_group.command("list")
@click.option("--all", "include_inactive", is_flag=True, help="Include deactivated accounts")
@click.pass_context
def list_accounts(ctx, include_inactive: bool):
    """List accounts ordered by code."""
    registry = AccountRegistry(ctx.obj["db"])

    accounts = registry.get_chart_of_accounts(include_inactive=include_inactive)
    if not accounts:
        click.echo("No accounts found. Run 'posledger accounts init' first.")
        return

    click.echo("\nChart of Accounts:")
    click.echo("-" * 80)
    for acc in accounts:
        flag = "" if acc.is_active else " (inactive)"
        click.echo(
            f"{acc.code:6s} | {acc.name:36s} | {acc.type.value:9s} | {format_amount(acc.balance):>16s}{flag}"
        )


@accounts_group.command("create")
@click.argument("code")
@click.argument("name")
@click.option(
    "--type",
    "account_type",
    type=click.Choice([t.value for t in AccountType]),
    required=True,
    help="Account type",
)
@click.option("--subtype", help="Report grouping, e.g. 'cash' or 'operating_expense'")
@click.option("--normal-balance", type=click.Choice(["debit", "credit"]), help="Defaults from the type")
@click.option("--parent", "parent_code", help="Parent account code")
@click.option("--description", help="Account description")
@click.pass_context
def create_account(ctx, code, name, account_type, subtype, normal_balance, parent_code, description):
    """Create a ledger account.

    Examples:
        posledger accounts create 1113 "Petty Cash" --type asset --subtype cash --parent 1110
    """
    registry = AccountRegistry(ctx.obj["db"])
    try:
        account_id = registry.create_account(
            code=code,
            name=name,
            account_type=account_type,
            subtype=subtype,
            normal_balance=normal_balance,
            parent_code=parent_code,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account {code} '{name}' (ID: {account_id})")


@accounts_group.command("deactivate")
@click.argument("code")
@click.pass_context
def deactivate_account(ctx, code: str):
    """Deactivate an account so it no longer accepts postings."""
    registry = AccountRegistry(ctx.obj["db"])
    try:
        registry.deactivate_account(code)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deactivated account {code}")


def register_commands(cli):
    """Register chart of accounts commands with main CLI."""
    cli.add_command(accounts_group, name="accounts")
