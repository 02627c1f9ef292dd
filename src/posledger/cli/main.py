"""Main CLI entry point."""

import click

from posledger.config import resolve_account_mapping
from posledger.database.factories import create_sqlite_database
from posledger.domain.errors import DomainError
from posledger.logging_config import configure_logging

# Import and register all commands at module level
from posledger.cli.commands import (
    accounts,
    journal,
    transaction,
    report,
    payroll,
    service,
    inventory,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides POSLEDGER_DB_PATH environment variable)",
    envvar="POSLEDGER_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="POSLEDGER_LOG_LEVEL",
    help="Log level for messages written to stderr",
)
@click.option("--log-json", is_flag=True, help="Write logs as one JSON object per line")
@click.option(
    "--account-mapping",
    type=click.Path(exists=True, dir_okay=False),
    envvar="POSLEDGER_ACCOUNT_MAPPING",
    help="YAML file mapping categories to ledger account codes",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str, log_json: bool, account_mapping: str | None):
    """Posledger - double-entry bookkeeping for shops and service desks.

    Records sales, service tickets and payroll as financial records backed
    by balanced journal entries, and reports balance sheet, income statement
    and dashboard summaries.
    """
    ctx.ensure_object(dict)
    configure_logging(level=log_level, json_output=log_json)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            ctx.obj["account_mapping"] = resolve_account_mapping(account_mapping)
        except DomainError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)

        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
accounts.register_commands(cli)
journal.register_commands(cli)
transaction.register_commands(cli)
report.register_commands(cli)
payroll.register_commands(cli)
service.register_commands(cli)
inventory.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
