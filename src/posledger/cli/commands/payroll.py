"""Employee and payroll commands."""

import click

from posledger.cli.date_filters import parse_cli_date
from posledger.cli.error_handling import handle_domain_error
from posledger.domain.entities import PayrollStatus
from posledger.domain.errors import DomainError
from posledger.domain.payroll import PayrollService
from posledger.domain.transaction import TransactionService
from posledger.utils.amount_parser import format_amount


def _service(ctx) -> PayrollService:
    db = ctx.obj["db"]
    return PayrollService(db, TransactionService(db, account_mapping=ctx.obj["account_mapping"]))


def _echo_payroll(payroll) -> None:
    paid = f" paid {payroll.paid_date:%Y-%m-%d}" if payroll.paid_date else ""
    click.echo(
        f"{payroll.id:5d} | {payroll.payroll_number} | employee {payroll.employee_id} | "
        f"{payroll.period_start} - {payroll.period_end} | gross {format_amount(payroll.gross_pay)} | "
        f"net {format_amount(payroll.net_pay)} | {payroll.status.value}{paid}"
    )


@click.group()
def payroll_group():
    """Manage employees and payroll."""
    pass


@payroll_group.command("add-employee")
@click.argument("name")
@click.option("--position", required=True)
@click.option("--salary", required=True, help="Monthly salary")
@click.option("--department")
@click.option("--salary-type", default="monthly", show_default=True)
@click.option("--bank-account")
@click.option("--phone")
@click.pass_context
def add_employee(ctx, name, position, salary, department, salary_type, bank_account, phone):
    """Add an employee."""
    try:
        employee = _service(ctx).create_employee(
            name=name,
            position=position,
            salary=salary,
            department=department,
            salary_type=salary_type,
            bank_account=bank_account,
            phone=phone,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created employee {employee.employee_number} '{employee.name}' (ID: {employee.id})")


@payroll_group.command("employees")
@click.option("--all", "include_inactive", is_flag=True, help="Include inactive employees")
@click.pass_context
def list_employees(ctx, include_inactive: bool):
    """List employees."""
    employees = _service(ctx).list_employees(include_inactive=include_inactive)
    if not employees:
        click.echo("No employees found.")
        return
    for employee in employees:
        click.echo(
            f"{employee.id:5d} | {employee.employee_number} | {employee.name:24s} | "
            f"{employee.position:20s} | {format_amount(employee.salary):>14s} | {employee.status}"
        )


@payroll_group.command("create")
@click.argument("employee_id", type=int)
@click.option("--start", "period_start", required=True, help="Period start date")
@click.option("--end", "period_end", required=True, help="Period end date")
@click.option("--base-salary", required=True)
@click.option("--overtime", default="0")
@click.option("--bonus", default="0")
@click.option("--allowances", default="0")
@click.option("--tax", "tax_deduction", default="0")
@click.option("--social-security", default="0")
@click.option("--health-insurance", default="0")
@click.option("--other-deductions", default="0")
@click.option("--user", "user_id", default="cli", show_default=True)
@click.pass_context
def create_payroll(ctx, employee_id, period_start, period_end, user_id, **amounts):
    """Create a draft payroll record for an employee."""
    try:
        payroll = _service(ctx).create_payroll(
            employee_id=employee_id,
            period_start=parse_cli_date(ctx, period_start, "start date"),
            period_end=parse_cli_date(ctx, period_end, "end date"),
            user_id=user_id,
            **amounts,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created payroll {payroll.payroll_number} (ID: {payroll.id})")
    _echo_payroll(payroll)


@payroll_group.command("status")
@click.argument("payroll_id", type=int)
@click.argument("status", type=click.Choice([s.value for s in PayrollStatus]))
@click.pass_context
def set_status(ctx, payroll_id: int, status: str):
    """Set the status of a payroll record."""
    try:
        payroll = _service(ctx).update_payroll_status(payroll_id, status, user_id="cli")
    except DomainError as e:
        handle_domain_error(ctx, e)
    _echo_payroll(payroll)


@payroll_group.command("pay")
@click.argument("payroll_id", type=int)
@click.pass_context
def pay(ctx, payroll_id: int):
    """Mark a payroll record paid and book its net pay."""
    ctx.invoke(set_status, payroll_id=payroll_id, status=PayrollStatus.PAID.value)


@payroll_group.command("list")
@click.option("--employee", "employee_id", type=int, help="Only this employee")
@click.pass_context
def list_payroll(ctx, employee_id: int | None):
    """List payroll records, newest first."""
    records = _service(ctx).list_payroll_records(employee_id=employee_id)
    if not records:
        click.echo("No payroll records found.")
        return
    for payroll in records:
        _echo_payroll(payroll)


def register_commands(cli):
    """Register payroll commands with main CLI."""
    cli.add_command(payroll_group, name="payroll")
