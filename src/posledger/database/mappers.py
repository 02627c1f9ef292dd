"""Mapper functions to convert SQLAlchemy models into domain entities.

This layer isolates the conversion logic so services never see ORM objects.
"""

from decimal import Decimal
from typing import Any, Optional

from posledger.domain import entities as domain
from posledger.database.models import (
    Account as ORMAccount,
    JournalEntry as ORMJournalEntry,
    JournalEntryLine as ORMJournalEntryLine,
    FinancialRecord as ORMFinancialRecord,
    Product as ORMProduct,
    Employee as ORMEmployee,
    PayrollRecord as ORMPayrollRecord,
    AttendanceRecord as ORMAttendanceRecord,
)


def to_decimal(value: Any) -> Decimal:
    """Coerce a stored numeric (Decimal, float on some drivers, None) to Decimal."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _optional_decimal(value: Any) -> Optional[Decimal]:
    return None if value is None else to_decimal(value)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        code=orm_account.code,
        name=orm_account.name,
        type=domain.AccountType(orm_account.type),
        subtype=orm_account.subtype,
        normal_balance=domain.NormalBalance(orm_account.normal_balance),
        balance=to_decimal(orm_account.balance),
        is_active=orm_account.is_active,
        parent_code=orm_account.parent_code,
        description=orm_account.description,
        created_at=orm_account.created_at,
        updated_at=orm_account.updated_at,
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model to domain JournalEntry entity."""
    return domain.JournalEntry(
        id=orm_entry.id,
        journal_number=orm_entry.journal_number,
        date=orm_entry.date,
        description=orm_entry.description,
        reference=orm_entry.reference,
        reference_type=orm_entry.reference_type,
        total_amount=to_decimal(orm_entry.total_amount),
        status=orm_entry.status,
        user_id=orm_entry.user_id,
        created_at=orm_entry.created_at,
    )


def journal_line_to_domain(orm_line: ORMJournalEntryLine) -> domain.JournalEntryLine:
    """Convert SQLAlchemy JournalEntryLine model to domain JournalEntryLine entity."""
    return domain.JournalEntryLine(
        id=orm_line.id,
        journal_entry_id=orm_line.journal_entry_id,
        account_id=orm_line.account_id,
        account_code=orm_line.account.code,
        description=orm_line.description,
        debit_amount=to_decimal(orm_line.debit_amount),
        credit_amount=to_decimal(orm_line.credit_amount),
    )


def financial_record_to_domain(orm_record: ORMFinancialRecord) -> domain.FinancialRecord:
    """Convert SQLAlchemy FinancialRecord model to domain FinancialRecord entity."""
    return domain.FinancialRecord(
        id=orm_record.id,
        type=domain.RecordType(orm_record.type),
        category=orm_record.category,
        subcategory=orm_record.subcategory,
        amount=to_decimal(orm_record.amount),
        description=orm_record.description,
        reference=orm_record.reference,
        reference_type=orm_record.reference_type,
        payment_method=orm_record.payment_method,
        tags=tuple(orm_record.tags or ()),
        status=orm_record.status,
        journal_entry_id=orm_record.journal_entry_id,
        user_id=orm_record.user_id,
        created_at=orm_record.created_at,
    )


def product_to_domain(orm_product: ORMProduct) -> domain.Product:
    """Convert SQLAlchemy Product model to domain Product entity."""
    return domain.Product(
        id=orm_product.id,
        name=orm_product.name,
        sku=orm_product.sku,
        stock=orm_product.stock,
        average_cost=_optional_decimal(orm_product.average_cost),
        selling_price=_optional_decimal(orm_product.selling_price),
        is_active=orm_product.is_active,
    )


def employee_to_domain(orm_employee: ORMEmployee) -> domain.Employee:
    """Convert SQLAlchemy Employee model to domain Employee entity."""
    return domain.Employee(
        id=orm_employee.id,
        employee_number=orm_employee.employee_number,
        name=orm_employee.name,
        position=orm_employee.position,
        department=orm_employee.department,
        salary=to_decimal(orm_employee.salary),
        salary_type=orm_employee.salary_type,
        join_date=orm_employee.join_date,
        status=orm_employee.status,
        bank_account=orm_employee.bank_account,
        phone=orm_employee.phone,
    )


def payroll_to_domain(orm_payroll: ORMPayrollRecord) -> domain.PayrollRecord:
    """Convert SQLAlchemy PayrollRecord model to domain PayrollRecord entity."""
    return domain.PayrollRecord(
        id=orm_payroll.id,
        employee_id=orm_payroll.employee_id,
        payroll_number=orm_payroll.payroll_number,
        period_start=orm_payroll.period_start,
        period_end=orm_payroll.period_end,
        base_salary=to_decimal(orm_payroll.base_salary),
        overtime=to_decimal(orm_payroll.overtime),
        bonus=to_decimal(orm_payroll.bonus),
        allowances=to_decimal(orm_payroll.allowances),
        gross_pay=to_decimal(orm_payroll.gross_pay),
        tax_deduction=to_decimal(orm_payroll.tax_deduction),
        social_security=to_decimal(orm_payroll.social_security),
        health_insurance=to_decimal(orm_payroll.health_insurance),
        other_deductions=to_decimal(orm_payroll.other_deductions),
        net_pay=to_decimal(orm_payroll.net_pay),
        status=domain.PayrollStatus(orm_payroll.status),
        paid_date=orm_payroll.paid_date,
        notes=orm_payroll.notes,
        user_id=orm_payroll.user_id,
        created_at=orm_payroll.created_at,
    )


def attendance_to_domain(orm_attendance: ORMAttendanceRecord) -> domain.AttendanceRecord:
    """Convert SQLAlchemy AttendanceRecord model to domain AttendanceRecord entity."""
    return domain.AttendanceRecord(
        id=orm_attendance.id,
        employee_id=orm_attendance.employee_id,
        date=orm_attendance.date,
        clock_in=orm_attendance.clock_in,
        clock_out=orm_attendance.clock_out,
        hours_worked=to_decimal(orm_attendance.hours_worked),
        overtime_hours=to_decimal(orm_attendance.overtime_hours),
        status=orm_attendance.status,
        notes=orm_attendance.notes,
    )
