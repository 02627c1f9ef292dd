"""Employee, payroll and attendance domain service."""

import uuid
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Optional

from posledger.database.base import Database
from posledger.domain.entities import (
    ZERO,
    AttendanceRecord,
    Employee,
    PayrollRecord,
    PayrollStatus,
    RecordType,
)
from posledger.domain.errors import (
    NotFoundError,
    ValidationError,
    employee_not_found,
    invalid_choice,
    payroll_not_found,
)
from posledger.domain.transaction import TransactionService, parse_record_amount
from posledger.logging_config import get_logger

logger = get_logger(__name__)

PAYROLL_REFERENCE = "payroll"
SYSTEM_USER = "system"


def _generate_number(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"


class PayrollService:
    """Service for employees, payroll runs and attendance."""

    def __init__(self, db: Database, transactions: Optional[TransactionService] = None):
        """Initialize payroll service.

        Args:
            db: Database instance
            transactions: Recorder used to book paid payroll
        """
        self.db = db
        self.transactions = transactions or TransactionService(db)

    # Employees
    def create_employee(
        self,
        name: str,
        position: str,
        salary: str | Decimal,
        department: Optional[str] = None,
        salary_type: str = "monthly",
        join_date: Optional[date] = None,
        bank_account: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Employee:
        """Create an employee with a generated employee number."""
        if not name.strip():
            raise ValidationError("Employee name cannot be empty")
        employee_id = self.db.create_employee(
            employee_number=_generate_number("EMP"),
            name=name.strip(),
            position=position,
            salary=parse_record_amount(salary),
            department=department,
            salary_type=salary_type,
            join_date=join_date,
            bank_account=bank_account,
            phone=phone,
        )
        return self.get_employee(employee_id)

    def get_employee(self, employee_id: int) -> Employee:
        employee = self.db.get_employee(employee_id)
        if employee is None:
            raise NotFoundError(employee_not_found(employee_id))
        return employee

    def list_employees(self, include_inactive: bool = False) -> list[Employee]:
        return self.db.list_employees(include_inactive=include_inactive)

    def update_employee(self, employee_id: int, **fields) -> Employee:
        """Update employee fields such as position, salary or status.

        Raises:
            NotFoundError: If the employee does not exist
            ValidationError: If a field is unknown or the salary is invalid
        """
        if "salary" in fields:
            fields["salary"] = parse_record_amount(fields["salary"])
        self.db.update_employee(employee_id, **fields)
        return self.get_employee(employee_id)

    # Payroll
    def create_payroll(
        self,
        employee_id: int,
        period_start: date,
        period_end: date,
        base_salary: str | Decimal,
        overtime: str | Decimal = "0",
        bonus: str | Decimal = "0",
        allowances: str | Decimal = "0",
        tax_deduction: str | Decimal = "0",
        social_security: str | Decimal = "0",
        health_insurance: str | Decimal = "0",
        other_deductions: str | Decimal = "0",
        user_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> PayrollRecord:
        """Create a draft payroll record.

        Gross pay is base salary plus overtime, bonus and allowances; net pay
        is gross pay less tax, social security, health insurance and other
        deductions.

        Raises:
            NotFoundError: If the employee does not exist
            ValidationError: If an amount is invalid or the period is reversed
        """
        self.get_employee(employee_id)
        if period_end < period_start:
            raise ValidationError("Payroll period end must not be before its start")

        earnings = {
            "base_salary": parse_record_amount(base_salary),
            "overtime": parse_record_amount(overtime),
            "bonus": parse_record_amount(bonus),
            "allowances": parse_record_amount(allowances),
        }
        deductions = {
            "tax_deduction": parse_record_amount(tax_deduction),
            "social_security": parse_record_amount(social_security),
            "health_insurance": parse_record_amount(health_insurance),
            "other_deductions": parse_record_amount(other_deductions),
        }
        gross_pay = sum(earnings.values(), ZERO)
        net_pay = gross_pay - sum(deductions.values(), ZERO)
        if net_pay < ZERO:
            raise ValidationError(f"Deductions exceed gross pay of {gross_pay}")

        payroll_id = self.db.create_payroll_record(
            employee_id=employee_id,
            payroll_number=_generate_number("PAY"),
            period_start=period_start,
            period_end=period_end,
            gross_pay=gross_pay,
            net_pay=net_pay,
            status=PayrollStatus.DRAFT.value,
            notes=notes,
            user_id=user_id,
            **earnings,
            **deductions,
        )
        return self.get_payroll(payroll_id)

    def get_payroll(self, payroll_id: int) -> PayrollRecord:
        payroll = self.db.get_payroll_record(payroll_id)
        if payroll is None:
            raise NotFoundError(payroll_not_found(payroll_id))
        return payroll

    def list_payroll_records(self, employee_id: Optional[int] = None) -> list[PayrollRecord]:
        return self.db.list_payroll_records(employee_id=employee_id)

    def update_payroll_status(
        self, payroll_id: int, status: str, user_id: Optional[str] = None
    ) -> PayrollRecord:
        """Move a payroll record to draft, approved or paid.

        Marking it paid stamps the paid date and books the net pay as a
        Payroll expense exactly once, however often the status is set.

        Args:
            payroll_id: Payroll record ID
            status: New status
            user_id: User booking the expense when the payroll has none

        Raises:
            ValidationError: If the status is unknown
            NotFoundError: If the payroll record does not exist
        """
        statuses = [s.value for s in PayrollStatus]
        if status not in statuses:
            raise ValidationError(invalid_choice("payroll status", status, statuses))

        previous = self.get_payroll(payroll_id)
        paid = status == PayrollStatus.PAID.value
        self.db.update_payroll_status(
            payroll_id, status, paid_date=datetime.now(UTC) if paid else None
        )
        logger.info(
            "Payroll status changed",
            extra={
                "payroll_number": previous.payroll_number,
                "from_status": previous.status,
                "to_status": status,
            },
        )

        if paid:
            self.transactions.create_transaction_once(
                record_type=RecordType.EXPENSE.value,
                category="Payroll",
                subcategory="Salary",
                amount=previous.net_pay,
                description=f"Gaji {previous.payroll_number}",
                user_id=previous.user_id or user_id or SYSTEM_USER,
                reference_type=PAYROLL_REFERENCE,
                reference=str(payroll_id),
                payment_method="bank_transfer",
            )

        return self.get_payroll(payroll_id)

    # Attendance
    def create_attendance(
        self,
        employee_id: int,
        attendance_date: date,
        clock_in: Optional[datetime] = None,
        clock_out: Optional[datetime] = None,
        hours_worked: str | Decimal = "0",
        overtime_hours: str | Decimal = "0",
        status: str = "present",
        notes: Optional[str] = None,
    ) -> int:
        """Record a day of attendance. Returns attendance ID."""
        self.get_employee(employee_id)
        if clock_in is not None and clock_out is not None and clock_out < clock_in:
            raise ValidationError("Clock-out must not be before clock-in")
        return self.db.create_attendance_record(
            employee_id=employee_id,
            date=attendance_date,
            clock_in=clock_in,
            clock_out=clock_out,
            hours_worked=parse_record_amount(hours_worked),
            overtime_hours=parse_record_amount(overtime_hours),
            status=status,
            notes=notes,
        )

    def list_attendance_records(
        self,
        employee_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[AttendanceRecord]:
        return self.db.list_attendance_records(
            employee_id=employee_id, start_date=start_date, end_date=end_date
        )
