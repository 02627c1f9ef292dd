"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Sequence
from datetime import date, datetime
from decimal import Decimal

from posledger.domain.entities import (
    Account,
    AttendanceRecord,
    Employee,
    FinancialRecord,
    JournalEntry,
    JournalEntryLine,
    JournalLineInput,
    PayrollRecord,
    Product,
)


class Database(ABC):
    """Abstract database interface for posledger."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Chart of accounts
    @abstractmethod
    def create_account(
        self,
        code: str,
        name: str,
        account_type: str,
        normal_balance: str,
        subtype: Optional[str] = None,
        parent_code: Optional[str] = None,
        description: Optional[str] = None,
    ) -> int:
        """Create a ledger account with zero balance. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_code(self, code: str) -> Optional[Account]:
        """Get account by code, active or not."""
        pass

    @abstractmethod
    def list_accounts(
        self, active_only: bool = True, account_types: Optional[Sequence[str]] = None
    ) -> list[Account]:
        """List accounts ordered by code."""
        pass

    @abstractmethod
    def set_account_active(self, code: str, is_active: bool) -> None:
        """Activate or deactivate an account."""
        pass

    # Journal
    @abstractmethod
    def post_journal_entry(
        self,
        journal_number: str,
        entry_date: date,
        description: str,
        total_amount: Decimal,
        user_id: str,
        lines: Sequence[JournalLineInput],
        reference: Optional[str] = None,
        reference_type: Optional[str] = None,
    ) -> JournalEntry:
        """Persist a posted entry, its lines and the balance changes atomically.

        Either everything is written or nothing is: an unknown or inactive
        account code rolls back the header, earlier lines and earlier balance
        updates. Balances are changed with an in-store increment.

        Raises:
            NotFoundError: If a line references an unknown account code
            ValidationError: If a line references an inactive account
        """
        pass

    @abstractmethod
    def get_journal_entry(self, entry_id: int) -> Optional[JournalEntry]:
        """Get journal entry header by ID."""
        pass

    @abstractmethod
    def get_journal_lines(self, entry_id: int) -> list[JournalEntryLine]:
        """Get the lines of a journal entry."""
        pass

    @abstractmethod
    def list_journal_entries(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        reference_type: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> list[JournalEntry]:
        """List journal entries, newest first."""
        pass

    @abstractmethod
    def get_account_activity(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> dict[int, tuple[Decimal, Decimal]]:
        """Sum posted journal lines per account within an inclusive date range.

        Returns a mapping of account ID to (total debits, total credits).
        """
        pass

    # Financial records
    @abstractmethod
    def create_financial_record(
        self,
        record_type: str,
        category: str,
        amount: Decimal,
        description: str,
        user_id: str,
        subcategory: Optional[str] = None,
        reference: Optional[str] = None,
        reference_type: Optional[str] = None,
        payment_method: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
        status: str = "confirmed",
        created_at: Optional[datetime] = None,
    ) -> FinancialRecord:
        """Create a financial record.

        Raises:
            ConflictError: If (reference_type, reference, description) already exists
        """
        pass

    @abstractmethod
    def create_financial_records(
        self,
        records: Sequence[Mapping[str, Any]],
        reversals: Sequence[tuple[str, str, str]] = (),
    ) -> list[FinancialRecord]:
        """Create several records and mark earlier ones reversed in one transaction.

        Args:
            records: Keyword arguments of ``create_financial_record`` per record
            reversals: (reference_type, reference, record_type) selectors whose
                existing records get status ``reversed``

        Raises:
            ConflictError: If any record's (reference_type, reference,
                description) already exists; nothing is written then
        """
        pass

    @abstractmethod
    def get_financial_record(self, record_id: int) -> Optional[FinancialRecord]:
        """Get financial record by ID."""
        pass

    @abstractmethod
    def link_journal_entry(self, record_id: int, journal_entry_id: int) -> None:
        """Point a financial record at the journal entry posted for it."""
        pass

    @abstractmethod
    def find_financial_records(
        self,
        reference_type: str,
        reference: str,
        record_type: Optional[str] = None,
        description: Optional[str] = None,
    ) -> list[FinancialRecord]:
        """Find records recorded for a domain event."""
        pass

    @abstractmethod
    def list_financial_records(
        self,
        record_type: Optional[str] = None,
        category: Optional[str] = None,
        reference_type: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[str] = None,
    ) -> list[FinancialRecord]:
        """List financial records, newest first, with inclusive date filters."""
        pass

    @abstractmethod
    def delete_financial_records_by_reference(self, reference: str) -> int:
        """Delete records pointing at a reference. Returns number deleted."""
        pass

    # Products
    @abstractmethod
    def create_product(
        self,
        name: str,
        sku: str,
        stock: int = 0,
        average_cost: Optional[Decimal] = None,
        selling_price: Optional[Decimal] = None,
    ) -> int:
        """Create a product. Returns product ID."""
        pass

    @abstractmethod
    def list_products(self, active_only: bool = True) -> list[Product]:
        """List products ordered by name."""
        pass

    # Employees
    @abstractmethod
    def create_employee(
        self,
        employee_number: str,
        name: str,
        position: str,
        salary: Decimal,
        department: Optional[str] = None,
        salary_type: str = "monthly",
        join_date: Optional[date] = None,
        bank_account: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> int:
        """Create an employee. Returns employee ID."""
        pass

    @abstractmethod
    def get_employee(self, employee_id: int) -> Optional[Employee]:
        """Get employee by ID."""
        pass

    @abstractmethod
    def list_employees(self, include_inactive: bool = False) -> list[Employee]:
        """List employees ordered by name."""
        pass

    @abstractmethod
    def update_employee(self, employee_id: int, **fields) -> None:
        """Update employee fields."""
        pass

    # Payroll
    @abstractmethod
    def create_payroll_record(self, **fields) -> int:
        """Create a payroll record. Returns payroll ID."""
        pass

    @abstractmethod
    def get_payroll_record(self, payroll_id: int) -> Optional[PayrollRecord]:
        """Get payroll record by ID."""
        pass

    @abstractmethod
    def list_payroll_records(self, employee_id: Optional[int] = None) -> list[PayrollRecord]:
        """List payroll records, newest first."""
        pass

    @abstractmethod
    def update_payroll_status(
        self, payroll_id: int, status: str, paid_date: Optional[datetime]
    ) -> None:
        """Set payroll status and paid date."""
        pass

    # Attendance
    @abstractmethod
    def create_attendance_record(self, **fields) -> int:
        """Create an attendance record. Returns attendance ID."""
        pass

    @abstractmethod
    def list_attendance_records(
        self,
        employee_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[AttendanceRecord]:
        """List attendance records, newest first."""
        pass
