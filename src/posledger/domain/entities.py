"""Domain model entities for posledger.

These are pure data classes representing business concepts, independent of
database schema. Amounts are always ``Decimal``; ``to_wire`` turns any entity
or report into plain data with amounts as decimal strings for callers outside
Python.
"""

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

ZERO = Decimal("0")

JOURNAL_STATUS_POSTED = "posted"
RECORD_STATUS_CONFIRMED = "confirmed"
RECORD_STATUS_REVERSED = "reversed"


class AccountType(str, Enum):
    """Types of accounts in the chart of accounts."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"


class NormalBalance(str, Enum):
    """Side on which an account's balance naturally increases."""

    DEBIT = "debit"
    CREDIT = "credit"

    def signed_change(self, debit: Decimal, credit: Decimal) -> Decimal:
        """Balance change caused by a debit/credit pair on this kind of account."""
        if self is NormalBalance.DEBIT:
            return debit - credit
        return credit - debit


class RecordType(str, Enum):
    """Kinds of business-level financial records."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class PayrollStatus(str, Enum):
    """Payroll lifecycle: draft -> approved -> paid."""

    DRAFT = "draft"
    APPROVED = "approved"
    PAID = "paid"


@dataclass(frozen=True)
class Account:
    """Ledger account in the chart of accounts."""

    id: int
    code: str
    name: str
    type: AccountType
    subtype: Optional[str]
    normal_balance: NormalBalance
    balance: Decimal
    is_active: bool
    parent_code: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class JournalLineInput:
    """One requested debit or credit leg, addressed by account code."""

    account_code: str
    description: str = ""
    debit_amount: Decimal = ZERO
    credit_amount: Decimal = ZERO


@dataclass(frozen=True)
class JournalEntry:
    """Posted, balanced journal entry header."""

    id: int
    journal_number: str
    date: date
    description: str
    reference: Optional[str]
    reference_type: Optional[str]
    total_amount: Decimal
    status: str
    user_id: str
    created_at: datetime


@dataclass(frozen=True)
class JournalEntryLine:
    """Debit or credit leg of a posted journal entry."""

    id: int
    journal_entry_id: int
    account_id: int
    account_code: str
    description: str
    debit_amount: Decimal
    credit_amount: Decimal


@dataclass(frozen=True)
class FinancialRecord:
    """Business-facing income/expense/transfer row."""

    id: int
    type: RecordType
    category: str
    subcategory: Optional[str]
    amount: Decimal
    description: str
    reference: Optional[str]
    reference_type: Optional[str]
    payment_method: Optional[str]
    tags: tuple[str, ...]
    status: str
    journal_entry_id: Optional[int]
    user_id: str
    created_at: datetime


@dataclass(frozen=True)
class Product:
    """Stocked product, used for inventory valuation."""

    id: int
    name: str
    sku: str
    stock: int
    average_cost: Optional[Decimal]
    selling_price: Optional[Decimal]
    is_active: bool


@dataclass(frozen=True)
class Employee:
    """Employee on the payroll."""

    id: int
    employee_number: str
    name: str
    position: str
    department: Optional[str]
    salary: Decimal
    salary_type: str
    join_date: date
    status: str
    bank_account: Optional[str] = None
    phone: Optional[str] = None


@dataclass(frozen=True)
class PayrollRecord:
    """Payroll for one employee and period."""

    id: int
    employee_id: int
    payroll_number: str
    period_start: date
    period_end: date
    base_salary: Decimal
    overtime: Decimal
    bonus: Decimal
    allowances: Decimal
    gross_pay: Decimal
    tax_deduction: Decimal
    social_security: Decimal
    health_insurance: Decimal
    other_deductions: Decimal
    net_pay: Decimal
    status: PayrollStatus
    paid_date: Optional[datetime]
    notes: Optional[str]
    user_id: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class AttendanceRecord:
    """Daily attendance entry for an employee."""

    id: int
    employee_id: int
    date: date
    clock_in: Optional[datetime]
    clock_out: Optional[datetime]
    hours_worked: Decimal
    overtime_hours: Decimal
    status: str
    notes: Optional[str]


@dataclass(frozen=True)
class PartUsage:
    """Spare part consumed by a service ticket."""

    name: str
    quantity: int
    selling_price: Decimal
    cost_price: Decimal = ZERO


# Report models


@dataclass(frozen=True)
class AccountLine:
    """Single account row within a report group."""

    code: Optional[str]
    name: str
    amount: Decimal


@dataclass(frozen=True)
class AccountGroup:
    """Accounts sharing a subtype, with their total."""

    accounts: tuple[AccountLine, ...]
    total: Decimal


@dataclass(frozen=True)
class BalanceSheet:
    """Point-in-time position of asset, liability and equity accounts."""

    assets: dict[str, AccountGroup]
    liabilities: dict[str, AccountGroup]
    equity: dict[str, AccountGroup]
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    balance_check: bool
    as_of_date: Optional[date] = None

    def as_dict(self) -> dict[str, Any]:
        return to_wire(self)


@dataclass(frozen=True)
class IncomeStatement:
    """Revenue and expense activity over a period."""

    revenue: dict[str, AccountGroup]
    expenses: dict[str, AccountGroup]
    total_revenue: Decimal
    total_expenses: Decimal
    gross_profit: Decimal
    net_income: Decimal
    start_date: date
    end_date: date

    def as_dict(self) -> dict[str, Any]:
        return to_wire(self)


@dataclass(frozen=True)
class CategoryBreakdown:
    income: Decimal = ZERO
    expense: Decimal = ZERO
    count: int = 0


@dataclass(frozen=True)
class SubcategoryBreakdown:
    amount: Decimal
    type: str
    count: int


@dataclass(frozen=True)
class SourceBreakdown:
    amount: Decimal
    count: int


@dataclass(frozen=True)
class InventoryValuation:
    value: Decimal
    stock: int
    avg_cost: Decimal


@dataclass(frozen=True)
class FinancialSummary:
    """Dashboard view computed from financial records and products."""

    total_income: Decimal
    total_expense: Decimal
    net_profit: Decimal
    transaction_count: int
    inventory_value: Decimal
    inventory_count: int
    categories: dict[str, CategoryBreakdown] = field(default_factory=dict)
    payment_methods: dict[str, Decimal] = field(default_factory=dict)
    sources: dict[str, SourceBreakdown] = field(default_factory=dict)
    subcategories: dict[str, SubcategoryBreakdown] = field(default_factory=dict)
    inventory: dict[str, InventoryValuation] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return to_wire(self)


@dataclass(frozen=True)
class TrialBalanceRow:
    code: str
    name: str
    type: AccountType
    debit_total: Decimal
    credit_total: Decimal


@dataclass(frozen=True)
class TrialBalance:
    rows: tuple[TrialBalanceRow, ...]
    total_debits: Decimal
    total_credits: Decimal
    is_balanced: bool


@dataclass(frozen=True)
class BalanceDrift:
    """Difference between a materialized balance and its journal replay."""

    code: str
    name: str
    recorded_balance: Decimal
    replayed_balance: Decimal

    @property
    def difference(self) -> Decimal:
        return self.recorded_balance - self.replayed_balance


def to_wire(value: Any) -> Any:
    """Convert entities to plain data with decimal-string amounts."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_wire(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: to_wire(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_wire(item) for item in value]
    return value
