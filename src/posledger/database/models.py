"""SQLAlchemy models for the posledger database."""

from datetime import datetime, date, UTC
from decimal import Decimal
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    JSON,
    UniqueConstraint,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

Money = Numeric(15, 2)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Account(Base):
    """Chart of accounts entry with its running balance."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    code = Column(String(20), unique=True, nullable=False)
    name = Column(String(100), nullable=False)
    type = Column(String(30), nullable=False)
    subtype = Column(String(50), nullable=True)
    parent_code = Column(String(20), nullable=True)
    normal_balance = Column(String(10), nullable=False)
    balance = Column(Money, default=Decimal("0"), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)

    lines = relationship("JournalEntryLine", back_populates="account")


class JournalEntry(Base):
    """Journal entry header."""

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    journal_number = Column(String(50), unique=True, nullable=False)
    date = Column(Date, default=date.today, nullable=False)
    description = Column(Text, nullable=False)
    reference = Column(String, nullable=True)
    reference_type = Column(String(50), nullable=True)
    total_amount = Column(Money, nullable=False)
    status = Column(String(20), default="posted", nullable=False)
    user_id = Column(String, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (
        Index("idx_journal_entries_date", "date"),
        Index("idx_journal_entries_reference", "reference_type", "reference"),
    )

    lines = relationship(
        "JournalEntryLine", back_populates="journal_entry", cascade="all, delete-orphan"
    )


class JournalEntryLine(Base):
    """Debit or credit leg of a journal entry."""

    __tablename__ = "journal_entry_lines"

    id = Column(Integer, primary_key=True)
    journal_entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    description = Column(Text, nullable=False, default="")
    debit_amount = Column(Money, default=Decimal("0"), nullable=False)
    credit_amount = Column(Money, default=Decimal("0"), nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    journal_entry = relationship("JournalEntry", back_populates="lines")
    account = relationship("Account", back_populates="lines")


class FinancialRecord(Base):
    """Business-facing income/expense/transfer record."""

    __tablename__ = "financial_records"

    id = Column(Integer, primary_key=True)
    type = Column(String(20), nullable=False)
    category = Column(String(100), nullable=False)
    subcategory = Column(String(100), nullable=True)
    amount = Column(Money, nullable=False)
    description = Column(Text, nullable=False)
    reference = Column(String, nullable=True)
    reference_type = Column(String(50), nullable=True)
    journal_entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=True)
    payment_method = Column(String(50), nullable=True)
    status = Column(String(20), default="confirmed", nullable=False)
    tags = Column(JSON, nullable=True)
    user_id = Column(String, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)

    # One record per domain event; NULL references never collide
    __table_args__ = (
        UniqueConstraint(
            "reference_type", "reference", "description", name="uq_financial_record_event"
        ),
        Index("idx_financial_records_created_at", "created_at"),
    )

    journal_entry = relationship("JournalEntry")


class Product(Base):
    """Stocked product."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    sku = Column(String, unique=True, nullable=False)
    stock = Column(Integer, default=0, nullable=False)
    average_cost = Column(Numeric(12, 2), nullable=True)
    selling_price = Column(Numeric(12, 2), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


class Employee(Base):
    """Employee model."""

    __tablename__ = "employees"

    id = Column(Integer, primary_key=True)
    employee_number = Column(String(50), unique=True, nullable=False)
    name = Column(String(100), nullable=False)
    position = Column(String(100), nullable=False)
    department = Column(String(100), nullable=True)
    salary = Column(Numeric(12, 2), nullable=False)
    salary_type = Column(String(20), default="monthly", nullable=False)
    join_date = Column(Date, default=date.today, nullable=False)
    status = Column(String(20), default="active", nullable=False)
    bank_account = Column(String(50), nullable=True)
    phone = Column(String(20), nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)

    payroll_records = relationship("PayrollRecord", back_populates="employee")


class PayrollRecord(Base):
    """Payroll model."""

    __tablename__ = "payroll_records"

    id = Column(Integer, primary_key=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    payroll_number = Column(String(50), unique=True, nullable=False)
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    base_salary = Column(Numeric(12, 2), nullable=False)
    overtime = Column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    bonus = Column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    allowances = Column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    gross_pay = Column(Numeric(12, 2), nullable=False)
    tax_deduction = Column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    social_security = Column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    health_insurance = Column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    other_deductions = Column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    net_pay = Column(Numeric(12, 2), nullable=False)
    status = Column(String(20), default="draft", nullable=False)
    paid_date = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    user_id = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)

    employee = relationship("Employee", back_populates="payroll_records")


class AttendanceRecord(Base):
    """Attendance model."""

    __tablename__ = "attendance_records"

    id = Column(Integer, primary_key=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    date = Column(Date, nullable=False)
    clock_in = Column(DateTime, nullable=True)
    clock_out = Column(DateTime, nullable=True)
    hours_worked = Column(Numeric(4, 2), default=Decimal("0"), nullable=False)
    overtime_hours = Column(Numeric(4, 2), default=Decimal("0"), nullable=False)
    status = Column(String(20), default="present", nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
