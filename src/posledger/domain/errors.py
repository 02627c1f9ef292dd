"""Shared domain error messages and error types."""

from decimal import Decimal
from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic.

    Unbalanced journal entries carry both totals so callers can show them.
    """

    def __init__(
        self,
        message: str,
        *,
        total_debits: Optional[Decimal] = None,
        total_credits: Optional[Decimal] = None,
    ):
        super().__init__(message)
        self.total_debits = total_debits
        self.total_credits = total_credits


class NotFoundError(DomainError):
    """Requested domain entity or account code does not exist."""

    def __init__(self, message: str, *, account_code: Optional[str] = None):
        super().__init__(message)
        self.account_code = account_code


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


def account_code_not_found(code: str) -> str:
    """Return message for missing account code."""
    return f"Account with code {code} not found"


def account_inactive(code: str) -> str:
    """Return message for posting against a deactivated account."""
    return f"Account with code {code} is inactive"


def duplicate_account_code(code: str) -> str:
    """Return message for duplicate account code."""
    return f"Account with code {code} already exists"


def unbalanced_entry(total_debits: Decimal, total_credits: Decimal) -> str:
    """Return message for a journal entry whose sides do not match."""
    return f"Debits ({total_debits}) must equal Credits ({total_credits})"


def unmapped_category(record_type: str, category: str) -> str:
    """Return message for a category with no configured ledger account."""
    return f"No {record_type} account mapped for category '{category}'"


def duplicate_financial_record(
    reference_type: Optional[str], reference: Optional[str], description: str
) -> str:
    """Return message for a financial record that was already recorded."""
    return (
        f"Financial record '{description}' already exists for "
        f"{reference_type} {reference}"
    )


def financial_record_not_found(record_id: int) -> str:
    """Return message for missing financial record."""
    return f"Financial record {record_id} not found"


def journal_entry_not_found(entry_id: int) -> str:
    """Return message for missing journal entry."""
    return f"Journal entry {entry_id} not found"


def employee_not_found(employee_id: int) -> str:
    """Return message for missing employee."""
    return f"Employee {employee_id} not found"


def payroll_not_found(payroll_id: int) -> str:
    """Return message for missing payroll record."""
    return f"Payroll record {payroll_id} not found"


def invalid_choice(field: str, value: str, choices: list[str]) -> str:
    """Return message for a value outside an enumerated set."""
    return f"Invalid {field} '{value}'. Expected one of: {', '.join(choices)}"
