"""Journal engine: balanced, atomically posted journal entries."""

import time
import uuid
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence, Union

from posledger.database.base import Database
from posledger.domain.entities import (
    ZERO,
    JournalEntry,
    JournalEntryLine,
    JournalLineInput,
)
from posledger.domain.errors import (
    NotFoundError,
    ValidationError,
    journal_entry_not_found,
    unbalanced_entry,
)
from posledger.logging_config import get_logger
from posledger.utils.amount_parser import parse_amount, quantize_amount

logger = get_logger(__name__)

BALANCE_TOLERANCE = Decimal("0.01")

LineLike = Union[JournalLineInput, Mapping[str, Any]]


def generate_journal_number() -> str:
    """Time-derived journal number with a random suffix, e.g. JE-1718000000123456-3F9A1C."""
    return f"JE-{time.time_ns() // 1000}-{uuid.uuid4().hex[:6].upper()}"


def _amount(value: Any, field_name: str) -> Decimal:
    if value is None or value == "":
        return ZERO
    try:
        amount = quantize_amount(parse_amount(value))
    except ValueError as e:
        raise ValidationError(f"Invalid {field_name}: {e}")
    if amount < 0:
        raise ValidationError(f"{field_name} cannot be negative: {amount}")
    return amount


def coerce_line(line: LineLike) -> JournalLineInput:
    """Normalize a line given as JournalLineInput or a mapping with string amounts.

    Mappings may use snake_case (``account_code``) or the camelCase keys
    (``accountCode``, ``debitAmount``, ``creditAmount``) sent by HTTP callers.
    """
    if isinstance(line, JournalLineInput):
        data: Mapping[str, Any] = {
            "account_code": line.account_code,
            "description": line.description,
            "debit_amount": line.debit_amount,
            "credit_amount": line.credit_amount,
        }
    else:
        data = line

    account_code = data.get("account_code", data.get("accountCode"))
    if not account_code:
        raise ValidationError("Journal line is missing an account code")

    return JournalLineInput(
        account_code=str(account_code),
        description=data.get("description") or "",
        debit_amount=_amount(data.get("debit_amount", data.get("debitAmount")), "debit amount"),
        credit_amount=_amount(data.get("credit_amount", data.get("creditAmount")), "credit amount"),
    )


class JournalService:
    """Service for creating and reading journal entries."""

    def __init__(self, db: Database):
        """Initialize journal service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_journal_entry(
        self,
        description: str,
        lines: Sequence[LineLike],
        user_id: str,
        reference: Optional[str] = None,
        reference_type: Optional[str] = None,
        entry_date: Optional[date] = None,
    ) -> JournalEntry:
        """Validate and post a journal entry.

        The header, every line and every account balance change are written
        in one transaction. Each affected account moves by ``debit - credit``
        when its normal balance is debit and ``credit - debit`` otherwise.

        Args:
            description: Entry description
            lines: Debit/credit lines addressed by account code
            user_id: User posting the entry
            reference: Optional external id (e.g. a financial record id)
            reference_type: Optional tag of the originating event
            entry_date: Accounting date, defaults to today

        Returns:
            Posted journal entry header

        Raises:
            ValidationError: If lines are empty, negative, or debits and
                credits differ by more than 0.01, or an account is inactive
            NotFoundError: If a line references an unknown account code
        """
        normalized = [coerce_line(line) for line in lines]
        if not normalized:
            raise ValidationError("Journal entry must have at least one line")

        total_debits = sum((line.debit_amount for line in normalized), ZERO)
        total_credits = sum((line.credit_amount for line in normalized), ZERO)
        if abs(total_debits - total_credits) > BALANCE_TOLERANCE:
            logger.warning(
                "Journal entry rejected",
                extra={
                    "reason": "unbalanced",
                    "total_debits": total_debits,
                    "total_credits": total_credits,
                    "reference_type": reference_type,
                    "reference": reference,
                },
            )
            raise ValidationError(
                unbalanced_entry(total_debits, total_credits),
                total_debits=total_debits,
                total_credits=total_credits,
            )

        journal_number = generate_journal_number()
        try:
            entry = self.db.post_journal_entry(
                journal_number=journal_number,
                entry_date=entry_date or date.today(),
                description=description,
                total_amount=total_debits,
                user_id=user_id,
                lines=normalized,
                reference=reference,
                reference_type=reference_type,
            )
        except (NotFoundError, ValidationError) as e:
            logger.warning(
                "Journal entry rejected",
                extra={
                    "reason": str(e),
                    "account_code": getattr(e, "account_code", None),
                    "reference_type": reference_type,
                    "reference": reference,
                },
            )
            raise

        logger.info(
            "Journal entry posted",
            extra={
                "journal_number": entry.journal_number,
                "journal_entry_id": entry.id,
                "total_amount": entry.total_amount,
                "line_count": len(normalized),
            },
        )
        return entry

    def get_journal_entry(self, entry_id: int) -> JournalEntry:
        """Get a journal entry header.

        Raises:
            NotFoundError: If the entry does not exist
        """
        entry = self.db.get_journal_entry(entry_id)
        if entry is None:
            raise NotFoundError(journal_entry_not_found(entry_id))
        return entry

    def get_journal_lines(self, entry_id: int) -> list[JournalEntryLine]:
        """Get the lines of a journal entry.

        Raises:
            NotFoundError: If the entry does not exist
        """
        self.get_journal_entry(entry_id)
        return self.db.get_journal_lines(entry_id)

    def list_journal_entries(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        reference_type: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> list[JournalEntry]:
        """List journal entries, newest first."""
        return self.db.list_journal_entries(
            start_date=start_date,
            end_date=end_date,
            reference_type=reference_type,
            reference=reference,
        )
