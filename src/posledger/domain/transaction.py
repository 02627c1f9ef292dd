"""Transaction recorder: financial records with their derived journal entries."""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from posledger.config import DEFAULT_ACCOUNT_MAPPING, AccountMapping
from posledger.database.base import Database
from posledger.domain.entities import (
    RECORD_STATUS_CONFIRMED,
    FinancialRecord,
    JournalLineInput,
    RecordType,
)
from posledger.domain.errors import (
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
    financial_record_not_found,
    invalid_choice,
)
from posledger.domain.journal import JournalService
from posledger.logging_config import get_logger
from posledger.utils.amount_parser import parse_amount, quantize_amount

logger = get_logger(__name__)

FINANCIAL_TRANSACTION_REFERENCE = "financial_transaction"


def parse_record_amount(amount: str | Decimal | int) -> Decimal:
    """Parse a record amount, rejecting malformed and negative values."""
    try:
        value = quantize_amount(parse_amount(amount))
    except ValueError as e:
        raise ValidationError(f"Invalid amount: {e}")
    if value < 0:
        raise ValidationError(f"Amount cannot be negative: {value}")
    return value


class TransactionService:
    """Service for recording income, expenses and transfers."""

    def __init__(
        self,
        db: Database,
        account_mapping: AccountMapping = DEFAULT_ACCOUNT_MAPPING,
        journal: Optional[JournalService] = None,
    ):
        """Initialize transaction service.

        Args:
            db: Database instance
            account_mapping: Category to ledger-account tables
            journal: Journal service, created from ``db`` when omitted
        """
        self.db = db
        self.account_mapping = account_mapping
        self.journal = journal or JournalService(db)

    def create_transaction(
        self,
        record_type: str,
        category: str,
        amount: str | Decimal | int,
        description: str,
        user_id: str,
        subcategory: Optional[str] = None,
        reference_type: Optional[str] = None,
        reference: Optional[str] = None,
        payment_method: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
        from_account_code: Optional[str] = None,
        to_account_code: Optional[str] = None,
    ) -> FinancialRecord:
        """Create a confirmed financial record and post its journal entry.

        The record is written first. If the journal entry cannot be posted
        (unknown or unmapped account, inactive account) the record is kept
        without a journal link and the gap is logged as a partial
        inconsistency instead of raising.

        Transfers move money between two ledger accounts and need both
        ``from_account_code`` and ``to_account_code`` to be journaled.

        Returns:
            The financial record, linked to its journal entry when posted

        Raises:
            ValidationError: If type or amount is invalid
            ConflictError: If the record's natural key is already recorded
        """
        types = [t.value for t in RecordType]
        if record_type not in types:
            raise ValidationError(invalid_choice("transaction type", record_type, types))
        value = parse_record_amount(amount)
        if (from_account_code is None) != (to_account_code is None):
            raise ValidationError("Transfers need both a source and a destination account")
        if from_account_code is not None and record_type != RecordType.TRANSFER.value:
            raise ValidationError("Source and destination accounts only apply to transfers")

        record = self.db.create_financial_record(
            record_type=record_type,
            category=category,
            amount=value,
            description=description,
            user_id=user_id,
            subcategory=subcategory,
            reference=reference,
            reference_type=reference_type,
            payment_method=payment_method,
            tags=tags,
            status=RECORD_STATUS_CONFIRMED,
        )

        try:
            lines = self.build_journal_lines(
                record, from_account_code=from_account_code, to_account_code=to_account_code
            )
            if not lines:
                logger.warning(
                    "Financial record has no journal entry",
                    extra={
                        "event": "partial_inconsistency",
                        "record_id": record.id,
                        "error": "transfer without source and destination accounts",
                    },
                )
                return record

            entry = self.journal.create_journal_entry(
                description=f"{record_type.upper()}: {description}",
                lines=lines,
                user_id=user_id,
                reference=str(record.id),
                reference_type=FINANCIAL_TRANSACTION_REFERENCE,
            )
        except DomainError as e:
            logger.warning(
                "Financial record has no journal entry",
                extra={"event": "partial_inconsistency", "record_id": record.id, "error": str(e)},
            )
            return record

        self.db.link_journal_entry(record.id, entry.id)
        return self.get_transaction(record.id)

    def create_transaction_once(
        self,
        record_type: str,
        category: str,
        amount: str | Decimal | int,
        description: str,
        user_id: str,
        reference_type: str,
        reference: str,
        match_description: bool = False,
        **kwargs,
    ) -> Optional[FinancialRecord]:
        """Record a domain event at most once.

        The event is identified by ``(reference_type, reference, record_type)``,
        plus the description when ``match_description`` is set. A concurrent
        duplicate that slips past the lookup is stopped by the store's unique
        key and also treated as already recorded.

        Returns:
            The new record, or None if the event was already recorded
        """
        existing = self.db.find_financial_records(
            reference_type=reference_type,
            reference=reference,
            record_type=record_type,
            description=description if match_description else None,
        )
        if existing:
            logger.info(
                "Event already recorded",
                extra={"reference_type": reference_type, "reference": reference, "record_id": existing[0].id},
            )
            return None

        try:
            return self.create_transaction(
                record_type=record_type,
                category=category,
                amount=amount,
                description=description,
                user_id=user_id,
                reference_type=reference_type,
                reference=reference,
                **kwargs,
            )
        except ConflictError:
            logger.info(
                "Event already recorded",
                extra={"reference_type": reference_type, "reference": reference},
            )
            return None

    def build_journal_lines(
        self,
        record: FinancialRecord,
        from_account_code: Optional[str] = None,
        to_account_code: Optional[str] = None,
    ) -> list[JournalLineInput]:
        """Derive the debit/credit pair for a financial record.

        Income debits cash or bank and credits the mapped revenue account;
        expense debits the mapped expense account and credits cash or bank;
        transfer debits the destination and credits the source.

        Raises:
            NotFoundError: If a strict mapping has no account for the category
        """
        amount = record.amount
        if record.type is RecordType.INCOME:
            return [
                JournalLineInput(
                    account_code=self.account_mapping.settlement_account(record.payment_method),
                    description=f"Receive payment - {record.description}",
                    debit_amount=amount,
                ),
                JournalLineInput(
                    account_code=self.account_mapping.revenue_account(record.category),
                    description=record.description,
                    credit_amount=amount,
                ),
            ]
        if record.type is RecordType.EXPENSE:
            return [
                JournalLineInput(
                    account_code=self.account_mapping.expense_account(record.category),
                    description=record.description,
                    debit_amount=amount,
                ),
                JournalLineInput(
                    account_code=self.account_mapping.settlement_account(record.payment_method),
                    description=f"Payment - {record.description}",
                    credit_amount=amount,
                ),
            ]
        if from_account_code is None or to_account_code is None:
            return []
        return [
            JournalLineInput(
                account_code=to_account_code,
                description=f"Transfer in - {record.description}",
                debit_amount=amount,
            ),
            JournalLineInput(
                account_code=from_account_code,
                description=f"Transfer out - {record.description}",
                credit_amount=amount,
            ),
        ]

    def get_transactions(
        self,
        record_type: Optional[str] = None,
        category: Optional[str] = None,
        reference_type: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[FinancialRecord]:
        """List financial records, newest first.

        Unlike the summary this includes every record, capitalized purchases
        included.
        """
        return self.db.list_financial_records(
            record_type=record_type,
            category=category,
            reference_type=reference_type,
            start_date=start_date,
            end_date=end_date,
        )

    def get_transaction(self, record_id: int) -> FinancialRecord:
        """Get a financial record.

        Raises:
            NotFoundError: If the record does not exist
        """
        record = self.db.get_financial_record(record_id)
        if record is None:
            raise NotFoundError(financial_record_not_found(record_id))
        return record

    def get_financial_categories(self) -> tuple[list[str], list[str]]:
        """Distinct income and expense categories, in first-seen order."""
        income: dict[str, None] = {}
        expense: dict[str, None] = {}
        for record in reversed(self.db.list_financial_records()):
            if record.type is RecordType.INCOME:
                income.setdefault(record.category)
            elif record.type is RecordType.EXPENSE:
                expense.setdefault(record.category)
        return list(income), list(expense)

    def clear_service_records(self, service_id: str) -> int:
        """Delete all financial records referencing a service ticket.

        Journal entries already posted for them are left in place.
        """
        deleted = self.db.delete_financial_records_by_reference(service_id)
        logger.info("Service records cleared", extra={"reference": service_id, "deleted": deleted})
        return deleted
