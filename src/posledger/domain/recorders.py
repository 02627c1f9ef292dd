"""Idempotent recorders that turn service-ticket events into financial records.

Each recorder books a business event at most once: calling it again for the
same ticket (and, for parts, the same part and quantity) is a no-op that
returns None. Amounts arrive as decimal strings.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from posledger.config import AccountCodes
from posledger.database.base import Database
from posledger.domain.entities import (
    RECORD_STATUS_CONFIRMED,
    ZERO,
    FinancialRecord,
    JournalEntry,
    JournalLineInput,
    PartUsage,
    RecordType,
)
from posledger.domain.errors import ConflictError, DomainError, ValidationError
from posledger.domain.transaction import TransactionService, parse_record_amount
from posledger.logging_config import get_logger

logger = get_logger(__name__)

SERVICE_REVENUE_CATEGORY = "Service Revenue"
SALES_REVENUE_CATEGORY = "Sales Revenue"
COGS_CATEGORY = "Cost of Goods Sold"
SERVICE_CANCELLATION_CATEGORY = "Service Cancellation"
SERVICE_REVENUE_REVERSAL_CATEGORY = "Service Revenue Reversal"
PARTS_REVENUE_REVERSAL_CATEGORY = "Parts Revenue Reversal"

REF_SERVICE = "service"
REF_PARTS_COST = "service_parts_cost"
REF_PARTS_REVENUE = "service_parts_revenue"
REF_LABOR = "service_labor"
REF_CANCELLATION = "service_cancellation"
REF_CANCELLATION_AFTER_COMPLETED = "service_cancellation_after_completed"
REF_SERVICE_REVERSAL = "service_cancellation_service_reversal"
REF_PARTS_REVERSAL = "service_cancellation_parts_reversal"
REF_WARRANTY_REFUND = "service_cancellation_warranty_refund"
REF_WARRANTY_LABOR_REVERSAL = "warranty_labor_reversal"
REF_WARRANTY_PARTS_REVERSAL = "warranty_parts_reversal"
REF_WARRANTY_JOURNAL = "warranty_refund"


@dataclass(frozen=True)
class PartsRecording:
    """Records created by ``record_parts_cost``; None where already recorded."""

    cost: Optional[FinancialRecord]
    revenue: Optional[FinancialRecord]


@dataclass(frozen=True)
class CancellationRecording:
    """Records and the single reversing journal entry of a cancelled ticket."""

    records: tuple[FinancialRecord, ...]
    journal_entry: Optional[JournalEntry]


def _quantity(quantity: int) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError(f"Quantity must be a positive integer, got {quantity!r}")
    return quantity


def parts_cost_description(part_name: str, quantity: int) -> str:
    return f"Biaya modal {part_name} ({quantity}x)"


def parts_sale_description(part_name: str, quantity: int) -> str:
    return f"Penjualan {part_name} ({quantity}x)"


class ServiceRecorder:
    """Books service-ticket events through the transaction recorder."""

    def __init__(self, db: Database, transactions: Optional[TransactionService] = None):
        self.db = db
        self.transactions = transactions or TransactionService(db)

    @property
    def account_mapping(self):
        return self.transactions.account_mapping

    def record_service_income(
        self, service_id: str, amount: str | Decimal, description: str, user_id: str
    ) -> Optional[FinancialRecord]:
        """Book the repair income of a completed ticket, once per ticket."""
        return self.transactions.create_transaction_once(
            record_type=RecordType.INCOME.value,
            category=SERVICE_REVENUE_CATEGORY,
            subcategory="Repair Service",
            amount=amount,
            description=description,
            user_id=user_id,
            reference_type=REF_SERVICE,
            reference=service_id,
            payment_method="cash",
        )

    def record_parts_cost(
        self,
        service_id: str,
        part_name: str,
        quantity: int,
        modal_price: str | Decimal,
        selling_price: str | Decimal,
        user_id: str,
    ) -> PartsRecording:
        """Book a consumed part as cost (modal price) and sale (selling price).

        The idempotency key includes the part name and quantity, so the same
        part booked with a different quantity counts as a new event.
        """
        quantity = _quantity(quantity)
        cost_amount = parse_record_amount(modal_price) * quantity
        sale_amount = parse_record_amount(selling_price) * quantity

        cost = self.transactions.create_transaction_once(
            record_type=RecordType.EXPENSE.value,
            category=COGS_CATEGORY,
            subcategory="Parts Cost",
            amount=cost_amount,
            description=parts_cost_description(part_name, quantity),
            user_id=user_id,
            reference_type=REF_PARTS_COST,
            reference=service_id,
            payment_method="inventory",
            match_description=True,
        )
        revenue = self.transactions.create_transaction_once(
            record_type=RecordType.INCOME.value,
            category=SERVICE_REVENUE_CATEGORY,
            subcategory="Parts Sales",
            amount=sale_amount,
            description=parts_sale_description(part_name, quantity),
            user_id=user_id,
            reference_type=REF_PARTS_REVENUE,
            reference=service_id,
            payment_method="cash",
            match_description=True,
        )
        return PartsRecording(cost=cost, revenue=revenue)

    def record_labor_cost(
        self, service_id: str, labor_cost: str | Decimal, description: str, user_id: str
    ) -> Optional[FinancialRecord]:
        """Book the labor charge of a ticket; nothing is booked for a zero charge."""
        amount = parse_record_amount(labor_cost)
        if amount <= ZERO:
            return None
        return self.transactions.create_transaction_once(
            record_type=RecordType.INCOME.value,
            category=SERVICE_REVENUE_CATEGORY,
            subcategory="Labor Charge",
            amount=amount,
            description=f"Ongkos tenaga kerja - {description}",
            user_id=user_id,
            reference_type=REF_LABOR,
            reference=service_id,
            payment_method="cash",
        )

    def record_service_cancellation(
        self, service_id: str, fee: str | Decimal, reason: str, user_id: str
    ) -> Optional[FinancialRecord]:
        """Book the fee of a ticket cancelled before completion."""
        amount = parse_record_amount(fee)
        if amount <= ZERO:
            return None
        return self.transactions.create_transaction_once(
            record_type=RecordType.INCOME.value,
            category=SERVICE_REVENUE_CATEGORY,
            amount=amount,
            description=f"Service cancellation fee - {reason}",
            user_id=user_id,
            reference_type=REF_CANCELLATION,
            reference=service_id,
            payment_method="cash",
        )

    def record_service_cancellation_after_completed(
        self,
        service_id: str,
        fee: str | Decimal,
        reason: str,
        original_labor_cost: str | Decimal,
        parts_used: Sequence[PartUsage],
        user_id: str,
    ) -> Optional[CancellationRecording]:
        """Reverse a completed ticket and book the cancellation fee.

        Creates the fee income, one "Service Cancellation" expense reversing
        the labor charge and one per returned part, then posts a single
        journal entry holding the fee, a sales return per part and an
        inventory return at cost. Returns None if the cancellation was
        already recorded.
        """
        fee_amount = parse_record_amount(fee)
        labor_amount = parse_record_amount(original_labor_cost)
        parts = [
            (
                part,
                _quantity(part.quantity),
                parse_record_amount(part.selling_price) * part.quantity,
                parse_record_amount(part.cost_price) * part.quantity,
            )
            for part in parts_used
        ]
        keys = [(part.name, part.quantity) for part in parts_used]
        if len(set(keys)) != len(keys):
            raise ValidationError("Each returned part and quantity may be listed only once")

        if self._already_recorded(
            service_id, (REF_CANCELLATION_AFTER_COMPLETED, REF_SERVICE_REVERSAL, REF_PARTS_REVERSAL)
        ):
            return None

        records = []
        if fee_amount > ZERO:
            records.append(
                self._record_fields(
                    RecordType.INCOME,
                    SERVICE_REVENUE_CATEGORY,
                    fee_amount,
                    f"Service cancellation fee (after completion) - {reason}",
                    service_id,
                    REF_CANCELLATION_AFTER_COMPLETED,
                    user_id,
                )
            )
        if labor_amount > ZERO:
            records.append(
                self._record_fields(
                    RecordType.EXPENSE,
                    SERVICE_CANCELLATION_CATEGORY,
                    labor_amount,
                    f"Service revenue reversal (labor cost) - {reason}",
                    service_id,
                    REF_SERVICE_REVERSAL,
                    user_id,
                )
            )
        for part, quantity, revenue, _cost in parts:
            records.append(
                self._record_fields(
                    RecordType.EXPENSE,
                    SERVICE_CANCELLATION_CATEGORY,
                    revenue,
                    f"Parts revenue reversal - {part.name} ({quantity}x) - {reason}",
                    service_id,
                    REF_PARTS_REVERSAL,
                    user_id,
                )
            )

        created = self._create_batch(service_id, REF_CANCELLATION_AFTER_COMPLETED, records)
        if created is None:
            return None

        return self._post_reversal(
            created,
            fee_booked=fee_amount > ZERO,
            lines_factory=lambda: self._cancellation_lines(fee_amount, reason, parts),
            description=f"Service Cancellation After Completion - {reason}",
            service_id=service_id,
            reference_type=REF_CANCELLATION_AFTER_COMPLETED,
            user_id=user_id,
        )

    def record_service_cancellation_warranty_refund(
        self,
        service_id: str,
        fee: str | Decimal,
        original_labor_cost: str | Decimal,
        original_parts_cost: str | Decimal,
        reason: str,
        parts_used: Sequence[PartUsage],
        user_id: str,
    ) -> Optional[CancellationRecording]:
        """Refund a completed ticket under warranty.

        The labor and parts income booked for the ticket is marked
        ``reversed`` so it leaves the summary, a "Service Revenue Reversal"
        and a "Parts Revenue Reversal" expense record the refund, and one
        journal entry books the fee, the refund as warranty expense paid in
        cash and the returned parts as damaged goods at cost (selling price
        when no cost is known). Returns None if the refund was already
        recorded.
        """
        fee_amount = parse_record_amount(fee)
        labor_amount = parse_record_amount(original_labor_cost)
        parts_amount = parse_record_amount(original_parts_cost)
        damaged = [
            (
                part,
                _quantity(part.quantity),
                parse_record_amount(part.cost_price or part.selling_price) * part.quantity,
            )
            for part in parts_used
        ]

        if self._already_recorded(
            service_id, (REF_WARRANTY_REFUND, REF_WARRANTY_LABOR_REVERSAL, REF_WARRANTY_PARTS_REVERSAL)
        ):
            return None

        records = []
        reversals = []
        if fee_amount > ZERO:
            records.append(
                self._record_fields(
                    RecordType.INCOME,
                    SERVICE_REVENUE_CATEGORY,
                    fee_amount,
                    f"Warranty cancellation fee - {reason}",
                    service_id,
                    REF_WARRANTY_REFUND,
                    user_id,
                )
            )
        if labor_amount > ZERO:
            reversals.append((REF_LABOR, service_id, RecordType.INCOME.value))
            records.append(
                self._record_fields(
                    RecordType.EXPENSE,
                    SERVICE_REVENUE_REVERSAL_CATEGORY,
                    labor_amount,
                    f"Service revenue reversal for warranty refund - {reason}",
                    service_id,
                    REF_WARRANTY_LABOR_REVERSAL,
                    user_id,
                )
            )
        if parts_amount > ZERO:
            reversals.append((REF_PARTS_REVENUE, service_id, RecordType.INCOME.value))
            records.append(
                self._record_fields(
                    RecordType.EXPENSE,
                    PARTS_REVENUE_REVERSAL_CATEGORY,
                    parts_amount,
                    f"Parts revenue reversal for warranty refund - {reason}",
                    service_id,
                    REF_WARRANTY_PARTS_REVERSAL,
                    user_id,
                )
            )

        created = self._create_batch(service_id, REF_WARRANTY_REFUND, records, reversals)
        if created is None:
            return None

        return self._post_reversal(
            created,
            fee_booked=fee_amount > ZERO,
            lines_factory=lambda: self._warranty_lines(fee_amount, labor_amount, parts_amount, reason, damaged),
            description=f"Service Warranty Refund - {reason}",
            service_id=service_id,
            reference_type=REF_WARRANTY_JOURNAL,
            user_id=user_id,
        )

    def _already_recorded(self, service_id: str, reference_types: Sequence[str]) -> bool:
        for reference_type in reference_types:
            if self.db.find_financial_records(reference_type=reference_type, reference=service_id):
                logger.info(
                    "Event already recorded",
                    extra={"reference_type": reference_type, "reference": service_id},
                )
                return True
        return False

    @staticmethod
    def _record_fields(record_type, category, amount, description, service_id, reference_type, user_id) -> dict:
        return {
            "record_type": record_type.value,
            "category": category,
            "amount": amount,
            "description": description,
            "user_id": user_id,
            "reference": service_id,
            "reference_type": reference_type,
            "payment_method": "cash",
            "status": RECORD_STATUS_CONFIRMED,
        }

    def _create_batch(
        self, service_id, reference_type, records, reversals=()
    ) -> Optional[list[FinancialRecord]]:
        """Write the event's records at once; None when a concurrent call got there first."""
        try:
            return self.db.create_financial_records(records, reversals=reversals)
        except ConflictError:
            logger.info(
                "Event already recorded",
                extra={"reference_type": reference_type, "reference": service_id},
            )
            return None

    def _post_reversal(
        self, records, fee_booked, lines_factory, description, service_id, reference_type, user_id
    ) -> CancellationRecording:
        entry = None
        try:
            lines = lines_factory()
            if lines:
                entry = self.transactions.journal.create_journal_entry(
                    description=description,
                    lines=lines,
                    user_id=user_id,
                    reference=service_id,
                    reference_type=reference_type,
                )
        except DomainError as e:
            logger.warning(
                "Financial record has no journal entry",
                extra={
                    "event": "partial_inconsistency",
                    "record_ids": [record.id for record in records],
                    "error": str(e),
                },
            )

        if entry is not None and fee_booked:
            self.db.link_journal_entry(records[0].id, entry.id)
            records[0] = self.transactions.get_transaction(records[0].id)

        return CancellationRecording(records=tuple(records), journal_entry=entry)

    def _cancellation_lines(self, fee_amount, reason, parts) -> list[JournalLineInput]:
        mapping = self.account_mapping
        lines = self._fee_lines(
            fee_amount, f"Cancellation fee received - {reason}", f"Service cancellation fee - {reason}"
        )

        for part, quantity, revenue, cost in parts:
            if revenue > ZERO:
                lines += [
                    JournalLineInput(
                        account_code=mapping.revenue_account(SALES_REVENUE_CATEGORY),
                        description=f"Sales return reversal - {part.name} ({quantity}x)",
                        debit_amount=revenue,
                    ),
                    JournalLineInput(
                        account_code=mapping.cash_account,
                        description=f"Cash refund for returned parts - {part.name}",
                        credit_amount=revenue,
                    ),
                ]
            if cost > ZERO:
                lines += [
                    JournalLineInput(
                        account_code=AccountCodes.INVENTORY,
                        description=f"Inventory returned - {part.name} ({quantity}x)",
                        debit_amount=cost,
                    ),
                    JournalLineInput(
                        account_code=AccountCodes.COST_OF_GOODS_SOLD,
                        description=f"COGS reversal - {part.name}",
                        credit_amount=cost,
                    ),
                ]
        return lines

    def _warranty_lines(self, fee_amount, labor_amount, parts_amount, reason, damaged) -> list[JournalLineInput]:
        mapping = self.account_mapping
        description = f"Warranty cancellation fee - {reason}"
        lines = self._fee_lines(fee_amount, description, description)

        for amount, what in ((labor_amount, "labor"), (parts_amount, "parts")):
            if amount > ZERO:
                lines += [
                    JournalLineInput(
                        account_code=AccountCodes.WARRANTY_EXPENSE,
                        description=f"Warranty {what} refund - {reason}",
                        debit_amount=amount,
                    ),
                    JournalLineInput(
                        account_code=mapping.cash_account,
                        description=f"Cash refund for {what} - {reason}",
                        credit_amount=amount,
                    ),
                ]

        # damaged goods only move when parts were refunded
        if parts_amount > ZERO:
            for part, quantity, cost in damaged:
                if cost <= ZERO:
                    continue
                lines += [
                    JournalLineInput(
                        account_code=AccountCodes.DAMAGED_GOODS_LOSS,
                        description=f"Damaged goods loss - {part.name} ({quantity}x)",
                        debit_amount=cost,
                    ),
                    JournalLineInput(
                        account_code=AccountCodes.DAMAGED_GOODS_INVENTORY,
                        description=f"Transfer to damaged goods inventory - {part.name}",
                        credit_amount=cost,
                    ),
                ]
        return lines

    def _fee_lines(self, fee_amount, debit_description, credit_description) -> list[JournalLineInput]:
        if fee_amount <= ZERO:
            return []
        mapping = self.account_mapping
        return [
            JournalLineInput(
                account_code=mapping.cash_account,
                description=debit_description,
                debit_amount=fee_amount,
            ),
            JournalLineInput(
                account_code=mapping.revenue_account(SERVICE_REVENUE_CATEGORY),
                description=credit_description,
                credit_amount=fee_amount,
            ),
        ]
