"""Tests for the transaction recorder."""

from decimal import Decimal

import pytest

from posledger.config import AccountMapping
from posledger.domain.entities import RecordType
from posledger.domain.errors import ConflictError, NotFoundError, ValidationError
from posledger.domain.transaction import TransactionService


def _balance(db, code):
    return db.get_account_by_code(code).balance


def test_cash_income_posts_to_cash_and_sales(temp_db, seeded_chart, transaction_service):
    """Income debits cash and credits the mapped revenue account."""
    record = transaction_service.create_transaction(
        record_type="income",
        category="Sales Revenue",
        amount="250000",
        description="Laptop sale",
        user_id="u1",
        payment_method="cash",
    )

    assert record.type is RecordType.INCOME
    assert record.status == "confirmed"
    assert record.journal_entry_id is not None
    assert _balance(temp_db, "1111") == Decimal("250000")
    assert _balance(temp_db, "4110") == Decimal("250000")

    entry = transaction_service.journal.get_journal_entry(record.journal_entry_id)
    assert entry.description == "INCOME: Laptop sale"
    assert entry.reference == str(record.id)
    assert entry.reference_type == "financial_transaction"


def test_non_cash_payment_settles_through_bank(temp_db, seeded_chart, transaction_service):
    transaction_service.create_transaction(
        record_type="income",
        category="Service Revenue",
        amount="80000",
        description="Repair",
        user_id="u1",
        payment_method="card",
    )

    assert _balance(temp_db, "1112") == Decimal("80000")
    assert _balance(temp_db, "1111") == Decimal("0")
    assert _balance(temp_db, "4210") == Decimal("80000")


def test_expense_mapping(temp_db, seeded_chart, transaction_service):
    """Payroll has its own account; other expenses fall back to 5290."""
    transaction_service.create_transaction(
        record_type="expense",
        category="Payroll",
        amount="3000000",
        description="Salary",
        user_id="u1",
        payment_method="bank_transfer",
    )
    transaction_service.create_transaction(
        record_type="expense",
        category="Electricity",
        amount="400000",
        description="PLN",
        user_id="u1",
        payment_method="cash",
    )

    assert _balance(temp_db, "5210") == Decimal("3000000")
    assert _balance(temp_db, "5290") == Decimal("400000")
    assert _balance(temp_db, "1112") == Decimal("-3000000")
    assert _balance(temp_db, "1111") == Decimal("-400000")


def test_unknown_income_category_falls_back_to_sales(temp_db, seeded_chart, transaction_service):
    transaction_service.create_transaction(
        record_type="income",
        category="Consulting",
        amount="100",
        description="Advice",
        user_id="u1",
        payment_method="cash",
    )
    assert _balance(temp_db, "4110") == Decimal("100")


def test_strict_mapping_keeps_record_without_journal(temp_db, seeded_chart, caplog):
    """An unmapped category leaves the record unjournaled and logs the gap."""
    strict = AccountMapping(default_revenue_account=None, default_expense_account=None)
    service = TransactionService(temp_db, account_mapping=strict)

    with caplog.at_level("WARNING", logger="posledger"):
        record = service.create_transaction(
            record_type="expense",
            category="Electricity",
            amount="400000",
            description="PLN",
            user_id="u1",
            payment_method="cash",
        )

    assert record.journal_entry_id is None
    assert service.get_transaction(record.id).amount == Decimal("400000")
    assert service.journal.list_journal_entries() == []
    assert _balance(temp_db, "1111") == Decimal("0")
    assert any(getattr(r, "event", None) == "partial_inconsistency" for r in caplog.records)


def test_missing_chart_keeps_record_without_journal(temp_db, transaction_service):
    """Without a chart of accounts the record is kept and the posting skipped."""
    record = transaction_service.create_transaction(
        record_type="income",
        category="Sales Revenue",
        amount="1000",
        description="Sale",
        user_id="u1",
        payment_method="cash",
    )
    assert record.journal_entry_id is None
    assert len(transaction_service.get_transactions()) == 1


def test_transfer_between_accounts(temp_db, seeded_chart, transaction_service):
    record = transaction_service.create_transaction(
        record_type="transfer",
        category="Transfer",
        amount="1000000",
        description="Deposit cash",
        user_id="u1",
        from_account_code="1111",
        to_account_code="1112",
    )

    assert record.journal_entry_id is not None
    assert _balance(temp_db, "1112") == Decimal("1000000")
    assert _balance(temp_db, "1111") == Decimal("-1000000")


def test_transfer_without_accounts_is_not_journaled(temp_db, seeded_chart, transaction_service):
    record = transaction_service.create_transaction(
        record_type="transfer",
        category="Transfer",
        amount="500",
        description="Unspecified",
        user_id="u1",
    )
    assert record.journal_entry_id is None


def test_transfer_accounts_must_come_in_pairs(seeded_chart, transaction_service):
    with pytest.raises(ValidationError, match="both"):
        transaction_service.create_transaction(
            record_type="transfer",
            category="Transfer",
            amount="500",
            description="Half",
            user_id="u1",
            from_account_code="1111",
        )


def test_transfer_accounts_only_for_transfers(seeded_chart, transaction_service):
    with pytest.raises(ValidationError, match="only apply to transfers"):
        transaction_service.create_transaction(
            record_type="income",
            category="Sales Revenue",
            amount="500",
            description="Sale",
            user_id="u1",
            from_account_code="1111",
            to_account_code="1112",
        )


@pytest.mark.parametrize("amount", ["-5", "abc", "", "1e30", "10000000000000"])
def test_invalid_amount_rejected(seeded_chart, transaction_service, amount):
    with pytest.raises(ValidationError):
        transaction_service.create_transaction(
            record_type="income",
            category="Sales Revenue",
            amount=amount,
            description="Sale",
            user_id="u1",
        )
    assert transaction_service.get_transactions() == []


def test_float_amount_rejected(seeded_chart, transaction_service):
    with pytest.raises(ValidationError):
        transaction_service.create_transaction(
            record_type="income",
            category="Sales Revenue",
            amount=10.5,
            description="Sale",
            user_id="u1",
        )


def test_invalid_type_rejected(transaction_service):
    with pytest.raises(ValidationError, match="transaction type"):
        transaction_service.create_transaction(
            record_type="refund",
            category="Sales Revenue",
            amount="10",
            description="Sale",
            user_id="u1",
        )


def test_duplicate_event_key_raises_conflict(seeded_chart, transaction_service):
    kwargs = dict(
        record_type="income",
        category="Sales Revenue",
        amount="10",
        description="Sale",
        user_id="u1",
        reference_type="sale",
        reference="S-1",
    )
    transaction_service.create_transaction(**kwargs)
    with pytest.raises(ConflictError):
        transaction_service.create_transaction(**kwargs)


def test_create_transaction_once(temp_db, seeded_chart, transaction_service):
    kwargs = dict(
        record_type="income",
        category="Sales Revenue",
        amount="10",
        description="Sale",
        user_id="u1",
        reference_type="sale",
        reference="S-1",
        payment_method="cash",
    )
    first = transaction_service.create_transaction_once(**kwargs)
    second = transaction_service.create_transaction_once(**kwargs)

    assert first is not None
    assert second is None
    assert len(transaction_service.get_transactions()) == 1
    assert _balance(temp_db, "1111") == Decimal("10")


def test_inventory_purchase_listed(seeded_chart, transaction_service):
    """Capitalized purchases still appear in the transaction list."""
    transaction_service.create_transaction(
        record_type="expense",
        category="Inventory Purchase",
        amount="5000000",
        description="Stock",
        user_id="u1",
        payment_method="bank_transfer",
    )

    records = transaction_service.get_transactions(record_type="expense")
    assert [r.category for r in records] == ["Inventory Purchase"]


def test_get_transactions_filters(seeded_chart, transaction_service):
    transaction_service.create_transaction(
        record_type="income", category="Sales Revenue", amount="10", description="A", user_id="u1"
    )
    transaction_service.create_transaction(
        record_type="expense",
        category="Electricity",
        amount="5",
        description="B",
        user_id="u1",
        reference_type="utility",
    )

    assert [r.description for r in transaction_service.get_transactions()] == ["B", "A"]
    assert [r.description for r in transaction_service.get_transactions(category="Sales Revenue")] == ["A"]
    assert [r.description for r in transaction_service.get_transactions(reference_type="utility")] == ["B"]


def test_get_missing_transaction(transaction_service):
    with pytest.raises(NotFoundError):
        transaction_service.get_transaction(123)


def test_financial_categories(seeded_chart, transaction_service):
    for record_type, category in [
        ("income", "Sales Revenue"),
        ("expense", "Electricity"),
        ("income", "Service Revenue"),
        ("income", "Sales Revenue"),
        ("expense", "Payroll"),
    ]:
        transaction_service.create_transaction(
            record_type=record_type, category=category, amount="1", description="x", user_id="u1"
        )

    income, expense = transaction_service.get_financial_categories()
    assert income == ["Sales Revenue", "Service Revenue"]
    assert expense == ["Electricity", "Payroll"]


def test_clear_service_records(seeded_chart, transaction_service):
    transaction_service.create_transaction(
        record_type="income",
        category="Service Revenue",
        amount="100",
        description="Repair",
        user_id="u1",
        reference_type="service",
        reference="SVC-1",
    )
    transaction_service.create_transaction(
        record_type="income",
        category="Service Revenue",
        amount="50",
        description="Other ticket",
        user_id="u1",
        reference_type="service",
        reference="SVC-2",
    )

    assert transaction_service.clear_service_records("SVC-1") == 1
    assert [r.reference for r in transaction_service.get_transactions()] == ["SVC-2"]
    # Journal entries stay in place
    assert len(transaction_service.journal.list_journal_entries()) == 2
