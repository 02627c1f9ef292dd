"""Tests for the chart of accounts."""

from decimal import Decimal

import pytest

from posledger.domain.chart import default_normal_balance
from posledger.domain.default_accounts import DEFAULT_ACCOUNTS
from posledger.domain.entities import AccountType, NormalBalance
from posledger.domain.errors import ConflictError, NotFoundError, ValidationError


def test_initialize_default_accounts(registry):
    created = registry.initialize_default_accounts()

    assert created == len(DEFAULT_ACCOUNTS)
    cash = registry.get_account_by_code("1111")
    assert cash.name == "Cash"
    assert cash.type is AccountType.ASSET
    assert cash.normal_balance is NormalBalance.DEBIT
    assert cash.subtype == "cash"
    assert cash.parent_code == "1110"
    assert cash.balance == Decimal("0")
    assert cash.is_active


def test_initialize_default_accounts_is_idempotent(registry):
    registry.initialize_default_accounts()
    assert registry.initialize_default_accounts() == 0
    assert len(registry.get_chart_of_accounts()) == len(DEFAULT_ACCOUNTS)


def test_default_chart_codes_are_unique_and_parents_exist():
    codes = [seed.code for seed in DEFAULT_ACCOUNTS]
    assert len(codes) == len(set(codes))
    for seed in DEFAULT_ACCOUNTS:
        assert seed.parent_code is None or seed.parent_code in codes


def test_chart_is_ordered_by_code(seeded_chart):
    codes = [account.code for account in seeded_chart.get_chart_of_accounts()]
    assert codes == sorted(codes)


def test_get_unknown_account_returns_none(seeded_chart):
    assert seeded_chart.get_account_by_code("9999") is None


def test_create_account_defaults_normal_balance(seeded_chart):
    seeded_chart.create_account("1113", "Petty Cash", "asset", subtype="cash", parent_code="1110")
    seeded_chart.create_account("4400", "Interest Income", "revenue")

    assert seeded_chart.get_account_by_code("1113").normal_balance is NormalBalance.DEBIT
    assert seeded_chart.get_account_by_code("4400").normal_balance is NormalBalance.CREDIT


def test_create_contra_account(seeded_chart):
    seeded_chart.create_account(
        "1250", "Accumulated Depreciation - Vehicles", "asset", normal_balance="credit"
    )
    assert seeded_chart.get_account_by_code("1250").normal_balance is NormalBalance.CREDIT


def test_create_duplicate_account(seeded_chart):
    with pytest.raises(ConflictError, match="already exists"):
        seeded_chart.create_account("1111", "Cash again", "asset")


def test_create_account_with_missing_parent(seeded_chart):
    with pytest.raises(NotFoundError):
        seeded_chart.create_account("7000", "Orphan", "asset", parent_code="6999")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"account_type": "income"},
        {"account_type": "asset", "normal_balance": "left"},
    ],
)
def test_create_account_validation(registry, kwargs):
    with pytest.raises(ValidationError):
        registry.create_account("8000", "Bad", **kwargs)


def test_create_account_requires_code(registry):
    with pytest.raises(ValidationError):
        registry.create_account("  ", "Blank", "asset")


def test_deactivate_account(seeded_chart):
    seeded_chart.deactivate_account("4120")

    active = [account.code for account in seeded_chart.get_chart_of_accounts()]
    everything = {account.code: account for account in seeded_chart.get_chart_of_accounts(include_inactive=True)}
    assert "4120" not in active
    assert everything["4120"].is_active is False


def test_deactivate_unknown_account(seeded_chart):
    with pytest.raises(NotFoundError):
        seeded_chart.deactivate_account("9999")


def test_default_normal_balance():
    assert default_normal_balance(AccountType.ASSET) is NormalBalance.DEBIT
    assert default_normal_balance(AccountType.EXPENSE) is NormalBalance.DEBIT
    assert default_normal_balance(AccountType.LIABILITY) is NormalBalance.CREDIT
    assert default_normal_balance(AccountType.EQUITY) is NormalBalance.CREDIT
    assert default_normal_balance(AccountType.REVENUE) is NormalBalance.CREDIT
