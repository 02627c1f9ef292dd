"""Tests for the category to account mapping."""

import pytest

from posledger.config import (
    DEFAULT_ACCOUNT_MAPPING,
    AccountMapping,
    account_mapping_from_dict,
    load_account_mapping,
    resolve_account_mapping,
)
from posledger.domain.errors import NotFoundError, ValidationError


def test_default_mapping_matches_historical_behaviour():
    mapping = DEFAULT_ACCOUNT_MAPPING
    assert mapping.revenue_account("Service Revenue") == "4210"
    assert mapping.revenue_account("Sales Revenue") == "4110"
    assert mapping.revenue_account("Anything else") == "4110"
    assert mapping.expense_account("Payroll") == "5210"
    assert mapping.expense_account("Cost of Goods Sold") == "5290"
    assert mapping.expense_account("Rent") == "5290"


def test_settlement_account():
    assert DEFAULT_ACCOUNT_MAPPING.settlement_account("cash") == "1111"
    assert DEFAULT_ACCOUNT_MAPPING.settlement_account("bank_transfer") == "1112"
    assert DEFAULT_ACCOUNT_MAPPING.settlement_account(None) == "1112"


def test_strict_mapping_raises_for_unmapped_category():
    mapping = AccountMapping(default_revenue_account=None, default_expense_account=None)
    with pytest.raises(NotFoundError, match="Rent"):
        mapping.expense_account("Rent")


def test_load_account_mapping(tmp_path):
    path = tmp_path / "mapping.yaml"
    path.write_text(
        """
cash_account: "1111"
revenue:
  Service Revenue: "4210"
  Accessory Sales: 4120
expense:
  Cost of Goods Sold: "5110"
  Rent: "5220"
default_expense: null
"""
    )

    mapping = load_account_mapping(path)

    assert mapping.revenue_account("Accessory Sales") == "4120"
    assert mapping.revenue_account("Other") == "4110"
    assert mapping.expense_account("Cost of Goods Sold") == "5110"
    assert mapping.bank_account == "1112"
    with pytest.raises(NotFoundError):
        mapping.expense_account("Payroll")


def test_empty_mapping_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_account_mapping(path) == DEFAULT_ACCOUNT_MAPPING


def test_mapping_file_must_be_a_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1111\n- 1112\n")
    with pytest.raises(ValidationError):
        load_account_mapping(path)


def test_unknown_keys_rejected():
    with pytest.raises(ValidationError, match="Unknown account mapping keys"):
        account_mapping_from_dict({"revenu": {}})


def test_invalid_code_rejected():
    with pytest.raises(ValidationError):
        account_mapping_from_dict({"revenue": {"Sales": ["4110"]}})


def test_resolve_account_mapping_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "mapping.yaml"
    path.write_text("bank_account: '1113'\n")
    monkeypatch.setenv("POSLEDGER_ACCOUNT_MAPPING", str(path))

    assert resolve_account_mapping().bank_account == "1113"


def test_resolve_account_mapping_default(monkeypatch):
    monkeypatch.delenv("POSLEDGER_ACCOUNT_MAPPING", raising=False)
    assert resolve_account_mapping() is DEFAULT_ACCOUNT_MAPPING
