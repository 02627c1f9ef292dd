"""Tests for domain entities."""

from datetime import date
from decimal import Decimal

import pytest

from posledger.domain.entities import (
    AccountGroup,
    AccountLine,
    BalanceDrift,
    NormalBalance,
    PartUsage,
    RecordType,
    to_wire,
)


def test_signed_change():
    assert NormalBalance.DEBIT.signed_change(Decimal("100"), Decimal("30")) == Decimal("70")
    assert NormalBalance.CREDIT.signed_change(Decimal("100"), Decimal("30")) == Decimal("-70")


def test_entities_are_frozen():
    part = PartUsage(name="RAM", quantity=1, selling_price=Decimal("10"))
    with pytest.raises(AttributeError):
        part.quantity = 2


def test_to_wire_converts_nested_values():
    group = AccountGroup(accounts=(AccountLine(code="1111", name="Cash", amount=Decimal("12.50")),), total=Decimal("12.50"))

    data = to_wire({"cash": group, "type": RecordType.INCOME, "day": date(2024, 1, 2)})

    assert data == {
        "cash": {"accounts": [{"code": "1111", "name": "Cash", "amount": "12.50"}], "total": "12.50"},
        "type": "income",
        "day": "2024-01-02",
    }


def test_balance_drift_difference():
    drift = BalanceDrift(code="1111", name="Cash", recorded_balance=Decimal("90"), replayed_balance=Decimal("100"))
    assert drift.difference == Decimal("-10")
