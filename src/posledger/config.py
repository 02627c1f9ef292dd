"""Category to ledger-account mapping used by the transaction recorder.

The mapping replaces string comparisons on category names with explicit
tables. The built-in default keeps the historical behaviour: service revenue
and payroll have their own accounts, every other income goes to sales revenue
and every other expense to the generic other-expense account. A mapping loaded
from YAML can drop the fallbacks, in which case unmapped categories fail.

Example mapping file::

    cash_account: "1111"
    bank_account: "1112"
    revenue:
      Service Revenue: "4210"
      Sales Revenue: "4110"
    expense:
      Payroll: "5210"
      Cost of Goods Sold: "5110"
    default_revenue: "4110"
    default_expense: null
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from posledger.domain.errors import NotFoundError, ValidationError, unmapped_category
from posledger.logging_config import get_logger

logger = get_logger("config")

ACCOUNT_MAPPING_ENV = "POSLEDGER_ACCOUNT_MAPPING"

CASH_PAYMENT_METHOD = "cash"


class AccountCodes:
    """Well-known account codes of the default chart of accounts."""

    CASH = "1111"
    BANK = "1112"
    INVENTORY = "1130"
    DAMAGED_GOODS_INVENTORY = "1135"
    SALES_REVENUE = "4110"
    SERVICE_REVENUE = "4210"
    COST_OF_GOODS_SOLD = "5110"
    DAMAGED_GOODS_LOSS = "5130"
    WARRANTY_EXPENSE = "5140"
    PAYROLL_EXPENSE = "5210"
    OTHER_EXPENSE = "5290"


@dataclass(frozen=True)
class AccountMapping:
    """Explicit category -> account code tables plus settlement accounts."""

    cash_account: str = AccountCodes.CASH
    bank_account: str = AccountCodes.BANK
    revenue_accounts: Mapping[str, str] = field(
        default_factory=lambda: {
            "Service Revenue": AccountCodes.SERVICE_REVENUE,
            "Sales Revenue": AccountCodes.SALES_REVENUE,
        }
    )
    expense_accounts: Mapping[str, str] = field(
        default_factory=lambda: {"Payroll": AccountCodes.PAYROLL_EXPENSE}
    )
    default_revenue_account: Optional[str] = AccountCodes.SALES_REVENUE
    default_expense_account: Optional[str] = AccountCodes.OTHER_EXPENSE

    def settlement_account(self, payment_method: Optional[str]) -> str:
        """Cash for cash payments, bank for everything else."""
        if payment_method == CASH_PAYMENT_METHOD:
            return self.cash_account
        return self.bank_account

    def revenue_account(self, category: str) -> str:
        return self._lookup("income", category, self.revenue_accounts, self.default_revenue_account)

    def expense_account(self, category: str) -> str:
        return self._lookup("expense", category, self.expense_accounts, self.default_expense_account)

    def _lookup(
        self,
        record_type: str,
        category: str,
        table: Mapping[str, str],
        fallback: Optional[str],
    ) -> str:
        code = table.get(category)
        if code is not None:
            return code
        if fallback is None:
            raise NotFoundError(unmapped_category(record_type, category))
        logger.warning(
            "Category not mapped, using fallback account",
            extra={"record_type": record_type, "category": category, "account_code": fallback},
        )
        return fallback


DEFAULT_ACCOUNT_MAPPING = AccountMapping()


def _code(value: Any, key: str) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ValidationError(f"Account mapping key '{key}' must be an account code")
    return str(value)


def _table(value: Any, key: str) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError(f"Account mapping key '{key}' must be a mapping of category to code")
    return {str(category): _code(code, f"{key}.{category}") for category, code in value.items()}


def account_mapping_from_dict(data: Mapping[str, Any]) -> AccountMapping:
    """Build an AccountMapping from parsed YAML data.

    Keys that are absent keep the default; ``default_revenue`` and
    ``default_expense`` set explicitly to null make the mapping strict.
    """
    known = {"cash_account", "bank_account", "revenue", "expense", "default_revenue", "default_expense"}
    unknown = set(data) - known
    if unknown:
        raise ValidationError(f"Unknown account mapping keys: {', '.join(sorted(unknown))}")

    default = DEFAULT_ACCOUNT_MAPPING
    return AccountMapping(
        cash_account=_code(data.get("cash_account"), "cash_account") or default.cash_account,
        bank_account=_code(data.get("bank_account"), "bank_account") or default.bank_account,
        revenue_accounts=(
            _table(data["revenue"], "revenue") if "revenue" in data else dict(default.revenue_accounts)
        ),
        expense_accounts=(
            _table(data["expense"], "expense") if "expense" in data else dict(default.expense_accounts)
        ),
        default_revenue_account=(
            _code(data["default_revenue"], "default_revenue")
            if "default_revenue" in data
            else default.default_revenue_account
        ),
        default_expense_account=(
            _code(data["default_expense"], "default_expense")
            if "default_expense" in data
            else default.default_expense_account
        ),
    )


def load_account_mapping(path: str | Path) -> AccountMapping:
    """Load an account mapping from a YAML file."""
    path = Path(path)
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValidationError(f"Account mapping file {path} must contain a mapping")

    mapping = account_mapping_from_dict(data)
    logger.info(
        "Loaded account mapping",
        extra={
            "path": str(path),
            "revenue_categories": len(mapping.revenue_accounts),
            "expense_categories": len(mapping.expense_accounts),
        },
    )
    return mapping


def resolve_account_mapping(path: Optional[str | Path] = None) -> AccountMapping:
    """Mapping from ``path``, else from POSLEDGER_ACCOUNT_MAPPING, else the default."""
    if path is None:
        path = os.environ.get(ACCOUNT_MAPPING_ENV)
    if not path:
        return DEFAULT_ACCOUNT_MAPPING
    return load_account_mapping(path)
