"""Chart of accounts domain service."""

from typing import Optional

from posledger.database.base import Database
from posledger.domain.default_accounts import DEFAULT_ACCOUNTS
from posledger.domain.entities import Account, AccountType, NormalBalance
from posledger.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_code_not_found,
    duplicate_account_code,
    invalid_choice,
)
from posledger.logging_config import get_logger

logger = get_logger(__name__)


class AccountRegistry:
    """Service for the chart of accounts."""

    def __init__(self, db: Database):
        """Initialize account registry.

        Args:
            db: Database instance
        """
        self.db = db

    def get_account_by_code(self, code: str) -> Optional[Account]:
        """Look up an account by its exact code.

        Returns None rather than raising so callers can build their own error.
        """
        return self.db.get_account_by_code(code)

    def get_chart_of_accounts(self, include_inactive: bool = False) -> list[Account]:
        """Accounts ordered by code, active ones only unless asked otherwise."""
        return self.db.list_accounts(active_only=not include_inactive)

    def create_account(
        self,
        code: str,
        name: str,
        account_type: str,
        subtype: Optional[str] = None,
        normal_balance: Optional[str] = None,
        parent_code: Optional[str] = None,
        description: Optional[str] = None,
    ) -> int:
        """Create a ledger account.

        Args:
            code: Unique account code, e.g. "1111"
            name: Account name
            account_type: One of asset, liability, equity, revenue, expense
            subtype: Grouping key used by reports
            normal_balance: debit or credit; derived from the type when omitted
            parent_code: Optional parent account code
            description: Optional description

        Returns:
            Account ID

        Raises:
            ValidationError: If type or normal balance is invalid
            ConflictError: If the code is already used
            NotFoundError: If the parent account does not exist
        """
        code = code.strip()
        if not code:
            raise ValidationError("Account code cannot be empty")

        types = [t.value for t in AccountType]
        if account_type not in types:
            raise ValidationError(invalid_choice("account type", account_type, types))
        if normal_balance is None:
            normal_balance = default_normal_balance(AccountType(account_type)).value
        balances = [b.value for b in NormalBalance]
        if normal_balance not in balances:
            raise ValidationError(invalid_choice("normal balance", normal_balance, balances))

        if self.db.get_account_by_code(code) is not None:
            raise ConflictError(duplicate_account_code(code))
        if parent_code is not None and self.db.get_account_by_code(parent_code) is None:
            raise NotFoundError(account_code_not_found(parent_code), account_code=parent_code)

        return self.db.create_account(
            code=code,
            name=name,
            account_type=account_type,
            normal_balance=normal_balance,
            subtype=subtype,
            parent_code=parent_code,
            description=description,
        )

    def deactivate_account(self, code: str) -> None:
        """Hide an account from the chart and reject new postings to it.

        Accounts are never deleted so historical journal lines stay valid.
        """
        if self.db.get_account_by_code(code) is None:
            raise NotFoundError(account_code_not_found(code), account_code=code)
        self.db.set_account_active(code, False)
        logger.info("Account deactivated", extra={"account_code": code})

    def initialize_default_accounts(self) -> int:
        """Seed the standard chart of accounts, skipping codes that exist.

        Returns:
            Number of accounts created
        """
        created = 0
        for seed in DEFAULT_ACCOUNTS:
            if self.db.get_account_by_code(seed.code) is not None:
                continue
            self.db.create_account(
                code=seed.code,
                name=seed.name,
                account_type=seed.type,
                normal_balance=seed.normal_balance,
                subtype=seed.subtype,
                parent_code=seed.parent_code,
                description=seed.description,
            )
            created += 1

        logger.info("Chart of accounts initialized", extra={"accounts_created": created})
        return created


def default_normal_balance(account_type: AccountType) -> NormalBalance:
    """Assets and expenses grow with debits; everything else with credits."""
    if account_type in (AccountType.ASSET, AccountType.EXPENSE):
        return NormalBalance.DEBIT
    return NormalBalance.CREDIT
