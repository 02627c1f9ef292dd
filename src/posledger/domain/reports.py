"""Reporting engine: balance sheet, income statement, summary and audits."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from posledger.database.base import Database
from posledger.domain.chart import default_normal_balance
from posledger.domain.entities import (
    RECORD_STATUS_CONFIRMED,
    ZERO,
    Account,
    AccountGroup,
    AccountLine,
    AccountType,
    BalanceDrift,
    BalanceSheet,
    CategoryBreakdown,
    FinancialSummary,
    IncomeStatement,
    InventoryValuation,
    RecordType,
    SourceBreakdown,
    SubcategoryBreakdown,
    TrialBalance,
    TrialBalanceRow,
)
from posledger.logging_config import get_logger
from posledger.utils.date_parser import start_of_year

logger = get_logger(__name__)

BALANCE_TOLERANCE = Decimal("0.01")

DEFAULT_GROUPS = {
    AccountType.ASSET: "Other Assets",
    AccountType.LIABILITY: "Other Liabilities",
    AccountType.EQUITY: "Owner Equity",
    AccountType.REVENUE: "Other Revenue",
    AccountType.EXPENSE: "Other Expenses",
}

CURRENT_EARNINGS_GROUP = "unclosed_earnings"
CURRENT_EARNINGS_NAME = "Current Period Earnings"
COGS_GROUP = "cost_of_goods_sold"

# Summary rules kept identical to the dashboard figures
RETURNS_CATEGORY = "Returns and Allowances"
REFUND_MARKER = "Refund"
NETTED_EXPENSE_CATEGORIES = frozenset({"Service Cancellation", "Warranty Refund"})
CAPITALIZED_CATEGORIES = frozenset({"Inventory Purchase"})


def is_capitalized_or_netted(category: str) -> bool:
    """Whether an expense category is left out of the summary's expense total."""
    lowered = category.lower()
    return (
        category in CAPITALIZED_CATEGORIES
        or category in NETTED_EXPENSE_CATEGORIES
        or "purchase" in lowered
        or "asset" in lowered
    )


def is_refund_income(category: str, description: str) -> bool:
    return (
        REFUND_MARKER in category
        or category == RETURNS_CATEGORY
        or REFUND_MARKER in description
    )


def _group_name(account: Account) -> str:
    return account.subtype or DEFAULT_GROUPS[account.type]


def _build_groups(rows: Iterable[tuple[str, AccountLine]]) -> dict[str, AccountGroup]:
    grouped: dict[str, list[AccountLine]] = {}
    for name, line in rows:
        grouped.setdefault(name, []).append(line)
    return {
        name: AccountGroup(accounts=tuple(lines), total=sum((line.amount for line in lines), ZERO))
        for name, lines in grouped.items()
    }


def _total(groups: dict[str, AccountGroup]) -> Decimal:
    return sum((group.total for group in groups.values()), ZERO)


class ReportService:
    """Service computing financial reports from the ledger."""

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def _balances(self, accounts: list[Account], as_of_date: Optional[date]) -> dict[int, Decimal]:
        """Live balances, or balances replayed from journal lines up to as_of_date."""
        if as_of_date is None:
            return {account.id: account.balance for account in accounts}
        activity = self.db.get_account_activity(end_date=as_of_date)
        balances = {}
        for account in accounts:
            debits, credits = activity.get(account.id, (ZERO, ZERO))
            balances[account.id] = account.normal_balance.signed_change(debits, credits)
        return balances

    def get_balance_sheet(self, as_of_date: Optional[date] = None) -> BalanceSheet:
        """Assets, liabilities and equity grouped by subtype.

        Without ``as_of_date`` the running balances are reported; with it,
        balances are rebuilt from posted journal lines dated on or before
        that day. Contra accounts (e.g. accumulated depreciation) reduce
        their section. Revenue less expenses that has not been closed to
        retained earnings is shown as current period earnings under equity,
        which keeps ``balance_check`` true for any balanced ledger.
        """
        accounts = self.db.list_accounts(active_only=True)
        balances = self._balances(accounts, as_of_date)

        sections: dict[AccountType, list[tuple[str, AccountLine]]] = defaultdict(list)
        earnings = ZERO
        for account in accounts:
            balance = balances[account.id]
            if account.type is AccountType.REVENUE:
                earnings += balance
                continue
            if account.type is AccountType.EXPENSE:
                earnings -= balance
                continue

            if account.normal_balance is not default_normal_balance(account.type):
                balance = -balance
            sections[account.type].append(
                (_group_name(account), AccountLine(code=account.code, name=account.name, amount=balance))
            )

        if earnings != ZERO:
            sections[AccountType.EQUITY].append(
                (CURRENT_EARNINGS_GROUP, AccountLine(code=None, name=CURRENT_EARNINGS_NAME, amount=earnings))
            )

        assets = _build_groups(sections[AccountType.ASSET])
        liabilities = _build_groups(sections[AccountType.LIABILITY])
        equity = _build_groups(sections[AccountType.EQUITY])
        total_assets = _total(assets)
        total_liabilities = _total(liabilities)
        total_equity = _total(equity)
        balance_check = abs(total_assets - (total_liabilities + total_equity)) < BALANCE_TOLERANCE

        if not balance_check:
            logger.warning(
                "Balance sheet does not balance",
                extra={
                    "total_assets": total_assets,
                    "total_liabilities": total_liabilities,
                    "total_equity": total_equity,
                    "as_of_date": as_of_date,
                },
            )

        return BalanceSheet(
            assets=assets,
            liabilities=liabilities,
            equity=equity,
            total_assets=total_assets,
            total_liabilities=total_liabilities,
            total_equity=total_equity,
            balance_check=balance_check,
            as_of_date=as_of_date,
        )

    def get_income_statement(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> IncomeStatement:
        """Revenue and expense activity of posted journal lines in a period.

        Both bounds are inclusive; the period defaults to 1 January of the
        current year through today. Accounts without activity are omitted.
        """
        start = start_date or start_of_year()
        end = end_date or date.today()

        accounts = self.db.list_accounts(
            active_only=True,
            account_types=[AccountType.REVENUE.value, AccountType.EXPENSE.value],
        )
        activity = self.db.get_account_activity(start_date=start, end_date=end)

        revenue_rows = []
        expense_rows = []
        for account in accounts:
            debits, credits = activity.get(account.id, (ZERO, ZERO))
            amount = account.normal_balance.signed_change(debits, credits)
            if amount == ZERO:
                continue
            row = (_group_name(account), AccountLine(code=account.code, name=account.name, amount=amount))
            if account.type is AccountType.REVENUE:
                revenue_rows.append(row)
            else:
                expense_rows.append(row)

        revenue = _build_groups(revenue_rows)
        expenses = _build_groups(expense_rows)
        total_revenue = _total(revenue)
        total_expenses = _total(expenses)
        cogs = expenses[COGS_GROUP].total if COGS_GROUP in expenses else ZERO

        return IncomeStatement(
            revenue=revenue,
            expenses=expenses,
            total_revenue=total_revenue,
            total_expenses=total_expenses,
            gross_profit=total_revenue - cogs,
            net_income=total_revenue - total_expenses,
            start_date=start,
            end_date=end,
        )

    def get_summary(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> FinancialSummary:
        """Dashboard totals and breakdowns computed from confirmed financial records.

        Income excludes refunds and returns; "Service Cancellation" and
        "Warranty Refund" expenses are netted from income instead of counted
        as expenses; capitalized purchases (category "Inventory Purchase" or
        containing "purchase" or "asset") are not expenses in this view.
        """
        records = self.db.list_financial_records(
            start_date=start_date, end_date=end_date, status=RECORD_STATUS_CONFIRMED
        )

        gross_income = ZERO
        netted = ZERO
        total_expense = ZERO
        by_category: dict[tuple[str, str], list[Decimal]] = defaultdict(list)
        by_subcategory: dict[tuple[str, str], list[Decimal]] = defaultdict(list)
        payment_methods: dict[str, Decimal] = defaultdict(lambda: ZERO)
        by_source: dict[str, list[Decimal]] = defaultdict(list)

        for record in records:
            if record.type is RecordType.INCOME:
                if not is_refund_income(record.category, record.description):
                    gross_income += record.amount
            elif record.type is RecordType.EXPENSE:
                if record.category in NETTED_EXPENSE_CATEGORIES:
                    netted += record.amount
                if not is_capitalized_or_netted(record.category):
                    total_expense += record.amount

            by_category[(record.category, record.type.value)].append(record.amount)
            if record.subcategory:
                by_subcategory[(record.subcategory, record.type.value)].append(record.amount)
            if record.payment_method:
                payment_methods[record.payment_method] += record.amount
            if record.reference_type:
                by_source[record.reference_type].append(record.amount)

        categories: dict[str, CategoryBreakdown] = {}
        for (category, record_type), amounts in sorted(by_category.items()):
            current = categories.get(category, CategoryBreakdown())
            income, expense = current.income, current.expense
            if record_type == RecordType.INCOME.value:
                income = sum(amounts, ZERO)
            else:
                expense = sum(amounts, ZERO)
            categories[category] = CategoryBreakdown(income, expense, current.count + len(amounts))

        # One entry per subcategory; when it spans several types the last type wins
        subcategories = {
            subcategory: SubcategoryBreakdown(amount=sum(amounts, ZERO), type=record_type, count=len(amounts))
            for (subcategory, record_type), amounts in sorted(by_subcategory.items())
        }
        sources = {
            source: SourceBreakdown(amount=sum(amounts, ZERO), count=len(amounts))
            for source, amounts in sorted(by_source.items())
        }

        inventory: dict[str, InventoryValuation] = {}
        inventory_value = ZERO
        inventory_count = 0
        for product in self.db.list_products(active_only=True):
            if product.stock < 0:
                continue
            avg_cost = product.average_cost or ZERO
            value = avg_cost * product.stock
            inventory[product.name] = InventoryValuation(value=value, stock=product.stock, avg_cost=avg_cost)
            inventory_value += value
            inventory_count += product.stock

        total_income = gross_income - netted
        return FinancialSummary(
            total_income=total_income,
            total_expense=total_expense,
            net_profit=total_income - total_expense,
            transaction_count=len(records),
            inventory_value=inventory_value,
            inventory_count=inventory_count,
            categories=categories,
            payment_methods=dict(sorted(payment_methods.items())),
            sources=sources,
            subcategories=subcategories,
            inventory=inventory,
        )

    def get_trial_balance(self, as_of_date: Optional[date] = None) -> TrialBalance:
        """Debit and credit totals per account from posted journal lines."""
        activity = self.db.get_account_activity(end_date=as_of_date)
        rows = []
        for account in self.db.list_accounts(active_only=False):
            if account.id not in activity:
                continue
            debits, credits = activity[account.id]
            rows.append(
                TrialBalanceRow(
                    code=account.code,
                    name=account.name,
                    type=account.type,
                    debit_total=debits,
                    credit_total=credits,
                )
            )

        total_debits = sum((row.debit_total for row in rows), ZERO)
        total_credits = sum((row.credit_total for row in rows), ZERO)
        return TrialBalance(
            rows=tuple(rows),
            total_debits=total_debits,
            total_credits=total_credits,
            is_balanced=abs(total_debits - total_credits) <= BALANCE_TOLERANCE,
        )

    def reconcile_balances(self) -> list[BalanceDrift]:
        """Compare each running balance with a replay of its journal lines.

        Returns:
            Accounts whose stored balance differs from the replayed one
        """
        activity = self.db.get_account_activity()
        drifts = []
        for account in self.db.list_accounts(active_only=False):
            debits, credits = activity.get(account.id, (ZERO, ZERO))
            replayed = account.normal_balance.signed_change(debits, credits)
            if replayed != account.balance:
                drift = BalanceDrift(
                    code=account.code,
                    name=account.name,
                    recorded_balance=account.balance,
                    replayed_balance=replayed,
                )
                logger.warning(
                    "Account balance drift",
                    extra={
                        "account_code": account.code,
                        "recorded_balance": account.balance,
                        "replayed_balance": replayed,
                    },
                )
                drifts.append(drift)
        return drifts
