"""Standard chart of accounts seeded by ``AccountRegistry.initialize_default_accounts``."""

from typing import NamedTuple, Optional


class AccountSeed(NamedTuple):
    code: str
    name: str
    type: str
    subtype: str
    normal_balance: str
    parent_code: Optional[str]
    description: str


DEFAULT_ACCOUNTS: tuple[AccountSeed, ...] = (
    # Assets
    AccountSeed("1000", "Assets", "asset", "asset_root", "debit", None, "Company assets"),
    AccountSeed("1100", "Current Assets", "asset", "current_asset", "debit", "1000", "Assets realizable within one year"),
    AccountSeed("1110", "Cash and Cash Equivalents", "asset", "cash", "debit", "1100", "Cash on hand and in bank"),
    AccountSeed("1111", "Cash", "asset", "cash", "debit", "1110", "Cash on hand"),
    AccountSeed("1112", "Bank", "asset", "cash", "debit", "1110", "Bank accounts"),
    AccountSeed("1120", "Accounts Receivable", "asset", "receivable", "debit", "1100", "Amounts owed by customers"),
    AccountSeed("1130", "Inventory", "asset", "inventory", "debit", "1100", "Merchandise in stock"),
    AccountSeed("1135", "Damaged Goods Inventory", "asset", "inventory", "debit", "1100", "Defective parts returned under warranty"),
    AccountSeed("1140", "Other Receivables", "asset", "receivable", "debit", "1100", "Receivables outside the main business"),
    AccountSeed("1150", "Prepaid Expenses", "asset", "prepaid", "debit", "1100", "Expenses paid for future periods"),
    AccountSeed("1200", "Fixed Assets", "asset", "fixed_asset", "debit", "1000", "Long-term operating assets"),
    AccountSeed("1210", "Equipment", "asset", "fixed_asset", "debit", "1200", "Office and shop equipment"),
    AccountSeed("1220", "Vehicles", "asset", "fixed_asset", "debit", "1200", "Operating vehicles"),
    AccountSeed("1230", "Furniture and Fixtures", "asset", "fixed_asset", "debit", "1200", "Furniture and fittings"),
    AccountSeed("1240", "Accumulated Depreciation - Equipment", "asset", "accumulated_depreciation", "credit", "1200", "Accumulated depreciation of equipment"),
    # Liabilities
    AccountSeed("2000", "Liabilities", "liability", "liability_root", "credit", None, "Company liabilities"),
    AccountSeed("2100", "Current Liabilities", "liability", "current_liability", "credit", "2000", "Liabilities due within one year"),
    AccountSeed("2110", "Accounts Payable", "liability", "payable", "credit", "2100", "Amounts owed to suppliers"),
    AccountSeed("2120", "Taxes Payable", "liability", "tax_payable", "credit", "2100", "Unpaid taxes"),
    AccountSeed("2130", "Salaries Payable", "liability", "payable", "credit", "2100", "Unpaid employee salaries"),
    AccountSeed("2140", "Other Payables", "liability", "payable", "credit", "2100", "Payables outside the main business"),
    AccountSeed("2200", "Long-term Liabilities", "liability", "long_term_liability", "credit", "2000", "Liabilities due after one year"),
    AccountSeed("2210", "Bank Loans", "liability", "loan", "credit", "2200", "Long-term bank loans"),
    # Equity
    AccountSeed("3000", "Equity", "equity", "equity_root", "credit", None, "Owner's equity"),
    AccountSeed("3100", "Owner's Capital", "equity", "owner_equity", "credit", "3000", "Capital contributed by the owner"),
    AccountSeed("3200", "Retained Earnings", "equity", "retained_earnings", "credit", "3000", "Accumulated profit or loss of prior periods"),
    AccountSeed("3300", "Current Year Earnings", "equity", "current_earnings", "credit", "3000", "Profit or loss of the current period"),
    # Revenue
    AccountSeed("4000", "Revenue", "revenue", "revenue_root", "credit", None, "Company revenue"),
    AccountSeed("4100", "Sales Revenue", "revenue", "sales_revenue", "credit", "4000", "Revenue from goods sold"),
    AccountSeed("4110", "Laptop Sales", "revenue", "sales_revenue", "credit", "4100", "Sales of laptops"),
    AccountSeed("4120", "Accessory Sales", "revenue", "sales_revenue", "credit", "4100", "Sales of accessories"),
    AccountSeed("4200", "Service Revenue", "revenue", "service_revenue", "credit", "4000", "Revenue from services"),
    AccountSeed("4210", "Laptop Repair Service", "revenue", "service_revenue", "credit", "4200", "Repair and service revenue"),
    AccountSeed("4300", "Other Revenue", "revenue", "other_revenue", "credit", "4000", "Revenue outside the main business"),
    # Expenses
    AccountSeed("5000", "Expenses", "expense", "expense_root", "debit", None, "Operating expenses"),
    AccountSeed("5100", "Cost of Goods Sold", "expense", "cost_of_goods_sold", "debit", "5000", "Cost of goods sold"),
    AccountSeed("5110", "Cost of Laptops Sold", "expense", "cost_of_goods_sold", "debit", "5100", "Cost of laptops sold"),
    AccountSeed("5120", "Cost of Accessories Sold", "expense", "cost_of_goods_sold", "debit", "5100", "Cost of accessories sold"),
    AccountSeed("5130", "Damaged Goods Loss", "expense", "cost_of_goods_sold", "debit", "5100", "Write-off of defective parts"),
    AccountSeed("5140", "Warranty Expense", "expense", "warranty_expense", "debit", "5100", "Refunds on warranty claims"),
    AccountSeed("5200", "Operating Expenses", "expense", "operating_expense", "debit", "5000", "Costs of running the business"),
    AccountSeed("5210", "Salary Expense", "expense", "payroll_expense", "debit", "5200", "Salaries and benefits"),
    AccountSeed("5220", "Rent Expense", "expense", "rent_expense", "debit", "5200", "Premises rent"),
    AccountSeed("5230", "Utilities Expense", "expense", "utility_expense", "debit", "5200", "Electricity and water"),
    AccountSeed("5240", "Telephone and Internet", "expense", "communication_expense", "debit", "5200", "Communication costs"),
    AccountSeed("5250", "Marketing Expense", "expense", "marketing_expense", "debit", "5200", "Promotion and advertising"),
    AccountSeed("5260", "Transport Expense", "expense", "transport_expense", "debit", "5200", "Transport and delivery"),
    AccountSeed("5270", "Supplies Expense", "expense", "supplies_expense", "debit", "5200", "Office supplies"),
    AccountSeed("5280", "Depreciation Expense", "expense", "depreciation_expense", "debit", "5200", "Depreciation of fixed assets"),
    AccountSeed("5290", "Other Expenses", "expense", "other_expense", "debit", "5200", "Other operating expenses"),
    AccountSeed("5300", "Non-operating Expenses", "expense", "non_operating_expense", "debit", "5000", "Costs outside core operations"),
    AccountSeed("5310", "Interest Expense", "expense", "interest_expense", "debit", "5300", "Loan interest"),
    AccountSeed("5320", "Tax Expense", "expense", "tax_expense", "debit", "5300", "Income tax"),
)
