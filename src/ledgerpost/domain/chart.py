"""Standard chart of accounts and keyword rules seeded for new companies."""

from typing import NamedTuple

from ledgerpost.domain.entities import AccountCategory


class StandardAccount(NamedTuple):
    code: str
    name: str
    category: AccountCategory


class StandardRule(NamedTuple):
    pattern: str
    account_code: str
    priority: int


_A = AccountCategory.ASSETS
_L = AccountCategory.LIABILITIES
_E = AccountCategory.EQUITY
_R = AccountCategory.REVENUE
_X = AccountCategory.EXPENSE

# Fixed trailing words of seeded sub-account names ("DOTSURE Insurance Premiums")
SEEDED_NAME_SUFFIXES: tuple[str, ...] = ("INSURANCE PREMIUMS",)

# Parents are listed before their sub-accounts.
STANDARD_ACCOUNTS: tuple[StandardAccount, ...] = (
    StandardAccount("1000", "Petty Cash", _A),
    StandardAccount("1100", "Bank - Current Account", _A),
    StandardAccount("1101", "Bank - Savings Account", _A),
    StandardAccount("1200", "Accounts Receivable", _A),
    StandardAccount("1300", "Inventory", _A),
    StandardAccount("1400", "Prepaid Expenses", _A),
    StandardAccount("1500", "VAT Input", _A),
    StandardAccount("2000", "Property, Plant & Equipment", _A),
    StandardAccount("2100", "Accumulated Depreciation", _A),
    StandardAccount("3000", "Accounts Payable", _L),
    StandardAccount("3100", "VAT Output", _L),
    StandardAccount("3200", "PAYE Payable", _L),
    StandardAccount("3300", "UIF Payable", _L),
    StandardAccount("3400", "SDL Payable", _L),
    StandardAccount("3500", "Accrued Expenses", _L),
    StandardAccount("4000", "Long-term Loans", _L),
    StandardAccount("5000", "Share Capital", _E),
    StandardAccount("5100", "Retained Earnings", _E),
    StandardAccount("6000", "Sales Revenue", _R),
    StandardAccount("6100", "Service Revenue", _R),
    StandardAccount("6200", "Other Operating Revenue", _R),
    StandardAccount("7000", "Interest Income", _R),
    StandardAccount("7100", "Dividend Income", _R),
    StandardAccount("8000", "Cost of Goods Sold", _X),
    StandardAccount("8100", "Employee Costs", _X),
    StandardAccount("8100-001", "Director Remuneration", _X),
    StandardAccount("8200", "Rent Expense", _X),
    StandardAccount("8300", "Utilities", _X),
    StandardAccount("8400", "Communication", _X),
    StandardAccount("8500", "Motor Vehicle Expenses", _X),
    StandardAccount("8600", "Travel & Entertainment", _X),
    StandardAccount("8700", "Professional Services", _X),
    StandardAccount("8800", "Insurance", _X),
    StandardAccount("8800-001", "King Price Insurance Premiums", _X),
    StandardAccount("8800-002", "DOTSURE Insurance Premiums", _X),
    StandardAccount("8800-003", "OUTSurance Insurance Premiums", _X),
    StandardAccount("8800-004", "MIWAY Insurance Premiums", _X),
    StandardAccount("8800-005", "Liberty Insurance Premiums", _X),
    StandardAccount("8800-006", "Badger Insurance Premiums", _X),
    StandardAccount("8800-999", "Other Insurance Premiums", _X),
    StandardAccount("8900", "Repairs & Maintenance", _X),
    StandardAccount("9000", "Office Supplies", _X),
    StandardAccount("9100", "Computer Expenses", _X),
    StandardAccount("9200", "Marketing & Advertising", _X),
    StandardAccount("9300", "Training & Development", _X),
    StandardAccount("9400", "Depreciation", _X),
    StandardAccount("9500", "Interest Expense", _X),
    StandardAccount("9600", "Bank Charges", _X),
    StandardAccount("9700", "Foreign Exchange Loss", _X),
    StandardAccount("9800", "VAT Payments to SARS", _X),
    StandardAccount("9810", "Loan Repayments", _X),
    StandardAccount("9820", "PAYE Expense", _X),
    StandardAccount("9900", "Pension Expenses", _X),
)

STANDARD_RULES: tuple[StandardRule, ...] = (
    StandardRule("ADMIN FEE", "9600", 10),
    StandardRule("FEE", "9600", 5),
    StandardRule("CHARGE", "9600", 5),
    StandardRule("SALARY", "8100", 5),
    StandardRule("WAGE", "8100", 5),
    StandardRule("INSURANCE", "8800", 5),
    StandardRule("INSURE", "8800", 5),
    StandardRule("RENT", "8200", 5),
    StandardRule("ELECTRICITY", "8300", 5),
    StandardRule("WATER", "8300", 5),
    StandardRule("TELEPHONE", "8400", 5),
    StandardRule("CELL", "8400", 5),
    StandardRule("INTERNET", "8400", 5),
    StandardRule("STATIONERY", "9000", 5),
    StandardRule("PRINTING", "9000", 5),
)
