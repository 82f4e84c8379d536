"""Built-in keyword heuristics used when no stored rule matches.

HEURISTIC_RULES is evaluated top to bottom and the first applicable entry
wins. Credit-only entries come first, then entries for either side, then
debit-only entries. Keywords match whole words or phrases of the upper-cased
transaction details, so "RENT" does not fire on "CURRENT" and "CAR" does not
fire on "CARD".
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Optional

from ledgerpost.domain.entities import BankTransaction

CREDIT = "CREDIT"
DEBIT = "DEBIT"
ANY = "ANY"

MONTHS = (
    "JAN", "JANUARY", "FEB", "FEBRUARY", "MAR", "MARCH", "APR", "APRIL", "MAY", "JUN", "JUNE",
    "JUL", "JULY", "AUG", "AUGUST", "SEP", "SEPT", "SEPTEMBER", "OCT", "OCTOBER", "NOV",
    "NOVEMBER", "DEC", "DECEMBER",
)

# Banking boilerplate that never names a counter-party
FILLER_WORDS = frozenset(
    (
        "PAYMENT", "PAYMENTS", "PAY", "PAID", "TO", "FOR", "FROM", "THE", "AND", "OF", "REF",
        "REFERENCE", "DEBIT", "CREDIT", "ORDER", "TRANSFER", "IB", "EFT", "ACB", "MAGTAPE",
        "IMMEDIATE", "INTERNET", "BANKING", "ONLINE", "MONTHLY", "MONTH", "SETTLEMENT",
        "NO", "NR", "ACC", "ACCOUNT", "POLICY", "PREMIUM", "PREMIUMS", "COVER", "DEBICHECK",
    )
    + MONTHS
)

KNOWN_INSURERS = (
    "KING PRICE",
    "DOTSURE",
    "OUTSURANCE",
    "MIWAY",
    "LIBERTY",
    "BADGER",
    "SANTAM",
    "DISCOVERY",
    "HOLLARD",
    "OLD MUTUAL",
    "SANLAM",
    "MOMENTUM",
)

SALARY_KEYWORDS = ("SALARY", "SALARIES", "WAGE", "WAGES", "PAYROLL")
INSURANCE_KEYWORDS = ("INSURANCE", "ASSURANCE", "INSURE") + KNOWN_INSURERS


@lru_cache(maxsize=512)
def _keyword_pattern(keyword: str) -> re.Pattern:
    return re.compile(rf"(?<![A-Z0-9]){re.escape(keyword)}(?![A-Z0-9])")


def contains_keyword(text: str, keyword: str) -> bool:
    """Check for keyword as a whole word or phrase in upper-cased text."""
    return _keyword_pattern(keyword).search(text) is not None


def contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(contains_keyword(text, k) for k in keywords)


def _remaining_name(text: str, remove: tuple[str, ...]) -> Optional[str]:
    """Strip trigger keywords, digits and filler from text; return what is left."""
    for keyword in sorted(remove, key=len, reverse=True):
        text = _keyword_pattern(keyword).sub(" ", text)
    words = [w for w in re.findall(r"[A-Z][A-Z'&]*", text) if len(w) > 1 and w not in FILLER_WORDS]
    if not words:
        return None
    return " ".join(words)


def extract_employee_name(details: str) -> Optional[str]:
    """Employee name from a salary line, e.g. "SALARY J SMITHERS MAR 2024" -> "SMITHERS"."""
    return _remaining_name(details, SALARY_KEYWORDS)


def extract_insurer_name(details: str) -> Optional[str]:
    """Insurer from an insurance line; known insurers take precedence over leftover words."""
    for insurer in KNOWN_INSURERS:
        if contains_keyword(details, insurer):
            return insurer
    return _remaining_name(details, INSURANCE_KEYWORDS)


@dataclass(frozen=True)
class HeuristicRule:
    """One row of the heuristic table.

    Attributes:
        tag: Classification method reported for matches
        side: CREDIT, DEBIT or ANY
        keywords: Any one of these must appear
        account_code: Target account, or parent of the minted sub-account
        account_name: Name used if the target account has to be created
        excludes: None of these may appear
        requires: All of these must also appear
        extract_name: Returns the counter-party name for a per-name sub-account
    """

    tag: str
    side: str
    keywords: tuple[str, ...]
    account_code: str
    account_name: str
    excludes: tuple[str, ...] = ()
    requires: tuple[str, ...] = ()
    extract_name: Optional[Callable[[str], Optional[str]]] = None

    def applies_to(self, transaction: BankTransaction) -> bool:
        if self.side == CREDIT:
            return transaction.is_credit
        if self.side == DEBIT:
            return transaction.is_debit
        return transaction.is_credit or transaction.is_debit

    def matches(self, details: str, transaction: BankTransaction) -> bool:
        """Check the entry against normalized details of a transaction."""
        if not self.applies_to(transaction):
            return False
        if not contains_any(details, self.keywords):
            return False
        if self.excludes and contains_any(details, self.excludes):
            return False
        return all(contains_keyword(details, k) for k in self.requires)


HEURISTIC_RULES: tuple[HeuristicRule, ...] = (
    # Money in
    HeuristicRule(
        "INTEREST_INCOME", CREDIT, ("INTEREST", "INT CREDIT"), "7000", "Interest Income",
    ),
    HeuristicRule(
        "REFUND", CREDIT, ("REFUND", "REVERSAL", "RTD-DEBIT", "REVERSED"), "6200", "Other Operating Revenue",
    ),
    HeuristicRule(
        "DIRECTOR_LOAN", CREDIT, ("DIRECTOR", "SHAREHOLDER", "OWNER"), "4000", "Long-term Loans",
    ),
    HeuristicRule(
        "DIRECTOR_LOAN", CREDIT, ("IB TRANSFER",), "4000", "Long-term Loans", requires=("FROM",),
    ),
    HeuristicRule(
        "SERVICE_REVENUE",
        CREDIT,
        ("CREDIT TRANSFER", "DEPOSIT", "PAYMENT", "PAYMENT RECEIVED", "MAGTAPE CREDIT", "INVOICE", "INV"),
        "6100",
        "Service Revenue",
        excludes=("LOAN", "CAPITAL", "BOND"),
    ),
    # Either side
    HeuristicRule(
        "BANK_CHARGES",
        ANY,
        ("FEE", "FEES", "BANK CHARGE", "BANK CHARGES", "SERVICE CHARGE", "SERVICE CHARGES"),
        "9600",
        "Bank Charges",
    ),
    HeuristicRule("PAYE", ANY, ("PAYE",), "3200", "PAYE Payable"),
    HeuristicRule("UIF", ANY, ("UIF",), "3300", "UIF Payable"),
    HeuristicRule("SDL", ANY, ("SDL",), "3400", "SDL Payable"),
    HeuristicRule("VAT", ANY, ("VAT", "SARS"), "3100", "VAT Output"),
    HeuristicRule(
        "SALARIES", ANY, SALARY_KEYWORDS, "8100", "Employee Costs", extract_name=extract_employee_name,
    ),
    HeuristicRule(
        "INSURANCE", ANY, INSURANCE_KEYWORDS, "8800", "Insurance", extract_name=extract_insurer_name,
    ),
    HeuristicRule("RENT", ANY, ("RENT", "RENTAL", "LEASE"), "8200", "Rent Expense"),
    HeuristicRule(
        "COMMUNICATION",
        ANY,
        ("TELEPHONE", "TELKOM", "INTERNET", "CELL", "CELLPHONE", "VODACOM", "MTN", "AIRTIME", "COMMUNICATION"),
        "8400",
        "Communication",
        excludes=("INTERNET BANKING",),
    ),
    HeuristicRule(
        "MOTOR_VEHICLE",
        ANY,
        ("FUEL", "PETROL", "DIESEL", "VEHICLE", "MOTOR", "CAR", "CARTRACK", "NETSTAR"),
        "8500",
        "Motor Vehicle Expenses",
    ),
    HeuristicRule(
        "UTILITIES", ANY, ("ELECTRICITY", "WATER", "MUNICIPAL", "UTILITIES", "ESKOM"), "8300", "Utilities",
    ),
    HeuristicRule(
        "PROFESSIONAL_SERVICES",
        ANY,
        ("LEGAL", "ATTORNEY", "ATTORNEYS", "ACCOUNTING", "ACCOUNTANT", "AUDIT",
         "PROFESSIONAL", "CONSULTANT", "CONSULTING"),
        "8700",
        "Professional Services",
    ),
    HeuristicRule(
        "TRAVEL",
        ANY,
        ("TRAVEL", "HOTEL", "FLIGHT", "ACCOMMODATION", "ENTERTAINMENT", "MEALS", "RESTAURANT"),
        "8600",
        "Travel & Entertainment",
    ),
    HeuristicRule(
        "OFFICE_SUPPLIES", ANY, ("STATIONERY", "OFFICE", "SUPPLIES", "PRINTING"), "9000", "Office Supplies",
    ),
    HeuristicRule(
        "COMPUTER",
        ANY,
        ("SOFTWARE", "COMPUTER", "TECHNOLOGY", "HOSTING", "LICENSE", "LICENCE"),
        "9100",
        "Computer Expenses",
    ),
    HeuristicRule(
        "MARKETING", ANY, ("MARKETING", "ADVERTISING", "ADVERT", "PROMOTION"), "9200", "Marketing & Advertising",
    ),
    # Money out
    HeuristicRule("INTEREST_EXPENSE", DEBIT, ("BOND",), "9500", "Interest Expense", requires=("REPAYMENT",)),
    HeuristicRule("INTEREST_EXPENSE", DEBIT, ("INTEREST",), "9500", "Interest Expense"),
    HeuristicRule(
        "DIRECTOR_LOAN_RECEIVABLE",
        DEBIT,
        ("DIRECTOR", "SHAREHOLDER", "OWNER", "IB TRANSFER"),
        "1200",
        "Accounts Receivable",
    ),
)


def find_heuristic(transaction: BankTransaction) -> Optional[HeuristicRule]:
    """Return the first heuristic entry that fits the transaction, if any."""
    details = (transaction.details or "").strip().upper()
    if not details:
        return None
    for rule in HEURISTIC_RULES:
        if rule.matches(details, transaction):
            return rule
    return None
