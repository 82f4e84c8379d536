"""Domain model entities for ledgerpost.

These are pure data classes representing accounting concepts, independent of
the database schema. The engine components exchange only these types; the
database layer maps its ORM rows onto them.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

ZERO = Decimal("0")


class AccountCategory(str, Enum):
    """Top-level chart of accounts category."""

    ASSETS = "Assets"
    LIABILITIES = "Liabilities"
    EQUITY = "Equity"
    REVENUE = "Revenue"
    EXPENSE = "Expense"


class MatchType(str, Enum):
    """How a classification rule pattern is compared with a description."""

    CONTAINS = "CONTAINS"
    STARTS_WITH = "STARTS_WITH"
    ENDS_WITH = "ENDS_WITH"
    EQUALS = "EQUALS"


class EntrySide(str, Enum):
    """Side of a journal line."""

    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class PostingStatus(str, Enum):
    """Outcome of posting one bank transaction."""

    POSTED = "POSTED"
    ALREADY_POSTED = "ALREADY_POSTED"
    FAILED = "FAILED"


RULE_BASED = "RULE_BASED"


@dataclass(frozen=True)
class Company:
    """Company that owns a chart of accounts."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class BankTransaction:
    """Bank statement line item produced by the import subsystem."""

    id: int
    company_id: int
    transaction_date: Optional[date]
    details: Optional[str]
    debit_amount: Optional[Decimal] = None
    credit_amount: Optional[Decimal] = None
    balance: Optional[Decimal] = None
    reference: Optional[str] = None
    source_file: Optional[str] = None
    fiscal_period_id: Optional[int] = None
    account_code: Optional[str] = None
    account_name: Optional[str] = None

    @property
    def is_credit(self) -> bool:
        """Money in: a strictly positive credit amount."""
        return self.credit_amount is not None and self.credit_amount > ZERO

    @property
    def is_debit(self) -> bool:
        """Money out: a strictly positive debit amount."""
        return self.debit_amount is not None and self.debit_amount > ZERO

    @property
    def amount(self) -> Optional[Decimal]:
        """Positive amount moved by the transaction, credit side first."""
        if self.is_credit:
            return self.credit_amount
        if self.is_debit:
            return self.debit_amount
        return None


@dataclass(frozen=True)
class Account:
    """Chart of accounts entry."""

    id: int
    company_id: int
    code: str
    name: str
    category: AccountCategory
    parent_id: Optional[int] = None
    parent_code: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class ClassificationRule:
    """Stored pattern-to-account mapping."""

    id: int
    company_id: int
    pattern: str
    match_type: MatchType
    account_id: int
    account_code: str
    account_name: str
    priority: int
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class ClassificationResult:
    """Contract between the classifier and the journal poster."""

    account_code: str
    account_name: str
    method: str
    rule_id: Optional[int] = None

    @property
    def is_rule_based(self) -> bool:
        return self.method == RULE_BASED


@dataclass(frozen=True)
class JournalEntryLine:
    """One debit or credit line of a journal entry."""

    id: int
    journal_entry_id: int
    account_id: int
    debit_amount: Optional[Decimal]
    credit_amount: Optional[Decimal]
    description: Optional[str]
    reference: Optional[str] = None
    source_transaction_id: Optional[int] = None


@dataclass(frozen=True)
class JournalEntry:
    """Journal entry header with its lines."""

    id: int
    reference: str
    entry_date: date
    description: Optional[str]
    company_id: int
    fiscal_period_id: Optional[int]
    created_by: Optional[str]
    created_at: datetime
    lines: tuple[JournalEntryLine, ...] = ()

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit_amount or ZERO for line in self.lines), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit_amount or ZERO for line in self.lines), ZERO)

    @property
    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit


@dataclass(frozen=True)
class PostingLine:
    """Line to be written by the poster: account, amount and side."""

    account_id: int
    amount: Decimal
    side: EntrySide
    description: Optional[str] = None


@dataclass(frozen=True)
class PostingResult:
    """Result of JournalPoster.post."""

    status: PostingStatus
    journal_entry_id: Optional[int] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status != PostingStatus.FAILED


@dataclass
class BatchResult:
    """Additive statistics for one batch run."""

    processed_count: int = 0
    classified_count: int = 0
    failed_count: int = 0
    unclassified_count: int = 0
    posted_count: int = 0
    already_posted_count: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.failed_count == 0
