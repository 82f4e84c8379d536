"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date
from decimal import Decimal
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerpost.domain.entities import (
    Account,
    AccountCategory,
    BankTransaction,
    ClassificationRule,
    Company,
    JournalEntry,
    MatchType,
)


class Database(ABC):
    """Abstract database interface for ledgerpost."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Run the enclosed operations as one unit of work.

        The outermost call commits on exit and rolls back on any exception.
        A nested call opens a savepoint, so a failure inside it only undoes
        the nested work.
        """
        pass

    # Company operations
    @abstractmethod
    def create_company(self, name: str) -> int:
        """Create a company. Returns company ID."""
        pass

    @abstractmethod
    def get_company(self, company_id: int) -> Optional[Company]:
        """Get company by ID."""
        pass

    @abstractmethod
    def get_company_by_name(self, name: str) -> Optional[Company]:
        """Get company by name."""
        pass

    @abstractmethod
    def list_companies(self) -> list[Company]:
        """List all companies."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        company_id: int,
        code: str,
        name: str,
        category: AccountCategory,
        parent_id: Optional[int] = None,
    ) -> int:
        """Create a chart account. Returns account ID.

        Raises ConflictError when the company already has an account with this code.
        """
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_code(self, company_id: int, code: str) -> Optional[Account]:
        """Get a company's account by its chart code."""
        pass

    @abstractmethod
    def list_accounts(self, company_id: int, include_inactive: bool = False) -> list[Account]:
        """List a company's accounts ordered by code."""
        pass

    @abstractmethod
    def list_accounts_with_code_prefix(self, company_id: int, prefix: str) -> list[Account]:
        """List a company's accounts whose code starts with prefix."""
        pass

    # Classification rule operations
    @abstractmethod
    def create_rule(
        self,
        company_id: int,
        pattern: str,
        account_id: int,
        priority: int = 0,
        match_type: MatchType = MatchType.CONTAINS,
    ) -> int:
        """Create a classification rule. Returns rule ID."""
        pass

    @abstractmethod
    def get_rule(self, rule_id: int) -> Optional[ClassificationRule]:
        """Get rule by ID."""
        pass

    @abstractmethod
    def list_rules(self, company_id: int, include_inactive: bool = False) -> list[ClassificationRule]:
        """List rules ordered by priority, then newest first."""
        pass

    @abstractmethod
    def set_rule_active(self, rule_id: int, is_active: bool) -> None:
        """Activate or deactivate a rule."""
        pass

    # Bank transaction operations
    @abstractmethod
    def create_bank_transaction(
        self,
        company_id: int,
        transaction_date: Optional[date],
        details: Optional[str],
        debit_amount: Optional[Decimal] = None,
        credit_amount: Optional[Decimal] = None,
        balance: Optional[Decimal] = None,
        reference: Optional[str] = None,
        source_file: Optional[str] = None,
        fiscal_period_id: Optional[int] = None,
    ) -> int:
        """Store a bank statement line. Returns bank transaction ID."""
        pass

    @abstractmethod
    def get_bank_transaction(self, transaction_id: int) -> Optional[BankTransaction]:
        """Get bank transaction by ID."""
        pass

    @abstractmethod
    def list_bank_transactions(
        self,
        company_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        classified: Optional[bool] = None,
    ) -> list[BankTransaction]:
        """List bank transactions ordered by date, then ID.

        classified=True keeps only transactions with an account code,
        classified=False only those without one.
        """
        pass

    @abstractmethod
    def list_unposted_bank_transactions(self, company_id: int) -> list[BankTransaction]:
        """List bank transactions that no journal line references."""
        pass

    @abstractmethod
    def update_bank_transaction_classification(
        self,
        transaction_id: int,
        account_code: Optional[str],
        account_name: Optional[str],
        classified_by: Optional[str] = None,
    ) -> None:
        """Record (or clear) the classification marker of a bank transaction."""
        pass

    # Journal operations
    @abstractmethod
    def create_journal_entry(
        self,
        company_id: int,
        reference: str,
        entry_date: date,
        description: Optional[str] = None,
        fiscal_period_id: Optional[int] = None,
        created_by: Optional[str] = None,
    ) -> int:
        """Create a journal entry header. Returns journal entry ID."""
        pass

    @abstractmethod
    def add_journal_entry_line(
        self,
        journal_entry_id: int,
        account_id: int,
        debit_amount: Optional[Decimal],
        credit_amount: Optional[Decimal],
        description: Optional[str] = None,
        reference: Optional[str] = None,
        source_transaction_id: Optional[int] = None,
    ) -> int:
        """Add a line to a journal entry. Returns line ID."""
        pass

    @abstractmethod
    def journal_reference_exists(self, reference: str) -> bool:
        """Check whether a journal entry already uses this reference."""
        pass

    @abstractmethod
    def count_journal_entries_with_prefix(self, prefix: str) -> int:
        """Count journal entries whose reference starts with prefix."""
        pass

    @abstractmethod
    def count_lines_for_transaction(self, transaction_id: int) -> int:
        """Count journal lines that reference a bank transaction."""
        pass

    @abstractmethod
    def get_journal_entry(self, journal_entry_id: int) -> Optional[JournalEntry]:
        """Get journal entry, with its lines, by ID."""
        pass

    @abstractmethod
    def list_journal_entries(
        self,
        company_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[JournalEntry]:
        """List a company's journal entries ordered by date, then ID."""
        pass

    @abstractmethod
    def get_journal_entries_for_transaction(self, transaction_id: int) -> list[JournalEntry]:
        """Get the journal entries whose lines reference a bank transaction."""
        pass

    @abstractmethod
    def delete_journal_entries_for_transaction(self, transaction_id: int) -> int:
        """Delete every journal entry posted for a bank transaction. Returns count deleted."""
        pass
