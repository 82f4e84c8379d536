"""Journal poster: turns classified bank transactions into balanced journal entries."""

import logging
from datetime import date, datetime, UTC
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError

from ledgerpost.config import Settings
from ledgerpost.database.base import Database
from ledgerpost.domain.account import AccountDirectory
from ledgerpost.domain.entities import (
    ZERO,
    BankTransaction,
    ClassificationResult,
    EntrySide,
    JournalEntry,
    PostingLine,
    PostingResult,
    PostingStatus,
)
from ledgerpost.domain.errors import (
    ConflictError,
    DomainError,
    ResolutionError,
    ValidationError,
    bank_account_not_found,
    posting_failed,
    unbalanced_entry,
)

logger = logging.getLogger(__name__)

AUTO_REFERENCE_PREFIX = "AUTO-"


def line_reference(entry_reference: str, line_number: int) -> str:
    return f"{entry_reference}-{line_number:02d}"


class JournalPoster:
    """Posts bank transactions to the journal at most once each.

    Every posting writes one entry header and two lines: the bank/cash
    account on one side and the classified account on the other, both
    tagged with the bank transaction's ID. Money in debits the bank; money
    out credits it.
    """

    def __init__(self, db: Database, directory: AccountDirectory, settings: Optional[Settings] = None):
        """Initialize journal poster.

        Args:
            db: Database instance
            directory: Account directory used to resolve and create accounts
            settings: Engine settings (bank account code, creator tag)
        """
        self.db = db
        self.directory = directory
        self.settings = settings if settings is not None else Settings()

    def is_posted(self, transaction_id: int) -> bool:
        """Check whether any journal line references the bank transaction."""
        return self.db.count_lines_for_transaction(transaction_id) > 0

    def get_entries_for_transaction(self, transaction_id: int) -> list[JournalEntry]:
        return self.db.get_journal_entries_for_transaction(transaction_id)

    def post(
        self,
        transaction: BankTransaction,
        classification: ClassificationResult,
        force_repost: bool = False,
    ) -> PostingResult:
        """Post a classified bank transaction.

        Args:
            transaction: Bank transaction to post
            classification: Account the transaction was classified to
            force_repost: Replace an existing posting instead of skipping it

        Returns:
            PostingResult with status POSTED, ALREADY_POSTED or FAILED.
            Failures are reported in the result, not raised.
        """
        company_id = transaction.company_id
        try:
            if not force_repost and self.is_posted(transaction.id):
                logger.debug("Transaction %s already posted", transaction.id)
                return PostingResult(PostingStatus.ALREADY_POSTED)

            amount = self._postable_amount(transaction)
            account_id = self.directory.get_or_create(
                company_id, classification.account_code, classification.account_name
            )

            with self.db.transaction():
                if self.is_posted(transaction.id):
                    if not force_repost:
                        return PostingResult(PostingStatus.ALREADY_POSTED)
                    removed = self.db.delete_journal_entries_for_transaction(transaction.id)
                    logger.info("Replacing %d journal entries of transaction %s", removed, transaction.id)

                bank_account_id = self.directory.resolve(company_id, self.settings.bank_account_code)
                if bank_account_id is None:
                    raise ResolutionError(bank_account_not_found(self.settings.bank_account_code, company_id))
                if bank_account_id == account_id:
                    raise ValidationError(
                        f"Transaction {transaction.id} is classified to the bank account itself"
                    )

                description = transaction.details
                if transaction.is_credit:
                    lines = [
                        PostingLine(bank_account_id, amount, EntrySide.DEBIT, description),
                        PostingLine(account_id, amount, EntrySide.CREDIT, description),
                    ]
                else:
                    lines = [
                        PostingLine(account_id, amount, EntrySide.DEBIT, description),
                        PostingLine(bank_account_id, amount, EntrySide.CREDIT, description),
                    ]

                entry_id = self.post_entry(
                    company_id=company_id,
                    entry_date=transaction.transaction_date,
                    description=description,
                    lines=lines,
                    fiscal_period_id=transaction.fiscal_period_id,
                    reference=self._transaction_reference(transaction.id),
                    source_transaction_id=transaction.id,
                )
        except (DomainError, SQLAlchemyError) as e:
            logger.warning("Posting failed for transaction %s: %s", transaction.id, e, exc_info=True)
            return PostingResult(PostingStatus.FAILED, error=posting_failed(transaction.id, str(e)))

        logger.info(
            "Posted transaction %s as journal entry %s (%s %s)",
            transaction.id,
            entry_id,
            classification.account_code,
            amount,
        )
        return PostingResult(PostingStatus.POSTED, journal_entry_id=entry_id)

    def post_entry(
        self,
        company_id: int,
        entry_date: date,
        description: Optional[str],
        lines: Iterable[PostingLine],
        fiscal_period_id: Optional[int] = None,
        created_by: Optional[str] = None,
        reference: Optional[str] = None,
        source_transaction_id: Optional[int] = None,
    ) -> int:
        """Write a balanced journal entry with any number of lines.

        Args:
            company_id: Company ID
            entry_date: Entry date
            description: Entry description
            lines: At least two lines whose debits equal their credits
            fiscal_period_id: Optional fiscal period
            created_by: Creator tag; defaults to the configured one
            reference: Unique entry reference; "AUTO-NNNNN" is generated when omitted
            source_transaction_id: Bank transaction the lines are tagged with

        Returns:
            Journal entry ID

        Raises:
            ValidationError: If the lines are unbalanced or otherwise invalid
            ConflictError: If the given reference is already in use
        """
        lines = list(lines)
        if entry_date is None:
            raise ValidationError("Journal entry date is required")
        self._validate_lines(lines)

        with self.db.transaction():
            if reference is None:
                reference = self._next_auto_reference()
            elif self.db.journal_reference_exists(reference):
                raise ConflictError(f"Journal entry reference '{reference}' already exists")

            entry_id = self.db.create_journal_entry(
                company_id=company_id,
                reference=reference,
                entry_date=entry_date,
                description=description,
                fiscal_period_id=fiscal_period_id,
                created_by=created_by or self.settings.created_by,
            )
            for number, line in enumerate(lines, start=1):
                self.db.add_journal_entry_line(
                    journal_entry_id=entry_id,
                    account_id=line.account_id,
                    debit_amount=line.amount if line.side == EntrySide.DEBIT else None,
                    credit_amount=line.amount if line.side == EntrySide.CREDIT else None,
                    description=line.description,
                    reference=line_reference(reference, number),
                    source_transaction_id=source_transaction_id,
                )
        return entry_id

    def _validate_lines(self, lines: list[PostingLine]) -> None:
        if len(lines) < 2:
            raise ValidationError("A journal entry needs at least two lines")
        for line in lines:
            if line.amount is None or line.amount <= ZERO:
                raise ValidationError(f"Journal line amounts must be positive, got {line.amount}")
            if self.db.get_account(line.account_id) is None:
                raise ValidationError(f"Account {line.account_id} does not exist")
        total_debit = sum((line.amount for line in lines if line.side == EntrySide.DEBIT), ZERO)
        total_credit = sum((line.amount for line in lines if line.side == EntrySide.CREDIT), ZERO)
        if total_debit != total_credit:
            raise ValidationError(unbalanced_entry(total_debit, total_credit))

    @staticmethod
    def _postable_amount(transaction: BankTransaction):
        if transaction.is_credit and transaction.is_debit:
            raise ValidationError(f"Transaction {transaction.id} has both a debit and a credit amount")
        amount = transaction.amount
        if amount is None:
            raise ValidationError(f"Transaction {transaction.id} has no amount to post")
        if transaction.transaction_date is None:
            raise ValidationError(f"Transaction {transaction.id} has no date")
        return amount

    def _transaction_reference(self, transaction_id: int) -> str:
        stamp = datetime.now(UTC).strftime("%Y%m%d%H%M%S%f")
        reference = f"JE-{transaction_id}-{stamp}"
        candidate = reference
        n = 1
        while self.db.journal_reference_exists(candidate):
            n += 1
            candidate = f"{reference}-{n}"
        return candidate

    def _next_auto_reference(self) -> str:
        sequence = self.db.count_journal_entries_with_prefix(AUTO_REFERENCE_PREFIX) + 1
        while self.db.journal_reference_exists(f"{AUTO_REFERENCE_PREFIX}{sequence:05d}"):
            sequence += 1
        return f"{AUTO_REFERENCE_PREFIX}{sequence:05d}"
