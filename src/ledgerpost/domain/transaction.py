"""Bank transaction domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from ledgerpost.database.base import Database
from ledgerpost.domain.entities import ZERO, BankTransaction
from ledgerpost.domain.errors import (
    NotFoundError,
    ValidationError,
    account_code_not_found,
    company_not_found,
    transaction_not_found,
)

logger = logging.getLogger(__name__)

MANUAL = "MANUAL"


def transaction_problems(transaction: BankTransaction, require_reference: bool = True) -> list[str]:
    """Return the structural problems of a bank transaction (empty when it is well formed)."""
    problems = []
    if require_reference and not (transaction.reference or "").strip():
        problems.append("Missing reference number")
    if not (transaction.details or "").strip():
        problems.append("Missing transaction details")

    debit, credit = transaction.debit_amount, transaction.credit_amount
    # Exactly one side may be set, and a zero amount counts as missing
    if debit is not None and credit is not None:
        problems.append("Both debit and credit amounts are set")
    elif (debit if debit is not None else credit) in (None, ZERO):
        problems.append("Missing transaction amount")
    if debit is not None and debit < ZERO:
        problems.append("Negative debit amount")
    if credit is not None and credit < ZERO:
        problems.append("Negative credit amount")

    if transaction.transaction_date is None:
        problems.append("Missing transaction date")
    return problems


class BankTransactionService:
    """Service for recording, querying and manually classifying bank transactions."""

    def __init__(self, db: Database):
        """Initialize bank transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def record_transaction(
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
        """Record a bank statement line.

        Args:
            company_id: Company ID
            transaction_date: Statement date
            details: Statement description
            debit_amount: Money out (positive)
            credit_amount: Money in (positive)
            balance: Running balance after the line
            reference: Bank reference number
            source_file: File the line was imported from
            fiscal_period_id: Optional fiscal period

        Returns:
            Bank transaction ID

        Raises:
            NotFoundError: If the company doesn't exist
            ValidationError: If the line is malformed
        """
        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))

        draft = BankTransaction(
            id=0,
            company_id=company_id,
            transaction_date=transaction_date,
            details=details,
            debit_amount=debit_amount,
            credit_amount=credit_amount,
            reference=reference,
        )
        problems = transaction_problems(draft, require_reference=False)
        if problems:
            raise ValidationError("; ".join(problems))

        return self.db.create_bank_transaction(
            company_id=company_id,
            transaction_date=transaction_date,
            details=details.strip(),
            debit_amount=debit_amount,
            credit_amount=credit_amount,
            balance=balance,
            reference=reference,
            source_file=source_file,
            fiscal_period_id=fiscal_period_id,
        )

    def get_transaction(self, transaction_id: int) -> Optional[BankTransaction]:
        """Get bank transaction by ID.

        Args:
            transaction_id: Bank transaction ID

        Returns:
            BankTransaction entity or None if not found
        """
        return self.db.get_bank_transaction(transaction_id)

    def get_unclassified_transactions(self, company_id: int) -> list[BankTransaction]:
        """Transactions of a company that have not been posted yet, oldest first."""
        return self.db.list_unposted_bank_transactions(company_id)

    def list_transactions(
        self,
        company_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        classified: Optional[bool] = None,
    ) -> list[BankTransaction]:
        """List bank transactions with optional filters.

        Args:
            company_id: Company ID
            start_date: Optional start date (inclusive)
            end_date: Optional end date (inclusive)
            classified: True for classified only, False for unclassified only

        Returns:
            List of bank transactions ordered by date
        """
        return self.db.list_bank_transactions(
            company_id, start_date=start_date, end_date=end_date, classified=classified
        )

    def classify_manually(self, transaction_id: int, account_code: str) -> BankTransaction:
        """Assign an account to a transaction by hand.

        The next batch run posts the transaction to this account.

        Args:
            transaction_id: Bank transaction ID
            account_code: Code of an existing account of the transaction's company

        Returns:
            The updated transaction

        Raises:
            NotFoundError: If the transaction or account doesn't exist
        """
        txn = self.db.get_bank_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        account = self.db.get_account_by_code(txn.company_id, account_code)
        if account is None:
            raise NotFoundError(account_code_not_found(account_code, txn.company_id))

        self.db.update_bank_transaction_classification(
            transaction_id, account.code, account.name, classified_by=MANUAL
        )
        logger.info("Transaction %s manually classified to %s", transaction_id, account.code)
        return self.db.get_bank_transaction(transaction_id)
