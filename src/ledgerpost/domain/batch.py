"""Batch orchestrator: classify and post a run of bank transactions."""

import logging
from typing import Callable, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from ledgerpost.config import Settings
from ledgerpost.database.base import Database
from ledgerpost.domain.account import AccountDirectory
from ledgerpost.domain.cache import AccountCache, RuleCache
from ledgerpost.domain.classifier import Classifier
from ledgerpost.domain.entities import (
    BankTransaction,
    BatchResult,
    ClassificationResult,
    ClassificationRule,
    PostingStatus,
)
from ledgerpost.domain.errors import PersistenceError, ValidationError
from ledgerpost.domain.journal import JournalPoster
from ledgerpost.domain.rules import RuleStore
from ledgerpost.domain.transaction import BankTransactionService, transaction_problems

logger = logging.getLogger(__name__)

# Method tag for transactions that already carry an account code (e.g. manual classification)
STORED = "STORED"


class BatchOrchestrator:
    """Runs classify -> post over a list of transactions.

    Each transaction is its own unit of work: a failure rolls back that
    transaction only, is counted in the batch statistics, and the loop moves
    on to the next one. Transactions are processed in the order given.
    """

    def __init__(
        self,
        db: Database,
        classifier: Classifier,
        poster: JournalPoster,
        rule_store: RuleStore,
        should_stop: Optional[Callable[[], bool]] = None,
    ):
        """Initialize batch orchestrator.

        Args:
            db: Database instance
            classifier: Transaction classifier
            poster: Journal poster
            rule_store: Rule store; rules are loaded once per batch
            should_stop: Checked between transactions; returning True ends the run early
        """
        self.db = db
        self.classifier = classifier
        self.poster = poster
        self.rule_store = rule_store
        self.should_stop = should_stop
        self.transactions = BankTransactionService(db)

    def validate_transactions(self, transactions: Sequence[BankTransaction]) -> list[str]:
        """Check transactions for structural completeness without touching the database.

        Returns:
            One message per problem, "Transaction <index>: <problem>"; empty when all are valid
        """
        errors = []
        for index, transaction in enumerate(transactions):
            for problem in transaction_problems(transaction):
                errors.append(f"Transaction {index}: {problem}")
        return errors

    def process_batch_validated(self, transactions: Sequence[BankTransaction], company_id: int) -> BatchResult:
        """Validate every transaction first, then process the batch.

        Raises:
            ValidationError: If any transaction is malformed; nothing is processed
        """
        errors = self.validate_transactions(transactions)
        if errors:
            raise ValidationError("Transaction validation failed: " + ", ".join(errors))
        return self.process_batch(transactions, company_id)

    def process_batch(
        self,
        transactions: Sequence[BankTransaction],
        company_id: int,
        force_repost: bool = False,
    ) -> BatchResult:
        """Classify and post each transaction.

        Args:
            transactions: Transactions in processing order
            company_id: Company whose rules and chart are used
            force_repost: Replace existing postings instead of skipping them

        Returns:
            BatchResult with the run's counters
        """
        logger.info("Starting batch of %d transactions for company %s", len(transactions), company_id)
        result = BatchResult()
        rules = self.rule_store.load_active_rules(company_id)
        logger.debug("Loaded %d rules for company %s", len(rules), company_id)

        for transaction in transactions:
            if self.should_stop is not None and self.should_stop():
                logger.info("Batch for company %s stopped after %d transactions", company_id, result.processed_count)
                break
            result.processed_count += 1
            try:
                self._process_one(transaction, company_id, rules, result, force_repost)
            except (SQLAlchemyError, PersistenceError) as e:
                self._record_failure(result, transaction, f"persistence error: {e}", company_id)
                logger.error("Persistence error on transaction %s", transaction.id, exc_info=True)
            except Exception as e:
                self._record_failure(result, transaction, str(e), company_id)
                logger.error("Error processing transaction %s", transaction.id, exc_info=True)

        logger.info(
            "Batch for company %s finished: processed %d, classified %d, posted %d, "
            "already posted %d, unclassified %d, failed %d",
            company_id,
            result.processed_count,
            result.classified_count,
            result.posted_count,
            result.already_posted_count,
            result.unclassified_count,
            result.failed_count,
        )
        return result

    def _process_one(
        self,
        transaction: BankTransaction,
        company_id: int,
        rules: list[ClassificationRule],
        result: BatchResult,
        force_repost: bool,
    ) -> None:
        if transaction.company_id != company_id:
            raise ValidationError(
                f"Transaction {transaction.id} belongs to company {transaction.company_id}, not {company_id}"
            )

        with self.db.transaction():
            classification = self._classification_for(transaction, rules)
            if classification is None:
                result.unclassified_count += 1
                result.failed_count += 1
                result.errors.append(f"Transaction {transaction.id}: unclassified ({transaction.details})")
                logger.warning("Transaction %s could not be classified: %s", transaction.id, transaction.details)
                return

            result.classified_count += 1
            posting = self.poster.post(transaction, classification, force_repost=force_repost)
            if posting.status == PostingStatus.FAILED:
                result.failed_count += 1
                result.errors.append(posting.error)
                return
            if posting.status == PostingStatus.ALREADY_POSTED:
                result.already_posted_count += 1
                return

            result.posted_count += 1
            if classification.method != STORED and not classification.is_rule_based:
                self.db.update_bank_transaction_classification(
                    transaction.id,
                    classification.account_code,
                    classification.account_name,
                    classified_by=classification.method,
                )

    def _classification_for(
        self, transaction: BankTransaction, rules: list[ClassificationRule]
    ) -> Optional[ClassificationResult]:
        if transaction.account_code:
            return ClassificationResult(
                account_code=transaction.account_code,
                account_name=transaction.account_name or transaction.account_code,
                method=STORED,
            )
        return self.classifier.classify(transaction, rules=rules)

    def _record_failure(self, result: BatchResult, transaction: BankTransaction, reason: str, company_id: int) -> None:
        result.failed_count += 1
        result.errors.append(f"Transaction {transaction.id}: {reason}")
        # Accounts created in the rolled-back unit may still be cached
        self.poster.directory.invalidate(company_id)

    def process_company(self, company_id: int, validate: bool = False) -> BatchResult:
        """Process every not-yet-posted transaction of a company.

        Args:
            company_id: Company ID
            validate: Run the pre-flight validation and refuse malformed batches

        Returns:
            BatchResult of the run
        """
        pending = self.transactions.get_unclassified_transactions(company_id)
        if validate:
            return self.process_batch_validated(pending, company_id)
        return self.process_batch(pending, company_id)

    def regenerate(self, company_id: int) -> BatchResult:
        """Classify and post every transaction of a company again, replacing earlier entries.

        Transactions with a stored account code keep it; the rest go through
        the current rules and heuristics.
        """
        transactions = self.transactions.list_transactions(company_id)
        logger.info("Regenerating journal entries for %d transactions of company %s", len(transactions), company_id)
        return self.process_batch(transactions, company_id, force_repost=True)


def create_orchestrator(
    db: Database,
    settings: Optional[Settings] = None,
    should_stop: Optional[Callable[[], bool]] = None,
) -> BatchOrchestrator:
    """Wire a BatchOrchestrator with its directory, rule store, classifier and poster.

    The directory and rule store get caches honouring settings.cache_ttl.
    """
    settings = settings if settings is not None else Settings()
    directory = AccountDirectory(db, cache=AccountCache(ttl=settings.cache_ttl))
    rule_store = RuleStore(db, cache=RuleCache(ttl=settings.cache_ttl))
    classifier = Classifier(rule_store, directory)
    poster = JournalPoster(db, directory, settings)
    return BatchOrchestrator(db, classifier, poster, rule_store, should_stop=should_stop)
