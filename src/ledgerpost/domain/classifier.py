"""Transaction classifier: stored rules first, built-in heuristics second."""

import logging
from typing import Optional

from ledgerpost.domain.account import AccountDirectory
from ledgerpost.domain.entities import (
    BankTransaction,
    ClassificationResult,
    ClassificationRule,
    RULE_BASED,
)
from ledgerpost.domain.heuristics import HeuristicRule, find_heuristic
from ledgerpost.domain.rules import RuleStore, match_rule

logger = logging.getLogger(__name__)


class Classifier:
    """Decides which ledger account a bank transaction belongs to.

    A transaction without a positive debit or credit amount, or whose
    details hit neither a rule nor a heuristic entry, is left unclassified
    (classify returns None). There is no catch-all account.
    """

    def __init__(self, rule_store: RuleStore, directory: AccountDirectory):
        """Initialize classifier.

        Args:
            rule_store: Source of the company's classification rules
            directory: Account directory used to mint per-name sub-account codes
        """
        self.rule_store = rule_store
        self.directory = directory

    def classify(
        self,
        transaction: BankTransaction,
        rules: Optional[list[ClassificationRule]] = None,
    ) -> Optional[ClassificationResult]:
        """Classify a bank transaction.

        Args:
            transaction: Transaction to classify
            rules: Active rules in evaluation order; loaded from the rule store when omitted

        Returns:
            ClassificationResult, or None if the transaction stays unclassified
        """
        if not (transaction.is_credit or transaction.is_debit):
            logger.debug("Transaction %s has no amount; leaving unclassified", transaction.id)
            return None

        if rules is None:
            rules = self.rule_store.load_active_rules(transaction.company_id)

        rule = match_rule(transaction.details, rules)
        if rule is not None:
            logger.debug(
                "Transaction %s matched rule %s ('%s') -> %s",
                transaction.id,
                rule.id,
                rule.pattern,
                rule.account_code,
            )
            return ClassificationResult(
                account_code=rule.account_code,
                account_name=rule.account_name,
                method=RULE_BASED,
                rule_id=rule.id,
            )

        heuristic = find_heuristic(transaction)
        if heuristic is not None:
            result = self._apply_heuristic(heuristic, transaction)
            logger.debug(
                "Transaction %s classified by heuristic %s -> %s",
                transaction.id,
                result.method,
                result.account_code,
            )
            return result

        return None

    def _apply_heuristic(self, heuristic: HeuristicRule, transaction: BankTransaction) -> ClassificationResult:
        parent_code = heuristic.account_code
        parent = self.directory.get_account(transaction.company_id, parent_code)
        parent_name = parent.name if parent is not None else heuristic.account_name

        sub_name = None
        if heuristic.extract_name is not None:
            sub_name = heuristic.extract_name((transaction.details or "").strip().upper())
        if sub_name is None:
            return ClassificationResult(account_code=parent_code, account_name=parent_name, method=heuristic.tag)

        code = self.directory.allocate_sub_account_code(transaction.company_id, parent_code, sub_name)
        existing = self.directory.get_account(transaction.company_id, code)
        if existing is not None:
            name = existing.name
        else:
            name = self.directory.sub_account_name(parent_name, sub_name)
        return ClassificationResult(account_code=code, account_name=name, method=heuristic.tag)
