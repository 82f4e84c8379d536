"""Classification rule store and matcher."""

import logging
from typing import Iterable, Optional

from ledgerpost.database.base import Database
from ledgerpost.domain.cache import RuleCache
from ledgerpost.domain.chart import STANDARD_RULES
from ledgerpost.domain.entities import ClassificationRule, MatchType
from ledgerpost.domain.errors import (
    NotFoundError,
    ValidationError,
    account_code_not_found,
    company_not_found,
    rule_not_found,
)

logger = logging.getLogger(__name__)


def normalize_description(description: Optional[str]) -> str:
    """Upper-case and strip a description for matching."""
    return (description or "").strip().upper()


def rule_matches(rule: ClassificationRule, normalized: str) -> bool:
    """Check a rule against an already normalized description."""
    if not rule.is_active or not rule.pattern:
        return False
    pattern = rule.pattern
    if rule.match_type == MatchType.STARTS_WITH:
        return normalized.startswith(pattern)
    if rule.match_type == MatchType.ENDS_WITH:
        return normalized.endswith(pattern)
    if rule.match_type == MatchType.EQUALS:
        return normalized == pattern
    return pattern in normalized


def match_rule(description: Optional[str], rules: Iterable[ClassificationRule]) -> Optional[ClassificationRule]:
    """Return the first rule matching the description.

    Rules are expected in evaluation order (see RuleStore.load_active_rules),
    so the first hit is the winner.
    """
    normalized = normalize_description(description)
    if not normalized:
        return None
    for rule in rules:
        if rule_matches(rule, normalized):
            return rule
    return None


class RuleStore:
    """Loads, caches and maintains a company's classification rules."""

    def __init__(self, db: Database, cache: Optional[RuleCache] = None):
        """Initialize rule store.

        Args:
            db: Database instance
            cache: Rule cache; a private one is created when omitted
        """
        self.db = db
        self.cache = cache if cache is not None else RuleCache()

    def load_active_rules(self, company_id: int) -> list[ClassificationRule]:
        """Return active rules in evaluation order.

        Order is priority (highest first), then newest first, then highest ID.

        Args:
            company_id: Company ID

        Returns:
            List of active classification rules
        """
        rules = self.cache.get_rules(company_id)
        if rules is not None:
            return rules
        rules = self.db.list_rules(company_id, include_inactive=False)
        self.cache.put_rules(company_id, rules)
        logger.debug("Loaded %d active rules for company %s", len(rules), company_id)
        return rules

    def add_rule(
        self,
        company_id: int,
        pattern: str,
        account_code: str,
        priority: int = 0,
        match_type: MatchType = MatchType.CONTAINS,
    ) -> int:
        """Create a classification rule.

        Args:
            company_id: Company ID
            pattern: Keyword or phrase; stored upper-cased
            account_code: Code of an existing account the rule maps to
            priority: Higher priorities are evaluated first
            match_type: How the pattern is compared with descriptions

        Returns:
            Rule ID

        Raises:
            ValidationError: If the pattern is blank
            NotFoundError: If the company or account does not exist
        """
        pattern = normalize_description(pattern)
        if not pattern:
            raise ValidationError("Rule pattern cannot be empty")

        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))

        account = self.db.get_account_by_code(company_id, account_code)
        if account is None:
            raise NotFoundError(account_code_not_found(account_code, company_id))

        rule_id = self.db.create_rule(
            company_id=company_id,
            pattern=pattern,
            account_id=account.id,
            priority=priority,
            match_type=match_type,
        )
        self.invalidate(company_id)
        logger.info(
            "Added rule %s: %s '%s' -> %s (priority %d)",
            rule_id,
            match_type.value,
            pattern,
            account.code,
            priority,
        )
        return rule_id

    def deactivate_rule(self, rule_id: int) -> None:
        """Deactivate a rule so it no longer matches.

        Raises:
            NotFoundError: If the rule does not exist
        """
        rule = self.db.get_rule(rule_id)
        if rule is None:
            raise NotFoundError(rule_not_found(rule_id))
        self.db.set_rule_active(rule_id, False)
        self.invalidate(rule.company_id)

    def list_rules(self, company_id: int, include_inactive: bool = False) -> list[ClassificationRule]:
        return self.db.list_rules(company_id, include_inactive=include_inactive)

    def create_standard_rules(self, company_id: int) -> int:
        """Seed the built-in keyword rules for a company.

        Patterns the company already has are skipped, as are rules whose
        target account is missing from the chart.

        Returns:
            Number of rules created
        """
        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))

        existing = {r.pattern for r in self.db.list_rules(company_id, include_inactive=True)}
        created = 0
        with self.db.transaction():
            for standard in STANDARD_RULES:
                if standard.pattern in existing:
                    continue
                account = self.db.get_account_by_code(company_id, standard.account_code)
                if account is None:
                    logger.warning(
                        "Skipping standard rule '%s': account %s not found for company %s",
                        standard.pattern,
                        standard.account_code,
                        company_id,
                    )
                    continue
                self.db.create_rule(
                    company_id=company_id,
                    pattern=standard.pattern,
                    account_id=account.id,
                    priority=standard.priority,
                )
                created += 1
        self.invalidate(company_id)
        return created

    def invalidate(self, company_id: int) -> None:
        """Drop the cached rule list of a company."""
        self.cache.invalidate_company(company_id)
