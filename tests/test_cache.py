"""Tests for the company-scoped caches."""

from datetime import datetime

from ledgerpost.domain.cache import AccountCache, CompanyCache, RuleCache
from ledgerpost.domain.entities import Account, AccountCategory, ClassificationRule, MatchType


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def _account(company_id, code):
    return Account(id=1, company_id=company_id, code=code, name="Bank", category=AccountCategory.ASSETS)


def test_put_and_get():
    cache = CompanyCache()
    cache.put(1, "key", "value")
    assert cache.get(1, "key") == "value"
    assert cache.get(2, "key") is None
    assert cache.get(1, "other", default="x") == "x"


def test_ttl_expiry():
    clock = FakeClock()
    cache = CompanyCache(ttl=10, clock=clock)
    cache.put(1, "key", "value")

    clock.now = 9.9
    assert cache.get(1, "key") == "value"

    clock.now = 10
    assert cache.get(1, "key") is None
    assert len(cache) == 0


def test_invalidate_company_leaves_other_companies():
    cache = AccountCache()
    cache.put_account(_account(1, "1100"))
    cache.put_account(_account(1, "9600"))
    cache.put_account(_account(2, "1100"))

    assert cache.invalidate_company(1) == 2
    assert cache.get_account(1, "1100") is None
    assert cache.get_account(2, "1100") is not None


def test_discard_and_clear():
    cache = CompanyCache()
    cache.put(1, "a", 1)
    cache.put(1, "b", 2)
    cache.discard(1, "a")
    assert cache.get(1, "a") is None
    cache.clear()
    assert len(cache) == 0


def test_rule_cache_returns_copy():
    cache = RuleCache()
    rule = ClassificationRule(
        id=1,
        company_id=1,
        pattern="DOTSURE",
        match_type=MatchType.CONTAINS,
        account_id=5,
        account_code="8800-002",
        account_name="DOTSURE Insurance Premiums",
        priority=90,
        is_active=True,
        created_at=datetime(2024, 1, 1),
    )
    cache.put_rules(1, [rule])

    rules = cache.get_rules(1)
    rules.clear()
    assert cache.get_rules(1) == [rule]
    assert cache.get_rules(2) is None
