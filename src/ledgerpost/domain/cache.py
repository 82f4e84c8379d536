"""In-process caches for per-company lookups.

Entries are keyed by ``(company_id, key)`` so that one company's data can be
dropped without touching the others. Reads and writes take a re-entrant lock,
so a single cache instance may be shared by worker threads.
"""

import logging
import threading
import time
from typing import Any, Callable, Hashable, Optional

from ledgerpost.domain.entities import Account, ClassificationRule

logger = logging.getLogger(__name__)

_MISSING = object()


class CompanyCache:
    """Thread-safe map of company-scoped values with optional expiry.

    Args:
        ttl: Seconds an entry stays valid. None keeps entries until they are
            invalidated explicitly.
        clock: Monotonic time source, replaceable in tests
    """

    def __init__(self, ttl: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: dict[tuple[int, Hashable], tuple[Any, Optional[float]]] = {}

    def get(self, company_id: int, key: Hashable, default: Any = None) -> Any:
        """Return the cached value, or default when missing or expired."""
        with self._lock:
            entry = self._entries.get((company_id, key), _MISSING)
            if entry is _MISSING:
                return default
            value, expires_at = entry
            if expires_at is not None and self._clock() >= expires_at:
                del self._entries[(company_id, key)]
                return default
            return value

    def put(self, company_id: int, key: Hashable, value: Any) -> None:
        with self._lock:
            expires_at = None if self.ttl is None else self._clock() + self.ttl
            self._entries[(company_id, key)] = (value, expires_at)

    def discard(self, company_id: int, key: Hashable) -> None:
        with self._lock:
            self._entries.pop((company_id, key), None)

    def invalidate_company(self, company_id: int) -> int:
        """Drop every entry of one company. Returns the number removed."""
        with self._lock:
            keys = [k for k in self._entries if k[0] == company_id]
            for k in keys:
                del self._entries[k]
        if keys:
            logger.debug("Invalidated %d cache entries for company %s", len(keys), company_id)
        return len(keys)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class AccountCache(CompanyCache):
    """Accounts keyed by chart code."""

    def get_account(self, company_id: int, code: str) -> Optional[Account]:
        return self.get(company_id, ("account", code))

    def put_account(self, account: Account) -> None:
        self.put(account.company_id, ("account", account.code), account)


class RuleCache(CompanyCache):
    """Sorted active rule list per company."""

    def get_rules(self, company_id: int) -> Optional[list[ClassificationRule]]:
        rules = self.get(company_id, "active_rules")
        if rules is None:
            return None
        return list(rules)

    def put_rules(self, company_id: int, rules: list[ClassificationRule]) -> None:
        self.put(company_id, "active_rules", tuple(rules))
