"""Account directory: chart-of-accounts lookup and on-demand creation."""

import logging
import re
import threading
import zlib
from typing import Optional

from ledgerpost.database.base import Database
from ledgerpost.domain.cache import AccountCache
from ledgerpost.domain.chart import SEEDED_NAME_SUFFIXES, STANDARD_ACCOUNTS
from ledgerpost.domain.entities import Account, AccountCategory
from ledgerpost.domain.errors import ConflictError, NotFoundError, ValidationError, company_not_found

logger = logging.getLogger(__name__)

# First matching prefix wins
CATEGORY_PREFIXES: tuple[tuple[str, AccountCategory], ...] = (
    ("1", AccountCategory.ASSETS),
    ("2", AccountCategory.ASSETS),
    ("3", AccountCategory.LIABILITIES),
    ("4", AccountCategory.LIABILITIES),
    ("5", AccountCategory.EQUITY),
    ("6", AccountCategory.REVENUE),
    ("7", AccountCategory.REVENUE),
    ("8", AccountCategory.EXPENSE),
    ("9", AccountCategory.EXPENSE),
)
DEFAULT_CATEGORY = AccountCategory.EXPENSE

SUB_ACCOUNT_SEPARATOR = "-"
NAME_SEPARATOR = " - "
MAX_SUB_ACCOUNTS = 999


def infer_category(code: str) -> AccountCategory:
    """Return the category implied by an account code's leading digits."""
    for prefix, category in CATEGORY_PREFIXES:
        if code.startswith(prefix):
            return category
    return DEFAULT_CATEGORY


def parent_code_for(code: str) -> Optional[str]:
    """Return the parent code of a sub-account code ("8800-002" -> "8800"), or None."""
    if SUB_ACCOUNT_SEPARATOR not in code:
        return None
    return code.split(SUB_ACCOUNT_SEPARATOR, 1)[0]


def normalize_name(name: str) -> str:
    """Collapse whitespace and upper-case a counter-party name for comparisons."""
    return re.sub(r"\s+", " ", name).strip().upper()


def counterparty_key(account_name: str) -> str:
    """Counter-party part of a sub-account name, normalized.

    "Employee Costs - John Smith" -> "JOHN SMITH"; seeded names such as
    "DOTSURE Insurance Premiums" lose their fixed suffix -> "DOTSURE".
    """
    name = normalize_name(account_name)
    if NAME_SEPARATOR in name:
        return name.rsplit(NAME_SEPARATOR, 1)[1].strip()
    for suffix in SEEDED_NAME_SUFFIXES:
        if name.endswith(f" {suffix}"):
            return name[: -len(suffix) - 1].strip()
    return name


def suffix_seed(name: str) -> int:
    """Stable starting suffix (1..999) for a counter-party name."""
    return zlib.crc32(normalize_name(name).encode("utf-8")) % MAX_SUB_ACCOUNTS + 1


class AccountDirectory:
    """Resolves account codes to IDs and creates accounts on first use.

    Lookups go through an AccountCache; writes for one company are
    serialized by a per-company lock. The database unique constraint on
    (company, code) stays the final arbiter: a lost insert race is resolved
    by re-reading the winner.
    """

    def __init__(self, db: Database, cache: Optional[AccountCache] = None):
        """Initialize account directory.

        Args:
            db: Database instance
            cache: Account cache; a private one is created when omitted
        """
        self.db = db
        self.cache = cache if cache is not None else AccountCache()
        self._locks: dict[int, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def _company_lock(self, company_id: int) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(company_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[company_id] = lock
            return lock

    def get_account(self, company_id: int, code: str) -> Optional[Account]:
        """Get an account by code, consulting the cache first.

        Args:
            company_id: Company ID
            code: Account code

        Returns:
            Account entity or None if the company has no such account
        """
        account = self.cache.get_account(company_id, code)
        if account is not None:
            return account
        account = self.db.get_account_by_code(company_id, code)
        if account is not None:
            self.cache.put_account(account)
        return account

    def resolve(self, company_id: int, code: str) -> Optional[int]:
        """Return the account ID for a code, or None if it does not exist."""
        account = self.get_account(company_id, code)
        return account.id if account is not None else None

    def get_or_create(
        self,
        company_id: int,
        code: str,
        name: str,
        parent_code: Optional[str] = None,
        category: Optional[AccountCategory] = None,
    ) -> int:
        """Return the ID of an account, creating it if necessary.

        Args:
            company_id: Company ID
            code: Account code, e.g. "8800" or "8800-002"
            name: Account name used when the account has to be created
            parent_code: Parent account code; derived from the code when omitted
            category: Account category; inferred from the code when omitted

        Returns:
            Account ID

        Raises:
            ValidationError: If code or name is blank
            NotFoundError: If the company does not exist
        """
        code = code.strip() if code else ""
        if not code:
            raise ValidationError("Account code is required")
        if not name or not name.strip():
            raise ValidationError(f"Account name is required for account '{code}'")

        account_id = self.resolve(company_id, code)
        if account_id is not None:
            return account_id

        with self._company_lock(company_id):
            # Another thread may have created it while we waited
            account_id = self.resolve(company_id, code)
            if account_id is not None:
                return account_id

            if parent_code is None:
                parent_code = parent_code_for(code)
            parent_id = None
            if parent_code is not None:
                parent_id = self.resolve(company_id, parent_code)
                if parent_id is None:
                    logger.info(
                        "Parent account %s not found for company %s; creating %s without a parent",
                        parent_code,
                        company_id,
                        code,
                    )

            if category is None:
                category = infer_category(code)

            try:
                account_id = self.db.create_account(
                    company_id=company_id,
                    code=code,
                    name=name.strip(),
                    category=category,
                    parent_id=parent_id,
                )
            except ConflictError:
                account = self.db.get_account_by_code(company_id, code)
                if account is None:
                    raise
                logger.debug("Account %s for company %s was created concurrently", code, company_id)
                self.cache.put_account(account)
                return account.id

            logger.info("Created account %s '%s' for company %s", code, name.strip(), company_id)
            account = self.db.get_account(account_id)
            if account is not None:
                self.cache.put_account(account)
            return account_id

    def allocate_sub_account_code(self, company_id: int, parent_code: str, sub_name: str) -> str:
        """Pick the sub-account code for a counter-party under a parent account.

        An existing sub-account for the same counter-party is reused; names
        must match exactly, so "JOHN" never lands on "John Smith". Otherwise the
        search starts at a suffix derived from the name and walks forward
        until it finds a free code.

        Args:
            company_id: Company ID
            parent_code: Parent account code, e.g. "8100"
            sub_name: Counter-party or employee name

        Returns:
            Code of the form "<parent_code>-NNN"

        Raises:
            ValidationError: If sub_name is blank
            ConflictError: If all 999 suffixes of the parent are taken
        """
        if not sub_name or not sub_name.strip():
            raise ValidationError("Sub-account name is required")

        wanted = normalize_name(sub_name)
        prefix = f"{parent_code}{SUB_ACCOUNT_SEPARATOR}"
        taken: dict[int, Account] = {}
        for account in self.db.list_accounts_with_code_prefix(company_id, prefix):
            suffix = account.code[len(prefix):]
            if not suffix.isdigit():
                continue
            if counterparty_key(account.name) == wanted:
                return account.code
            taken[int(suffix)] = account

        start = suffix_seed(sub_name)
        for offset in range(MAX_SUB_ACCOUNTS):
            suffix = (start - 1 + offset) % MAX_SUB_ACCOUNTS + 1
            if suffix not in taken:
                return f"{prefix}{suffix:03d}"

        raise ConflictError(f"No free sub-account codes left under {parent_code} for company {company_id}")

    @staticmethod
    def sub_account_name(parent_name: str, sub_name: str) -> str:
        """Build the display name of a sub-account, e.g. "Employee Costs - John Smith"."""
        return f"{parent_name}{NAME_SEPARATOR}{normalize_name(sub_name).title()}"

    def list_accounts(self, company_id: int, include_inactive: bool = False) -> list[Account]:
        """List a company's chart of accounts.

        Args:
            company_id: Company ID
            include_inactive: Include deactivated accounts

        Returns:
            List of account entities ordered by code
        """
        return self.db.list_accounts(company_id, include_inactive=include_inactive)

    def initialize_chart_of_accounts(self, company_id: int) -> int:
        """Create the standard chart of accounts for a company.

        Accounts that already exist are left untouched.

        Args:
            company_id: Company ID

        Returns:
            Number of accounts created

        Raises:
            NotFoundError: If the company does not exist
        """
        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))

        created = 0
        with self._company_lock(company_id), self.db.transaction():
            ids = {a.code: a.id for a in self.db.list_accounts(company_id, include_inactive=True)}
            for standard in STANDARD_ACCOUNTS:
                if standard.code in ids:
                    continue
                parent_code = parent_code_for(standard.code)
                ids[standard.code] = self.db.create_account(
                    company_id=company_id,
                    code=standard.code,
                    name=standard.name,
                    category=standard.category,
                    parent_id=ids.get(parent_code) if parent_code else None,
                )
                created += 1
        self.invalidate(company_id)
        logger.info("Initialized chart of accounts for company %s (%d new accounts)", company_id, created)
        return created

    def invalidate(self, company_id: int) -> None:
        """Drop cached accounts of a company after bulk changes."""
        self.cache.invalidate_company(company_id)
