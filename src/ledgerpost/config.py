"""Runtime settings for ledgerpost, read from environment variables."""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BANK_ACCOUNT_CODE = "1100"
DEFAULT_CREATED_BY = "SYSTEM"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    """Engine settings.

    Attributes:
        database_url: SQLAlchemy URL; takes precedence over database_path
        database_path: Path to a SQLite database file
        bank_account_code: Chart code of the bank/cash account every posting balances against
        created_by: Creator tag stamped on generated journal entries
        cache_ttl: Seconds before cached accounts/rules expire (None keeps them until invalidated)
        log_level: Logging level name
    """

    database_url: Optional[str] = None
    database_path: Optional[str] = None
    bank_account_code: str = DEFAULT_BANK_ACCOUNT_CODE
    created_by: str = DEFAULT_CREATED_BY
    cache_ttl: Optional[float] = None
    log_level: str = DEFAULT_LOG_LEVEL


def _parse_ttl(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    try:
        ttl = float(value)
    except ValueError:
        raise ValueError(f"LEDGERPOST_CACHE_TTL must be a number of seconds, got '{value}'")
    if ttl <= 0:
        return None
    return ttl


def load_settings() -> Settings:
    """Build Settings from the LEDGERPOST_* environment variables."""
    env = os.environ
    return Settings(
        database_url=env.get("LEDGERPOST_DATABASE_URL") or None,
        database_path=env.get("LEDGERPOST_DB_PATH") or None,
        bank_account_code=env.get("LEDGERPOST_BANK_ACCOUNT_CODE", DEFAULT_BANK_ACCOUNT_CODE),
        created_by=env.get("LEDGERPOST_CREATED_BY", DEFAULT_CREATED_BY),
        cache_ttl=_parse_ttl(env.get("LEDGERPOST_CACHE_TTL")),
        log_level=env.get("LEDGERPOST_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )
