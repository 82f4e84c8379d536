"""SQLAlchemy models for the ledgerpost database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Index,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ledgerpost.domain.entities import AccountCategory as CategoryName

Base = declarative_base()


class Company(Base):
    """Company model."""

    __tablename__ = "companies"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class AccountCategory(Base):
    """Top-level account category model."""

    __tablename__ = "account_categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)


class Account(Base):
    """Chart of accounts entry, unique per company and code."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    account_code = Column(String, nullable=False)
    account_name = Column(String, nullable=False)
    category_id = Column(Integer, ForeignKey("account_categories.id"), nullable=False)
    parent_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("company_id", "account_code", name="uq_company_account_code"),)

    # Relationships
    category = relationship("AccountCategory")
    parent = relationship("Account", remote_side=[id])


class TransactionMappingRule(Base):
    """Pattern rule mapping a description to an account."""

    __tablename__ = "transaction_mapping_rules"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    pattern_text = Column(String, nullable=False)
    match_type = Column(String, default="CONTAINS", nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    priority = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    account = relationship("Account")


class JournalEntry(Base):
    """Journal entry header."""

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    reference = Column(String, unique=True, nullable=False)
    entry_date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    fiscal_period_id = Column(Integer, nullable=True)
    created_by = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    lines = relationship(
        "JournalEntryLine",
        back_populates="journal_entry",
        cascade="all, delete-orphan",
        order_by="JournalEntryLine.id",
    )


class JournalEntryLine(Base):
    """Single debit or credit line of a journal entry."""

    __tablename__ = "journal_entry_lines"

    id = Column(Integer, primary_key=True)
    journal_entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    debit_amount = Column(Numeric(15, 2), nullable=True)
    credit_amount = Column(Numeric(15, 2), nullable=True)
    description = Column(String, nullable=True)
    reference = Column(String, nullable=True)
    source_transaction_id = Column(Integer, ForeignKey("bank_transactions.id"), nullable=True)

    __table_args__ = (Index("ix_journal_entry_lines_source_transaction_id", "source_transaction_id"),)

    # Relationships
    journal_entry = relationship("JournalEntry", back_populates="lines")


class BankTransaction(Base):
    """Bank statement line item."""

    __tablename__ = "bank_transactions"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    transaction_date = Column(Date, nullable=True)
    details = Column(String, nullable=True)
    reference = Column(String, nullable=True)
    debit_amount = Column(Numeric(15, 2), nullable=True)
    credit_amount = Column(Numeric(15, 2), nullable=True)
    balance = Column(Numeric(15, 2), nullable=True)
    source_file = Column(String, nullable=True)
    fiscal_period_id = Column(Integer, nullable=True)
    account_code = Column(String, nullable=True)
    account_name = Column(String, nullable=True)
    classified_by = Column(String, nullable=True)
    classification_date = Column(DateTime, nullable=True)
    imported_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def _enable_sqlite_savepoints(engine: Engine) -> None:
    """Let SQLAlchemy emit BEGIN itself so SAVEPOINT works with pysqlite."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def seed_account_categories(engine: Engine) -> None:
    """Insert the five top-level categories that are not present yet."""
    with Session(engine) as session:
        existing = {name for (name,) in session.query(AccountCategory.name).all()}
        for category in CategoryName:
            if category.value not in existing:
                session.add(AccountCategory(name=category.value))
        session.commit()


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory with the schema in place."""
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        engine_options = {}
        if url.database in (None, "", ":memory:"):
            engine_options = {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
        engine = create_engine(database_url, echo=False, **engine_options)
        _enable_sqlite_savepoints(engine)
    else:
        engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    seed_account_categories(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)
