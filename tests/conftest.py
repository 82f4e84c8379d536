"""Shared pytest fixtures for ledgerpost tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest
from click.testing import CliRunner

from ledgerpost.config import Settings
from ledgerpost.database.factories import create_sqlite_database
from ledgerpost.domain.account import AccountDirectory
from ledgerpost.domain.batch import BatchOrchestrator
from ledgerpost.domain.classifier import Classifier
from ledgerpost.domain.company import CompanyService
from ledgerpost.domain.journal import JournalPoster
from ledgerpost.domain.rules import RuleStore
from ledgerpost.domain.transaction import BankTransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def company_service(temp_db):
    return CompanyService(temp_db)


@pytest.fixture
def company(company_service):
    """A company without any accounts."""
    company_id = company_service.create_company("Acme Trading")
    return company_service.get_company(company_id)


@pytest.fixture
def directory(temp_db):
    return AccountDirectory(temp_db)


@pytest.fixture
def company_with_chart(company, directory):
    """A company with the standard chart of accounts."""
    directory.initialize_chart_of_accounts(company.id)
    return company


@pytest.fixture
def rule_store(temp_db):
    return RuleStore(temp_db)


@pytest.fixture
def classifier(rule_store, directory):
    return Classifier(rule_store, directory)


@pytest.fixture
def poster(temp_db, directory, settings):
    return JournalPoster(temp_db, directory, settings)


@pytest.fixture
def orchestrator(temp_db, classifier, poster, rule_store):
    return BatchOrchestrator(temp_db, classifier, poster, rule_store)


@pytest.fixture
def transaction_service(temp_db):
    return BankTransactionService(temp_db)


@pytest.fixture
def record(transaction_service):
    """Record a bank transaction and return the stored entity."""

    def _record(company_id, details, debit=None, credit=None, on=date(2024, 3, 15), reference="REF001"):
        txn_id = transaction_service.record_transaction(
            company_id=company_id,
            transaction_date=on,
            details=details,
            debit_amount=Decimal(debit) if debit is not None else None,
            credit_amount=Decimal(credit) if credit is not None else None,
            reference=reference,
        )
        return transaction_service.get_transaction(txn_id)

    return _record


@pytest.fixture
def cli_runner():
    """Create a CLI runner for testing."""
    return CliRunner()
