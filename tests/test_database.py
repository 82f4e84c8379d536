"""Tests for the SQLAlchemy database layer."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerpost.database import create_database
from ledgerpost.domain.entities import AccountCategory
from ledgerpost.domain.errors import ConflictError, NotFoundError


def test_in_memory_database():
    db = create_database("sqlite://")
    db.connect()
    db.initialize_schema()
    company_id = db.create_company("Memory Co")
    assert db.get_company(company_id).name == "Memory Co"
    db.disconnect()


def test_transaction_rolls_back_on_error(temp_db):
    with pytest.raises(RuntimeError):
        with temp_db.transaction():
            temp_db.create_company("Doomed")
            raise RuntimeError("abort")
    assert temp_db.get_company_by_name("Doomed") is None


def test_nested_transaction_rolls_back_inner_only(temp_db):
    with temp_db.transaction():
        temp_db.create_company("Outer")
        with pytest.raises(RuntimeError):
            with temp_db.transaction():
                temp_db.create_company("Inner")
                raise RuntimeError("abort inner")
    assert temp_db.get_company_by_name("Outer") is not None
    assert temp_db.get_company_by_name("Inner") is None


def test_duplicate_account_inside_unit_keeps_unit_usable(temp_db, company):
    with temp_db.transaction():
        temp_db.create_account(company.id, "9600", "Bank Charges", AccountCategory.EXPENSE)
        with pytest.raises(ConflictError):
            temp_db.create_account(company.id, "9600", "Again", AccountCategory.EXPENSE)
        temp_db.create_account(company.id, "1100", "Bank", AccountCategory.ASSETS)
    assert [a.code for a in temp_db.list_accounts(company.id)] == ["1100", "9600"]


def test_create_account_unknown_company(temp_db):
    with pytest.raises(NotFoundError):
        temp_db.create_account(999, "9600", "Bank Charges", AccountCategory.EXPENSE)


def test_same_code_in_two_companies(temp_db, company_service):
    a = company_service.create_company("A")
    b = company_service.create_company("B")
    temp_db.create_account(a, "1100", "Bank", AccountCategory.ASSETS)
    temp_db.create_account(b, "1100", "Bank", AccountCategory.ASSETS)
    assert temp_db.get_account_by_code(a, "1100").id != temp_db.get_account_by_code(b, "1100").id


def test_list_accounts_with_code_prefix(temp_db, company_with_chart):
    codes = [a.code for a in temp_db.list_accounts_with_code_prefix(company_with_chart.id, "8800-")]
    assert codes == ["8800-001", "8800-002", "8800-003", "8800-004", "8800-005", "8800-006", "8800-999"]


def test_update_classification_unknown_transaction(temp_db):
    with pytest.raises(NotFoundError):
        temp_db.update_bank_transaction_classification(999, "9600", "Bank Charges")


def test_clear_classification(temp_db, company):
    txn_id = temp_db.create_bank_transaction(
        company_id=company.id,
        transaction_date=date(2024, 3, 1),
        details="FEE",
        debit_amount=Decimal("1.00"),
    )
    temp_db.update_bank_transaction_classification(txn_id, "9600", "Bank Charges", classified_by="MANUAL")
    temp_db.update_bank_transaction_classification(txn_id, None, None)
    assert temp_db.get_bank_transaction(txn_id).account_code is None
