"""Tests for the bank transaction service."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerpost.domain.errors import NotFoundError, ValidationError


def test_record_transaction(transaction_service, company):
    txn_id = transaction_service.record_transaction(
        company_id=company.id,
        transaction_date=date(2024, 3, 15),
        details="  INSURANCE PREMIUM DOTSURE ",
        debit_amount=Decimal("450.00"),
        balance=Decimal("10000.00"),
        reference="REF123",
        source_file="march.csv",
    )

    txn = transaction_service.get_transaction(txn_id)
    assert txn.details == "INSURANCE PREMIUM DOTSURE"
    assert txn.debit_amount == Decimal("450.00")
    assert txn.credit_amount is None
    assert txn.balance == Decimal("10000.00")
    assert txn.reference == "REF123"
    assert txn.source_file == "march.csv"
    assert txn.is_debit and not txn.is_credit
    assert txn.amount == Decimal("450.00")


@pytest.mark.parametrize(
    "details,debit,credit,on,message",
    [
        ("", "1.00", None, date(2024, 3, 1), "Missing transaction details"),
        ("FEE", None, None, date(2024, 3, 1), "Missing transaction amount"),
        ("FEE", "0.00", None, date(2024, 3, 1), "Missing transaction amount"),
        ("FEE", "0.00", "5.00", date(2024, 3, 1), "Both debit and credit amounts are set"),
        ("FEE", "1.00", "2.00", date(2024, 3, 1), "Both debit and credit amounts are set"),
        ("FEE", "-1.00", None, date(2024, 3, 1), "Negative debit amount"),
        ("FEE", "1.00", None, None, "Missing transaction date"),
    ],
)
def test_record_transaction_validation(transaction_service, company, details, debit, credit, on, message):
    with pytest.raises(ValidationError, match=message):
        transaction_service.record_transaction(
            company_id=company.id,
            transaction_date=on,
            details=details,
            debit_amount=Decimal(debit) if debit else None,
            credit_amount=Decimal(credit) if credit else None,
        )


def test_record_transaction_unknown_company(transaction_service):
    with pytest.raises(NotFoundError):
        transaction_service.record_transaction(
            company_id=999,
            transaction_date=date(2024, 3, 1),
            details="FEE",
            debit_amount=Decimal("1.00"),
        )


def test_get_unclassified_transactions_excludes_posted(
    transaction_service, orchestrator, company_with_chart, record
):
    cid = company_with_chart.id
    posted = record(cid, "MONTHLY ACCOUNT FEE", debit="65.00", on=date(2024, 3, 2))
    orchestrator.process_batch([posted], cid)
    later = record(cid, "RANDOM UNSEEN VENDOR XYZ", debit="10.00", on=date(2024, 3, 9))
    earlier = record(cid, "RANDOM OTHER VENDOR", debit="10.00", on=date(2024, 3, 1))

    pending = transaction_service.get_unclassified_transactions(cid)
    assert [t.id for t in pending] == [earlier.id, later.id]


def test_list_transactions_filters(transaction_service, company, record):
    record(company.id, "A", debit="1.00", on=date(2024, 2, 28))
    march = record(company.id, "B", debit="1.00", on=date(2024, 3, 15))
    record(company.id, "C", debit="1.00", on=date(2024, 4, 1))

    listed = transaction_service.list_transactions(
        company.id, start_date=date(2024, 3, 1), end_date=date(2024, 3, 31)
    )
    assert [t.id for t in listed] == [march.id]
    assert transaction_service.list_transactions(company.id, classified=True) == []
    assert len(transaction_service.list_transactions(company.id, classified=False)) == 3


def test_classify_manually(transaction_service, temp_db, company_with_chart, record):
    txn = record(company_with_chart.id, "RANDOM UNSEEN VENDOR XYZ", debit="10.00")

    updated = transaction_service.classify_manually(txn.id, "9000")

    assert updated.account_code == "9000"
    assert updated.account_name == "Office Supplies"


def test_classify_manually_errors(transaction_service, company_with_chart, record):
    txn = record(company_with_chart.id, "RANDOM UNSEEN VENDOR XYZ", debit="10.00")
    with pytest.raises(NotFoundError):
        transaction_service.classify_manually(txn.id, "0000")
    with pytest.raises(NotFoundError):
        transaction_service.classify_manually(999, "9000")
