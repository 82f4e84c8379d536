"""Tests for the batch orchestrator."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerpost.domain.batch import create_orchestrator
from ledgerpost.domain.entities import BankTransaction
from ledgerpost.domain.errors import ValidationError


def test_dotsure_rule_scenario(orchestrator, rule_store, temp_db, company_with_chart, record):
    """Test a rule-classified debit is posted once and skipped on the next run."""
    cid = company_with_chart.id
    rule_store.add_rule(cid, "DOTSURE", "8800-002", priority=90)
    txn = record(cid, "INSURANCE PREMIUM DOTSURE", debit="450.00")

    result = orchestrator.process_batch([txn], cid)

    assert result.processed_count == 1
    assert result.classified_count == 1
    assert result.posted_count == 1
    assert result.failed_count == 0
    assert result.success

    entries = temp_db.get_journal_entries_for_transaction(txn.id)
    assert len(entries) == 1
    codes = {a.id: a.code for a in temp_db.list_accounts(cid)}
    assert [(codes[line.account_id], line.debit_amount, line.credit_amount) for line in entries[0].lines] == [
        ("8800-002", Decimal("450.00"), None),
        ("1100", None, Decimal("450.00")),
    ]

    again = orchestrator.process_batch([txn], cid)
    assert again.already_posted_count == 1
    assert again.posted_count == 0
    assert again.success
    assert temp_db.count_lines_for_transaction(txn.id) == 2


def test_unclassified_scenario(orchestrator, temp_db, company_with_chart, record):
    """Test an unknown description is counted as unclassified and failed."""
    cid = company_with_chart.id
    txn = record(cid, "RANDOM UNSEEN VENDOR XYZ", debit="10.00")

    result = orchestrator.process_batch([txn], cid)

    assert result.processed_count == 1
    assert result.classified_count == 0
    assert result.unclassified_count == 1
    assert result.failed_count == 1
    assert not result.success
    assert "unclassified" in result.errors[0]
    assert temp_db.list_journal_entries(cid) == []
    assert temp_db.get_bank_transaction(txn.id).account_code is None


def test_failure_does_not_stop_batch(orchestrator, temp_db, company, directory, record, monkeypatch):
    """Test that a failed posting is recorded and later transactions still run."""
    cid = company.id
    bad = record(cid, "MONTHLY ACCOUNT FEE", debit="65.00")
    directory.get_or_create(cid, "1100", "Bank - Current Account")
    good = record(cid, "MONTHLY ACCOUNT FEE", debit="30.00")

    # Drop the bank account for the first transaction only
    calls = []
    original = orchestrator.poster.directory.resolve

    def resolve(company_id, code):
        calls.append(code)
        if code == "1100" and calls.count("1100") == 1:
            return None
        return original(company_id, code)

    monkeypatch.setattr(orchestrator.poster.directory, "resolve", resolve)
    result = orchestrator.process_batch([bad, good], cid)

    assert result.processed_count == 2
    assert result.failed_count == 1
    assert result.posted_count == 1
    assert "Bank account (1100) not found" in result.errors[0]
    assert temp_db.count_lines_for_transaction(bad.id) == 0
    assert temp_db.count_lines_for_transaction(good.id) == 2


def test_exception_is_isolated(orchestrator, temp_db, company_with_chart, record, monkeypatch):
    cid = company_with_chart.id
    first = record(cid, "MONTHLY ACCOUNT FEE", debit="65.00")
    second = record(cid, "OFFICE RENT MARCH", debit="8000.00")

    original = orchestrator.classifier.classify

    def classify(transaction, rules=None):
        if transaction.id == first.id:
            raise RuntimeError("boom")
        return original(transaction, rules=rules)

    monkeypatch.setattr(orchestrator.classifier, "classify", classify)
    result = orchestrator.process_batch([first, second], cid)

    assert result.failed_count == 1
    assert result.posted_count == 1
    assert result.errors == [f"Transaction {first.id}: boom"]


def test_heuristic_classification_is_written_back(orchestrator, temp_db, company_with_chart, record):
    cid = company_with_chart.id
    txn = record(cid, "SALARY J SMITHERS MAR 2024", debit="15000.00")

    result = orchestrator.process_batch([txn], cid)

    assert result.posted_count == 1
    stored = temp_db.get_bank_transaction(txn.id)
    assert stored.account_code.startswith("8100-")
    assert stored.account_name == "Employee Costs - Smithers"
    assert temp_db.get_account_by_code(cid, stored.account_code) is not None


def test_rule_classification_is_not_written_back(orchestrator, rule_store, temp_db, company_with_chart, record):
    cid = company_with_chart.id
    rule_store.add_rule(cid, "FEE", "9600")
    txn = record(cid, "MONTHLY ACCOUNT FEE", debit="65.00")

    orchestrator.process_batch([txn], cid)

    assert temp_db.get_bank_transaction(txn.id).account_code is None
    assert temp_db.count_lines_for_transaction(txn.id) == 2


def test_stored_classification_is_used(orchestrator, transaction_service, temp_db, company_with_chart, record):
    """Test that a manually classified transaction posts to its stored account."""
    cid = company_with_chart.id
    txn = record(cid, "RANDOM UNSEEN VENDOR XYZ", debit="10.00")
    transaction_service.classify_manually(txn.id, "9000")

    result = orchestrator.process_company(cid)

    assert result.posted_count == 1
    entry = temp_db.get_journal_entries_for_transaction(txn.id)[0]
    assert temp_db.get_account(entry.lines[0].account_id).code == "9000"
    assert temp_db.get_bank_transaction(txn.id).account_code == "9000"


def test_process_company_only_takes_unposted(orchestrator, company_with_chart, record):
    cid = company_with_chart.id
    record(cid, "MONTHLY ACCOUNT FEE", debit="65.00")
    first = orchestrator.process_company(cid)
    assert first.posted_count == 1

    record(cid, "OFFICE RENT MARCH", debit="8000.00")
    second = orchestrator.process_company(cid)
    assert second.processed_count == 1
    assert second.posted_count == 1


def test_regenerate_replaces_entries(orchestrator, temp_db, company_with_chart, record):
    cid = company_with_chart.id
    txn = record(cid, "MONTHLY ACCOUNT FEE", debit="65.00")
    orchestrator.process_company(cid)
    old_entry = temp_db.get_journal_entries_for_transaction(txn.id)[0]

    result = orchestrator.regenerate(cid)

    assert result.posted_count == 1
    assert result.already_posted_count == 0
    new_entries = temp_db.get_journal_entries_for_transaction(txn.id)
    assert len(new_entries) == 1
    assert new_entries[0].id != old_entry.id


def test_should_stop_ends_batch(temp_db, company_with_chart, record):
    cid = company_with_chart.id
    txns = [record(cid, "MONTHLY ACCOUNT FEE", debit="1.00", reference=f"R{i}") for i in range(3)]
    calls = []

    def should_stop():
        calls.append(1)
        return len(calls) > 2

    orchestrator = create_orchestrator(temp_db, should_stop=should_stop)
    result = orchestrator.process_batch(txns, cid)

    assert result.processed_count == 2
    assert result.posted_count == 2


def test_company_mismatch_is_failure(orchestrator, company_service, company_with_chart, record):
    other = company_service.create_company("Other Co")
    txn = record(company_with_chart.id, "MONTHLY ACCOUNT FEE", debit="65.00")

    result = orchestrator.process_batch([txn], other)

    assert result.failed_count == 1
    assert "belongs to company" in result.errors[0]


def test_validate_transactions_messages(orchestrator):
    txns = [
        BankTransaction(
            id=1,
            company_id=1,
            transaction_date=date(2024, 3, 1),
            details="FEE",
            debit_amount=Decimal("1.00"),
            reference="R1",
        ),
        BankTransaction(
            id=2,
            company_id=1,
            transaction_date=None,
            details=" ",
            debit_amount=Decimal("1.00"),
            credit_amount=Decimal("2.00"),
        ),
        BankTransaction(id=3, company_id=1, transaction_date=date(2024, 3, 1), details="X", reference="R3"),
    ]

    errors = orchestrator.validate_transactions(txns)

    assert errors == [
        "Transaction 1: Missing reference number",
        "Transaction 1: Missing transaction details",
        "Transaction 1: Both debit and credit amounts are set",
        "Transaction 1: Missing transaction date",
        "Transaction 2: Missing transaction amount",
    ]


def test_validate_negative_amount(orchestrator):
    txn = BankTransaction(
        id=1,
        company_id=1,
        transaction_date=date(2024, 3, 1),
        details="FEE",
        debit_amount=Decimal("-1.00"),
        reference="R1",
    )
    assert orchestrator.validate_transactions([txn]) == ["Transaction 0: Negative debit amount"]


def test_process_batch_validated_rejects_before_writing(orchestrator, temp_db, company_with_chart, record):
    cid = company_with_chart.id
    good = record(cid, "MONTHLY ACCOUNT FEE", debit="65.00")
    missing_ref = record(cid, "OFFICE RENT MARCH", debit="8000.00", reference=None)

    with pytest.raises(ValidationError, match="Transaction 1: Missing reference number"):
        orchestrator.process_batch_validated([good, missing_ref], cid)
    assert temp_db.list_journal_entries(cid) == []


def test_process_batch_validated_runs_clean_batch(orchestrator, company_with_chart, record):
    cid = company_with_chart.id
    txn = record(cid, "MONTHLY ACCOUNT FEE", debit="65.00")
    assert orchestrator.process_batch_validated([txn], cid).posted_count == 1


def test_create_orchestrator_defaults(temp_db):
    orchestrator = create_orchestrator(temp_db)
    assert orchestrator.poster.settings.bank_account_code == "1100"
    assert orchestrator.classifier.directory is orchestrator.poster.directory
    assert orchestrator.classifier.rule_store is orchestrator.rule_store


def test_each_employee_gets_own_sub_account(orchestrator, temp_db, company_with_chart, record):
    """Test that overlapping employee names are posted to separate ledger accounts."""
    cid = company_with_chart.id
    txns = [
        record(cid, "SALARY JOHN SMITH", debit="15000.00", reference="R1"),
        record(cid, "SALARY JOHN", debit="9000.00", reference="R2"),
        record(cid, "SALARY COSTS", debit="100.00", reference="R3"),
        record(cid, "SALARY JOHN SMITH", debit="15000.00", reference="R4"),
    ]

    result = orchestrator.process_batch(txns, cid)

    assert result.posted_count == 4
    codes = [temp_db.get_bank_transaction(t.id).account_code for t in txns]
    assert len(set(codes[:3])) == 3
    assert codes[3] == codes[0]
    assert temp_db.get_account_by_code(cid, codes[1]).name == "Employee Costs - John"


@pytest.mark.parametrize(
    "debit,credit,problem",
    [
        ("0.00", None, "Missing transaction amount"),
        (None, "0.00", "Missing transaction amount"),
        ("0.00", "5.00", "Both debit and credit amounts are set"),
        ("5.00", "0.00", "Both debit and credit amounts are set"),
    ],
)
def test_validate_requires_exactly_one_nonzero_side(orchestrator, debit, credit, problem):
    txn = BankTransaction(
        id=1,
        company_id=1,
        transaction_date=date(2024, 3, 1),
        details="FEE",
        debit_amount=Decimal(debit) if debit is not None else None,
        credit_amount=Decimal(credit) if credit is not None else None,
        reference="R1",
    )
    assert orchestrator.validate_transactions([txn]) == [f"Transaction 0: {problem}"]
