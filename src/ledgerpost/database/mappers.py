"""Mapper functions to convert SQLAlchemy models into domain entities.

Engine components never see ORM rows; everything leaving the database layer
goes through one of these functions.
"""

from ledgerpost.domain import entities as domain
from ledgerpost.database.models import (
    Account as ORMAccount,
    BankTransaction as ORMBankTransaction,
    Company as ORMCompany,
    JournalEntry as ORMJournalEntry,
    JournalEntryLine as ORMJournalEntryLine,
    TransactionMappingRule as ORMRule,
)


def company_to_domain(orm_company: ORMCompany) -> domain.Company:
    """Convert SQLAlchemy Company model to domain Company entity."""
    return domain.Company(
        id=orm_company.id,
        name=orm_company.name,
        created_at=orm_company.created_at,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    parent = orm_account.parent
    return domain.Account(
        id=orm_account.id,
        company_id=orm_account.company_id,
        code=orm_account.account_code,
        name=orm_account.account_name,
        category=domain.AccountCategory(orm_account.category.name),
        parent_id=orm_account.parent_account_id,
        parent_code=parent.account_code if parent is not None else None,
        is_active=orm_account.is_active,
    )


def rule_to_domain(orm_rule: ORMRule) -> domain.ClassificationRule:
    """Convert SQLAlchemy TransactionMappingRule model to domain ClassificationRule entity."""
    return domain.ClassificationRule(
        id=orm_rule.id,
        company_id=orm_rule.company_id,
        pattern=orm_rule.pattern_text,
        match_type=domain.MatchType(orm_rule.match_type),
        account_id=orm_rule.account_id,
        account_code=orm_rule.account.account_code,
        account_name=orm_rule.account.account_name,
        priority=orm_rule.priority,
        is_active=orm_rule.is_active,
        created_at=orm_rule.created_at,
    )


def bank_transaction_to_domain(orm_txn: ORMBankTransaction) -> domain.BankTransaction:
    """Convert SQLAlchemy BankTransaction model to domain BankTransaction entity."""
    return domain.BankTransaction(
        id=orm_txn.id,
        company_id=orm_txn.company_id,
        transaction_date=orm_txn.transaction_date,
        details=orm_txn.details,
        debit_amount=orm_txn.debit_amount,
        credit_amount=orm_txn.credit_amount,
        balance=orm_txn.balance,
        reference=orm_txn.reference,
        source_file=orm_txn.source_file,
        fiscal_period_id=orm_txn.fiscal_period_id,
        account_code=orm_txn.account_code,
        account_name=orm_txn.account_name,
    )


def journal_line_to_domain(orm_line: ORMJournalEntryLine) -> domain.JournalEntryLine:
    """Convert SQLAlchemy JournalEntryLine model to domain JournalEntryLine entity."""
    return domain.JournalEntryLine(
        id=orm_line.id,
        journal_entry_id=orm_line.journal_entry_id,
        account_id=orm_line.account_id,
        debit_amount=orm_line.debit_amount,
        credit_amount=orm_line.credit_amount,
        description=orm_line.description,
        reference=orm_line.reference,
        source_transaction_id=orm_line.source_transaction_id,
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model, with its lines, to a domain JournalEntry."""
    return domain.JournalEntry(
        id=orm_entry.id,
        reference=orm_entry.reference,
        entry_date=orm_entry.entry_date,
        description=orm_entry.description,
        company_id=orm_entry.company_id,
        fiscal_period_id=orm_entry.fiscal_period_id,
        created_by=orm_entry.created_by,
        created_at=orm_entry.created_at,
        lines=tuple(journal_line_to_domain(line) for line in orm_entry.lines),
    )
