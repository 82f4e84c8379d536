"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class ResolutionError(DomainError):
    """A required ledger account could not be resolved for a company."""


class PersistenceError(DomainError):
    """The store rejected a write or could not be reached."""


def company_not_found(company: int | str) -> str:
    """Return message for missing company."""
    if isinstance(company, int):
        return f"Company {company} not found"
    return f"Company '{company}' not found"


def account_code_not_found(account_code: str, company_id: int) -> str:
    """Return message for missing account code."""
    return f"Account '{account_code}' not found for company {company_id}"


def bank_account_not_found(account_code: str, company_id: int) -> str:
    """Return message when the bank/cash account is missing."""
    return (
        f"Bank account ({account_code}) not found for company {company_id}. "
        "Initialize the chart of accounts or create the account first."
    )


def duplicate_account_code(account_code: str, company_id: int) -> str:
    """Return message for duplicate account code."""
    return f"Account '{account_code}' already exists for company {company_id}"


def rule_not_found(rule_id: int) -> str:
    """Return message for missing classification rule."""
    return f"Classification rule {rule_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing bank transaction."""
    return f"Bank transaction {transaction_id} not found"


def unbalanced_entry(total_debit, total_credit) -> str:
    """Return message for a journal entry whose sides do not net to zero."""
    return f"Journal entry does not balance: debits {total_debit} != credits {total_credit}"


def posting_failed(transaction_id: Optional[int], reason: str) -> str:
    """Return message for a failed posting."""
    return f"Transaction {transaction_id}: posting failed: {reason}"
