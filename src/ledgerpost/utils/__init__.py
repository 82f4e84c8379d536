"""Utility functions for ledgerpost."""

from ledgerpost.utils.date_parser import parse_date
from ledgerpost.utils.amount_parser import parse_amount, parse_positive_amount
from ledgerpost.utils.company_resolver import resolve_company

__all__ = ["parse_date", "parse_amount", "parse_positive_amount", "resolve_company"]
