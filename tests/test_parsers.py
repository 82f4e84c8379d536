"""Tests for date and amount parsing."""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from dateutil.relativedelta import relativedelta

from ledgerpost.utils.amount_parser import parse_amount, parse_positive_amount
from ledgerpost.utils.date_parser import parse_date


def test_parse_absolute_date():
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_day_first_slash_date():
    assert parse_date("05/03/2024") == date(2024, 3, 5)


def test_parse_statement_style_date():
    assert parse_date("15 Mar 2024") == date(2024, 3, 15)


def test_parse_relative_dates():
    today = date.today()
    assert parse_date("today") == today
    assert parse_date("Yesterday") == today - timedelta(days=1)
    assert parse_date("this month") == today.replace(day=1)
    assert parse_date("last month") == (today - relativedelta(months=1)).replace(day=1)


def test_parse_invalid_date():
    with pytest.raises(ValueError):
        parse_date("not a date")


@pytest.mark.parametrize(
    "text,expected",
    [
        ("450", Decimal("450.00")),
        ("450.00", Decimal("450.00")),
        ("R450.00", Decimal("450.00")),
        ("R 1 234,50", Decimal("1234.50")),
        ("1,234.56", Decimal("1234.56")),
        ("(12.00)", Decimal("-12.00")),
        ("0.125", Decimal("0.13")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "  ", "abc"])
def test_parse_amount_invalid(text):
    with pytest.raises(ValueError):
        parse_amount(text)


def test_parse_positive_amount():
    assert parse_positive_amount("10") == Decimal("10.00")
    with pytest.raises(ValueError):
        parse_positive_amount("0")
    with pytest.raises(ValueError):
        parse_positive_amount("(5.00)")
