"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports statement formats ("2024-03-15", "15/03/2024", "15 Mar 2024")
    and a few relative words: "today", "yesterday", "this month" (first of
    the current month), "last month" (first of the previous month).

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = date.today()

    relative = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
    }
    if text in relative:
        return relative[text]

    # Slash dates are day first (15/03/2024)
    dayfirst = "/" in text and not text[:4].isdigit()
    try:
        return date_parser.parse(text, dayfirst=dayfirst).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
