"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENTS = Decimal("0.01")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a statement amount into a Decimal rounded to cents.

    Accepts "450", "450.00", "R450.00", "R 1 234,50"-style thousands
    separators written as spaces or commas, and "(12.00)" for negatives.

    Raises:
        ValueError: If the string is not a number
    """
    if amount_str is None or not str(amount_str).strip():
        raise ValueError("Empty amount string")

    text = str(amount_str).strip()
    negative = text.startswith("(") and text.endswith(")")
    if negative:
        text = text[1:-1]

    text = re.sub(r"^[Rr$€£]\s*", "", text.strip())
    text = text.replace(" ", "").replace("\u00a0", "")
    # "1,234.56" -> thousands separator; "1234,56" -> decimal comma
    if "," in text and "." not in text and re.fullmatch(r"-?\d+,\d{1,2}", text):
        text = text.replace(",", ".")
    else:
        text = text.replace(",", "")

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    amount = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    return -amount if negative else amount


def parse_positive_amount(amount_str: str) -> Decimal:
    """Parse an amount that must be greater than zero."""
    amount = parse_amount(amount_str)
    if amount <= 0:
        raise ValueError(f"Amount must be positive, got {amount}")
    return amount
