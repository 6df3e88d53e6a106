"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

CENTS = Decimal("0.01")


def to_cents(amount: Decimal) -> Decimal:
    """Quantize an amount to two decimal places."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_amount(amount_str: str) -> Decimal:
    """Parse a Brazilian real amount string into a Decimal.

    Handles various formats:
    - "115.00"
    - "115,00"
    - "R$ 115,00"
    - "1.234,56" (dot as thousands separator, comma as decimal separator)
    - "1,234.56"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount rounded to cents

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove currency symbol and whitespace
    cleaned = re.sub(r"R\$", "", amount_str.strip(), flags=re.IGNORECASE).strip()

    if "," in cleaned and "." in cleaned:
        # Whichever separator comes last is the decimal separator
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif "," in cleaned:
        cleaned = cleaned.replace(",", ".")

    try:
        return to_cents(Decimal(cleaned))
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
