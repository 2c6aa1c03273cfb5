"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

_REAIS_THOUSANDS_RE = re.compile(r"^-?\d{1,3}(\.\d{3})+$")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "450"
    - "450.50"
    - "R$ 450,50" (comma as decimal separator)
    - "$1,234.56"
    - "R$ 1.234,56"
    - "R$ 1.234" (dot groups of three digits are thousands in reais)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    is_reais = "R$" in amount_str

    # Remove currency symbols and whitespace
    cleaned = re.sub(r"(R\$|[$€£])", "", amount_str).strip()
    cleaned = cleaned.replace(" ", "")

    if is_reais and _REAIS_THOUSANDS_RE.match(cleaned):
        cleaned = cleaned.replace(".", "")

    # Decide which separator is the decimal one: the last of "," or "."
    last_comma = cleaned.rfind(",")
    last_dot = cleaned.rfind(".")
    if last_comma > last_dot:
        cleaned = cleaned.replace(".", "").replace(",", ".")
    else:
        cleaned = cleaned.replace(",", "")

    try:
        return Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
