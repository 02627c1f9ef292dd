"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

CENTS = Decimal("0.01")
# Numeric(15, 2) columns hold 13 integer digits
MAX_AMOUNT = Decimal("9999999999999.99")


def parse_amount(amount: str | Decimal | int) -> Decimal:
    """Parse a decimal-safe amount into a Decimal.

    Handles various formats:
    - "150000"
    - "150000.50"
    - "Rp 150000" or "$150000" (currency prefix stripped)
    - "1,234.56" (thousands separators must be commas)
    - "-123.45" / "(123.45)" (negative)

    Floats are rejected so binary rounding never reaches the ledger.

    Args:
        amount: Amount string, Decimal or int

    Returns:
        Decimal amount

    Raises:
        ValueError: If the amount cannot be parsed
    """
    if isinstance(amount, bool) or isinstance(amount, float):
        raise ValueError(f"Amounts must be decimal strings, got {type(amount).__name__}")
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, int):
        return Decimal(amount)

    if not amount or not amount.strip():
        raise ValueError("Empty amount string")

    amount_str = amount.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = re.sub(r"[$€£¥]|^Rp\.?", "", amount_str).replace(",", "").strip()

    try:
        value = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not value.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -value if is_negative else value


def quantize_amount(amount: Decimal) -> Decimal:
    """Round an amount to cents.

    Raises:
        ValueError: If the amount is larger than the ledger can store
    """
    if abs(amount) > MAX_AMOUNT:
        raise ValueError(f"Amount {amount} exceeds the maximum of {MAX_AMOUNT:,}")
    try:
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValueError(f"Could not round amount {amount}: {e}")


def format_amount(amount: Decimal) -> str:
    """Render an amount for terminal output, e.g. '1,234,500.00'."""
    return f"{amount.quantize(CENTS, rounding=ROUND_HALF_UP):,.2f}"
