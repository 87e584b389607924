"""Amount parsing and formatting utilities."""

from decimal import Decimal
import math
import re
from typing import Any

_NON_NUMERIC = re.compile(r"[^\d.\-]")
_LEADING_NUMBER = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")
_TURKISH_GROUPED = re.compile(r"-?\d{1,3}(\.\d{3})+(,\d+)?|-?\d+,\d+")


def parse_import_amount(value: Any) -> float:
    """Parse a spreadsheet amount cell into a float.

    Numeric cells are used directly. Text cells are stripped of everything
    except digits, "." and "-" and the longest leading number is taken, so
    "₺1500.50" becomes 1500.5.

    Raises:
        ValueError: If no number can be read from the cell
    """
    if isinstance(value, bool):
        raise ValueError(f"Could not parse amount '{value}'")
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    if value is None:
        raise ValueError("Empty amount")

    cleaned = _NON_NUMERIC.sub("", str(value))
    match = _LEADING_NUMBER.match(cleaned)
    if match is None:
        raise ValueError(f"Could not parse amount '{value}'")
    return float(match.group(0))


def parse_amount(amount_str: str) -> float:
    """Parse an amount typed on the command line.

    Handles various formats:
    - "1234.56"
    - "1,234.56"
    - "1.234,56" (Turkish grouping)
    - "₺1.234,56", "1.234,56 TL"

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()
    amount_str = re.sub(r"(?i)(₺|tl|try)", "", amount_str).strip()
    amount_str = amount_str.replace(" ", "")

    if _TURKISH_GROUPED.fullmatch(amount_str):
        amount_str = amount_str.replace(".", "").replace(",", ".")
    else:
        amount_str = amount_str.replace(",", "")

    try:
        amount = float(amount_str)
    except ValueError as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not math.isfinite(amount):
        raise ValueError(f"Could not parse amount '{amount_str}': not a finite number")
    return amount


def is_valid_amount(amount: float) -> bool:
    """Return True for finite, strictly positive amounts."""
    return math.isfinite(amount) and amount > 0


def amount_to_text(amount: float) -> str:
    """Render an amount the way a JavaScript number prints.

    100.0 -> "100", 0.00001 -> "0.00001", 1e-7 -> "1e-7". Plain notation is
    used for decimal exponents from -6 to 20, as Number#toString does.
    """
    amount = float(amount)
    if math.isnan(amount):
        return "NaN"
    if math.isinf(amount):
        return "Infinity" if amount > 0 else "-Infinity"
    if amount == 0:
        return "0"

    # repr gives the shortest digits that round-trip, like JavaScript
    sign, digits, exponent = Decimal(repr(amount)).normalize().as_tuple()
    digits = "".join(str(d) for d in digits)
    point = len(digits) + exponent
    prefix = "-" if sign else ""

    if len(digits) <= point <= 21:
        return prefix + digits + "0" * (point - len(digits))
    if 0 < point <= 21:
        return prefix + digits[:point] + "." + digits[point:]
    if -6 < point <= 0:
        return prefix + "0." + "0" * -point + digits

    mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
    return f"{prefix}{mantissa}e{point - 1:+d}"


def format_amount(amount: float) -> str:
    """Format an amount with Turkish grouping: 1234.5 -> "1.234,50"."""
    text = f"{abs(amount):,.2f}"
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"-{text}" if amount < 0 else text


def format_lira(amount: float) -> str:
    """Format an amount as Turkish lira currency: 1234.5 -> "₺1.234,50"."""
    text = format_amount(abs(amount))
    return f"-₺{text}" if amount < 0 else f"₺{text}"
