"""
Money Codec Module

Converts user-supplied decimal amount strings into integer minor currency
units (cents) and back. Balances never pass through float or Decimal; the
ledger only ever sees plain ints.
"""

from enum import Enum
import re

from .exceptions import InvalidAmount

# Largest magnitude a balance or amount may reach (signed 64-bit range)
MAX_MINOR_UNITS = 2 ** 63 - 1
MINOR_UNITS_PER_MAJOR = 100

_MAX_MAJOR_DIGITS = len(str(MAX_MINOR_UNITS // MINOR_UNITS_PER_MAJOR))
_AMOUNT_BODY = re.compile(r'([0-9]*)(?:\.([0-9]*))?')


class Currency(Enum):
    """ISO 4217 codes for the two-decimal currencies the simulator can display"""
    USD = ("USD", "$")   # US Dollar
    EUR = ("EUR", "€")   # Euro
    GBP = ("GBP", "£")   # British Pound
    CAD = ("CAD", "C$")  # Canadian Dollar
    CHF = ("CHF", "Fr.")  # Swiss Franc

    def __init__(self, code: str, symbol: str):
        self.code = code
        self.symbol = symbol
        self.precision = 2

    @classmethod
    def from_code(cls, code: str) -> 'Currency':
        """Look up a currency by its ISO code (case-insensitive)"""
        for currency in cls:
            if currency.code == code.strip().upper():
                return currency
        raise ValueError(f"Unsupported currency code: {code!r}")


def parse_amount(text: str, currency: Currency = Currency.USD) -> int:
    """
    Parse a decimal amount string into minor units.

    Accepts an optional leading minus sign, an optional currency symbol, an
    integer part and an optional fractional part. Whitespace anywhere in the
    input is ignored. One fractional digit means tenths; digits past the
    second are truncated, not rounded.

    Args:
        text: Amount as typed by the user, e.g. "12.34", "-0.5", "$1.00"
        currency: Currency whose symbol may prefix the number

    Returns:
        Signed amount in minor units

    Raises:
        InvalidAmount: If the input is empty, not numeric, or out of range
    """
    if not isinstance(text, str):
        raise InvalidAmount("Amount must be provided as a string")

    clean = "".join(text.split())
    if not clean:
        raise InvalidAmount("Empty amount")

    negative = clean.startswith("-")
    if negative:
        clean = clean[1:]
    if clean.startswith(currency.symbol):
        clean = clean[len(currency.symbol):]

    match = _AMOUNT_BODY.fullmatch(clean)
    if not match:
        raise InvalidAmount(f"Not a number: {text.strip()!r}")

    whole, fraction = match.group(1), match.group(2) or ""
    if not whole and not fraction:
        raise InvalidAmount(f"Not a number: {text.strip()!r}")

    whole = whole.lstrip("0")
    if len(whole) > _MAX_MAJOR_DIGITS:
        raise InvalidAmount("Amount is too large")

    cents = fraction[:2].ljust(2, "0")
    value = int(whole or "0") * MINOR_UNITS_PER_MAJOR + int(cents)
    if value > MAX_MINOR_UNITS:
        raise InvalidAmount("Amount is too large")

    return -value if negative else value


def format_amount(minor_units: int, currency: Currency = Currency.USD) -> str:
    """Format minor units for display as [-]<symbol>D.DD"""
    if isinstance(minor_units, bool) or not isinstance(minor_units, int):
        raise TypeError("Amount must be an integer number of minor units")

    sign = "-" if minor_units < 0 else ""
    major, minor = divmod(abs(minor_units), MINOR_UNITS_PER_MAJOR)
    return f"{sign}{currency.symbol}{major}.{minor:02d}"
