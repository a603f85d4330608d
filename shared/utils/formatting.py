# shared/utils/formatting.py
from decimal import Decimal, InvalidOperation

from shared.constants import CURRENCY_SYMBOL


def format_money(amount, symbol: str = CURRENCY_SYMBOL) -> str:
    """Format an amount as 'RM 1,234.50'."""
    try:
        value = Decimal(str(amount or 0))
    except (InvalidOperation, ValueError):
        value = Decimal('0')
    return f"{symbol} {value:,.2f}"


def normalize_phone(country_code: str, phone: str) -> str:
    """
    Join a country code and a local number into digits only.

    '+60', '012-345 6789' -> '600123456789'
    """
    code_digits = ''.join(ch for ch in (country_code or '') if ch.isdigit())
    phone_digits = ''.join(ch for ch in (phone or '') if ch.isdigit())
    return f"{code_digits}{phone_digits}"


def digits_only(value: str) -> str:
    return ''.join(ch for ch in (value or '') if ch.isdigit())
