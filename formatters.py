"""
Display helpers for money and percentages.

Amounts are shown with dots as thousands separators ("1.234.567") and
submitted back as plain digit strings ("1234567").
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

_NON_DIGITS = re.compile(r'\D')
_GROUPED = re.compile(r'^-?\d{1,3}(\.\d{3})+$')


def parse_amount_from_display(display_amount):
    """Strip separators and symbols from a display amount, '0' when empty."""
    digits = _NON_DIGITS.sub('', display_amount or '')
    return digits.lstrip('0') or '0'


def format_amount_for_display(amount):
    """Render an amount for an input field, '' for zero."""
    if not isinstance(amount, str):
        amount = str(Decimal(str(amount)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))
    digits = parse_amount_from_display(amount)
    if digits == '0':
        return ''
    return _group(digits)


def format_currency(amount, currency="VNĐ"):
    rounded = Decimal(str(amount)).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    sign = '-' if rounded < 0 else ''
    return f"{sign}{_group(str(abs(rounded)))} {currency}"


def format_percentage(value):
    return f"{Decimal(str(value)).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)}%"


def _group(digits):
    return f"{int(digits):,}".replace(',', '.')


def normalize_amount(value):
    """
    Turn a submitted amount into a ``Decimal``.

    Dot-grouped strings ("1.234.567") are read as whole amounts; anything
    else must be a plain decimal ("1234567", "1500.50"). Raises ``ValueError``
    for input that is not a finite number.
    """
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    else:
        text = str(value).strip().replace(' ', '')
        if _GROUPED.match(text):
            text = ('-' if text.startswith('-') else '') + parse_amount_from_display(text)
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise ValueError(f"Not a valid amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Not a valid amount: {value!r}")
    return amount
