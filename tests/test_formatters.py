"""
Test suite for amount formatting helpers.
"""

import os
import sys
from decimal import Decimal

import pytest

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from formatters import (  # noqa: E402
    format_amount_for_display, format_currency, format_percentage,
    normalize_amount, parse_amount_from_display,
)


class TestDisplayAmounts:
    """Test dot-grouped display amounts."""

    def test_parse_strips_separators(self):
        assert parse_amount_from_display('1.234.567') == '1234567'

    def test_parse_empty_is_zero(self):
        assert parse_amount_from_display('') == '0'
        assert parse_amount_from_display(None) == '0'

    def test_format_groups_thousands(self):
        assert format_amount_for_display('1234567') == '1.234.567'

    def test_format_zero_is_blank(self):
        assert format_amount_for_display('0') == ''

    def test_format_stored_decimal(self):
        """A stored Numeric value redisplays with the same grouping."""
        assert format_amount_for_display(Decimal('1234567.00')) == '1.234.567'

    def test_currency(self):
        assert format_currency(Decimal('2500000.4')) == '2.500.000 VNĐ'
        assert format_currency(-1500, currency='đ') == '-1.500 đ'

    def test_percentage(self):
        assert format_percentage(Decimal('12.345')) == '12.3%'


class TestNormalizeAmount:
    """Test parsing of submitted amounts."""

    @pytest.mark.parametrize("raw,expected", [
        ('1.234.567', Decimal('1234567')),
        ('1234567', Decimal('1234567')),
        ('1500.50', Decimal('1500.50')),
        (2500, Decimal('2500')),
        (' 12.000 ', Decimal('12000')),
    ])
    def test_valid_amounts(self, raw, expected):
        assert normalize_amount(raw) == expected

    @pytest.mark.parametrize("raw", ['abc', 'NaN', 'Infinity', '1,2,3'])
    def test_invalid_amounts(self, raw):
        with pytest.raises(ValueError):
            normalize_amount(raw)
