"""
Test suite for currency module

Tests amount parsing into integer minor units and display formatting.
Balances must never pass through float.
"""

import pytest

from bank_simulator.currency import (
    Currency, MAX_MINOR_UNITS, parse_amount, format_amount
)
from bank_simulator.exceptions import InvalidAmount


class TestParseAmount:
    """Test decimal string parsing"""
    
    def test_whole_and_fractional_amounts(self):
        """Test the common input shapes"""
        assert parse_amount("123") == 12300
        assert parse_amount("123.45") == 12345
        assert parse_amount("0.99") == 99
        assert parse_amount("0") == 0
    
    def test_single_fraction_digit_is_tenths(self):
        """Test that one fractional digit is scaled to cents"""
        assert parse_amount("1.5") == 150
        assert parse_amount("0.1") == 10
    
    def test_extra_fraction_digits_truncated(self):
        """Test that digits past the cents are dropped, not rounded"""
        assert parse_amount("1.239") == parse_amount("1.23") == 123
        assert parse_amount("0.999") == 99
        assert parse_amount("-1.239") == -123
    
    def test_sign_applies_to_whole_value(self):
        """Test negative amounts below one unit keep their sign"""
        assert parse_amount("-0.50") == -50
        assert parse_amount("-0.05") == -5
        assert parse_amount("-12.34") == -1234
    
    def test_whitespace_anywhere_is_ignored(self):
        """Test whitespace stripping inside and around the number"""
        assert parse_amount("  42  ") == 4200
        assert parse_amount(" 1 2 . 3 4 ") == 1234
        assert parse_amount("\t7.5\n") == 750
    
    def test_missing_whole_or_fraction_part(self):
        """Test amounts with only one side of the decimal point"""
        assert parse_amount(".5") == 50
        assert parse_amount("5.") == 500
    
    def test_currency_symbol_accepted(self):
        """Test that the currency symbol may prefix the number"""
        assert parse_amount("$12.34") == 1234
        assert parse_amount("-$0.05") == -5
        assert parse_amount("€3.00", Currency.EUR) == 300
    
    @pytest.mark.parametrize("text", [
        "", "   ", "abc", "1.2.3", "1,00", "--1", "+5", "1e3",
        "-", ".", "$", "1.2x", "12abc", "$-5",
    ])
    def test_invalid_input_rejected(self, text):
        """Test that malformed input raises InvalidAmount"""
        with pytest.raises(InvalidAmount):
            parse_amount(text)
    
    def test_non_string_rejected(self):
        """Test that only strings are parsed"""
        with pytest.raises(InvalidAmount, match="string"):
            parse_amount(12.5)
    
    def test_range_limits(self):
        """Test the largest representable amount and just beyond it"""
        assert parse_amount("92233720368547758.07") == MAX_MINOR_UNITS
        assert parse_amount("-92233720368547758.07") == -MAX_MINOR_UNITS
        
        with pytest.raises(InvalidAmount, match="too large"):
            parse_amount("92233720368547758.08")
        with pytest.raises(InvalidAmount, match="too large"):
            parse_amount("9" * 40)
    
    def test_leading_zeros_do_not_count_toward_range(self):
        """Test that zero padding is not mistaken for overflow"""
        assert parse_amount("0" * 30 + "1.00") == 100
    
    def test_invalid_amount_is_value_error(self):
        """Test InvalidAmount can be caught as ValueError"""
        with pytest.raises(ValueError):
            parse_amount("nope")


class TestFormatAmount:
    """Test minor unit formatting"""
    
    def test_formatting(self):
        """Test canonical display strings"""
        assert format_amount(0) == "$0.00"
        assert format_amount(5) == "$0.05"
        assert format_amount(100) == "$1.00"
        assert format_amount(12345) == "$123.45"
        assert format_amount(-50) == "-$0.50"
        assert format_amount(MAX_MINOR_UNITS) == "$92233720368547758.07"
    
    def test_other_currency_symbol(self):
        """Test that the currency's symbol is used"""
        assert format_amount(100, Currency.EUR) == "€1.00"
        assert format_amount(-1999, Currency.GBP) == "-£19.99"
    
    def test_rejects_non_integers(self):
        """Test that floats and bools are refused"""
        with pytest.raises(TypeError):
            format_amount(1.5)
        with pytest.raises(TypeError):
            format_amount(True)
    
    def test_round_trip(self):
        """Test parse_amount inverts format_amount across the range"""
        values = [0, 1, 9, 10, 99, 100, 101, 12345, 10 ** 12 + 7,
                  MAX_MINOR_UNITS, MAX_MINOR_UNITS - 1]
        for value in values + [-v for v in values]:
            assert parse_amount(format_amount(value)) == value
        
        for currency in Currency:
            assert parse_amount(format_amount(-4321, currency), currency) == -4321


class TestCurrency:
    """Test Currency lookup"""
    
    def test_from_code(self):
        """Test case-insensitive lookup by ISO code"""
        assert Currency.from_code("usd") == Currency.USD
        assert Currency.from_code(" EUR ") == Currency.EUR
        assert Currency.USD.precision == 2
    
    def test_unknown_code(self):
        """Test unknown codes are rejected"""
        with pytest.raises(ValueError, match="Unsupported currency"):
            Currency.from_code("JPY")
