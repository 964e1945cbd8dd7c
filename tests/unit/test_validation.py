"""Unit tests for input validation helpers"""

from decimal import Decimal

from underwriter_console.utils.validation import (
    is_blank,
    is_valid_account_number,
    is_valid_bvn,
    is_valid_email,
    parse_positive_amount,
)


def test_email_format():
    """Test email format check"""
    assert is_valid_email("ada@example.com")
    assert not is_valid_email("ada@example")
    assert not is_valid_email("ada example.com")
    assert not is_valid_email("")


def test_bvn_is_eleven_digits():
    """Test bvn is eleven digits"""
    assert is_valid_bvn("22212345678")
    assert not is_valid_bvn("2221234567")
    assert not is_valid_bvn("2221234567a")


def test_account_number_is_ten_digits():
    """Test account number is ten digits"""
    assert is_valid_account_number("0123456789")
    assert not is_valid_account_number("012345678")


def test_is_blank():
    """Test whitespace-only input counts as blank"""
    assert is_blank(None)
    assert is_blank("   ")
    assert not is_blank("x")


def test_parse_positive_amount():
    """Test money parsing strips separators and refuses non-positive amounts"""
    assert parse_positive_amount(" 1,250.75 ") == Decimal("1250.75")
    assert parse_positive_amount("0") is None
    assert parse_positive_amount("-5") is None
    assert parse_positive_amount("five") is None
    assert parse_positive_amount(None) is None
